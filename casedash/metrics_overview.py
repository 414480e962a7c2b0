from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence, Tuple

from casedash.charts import AGE_MOUNT, GENDER_MOUNT, TREND_MOUNT, age_chart, gender_chart, to_vega_spec, trend_chart
from casedash.filters import DashboardFilters
from casedash.records import AGE, CONFIRMED, COUNTER_FIELDS, CaseRecord, DATE, GENDER, field_value, parse_leading_int


AGE_BINS: Tuple[Tuple[str, Optional[int]], ...] = (
    ("0-17", 17),
    ("18-30", 30),
    ("31-50", 50),
    ("51-70", 70),
    ("70+", None),
)

STAT_CARDS = {
    "Confirmed": "confirmedCases",
    "Active": "activeCases",
    "Recovered": "recoveredCases",
    "Deaths": "deaths",
}


def latest_snapshot(records: Sequence[CaseRecord]) -> Dict[str, Any]:
    """Counter values of the last record only; earlier rows are not summed."""
    latest = records[-1] if records else {}
    return {name: field_value(latest, name, "0") for name in COUNTER_FIELDS}


def trend_series(records: Sequence[CaseRecord]) -> Tuple[List[Any], List[Any]]:
    """Parallel Date and Confirmed lists in record order, values as provided."""
    x = [row.get(DATE) for row in records]
    y = [row.get(CONFIRMED) for row in records]
    return x, y


def gender_distribution(records: Sequence[CaseRecord]) -> Dict[Any, int]:
    counts: Dict[Any, int] = {}
    for row in records:
        gender = field_value(row, GENDER)
        if gender is None:
            continue
        counts[gender] = counts.get(gender, 0) + 1
    return counts


def age_bin(age: int) -> str:
    for label, upper in AGE_BINS:
        if upper is None or age <= upper:
            return label
    return AGE_BINS[-1][0]


def age_distribution(records: Sequence[CaseRecord]) -> Dict[str, int]:
    bins = {label: 0 for label, _ in AGE_BINS}
    for row in records:
        age = parse_leading_int(row.get(AGE))
        if age is None:
            continue
        bins[age_bin(age)] += 1
    return bins


def compute_overview(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    records: List[CaseRecord] = ctx.get("records", []) or []
    filtered: List[CaseRecord] = ctx.get("filtered_records", []) or []

    kpis = latest_snapshot(filtered)
    x, y = trend_series(filtered)
    gender = gender_distribution(filtered)
    age = age_distribution(filtered)

    charts: Dict[str, Any] = {
        TREND_MOUNT: to_vega_spec(trend_chart(x, y)),
        GENDER_MOUNT: to_vega_spec(gender_chart(gender)),
        AGE_MOUNT: to_vega_spec(age_chart(age)),
    }

    return {
        "filters": asdict(filters),
        "regions": list(ctx.get("regions", []) or []),
        "row_counts": {"total": len(records), "filtered": len(filtered)},
        "kpis": kpis,
        "trend": {"x": x, "y": y},
        "gender": gender,
        "age": age,
        "charts": charts,
    }
