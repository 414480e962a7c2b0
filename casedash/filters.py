from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from casedash.records import CaseRecord, STATE, field_value


REGION_PLACEHOLDER = "Select State"


@dataclass(frozen=True)
class DashboardFilters:
    selected_region: Optional[str] = None


def normalize_filters(raw: Optional[Mapping[str, Any]]) -> DashboardFilters:
    raw = raw or {}
    region = raw.get("selected_region")
    if region is None or region == "" or region == REGION_PLACEHOLDER:
        return DashboardFilters()
    return DashboardFilters(selected_region=str(region))


def derive_regions(records: Sequence[Mapping[str, Any]]) -> List[str]:
    """Distinct ``State`` values in order of first appearance."""
    seen: Dict[str, None] = {}
    for row in records:
        state = field_value(row, STATE)
        if state is not None:
            seen.setdefault(state, None)
    return list(seen)


def filter_records(records: Sequence[CaseRecord], selected_region: Optional[str]) -> List[CaseRecord]:
    if not selected_region:
        return list(records)
    return [row for row in records if row.get(STATE) == selected_region]


def prepare_context(filters: Mapping[str, Any] | DashboardFilters, data_ctx: Mapping[str, Any]) -> Dict[str, Any]:
    records: List[CaseRecord] = list(data_ctx.get("records") or [])
    filt = filters if isinstance(filters, DashboardFilters) else normalize_filters(filters)
    regions = data_ctx.get("regions")
    if regions is None:
        regions = derive_regions(records)
    return {
        "filters": filt,
        "records": records,
        "regions": list(regions),
        "filtered_records": filter_records(records, filt.selected_region),
    }
