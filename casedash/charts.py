from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

TREND_MOUNT = "trendChart"
GENDER_MOUNT = "genderDistribution"
AGE_MOUNT = "ageDistribution"

AGE_BAR_COLOR = "#6366f1"
DONUT_HOLE = 0.4
SMALL_CHART_HEIGHT = 300


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def trend_chart(x: Sequence[Optional[str]], y: Sequence[Optional[str]]) -> alt.Chart:
    # Counts stay strings in the payload; only the plotted column is numeric.
    df = pd.DataFrame({"Date": list(x), "Confirmed": pd.to_numeric(pd.Series(list(y), dtype=object), errors="coerce")})
    df.insert(0, "row", range(len(df)))
    return (
        alt.Chart(df)
        .mark_line(point=True)
        .encode(
            x=alt.X("Date:N", title="Date", sort=alt.SortField("row")),
            y=alt.Y("Confirmed:Q", title="Number of Cases"),
            tooltip=[alt.Tooltip("Date:N"), alt.Tooltip("Confirmed:Q", title="Confirmed Cases", format=",")],
        )
        .properties(title="Cases Trend Over Time")
    )


def gender_chart(counts: Mapping[str, int]) -> alt.Chart:
    df = pd.DataFrame({"Gender": list(counts.keys()), "count": list(counts.values())})
    outer = SMALL_CHART_HEIGHT // 2 - 20
    return (
        alt.Chart(df)
        .mark_arc(innerRadius=outer * DONUT_HOLE, outerRadius=outer)
        .encode(
            theta=alt.Theta("count:Q"),
            color=alt.Color("Gender:N", title="Gender", sort=None, legend=alt.Legend()),
            tooltip=[alt.Tooltip("Gender:N"), alt.Tooltip("count:Q", title="Cases")],
        )
        .properties(title="Gender Distribution", height=SMALL_CHART_HEIGHT)
    )


def age_chart(bins: Mapping[str, int]) -> alt.Chart:
    order: List[str] = list(bins.keys())
    df = pd.DataFrame({"age_group": order, "count": list(bins.values())})
    return (
        alt.Chart(df)
        .mark_bar(color=AGE_BAR_COLOR)
        .encode(
            x=alt.X("age_group:N", title="Age Groups", sort=order),
            y=alt.Y("count:Q", title="Number of Cases"),
            tooltip=[alt.Tooltip("age_group:N", title="Age Group"), alt.Tooltip("count:Q", title="Cases")],
        )
        .properties(title="Age Distribution", height=SMALL_CHART_HEIGHT)
    )
