"""Plotly visualisation helpers for the expense tracker.

Functions accept the objects returned by :mod:`data_processing` and
produce interactive Plotly figures that Streamlit renders via
``st.plotly_chart``.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Union

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

try:  # Allow both package and script execution contexts
    from .config import CHART_COLORS, CURRENCY_SYMBOL
    from .data_processing import MonthBucket
except ImportError:  # pragma: no cover - fallback for direct execution
    from config import CHART_COLORS, CURRENCY_SYMBOL
    from data_processing import MonthBucket


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_category_pie_chart(
    totals: Union[pd.Series, Dict[str, float]],
    title: Optional[str] = None,
    colors: Sequence[str] = CHART_COLORS,
) -> go.Figure:
    """Donut chart of spending per category.

    Parameters
    ----------
    totals : pandas.Series or dict
        Summed amount per category, in display order.
    title : str, optional
        Chart title.
    colors : sequence of str
        Slice colours, cycled when there are more categories than colours.

    Returns
    -------
    plotly.graph_objects.Figure
        Donut chart, or an empty figure when there is nothing to plot.
    """
    series = pd.Series(totals, dtype=float) if isinstance(totals, dict) else totals
    if series.empty:
        return _empty_figure()
    df = series.reset_index()
    df.columns = ["Category", "Value"]
    palette: List[str] = [colors[i % len(colors)] for i in range(len(df))]
    fig = px.pie(
        df,
        names="Category",
        values="Value",
        hole=0.6,
        color_discrete_sequence=palette,
    )
    fig.update_traces(
        sort=False,
        hovertemplate=f"%{{label}}: {CURRENCY_SYMBOL}%{{value:,.2f}}<extra></extra>",
    )
    fig.update_layout(
        title=title,
        showlegend=True,
        margin=dict(t=40 if title else 10, b=10, l=10, r=10),
    )
    return fig


def create_monthly_totals_chart(buckets: Sequence[MonthBucket], title: Optional[str] = None) -> go.Figure:
    """Bar chart of month totals for the history view, oldest month first."""
    if not buckets:
        return _empty_figure()
    ordered = sorted(buckets, key=lambda bucket: (bucket.year, bucket.month))
    df = pd.DataFrame(
        {
            "Month": [f"{bucket.month_name[:3]} {bucket.year}" for bucket in ordered],
            "Total": [bucket.total for bucket in ordered],
        }
    )
    fig = px.bar(df, x="Month", y="Total", color_discrete_sequence=CHART_COLORS[:1])
    fig.update_layout(
        title=title or "Spending by month",
        xaxis_title="Month",
        yaxis_title=f"Total ({CURRENCY_SYMBOL})",
    )
    return fig
