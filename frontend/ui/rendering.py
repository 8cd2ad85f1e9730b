"""Shared rendering helpers for Streamlit pages."""

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Union

import pandas as pd
import streamlit as st
from streamlit.delta_generator import DeltaGenerator

from services.gess_core import InvalidParameterError
from services.optimizer import MaterialSummary

Formatter = Union[str, Callable[[Any], str]]

VOLUME_FORMAT = "{:,.1f}"
MASS_FORMAT = "{:,.0f}"
ENERGY_FORMAT = "{:,.3f}"


@dataclass(frozen=True)
class MetricSpec:
    """Specification for a Streamlit metric card."""

    label: str
    value: str
    help: Optional[str] = None
    caption: Optional[str] = None


def render_metrics(columns: Sequence[DeltaGenerator], specs: Sequence[MetricSpec]) -> None:
    """Render metric cards from specs to keep layout and captions consistent."""

    for col, spec in zip(columns, specs):
        col.metric(spec.label, spec.value, help=spec.help)
        if spec.caption:
            col.caption(spec.caption)


def render_formatted_dataframe(
    df: pd.DataFrame,
    formatters: Mapping[str, Formatter],
    *,
    use_container_width: bool = True,
    **dataframe_kwargs: Any,
) -> None:
    """Render a dataframe with shared number formatting, skipping absent columns."""

    present = {column: fmt for column, fmt in formatters.items() if column in df.columns}
    st.dataframe(
        df.style.format(present),
        use_container_width=use_container_width,
        hide_index=True,
        **dataframe_kwargs,
    )


def render_recommendation(summary: MaterialSummary, container: Optional[DeltaGenerator] = None) -> None:
    """Show the recommended material with its key comparison figures."""

    target = container or st
    target.success(f"Recommended material: **{summary.material}**")
    cols = target.columns(4)
    specs = [
        MetricSpec("Efficiency", f"{summary.efficiency:,.1f}%"),
        MetricSpec("Lifespan", f"{summary.lifespan:,} cycles"),
        MetricSpec("Energy density", f"{summary.energy_density:,.2f} kWh/m³"),
        MetricSpec("Cost effectiveness", f"{summary.cost_effectiveness:,.2f}"),
    ]
    render_metrics(cols, specs)


def render_parameter_error(exc: InvalidParameterError) -> None:
    """Surface a model input problem and stop the current rerun."""

    st.error(f"Invalid input for '{exc.field}': {exc}")
    st.stop()
