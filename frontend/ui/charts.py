"""Chart and data prep helpers for Streamlit visualizations."""

from typing import Dict

import altair as alt
import numpy as np
import pandas as pd

from services.materials import MATERIALS

NORMALIZED_METRICS: Dict[str, str] = {
    "efficiency": "Efficiency",
    "lifespan": "Lifespan",
    "energy_density": "Energy Density",
    "cost_effectiveness": "Cost Effectiveness",
}


def _material_scale() -> alt.Scale:
    return alt.Scale(
        domain=[m.name for m in MATERIALS.values()],
        range=[m.color for m in MATERIALS.values()],
    )


def melt_sweep(sweep_df: pd.DataFrame, x_col: str) -> pd.DataFrame:
    """Reshape a wide sweep (one column per material key) into tidy rows."""
    names = {m.key: m.name for m in MATERIALS.values()}
    value_cols = [c for c in sweep_df.columns if c in names]
    long_df = sweep_df.melt(
        id_vars=[x_col],
        value_vars=value_cols,
        var_name="material",
        value_name="recovered_energy_mj",
    )
    long_df["material"] = long_df["material"].map(names)
    return long_df


def prepare_normalized_scores(comparison_df: pd.DataFrame) -> pd.DataFrame:
    """Scale each comparison metric to 0-100 relative to the best material."""
    if comparison_df.empty:
        return pd.DataFrame(columns=["material", "metric", "score"])

    scores = comparison_df[["material"]].copy()
    for column, label in NORMALIZED_METRICS.items():
        values = comparison_df[column].astype(float)
        peak = values.max()
        with np.errstate(invalid="ignore", divide="ignore"):
            scores[label] = np.where(peak > 0, values / peak * 100.0, 0.0)
    return scores.melt(id_vars=["material"], var_name="metric", value_name="score")


def build_sweep_chart(sweep_df: pd.DataFrame, x_col: str, x_title: str) -> alt.Chart:
    """Line chart of recovered energy (MJ) per material against one swept input."""
    long_df = melt_sweep(sweep_df, x_col)
    return (
        alt.Chart(long_df)
        .mark_line(point=True)
        .encode(
            x=alt.X(f"{x_col}:Q", title=x_title),
            y=alt.Y("recovered_energy_mj:Q", title="Recovered energy (MJ)"),
            color=alt.Color("material:N", title="Material", scale=_material_scale()),
            tooltip=[
                alt.Tooltip(f"{x_col}:Q", title=x_title, format=",.0f"),
                alt.Tooltip("material:N", title="Material"),
                alt.Tooltip("recovered_energy_mj:Q", title="Recovered (MJ)", format=".3f"),
            ],
        )
        .properties(height=320)
    )


def build_energy_density_chart(density_df: pd.DataFrame) -> alt.Chart:
    """Bar chart of recovered energy density per material."""
    return (
        alt.Chart(density_df)
        .mark_bar()
        .encode(
            x=alt.X("material:N", title="Material", sort=None),
            y=alt.Y("energy_density:Q", title="Energy density (kWh/m³)"),
            color=alt.Color("material:N", scale=_material_scale(), legend=None),
            tooltip=[
                alt.Tooltip("material:N", title="Material"),
                alt.Tooltip("energy_density:Q", title="kWh/m³", format=".3f"),
                alt.Tooltip("efficiency:Q", title="Efficiency (%)", format=".1f"),
                alt.Tooltip("relative_cost:Q", title="Cost tier"),
            ],
        )
        .properties(height=300)
    )


def build_normalized_comparison_chart(comparison_df: pd.DataFrame) -> alt.Chart:
    """Grouped bars comparing materials on normalized 0-100 scores."""
    scores = prepare_normalized_scores(comparison_df)
    return (
        alt.Chart(scores)
        .mark_bar()
        .encode(
            x=alt.X("metric:N", title=None, sort=list(NORMALIZED_METRICS.values())),
            xOffset=alt.XOffset("material:N"),
            y=alt.Y("score:Q", title="Score (best = 100)", scale=alt.Scale(domain=[0, 100])),
            color=alt.Color("material:N", title="Material", scale=_material_scale()),
            tooltip=["material:N", "metric:N", alt.Tooltip("score:Q", format=".1f")],
        )
        .properties(height=300)
    )


def build_efficiency_breakdown_chart(breakdown_df: pd.DataFrame) -> alt.Chart:
    """Energy remaining after each conversion stage, per material."""
    stages = breakdown_df.melt(
        id_vars=["material"],
        value_vars=["input_energy_kwh", "after_lift_kwh", "after_generation_kwh"],
        var_name="stage",
        value_name="energy_kwh",
    )
    stages["stage"] = stages["stage"].replace(
        {"input_energy_kwh": "Input", "after_lift_kwh": "After lift", "after_generation_kwh": "After generation"}
    )
    return (
        alt.Chart(stages)
        .mark_line(point=True)
        .encode(
            x=alt.X("stage:N", title=None, sort=["Input", "After lift", "After generation"]),
            y=alt.Y("energy_kwh:Q", title="Energy (kWh)", scale=alt.Scale(zero=False)),
            color=alt.Color("material:N", title="Material", scale=_material_scale()),
            tooltip=["material:N", "stage:N", alt.Tooltip("energy_kwh:Q", format=".2f")],
        )
        .properties(height=280)
    )


def build_height_tradeoff_chart(tradeoff_df: pd.DataFrame) -> alt.Chart:
    """Required mass against lift height."""
    return (
        alt.Chart(tradeoff_df)
        .mark_line(point=True, color="#dc2626")
        .encode(
            x=alt.X("height:Q", title="Height (m)"),
            y=alt.Y("required_mass_t:Q", title="Required mass (t)"),
            tooltip=[
                alt.Tooltip("height:Q", title="Height (m)"),
                alt.Tooltip("required_mass_kg:Q", title="Mass (kg)", format=",.0f"),
            ],
        )
        .properties(height=280)
    )


def build_school_requirement_chart(school_df: pd.DataFrame, school: str, value_col: str, title: str) -> alt.Chart:
    """Bar chart of one sizing requirement per material for a selected school."""
    subset = school_df[school_df["school"] == school]
    return (
        alt.Chart(subset)
        .mark_bar()
        .encode(
            x=alt.X("material:N", title="Material", sort=None),
            y=alt.Y(f"{value_col}:Q", title=title),
            color=alt.Color("material:N", scale=_material_scale(), legend=None),
            tooltip=["material:N", alt.Tooltip(f"{value_col}:Q", title=title, format=",.1f")],
        )
        .properties(height=260)
    )
