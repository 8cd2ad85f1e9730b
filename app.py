# app.py — GESSLab (gravity energy storage explorer)
# - Material dashboard: energy, losses, lifespan, volume per storage medium
# - Mass/height sweeps, energy density comparison, material optimization
# - Scenario recommendations with constraint fallback

import logging

import altair as alt
import streamlit as st

from frontend.ui.charts import (
    build_energy_density_chart,
    build_normalized_comparison_chart,
    build_sweep_chart,
)
from frontend.ui.forms import render_criterion_selector, render_parameter_form, render_scenario_selector
from frontend.ui.metrics import compute_kpis, render_primary_metrics, render_secondary_metrics
from frontend.ui.rendering import (
    ENERGY_FORMAT,
    VOLUME_FORMAT,
    render_formatted_dataframe,
    render_parameter_error,
    render_recommendation,
)
from services.gess_core import InvalidParameterError, calculate
from services.materials import SCENARIOS
from services.optimizer import find_optimal_material, generate_comparison_data, recommend_for_scenario
from utils.settings import load_dashboard_defaults
from utils.sweeps import generate_energy_density_comparison, generate_height_sweep, generate_mass_sweep
from utils.ui_layout import init_page_layout


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")


def run_app() -> None:
    render_layout = init_page_layout(
        page_title="GESSLab",
        main_title="GESS LAB — Gravity Energy Storage Explorer",
        description="Lift a mass to store energy, lower it to recover it. Compare water, sand and concrete.",
    )
    render_layout()

    defaults = load_dashboard_defaults()
    _configure_logging(defaults.log_level)

    form = render_parameter_form(defaults)
    params = form.params
    material = form.material

    try:
        result = calculate(material, params)
        comparison_df = generate_comparison_data(
            params.mass, params.height, params.system_efficiency, params.cycles
        )
        mass_sweep_df = generate_mass_sweep(params.height, params.system_efficiency, params.cycles)
        height_sweep_df = generate_height_sweep(params.mass, params.system_efficiency, params.cycles)
        density_df = generate_energy_density_comparison(
            params.mass, params.height, params.system_efficiency, params.cycles
        )
    except InvalidParameterError as exc:
        render_parameter_error(exc)
        return

    st.subheader(f"Results — {material.name}")
    kpis = compute_kpis(material, result)
    render_primary_metrics(kpis)
    render_secondary_metrics(kpis)
    if material.power_output is not None:
        st.caption(
            f"Typical power output: {material.power_output.min_kw:,.0f}-{material.power_output.max_kw:,.0f} kW "
            f"over {material.power_output.duration}."
        )

    st.divider()
    st.subheader("Material comparison")
    render_formatted_dataframe(
        comparison_df.drop(columns=["color"]),
        {
            "potential_energy_mj": ENERGY_FORMAT,
            "recovered_energy_mj": ENERGY_FORMAT,
            "efficiency": "{:.1f}%",
            "lifespan": "{:,}",
            "volume": VOLUME_FORMAT,
            "cost_effectiveness": "{:,.2f}",
            "energy_density": ENERGY_FORMAT,
            "round_trip_efficiency": "{:.1f}%",
        },
    )
    st.altair_chart(build_normalized_comparison_chart(comparison_df), use_container_width=True)

    mass_col, height_col = st.columns(2)
    with mass_col:
        st.markdown(f"**Recovered energy vs mass** (height {params.height:,.0f} m)")
        st.altair_chart(build_sweep_chart(mass_sweep_df, "mass", "Mass (kg)"), use_container_width=True)
    with height_col:
        st.markdown(f"**Recovered energy vs height** (mass {params.mass:,.0f} kg)")
        st.altair_chart(build_sweep_chart(height_sweep_df, "height", "Height (m)"), use_container_width=True)

    st.markdown("**Energy density**")
    st.altair_chart(build_energy_density_chart(density_df), use_container_width=True)

    st.divider()
    st.subheader("Material optimization")
    criterion = render_criterion_selector(defaults)
    if st.button("Get recommendation", key="btn_optimize"):
        try:
            best = find_optimal_material(
                params.mass,
                params.height,
                params.system_efficiency,
                params.cycles,
                criterion,
                strict=defaults.strict_criteria,
            )
        except InvalidParameterError as exc:
            render_parameter_error(exc)
            return
        render_recommendation(best)

    scenario_key = render_scenario_selector()
    scenario = SCENARIOS[scenario_key]
    with st.expander("Scenario constraints", expanded=False):
        st.json(
            {
                "priority": scenario.priority,
                "max_volume_m3": scenario.max_volume,
                "max_height_m": scenario.max_height,
                "max_relative_cost": scenario.max_relative_cost,
                "min_power_kw": scenario.min_power_kw,
            }
        )
    if st.button("Recommend for scenario", key="btn_scenario"):
        try:
            best = recommend_for_scenario(
                scenario, params.mass, params.height, params.system_efficiency, params.cycles
            )
        except InvalidParameterError as exc:
            render_parameter_error(exc)
            return
        render_recommendation(best)


alt.data_transformers.disable_max_rows()

if __name__ == "__main__":
    run_app()
