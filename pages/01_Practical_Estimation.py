import streamlit as st

from frontend.ui.charts import (
    build_efficiency_breakdown_chart,
    build_height_tradeoff_chart,
    build_school_requirement_chart,
)
from frontend.ui.rendering import MASS_FORMAT, VOLUME_FORMAT, render_formatted_dataframe, render_parameter_error
from services.gess_core import InvalidParameterError
from services.materials import MATERIALS
from utils.settings import HEIGHT_RANGE, MASS_RANGE, load_dashboard_defaults
from utils.sweeps import (
    generate_efficiency_breakdown,
    generate_energy_demand_sweep,
    generate_facility_profiles,
    generate_height_tradeoff,
    generate_school_analytics,
)
from utils.ui_layout import init_page_layout

render_layout = init_page_layout(
    page_title="Practical estimation",
    main_title="Practical energy use estimation",
    description="How much mass must be lowered, and from what height, to supply a real facility?",
)
render_layout()

defaults = load_dashboard_defaults()

material_key = st.selectbox(
    "Sizing material",
    list(MATERIALS),
    index=list(MATERIALS).index("concrete"),
    format_func=lambda key: MATERIALS[key].name,
)
material = MATERIALS[material_key]
st.caption(
    f"Required mass solves E = m·g·h·η with η = {material.round_trip_efficiency:.1%} "
    f"(lift {material.lift_efficiency:.0%} × generation {material.generation_efficiency:.0%})."
)

volume_formats = {f"{m.key}_volume_m3": VOLUME_FORMAT for m in MATERIALS.values()}

try:
    facilities_df = generate_facility_profiles(material)
    demand_height = st.slider(
        "Lift height for the demand sweep (m)",
        HEIGHT_RANGE.min_value,
        HEIGHT_RANGE.max_value,
        float(defaults.height),
        HEIGHT_RANGE.step,
    )
    demand_df = generate_energy_demand_sweep(demand_height)
    tradeoff_target = st.number_input("Trade-off energy target (kWh)", min_value=1.0, value=100.0, step=10.0)
    tradeoff_df = generate_height_tradeoff(tradeoff_target, material)
    breakdown_df = generate_efficiency_breakdown()
except InvalidParameterError as exc:
    render_parameter_error(exc)

st.subheader("Facility load profiles and required mass")
render_formatted_dataframe(
    facilities_df,
    {"energy_kwh": "{:,.0f}", "mech_energy_kj": "{:,.0f}", "required_mass_kg": MASS_FORMAT, **volume_formats},
)

st.subheader("Required mass by energy demand")
mass_formats = {f"{m.key}_mass_kg": MASS_FORMAT for m in MATERIALS.values()}
render_formatted_dataframe(
    demand_df,
    {"mech_energy_kj": "{:,.0f}", "charge_power_kw": "{:,.1f}", **mass_formats, **volume_formats},
)

st.subheader(f"Height trade-off ({tradeoff_target:,.0f} kWh)")
st.altair_chart(build_height_tradeoff_chart(tradeoff_df), use_container_width=True)
st.caption("Doubling the height halves the required mass.")

st.subheader("Efficiency breakdown (100 kWh input)")
st.altair_chart(build_efficiency_breakdown_chart(breakdown_df), use_container_width=True)

st.subheader("School energy analysis")
mass_col, height_col = st.columns(2)
constant_mass = mass_col.number_input(
    "Constant mass (kg)", min_value=1.0, value=float(MASS_RANGE.max_value) * 10, step=1000.0
)
constant_height = height_col.number_input(
    "Constant height (m)", min_value=1.0, value=float(defaults.height), step=5.0
)
try:
    school_df = generate_school_analytics(constant_mass, constant_height)
except InvalidParameterError as exc:
    render_parameter_error(exc)

school = st.selectbox("School", school_df["school"].unique().tolist())
selected = school_df[school_df["school"] == school].iloc[0]
st.caption(f"{selected['daily_energy_kwh']:,.0f} kWh/day · Typical loads: {selected['typical_load']}")
chart_cols = st.columns(2)
chart_cols[0].altair_chart(
    build_school_requirement_chart(school_df, school, "required_height_m", f"Required height at {constant_mass:,.0f} kg (m)"),
    use_container_width=True,
)
chart_cols[1].altair_chart(
    build_school_requirement_chart(school_df, school, "required_mass_kg", f"Required mass at {constant_height:,.0f} m (kg)"),
    use_container_width=True,
)
