import pandas as pd
import streamlit as st

from frontend.ui.rendering import render_formatted_dataframe
from services.materials import ETA_GEN, ETA_LIFT, ETA_RT, GRAVITY, KWH_TO_KJ, MATERIALS
from utils.sweeps import generate_fixed_efficiency_height_table, generate_fixed_efficiency_mass_table
from utils.ui_layout import init_page_layout

render_layout = init_page_layout(
    page_title="Constants & equations",
    main_title="Constants, equations and assumptions",
    description="Fixed parameters and formulas used throughout the model.",
)
render_layout()

st.subheader("Fixed constants")
st.table(
    pd.DataFrame(
        [
            {"Symbol": "g", "Parameter": "Gravitational acceleration", "Value": f"{GRAVITY} m/s²"},
            {"Symbol": "η_lift", "Parameter": "Lift efficiency (project)", "Value": f"{ETA_LIFT}"},
            {"Symbol": "η_gen", "Parameter": "Generator efficiency (project)", "Value": f"{ETA_GEN}"},
            {"Symbol": "η_rt", "Parameter": "Round-trip efficiency (project)", "Value": f"{ETA_RT:.2f}"},
            {"Symbol": "—", "Parameter": "Energy conversion", "Value": f"1 kWh = {KWH_TO_KJ:,.0f} kJ"},
        ]
    )
)

st.subheader("Material catalog")
st.table(
    pd.DataFrame(
        [
            {
                "Material": m.name,
                "Density (kg/m³)": m.density,
                "Efficiency range": f"{m.efficiency.min:.0%}-{m.efficiency.max:.0%}",
                "η_lift": f"{m.lift_efficiency:.0%}",
                "η_gen": f"{m.generation_efficiency:.0%}",
                "Self-discharge (%/h)": m.self_discharge_rate,
                "Lifespan (cycles)": f"{m.lifespan_cycles:,}",
                "Cost tier": m.relative_cost,
            }
            for m in MATERIALS.values()
        ]
    )
)

st.subheader("Equations")
st.markdown(
    """
- Potential energy: `E = m × g × h` (J)
- Recovered energy: `E × midpoint(η_material) × η_system × (1 − r_sd)^t × (1 − D/2)` with `D = min(0.5, loss × cycles / lifespan)`
- Input / output energy: `E / η_lift`, `E × η_gen` (kWh)
- Energy density: recovered kWh / (m / ρ)
- Required mass: `m = E × 3.6×10⁶ / (g × h × η_rt)`
- Required height: `h = E × 3.6×10⁶ / (m × g × η_rt)`

**Assumptions:** constant lifting speed, no acceleration losses, no container mass,
no thermal losses, constant motor and generator efficiency, ideal power electronics.
    """
)

table_formats = {
    "mech_energy_kj": "{:,.1f}",
    "elec_energy_kwh": "{:.4f}",
    "charge_power_kw": "{:.4f}",
    "energy_out_kwh": "{:.4f}",
    "discharge_power_kw": "{:.4f}",
}

st.subheader("Scenario 1: varying mass (fixed efficiencies)")
render_formatted_dataframe(generate_fixed_efficiency_mass_table(), table_formats)

st.subheader("Scenario 2: varying height (fixed efficiencies)")
render_formatted_dataframe(generate_fixed_efficiency_height_table(), table_formats)
st.caption("Discharging power is lower than charging power because of generator losses.")
