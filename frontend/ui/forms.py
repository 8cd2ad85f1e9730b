"""Streamlit form rendering for GESS operating inputs.

Centralizing the sidebar setup keeps `app.run_app` focused on orchestration and
lets other pages reuse the same parameter construction logic.
"""

from dataclasses import dataclass

import streamlit as st

from services.gess_core import OperatingParameters
from services.materials import CRITERIA, MATERIALS, SCENARIOS, Material
from utils.settings import (
    CYCLES_RANGE,
    HEIGHT_RANGE,
    MASS_RANGE,
    SYSTEM_EFFICIENCY_RANGE,
    TIME_ELAPSED_RANGE,
    DashboardDefaults,
)

CRITERION_LABELS = {
    "efficiency": "Maximum efficiency",
    "lifespan": "Longest lifespan",
    "cost": "Cost effectiveness",
    "energy_density": "Energy density",
}


@dataclass
class ParameterFormResult:
    material: Material
    params: OperatingParameters


def render_parameter_form(defaults: DashboardDefaults) -> ParameterFormResult:
    """Render the sidebar controls and return the selected material and inputs."""

    with st.sidebar:
        st.header("Storage medium")
        material_key = st.radio(
            "Material",
            list(MATERIALS),
            format_func=lambda key: MATERIALS[key].name,
            key="inputs_material",
        )

        st.header("Operating parameters")
        mass = st.slider(
            "Load mass (kg)",
            MASS_RANGE.min_value,
            MASS_RANGE.max_value,
            float(defaults.mass),
            MASS_RANGE.step,
            key="inputs_mass",
        )
        height = st.slider(
            "Lift height (m)",
            HEIGHT_RANGE.min_value,
            HEIGHT_RANGE.max_value,
            float(defaults.height),
            HEIGHT_RANGE.step,
            key="inputs_height",
        )
        system_efficiency = st.slider(
            "System efficiency (%)",
            SYSTEM_EFFICIENCY_RANGE.min_value,
            SYSTEM_EFFICIENCY_RANGE.max_value,
            float(defaults.system_efficiency),
            SYSTEM_EFFICIENCY_RANGE.step,
            help="Motor, drive-train and power-electronics efficiency applied on top of the medium.",
            key="inputs_system_efficiency",
        )
        cycles = st.slider(
            "Operating cycles",
            int(CYCLES_RANGE.min_value),
            int(CYCLES_RANGE.max_value),
            int(defaults.cycles),
            int(CYCLES_RANGE.step),
            key="inputs_cycles",
        )
        time_elapsed = st.slider(
            "Storage time (h)",
            TIME_ELAPSED_RANGE.min_value,
            TIME_ELAPSED_RANGE.max_value,
            float(defaults.time_elapsed),
            TIME_ELAPSED_RANGE.step,
            help="Hours the energy stays stored before recovery; only water self-discharges.",
            key="inputs_time_elapsed",
        )

    params = OperatingParameters(
        mass=float(mass),
        height=float(height),
        system_efficiency=float(system_efficiency),
        cycles=int(cycles),
        time_elapsed=float(time_elapsed),
    )
    return ParameterFormResult(material=MATERIALS[material_key], params=params)


def render_criterion_selector(defaults: DashboardDefaults) -> str:
    default_index = CRITERIA.index(defaults.criterion) if defaults.criterion in CRITERIA else 0
    return st.radio(
        "Optimization priority",
        list(CRITERIA),
        index=default_index,
        format_func=lambda key: CRITERION_LABELS.get(key, key),
        horizontal=True,
        key="inputs_criterion",
    )


def render_scenario_selector() -> str:
    return st.selectbox(
        "Deployment scenario",
        list(SCENARIOS),
        format_func=lambda key: f"{SCENARIOS[key].name} — {SCENARIOS[key].description}",
        key="inputs_scenario",
    )
