"""Sweep and table generators used by both the Streamlit app and tests.

Every generator holds all inputs fixed except one and evaluates the energy
model over a small literal list of sample points. Outputs are tidy pandas
DataFrames so the frontend can chart them without further reshaping.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from services.gess_core import (
    InvalidParameterError,
    calc_volume,
    calculate_gess_results,
    required_height_for_energy,
    required_mass_for_energy,
)
from services.materials import (
    ETA_GEN,
    FACILITY_PROFILES,
    GRAVITY,
    J_PER_MJ,
    KWH_TO_KJ,
    MATERIALS,
    SCHOOL_ENERGY_DEMANDS,
    FacilityProfile,
    Material,
    SchoolDemand,
)

MASS_SAMPLES: tuple[float, ...] = tuple(float(m) for m in range(1000, 10001, 1000))
HEIGHT_SAMPLES: tuple[float, ...] = tuple(float(h) for h in range(50, 201, 10))
DEMAND_SAMPLES_KWH: tuple[float, ...] = (10.0, 25.0, 50.0, 100.0, 250.0, 500.0, 1000.0)
TRADEOFF_HEIGHTS: tuple[float, ...] = (25.0, 50.0, 100.0, 200.0, 400.0)

# Fixed-efficiency scenario tables (constant height / constant mass).
SCENARIO_HEIGHT_M = 100.0
SCENARIO_MASS_KG = 5000.0
SCENARIO_CHARGE_TIME_H = 1.0
SCENARIO_DISCHARGE_TIME_H = 0.5


def _catalog(materials: Optional[Iterable[Material]]) -> List[Material]:
    return list(MATERIALS.values()) if materials is None else list(materials)


def _ensure_samples(values: Sequence[float], name: str) -> None:
    if len(values) == 0:
        raise InvalidParameterError(name, "at least one sample point is required")


def _recovered_mj_by_material(
    materials: Sequence[Material],
    mass: float,
    height: float,
    system_efficiency: float,
    cycles: int,
) -> dict[str, float]:
    return {
        material.key: calculate_gess_results(
            material, mass, height, system_efficiency, cycles
        ).recovered_energy_j
        / J_PER_MJ
        for material in materials
    }


def generate_mass_sweep(
    height: float,
    system_efficiency: float,
    cycles: int,
    masses: Sequence[float] = MASS_SAMPLES,
    materials: Optional[Iterable[Material]] = None,
) -> pd.DataFrame:
    """Recovered energy (MJ) per material across ``masses`` at a fixed height."""

    _ensure_samples(masses, "masses")
    catalog = _catalog(materials)
    rows = [
        {"mass": float(mass), **_recovered_mj_by_material(catalog, mass, height, system_efficiency, cycles)}
        for mass in masses
    ]
    return pd.DataFrame(rows, columns=["mass", *[m.key for m in catalog]])


def generate_height_sweep(
    mass: float,
    system_efficiency: float,
    cycles: int,
    heights: Sequence[float] = HEIGHT_SAMPLES,
    materials: Optional[Iterable[Material]] = None,
) -> pd.DataFrame:
    """Recovered energy (MJ) per material across ``heights`` with a fixed mass."""

    _ensure_samples(heights, "heights")
    catalog = _catalog(materials)
    rows = [
        {"height": float(height), **_recovered_mj_by_material(catalog, mass, height, system_efficiency, cycles)}
        for height in heights
    ]
    return pd.DataFrame(rows, columns=["height", *[m.key for m in catalog]])


def generate_energy_demand_sweep(
    height: float,
    demands_kwh: Sequence[float] = DEMAND_SAMPLES_KWH,
    charge_time_h: float = SCENARIO_CHARGE_TIME_H,
    materials: Optional[Iterable[Material]] = None,
) -> pd.DataFrame:
    """Required mass and volume per material for each energy demand.

    Units: ``demand_kwh`` (kWh), ``mech_energy_kj`` (kJ of delivered energy),
    ``charge_power_kw`` (kW over ``charge_time_h``), ``<material>_mass_kg``
    (kg) and ``<material>_volume_m3`` (m³).
    """

    _ensure_samples(demands_kwh, "demands_kwh")
    if charge_time_h <= 0:
        raise InvalidParameterError("charge_time_h", "must be positive")

    catalog = _catalog(materials)
    rows: List[dict[str, Any]] = []
    for demand in demands_kwh:
        row: dict[str, Any] = {
            "demand_kwh": float(demand),
            "mech_energy_kj": float(demand) * KWH_TO_KJ,
            "charge_power_kw": float(demand) / charge_time_h,
        }
        for material in catalog:
            mass = required_mass_for_energy(demand, height, material)
            row[f"{material.key}_mass_kg"] = mass
            row[f"{material.key}_volume_m3"] = calc_volume(mass, material.density)
        rows.append(row)
    return pd.DataFrame(rows)


def generate_energy_density_comparison(
    mass: float,
    height: float,
    system_efficiency: float,
    cycles: int,
    materials: Optional[Iterable[Material]] = None,
) -> pd.DataFrame:
    """One row per material with energy density, efficiency and cost tier."""

    rows = []
    for material in _catalog(materials):
        result = calculate_gess_results(material, mass, height, system_efficiency, cycles)
        rows.append(
            {
                "material": material.name,
                "energy_density": result.energy_density_kwh_m3,
                "efficiency": result.efficiency_pct,
                "self_discharge": material.self_discharge_rate,
                "relative_cost": material.relative_cost,
                "color": material.color,
            }
        )
    return pd.DataFrame(rows)


def _fixed_efficiency_row(
    mass: float,
    height: float,
    charge_time_h: float,
    discharge_time_h: float,
) -> dict[str, float]:
    mech_energy_kj = mass * GRAVITY * height / 1000.0
    elec_energy_kwh = mech_energy_kj / KWH_TO_KJ
    energy_out_kwh = elec_energy_kwh * ETA_GEN
    return {
        "mass": float(mass),
        "height": float(height),
        "mech_energy_kj": mech_energy_kj,
        "elec_energy_kwh": elec_energy_kwh,
        "charge_power_kw": elec_energy_kwh / charge_time_h,
        "energy_out_kwh": energy_out_kwh,
        "discharge_power_kw": energy_out_kwh / discharge_time_h,
    }


def _ensure_durations(charge_time_h: float, discharge_time_h: float) -> None:
    if charge_time_h <= 0:
        raise InvalidParameterError("charge_time_h", "must be positive")
    if discharge_time_h <= 0:
        raise InvalidParameterError("discharge_time_h", "must be positive")


def generate_fixed_efficiency_mass_table(
    height: float = SCENARIO_HEIGHT_M,
    masses: Sequence[float] = MASS_SAMPLES,
    charge_time_h: float = SCENARIO_CHARGE_TIME_H,
    discharge_time_h: float = SCENARIO_DISCHARGE_TIME_H,
) -> pd.DataFrame:
    """Energy and power at constant height using the fixed project efficiencies."""

    _ensure_samples(masses, "masses")
    _ensure_durations(charge_time_h, discharge_time_h)
    if height <= 0:
        raise InvalidParameterError("height", "must be positive")
    return pd.DataFrame(
        [_fixed_efficiency_row(mass, height, charge_time_h, discharge_time_h) for mass in masses]
    )


def generate_fixed_efficiency_height_table(
    mass: float = SCENARIO_MASS_KG,
    heights: Sequence[float] = HEIGHT_SAMPLES,
    charge_time_h: float = SCENARIO_CHARGE_TIME_H,
    discharge_time_h: float = SCENARIO_DISCHARGE_TIME_H,
) -> pd.DataFrame:
    """Energy and power at constant mass using the fixed project efficiencies."""

    _ensure_samples(heights, "heights")
    _ensure_durations(charge_time_h, discharge_time_h)
    if mass <= 0:
        raise InvalidParameterError("mass", "must be positive")
    return pd.DataFrame(
        [_fixed_efficiency_row(mass, height, charge_time_h, discharge_time_h) for height in heights]
    )


def generate_efficiency_breakdown(
    input_energy_kwh: float = 100.0,
    materials: Optional[Iterable[Material]] = None,
) -> pd.DataFrame:
    """Lift, generation and round-trip efficiency (percent) per material.

    The ``after_lift_kwh`` / ``after_generation_kwh`` columns trace how much of
    ``input_energy_kwh`` survives each conversion stage.
    """

    if input_energy_kwh < 0:
        raise InvalidParameterError("input_energy_kwh", "must be non-negative")

    rows = []
    for material in _catalog(materials):
        after_lift = input_energy_kwh * material.lift_efficiency
        rows.append(
            {
                "material": material.name,
                "lift_efficiency": material.lift_efficiency * 100.0,
                "generation_efficiency": material.generation_efficiency * 100.0,
                "round_trip_efficiency": material.round_trip_efficiency * 100.0,
                "input_energy_kwh": float(input_energy_kwh),
                "after_lift_kwh": after_lift,
                "after_generation_kwh": after_lift * material.generation_efficiency,
                "color": material.color,
            }
        )
    return pd.DataFrame(rows)


def generate_facility_profiles(
    material: Optional[Material] = None,
    profiles: Sequence[FacilityProfile] = FACILITY_PROFILES,
) -> pd.DataFrame:
    """Size a system for each facility load profile.

    ``required_mass_kg`` is solved for ``material`` (concrete by default) at the
    facility's lift height; the ``<material>_volume_m3`` columns show how much
    room that mass occupies in each catalog medium.
    """

    sizing_material = material or MATERIALS["concrete"]
    rows = []
    for profile in profiles:
        mass = required_mass_for_energy(profile.energy_kwh, profile.height_m, sizing_material)
        row: dict[str, Any] = {
            "facility": profile.name,
            "description": profile.description,
            "typical_loads": profile.typical_loads,
            "power_kw": profile.power_kw,
            "time_h": profile.time_h,
            "energy_kwh": profile.energy_kwh,
            "height_m": profile.height_m,
            "mech_energy_kj": profile.energy_kwh * KWH_TO_KJ / sizing_material.round_trip_efficiency,
            "required_mass_kg": mass,
        }
        for medium in MATERIALS.values():
            row[f"{medium.key}_volume_m3"] = calc_volume(mass, medium.density)
        rows.append(row)
    return pd.DataFrame(rows)


def generate_height_tradeoff(
    target_kwh: float,
    material: Optional[Material] = None,
    heights: Sequence[float] = TRADEOFF_HEIGHTS,
) -> pd.DataFrame:
    """Required mass against lift height for a fixed energy target (m ∝ 1/h)."""

    _ensure_samples(heights, "heights")
    sizing_material = material or MATERIALS["concrete"]
    masses = np.array(
        [required_mass_for_energy(target_kwh, h, sizing_material) for h in heights],
        dtype=float,
    )
    return pd.DataFrame(
        {
            "height": np.asarray(heights, dtype=float),
            "required_mass_kg": masses,
            "required_mass_t": masses / 1000.0,
        }
    )


def generate_school_analytics(
    constant_mass: float,
    constant_height: float,
    schools: Sequence[SchoolDemand] = SCHOOL_ENERGY_DEMANDS,
    materials: Optional[Iterable[Material]] = None,
) -> pd.DataFrame:
    """Per-school, per-material sizing for a daily energy demand.

    ``required_height_m`` holds the mass at ``constant_mass``;
    ``required_mass_kg`` holds the height at ``constant_height``.
    """

    catalog = _catalog(materials)
    rows = []
    for school in schools:
        for material in catalog:
            rows.append(
                {
                    "school": school.name,
                    "daily_energy_kwh": school.daily_energy_kwh,
                    "description": school.description,
                    "typical_load": school.typical_load,
                    "material": material.name,
                    "round_trip_efficiency": material.round_trip_efficiency * 100.0,
                    "required_height_m": required_height_for_energy(
                        school.daily_energy_kwh, constant_mass, material
                    ),
                    "required_mass_kg": required_mass_for_energy(
                        school.daily_energy_kwh, constant_height, material
                    ),
                    "color": material.color,
                }
            )
    return pd.DataFrame(rows)


__all__ = [
    "DEMAND_SAMPLES_KWH",
    "HEIGHT_SAMPLES",
    "MASS_SAMPLES",
    "generate_efficiency_breakdown",
    "generate_energy_demand_sweep",
    "generate_energy_density_comparison",
    "generate_facility_profiles",
    "generate_fixed_efficiency_height_table",
    "generate_fixed_efficiency_mass_table",
    "generate_height_sweep",
    "generate_height_tradeoff",
    "generate_mass_sweep",
    "generate_school_analytics",
]
