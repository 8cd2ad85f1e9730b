"""Closed-form energy model for a gravity energy storage system (GESS).

All functions are pure. Two efficiency paths are tracked side by side:

- the material's ``lift_efficiency × generation_efficiency`` product drives
  the input/output energy figures, the headline round-trip efficiency and the
  sizing inversions;
- the midpoint of the generic ``efficiency`` range, scaled by the system
  efficiency, drives recovered energy and everything derived from it
  (energy density, cost effectiveness).
"""
from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict

from services.materials import (
    GRAVITY,
    J_PER_KWH,
    InvalidParameterError,
    Material,
)

MAX_TOTAL_DEGRADATION = 0.5
REFERENCE_LOAD_KG = 5000.0
MAX_LOAD_FACTOR = 2.0


def _ensure_finite(value: float, name: str) -> None:
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # ints beyond float range are still finite
        finite = isinstance(value, int)
    if not finite:
        raise InvalidParameterError(name, "must be a finite number")


def _ensure_positive(value: float, name: str) -> None:
    """Raise InvalidParameterError when a value is non-positive or non-finite."""

    _ensure_finite(value, name)
    if value <= 0:
        raise InvalidParameterError(name, "must be positive")


def _ensure_non_negative(value: float, name: str) -> None:
    _ensure_finite(value, name)
    if value < 0:
        raise InvalidParameterError(name, "must be non-negative")


def _ensure_percent(value: float, name: str) -> None:
    _ensure_finite(value, name)
    if not 0.0 <= value <= 100.0:
        raise InvalidParameterError(name, "must be between 0 and 100")


@dataclass(frozen=True)
class OperatingParameters:
    """Per-calculation inputs.

    Units:
    - ``mass``: kg.
    - ``height``: m.
    - ``system_efficiency``: percent (0..100).
    - ``cycles``: completed charge/discharge cycles.
    - ``time_elapsed``: hours the energy sits in storage.
    """

    mass: float
    height: float
    system_efficiency: float
    cycles: int
    time_elapsed: float = 1.0

    def validate(self) -> None:
        _ensure_positive(self.mass, "mass")
        _ensure_positive(self.height, "height")
        _ensure_percent(self.system_efficiency, "system_efficiency")
        if isinstance(self.cycles, bool):
            raise InvalidParameterError("cycles", "must be a whole number")
        _ensure_non_negative(self.cycles, "cycles")
        try:
            whole = int(self.cycles) == self.cycles
        except (OverflowError, ValueError) as exc:
            raise InvalidParameterError("cycles", "must be a whole number") from exc
        if not whole:
            raise InvalidParameterError("cycles", "must be a whole number")
        _ensure_non_negative(self.time_elapsed, "time_elapsed")


@dataclass(frozen=True)
class EnergyResult:
    """Derived metrics for one material under one set of parameters.

    ``stored_output_energy_kwh`` is the generator output after self-discharge
    over ``time_elapsed``. ``power_loss_j`` is the nominal energy lost between potential and
    recovered energy (J); no time base is implied.
    """

    potential_energy_j: float
    recovered_energy_j: float
    input_energy_kwh: float
    output_energy_kwh: float
    stored_output_energy_kwh: float
    power_loss_j: float
    total_lifespan: int
    volume_required_m3: float
    energy_density_kwh_m3: float
    round_trip_efficiency_pct: float
    self_discharge_rate_pct: float
    degradation_rate_pct: float
    cost_effectiveness: float

    @property
    def efficiency_pct(self) -> float:
        return self.recovered_energy_j / self.potential_energy_j * 100.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def potential_energy(mass: float, height: float) -> float:
    """Return E = m·g·h in joules."""

    _ensure_positive(mass, "mass")
    _ensure_positive(height, "height")
    return mass * GRAVITY * height


def calc_volume(mass: float, density: float) -> float:
    """Volume in m³ occupied by ``mass`` kg of a medium."""

    _ensure_non_negative(mass, "mass")
    _ensure_positive(density, "density")
    return mass / density


def efficiency_midpoint(material: Material) -> float:
    return material.efficiency.midpoint


def round_trip_efficiency(material: Material) -> float:
    """Lift × generation efficiency as a fraction."""

    return material.round_trip_efficiency


def apply_self_discharge(energy: float, material: Material, hours_elapsed: float) -> float:
    """Decay stored energy by the medium's hourly self-discharge rate.

    Only the evaporating medium leaks energy; solids return ``energy``
    unchanged. ``hours_elapsed == 0`` is always the identity.
    """

    _ensure_non_negative(hours_elapsed, "hours_elapsed")
    if not material.evaporates or hours_elapsed == 0:
        return energy
    return energy * (1.0 - material.self_discharge_rate / 100.0) ** hours_elapsed


def total_degradation(material: Material, cycles: int) -> float:
    """Linear efficiency loss accumulated over ``cycles``, capped at 50%."""

    _ensure_non_negative(cycles, "cycles")
    if material.efficiency_loss == 0:
        return 0.0
    # Compare before dividing so huge integer cycle counts never hit float conversion.
    if cycles >= MAX_TOTAL_DEGRADATION * material.lifespan_cycles / material.efficiency_loss:
        return MAX_TOTAL_DEGRADATION
    return material.efficiency_loss * cycles / material.lifespan_cycles


def degradation_factor(material: Material, cycles: int) -> float:
    """Average efficiency factor over the cycle history (never below 0.75)."""

    return 1.0 - total_degradation(material, cycles) / 2.0


def effective_lifespan(material: Material, mass: float) -> int:
    """Nominal lifespan scaled down by a load factor relative to 5 t."""

    _ensure_positive(mass, "mass")
    load_factor = min(MAX_LOAD_FACTOR, mass / REFERENCE_LOAD_KG)
    scaled = material.lifespan_cycles / load_factor if load_factor > 0 else math.inf
    if not math.isfinite(scaled):
        raise InvalidParameterError("mass", "too small to derive a finite lifespan")
    return int(math.floor(scaled))


def calculate(material: Material, params: OperatingParameters) -> EnergyResult:
    """Evaluate the full energy model for ``material`` under ``params``."""

    params.validate()
    _ensure_positive(material.density, "density")

    mass = params.mass
    potential_j = potential_energy(mass, params.height)
    potential_kwh = potential_j / J_PER_KWH

    input_kwh = potential_kwh / material.lift_efficiency
    output_kwh = potential_kwh * material.generation_efficiency
    stored_output_kwh = apply_self_discharge(output_kwh, material, params.time_elapsed)

    baseline_j = potential_j * efficiency_midpoint(material) * (params.system_efficiency / 100.0)
    discharged_j = apply_self_discharge(baseline_j, material, params.time_elapsed)
    recovered_j = discharged_j * degradation_factor(material, params.cycles)

    volume = calc_volume(mass, material.density)
    energy_density = (recovered_j / J_PER_KWH) / volume
    lifespan = effective_lifespan(material, mass)
    cost_effectiveness = (energy_density * lifespan) / (material.relative_cost * volume)

    logging.getLogger(__name__).debug(
        "%s: potential=%.1f J recovered=%.1f J volume=%.3f m3",
        material.name,
        potential_j,
        recovered_j,
        volume,
    )

    return EnergyResult(
        potential_energy_j=potential_j,
        recovered_energy_j=recovered_j,
        input_energy_kwh=input_kwh,
        output_energy_kwh=output_kwh,
        stored_output_energy_kwh=stored_output_kwh,
        power_loss_j=potential_j - recovered_j,
        total_lifespan=lifespan,
        volume_required_m3=volume,
        energy_density_kwh_m3=energy_density,
        round_trip_efficiency_pct=round_trip_efficiency(material) * 100.0,
        self_discharge_rate_pct=material.self_discharge_rate,
        degradation_rate_pct=material.efficiency_loss * 100.0,
        cost_effectiveness=cost_effectiveness,
    )


def calculate_gess_results(
    material: Material,
    mass: float,
    height: float,
    system_efficiency: float,
    cycles: int,
    time_elapsed: float = 1.0,
) -> EnergyResult:
    """Positional convenience wrapper around :func:`calculate`."""

    params = OperatingParameters(
        mass=mass,
        height=height,
        system_efficiency=system_efficiency,
        cycles=cycles,
        time_elapsed=time_elapsed,
    )
    return calculate(material, params)


def _target_energy_j(target_kwh: float, material: Material) -> tuple[float, float]:
    _ensure_non_negative(target_kwh, "target_kwh")
    eta_rt = round_trip_efficiency(material)
    if eta_rt <= 0:
        raise InvalidParameterError("round_trip_efficiency", "must be positive")
    return target_kwh * J_PER_KWH, eta_rt


def required_mass_for_energy(target_kwh: float, height: float, material: Material) -> float:
    """Solve E = m·g·h·η for m (kg) at a fixed lift height."""

    _ensure_positive(height, "height")
    target_j, eta_rt = _target_energy_j(target_kwh, material)
    return target_j / (GRAVITY * height * eta_rt)


def required_height_for_energy(target_kwh: float, mass: float, material: Material) -> float:
    """Solve E = m·g·h·η for h (m) with a fixed mass."""

    _ensure_positive(mass, "mass")
    target_j, eta_rt = _target_energy_j(target_kwh, material)
    return target_j / (mass * GRAVITY * eta_rt)


__all__ = [
    "EnergyResult",
    "InvalidParameterError",
    "OperatingParameters",
    "apply_self_discharge",
    "calc_volume",
    "calculate",
    "calculate_gess_results",
    "degradation_factor",
    "effective_lifespan",
    "efficiency_midpoint",
    "potential_energy",
    "required_height_for_energy",
    "required_mass_for_energy",
    "round_trip_efficiency",
    "total_degradation",
]
