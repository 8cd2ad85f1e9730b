"""Material catalog, constants and demand profiles for the GESS model.

Efficiencies are stored as fractions (0..1). Self-discharge rates are stored
in percent per hour because that is how the evaporation figures are quoted.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

GRAVITY = 9.81  # m/s²
J_PER_KWH = 3.6e6
KWH_TO_KJ = 3600.0
J_PER_MJ = 1.0e6

# Fixed project efficiencies used by the worked examples and scenario tables.
ETA_LIFT = 0.90
ETA_GEN = 0.90
ETA_RT = ETA_LIFT * ETA_GEN

EVAPORATING_MEDIUM = "Water"


class InvalidParameterError(ValueError):
    """Raised when a model input is outside its physical domain."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(f"{field_name}: {message}")
        self.field = field_name


def _ensure_fraction(value: float, name: str) -> None:
    if not math.isfinite(value) or not 0.0 <= value <= 1.0:
        raise InvalidParameterError(name, "must be a fraction between 0 and 1")


@dataclass(frozen=True)
class EfficiencyRange:
    min: float
    max: float

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2.0


@dataclass(frozen=True)
class PowerOutput:
    """Descriptive power envelope in kW with a free-form duration label."""

    min_kw: float
    max_kw: float
    duration: str


@dataclass(frozen=True)
class Material:
    """Storage medium properties.

    Units:
    - ``density``: kg/m³.
    - ``efficiency_loss``: fraction of efficiency lost per cycle.
    - ``self_discharge_rate``: percent of stored energy lost per hour.
    - ``relative_cost``: cost tier (1 = low, 3 = high), not a currency.
    """

    name: str
    density: float
    lifespan_cycles: int
    efficiency_loss: float
    efficiency: EfficiencyRange
    lift_efficiency: float
    generation_efficiency: float
    self_discharge_rate: float
    relative_cost: int
    color: str = "#888888"
    power_output: Optional[PowerOutput] = None
    properties: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not math.isfinite(self.density) or self.density <= 0:
            raise InvalidParameterError("density", "must be positive")
        if self.lifespan_cycles <= 0:
            raise InvalidParameterError("lifespan_cycles", "must be positive")
        if self.relative_cost <= 0:
            raise InvalidParameterError("relative_cost", "must be positive")
        _ensure_fraction(self.efficiency_loss, "efficiency_loss")
        _ensure_fraction(self.efficiency.min, "efficiency.min")
        _ensure_fraction(self.efficiency.max, "efficiency.max")
        if self.efficiency.min > self.efficiency.max:
            raise InvalidParameterError("efficiency", "min must not exceed max")
        _ensure_fraction(self.lift_efficiency, "lift_efficiency")
        _ensure_fraction(self.generation_efficiency, "generation_efficiency")
        if self.lift_efficiency == 0 or self.generation_efficiency == 0:
            raise InvalidParameterError("lift_efficiency", "lift and generation efficiencies must be positive")
        if not math.isfinite(self.self_discharge_rate) or not 0.0 <= self.self_discharge_rate <= 100.0:
            raise InvalidParameterError("self_discharge_rate", "must be a percentage between 0 and 100")

    @property
    def key(self) -> str:
        return self.name.lower()

    @property
    def round_trip_efficiency(self) -> float:
        """Lift × generation efficiency as a fraction."""
        return self.lift_efficiency * self.generation_efficiency

    @property
    def evaporates(self) -> bool:
        return self.name == EVAPORATING_MEDIUM


MATERIALS: Dict[str, Material] = {
    "water": Material(
        name="Water",
        density=1000.0,  # at 20 °C
        lifespan_cycles=50_000,  # pumped hydro, ~1000 cycles/year over 50 years
        efficiency_loss=0.001,
        efficiency=EfficiencyRange(0.56, 0.77),  # pump + turbine
        lift_efficiency=0.85,
        generation_efficiency=0.88,
        self_discharge_rate=0.1,  # evaporation
        relative_cost=2,
        color="#60a5fa",
        power_output=PowerOutput(500.0, 1000.0, "minutes"),
        properties=("Evaporation", "Turbine Compatibility", "High Power Output"),
    ),
    "sand": Material(
        name="Sand",
        density=1600.0,  # dry bulk
        lifespan_cycles=100_000,
        efficiency_loss=0.0,
        efficiency=EfficiencyRange(0.60, 0.77),  # conveyor + motor
        lift_efficiency=0.88,
        generation_efficiency=0.86,
        self_discharge_rate=0.0,
        relative_cost=1,
        color="#fbbf24",
        power_output=PowerOutput(150.0, 300.0, "10-30 min"),
        properties=("Zero Self-Discharge", "Low Cost", "Granular Flow"),
    ),
    "concrete": Material(
        name="Concrete",
        density=2400.0,
        lifespan_cycles=100_000,
        efficiency_loss=0.0,
        efficiency=EfficiencyRange(0.75, 0.90),  # crane systems
        lift_efficiency=0.92,
        generation_efficiency=0.90,
        self_discharge_rate=0.0,
        relative_cost=3,
        color="#9ca3af",
        power_output=PowerOutput(50.0, 100.0, "hours"),
        properties=("High Density", "Long Lifespan", "Precision Control"),
    ),
}


def get_material(key: str) -> Material:
    """Look up a catalog material by key or display name (case-insensitive)."""

    material = MATERIALS.get(key.strip().lower())
    if material is None:
        raise InvalidParameterError("material", f"unknown material '{key}'")
    return material


CRITERIA = ("efficiency", "lifespan", "cost", "energy_density")


@dataclass(frozen=True)
class Scenario:
    """Deployment scenario: optional constraints plus a ranking criterion.

    ``max_height`` is compared against the caller's lift height because height
    is a global design parameter rather than a material property.
    """

    key: str
    name: str
    priority: str
    description: str = ""
    max_volume: Optional[float] = None  # m³
    max_height: Optional[float] = None  # m
    max_relative_cost: Optional[int] = None
    min_power_kw: Optional[float] = None


SCENARIOS: Dict[str, Scenario] = {
    "urban_constrained": Scenario(
        key="urban_constrained",
        name="Urban Constrained",
        priority="energy_density",
        description="Limited space urban deployment",
        max_volume=500.0,
        max_height=100.0,
    ),
    "low_budget": Scenario(
        key="low_budget",
        name="Low Budget",
        priority="cost",
        description="Cost-optimized rural installation",
        max_relative_cost=1,
        max_height=150.0,
    ),
    "high_power": Scenario(
        key="high_power",
        name="High Power",
        priority="efficiency",
        description="Grid-scale power delivery",
        min_power_kw=500.0,
        max_height=200.0,
    ),
}


@dataclass(frozen=True)
class FacilityProfile:
    name: str
    description: str
    typical_loads: str
    power_kw: float
    time_h: float
    height_m: float

    @property
    def energy_kwh(self) -> float:
        return self.power_kw * self.time_h


FACILITY_PROFILES: Tuple[FacilityProfile, ...] = (
    FacilityProfile("School", "Overnight base load", "Lighting, servers, refrigeration", 10.0, 10.0, 100.0),
    FacilityProfile("Small Clinic", "Critical loads through an outage", "Vaccine fridges, lighting, IT", 5.0, 12.0, 100.0),
    FacilityProfile("Office Building", "Evening peak shaving", "HVAC, lighting, workstations", 50.0, 4.0, 150.0),
    FacilityProfile("Community Center", "Evening events", "Lighting, audio, kitchen", 20.0, 5.0, 80.0),
    FacilityProfile("Telecom Tower", "Backup supply", "Radios, rectifiers, cooling", 3.0, 24.0, 60.0),
)


@dataclass(frozen=True)
class SchoolDemand:
    name: str
    daily_energy_kwh: float
    description: str
    typical_load: str


SCHOOL_ENERGY_DEMANDS: Tuple[SchoolDemand, ...] = (
    SchoolDemand("Primary School", 150.0, "300 pupils, single building", "Lighting, computers, kitchen"),
    SchoolDemand("Secondary School", 400.0, "1,000 pupils with labs", "Lighting, labs, IT suites, HVAC"),
    SchoolDemand("Boarding School", 800.0, "Residential campus", "Dormitories, kitchens, laundry, HVAC"),
    SchoolDemand("University Building", 1500.0, "Teaching and research block", "Lecture halls, labs, data rooms"),
)
