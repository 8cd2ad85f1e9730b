"""Material ranking and scenario recommendations over the fixed catalog."""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Iterable, Optional, Union

import pandas as pd

from services.gess_core import calculate_gess_results
from services.materials import (
    CRITERIA,
    J_PER_MJ,
    MATERIALS,
    SCENARIOS,
    InvalidParameterError,
    Material,
    Scenario,
)

# Criterion name -> comparison column. All columns are "higher is better".
CRITERION_COLUMNS: Dict[str, str] = {
    "efficiency": "efficiency",
    "lifespan": "lifespan",
    "cost": "cost_effectiveness",
    "energy_density": "energy_density",
}


@dataclass(frozen=True)
class MaterialSummary:
    """One row of the per-material comparison table.

    Units:
    - ``potential_energy_mj`` / ``recovered_energy_mj``: MJ.
    - ``efficiency``: recovered / potential energy, percent.
    - ``lifespan``: effective cycles after load scaling.
    - ``volume``: m³.
    - ``energy_density``: kWh/m³ of recovered energy.
    - ``self_discharge``: %/hour.
    - ``round_trip_efficiency``: lift × generation, percent.
    """

    material: str
    potential_energy_mj: float
    recovered_energy_mj: float
    efficiency: float
    lifespan: int
    volume: float
    cost_effectiveness: float
    energy_density: float
    self_discharge: float
    relative_cost: int
    round_trip_efficiency: float
    max_power_kw: Optional[float]
    color: str

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "MaterialSummary":
        values = {f.name: row[f.name] for f in fields(cls)}
        values["lifespan"] = int(values["lifespan"])
        values["relative_cost"] = int(values["relative_cost"])
        if values["max_power_kw"] is not None and pd.isna(values["max_power_kw"]):
            values["max_power_kw"] = None
        return cls(**values)


COMPARISON_COLUMNS: tuple[str, ...] = tuple(f.name for f in fields(MaterialSummary))


def _summarize(
    material: Material,
    mass: float,
    height: float,
    system_efficiency: float,
    cycles: int,
) -> Dict[str, Any]:
    result = calculate_gess_results(material, mass, height, system_efficiency, cycles)
    return {
        "material": material.name,
        "potential_energy_mj": result.potential_energy_j / J_PER_MJ,
        "recovered_energy_mj": result.recovered_energy_j / J_PER_MJ,
        "efficiency": result.efficiency_pct,
        "lifespan": result.total_lifespan,
        "volume": result.volume_required_m3,
        "cost_effectiveness": result.cost_effectiveness,
        "energy_density": result.energy_density_kwh_m3,
        "self_discharge": material.self_discharge_rate,
        "relative_cost": material.relative_cost,
        "round_trip_efficiency": result.round_trip_efficiency_pct,
        "max_power_kw": material.power_output.max_kw if material.power_output else None,
        "color": material.color,
    }


def generate_comparison_data(
    mass: float,
    height: float,
    system_efficiency: float,
    cycles: int,
    materials: Optional[Iterable[Material]] = None,
) -> pd.DataFrame:
    """Return one comparison row per material, in catalog order."""

    catalog = list(MATERIALS.values()) if materials is None else list(materials)
    rows = [_summarize(m, mass, height, system_efficiency, cycles) for m in catalog]
    return pd.DataFrame(rows, columns=list(COMPARISON_COLUMNS))


def _select_best(comparison_df: pd.DataFrame, criterion: str, *, strict: bool) -> MaterialSummary:
    """Pick the row maximizing ``criterion``; the first row wins ties."""

    if comparison_df.empty:
        raise InvalidParameterError("materials", "at least one material is required")

    column = CRITERION_COLUMNS.get(criterion)
    if column is None:
        if strict:
            raise InvalidParameterError(
                "criterion", f"unsupported criterion '{criterion}'; expected one of {', '.join(CRITERIA)}"
            )
        logging.getLogger(__name__).warning(
            "Optimization criterion '%s' is not recognized; falling back to '%s'.",
            criterion,
            comparison_df.iloc[0]["material"],
        )
        return MaterialSummary.from_row(comparison_df.iloc[0].to_dict())

    # idxmax returns the first occurrence of the maximum.
    best_idx = comparison_df[column].astype(float).idxmax()
    return MaterialSummary.from_row(comparison_df.loc[best_idx].to_dict())


def find_optimal_material(
    mass: float,
    height: float,
    system_efficiency: float,
    cycles: int,
    criterion: str,
    *,
    strict: bool = False,
) -> MaterialSummary:
    """Return the catalog material that maximizes ``criterion``.

    Supported criteria are ``efficiency``, ``lifespan``, ``cost`` (cost
    effectiveness) and ``energy_density``. Ties resolve to the material that
    appears first in the catalog. An unknown criterion logs a warning and
    returns the first catalog material unless ``strict`` is set, in which case
    ``InvalidParameterError`` is raised.
    """

    comparison_df = generate_comparison_data(mass, height, system_efficiency, cycles)
    return _select_best(comparison_df, criterion, strict=strict)


def resolve_scenario(scenario: Union[Scenario, str]) -> Scenario:
    if isinstance(scenario, Scenario):
        return scenario
    resolved = SCENARIOS.get(str(scenario))
    if resolved is None:
        raise InvalidParameterError("scenario", f"unknown scenario '{scenario}'")
    return resolved


def filter_by_scenario(comparison_df: pd.DataFrame, scenario: Scenario, height: float) -> pd.DataFrame:
    """Return the rows that satisfy every constraint the scenario declares."""

    mask = pd.Series(True, index=comparison_df.index)
    if scenario.max_volume is not None:
        mask &= comparison_df["volume"] <= scenario.max_volume
    if scenario.max_height is not None and height > scenario.max_height:
        mask &= False
    if scenario.max_relative_cost is not None:
        mask &= comparison_df["relative_cost"] <= scenario.max_relative_cost
    if scenario.min_power_kw is not None:
        power = pd.to_numeric(comparison_df["max_power_kw"], errors="coerce")
        mask &= power.fillna(float("-inf")) >= scenario.min_power_kw
    return comparison_df.loc[mask]


def recommend_for_scenario(
    scenario: Union[Scenario, str],
    mass: float,
    height: float,
    system_efficiency: float,
    cycles: int,
) -> MaterialSummary:
    """Recommend a material for a deployment scenario.

    Materials are filtered by the scenario constraints and ranked by its
    priority criterion. When no material satisfies the constraints the full
    catalog is ranked instead, so a recommendation is always returned.
    """

    resolved = resolve_scenario(scenario)
    comparison_df = generate_comparison_data(mass, height, system_efficiency, cycles)
    candidates = filter_by_scenario(comparison_df, resolved, height)
    if candidates.empty:
        logging.getLogger(__name__).info(
            "No material satisfies scenario '%s' constraints; ranking the full catalog.",
            resolved.key,
        )
        candidates = comparison_df
    return _select_best(candidates, resolved.priority, strict=False)


__all__ = [
    "COMPARISON_COLUMNS",
    "CRITERION_COLUMNS",
    "MaterialSummary",
    "filter_by_scenario",
    "find_optimal_material",
    "generate_comparison_data",
    "recommend_for_scenario",
    "resolve_scenario",
]
