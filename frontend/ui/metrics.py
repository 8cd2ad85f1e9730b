"""Reusable KPI helpers for Streamlit pages."""

import math
from dataclasses import dataclass

import streamlit as st

from frontend.ui.rendering import MetricSpec, render_metrics
from services.gess_core import EnergyResult
from services.materials import J_PER_KWH, Material


@dataclass
class KPIResults:
    material: str
    potential_energy_j: float
    recovered_energy_j: float
    recovered_energy_kwh: float
    input_energy_kwh: float
    output_energy_kwh: float
    stored_output_energy_kwh: float
    energy_loss_j: float
    efficiency_pct: float
    round_trip_efficiency_pct: float
    volume_m3: float
    energy_density_kwh_m3: float
    total_lifespan: int
    self_discharge_pct_per_day: float
    degradation_pct_per_cycle: float
    cost_effectiveness: float


def compute_kpis(material: Material, result: EnergyResult) -> KPIResults:
    """Derive display KPIs from a calculator result for reuse across pages."""
    return KPIResults(
        material=material.name,
        potential_energy_j=result.potential_energy_j,
        recovered_energy_j=result.recovered_energy_j,
        recovered_energy_kwh=result.recovered_energy_j / J_PER_KWH,
        input_energy_kwh=result.input_energy_kwh,
        output_energy_kwh=result.output_energy_kwh,
        stored_output_energy_kwh=result.stored_output_energy_kwh,
        energy_loss_j=result.power_loss_j,
        efficiency_pct=result.efficiency_pct,
        round_trip_efficiency_pct=result.round_trip_efficiency_pct,
        volume_m3=result.volume_required_m3,
        energy_density_kwh_m3=result.energy_density_kwh_m3,
        total_lifespan=result.total_lifespan,
        self_discharge_pct_per_day=result.self_discharge_rate_pct * 24.0,
        degradation_pct_per_cycle=result.degradation_rate_pct,
        cost_effectiveness=result.cost_effectiveness,
    )


def format_energy(joules: float) -> str:
    """Format an energy in J with the largest sensible SI prefix."""
    if math.isnan(joules):
        return "—"
    magnitude = abs(joules)
    if magnitude >= 1e9:
        return f"{joules / 1e9:,.2f} GJ"
    if magnitude >= 1e6:
        return f"{joules / 1e6:,.2f} MJ"
    if magnitude >= 1e3:
        return f"{joules / 1e3:,.2f} kJ"
    return f"{joules:,.2f} J"


def _fmt_percent(value: float) -> str:
    if math.isnan(value):
        return "—"
    return f"{value:,.1f}%"


def render_primary_metrics(kpis: KPIResults) -> None:
    """Render the headline energy cards shown after each recalculation."""
    specs = [
        MetricSpec(
            "Potential energy",
            format_energy(kpis.potential_energy_j),
            help="E = m·g·h before any losses.",
        ),
        MetricSpec(
            "Recovered energy",
            format_energy(kpis.recovered_energy_j),
            help="After material efficiency, system efficiency, self-discharge and cycle degradation.",
            caption=f"{kpis.recovered_energy_kwh:,.3f} kWh",
        ),
        MetricSpec(
            "Energy loss",
            format_energy(kpis.energy_loss_j),
            help="Nominal energy lost between lifting and recovery.",
        ),
        MetricSpec(
            "Round-trip efficiency",
            _fmt_percent(kpis.round_trip_efficiency_pct),
            help="Lift efficiency × generation efficiency for the selected medium.",
        ),
        MetricSpec(
            "Lifespan",
            f"{kpis.total_lifespan:,} cycles",
            help="Nominal cycle life scaled by load relative to a 5 t reference mass.",
        ),
    ]
    render_metrics(st.columns(len(specs)), specs)


def render_secondary_metrics(kpis: KPIResults) -> None:
    """Render the supporting material metrics below the headline cards."""
    specs = [
        MetricSpec("Volume required", f"{kpis.volume_m3:,.2f} m³"),
        MetricSpec("Energy density", f"{kpis.energy_density_kwh_m3:,.3f} kWh/m³"),
        MetricSpec(
            "Input / output energy",
            f"{kpis.input_energy_kwh:,.3f} / {kpis.stored_output_energy_kwh:,.3f} kWh",
            help="Energy drawn to lift the mass and generator output left after the storage time.",
            caption=f"{kpis.output_energy_kwh:,.3f} kWh before storage",
        ),
        MetricSpec("Self-discharge", f"{kpis.self_discharge_pct_per_day:,.3f}%/day"),
        MetricSpec("Degradation", f"{kpis.degradation_pct_per_cycle:,.3f}%/cycle"),
        MetricSpec("Cost effectiveness", f"{kpis.cost_effectiveness:,.2f}"),
    ]
    render_metrics(st.columns(len(specs)), specs)
