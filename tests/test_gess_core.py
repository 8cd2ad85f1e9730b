import math
import unittest

import pytest

from services.gess_core import (
    InvalidParameterError,
    OperatingParameters,
    apply_self_discharge,
    calc_volume,
    calculate,
    calculate_gess_results,
    degradation_factor,
    effective_lifespan,
    potential_energy,
    required_height_for_energy,
    required_mass_for_energy,
    total_degradation,
)
from services.materials import GRAVITY, J_PER_KWH, MATERIALS, EfficiencyRange, Material

WATER = MATERIALS["water"]
SAND = MATERIALS["sand"]
CONCRETE = MATERIALS["concrete"]


def test_concrete_reference_case_matches_hand_calculation():
    result = calculate_gess_results(CONCRETE, 5000.0, 100.0, 85.0, 1000)

    assert result.potential_energy_j == pytest.approx(4_905_000.0)
    assert result.round_trip_efficiency_pct == pytest.approx(82.8)
    assert result.input_energy_kwh == pytest.approx(4_905_000.0 / 3.6e6 / 0.92)
    assert result.input_energy_kwh == pytest.approx(1.48098, rel=1e-4)
    assert result.output_energy_kwh == pytest.approx(1.22625, rel=1e-6)
    assert result.volume_required_m3 == pytest.approx(5000.0 / 2400.0)
    assert result.total_lifespan == 100_000


def test_potential_energy_is_linear_in_mass_and_height():
    base = potential_energy(1200.0, 37.0)

    assert potential_energy(2400.0, 37.0) == pytest.approx(2 * base)
    assert potential_energy(1200.0, 74.0) == pytest.approx(2 * base)


def test_recovered_energy_scales_with_mass_for_every_material():
    for material in MATERIALS.values():
        single = calculate_gess_results(material, 3000.0, 80.0, 90.0, 500)
        double = calculate_gess_results(material, 6000.0, 80.0, 90.0, 500)
        assert double.recovered_energy_j == pytest.approx(2 * single.recovered_energy_j)


def test_zero_cycles_and_zero_time_returns_baseline():
    for material in MATERIALS.values():
        result = calculate_gess_results(material, 5000.0, 100.0, 90.0, 0, time_elapsed=0.0)
        baseline = result.potential_energy_j * material.efficiency.midpoint * 0.90
        assert result.recovered_energy_j == pytest.approx(baseline)
        assert result.power_loss_j == pytest.approx(result.potential_energy_j - baseline)


def test_self_discharge_is_identity_for_solids():
    for material in (SAND, CONCRETE):
        for hours in (0.0, 1.0, 24.0, 10_000.0):
            assert apply_self_discharge(1234.5, material, hours) == 1234.5


def test_water_self_discharge_decays_exponentially_and_monotonically():
    energies = [apply_self_discharge(1000.0, WATER, h) for h in (0.0, 1.0, 5.0, 24.0, 240.0)]

    assert energies[0] == 1000.0
    assert energies[1] == pytest.approx(999.0)
    assert energies[3] == pytest.approx(1000.0 * 0.999**24)
    assert all(a >= b for a, b in zip(energies, energies[1:]))


def test_self_discharge_rejects_negative_hours():
    with pytest.raises(InvalidParameterError) as excinfo:
        apply_self_discharge(100.0, WATER, -1.0)
    assert excinfo.value.field == "hours_elapsed"


def test_degradation_is_capped_at_half():
    assert total_degradation(WATER, 10**12) == 0.5
    assert degradation_factor(WATER, 10**12) == 0.75
    assert degradation_factor(CONCRETE, 10**12) == 1.0

    worn = calculate_gess_results(WATER, 5000.0, 100.0, 85.0, 10**12, time_elapsed=0.0)
    baseline = worn.potential_energy_j * WATER.efficiency.midpoint * 0.85
    assert worn.recovered_energy_j == pytest.approx(baseline * 0.75)
    assert worn.recovered_energy_j > 0


def test_astronomical_cycle_counts_stay_capped():
    worn = calculate_gess_results(WATER, 5000.0, 100.0, 85.0, 10**400, time_elapsed=0.0)
    baseline = worn.potential_energy_j * WATER.efficiency.midpoint * 0.85

    assert total_degradation(WATER, 10**400) == 0.5
    assert total_degradation(SAND, 10**400) == 0.0
    assert worn.recovered_energy_j == pytest.approx(baseline * 0.75)


def test_self_discharge_applies_inside_full_calculation():
    water = calculate_gess_results(WATER, 5000.0, 100.0, 85.0, 0, time_elapsed=24.0)
    baseline = water.potential_energy_j * WATER.efficiency.midpoint * 0.85

    assert water.recovered_energy_j == pytest.approx(baseline * 0.999**24)
    assert water.stored_output_energy_kwh == pytest.approx(water.output_energy_kwh * 0.999**24)

    fresh = calculate_gess_results(SAND, 5000.0, 100.0, 85.0, 0, time_elapsed=0.0)
    for hours in (1.0, 24.0, 168.0):
        stored = calculate_gess_results(SAND, 5000.0, 100.0, 85.0, 0, time_elapsed=hours)
        assert stored.recovered_energy_j == fresh.recovered_energy_j
        assert stored.stored_output_energy_kwh == stored.output_energy_kwh


def test_linear_degradation_below_cap():
    # 0.001 loss per cycle over a 50k-cycle life: 1000 cycles -> 2e-5 total.
    assert total_degradation(WATER, 1000) == pytest.approx(2e-5)
    assert degradation_factor(WATER, 1000) == pytest.approx(1 - 1e-5)


def test_effective_lifespan_uses_load_factor():
    assert effective_lifespan(SAND, 5000.0) == 100_000
    assert effective_lifespan(SAND, 10_000.0) == 50_000
    assert effective_lifespan(SAND, 20_000.0) == 50_000  # load factor capped at 2
    assert effective_lifespan(WATER, 3000.0) == math.floor(50_000 / 0.6)


def test_vanishing_mass_is_rejected_instead_of_overflowing():
    with pytest.raises(InvalidParameterError) as excinfo:
        calculate_gess_results(WATER, 1e-300, 100.0, 85.0, 10)
    assert excinfo.value.field == "mass"


def test_energy_density_and_cost_effectiveness():
    result = calculate_gess_results(SAND, 5000.0, 100.0, 85.0, 1000)

    volume = 5000.0 / 1600.0
    expected_density = (result.recovered_energy_j / J_PER_KWH) / volume
    assert result.energy_density_kwh_m3 == pytest.approx(expected_density)
    assert result.cost_effectiveness == pytest.approx(expected_density * 100_000 / (1 * volume))


def test_result_reports_rates_in_percent():
    result = calculate_gess_results(WATER, 5000.0, 100.0, 85.0, 1000)

    assert result.self_discharge_rate_pct == pytest.approx(0.1)
    assert result.degradation_rate_pct == pytest.approx(0.1)
    assert result.to_dict()["total_lifespan"] == 50_000


@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"mass": 0.0}, "mass"),
        ({"mass": -5.0}, "mass"),
        ({"height": 0.0}, "height"),
        ({"height": float("nan")}, "height"),
        ({"system_efficiency": 120.0}, "system_efficiency"),
        ({"cycles": -1}, "cycles"),
        ({"cycles": 1.5}, "cycles"),
        ({"cycles": float("inf")}, "cycles"),
        ({"cycles": float("nan")}, "cycles"),
        ({"time_elapsed": -2.0}, "time_elapsed"),
    ],
)
def test_invalid_operating_parameters_raise(kwargs, field):
    values = {"mass": 5000.0, "height": 100.0, "system_efficiency": 85.0, "cycles": 100, "time_elapsed": 1.0}
    values.update(kwargs)

    with pytest.raises(InvalidParameterError) as excinfo:
        calculate(CONCRETE, OperatingParameters(**values))
    assert excinfo.value.field == field


def test_invalid_material_definitions_raise():
    with pytest.raises(InvalidParameterError):
        Material(
            name="Lead",
            density=0.0,
            lifespan_cycles=1000,
            efficiency_loss=0.0,
            efficiency=EfficiencyRange(0.5, 0.6),
            lift_efficiency=0.9,
            generation_efficiency=0.9,
            self_discharge_rate=0.0,
            relative_cost=2,
        )
    with pytest.raises(InvalidParameterError):
        Material(
            name="Gravel",
            density=1800.0,
            lifespan_cycles=1000,
            efficiency_loss=0.0,
            efficiency=EfficiencyRange(0.8, 0.6),
            lift_efficiency=0.9,
            generation_efficiency=0.9,
            self_discharge_rate=0.0,
            relative_cost=1,
        )


def test_calc_volume_requires_positive_density():
    assert calc_volume(2400.0, 2400.0) == 1.0
    with pytest.raises(InvalidParameterError):
        calc_volume(100.0, 0.0)


class InversionTests(unittest.TestCase):
    def test_required_mass_matches_closed_form(self) -> None:
        expected = 100.0 * 3.6e6 / (GRAVITY * 100.0 * 0.92 * 0.90)
        self.assertAlmostEqual(required_mass_for_energy(100.0, 100.0, CONCRETE), expected, places=6)

    def test_inversions_round_trip(self) -> None:
        for material in MATERIALS.values():
            height = required_height_for_energy(250.0, 40_000.0, material)
            mass = required_mass_for_energy(250.0, height, material)
            self.assertTrue(math.isclose(mass, 40_000.0, rel_tol=1e-9))

    def test_required_mass_halves_when_height_doubles(self) -> None:
        low = required_mass_for_energy(50.0, 50.0, SAND)
        high = required_mass_for_energy(50.0, 100.0, SAND)
        self.assertAlmostEqual(low, 2 * high, places=6)

    def test_inversions_reject_non_positive_inputs(self) -> None:
        with self.assertRaises(InvalidParameterError):
            required_mass_for_energy(100.0, 0.0, WATER)
        with self.assertRaises(InvalidParameterError):
            required_height_for_energy(100.0, -10.0, WATER)
        with self.assertRaises(InvalidParameterError):
            required_mass_for_energy(-1.0, 10.0, WATER)
