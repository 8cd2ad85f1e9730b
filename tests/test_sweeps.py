import numpy as np
import pandas as pd
import pytest

from services.gess_core import InvalidParameterError, calculate_gess_results, required_mass_for_energy
from services.materials import ETA_GEN, MATERIALS, SCHOOL_ENERGY_DEMANDS
from utils.sweeps import (
    DEMAND_SAMPLES_KWH,
    HEIGHT_SAMPLES,
    MASS_SAMPLES,
    TRADEOFF_HEIGHTS,
    generate_efficiency_breakdown,
    generate_energy_demand_sweep,
    generate_energy_density_comparison,
    generate_facility_profiles,
    generate_fixed_efficiency_height_table,
    generate_fixed_efficiency_mass_table,
    generate_height_sweep,
    generate_height_tradeoff,
    generate_mass_sweep,
    generate_school_analytics,
)


def test_mass_sweep_shape_and_values():
    sweep = generate_mass_sweep(100.0, 85.0, 1000)

    assert list(sweep.columns) == ["mass", "water", "sand", "concrete"]
    assert sweep["mass"].tolist() == list(MASS_SAMPLES)
    expected = calculate_gess_results(MATERIALS["sand"], 3000.0, 100.0, 85.0, 1000).recovered_energy_j / 1e6
    assert sweep.loc[sweep["mass"] == 3000.0, "sand"].iloc[0] == pytest.approx(expected)


def test_mass_sweep_is_linear_in_mass():
    sweep = generate_mass_sweep(100.0, 85.0, 1000)

    per_kg = sweep[["water", "sand", "concrete"]].div(sweep["mass"], axis=0)
    assert np.allclose(per_kg.to_numpy(), per_kg.iloc[[0]].to_numpy())


def test_height_sweep_shape_and_monotonicity():
    sweep = generate_height_sweep(5000.0, 85.0, 1000)

    assert len(sweep) == len(HEIGHT_SAMPLES) == 16
    assert sweep["height"].iloc[0] == 50.0
    assert sweep["height"].iloc[-1] == 200.0
    for key in ("water", "sand", "concrete"):
        assert sweep[key].is_monotonic_increasing


def test_sweeps_are_deterministic():
    first = generate_height_sweep(4000.0, 90.0, 250)
    second = generate_height_sweep(4000.0, 90.0, 250)

    pd.testing.assert_frame_equal(first, second)


def test_sweeps_reject_empty_sample_lists():
    with pytest.raises(InvalidParameterError):
        generate_mass_sweep(100.0, 85.0, 1000, masses=[])
    with pytest.raises(InvalidParameterError):
        generate_height_sweep(5000.0, 85.0, 1000, heights=[])


def test_energy_demand_sweep_matches_inversion():
    sweep = generate_energy_demand_sweep(100.0)

    assert sweep["demand_kwh"].tolist() == list(DEMAND_SAMPLES_KWH)
    row = sweep[sweep["demand_kwh"] == 100.0].iloc[0]
    assert row["mech_energy_kj"] == pytest.approx(360_000.0)
    assert row["charge_power_kw"] == pytest.approx(100.0)
    for material in MATERIALS.values():
        mass = required_mass_for_energy(100.0, 100.0, material)
        assert row[f"{material.key}_mass_kg"] == pytest.approx(mass)
        assert row[f"{material.key}_volume_m3"] == pytest.approx(mass / material.density)


def test_energy_demand_sweep_rejects_non_positive_charge_time():
    with pytest.raises(InvalidParameterError):
        generate_energy_demand_sweep(100.0, charge_time_h=0.0)


def test_energy_density_comparison_orders_catalog():
    density = generate_energy_density_comparison(5000.0, 100.0, 85.0, 1000)

    assert density["material"].tolist() == ["Water", "Sand", "Concrete"]
    assert density["energy_density"].idxmax() == 2


def test_fixed_efficiency_mass_table_formulas():
    table = generate_fixed_efficiency_mass_table()

    assert len(table) == len(MASS_SAMPLES)
    first = table.iloc[0]
    assert first["mass"] == 1000.0
    assert first["mech_energy_kj"] == pytest.approx(981.0)
    assert first["elec_energy_kwh"] == pytest.approx(0.2725)
    assert first["charge_power_kw"] == pytest.approx(0.2725)
    assert first["energy_out_kwh"] == pytest.approx(0.2725 * ETA_GEN)
    assert first["discharge_power_kw"] == pytest.approx(0.49050)


def test_fixed_efficiency_height_table_scales_with_height():
    table = generate_fixed_efficiency_height_table(mass=5000.0)

    assert (table["mass"] == 5000.0).all()
    ratio = table["mech_energy_kj"] / table["height"]
    assert np.allclose(ratio, 5000.0 * 9.81 / 1000.0)
    assert (table["discharge_power_kw"] > table["charge_power_kw"] * ETA_GEN).all()


def test_fixed_efficiency_tables_reject_bad_durations():
    with pytest.raises(InvalidParameterError):
        generate_fixed_efficiency_mass_table(discharge_time_h=0.0)
    with pytest.raises(InvalidParameterError):
        generate_fixed_efficiency_height_table(mass=-1.0)


def test_efficiency_breakdown_tracks_conversion_stages():
    breakdown = generate_efficiency_breakdown(100.0)

    concrete = breakdown[breakdown["material"] == "Concrete"].iloc[0]
    assert concrete["lift_efficiency"] == pytest.approx(92.0)
    assert concrete["round_trip_efficiency"] == pytest.approx(82.8)
    assert concrete["after_lift_kwh"] == pytest.approx(92.0)
    assert concrete["after_generation_kwh"] == pytest.approx(82.8)


def test_facility_profiles_size_the_school_load():
    profiles = generate_facility_profiles()

    school = profiles[profiles["facility"] == "School"].iloc[0]
    assert school["energy_kwh"] == pytest.approx(100.0)
    expected_mass = required_mass_for_energy(100.0, 100.0, MATERIALS["concrete"])
    assert school["required_mass_kg"] == pytest.approx(expected_mass)
    assert school["water_volume_m3"] == pytest.approx(expected_mass / 1000.0)
    assert school["concrete_volume_m3"] < school["water_volume_m3"]


def test_height_tradeoff_mass_is_inverse_to_height():
    tradeoff = generate_height_tradeoff(100.0)

    assert tradeoff["height"].tolist() == list(TRADEOFF_HEIGHTS)
    products = tradeoff["required_mass_kg"] * tradeoff["height"]
    assert np.allclose(products, products.iloc[0])
    assert np.allclose(tradeoff["required_mass_t"], tradeoff["required_mass_kg"] / 1000.0)


def test_school_analytics_long_form():
    analytics = generate_school_analytics(100_000.0, 100.0)

    assert len(analytics) == len(SCHOOL_ENERGY_DEMANDS) * len(MATERIALS)
    primary = analytics[(analytics["school"] == "Primary School") & (analytics["material"] == "Sand")].iloc[0]
    assert primary["required_mass_kg"] == pytest.approx(required_mass_for_energy(150.0, 100.0, MATERIALS["sand"]))
    # h * m is constant for a given demand and material.
    assert primary["required_height_m"] * 100_000.0 == pytest.approx(primary["required_mass_kg"] * 100.0)
