"""Tests for the non-optimized baseline price used in the savings display."""

import pytest

from data_models import CutRequest, ValidationError
from optimization_baseline import (DEFAULT_WASTE_CONFIG, WasteHeuristicConfig, calculate_baseline_price,
                                   calculate_savings, calculate_waste_multiplier)


def test_base_multiplier_for_large_round_cuts(whole_sheet_glass):
    cuts = [CutRequest("FLI10", 2000, 1500, 1)]

    assert calculate_waste_multiplier(cuts, whole_sheet_glass) == pytest.approx(1.25)


def test_variety_penalty_beyond_threshold(whole_sheet_glass):
    cuts = [
        CutRequest("FLI10", 2000, 1500),
        CutRequest("FLI10", 2000, 1200),
        CutRequest("FLI10", 1800, 1500),
        CutRequest("FLI10", 1600, 1500),
    ]

    assert calculate_waste_multiplier(cuts, whole_sheet_glass) == pytest.approx(1.30)


def test_small_and_odd_cut_penalties_count_per_line(whole_sheet_glass):
    cuts = [CutRequest("FLI10", 1234, 500, quantity=20)]

    assert calculate_waste_multiplier(cuts, whole_sheet_glass) == pytest.approx(1.25 + 0.03 + 0.02)


def test_multiplier_is_capped(whole_sheet_glass):
    cuts = [CutRequest("FLI10", 101 + i, 205 + i) for i in range(10)]

    assert calculate_waste_multiplier(cuts, whole_sheet_glass) == pytest.approx(DEFAULT_WASTE_CONFIG.max_multiplier)


def test_custom_config(whole_sheet_glass):
    config = WasteHeuristicConfig(base_multiplier=1.0, per_small_cut_increment=0.0,
                                  per_odd_dimension_increment=0.0, max_multiplier=1.0)
    cuts = [CutRequest("FLI10", 1234, 500)]

    assert calculate_waste_multiplier(cuts, whole_sheet_glass, config) == pytest.approx(1.0)


def test_baseline_price_bills_whole_sheets(whole_sheet_glass, scenario_a_request):
    # 9.6 m² x 1.28 = 12.29 m² -> 2 sheets of 9 m²
    assert calculate_baseline_price([scenario_a_request], whole_sheet_glass) == pytest.approx(180000)


def test_baseline_price_of_empty_group(whole_sheet_glass):
    assert calculate_baseline_price([], whole_sheet_glass) == 0


def test_savings():
    assert calculate_savings(200.0, 150.0) == pytest.approx((50.0, 25.0))
    assert calculate_savings(0.0, 0.0) == (0.0, 0.0)


@pytest.mark.parametrize("kwargs", [
    {"base_multiplier": 0.9},
    {"base_multiplier": 1.4, "max_multiplier": 1.3},
    {"dimension_module_mm": 0},
    {"variety_threshold": -1},
])
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ValidationError) as exc_info:
        WasteHeuristicConfig(**kwargs)
    assert exc_info.value.kind == "configuration"
