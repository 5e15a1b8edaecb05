"""Tests for order optimization: grouping, pricing, skipped groups and apportioned line prices."""

import pytest

from data_models import CutRequest, UnknownGlassTypeError, ValidationError
from optimization_core import apportion_line_item_prices, group_cut_requests, optimize, validate_cut_request


def test_whole_sheet_order_total(catalog, scenario_a_request):
    result = optimize([scenario_a_request], catalog)

    assert result.total_price == pytest.approx(180000)
    assert len(result.per_type_breakdown) == 1
    group = result.per_type_breakdown[0]
    assert group.billing.full_sheets == 2
    assert group.billing.used_area_m2 == pytest.approx(9.6)
    assert not result.has_skipped_groups


def test_lines_of_same_type_are_pooled(catalog):
    # Two 2 m² lines pool to 4 m², one half sheet instead of two
    requests = [
        CutRequest("FL104", 2000, 1000, 1, "a"),
        CutRequest("FL104", 1000, 2000, 1, "b"),
    ]

    result = optimize(requests, catalog)

    group = result.per_type_breakdown[0]
    assert (group.billing.full_sheets, group.billing.half_sheets) == (0, 1)
    assert result.total_price == pytest.approx(45000)


def test_groups_follow_first_seen_order(catalog):
    requests = [
        CutRequest("LAMI44", 1000, 1000),
        CutRequest("FL104", 1000, 1000),
        CutRequest("LAMI44", 500, 500),
    ]

    groups = group_cut_requests(requests)
    result = optimize(requests, catalog)

    assert list(groups) == ["LAMI44", "FL104"]
    assert [g.glass_type_code for g in result.per_type_breakdown] == ["LAMI44", "FL104"]
    assert len(result.per_type_breakdown[0].cut_requests) == 2


def test_unknown_glass_type_is_skipped(catalog):
    requests = [
        CutRequest("FL104", 2000, 2000, 1),
        CutRequest("NOPE99", 1000, 1000, 3),
    ]

    result = optimize(requests, catalog)

    assert result.total_price == pytest.approx(45000)
    assert [g.glass_type_code for g in result.per_type_breakdown] == ["FL104"]
    assert len(result.skipped_groups) == 1
    skipped = result.skipped_groups[0]
    assert skipped.glass_type_code == "NOPE99"
    assert isinstance(skipped.error, UnknownGlassTypeError)
    assert isinstance(skipped.error, LookupError)
    assert result.errors == [skipped.error]


def test_empty_order(catalog):
    result = optimize([], catalog)

    assert result.total_price == 0
    assert result.per_type_breakdown == ()
    assert result.savings == 0
    assert result.savings_percentage == 0


@pytest.mark.parametrize("width, height, quantity, kind", [
    (0, 500, 1, "dimensions"),
    (500, -1, 1, "dimensions"),
    (500, 500, 0, "quantity"),
    (500, 500, 1.5, "quantity"),
])
def test_invalid_request_rejects_whole_order(catalog, width, height, quantity, kind):
    requests = [CutRequest("FL104", 1000, 1000), CutRequest("FL104", width, height, quantity)]

    with pytest.raises(ValidationError) as exc_info:
        optimize(requests, catalog)
    assert exc_info.value.kind == kind


def test_validate_cut_request_accepts_valid_request():
    validate_cut_request(CutRequest("FL104", 1, 1, 1))


def test_optimize_is_repeatable(catalog, scenario_a_request):
    requests = [scenario_a_request, CutRequest("FL104", 1500, 1000, 2)]

    assert optimize(requests, catalog) == optimize(requests, catalog)


@pytest.mark.parametrize("code", ["FL104", "FLI10"])
def test_total_price_never_decreases_with_quantity(catalog, code):
    # 700x450 pieces: 0.315 m² each, up to ~25 m²
    prices = [optimize([CutRequest(code, 700, 450, qty)], catalog).total_price for qty in range(1, 80)]

    assert prices == sorted(prices)
    assert prices[-1] > prices[0]


def test_savings_against_baseline(catalog):
    result = optimize([CutRequest("FL104", 2000, 2000, 1)], catalog)

    # 4 m² x 1.25 = 5 m² -> 1 whole sheet baseline
    assert result.baseline_price == pytest.approx(90000)
    assert result.savings == pytest.approx(45000)
    assert result.savings_percentage == pytest.approx(50.0)


def test_apportioned_line_prices_sum_to_group_price(catalog):
    requests = [
        CutRequest("FL104", 2000, 1000, 1, "a"),
        CutRequest("FL104", 1000, 1000, 2, "b"),
        CutRequest("LAMI44", 1000, 1000, 1, "c"),
    ]
    result = optimize(requests, catalog)

    rows = apportion_line_item_prices(result)

    assert [r['item_id'] for r in rows] == ["a", "b", "c"]
    assert sum(r['price'] for r in rows) == pytest.approx(result.total_price)
    assert rows[0]['price'] == pytest.approx(rows[1]['price'])
