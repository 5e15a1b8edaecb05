"""Tests for per-sheet grid layout planning.

Tests cover:
- Orientation choice (strictly better rotated capacity only)
- Overflow beyond one sheet
- Row-major positions without overlaps
- Cuts that do not fit, invalid input and order-level planning
"""

import pytest

from data_models import CutRequest, LayoutPlan, UnknownGlassTypeError, ValidationError
from layout_planner import CUT_MARGIN_MM, plan, plan_order, sheets_required, summarize_plan

STOCK_W = 3600
STOCK_H = 2500


def _overlaps(a, b) -> bool:
    return a.x < b.x + b.width and b.x < a.x + a.width and a.y < b.y + b.height and b.y < a.y + a.height


class TestPlan:
    def test_keeps_unrotated_when_it_fits_more(self):
        layout = plan(600, 500, 20, STOCK_W, STOCK_H)

        assert layout.rotated is False
        assert layout.pieces_per_sheet == 30
        assert layout.pieces_in_this_sheet == 20
        assert layout.overflow_count == 0

    def test_overflow_beyond_one_sheet(self):
        layout = plan(600, 500, 40, STOCK_W, STOCK_H)

        assert layout.pieces_in_this_sheet == 30
        assert layout.overflow_count == 10
        assert layout.has_overflow
        assert len(layout.positions) == 30
        assert sheets_required(layout) == 2

    def test_rotates_when_strictly_better(self):
        layout = plan(500, 600, 30, STOCK_W, STOCK_H)

        assert layout.rotated is True
        assert layout.pieces_per_sheet == 30
        assert layout.piece_dimensions == (600, 500)
        assert all(p.rotated and p.width == 600 and p.height == 500 for p in layout.positions)

    def test_tie_keeps_unrotated(self):
        layout = plan(1000, 1000, 1, 2000, 2000)

        assert layout.rotated is False

    def test_positions_are_row_major_with_margin(self):
        layout = plan(600, 500, 8, STOCK_W, STOCK_H)

        first, second, seventh = layout.positions[0], layout.positions[1], layout.positions[6]
        assert (first.x, first.y, first.id) == (0, 0, 1)
        assert (second.x, second.y) == (600 + CUT_MARGIN_MM, 0)
        # 6 pieces per row, the 7th starts the second row
        assert (seventh.x, seventh.y) == (0, 500 + CUT_MARGIN_MM)
        assert [p.id for p in layout.positions] == list(range(1, 9))

    def test_positions_do_not_overlap(self):
        layout = plan(700, 450, 50, STOCK_W, STOCK_H)
        positions = layout.positions

        for i, a in enumerate(positions):
            for b in positions[i + 1:]:
                assert not _overlaps(a, b)

    @pytest.mark.parametrize("width, height", [(600, 500), (500, 600), (1234, 567), (3600, 2500), (100, 100)])
    def test_capacity_never_exceeds_sheet_area(self, width, height):
        layout = plan(width, height, 1, STOCK_W, STOCK_H)

        assert layout.pieces_per_sheet * width * height <= STOCK_W * STOCK_H

    def test_efficiency(self):
        layout = plan(600, 500, 30, STOCK_W, STOCK_H)

        assert layout.efficiency_percentage == pytest.approx(100.0)

    def test_cut_larger_than_sheet(self):
        layout = plan(4000, 3000, 2, STOCK_W, STOCK_H)

        assert layout.pieces_per_sheet == 0
        assert layout.pieces_in_this_sheet == 0
        assert layout.overflow_count == 2
        assert layout.positions == ()
        assert layout.efficiency_percentage == 0
        assert sheets_required(layout) == 0

    def test_cut_fits_only_rotated(self):
        layout = plan(2400, 3000, 1, STOCK_W, STOCK_H)

        assert layout.rotated is True
        assert layout.pieces_per_sheet == 1

    @pytest.mark.parametrize("args", [
        (0, 500, 1, STOCK_W, STOCK_H),
        (500, 500, 0, STOCK_W, STOCK_H),
        (500, 500, 1, 0, STOCK_H),
    ])
    def test_invalid_input_rejected(self, args):
        with pytest.raises(ValidationError):
            plan(*args)

    @pytest.mark.parametrize("args", [
        (600, 500, 40, STOCK_W, STOCK_H),
        (500, 600, 7, STOCK_W, STOCK_H),
        (4000, 3000, 2, STOCK_W, STOCK_H),
        (1234.5, 678.9, 3, 2000, 1500),
    ])
    def test_same_inputs_give_the_same_plan(self, args):
        assert plan(*args) == plan(*args)

    def test_summary(self):
        summary = summarize_plan(plan(600, 500, 40, STOCK_W, STOCK_H))

        assert summary['Pieces per sheet'] == 30
        assert summary['Overflow'] == 10
        assert summary['Sheets required'] == 2
        assert summary['Rotated'] == "No"


def test_plan_order_pairs_each_line_with_its_outcome(catalog):
    requests = [
        CutRequest("FL104", 600, 500, 40, "a"),
        CutRequest("MISSING", 600, 500, 1, "b"),
    ]

    results = plan_order(requests, catalog)

    assert [r[0].item_id for r in results] == ["a", "b"]
    assert isinstance(results[0][1], LayoutPlan)
    assert results[0][1].overflow_count == 10
    assert isinstance(results[1][1], UnknownGlassTypeError)
