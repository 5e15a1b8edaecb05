"""
Per-sheet cut layout planning for GlassWise.

Lays out a single cut spec on one stock sheet as a regular grid, choosing
between the unrotated and 90° rotated orientation. Only one cut size is placed
per sheet; distinct order lines are each planned on their own sheet and are
not packed together.
"""

import math
from typing import Dict, List, Mapping, Sequence, Tuple, Union

from data_models import (CutPosition, CutRequest, GlassType, LayoutPlan, UnknownGlassTypeError,
                         ValidationError)

# Gap left between neighbouring pieces in the drawn grid (mm)
CUT_MARGIN_MM = 2.0


def _grid_capacity(stock_width_mm: float, stock_height_mm: float,
                   piece_width_mm: float, piece_height_mm: float) -> Tuple[int, int]:
    """Pieces per row and per column for one orientation."""
    per_row = math.floor(stock_width_mm / piece_width_mm)
    per_col = math.floor(stock_height_mm / piece_height_mm)
    return per_row, per_col


def _validate_plan_inputs(cut_width_mm: float, cut_height_mm: float, quantity: int,
                          stock_width_mm: float, stock_height_mm: float, margin_mm: float) -> None:
    if cut_width_mm <= 0 or cut_height_mm <= 0:
        raise ValidationError(f"Cut dimensions must be positive: {cut_width_mm}x{cut_height_mm}",
                              kind="dimensions", field="width_mm" if cut_width_mm <= 0 else "height_mm")
    if int(quantity) != quantity or quantity < 1:
        raise ValidationError(f"Quantity must be a whole number of at least 1, got {quantity}",
                              kind="quantity", field="quantity")
    if stock_width_mm <= 0 or stock_height_mm <= 0:
        raise ValidationError(f"Stock sheet dimensions must be positive: {stock_width_mm}x{stock_height_mm}",
                              kind="catalog", field="stock_width_mm")
    if margin_mm < 0:
        raise ValidationError(f"Margin must not be negative, got {margin_mm}",
                              kind="configuration", field="margin_mm")


def plan(cut_width_mm: float, cut_height_mm: float, quantity: int,
         stock_width_mm: float, stock_height_mm: float,
         margin_mm: float = CUT_MARGIN_MM) -> LayoutPlan:
    """
    Compute the grid layout of one cut spec on one stock sheet.

    The rotated orientation is used only when it fits strictly more pieces;
    ties keep the cut as drawn. Capacity is computed without the drawing
    margin, which only spaces the returned positions apart.

    Args:
        cut_width_mm, cut_height_mm: Requested cut size
        quantity: Number of pieces requested
        stock_width_mm, stock_height_mm: Stock sheet size
        margin_mm: Gap between pieces in the returned coordinates

    Returns:
        LayoutPlan with capacity, overflow and row-major piece positions

    Raises:
        ValidationError: If any dimension is not positive or quantity is below 1
    """
    _validate_plan_inputs(cut_width_mm, cut_height_mm, quantity, stock_width_mm, stock_height_mm, margin_mm)
    quantity = int(quantity)

    per_row, per_col = _grid_capacity(stock_width_mm, stock_height_mm, cut_width_mm, cut_height_mm)
    capacity = per_row * per_col

    per_row_rotated, per_col_rotated = _grid_capacity(stock_width_mm, stock_height_mm, cut_height_mm, cut_width_mm)
    capacity_rotated = per_row_rotated * per_col_rotated

    rotated = capacity_rotated > capacity
    if rotated:
        piece_width, piece_height = cut_height_mm, cut_width_mm
        per_row_chosen = per_row_rotated
    else:
        piece_width, piece_height = cut_width_mm, cut_height_mm
        per_row_chosen = per_row

    pieces_per_sheet = max(capacity, capacity_rotated)
    pieces_in_this_sheet = min(quantity, pieces_per_sheet)
    overflow_count = max(0, quantity - pieces_in_this_sheet)

    positions: List[CutPosition] = []
    if pieces_in_this_sheet > 0:
        rows = math.ceil(pieces_in_this_sheet / per_row_chosen)
        placed = 0
        for row in range(rows):
            for col in range(per_row_chosen):
                if placed >= pieces_in_this_sheet:
                    break
                positions.append(CutPosition(
                    x=col * (piece_width + margin_mm),
                    y=row * (piece_height + margin_mm),
                    width=piece_width,
                    height=piece_height,
                    rotated=rotated,
                    id=placed + 1
                ))
                placed += 1

    efficiency = (cut_width_mm * cut_height_mm * pieces_in_this_sheet) / (stock_width_mm * stock_height_mm) * 100

    return LayoutPlan(
        cut_width_mm=cut_width_mm,
        cut_height_mm=cut_height_mm,
        quantity=quantity,
        stock_width_mm=stock_width_mm,
        stock_height_mm=stock_height_mm,
        pieces_per_sheet=pieces_per_sheet,
        pieces_in_this_sheet=pieces_in_this_sheet,
        rotated=rotated,
        overflow_count=overflow_count,
        efficiency_percentage=efficiency,
        positions=tuple(positions)
    )


def plan_cut_request(cut_request: CutRequest, glass_type: GlassType,
                     margin_mm: float = CUT_MARGIN_MM) -> LayoutPlan:
    """Plan one order line on a stock sheet of its glass type."""
    return plan(cut_request.width_mm, cut_request.height_mm, cut_request.quantity,
                glass_type.stock_width_mm, glass_type.stock_height_mm, margin_mm)


def plan_order(cut_requests: Sequence[CutRequest], catalog: Mapping[str, GlassType],
               margin_mm: float = CUT_MARGIN_MM) -> List[Tuple[CutRequest, Union[LayoutPlan, UnknownGlassTypeError]]]:
    """
    Plan every order line on its own dedicated sheet.

    Lines whose glass type is unknown are paired with an UnknownGlassTypeError
    instead of a plan, so the caller can show the rest of the order.

    Args:
        cut_requests: Order lines
        catalog: Mapping of glass type code to GlassType
        margin_mm: Gap between pieces in the returned coordinates

    Returns:
        List of (cut_request, LayoutPlan or UnknownGlassTypeError) in order
    """
    results = []
    for cut_request in cut_requests:
        glass_type = catalog.get(cut_request.glass_type_code)
        if glass_type is None:
            results.append((cut_request, UnknownGlassTypeError(cut_request.glass_type_code)))
            continue
        results.append((cut_request, plan_cut_request(cut_request, glass_type, margin_mm)))
    return results


def sheets_required(layout_plan: LayoutPlan) -> int:
    """
    Number of dedicated sheets the full quantity would use with this layout.

    Returns 0 when the cut does not fit on the sheet in either orientation.
    """
    if layout_plan.pieces_per_sheet == 0:
        return 0
    return math.ceil(layout_plan.quantity / layout_plan.pieces_per_sheet)


def summarize_plan(layout_plan: LayoutPlan) -> Dict[str, object]:
    """Flat summary of a plan for tables and reports."""
    piece_width, piece_height = layout_plan.piece_dimensions
    return {
        'Cut (mm)': f"{layout_plan.cut_width_mm:.0f}×{layout_plan.cut_height_mm:.0f}",
        'Placed size (mm)': f"{piece_width:.0f}×{piece_height:.0f}",
        'Rotated': "Yes" if layout_plan.rotated else "No",
        'Pieces per sheet': layout_plan.pieces_per_sheet,
        'In this sheet': layout_plan.pieces_in_this_sheet,
        'Overflow': layout_plan.overflow_count,
        'Sheets required': sheets_required(layout_plan),
        'Efficiency (%)': round(layout_plan.efficiency_percentage, 1)
    }
