"""
Sheet billing for GlassWise.
Converts a requested glass area into the minimum billable combination of
full and half stock sheets.
"""

import math
from typing import Dict, Any

from data_models import BillingResult, CutRequest, GlassType, ValidationError, MM_PER_M


def calculate_sheets_needed(total_requested_area_m2: float, stock_width_mm: float,
                            stock_height_mm: float, half_sheet_eligible: bool) -> BillingResult:
    """
    Calculate the full/half sheets to bill for a requested area of one glass type.

    Whole sheets are consumed while the remaining area exceeds a full sheet.
    A final remainder up to half a sheet (inclusive) is billed as one half
    sheet, anything larger as one more full sheet. Types that cannot be sold
    by half sheet are always billed in whole sheets.

    Args:
        total_requested_area_m2: Requested cut area in m², already summed over the group
        stock_width_mm, stock_height_mm: Stock sheet dimensions
        half_sheet_eligible: Whether the glass type may be billed by half sheet

    Returns:
        BillingResult with sheet counts, billable area and waste percentage

    Raises:
        ValidationError: If the area is negative or the stock dimensions are not positive
    """
    if stock_width_mm <= 0 or stock_height_mm <= 0:
        raise ValidationError(f"Stock sheet dimensions must be positive: {stock_width_mm}x{stock_height_mm}",
                              kind="catalog", field="stock_width_mm")
    if total_requested_area_m2 < 0:
        raise ValidationError(f"Requested area must not be negative: {total_requested_area_m2}",
                              kind="dimensions", field="total_requested_area_m2")

    full_sheet_area = (stock_width_mm / MM_PER_M) * (stock_height_mm / MM_PER_M)
    half_sheet_area = full_sheet_area / 2

    if total_requested_area_m2 == 0:
        return BillingResult(full_sheets=0, half_sheets=0, total_billable_area_m2=0.0,
                             used_area_m2=0.0, waste_percentage=0.0)

    if not half_sheet_eligible:
        full_sheets = math.ceil(total_requested_area_m2 / full_sheet_area)
        half_sheets = 0
    else:
        full_sheets = 0
        half_sheets = 0
        remaining_area = total_requested_area_m2

        while remaining_area > full_sheet_area:
            full_sheets += 1
            remaining_area -= full_sheet_area

        # Exactly half a sheet still bills as the half sheet
        if remaining_area > 0:
            if remaining_area <= half_sheet_area:
                half_sheets = 1
            else:
                full_sheets += 1

    total_billable_area = full_sheets * full_sheet_area + half_sheets * half_sheet_area
    used_area = total_requested_area_m2
    waste_percentage = ((total_billable_area - used_area) / total_billable_area * 100
                        if total_billable_area > 0 else 0.0)

    return BillingResult(
        full_sheets=full_sheets,
        half_sheets=half_sheets,
        total_billable_area_m2=total_billable_area,
        used_area_m2=used_area,
        waste_percentage=waste_percentage
    )


def calculate_glass_type_billing(total_requested_area_m2: float, glass_type: GlassType) -> BillingResult:
    """Bill a requested area against a catalog glass type."""
    return calculate_sheets_needed(
        total_requested_area_m2,
        glass_type.stock_width_mm,
        glass_type.stock_height_mm,
        glass_type.half_sheet_eligible
    )


def calculate_billing_price(billing: BillingResult, glass_type: GlassType) -> float:
    """
    Price the sheets of a billing result.

    Args:
        billing: Sheet counts to price
        glass_type: Glass type supplying stock size and price per m²

    Returns:
        Price of the billed full and half sheets
    """
    full_sheet_area = glass_type.full_sheet_area_m2
    half_sheet_area = glass_type.half_sheet_area_m2
    return (billing.full_sheets * full_sheet_area + billing.half_sheets * half_sheet_area) * glass_type.price_per_m2


def describe_billing(billing: BillingResult) -> str:
    """Human readable summary of the billed sheets, e.g. '2 full sheets + 1 half sheet'."""
    parts = []
    if billing.full_sheets > 0:
        noun = "full sheet" if billing.full_sheets == 1 else "full sheets"
        parts.append(f"{billing.full_sheets} {noun}")
    if billing.half_sheets > 0:
        noun = "half sheet" if billing.half_sheets == 1 else "half sheets"
        parts.append(f"{billing.half_sheets} {noun}")
    return " + ".join(parts)


def calculate_item_price(cut_request: CutRequest, glass_type: GlassType) -> Dict[str, Any]:
    """
    Quote a single order line billed on its own sheets.

    Useful to show what one line would cost if it were ordered alone; the
    order total from the optimizer pools lines of the same glass type instead.

    Args:
        cut_request: Order line to price
        glass_type: Glass type of the line

    Returns:
        Dictionary with price, full_sheets, half_sheets and description
    """
    billing = calculate_glass_type_billing(cut_request.total_area_m2, glass_type)
    return {
        'price': calculate_billing_price(billing, glass_type),
        'full_sheets': billing.full_sheets,
        'half_sheets': billing.half_sheets,
        'description': describe_billing(billing)
    }
