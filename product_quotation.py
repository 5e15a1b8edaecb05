"""
Single-product and double glazing (DVH) quotations for GlassWise.

These quotes price one product at a time with per-piece minimum billing,
unlike the order optimizer which pools the area of every line of a glass type.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Any, Tuple

from data_models import CompositeRuleError, GlassType, ValidationError, MM_PER_M

logger = logging.getLogger(__name__)

# Codes that may be billed by a third of a sheet on the single-product page
THIRD_SHEET_CODES = ("LAMI33", "FL103", "FL104")

# Double glazing
DVH_MIN_AREA_M2 = 0.5
DVH_MIN_PERIMETER_M = 2.8
DVH_MAX_WIDTH_MM = 3600
DVH_MAX_HEIGHT_MM = 2500

# Spacer chamber price per linear metre, keyed by chamber width in mm
CHAMBER_PRICES = {
    6: 5500.0,
    9: 6100.0,
    12: 7500.0,
    16: 9500.0,
    20: 11820.0,
}

UNITS = ("mm", "cm")


@dataclass(frozen=True)
class ProductQuote:
    """Price of a single glass product billed per piece."""
    glass_type: GlassType
    width_mm: int
    height_mm: int
    quantity: int
    piece_area_m2: float
    billed_area_per_piece_m2: float
    billing_unit: str
    total_price: float

    @property
    def total_area_m2(self) -> float:
        return self.piece_area_m2 * self.quantity

    @property
    def total_billed_area_m2(self) -> float:
        return self.billed_area_per_piece_m2 * self.quantity

    @property
    def unit_price(self) -> float:
        return self.total_price / self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            'glass_type_code': self.glass_type.code,
            'glass_type_name': self.glass_type.name,
            'width_mm': self.width_mm,
            'height_mm': self.height_mm,
            'quantity': self.quantity,
            'area_m2': self.total_area_m2,
            'billed_area_m2': self.total_billed_area_m2,
            'billing_unit': self.billing_unit,
            'total_price': self.total_price
        }


@dataclass(frozen=True)
class DVHQuote:
    """Price of a sealed double glazing unit (two panes and a spacer chamber)."""
    glass_a: GlassType
    glass_b: GlassType
    chamber_mm: int
    width_mm: int
    height_mm: int
    quantity: int
    area_per_unit_m2: float
    perimeter_per_unit_m: float
    glass_a_cost: float
    glass_b_cost: float
    chamber_cost: float
    unit_price: float
    total_price: float

    @property
    def description(self) -> str:
        return f"DVH {self.glass_a.name} + {self.glass_b.name} - Cámara {self.chamber_mm}mm"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'description': self.description,
            'width_mm': self.width_mm,
            'height_mm': self.height_mm,
            'quantity': self.quantity,
            'area_per_unit_m2': self.area_per_unit_m2,
            'perimeter_per_unit_m': self.perimeter_per_unit_m,
            'glass_a_cost': self.glass_a_cost,
            'glass_b_cost': self.glass_b_cost,
            'chamber_cost': self.chamber_cost,
            'unit_price': self.unit_price,
            'total_price': self.total_price
        }


def parse_dimensions(width: float, height: float, unit: str = "mm") -> Tuple[int, int]:
    """
    Convert user supplied dimensions to whole millimetres.

    Args:
        width, height: Dimensions in ``unit``
        unit: 'mm' or 'cm'

    Returns:
        Tuple of (width_mm, height_mm), rounded to the nearest millimetre

    Raises:
        ValidationError: For an unsupported unit or non-positive dimensions
    """
    if unit not in UNITS:
        raise ValidationError(f"Unsupported unit {unit!r}, expected one of {UNITS}",
                              kind="dimensions", field="unit")
    factor = 10 if unit == "cm" else 1
    width_mm = int(round(width * factor))
    height_mm = int(round(height * factor))
    if width_mm <= 0:
        raise ValidationError("Width must be greater than 0", kind="dimensions", field="width")
    if height_mm <= 0:
        raise ValidationError("Height must be greater than 0", kind="dimensions", field="height")
    return width_mm, height_mm


def _validate_quantity(quantity: int) -> int:
    if int(quantity) != quantity or quantity < 1:
        raise ValidationError(f"Quantity must be a whole number of at least 1, got {quantity}",
                              kind="quantity", field="quantity")
    return int(quantity)


def _fits_on_sheet(width_mm: float, height_mm: float, glass_type: GlassType) -> bool:
    sheet_w, sheet_h = glass_type.stock_width_mm, glass_type.stock_height_mm
    return (width_mm <= sheet_w and height_mm <= sheet_h) or (height_mm <= sheet_w and width_mm <= sheet_h)


def quote_single_product(glass_type: GlassType, width: float, height: float,
                         quantity: int = 1, unit: str = "mm") -> ProductQuote:
    """
    Quote identical pieces of one glass type with a minimum billed area per piece.

    Each piece is billed as a third of a sheet (only for ``THIRD_SHEET_CODES``),
    half a sheet or a full sheet, whichever is the smallest unit it fits in.

    Args:
        glass_type: Glass type to cut from
        width, height: Piece dimensions in ``unit``
        quantity: Number of pieces
        unit: 'mm' or 'cm'

    Returns:
        ProductQuote with the billed area and total price

    Raises:
        ValidationError: For invalid dimensions or quantity, or a piece larger than the stock sheet
    """
    width_mm, height_mm = parse_dimensions(width, height, unit)
    quantity = _validate_quantity(quantity)

    if not _fits_on_sheet(width_mm, height_mm, glass_type):
        raise ValidationError(
            f"{width_mm}x{height_mm} mm does not fit on a {glass_type.stock_width_mm:.0f}x"
            f"{glass_type.stock_height_mm:.0f} mm sheet of {glass_type.code}",
            kind="dimensions", field="width"
        )

    piece_area = (width_mm / MM_PER_M) * (height_mm / MM_PER_M)
    full_sheet = glass_type.full_sheet_area_m2

    if glass_type.code in THIRD_SHEET_CODES and piece_area <= full_sheet / 3:
        billed_area, billing_unit = full_sheet / 3, "third"
    elif piece_area <= full_sheet / 2:
        billed_area, billing_unit = full_sheet / 2, "half"
    else:
        billed_area, billing_unit = full_sheet, "full"

    total_price = glass_type.price_per_m2 * billed_area * quantity
    logger.debug(f"{glass_type.code} {width_mm}x{height_mm} x{quantity}: "
                 f"billed {billed_area:.2f} m² per piece ({billing_unit} sheet), total {total_price:.2f}")

    return ProductQuote(
        glass_type=glass_type,
        width_mm=width_mm,
        height_mm=height_mm,
        quantity=quantity,
        piece_area_m2=piece_area,
        billed_area_per_piece_m2=billed_area,
        billing_unit=billing_unit,
        total_price=total_price
    )


def quote_dvh(glass_a: GlassType, glass_b: GlassType, width: float, height: float, chamber_mm: int,
              quantity: int = 1, unit: str = "mm", discount_percent: float = 0.0,
              tax_percent: float = 0.0, margin_percent: float = 0.0) -> DVHQuote:
    """
    Quote a double glazing unit.

    Area and perimeter are billed with minimums of ``DVH_MIN_AREA_M2`` and
    ``DVH_MIN_PERIMETER_M``. Both panes are priced on the billed area and the
    chamber on the billed perimeter. Discount, tax and margin are applied to
    the unit price in that order.

    Args:
        glass_a, glass_b: The two panes; at least one must be laminated
        width, height: Unit dimensions in ``unit``
        chamber_mm: Spacer chamber width, a key of ``CHAMBER_PRICES``
        quantity: Number of units
        unit: 'mm' or 'cm'
        discount_percent, tax_percent, margin_percent: Price adjustments in percent

    Returns:
        DVHQuote with cost breakdown, unit and total price

    Raises:
        CompositeRuleError: If neither pane is laminated safety glass
        ValidationError: For invalid dimensions, quantity or chamber width
    """
    width_mm, height_mm = parse_dimensions(width, height, unit)
    quantity = _validate_quantity(quantity)

    if width_mm > DVH_MAX_WIDTH_MM or height_mm > DVH_MAX_HEIGHT_MM:
        raise ValidationError(
            f"Dimensions exceed the maximum allowed ({DVH_MAX_WIDTH_MM}×{DVH_MAX_HEIGHT_MM} mm)",
            kind="dimensions", field="width" if width_mm > DVH_MAX_WIDTH_MM else "height"
        )
    if chamber_mm not in CHAMBER_PRICES:
        raise ValidationError(f"Unsupported chamber width {chamber_mm} mm, expected one of "
                              f"{sorted(CHAMBER_PRICES)}", kind="dimensions", field="chamber_mm")
    # Safety pane by code prefix, see SAFETY_CODE_PREFIXES
    if not glass_a.is_safety and not glass_b.is_safety:
        raise CompositeRuleError("A DVH unit must include at least one laminated (safety) pane",
                                 field="glass_b")

    actual_area = (width_mm * height_mm) / (MM_PER_M * MM_PER_M)
    actual_perimeter = 2 * (width_mm + height_mm) / MM_PER_M
    area = max(actual_area, DVH_MIN_AREA_M2)
    perimeter = max(actual_perimeter, DVH_MIN_PERIMETER_M)

    glass_a_cost = area * glass_a.price_per_m2
    glass_b_cost = area * glass_b.price_per_m2
    chamber_cost = perimeter * CHAMBER_PRICES[chamber_mm]

    unit_price = glass_a_cost + glass_b_cost + chamber_cost
    if discount_percent > 0:
        unit_price *= 1 - discount_percent / 100
    if tax_percent > 0:
        unit_price *= 1 + tax_percent / 100
    if margin_percent > 0:
        unit_price *= 1 + margin_percent / 100

    return DVHQuote(
        glass_a=glass_a,
        glass_b=glass_b,
        chamber_mm=chamber_mm,
        width_mm=width_mm,
        height_mm=height_mm,
        quantity=quantity,
        area_per_unit_m2=area,
        perimeter_per_unit_m=perimeter,
        glass_a_cost=glass_a_cost,
        glass_b_cost=glass_b_cost,
        chamber_cost=chamber_cost,
        unit_price=unit_price,
        total_price=unit_price * quantity
    )
