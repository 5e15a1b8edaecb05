"""
Core data models for GlassWise glass sheet quotation tool.
Defines GlassType, CutRequest, BillingResult, GroupQuote, OptimizationResult,
CutPosition and LayoutPlan, plus the errors raised by the quoting core.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Tuple

MM_PER_M = 1000.0

# Laminated (safety) glass codes: LAMI, LAMSV and the MSIV solar control laminates
SAFETY_CODE_PREFIXES = ("LAM", "MSIV")


class ValidationError(ValueError):
    """
    Raised when a cut request, catalog record or quotation input is invalid.

    The ``kind`` attribute lets callers tell the failure classes apart
    (``dimensions``, ``quantity``, ``catalog``, ``composite_rule``,
    ``configuration``, ``order``) without parsing the message.
    """

    def __init__(self, message: str, kind: str = "dimensions", field: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.field = field


class CompositeRuleError(ValidationError):
    """Raised when a composite product (e.g. double glazing) breaks a domain rule."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, kind="composite_rule", field=field)


class UnknownGlassTypeError(LookupError):
    """Raised (or reported) when a glass type code is not present in the catalog."""

    def __init__(self, glass_type_code: str):
        super().__init__(f"Unknown glass type code: {glass_type_code!r}")
        self.glass_type_code = glass_type_code


@dataclass(frozen=True)
class GlassType:
    """
    Represents a glass type from the catalog with its stock sheet geometry and price.

    Attributes:
        code: Unique catalog code (e.g. 'FL104', 'LAMI33')
        name: Display name
        stock_width_mm: Stock sheet width in mm
        stock_height_mm: Stock sheet height in mm
        price_per_m2: Price per square metre
        half_sheet_eligible: Whether the type may be billed in half-sheet units
        thickness_mm: Nominal thickness, if known
        description: Free text description
    """
    code: str
    name: str
    stock_width_mm: float
    stock_height_mm: float
    price_per_m2: float
    half_sheet_eligible: bool = False
    thickness_mm: Optional[float] = None
    description: str = ""
    has_solar_control: bool = False

    def __post_init__(self):
        if not self.code:
            raise ValidationError("Glass type code must not be empty", kind="catalog", field="code")
        if self.stock_width_mm <= 0 or self.stock_height_mm <= 0:
            raise ValidationError(
                f"Stock sheet dimensions must be positive for {self.code}: "
                f"{self.stock_width_mm}x{self.stock_height_mm}",
                kind="catalog", field="stock_width_mm" if self.stock_width_mm <= 0 else "stock_height_mm"
            )
        if self.price_per_m2 < 0:
            raise ValidationError(f"Price per m² must not be negative for {self.code}",
                                  kind="catalog", field="price_per_m2")

    @property
    def is_safety(self) -> bool:
        """Laminated (safety) glass is identified by its code prefix."""
        return self.code.upper().startswith(SAFETY_CODE_PREFIXES)

    @property
    def full_sheet_area_m2(self) -> float:
        return (self.stock_width_mm / MM_PER_M) * (self.stock_height_mm / MM_PER_M)

    @property
    def half_sheet_area_m2(self) -> float:
        return self.full_sheet_area_m2 / 2

    @property
    def full_sheet_price(self) -> float:
        """Price of one full stock sheet."""
        return self.full_sheet_area_m2 * self.price_per_m2

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code,
            'name': self.name,
            'stock_width_mm': self.stock_width_mm,
            'stock_height_mm': self.stock_height_mm,
            'price_per_m2': self.price_per_m2,
            'half_sheet_eligible': self.half_sheet_eligible,
            'thickness_mm': self.thickness_mm,
            'description': self.description,
            'is_safety': self.is_safety,
            'has_solar_control': self.has_solar_control
        }

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"


@dataclass(frozen=True)
class CutRequest:
    """
    Represents one order line: a rectangle of glass to cut, repeated ``quantity`` times.

    Attributes:
        glass_type_code: Catalog code of the glass to cut from
        width_mm: Cut width in mm
        height_mm: Cut height in mm
        quantity: Number of identical pieces (>= 1)
        item_id: Optional caller-side identifier of the order line
    """
    glass_type_code: str
    width_mm: float
    height_mm: float
    quantity: int = 1
    item_id: Optional[str] = None

    @property
    def area_m2(self) -> float:
        """Area of a single piece in m²."""
        return (self.width_mm / MM_PER_M) * (self.height_mm / MM_PER_M)

    @property
    def total_area_m2(self) -> float:
        return self.area_m2 * self.quantity

    @property
    def dimensions(self) -> Tuple[float, float]:
        return self.width_mm, self.height_mm

    def to_dict(self) -> Dict[str, Any]:
        return {
            'item_id': self.item_id,
            'glass_type_code': self.glass_type_code,
            'width_mm': self.width_mm,
            'height_mm': self.height_mm,
            'quantity': self.quantity,
            'area_m2': self.total_area_m2
        }

    def __str__(self) -> str:
        return f"CutRequest({self.glass_type_code}, {self.width_mm}x{self.height_mm} x{self.quantity})"


@dataclass(frozen=True)
class BillingResult:
    """Minimum billable combination of full and half sheets for one glass type."""
    full_sheets: int
    half_sheets: int
    total_billable_area_m2: float
    used_area_m2: float
    waste_percentage: float

    @property
    def waste_area_m2(self) -> float:
        return self.total_billable_area_m2 - self.used_area_m2

    def to_dict(self) -> Dict[str, Any]:
        return {
            'full_sheets': self.full_sheets,
            'half_sheets': self.half_sheets,
            'total_billable_area_m2': self.total_billable_area_m2,
            'used_area_m2': self.used_area_m2,
            'waste_percentage': self.waste_percentage
        }


@dataclass(frozen=True)
class GroupQuote:
    """
    Billing and price of all the cut requests sharing one glass type.
    """
    glass_type: GlassType
    cut_requests: Tuple[CutRequest, ...]
    billing: BillingResult
    price: float
    baseline_price: float
    description: str = ""

    @property
    def glass_type_code(self) -> str:
        return self.glass_type.code

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'glass_type_code': self.glass_type.code,
            'glass_type_name': self.glass_type.name,
            'price_per_m2': self.glass_type.price_per_m2,
            'line_items': len(self.cut_requests),
            'pieces': sum(c.quantity for c in self.cut_requests),
            'price': self.price,
            'baseline_price': self.baseline_price,
            'description': self.description
        }
        data.update(self.billing.to_dict())
        return data


@dataclass(frozen=True)
class SkippedGroup:
    """A group of cut requests whose glass type code could not be resolved."""
    glass_type_code: str
    cut_requests: Tuple[CutRequest, ...]
    error: UnknownGlassTypeError

    def to_dict(self) -> Dict[str, Any]:
        return {
            'glass_type_code': self.glass_type_code,
            'line_items': len(self.cut_requests),
            'error': str(self.error)
        }


@dataclass(frozen=True)
class OptimizationResult:
    """
    Aggregate quote for an order.

    ``baseline_price`` is the cosmetic "non-optimized" comparison figure; it is
    only used to derive ``savings`` and ``savings_percentage`` for display.
    """
    total_price: float
    per_type_breakdown: Tuple[GroupQuote, ...]
    skipped_groups: Tuple[SkippedGroup, ...] = ()
    baseline_price: float = 0.0
    savings: float = 0.0
    savings_percentage: float = 0.0

    @property
    def errors(self) -> List[UnknownGlassTypeError]:
        return [group.error for group in self.skipped_groups]

    @property
    def has_skipped_groups(self) -> bool:
        return bool(self.skipped_groups)

    @property
    def total_billable_area_m2(self) -> float:
        return sum(g.billing.total_billable_area_m2 for g in self.per_type_breakdown)

    @property
    def total_used_area_m2(self) -> float:
        return sum(g.billing.used_area_m2 for g in self.per_type_breakdown)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_price': self.total_price,
            'baseline_price': self.baseline_price,
            'savings': self.savings,
            'savings_percentage': self.savings_percentage,
            'per_type_breakdown': [g.to_dict() for g in self.per_type_breakdown],
            'skipped_groups': [s.to_dict() for s in self.skipped_groups]
        }


@dataclass(frozen=True)
class CutPosition:
    """Placement of one piece on a sheet, in sheet-local mm coordinates."""
    x: float
    y: float
    width: float
    height: float
    rotated: bool
    id: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'rotated': self.rotated
        }


@dataclass(frozen=True)
class LayoutPlan:
    """
    Grid layout of one cut spec on one stock sheet.

    Positions are ordered row-major; pieces that do not fit on this sheet are
    counted in ``overflow_count``.
    """
    cut_width_mm: float
    cut_height_mm: float
    quantity: int
    stock_width_mm: float
    stock_height_mm: float
    pieces_per_sheet: int
    pieces_in_this_sheet: int
    rotated: bool
    overflow_count: int
    efficiency_percentage: float
    positions: Tuple[CutPosition, ...] = field(default_factory=tuple)

    @property
    def has_overflow(self) -> bool:
        return self.overflow_count > 0

    @property
    def piece_dimensions(self) -> Tuple[float, float]:
        """Piece width and height as laid out (swapped when rotated)."""
        if self.rotated:
            return self.cut_height_mm, self.cut_width_mm
        return self.cut_width_mm, self.cut_height_mm

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cut_width_mm': self.cut_width_mm,
            'cut_height_mm': self.cut_height_mm,
            'quantity': self.quantity,
            'stock_width_mm': self.stock_width_mm,
            'stock_height_mm': self.stock_height_mm,
            'pieces_per_sheet': self.pieces_per_sheet,
            'pieces_in_this_sheet': self.pieces_in_this_sheet,
            'rotated': self.rotated,
            'overflow_count': self.overflow_count,
            'efficiency_percentage': self.efficiency_percentage,
            'positions': [p.to_dict() for p in self.positions]
        }

    def __str__(self) -> str:
        return (f"LayoutPlan({self.cut_width_mm}x{self.cut_height_mm} on "
                f"{self.stock_width_mm}x{self.stock_height_mm}, {self.pieces_in_this_sheet} placed, "
                f"{self.overflow_count} overflow)")
