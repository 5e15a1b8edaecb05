"""
Non-optimized baseline price for GlassWise savings display.

The baseline simulates a wasteful purchase (whole sheets, inflated by a waste
multiplier) so the quote screen can show how much the sheet-billing policy
saves. It is a presentation figure only and never feeds the real price.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from data_models import CutRequest, GlassType, ValidationError


@dataclass(frozen=True)
class WasteHeuristicConfig:
    """
    Tunable parameters of the waste multiplier.

    Attributes:
        base_multiplier: Starting multiplier applied to the requested area
        variety_threshold: Number of distinct cut sizes tolerated before penalising
        per_variety_increment: Added per distinct cut size beyond the threshold
        small_cut_fraction: A cut below this fraction of a full sheet counts as small
        per_small_cut_increment: Added per small cut
        dimension_module_mm: Cuts with a side not a multiple of this count as odd
        per_odd_dimension_increment: Added per odd-dimension cut
        max_multiplier: Upper bound of the multiplier
    """
    base_multiplier: float = 1.25
    variety_threshold: int = 3
    per_variety_increment: float = 0.05
    small_cut_fraction: float = 0.25
    per_small_cut_increment: float = 0.03
    dimension_module_mm: float = 100.0
    per_odd_dimension_increment: float = 0.02
    max_multiplier: float = 1.5

    def __post_init__(self):
        if self.base_multiplier < 1:
            raise ValidationError("base_multiplier must be at least 1",
                                  kind="configuration", field="base_multiplier")
        if self.max_multiplier < self.base_multiplier:
            raise ValidationError("max_multiplier must not be below base_multiplier",
                                  kind="configuration", field="max_multiplier")
        if self.dimension_module_mm <= 0:
            raise ValidationError("dimension_module_mm must be positive",
                                  kind="configuration", field="dimension_module_mm")
        if self.variety_threshold < 0:
            raise ValidationError("variety_threshold must not be negative",
                                  kind="configuration", field="variety_threshold")


DEFAULT_WASTE_CONFIG = WasteHeuristicConfig()


def _is_odd_dimension(value_mm: float, module_mm: float) -> bool:
    return not math.isclose(math.fmod(value_mm, module_mm), 0.0, abs_tol=1e-9)


def calculate_waste_multiplier(cut_requests: Sequence[CutRequest], glass_type: GlassType,
                               config: WasteHeuristicConfig = DEFAULT_WASTE_CONFIG) -> float:
    """
    Estimate how much extra glass a naive purchase would need for these cuts.

    Each order line counts once for the small-cut and odd-dimension penalties,
    regardless of its quantity.

    Args:
        cut_requests: Cut requests of one glass type
        glass_type: Glass type of the group
        config: Heuristic parameters

    Returns:
        Multiplier between ``config.base_multiplier`` and ``config.max_multiplier``
    """
    multiplier = config.base_multiplier

    varieties = {(c.width_mm, c.height_mm) for c in cut_requests}
    extra_varieties = max(0, len(varieties) - config.variety_threshold)
    multiplier += extra_varieties * config.per_variety_increment

    small_cut_limit = glass_type.full_sheet_area_m2 * config.small_cut_fraction
    small_cuts = sum(1 for c in cut_requests if c.area_m2 < small_cut_limit)
    multiplier += small_cuts * config.per_small_cut_increment

    odd_cuts = sum(
        1 for c in cut_requests
        if _is_odd_dimension(c.width_mm, config.dimension_module_mm)
        or _is_odd_dimension(c.height_mm, config.dimension_module_mm)
    )
    multiplier += odd_cuts * config.per_odd_dimension_increment

    return min(multiplier, config.max_multiplier)


def calculate_baseline_price(cut_requests: Sequence[CutRequest], glass_type: GlassType,
                             config: WasteHeuristicConfig = DEFAULT_WASTE_CONFIG) -> float:
    """
    Price of the simulated non-optimized purchase for one glass type.

    Args:
        cut_requests: Cut requests of one glass type
        glass_type: Glass type of the group
        config: Heuristic parameters

    Returns:
        Whole-sheet price of the inflated area, 0 for an empty group
    """
    requested_area = sum(c.total_area_m2 for c in cut_requests)
    if requested_area <= 0:
        return 0.0

    multiplier = calculate_waste_multiplier(cut_requests, glass_type, config)
    inefficient_area = requested_area * multiplier
    full_sheet_area = glass_type.full_sheet_area_m2
    sheets_needed = math.ceil(inefficient_area / full_sheet_area)
    return sheets_needed * full_sheet_area * glass_type.price_per_m2


def calculate_savings(baseline_price: float, optimized_price: float) -> Tuple[float, float]:
    """
    Savings of the optimized price against the baseline.

    Returns:
        Tuple of (savings, savings_percentage)
    """
    savings = baseline_price - optimized_price
    savings_percentage = (savings / baseline_price * 100) if baseline_price > 0 else 0.0
    return savings, savings_percentage
