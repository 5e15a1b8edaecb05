"""
Order price optimization for GlassWise.
Pools the cut requests of each glass type, bills every pool in full/half
sheets and totals the order, with a non-optimized baseline for comparison.
"""

import logging
from typing import List, Dict, Optional, Any, Mapping, Sequence

from data_models import (CutRequest, GlassType, GroupQuote, OptimizationResult, SkippedGroup,
                         UnknownGlassTypeError, ValidationError)
from sheet_billing import calculate_glass_type_billing, calculate_billing_price, describe_billing
from optimization_baseline import (WasteHeuristicConfig, DEFAULT_WASTE_CONFIG, calculate_baseline_price,
                                   calculate_savings)

logger = logging.getLogger(__name__)

GlassTypeCode = str


def validate_cut_request(cut_request: CutRequest) -> None:
    """
    Check a cut request before it is grouped or priced.

    Raises:
        ValidationError: If a dimension is not positive or the quantity is below 1
    """
    if cut_request.width_mm <= 0:
        raise ValidationError(f"Cut width must be positive, got {cut_request.width_mm} "
                              f"for {cut_request}", kind="dimensions", field="width_mm")
    if cut_request.height_mm <= 0:
        raise ValidationError(f"Cut height must be positive, got {cut_request.height_mm} "
                              f"for {cut_request}", kind="dimensions", field="height_mm")
    if int(cut_request.quantity) != cut_request.quantity or cut_request.quantity < 1:
        raise ValidationError(f"Quantity must be a whole number of at least 1, got {cut_request.quantity} "
                              f"for {cut_request}", kind="quantity", field="quantity")


def group_cut_requests(cut_requests: Sequence[CutRequest]) -> Dict[GlassTypeCode, List[CutRequest]]:
    """
    Group cut requests by glass type code, keeping first-seen order of codes and lines.

    Args:
        cut_requests: Order lines

    Returns:
        Dictionary mapping glass type code to its cut requests
    """
    groups: Dict[GlassTypeCode, List[CutRequest]] = {}
    for cut_request in cut_requests:
        groups.setdefault(cut_request.glass_type_code, []).append(cut_request)
    return groups


def calculate_group_quote(glass_type: GlassType, cut_requests: Sequence[CutRequest],
                          waste_config: WasteHeuristicConfig = DEFAULT_WASTE_CONFIG) -> GroupQuote:
    """
    Bill and price all cut requests of one glass type.

    Args:
        glass_type: Glass type of the group
        cut_requests: Cut requests sharing that glass type
        waste_config: Parameters for the baseline comparison price

    Returns:
        GroupQuote with billing, price and baseline price
    """
    requested_area = sum((c.width_mm / 1000) * (c.height_mm / 1000) * c.quantity for c in cut_requests)
    billing = calculate_glass_type_billing(requested_area, glass_type)
    price = calculate_billing_price(billing, glass_type)
    baseline_price = calculate_baseline_price(cut_requests, glass_type, waste_config)

    return GroupQuote(
        glass_type=glass_type,
        cut_requests=tuple(cut_requests),
        billing=billing,
        price=price,
        baseline_price=baseline_price,
        description=describe_billing(billing)
    )


def optimize(cut_requests: Sequence[CutRequest], catalog: Mapping[GlassTypeCode, GlassType],
             waste_config: Optional[WasteHeuristicConfig] = None) -> OptimizationResult:
    """
    Quote an order by billing each glass type's pooled area in full/half sheets.

    All requests are validated before any grouping happens. Groups whose glass
    type code is missing from the catalog are reported in ``skipped_groups``
    with an ``UnknownGlassTypeError``; the remaining groups are still priced.

    Args:
        cut_requests: Order lines
        catalog: Mapping of glass type code to GlassType
        waste_config: Parameters for the baseline comparison price

    Returns:
        OptimizationResult with total price, per-type breakdown, skipped groups and savings

    Raises:
        ValidationError: If any cut request is invalid
    """
    config = waste_config or DEFAULT_WASTE_CONFIG
    requests = list(cut_requests)

    for cut_request in requests:
        validate_cut_request(cut_request)

    groups = group_cut_requests(requests)
    breakdown: List[GroupQuote] = []
    skipped: List[SkippedGroup] = []

    for code, group_requests in groups.items():
        glass_type = catalog.get(code)
        if glass_type is None:
            skipped.append(SkippedGroup(
                glass_type_code=code,
                cut_requests=tuple(group_requests),
                error=UnknownGlassTypeError(code)
            ))
            logger.debug(f"Skipping {len(group_requests)} cut requests with unknown glass type {code!r}")
            continue

        group_quote = calculate_group_quote(glass_type, group_requests, config)
        breakdown.append(group_quote)
        logger.debug(f"{code}: {group_quote.billing.used_area_m2:.3f} m² requested, "
                     f"{group_quote.description or 'nothing'} billed, price {group_quote.price:.2f}")

    total_price = sum(g.price for g in breakdown)
    baseline_price = sum(g.baseline_price for g in breakdown)
    savings, savings_percentage = calculate_savings(baseline_price, total_price)

    return OptimizationResult(
        total_price=total_price,
        per_type_breakdown=tuple(breakdown),
        skipped_groups=tuple(skipped),
        baseline_price=baseline_price,
        savings=savings,
        savings_percentage=savings_percentage
    )


def apportion_line_item_prices(result: OptimizationResult) -> List[Dict[str, Any]]:
    """
    Split each group's price over its order lines in proportion to requested area.

    Args:
        result: Optimizer output

    Returns:
        One dictionary per priced order line, in group order
    """
    rows = []
    for group in result.per_type_breakdown:
        group_area = group.billing.used_area_m2
        for cut_request in group.cut_requests:
            share = cut_request.total_area_m2 / group_area if group_area > 0 else 0.0
            rows.append({
                'item_id': cut_request.item_id,
                'glass_type_code': group.glass_type.code,
                'glass_type_name': group.glass_type.name,
                'width_mm': cut_request.width_mm,
                'height_mm': cut_request.height_mm,
                'quantity': cut_request.quantity,
                'area_m2': cut_request.total_area_m2,
                'price': share * group.price
            })
    return rows
