"""
Simple report generation for GlassWise using the standard csv module.
Creates text and CSV reports for quotes and the order confirmation message.
"""

import csv
import io
from typing import List, Dict, Any, Sequence, Tuple, Union

from data_models import CutRequest, LayoutPlan, OptimizationResult, UnknownGlassTypeError, ValidationError
from layout_planner import sheets_required
from optimization_core import apportion_line_item_prices
from product_quotation import DVHQuote, ProductQuote
from utils import format_currency, format_area, format_percentage


def generate_quote_text(result: OptimizationResult, order_name: str = "") -> str:
    """
    Generate text-based quote report.

    Args:
        result: Optimizer output
        order_name: Order name to include in report header

    Returns:
        Formatted text report
    """
    report_lines = []

    if order_name:
        report_lines.append(f"GLASS QUOTE - ORDER: {order_name}")
    else:
        report_lines.append("GLASS QUOTE")

    report_lines.append("=" * 60)
    report_lines.append("")

    report_lines.append("SUMMARY:")
    report_lines.append(f"Total Price: {format_currency(result.total_price)}")
    report_lines.append(f"Glass Types Quoted: {len(result.per_type_breakdown)}")
    report_lines.append(f"Billable Area: {format_area(result.total_billable_area_m2)}")
    report_lines.append(f"Requested Area: {format_area(result.total_used_area_m2)}")
    report_lines.append(f"Non-optimized Price: {format_currency(result.baseline_price)}")
    report_lines.append(f"Savings: {format_currency(result.savings)} ({format_percentage(result.savings_percentage)})")
    report_lines.append("")

    for group in result.per_type_breakdown:
        report_lines.append(f"GLASS TYPE: {group.glass_type}")
        report_lines.append(f"Billed: {group.description}")
        report_lines.append(f"Billable Area: {format_area(group.billing.total_billable_area_m2)}")
        report_lines.append(f"Waste: {format_percentage(group.billing.waste_percentage)}")
        report_lines.append(f"Price: {format_currency(group.price)}")
        report_lines.append("")

        report_lines.append("Item ID".ljust(12) + "Dimensions (mm)".ljust(20) + "Qty".ljust(6) + "Area")
        report_lines.append("-" * 50)
        for cut_request in group.cut_requests:
            dimensions = f"{cut_request.width_mm:.0f}x{cut_request.height_mm:.0f}"
            report_lines.append(
                str(cut_request.item_id or "")[:11].ljust(12) +
                dimensions.ljust(20) +
                str(cut_request.quantity).ljust(6) +
                format_area(cut_request.total_area_m2)
            )
        report_lines.append("")
        report_lines.append("-" * 60)
        report_lines.append("")

    if result.skipped_groups:
        report_lines.append("SKIPPED (UNKNOWN GLASS TYPE):")
        for skipped in result.skipped_groups:
            report_lines.append(f"{skipped.glass_type_code}: {len(skipped.cut_requests)} order lines")
        report_lines.append("")

    return "\n".join(report_lines)


def generate_line_items_csv(result: OptimizationResult, order_name: str = "") -> str:
    """
    Generate CSV report with one row per order line and its share of the group price.

    Returns:
        CSV content as string
    """
    output = io.StringIO()

    if order_name:
        output.write(f"# GlassWise Quote - Order: {order_name}\n")
    else:
        output.write("# GlassWise Quote\n")

    output.write(f"# Total Price: {result.total_price:.2f}\n")
    output.write(f"# Non-optimized Price: {result.baseline_price:.2f}\n")
    output.write(f"# Savings: {result.savings:.2f}\n")
    output.write(f"# Skipped Glass Types: {len(result.skipped_groups)}\n")
    output.write("#\n")

    writer = csv.writer(output)
    writer.writerow(['Item ID', 'Glass Type Code', 'Glass Type', 'Width (mm)', 'Height (mm)',
                     'Quantity', 'Area (m²)', 'Price Share'])

    for row in apportion_line_item_prices(result):
        writer.writerow([
            row['item_id'],
            row['glass_type_code'],
            row['glass_type_name'],
            row['width_mm'],
            row['height_mm'],
            row['quantity'],
            f"{row['area_m2']:.3f}",
            f"{row['price']:.2f}"
        ])

    if result.skipped_groups:
        output.write("\n# SKIPPED ORDER LINES\n")
        writer.writerow(['Item ID', 'Glass Type Code', 'Width (mm)', 'Height (mm)', 'Quantity', 'Reason'])
        for skipped in result.skipped_groups:
            for cut_request in skipped.cut_requests:
                writer.writerow([
                    cut_request.item_id,
                    cut_request.glass_type_code,
                    cut_request.width_mm,
                    cut_request.height_mm,
                    cut_request.quantity,
                    str(skipped.error)
                ])

    return output.getvalue()


def generate_layout_summary_csv(
        plan_results: Sequence[Tuple[CutRequest, Union[LayoutPlan, UnknownGlassTypeError]]]) -> str:
    """
    Generate per order line layout summary as CSV.

    Returns:
        CSV content as string
    """
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(['Item ID', 'Glass Type Code', 'Cut (mm)', 'Quantity', 'Rotated', 'Pieces per Sheet',
                     'In First Sheet', 'Overflow', 'Sheets Required', 'Efficiency (%)'])

    for cut_request, outcome in plan_results:
        cut = f"{cut_request.width_mm:.0f}x{cut_request.height_mm:.0f}"
        if isinstance(outcome, LayoutPlan):
            writer.writerow([
                cut_request.item_id,
                cut_request.glass_type_code,
                cut,
                cut_request.quantity,
                'Yes' if outcome.rotated else 'No',
                outcome.pieces_per_sheet,
                outcome.pieces_in_this_sheet,
                outcome.overflow_count,
                sheets_required(outcome),
                f"{outcome.efficiency_percentage:.1f}"
            ])
        else:
            writer.writerow([cut_request.item_id, cut_request.glass_type_code, cut, cut_request.quantity,
                             '', '', '', '', '', str(outcome)])

    return output.getvalue()


def order_lines_from_result(result: OptimizationResult) -> List[Dict[str, Any]]:
    """Order message lines for an optimized multi-line quote."""
    lines = []
    for group in result.per_type_breakdown:
        for cut_request in group.cut_requests:
            lines.append({
                'glass_type': group.glass_type.name,
                'width': cut_request.width_mm,
                'height': cut_request.height_mm,
                'unit': 'mm',
                'quantity': cut_request.quantity,
                'thickness_mm': group.glass_type.thickness_mm
            })
    return lines


def order_line_from_product_quote(quote: Union[ProductQuote, DVHQuote], category_name: str = "") -> Dict[str, Any]:
    """Order message line for a single-product or DVH quote."""
    if isinstance(quote, DVHQuote):
        glass_type, thickness = quote.description, quote.chamber_mm
    else:
        glass_type, thickness = quote.glass_type.name, quote.glass_type.thickness_mm
    return {
        'category': category_name,
        'glass_type': glass_type,
        'width': quote.width_mm,
        'height': quote.height_mm,
        'unit': 'mm',
        'quantity': quote.quantity,
        'thickness_mm': thickness
    }


def build_order_message(customer_name: str, customer_phone: str, order_lines: List[Dict[str, Any]],
                        total_price: float, comments: str = "") -> str:
    """
    Build the plain-text order confirmation a customer sends to the shop.

    Args:
        customer_name: Customer name
        customer_phone: Customer phone number
        order_lines: Dictionaries with glass_type, width, height, unit, quantity
            and optionally category and thickness_mm
        total_price: Order total
        comments: Optional free text

    Returns:
        Message text

    Raises:
        ValidationError: If the customer name or phone is blank or there are no lines
    """
    if not customer_name or not customer_name.strip():
        raise ValidationError("Customer name is required", kind="order", field="customer_name")
    if not customer_phone or not customer_phone.strip():
        raise ValidationError("Customer phone is required", kind="order", field="customer_phone")
    if not order_lines:
        raise ValidationError("An order needs at least one line", kind="order", field="order_lines")

    message_lines = [
        f"Hola, soy {customer_name.strip()} y quiero confirmar mi pedido de vidrios:",
        "",
        f"📱 Mi teléfono: {customer_phone.strip()}",
        "",
        "📋 Detalle del pedido:"
    ]

    for line in order_lines:
        quantity = line['quantity']
        unit = line.get('unit', 'mm')
        if line.get('category'):
            message_lines.append(f"- Categoría: {line['category']}")
        message_lines.append(f"- Tipo de vidrio: {line['glass_type']}")
        message_lines.append(f"- Dimensiones: {line['width']:g}{unit} x {line['height']:g}{unit}")
        message_lines.append(f"- Cantidad: {quantity} pieza{'s' if quantity > 1 else ''}")
        if line.get('thickness_mm'):
            message_lines.append(f"- Espesor: {line['thickness_mm']:g}mm")
        message_lines.append("")

    message_lines.append(f"💰 Precio total: {format_currency(total_price, decimals=0)}")

    if comments and comments.strip():
        message_lines.extend(["", "📝 Comentarios adicionales:", comments.strip()])

    message_lines.extend(["", "¡Gracias!"])
    return "\n".join(message_lines)


def create_report_package(result: OptimizationResult,
                          plan_results: Sequence[Tuple[CutRequest, Union[LayoutPlan, UnknownGlassTypeError]]] = (),
                          order_name: str = "") -> Dict[str, str]:
    """
    Create a package of all text reports.

    Returns:
        Dictionary with report names as keys and content as values
    """
    reports = {
        'quote.txt': generate_quote_text(result, order_name),
        'line_items.csv': generate_line_items_csv(result, order_name)
    }
    if plan_results:
        reports['layout_summary.csv'] = generate_layout_summary_csv(plan_results)
    return reports
