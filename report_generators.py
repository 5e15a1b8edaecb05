"""
Excel report generator for GlassWise quotes.
"""

import io
import logging
from typing import List, Sequence, Tuple, Union

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from data_models import CutRequest, LayoutPlan, OptimizationResult, UnknownGlassTypeError
from layout_planner import sheets_required
from optimization_core import apportion_line_item_prices

logger = logging.getLogger(__name__)

HEADER_FILL = PatternFill(start_color="CCCCCC", end_color="CCCCCC", fill_type="solid")
CURRENCY_FORMAT = '"$" #,##0.00'
AREA_FORMAT = '0.000'

PlanResults = Sequence[Tuple[CutRequest, Union[LayoutPlan, UnknownGlassTypeError]]]


def write_header_row(ws, headers: List[str], row: int = 1) -> None:
    """Write a bold, grey-filled header row."""
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=row, column=col, value=header)
        cell.font = Font(bold=True)
        cell.fill = HEADER_FILL


def autosize_columns(ws, min_width: int = 10, max_width: int = 50) -> None:
    for column_cells in ws.columns:
        length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column_cells)
        ws.column_dimensions[get_column_letter(column_cells[0].column)].width = \
            max(min_width, min(max_width, length + 2))


def create_summary_tab(ws, result: OptimizationResult, order_name: str) -> None:
    """Create the summary tab with order totals and savings."""
    title = f"GlassWise Quote Summary - {order_name}" if order_name else "GlassWise Quote Summary"
    ws['A1'] = title
    ws['A1'].font = Font(size=16, bold=True)
    ws.merge_cells('A1:D1')

    full_sheets = sum(g.billing.full_sheets for g in result.per_type_breakdown)
    half_sheets = sum(g.billing.half_sheets for g in result.per_type_breakdown)
    pieces = sum(c.quantity for g in result.per_type_breakdown for c in g.cut_requests)

    metrics = [
        ("Glass Types Quoted", len(result.per_type_breakdown), None),
        ("Pieces Quoted", pieces, None),
        ("Full Sheets Billed", full_sheets, None),
        ("Half Sheets Billed", half_sheets, None),
        ("Requested Area (m²)", result.total_used_area_m2, AREA_FORMAT),
        ("Billable Area (m²)", result.total_billable_area_m2, AREA_FORMAT),
        ("Total Price", result.total_price, CURRENCY_FORMAT),
        ("Non-optimized Price", result.baseline_price, CURRENCY_FORMAT),
        ("Savings", result.savings, CURRENCY_FORMAT),
        ("Savings Percentage", round(result.savings_percentage, 2), None),
        ("Skipped Glass Types", len(result.skipped_groups), None)
    ]

    row = 3
    for metric, value, number_format in metrics:
        ws[f'A{row}'] = metric
        ws[f'A{row}'].font = Font(bold=True)
        ws[f'B{row}'] = value
        if number_format:
            ws[f'B{row}'].number_format = number_format
        row += 1

    ws.column_dimensions['A'].width = 28
    ws.column_dimensions['B'].width = 20


def create_breakdown_tab(ws, result: OptimizationResult) -> None:
    """Create the per glass type billing breakdown tab."""
    headers = ['Code', 'Glass Type', 'Price per m²', 'Order Lines', 'Pieces', 'Requested Area (m²)',
               'Full Sheets', 'Half Sheets', 'Billable Area (m²)', 'Waste %', 'Billed', 'Price',
               'Non-optimized Price']
    write_header_row(ws, headers)

    for row, group in enumerate(result.per_type_breakdown, 2):
        values = [
            group.glass_type.code,
            group.glass_type.name,
            group.glass_type.price_per_m2,
            len(group.cut_requests),
            sum(c.quantity for c in group.cut_requests),
            group.billing.used_area_m2,
            group.billing.full_sheets,
            group.billing.half_sheets,
            group.billing.total_billable_area_m2,
            round(group.billing.waste_percentage, 2),
            group.description,
            group.price,
            group.baseline_price
        ]
        for col, value in enumerate(values, 1):
            ws.cell(row=row, column=col, value=value)
        for col in (3, 12, 13):
            ws.cell(row=row, column=col).number_format = CURRENCY_FORMAT
        for col in (6, 9):
            ws.cell(row=row, column=col).number_format = AREA_FORMAT

    autosize_columns(ws)


def create_line_items_tab(ws, result: OptimizationResult) -> None:
    """Create the order lines tab with each line's share of its group price."""
    headers = ['Item ID', 'Code', 'Glass Type', 'Width (mm)', 'Height (mm)', 'Quantity', 'Area (m²)',
               'Price Share']
    write_header_row(ws, headers)

    for row, item in enumerate(apportion_line_item_prices(result), 2):
        values = [item['item_id'], item['glass_type_code'], item['glass_type_name'], item['width_mm'],
                  item['height_mm'], item['quantity'], item['area_m2'], item['price']]
        for col, value in enumerate(values, 1):
            ws.cell(row=row, column=col, value=value)
        ws.cell(row=row, column=7).number_format = AREA_FORMAT
        ws.cell(row=row, column=8).number_format = CURRENCY_FORMAT

    autosize_columns(ws)


def create_skipped_groups_tab(ws, result: OptimizationResult) -> None:
    """Create the tab listing order lines whose glass type is not in the catalog."""
    headers = ['Item ID', 'Code', 'Width (mm)', 'Height (mm)', 'Quantity', 'Reason']
    write_header_row(ws, headers)

    row = 2
    for skipped in result.skipped_groups:
        for cut_request in skipped.cut_requests:
            values = [cut_request.item_id, skipped.glass_type_code, cut_request.width_mm,
                      cut_request.height_mm, cut_request.quantity, str(skipped.error)]
            for col, value in enumerate(values, 1):
                ws.cell(row=row, column=col, value=value)
            row += 1

    if row == 2:
        ws.cell(row=2, column=1, value="No skipped order lines")

    autosize_columns(ws)


def create_cut_layouts_tab(ws, plan_results: PlanResults) -> None:
    """Create the per order line layout tab."""
    headers = ['Item ID', 'Code', 'Width (mm)', 'Height (mm)', 'Quantity', 'Rotated', 'Pieces per Sheet',
               'In First Sheet', 'Overflow', 'Sheets Required', 'Efficiency %', 'Note']
    write_header_row(ws, headers)

    for row, (cut_request, outcome) in enumerate(plan_results, 2):
        values = [cut_request.item_id, cut_request.glass_type_code, cut_request.width_mm,
                  cut_request.height_mm, cut_request.quantity]
        if isinstance(outcome, LayoutPlan):
            note = "Does not fit on the stock sheet" if outcome.pieces_per_sheet == 0 else ""
            values += ['Yes' if outcome.rotated else 'No', outcome.pieces_per_sheet,
                       outcome.pieces_in_this_sheet, outcome.overflow_count, sheets_required(outcome),
                       round(outcome.efficiency_percentage, 2), note]
        else:
            values += [None] * 6 + [str(outcome)]
        for col, value in enumerate(values, 1):
            ws.cell(row=row, column=col, value=value)

    autosize_columns(ws)


def create_excel_report(result: OptimizationResult, plan_results: PlanResults = (), order_name: str = "") -> bytes:
    """
    Create the Excel quote workbook.

    Args:
        result: Optimizer output
        plan_results: Output of layout_planner.plan_order, adds a Cut Layouts tab when given
        order_name: Order name for the summary title

    Returns:
        The .xlsx file content
    """
    try:
        wb = Workbook()
        if "Sheet" in wb.sheetnames:
            wb.remove(wb["Sheet"])

        create_summary_tab(wb.create_sheet("Summary", 0), result, order_name)
        create_breakdown_tab(wb.create_sheet("Glass Type Breakdown", 1), result)
        create_line_items_tab(wb.create_sheet("Line Items", 2), result)
        create_skipped_groups_tab(wb.create_sheet("Skipped Groups", 3), result)
        if plan_results:
            create_cut_layouts_tab(wb.create_sheet("Cut Layouts", 4), plan_results)

        buffer = io.BytesIO()
        wb.save(buffer)
        buffer.seek(0)

        return buffer.getvalue()

    except Exception as e:
        logger.error(f"Excel generation failed: {e}")
        raise
