"""Tests for text, CSV, Excel and PDF/PNG outputs and the order message."""

import csv
import io

import pytest
from openpyxl import load_workbook

from data_models import CutRequest, ValidationError
from layout_planner import plan, plan_order
from optimization_core import optimize
from pdf_layout_generator import PDFLayoutGenerator, generate_cut_layout_pdf, piece_colors
from report_generators import create_excel_report
from simple_reports import (build_order_message, create_report_package, generate_layout_summary_csv,
                            generate_line_items_csv, generate_quote_text, order_lines_from_result)
from utils import format_area, format_currency, format_percentage


@pytest.fixture
def order():
    return [
        CutRequest("FL104", 1000, 500, 4, "V1"),
        CutRequest("LAMI44", 900, 2000, 1, "M1"),
        CutRequest("UNKNOWN", 500, 500, 1, "X1"),
    ]


@pytest.fixture
def result(order, catalog):
    return optimize(order, catalog)


class TestFormatting:
    @pytest.mark.parametrize("amount, expected", [
        (1234.56, "$ 1.234,56"),
        (0, "$ 0,00"),
        (1234567.891, "$ 1.234.567,89"),
        (-50.5, "-$ 50,50"),
    ])
    def test_format_currency(self, amount, expected):
        assert format_currency(amount) == expected

    def test_format_currency_without_decimals(self):
        assert format_currency(45000, decimals=0) == "$ 45.000"

    def test_area_and_percentage(self):
        assert format_area(4.5) == "4.50 m²"
        assert format_percentage(12.345) == "12.3%"


class TestTextReports:
    def test_quote_text(self, result):
        text = generate_quote_text(result, "Obra 12")

        assert text.startswith("GLASS QUOTE - ORDER: Obra 12")
        assert "Float Incoloro 4mm (FL104)" in text
        assert "SKIPPED (UNKNOWN GLASS TYPE):" in text
        assert "UNKNOWN: 1 order lines" in text

    def test_line_items_csv(self, result):
        content = generate_line_items_csv(result)
        rows = [row for row in csv.reader(io.StringIO(content)) if row and not row[0].startswith("#")]

        assert rows[0][0] == "Item ID"
        assert [r[0] for r in rows[1:3]] == ["V1", "M1"]
        assert sum(float(r[7]) for r in rows[1:3]) == pytest.approx(result.total_price)
        assert "X1" in content

    def test_layout_summary_csv(self, order, catalog):
        content = generate_layout_summary_csv(plan_order(order, catalog))
        rows = list(csv.reader(io.StringIO(content)))

        assert len(rows) == 4
        assert rows[1][0] == "V1"
        assert "Unknown glass type code" in rows[3][-1]

    def test_report_package(self, result, order, catalog):
        reports = create_report_package(result, plan_order(order, catalog), "Obra")

        assert set(reports) == {'quote.txt', 'line_items.csv', 'layout_summary.csv'}


class TestOrderMessage:
    def test_message_contents(self, result):
        message = build_order_message("Ana", "11 5555-1234", order_lines_from_result(result),
                                      result.total_price, comments="Entregar a la mañana")

        assert message.startswith("Hola, soy Ana y quiero confirmar mi pedido de vidrios:")
        assert "📱 Mi teléfono: 11 5555-1234" in message
        assert "- Tipo de vidrio: Float Incoloro 4mm" in message
        assert "- Dimensiones: 1000mm x 500mm" in message
        assert "- Cantidad: 4 piezas" in message
        assert "- Cantidad: 1 pieza\n" in message
        assert f"💰 Precio total: {format_currency(result.total_price, decimals=0)}" in message
        assert "Entregar a la mañana" in message
        assert message.endswith("¡Gracias!")

    @pytest.mark.parametrize("name, phone", [("", "123"), ("Ana", "  ")])
    def test_requires_customer_details(self, result, name, phone):
        with pytest.raises(ValidationError):
            build_order_message(name, phone, order_lines_from_result(result), result.total_price)


class TestExcelReport:
    def test_workbook_tabs(self, result, order, catalog):
        content = create_excel_report(result, plan_order(order, catalog), "Obra 12")

        wb = load_workbook(io.BytesIO(content))
        assert wb.sheetnames == ["Summary", "Glass Type Breakdown", "Line Items", "Skipped Groups", "Cut Layouts"]
        assert wb["Summary"]["A1"].value == "GlassWise Quote Summary - Obra 12"
        assert wb["Glass Type Breakdown"]["A2"].value == "FL104"
        assert wb["Line Items"].max_row == 3
        assert wb["Skipped Groups"]["B2"].value == "UNKNOWN"

    def test_without_layouts(self, result):
        wb = load_workbook(io.BytesIO(create_excel_report(result)))

        assert "Cut Layouts" not in wb.sheetnames


class TestLayoutRendering:
    def test_pdf(self):
        layouts = [("FL104 - V1", plan(600, 500, 40, 3600, 2500)), ("too big", plan(4000, 3000, 1, 3600, 2500))]

        content = generate_cut_layout_pdf(layouts)

        assert content.startswith(b"%PDF")

    def test_png(self):
        content = PDFLayoutGenerator().generate_layout_png(plan(500, 600, 5, 3600, 2500), "rotated")

        assert content.startswith(b"\x89PNG")

    def test_piece_colors_are_distinct(self):
        colors = piece_colors(10)

        assert len(colors) == 10
        assert len({fill for fill, _ in colors}) == 10
