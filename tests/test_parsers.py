"""Tests for cut list and catalog parsing."""

import io

import pandas as pd
import pytest

from data_models import CutRequest
from parsers import (DEFAULT_TEXT_COLUMN_LABELS, cut_requests_to_dataframe, load_cut_requests, load_glass_catalog,
                     parse_cut_requests_text, validate_data_consistency)


CUT_LIST_CSV = """Item ID,Glass Type,Width (mm),Height (mm),Quantity
V1,FL104,1000,500,4
V2,FL104,600,600,
BAD,FL104,-5,600,1
M1,LAMI44,900,2000,1
"""

CATALOG_CSV = """Code,Name,Stock Width (mm),Stock Height (mm),Price per m2,Thickness (mm)
FL104,Float Incoloro 4mm,3600,2500,13700.14,4
FLI10,Float Incoloro 10mm,3600,2500,37654.25,10
BROKEN,Broken,0,2500,100,4
"""


def test_load_cut_requests_from_csv_file(tmp_path):
    path = tmp_path / "order.csv"
    path.write_text(CUT_LIST_CSV, encoding="utf-8")

    cut_requests = load_cut_requests(str(path))

    assert [c.item_id for c in cut_requests] == ["V1", "V2", "M1"]
    assert cut_requests[0] == CutRequest("FL104", 1000.0, 500.0, 4, "V1")
    # Missing quantity defaults to one piece
    assert cut_requests[1].quantity == 1


def test_load_cut_requests_spanish_headers():
    source = io.StringIO("Vidrio,Ancho,Alto,Cantidad\nESPI04,800,1200,2\n")

    cut_requests = load_cut_requests(source)

    assert cut_requests == [CutRequest("ESPI04", 800.0, 1200.0, 2, "1")]


def test_load_cut_requests_from_excel(tmp_path):
    path = tmp_path / "order.xlsx"
    pd.DataFrame({'Glass Type': ['FL104'], 'Width': [700], 'Height': [300], 'Qty': [3]}).to_excel(path, index=False)

    cut_requests = load_cut_requests(str(path))

    assert len(cut_requests) == 1
    assert cut_requests[0].quantity == 3


def test_load_cut_requests_missing_columns():
    with pytest.raises(ValueError, match="Missing required columns"):
        load_cut_requests(io.StringIO("Glass Type,Width\nFL104,100\n"))


def test_load_cut_requests_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_cut_requests(str(tmp_path / "missing.csv"))


def test_parse_text_without_header():
    text = "FL104, 1000, 500, 2\nLAMI44,900,2000"

    cut_requests = parse_cut_requests_text(text)

    assert cut_requests == [
        CutRequest("FL104", 1000.0, 500.0, 2, "1"),
        CutRequest("LAMI44", 900.0, 2000.0, 1, "2"),
    ]


def test_parse_tab_separated_text_with_header():
    text = "Glass Type\tWidth\tHeight\tQuantity\tItem ID\nFL104\t1000\t500\t2\tA\nFL104\tabc\t500\t1\tB"

    cut_requests = parse_cut_requests_text(text)

    assert cut_requests == [CutRequest("FL104", 1000.0, 500.0, 2, "A")]


def test_text_without_header_reads_default_column_order():
    cut_requests = parse_cut_requests_text("FL104,1000,500,4,V1\nFL104,600,600,2,V2")

    assert cut_requests == [
        CutRequest("FL104", 1000.0, 500.0, 4, "V1"),
        CutRequest("FL104", 600.0, 600.0, 2, "V2"),
    ]


def test_default_column_labels_describe_header_less_order():
    rows = "FL104,1000,500,4,V1\nLAMI44,900,2000,1,M1"
    with_header = ",".join(DEFAULT_TEXT_COLUMN_LABELS) + "\n" + rows

    assert parse_cut_requests_text(with_header) == parse_cut_requests_text(rows)


def test_header_detected_when_first_column_is_unknown():
    text = "Ref,Glass Type,Width,Height,Qty\nR1,FL104,1000,500,2"

    cut_requests = parse_cut_requests_text(text)

    assert cut_requests == [CutRequest("FL104", 1000.0, 500.0, 2, "1")]


def test_parse_empty_text():
    assert parse_cut_requests_text("   ") == []


def test_load_glass_catalog(tmp_path):
    path = tmp_path / "catalog.csv"
    path.write_text(CATALOG_CSV, encoding="utf-8")

    catalog = load_glass_catalog(str(path))

    assert set(catalog) == {"FL104", "FLI10"}
    # Half-sheet flag derived from the name when the column is absent
    assert catalog["FL104"].half_sheet_eligible
    assert not catalog["FLI10"].half_sheet_eligible
    assert catalog["FL104"].thickness_mm == 4


def test_load_glass_catalog_explicit_half_sheet_column():
    source = io.StringIO("Code,Name,Stock Width (mm),Stock Height (mm),Price per m2,Half Sheet\n"
                         "FLI10,Float Incoloro 10mm,3600,2500,37654.25,1\n")

    catalog = load_glass_catalog(source)

    assert catalog["FLI10"].half_sheet_eligible


def test_validate_data_consistency(catalog):
    cut_requests = [
        CutRequest("FL104", 100, 100, 2),
        CutRequest("NOPE", 100, 100, 1),
        CutRequest("NOPE", 200, 100, 1),
    ]

    results = validate_data_consistency(cut_requests, catalog)

    assert results['total_requests'] == 3
    assert results['total_pieces'] == 4
    assert results['valid_requests'] == 1
    assert results['invalid_requests'] == 2
    assert results['unknown_glass_types'] == {"NOPE"}


def test_cut_requests_to_dataframe(catalog):
    df = cut_requests_to_dataframe([CutRequest("FL104", 1000, 500, 2, "A"), CutRequest("X", 1, 1)], catalog)

    assert list(df['Glass Name']) == ["Float Incoloro 4mm", "Unknown"]
    assert df.loc[0, 'Area (m²)'] == pytest.approx(1.0)
