"""Shared fixtures for GlassWise tests."""

import pytest

from data_models import CutRequest, GlassType
from glass_catalog import build_catalog


@pytest.fixture
def whole_sheet_glass() -> GlassType:
    """3600x2500 glass sold by whole sheet only, 10000 per m²."""
    return GlassType(code="FLI10", name="Float Incoloro 10mm", stock_width_mm=3600, stock_height_mm=2500,
                     price_per_m2=10000, half_sheet_eligible=False, thickness_mm=10)


@pytest.fixture
def half_sheet_glass() -> GlassType:
    """3600x2500 glass that may be billed by half sheet, 10000 per m²."""
    return GlassType(code="FL104", name="Float Incoloro 4mm", stock_width_mm=3600, stock_height_mm=2500,
                     price_per_m2=10000, half_sheet_eligible=True, thickness_mm=4)


@pytest.fixture
def laminated_glass() -> GlassType:
    return GlassType(code="LAMI44", name="Laminado 4+4", stock_width_mm=3600, stock_height_mm=2500,
                     price_per_m2=50000, half_sheet_eligible=True, thickness_mm=8)


@pytest.fixture
def catalog(whole_sheet_glass, half_sheet_glass, laminated_glass):
    return build_catalog([whole_sheet_glass, half_sheet_glass, laminated_glass])


@pytest.fixture
def scenario_a_request() -> CutRequest:
    """Ten 1200x800 cuts: 9.6 m² requested."""
    return CutRequest(glass_type_code="FLI10", width_mm=1200, height_mm=800, quantity=10, item_id="A1")
