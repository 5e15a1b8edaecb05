"""
Glass catalog for GlassWise.
Holds the default product categories, the half-sheet eligibility rule and
helpers that turn catalog records into immutable GlassType lookups.
"""

import logging
from types import MappingProxyType
from typing import List, Dict, Any, Iterable, Mapping

from data_models import GlassType, ValidationError

logger = logging.getLogger(__name__)

STANDARD_SHEET_WIDTH_MM = 3600
STANDARD_SHEET_HEIGHT_MM = 2500

# Glass types sold by half sheet by name
HALF_SHEET_GLASS_TYPES = [
    "Float Incoloro 2mm",
    "Float Incoloro 3mm",
    "Float Incoloro 4mm",
    "Float Incoloro 5mm",
    "Float Incoloro 6mm",
    "Laminado 3+3 Incoloro",
    "Laminado 4+4 Incoloro",
    "Laminado 5+5 Incoloro",
    "Espejo Incoloro 2mm",
    "Espejo Incoloro 3mm",
    "Espejo Incoloro 4mm",
    "Espejo Incoloro 5mm",
    "Espejo Incoloro 6mm",
]

_THIN_FLOAT_MARKERS = ("2mm", "3mm", "4mm", "5mm", "6mm", "f3", "f4", "f5", "f6")
_MIRROR_MARKERS = ("2mm", "3mm", "4mm", "5mm", "6mm")
_LAMINATE_MARKERS = ("3+3", "4+4", "5+5")


def can_sell_half_sheet(glass_type_name: str) -> bool:
    """
    Decide from its name whether a glass type may be billed by half sheet.

    Thin float (2-6 mm), mirror (2-6 mm) and 3+3/4+4/5+5 laminates qualify.
    2.2 mm glass and float of 8, 10 or 12 mm are always sold by whole sheet.

    Args:
        glass_type_name: Catalog display name

    Returns:
        True if the type can be billed in half-sheet units
    """
    if not glass_type_name:
        return False

    if glass_type_name in HALF_SHEET_GLASS_TYPES:
        return True

    name = glass_type_name.lower()

    if "2.2mm" in name or "2,2mm" in name:
        return False
    if "float" in name and ("8mm" in name or "10mm" in name or "12mm" in name):
        return False

    if "float" in name and any(marker in name for marker in _THIN_FLOAT_MARKERS):
        return True
    if "espejo" in name and any(marker in name for marker in _MIRROR_MARKERS):
        return True
    if "laminado" in name and any(marker in name for marker in _LAMINATE_MARKERS):
        return True

    return False


def is_laminated_glass(glass_type: GlassType) -> bool:
    """Laminated (safety) glass; same rule as ``GlassType.is_safety``."""
    return glass_type.is_safety


def categorize_glass_types(glass_types: Iterable[GlassType]) -> Dict[str, List[GlassType]]:
    """
    Split glass types into safety (laminated) and normal glass.

    Returns:
        Dictionary with 'safety_glass' and 'normal_glass' lists
    """
    categorized = {'safety_glass': [], 'normal_glass': []}
    for glass_type in glass_types:
        key = 'safety_glass' if is_laminated_glass(glass_type) else 'normal_glass'
        categorized[key].append(glass_type)
    return categorized


def make_glass_type(code: str, name: str, price_per_m2: float, thickness_mm: float = None,
                    description: str = "", width_mm: float = STANDARD_SHEET_WIDTH_MM,
                    height_mm: float = STANDARD_SHEET_HEIGHT_MM, half_sheet_eligible: bool = None) -> GlassType:
    """Build a GlassType, deriving half-sheet eligibility from the name when not given."""
    if half_sheet_eligible is None:
        half_sheet_eligible = can_sell_half_sheet(name)
    return GlassType(
        code=code,
        name=name,
        stock_width_mm=float(width_mm),
        stock_height_mm=float(height_mm),
        price_per_m2=float(price_per_m2),
        half_sheet_eligible=half_sheet_eligible,
        thickness_mm=thickness_mm,
        description=description or name,
        has_solar_control=code == "LAMSV44"
    )


_FLOAT_3 = make_glass_type("FL103", "Float Incoloro 3mm", 11139.97, 3)
_FLOAT_4 = make_glass_type("FL104", "Float Incoloro 4mm", 13700.14, 4)
_FLOAT_5 = make_glass_type("FL105", "Float Incoloro 5mm", 18042.49, 5)
_FLOAT_8 = make_glass_type("FLI08", "Float Incoloro 8mm", 30100.95, 8)
_FLOAT_10 = make_glass_type("FLI10", "Float Incoloro 10mm", 37654.25, 10)
_LAMI_33 = make_glass_type("LAMI33", "Laminado 3+3", 39809.73, 6, "Laminado 3+3 (Vidrio de seguridad)")
_LAMI_44 = make_glass_type("LAMI44", "Laminado 4+4", 49734.75, 8, "Laminado 4+4 (Vidrio de seguridad)")
_LAMI_55 = make_glass_type("LAMI55", "Laminado 5+5", 59790.86, 10, "Laminado 5+5 (Vidrio de seguridad)")
_LAMI_SOLAR_44 = make_glass_type("LAMSV44", "Laminado Solar 4+4", 101594.75, 8,
                                 "Laminado Solar 4+4 - Control Solar (No deja pasar el calor)")
_MIRROR_3 = make_glass_type("ESPI03", "Espejo 3mm", 23990.21, 3)
_MIRROR_4 = make_glass_type("ESPI04", "Espejo 4mm", 28975.32, 4)
_MIRROR_5 = make_glass_type("ESPI05", "Espejo 5mm", 33197.47, 5)

DEFAULT_PRODUCT_CATEGORIES = [
    {'id': 'ventana', 'name': 'Ventana',
     'glass_types': [_FLOAT_3, _FLOAT_4, _FLOAT_5, _LAMI_33, _LAMI_44, _LAMI_55]},
    {'id': 'espejo', 'name': 'Espejo', 'glass_types': [_MIRROR_3, _MIRROR_4, _MIRROR_5]},
    {'id': 'mampara', 'name': 'Mampara', 'glass_types': [_LAMI_44, _LAMI_55]},
    {'id': 'techo', 'name': 'Techo', 'glass_types': [_LAMI_44, _LAMI_SOLAR_44]},
    {'id': 'tapa-mesa', 'name': 'Tapa de Mesa', 'glass_types': [_LAMI_44, _LAMI_55]},
    {'id': 'baranda', 'name': 'Baranda', 'glass_types': [_LAMI_44]},
    {'id': 'estante', 'name': 'Estante', 'glass_types': [_FLOAT_8, _FLOAT_10]},
    {'id': 'puerta', 'name': 'Puerta', 'glass_types': [_LAMI_33, _LAMI_44]},
]


def build_catalog(glass_types: Iterable[GlassType]) -> Mapping[str, GlassType]:
    """
    Build a read-only catalog keyed by glass type code.

    The first occurrence of a code wins; a later record with the same code
    but different data is logged and ignored.

    Args:
        glass_types: Glass types, possibly repeated across product categories

    Returns:
        Immutable mapping of code to GlassType
    """
    catalog: Dict[str, GlassType] = {}
    for glass_type in glass_types:
        existing = catalog.get(glass_type.code)
        if existing is None:
            catalog[glass_type.code] = glass_type
        elif existing != glass_type:
            logger.warning(f"Conflicting catalog records for code {glass_type.code}; keeping '{existing.name}'")
    return MappingProxyType(catalog)


def get_default_catalog() -> Mapping[str, GlassType]:
    """Catalog snapshot built from the default product categories."""
    return build_catalog(gt for category in DEFAULT_PRODUCT_CATEGORIES for gt in category['glass_types'])


def get_category_glass_types(category_id: str) -> List[GlassType]:
    """Glass types offered for a product category, empty for an unknown category."""
    for category in DEFAULT_PRODUCT_CATEGORIES:
        if category['id'] == category_id:
            return list(category['glass_types'])
    return []


def transform_catalog_record(record: Dict[str, Any]) -> GlassType:
    """
    Convert a CMS glass type record into a GlassType.

    Records carry their fields under ``acf`` (name, code, width, height, price,
    thickness, description) with the post title as fallback name.

    Args:
        record: Decoded JSON record

    Returns:
        GlassType with derived half-sheet eligibility

    Raises:
        ValidationError: If the code, dimensions or price are missing or invalid
    """
    acf = record.get('acf') or {}
    title = (record.get('title') or {}).get('rendered', '')
    name = acf.get('name') or title
    code = acf.get('code') or ''
    thickness = acf.get('thickness')

    try:
        width = float(acf['width'])
        height = float(acf['height'])
        price = float(acf['price'])
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid catalog record {code or name!r}: {e}", kind="catalog") from e

    description = acf.get('description') or (f"{name} {thickness}mm" if thickness else name)
    return make_glass_type(code, name, price, float(thickness) if thickness else None,
                           description, width, height)
