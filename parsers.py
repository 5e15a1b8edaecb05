"""
Input parsers for GlassWise glass quotation tool.
Handles reading glass catalogs and cut lists from CSV/Excel files or pasted text.
"""

import io
import logging
from typing import List, Dict, Any, Mapping, Optional

import pandas as pd

from data_models import CutRequest, GlassType
from glass_catalog import build_catalog, make_glass_type

logger = logging.getLogger(__name__)

CUT_REQUEST_COLUMNS = {
    'glass_type_code': ['glass type', 'glass type code', 'glass_type_code', 'code', 'sku', 'tipo de vidrio', 'vidrio'],
    'width_mm': ['width', 'width (mm)', 'width_mm', 'ancho', 'ancho (mm)'],
    'height_mm': ['height', 'height (mm)', 'height_mm', 'alto', 'alto (mm)'],
    'quantity': ['quantity', 'qty', 'cantidad'],
    'item_id': ['item id', 'item_id', 'id', 'part id'],
}

CATALOG_COLUMNS = {
    'code': ['code', 'sku', 'codigo', 'código', 'glass type code'],
    'name': ['name', 'nombre', 'glass type'],
    'stock_width_mm': ['stock width (mm)', 'stock_width_mm', 'sheet width', 'sheet width (mm)', 'width', 'ancho'],
    'stock_height_mm': ['stock height (mm)', 'stock_height_mm', 'sheet height', 'sheet height (mm)', 'height', 'alto'],
    'price_per_m2': ['price per m2', 'price per m²', 'price_per_m2', 'price per sqm', 'price', 'precio'],
    'half_sheet_eligible': ['half sheet', 'half sheet eligible', 'half_sheet_eligible', 'media plancha'],
    'thickness_mm': ['thickness', 'thickness (mm)', 'thickness_mm', 'espesor'],
    'description': ['description', 'descripcion', 'descripción'],
}

REQUIRED_CUT_REQUEST_COLUMNS = ['glass_type_code', 'width_mm', 'height_mm']
REQUIRED_CATALOG_COLUMNS = ['code', 'stock_width_mm', 'stock_height_mm', 'price_per_m2']

# Column order of a pasted cut list without a header row
DEFAULT_TEXT_COLUMNS = ['glass_type_code', 'width_mm', 'height_mm', 'quantity', 'item_id']
DEFAULT_TEXT_COLUMN_LABELS = ['Glass Type', 'Width (mm)', 'Height (mm)', 'Quantity', 'Item ID']

_TRUE_VALUES = {'1', 'true', 'yes', 'y', 'si', 'sí', 'x'}


def _source_name(source) -> str:
    return str(getattr(source, 'name', source))


def _read_table(source) -> pd.DataFrame:
    """Read a CSV or Excel table from a path or an uploaded file object."""
    name = _source_name(source).lower()
    if name.endswith(('.xlsx', '.xls')):
        return pd.read_excel(source)
    return pd.read_csv(source)


def _normalize_columns(df: pd.DataFrame, aliases: Dict[str, List[str]]) -> pd.DataFrame:
    """Rename recognised column headers to their canonical field names."""
    renames = {}
    taken = set()
    for column in df.columns:
        key = str(column).strip().lower()
        for canonical, names in aliases.items():
            if canonical not in taken and (key == canonical or key in names):
                renames[column] = canonical
                taken.add(canonical)
                break
    return df.rename(columns=renames)


def _check_required(df: pd.DataFrame, required: List[str], source_name: str) -> None:
    missing_columns = [col for col in required if col not in df.columns]
    if missing_columns:
        logger.error(f"Available columns in {source_name}: {list(df.columns)}")
        raise ValueError(f"Missing required columns in {source_name}: {missing_columns}")


def _safe_str(value) -> str:
    if pd.isna(value):
        return ''
    return str(value).strip()


def _parse_bool(value) -> bool:
    if pd.isna(value):
        return False
    return str(value).strip().lower() in _TRUE_VALUES


def _rows_to_cut_requests(df: pd.DataFrame, source_name: str) -> List[CutRequest]:
    cut_requests = []

    for index, row in df.iterrows():
        try:
            code = _safe_str(row['glass_type_code'])
            width = float(row['width_mm'])
            height = float(row['height_mm'])
            quantity_value = row.get('quantity', 1)
            quantity_float = 1.0 if pd.isna(quantity_value) else float(quantity_value)
            item_id = _safe_str(row.get('item_id', '')) or str(index + 1)
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping row {index + 1} in {source_name}: {e}")
            continue

        if not code:
            logger.warning(f"Missing glass type for row {index + 1} in {source_name}")
            continue
        if not width > 0 or not height > 0:
            logger.warning(f"Invalid dimensions for item {item_id}: {width}x{height}")
            continue
        if quantity_float < 1 or not quantity_float.is_integer():
            logger.warning(f"Invalid quantity for item {item_id}: {quantity_value}")
            continue

        cut_requests.append(CutRequest(
            glass_type_code=code,
            width_mm=width,
            height_mm=height,
            quantity=int(quantity_float),
            item_id=item_id
        ))

    return cut_requests


def load_cut_requests(source) -> List[CutRequest]:
    """
    Load an order's cut list from a CSV or Excel file.

    Args:
        source: File path or file-like object (e.g. a Streamlit upload)

    Returns:
        List of CutRequest objects; invalid rows are logged and skipped

    Expected columns (case-insensitive, English or Spanish headers):
        - Glass Type: Catalog code of the glass
        - Width (mm): Cut width in millimeters
        - Height (mm): Cut height in millimeters
        - Quantity: Number of pieces (optional, defaults to 1)
        - Item ID: Order line identifier (optional)
    """
    source_name = _source_name(source)
    try:
        df = _normalize_columns(_read_table(source), CUT_REQUEST_COLUMNS)
        _check_required(df, REQUIRED_CUT_REQUEST_COLUMNS, source_name)

        logger.info(f"Loading {len(df)} cut requests from {source_name}")
        cut_requests = _rows_to_cut_requests(df, source_name)
        logger.info(f"Successfully loaded {len(cut_requests)} cut requests")
        return cut_requests

    except FileNotFoundError:
        logger.error(f"Cut list file not found: {source_name}")
        raise
    except Exception as e:
        logger.error(f"Error loading cut requests from {source_name}: {e}")
        raise


def parse_cut_requests_text(text: str) -> List[CutRequest]:
    """
    Parse a pasted cut list.

    Lines are comma or tab separated. The first line is a header when any of
    its cells is a known column name; without a header the columns are read
    as glass type, width, height, quantity and item id.

    Args:
        text: Pasted text

    Returns:
        List of CutRequest objects; invalid lines are logged and skipped
    """
    if not text or not text.strip():
        return []

    separator = '\t' if '\t' in text else ','
    df = pd.read_csv(io.StringIO(text.strip()), sep=separator, header=None, dtype=str,
                     skipinitialspace=True, skip_blank_lines=True)

    first_row = [str(value).strip().lower() for value in df.iloc[0]]
    known_headers = {name for names in CUT_REQUEST_COLUMNS.values() for name in names}
    known_headers.update(CUT_REQUEST_COLUMNS)

    if any(cell in known_headers for cell in first_row):
        df.columns = first_row
        df = df.iloc[1:].reset_index(drop=True)
        df = _normalize_columns(df, CUT_REQUEST_COLUMNS)
        _check_required(df, REQUIRED_CUT_REQUEST_COLUMNS, "pasted cut list")
    else:
        df.columns = DEFAULT_TEXT_COLUMNS[:len(df.columns)] + \
            [f"extra_{i}" for i in range(len(df.columns) - len(DEFAULT_TEXT_COLUMNS))]
        if len(df.columns) < len(REQUIRED_CUT_REQUEST_COLUMNS):
            raise ValueError("Each pasted line needs at least glass type, width and height")

    cut_requests = _rows_to_cut_requests(df, "pasted cut list")
    logger.info(f"Parsed {len(cut_requests)} cut requests from pasted text")
    return cut_requests


def load_glass_catalog(source) -> Mapping[str, GlassType]:
    """
    Load a glass catalog from a CSV or Excel file.

    Args:
        source: File path or file-like object

    Returns:
        Read-only mapping of glass type code to GlassType

    Expected columns (case-insensitive):
        - Code: Unique glass type code
        - Name: Display name (optional, defaults to the code)
        - Stock Width (mm), Stock Height (mm): Stock sheet size
        - Price per m2: Price per square meter
        - Half Sheet: 1/0 flag (optional, derived from the name when absent)
        - Thickness (mm), Description: Optional
    """
    source_name = _source_name(source)
    try:
        df = _normalize_columns(_read_table(source), CATALOG_COLUMNS)
        _check_required(df, REQUIRED_CATALOG_COLUMNS, source_name)
        has_half_sheet_column = 'half_sheet_eligible' in df.columns

        logger.info(f"Loading {len(df)} glass types from {source_name}")
        glass_types = []

        for index, row in df.iterrows():
            code = _safe_str(row['code'])
            name = _safe_str(row.get('name', '')) or code
            try:
                thickness = row.get('thickness_mm')
                glass_types.append(make_glass_type(
                    code=code,
                    name=name,
                    price_per_m2=float(row['price_per_m2']),
                    thickness_mm=None if thickness is None or pd.isna(thickness) else float(thickness),
                    description=_safe_str(row.get('description', '')),
                    width_mm=float(row['stock_width_mm']),
                    height_mm=float(row['stock_height_mm']),
                    half_sheet_eligible=_parse_bool(row['half_sheet_eligible']) if has_half_sheet_column else None
                ))
            except (TypeError, ValueError) as e:
                # ValidationError is a ValueError
                logger.warning(f"Skipping glass type row {index + 1} ({code or 'no code'}): {e}")
                continue

        catalog = build_catalog(glass_types)
        logger.info(f"Successfully loaded {len(catalog)} glass types")
        return catalog

    except FileNotFoundError:
        logger.error(f"Glass catalog file not found: {source_name}")
        raise
    except Exception as e:
        logger.error(f"Error loading glass catalog from {source_name}: {e}")
        raise


def validate_data_consistency(cut_requests: List[CutRequest],
                              catalog: Mapping[str, GlassType]) -> Dict[str, Any]:
    """
    Check a cut list against a catalog before quoting.

    Args:
        cut_requests: List of CutRequest objects
        catalog: Glass catalog

    Returns:
        Dictionary with validation results and statistics
    """
    validation_results = {
        'total_requests': len(cut_requests),
        'total_pieces': 0,
        'glass_types_used': set(),
        'unknown_glass_types': set(),
        'valid_requests': 0,
        'invalid_requests': 0
    }

    for cut_request in cut_requests:
        validation_results['total_pieces'] += cut_request.quantity
        validation_results['glass_types_used'].add(cut_request.glass_type_code)

        if cut_request.glass_type_code not in catalog:
            validation_results['unknown_glass_types'].add(cut_request.glass_type_code)
            validation_results['invalid_requests'] += 1
            continue

        validation_results['valid_requests'] += 1

    if validation_results['unknown_glass_types']:
        logger.warning(f"Unknown glass types: {validation_results['unknown_glass_types']}")

    logger.info(f"Validation complete: {validation_results['valid_requests']} valid requests, "
                f"{validation_results['invalid_requests']} invalid requests")

    return validation_results


def cut_requests_to_dataframe(cut_requests: List[CutRequest],
                              catalog: Optional[Mapping[str, GlassType]] = None) -> pd.DataFrame:
    """Tabulate cut requests for display, with the glass type name when the catalog is given."""
    rows = []
    for cut_request in cut_requests:
        row = {
            'Item ID': cut_request.item_id,
            'Glass Type': cut_request.glass_type_code,
            'Width (mm)': cut_request.width_mm,
            'Height (mm)': cut_request.height_mm,
            'Quantity': cut_request.quantity,
            'Area (m²)': round(cut_request.total_area_m2, 3)
        }
        if catalog is not None:
            glass_type = catalog.get(cut_request.glass_type_code)
            row['Glass Name'] = glass_type.name if glass_type else 'Unknown'
        rows.append(row)
    return pd.DataFrame(rows)
