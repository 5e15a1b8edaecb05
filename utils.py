"""
Utility functions for GlassWise glass quotation tool.
"""

import logging
import os
from typing import Any, Dict

import streamlit as st

from data_models import OptimizationResult


def setup_logging(log_level: str = "INFO") -> None:
    """
    Set up logging configuration for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=log_format,
        handlers=[
            logging.StreamHandler(),
        ]
    )

    # Set specific logger levels
    logging.getLogger('matplotlib').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)


def validate_file_upload(uploaded_file, expected_extensions: list) -> bool:
    """
    Validate uploaded file type and size.

    Args:
        uploaded_file: Streamlit uploaded file object
        expected_extensions: List of allowed file extensions

    Returns:
        True if file is valid, False otherwise
    """
    if uploaded_file is None:
        return False

    file_extension = os.path.splitext(uploaded_file.name)[1].lower()
    if file_extension not in expected_extensions:
        st.error(f"Invalid file type. Expected: {', '.join(expected_extensions)}")
        return False

    max_size = 10 * 1024 * 1024  # 10MB in bytes
    if uploaded_file.size > max_size:
        st.error("File size too large. Maximum size is 10MB.")
        return False

    return True


def format_currency(amount: float, decimals: int = 2) -> str:
    """
    Format currency amount for display in Argentine pesos.

    Args:
        amount: Amount to format
        decimals: Number of decimal places

    Returns:
        Formatted currency string, e.g. '$ 1.234,56'
    """
    formatted = f"{abs(amount):,.{decimals}f}"
    # Swap to '.' thousands and ',' decimal separators
    formatted = formatted.replace(',', '_').replace('.', ',').replace('_', '.')
    sign = "-" if amount < 0 and round(abs(amount), decimals) > 0 else ""
    return f"{sign}$ {formatted}"


def format_area(area_m2: float) -> str:
    """
    Format area for display.

    Args:
        area_m2: Area in square meters

    Returns:
        Formatted area string
    """
    return f"{area_m2:.2f} m²"


def format_percentage(value: float) -> str:
    """
    Format percentage for display.

    Args:
        value: Percentage value (0-100)

    Returns:
        Formatted percentage string
    """
    return f"{value:.1f}%"


def display_optimization_metrics(result: OptimizationResult) -> None:
    """
    Display quote metrics in Streamlit columns.

    Args:
        result: Optimizer output
    """
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric("Total Price", format_currency(result.total_price))

    with col2:
        full_sheets = sum(g.billing.full_sheets for g in result.per_type_breakdown)
        half_sheets = sum(g.billing.half_sheets for g in result.per_type_breakdown)
        st.metric("Sheets Billed", f"{full_sheets} full / {half_sheets} half")

    with col3:
        st.metric("Billable Area", format_area(result.total_billable_area_m2))

    with col4:
        st.metric("Savings vs. Naive Purchase", format_currency(result.savings),
                  delta=format_percentage(result.savings_percentage) if result.savings >= 0 else None)


def display_breakdown_table(result: OptimizationResult) -> None:
    """
    Display the per glass type breakdown table in Streamlit.

    Args:
        result: Optimizer output
    """
    if not result.per_type_breakdown:
        st.info("No priced glass types to display.")
        return

    rows = []
    for group in result.per_type_breakdown:
        rows.append({
            'Glass Type': group.glass_type.name,
            'Code': group.glass_type.code,
            'Requested Area': format_area(group.billing.used_area_m2),
            'Billed': group.description,
            'Billable Area': format_area(group.billing.total_billable_area_m2),
            'Waste': format_percentage(group.billing.waste_percentage),
            'Price': format_currency(group.price)
        })

    st.dataframe(rows, use_container_width=True)


def display_error_summary(validation_results: Dict[str, Any]) -> None:
    """
    Display cut list validation summary.

    Args:
        validation_results: Dictionary from parsers.validate_data_consistency
    """
    if validation_results['invalid_requests'] > 0:
        st.warning(f"Found {validation_results['invalid_requests']} order lines with an unknown glass type; "
                   f"they will be reported as skipped:")
        st.error(f"Unknown glass types: {', '.join(sorted(validation_results['unknown_glass_types']))}")

    st.info(f"Quoting {validation_results['valid_requests']} valid order lines out of "
            f"{validation_results['total_requests']} ({validation_results['total_pieces']} pieces).")
