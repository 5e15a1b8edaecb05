"""
GlassWise - Glass Cut Quotation Tool
Streamlit web application for quoting glass cut orders billed in full/half sheets.
"""

import logging
import os

import streamlit as st

from data_models import LayoutPlan, ValidationError
from glass_catalog import DEFAULT_PRODUCT_CATEGORIES, get_default_catalog, categorize_glass_types
from parsers import (DEFAULT_TEXT_COLUMN_LABELS, load_glass_catalog, load_cut_requests, parse_cut_requests_text,
                     validate_data_consistency, cut_requests_to_dataframe)
from optimization_core import optimize
from layout_planner import plan_order, summarize_plan
from product_quotation import CHAMBER_PRICES, quote_single_product, quote_dvh
from simple_reports import (generate_quote_text, generate_line_items_csv, build_order_message,
                            order_lines_from_result, order_line_from_product_quote)
from report_generators import create_excel_report
from pdf_layout_generator import PDFLayoutGenerator, generate_cut_layout_pdf
from utils import (setup_logging, validate_file_upload, format_currency, format_area,
                   display_optimization_metrics, display_breakdown_table, display_error_summary)

logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title="GlassWise - Glass Cut Quotation",
    page_icon="🪟",
    layout="wide",
    initial_sidebar_state="expanded"
)


def create_sample_data():
    """Create sample data for testing."""
    sample_cut_list = """Item ID,Glass Type,Width (mm),Height (mm),Quantity
V1,FL104,1000,500,4
V2,FL104,600,600,2
M1,LAMI44,900,2000,1
E1,ESPI04,800,1200,1"""

    sample_catalog = """Code,Name,Stock Width (mm),Stock Height (mm),Price per m2,Half Sheet,Thickness (mm)
FL104,Float Incoloro 4mm,3600,2500,13700.14,1,4
LAMI44,Laminado 4+4,3600,2500,49734.75,1,8
ESPI04,Espejo 4mm,3600,2500,28975.32,1,4
FLI10,Float Incoloro 10mm,3600,2500,37654.25,0,10"""

    return sample_cut_list, sample_catalog


def get_catalog():
    """Active catalog: the uploaded one if any, otherwise the default."""
    if st.session_state.get('catalog') is None:
        st.session_state.catalog = get_default_catalog()
    return st.session_state.catalog


def main():
    """Main application function."""
    st.title("🪟 GlassWise - Glass Cut Quotation")
    st.markdown("**Order quotes billed in full and half sheets, with cut layouts**")

    st.sidebar.title("Navigation")
    page = st.sidebar.selectbox(
        "Choose a page:",
        ["🏠 Home", "📊 Order Input", "💰 Quote", "📐 Cut Layout", "🪟 Product Quote", "🧊 DVH", "❓ Help"]
    )

    if 'data_loaded' not in st.session_state:
        st.session_state.data_loaded = False
    if 'quote_complete' not in st.session_state:
        st.session_state.quote_complete = False

    if page == "🏠 Home":
        show_home_page()
    elif page == "📊 Order Input":
        show_order_input_page()
    elif page == "💰 Quote":
        show_quote_page()
    elif page == "📐 Cut Layout":
        show_cut_layout_page()
    elif page == "🪟 Product Quote":
        show_product_quote_page()
    elif page == "🧊 DVH":
        show_dvh_page()
    elif page == "❓ Help":
        show_help_page()


def show_home_page():
    """Display the home page with tool overview."""
    st.header("Welcome to GlassWise")

    col1, col2 = st.columns([2, 1])

    with col1:
        st.markdown("""
        ### 🎯 What is GlassWise?

        GlassWise quotes glass cut orders the way the glass shop bills them:

        - **Pooled billing**: all cuts of the same glass type share the sheets they are billed on
        - **Half sheets**: thin float, mirror and 3+3/4+4/5+5 laminates can be billed by half sheet
        - **Cut layouts**: see how each cut is laid out on its stock sheet
        - **Double glazing (DVH)**: quote sealed units with spacer chamber
        - **Reports**: Excel, CSV, text and PDF layouts
        """)

    with col2:
        st.info("""
        **Quick Start:**

        1. Go to 📊 **Order Input**
        2. Paste or upload your cut list
        3. Open 💰 **Quote** for the price
        4. Check 📐 **Cut Layout**
        """)

        st.subheader("📥 Sample Data")
        sample_cut_list, sample_catalog = create_sample_data()
        st.download_button("Download Sample Cut List", sample_cut_list, "sample_cut_list.csv", "text/csv")
        st.download_button("Download Sample Catalog", sample_catalog, "sample_catalog.csv", "text/csv")


def show_order_input_page():
    """Display the order input page."""
    st.header("📊 Order Input")

    with st.expander("Glass catalog", expanded=False):
        catalog_file = st.file_uploader("Upload a catalog (optional)", type=['csv', 'xlsx'])
        if catalog_file is not None and validate_file_upload(catalog_file, ['.csv', '.xlsx']):
            try:
                st.session_state.catalog = load_glass_catalog(catalog_file)
                st.success(f"Loaded {len(st.session_state.catalog)} glass types")
            except (ValueError, OSError) as e:
                st.error(f"Could not load catalog: {e}")

        catalog = get_catalog()
        categorized = categorize_glass_types(catalog.values())
        st.dataframe([gt.to_dict() for gt in categorized['normal_glass'] + categorized['safety_glass']],
                     use_container_width=True)

    tab1, tab2 = st.tabs(["📋 Text Input", "📎 File Upload"])
    sample_cut_list, _ = create_sample_data()
    cut_requests = None

    with tab1:
        st.markdown("Paste your cut list. Supports both comma and tab-separated formats.")
        if st.button("📥 Load Sample Data", type="secondary"):
            st.session_state.sample_text = sample_cut_list
        text = st.text_area("Cut list", value=st.session_state.get('sample_text', ''), height=250,
                            placeholder=sample_cut_list,
                            help="Without a header row the columns are: " + ", ".join(DEFAULT_TEXT_COLUMN_LABELS)
                                 + ". With a header row they may come in any order.")
        if st.button("✅ Use This Cut List", type="primary"):
            try:
                cut_requests = parse_cut_requests_text(text)
            except ValueError as e:
                st.error(f"Could not parse cut list: {e}")

    with tab2:
        cut_list_file = st.file_uploader("Upload a cut list", type=['csv', 'xlsx'])
        if cut_list_file is not None and validate_file_upload(cut_list_file, ['.csv', '.xlsx']):
            try:
                cut_requests = load_cut_requests(cut_list_file)
            except (ValueError, OSError) as e:
                st.error(f"Could not load cut list: {e}")

    if cut_requests is not None:
        if not cut_requests:
            st.warning("No valid order lines found.")
        else:
            st.session_state.cut_requests = cut_requests
            st.session_state.data_loaded = True
            st.session_state.quote_complete = False
            st.success(f"Loaded {len(cut_requests)} order lines")

    if st.session_state.data_loaded:
        st.subheader("Current Order")
        catalog = get_catalog()
        display_error_summary(validate_data_consistency(st.session_state.cut_requests, catalog))
        st.dataframe(cut_requests_to_dataframe(st.session_state.cut_requests, catalog),
                     use_container_width=True)


def show_quote_page():
    """Display the quote for the loaded order."""
    st.header("💰 Quote")

    if not st.session_state.data_loaded:
        st.warning("Please load an order first in the 'Order Input' section.")
        return

    order_name = st.text_input("Order Name", value=st.session_state.get('order_name', ''))
    st.session_state.order_name = order_name

    try:
        result = optimize(st.session_state.cut_requests, get_catalog())
    except ValidationError as e:
        st.error(f"Invalid order line: {e}")
        return

    st.session_state.result = result
    logger.info(f"Quoted {len(st.session_state.cut_requests)} order lines: total {result.total_price:.2f}")
    st.session_state.quote_complete = True

    display_optimization_metrics(result)
    display_breakdown_table(result)

    for skipped in result.skipped_groups:
        st.warning(f"{skipped.error} - {len(skipped.cut_requests)} order lines not quoted")

    st.subheader("📁 Downloads")
    col1, col2, col3 = st.columns(3)
    file_stem = order_name or "quote"
    with col1:
        st.download_button("Excel Report", create_excel_report(result, order_name=order_name),
                           f"{file_stem}.xlsx",
                           "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
    with col2:
        st.download_button("Line Items CSV", generate_line_items_csv(result, order_name),
                           f"{file_stem}_line_items.csv", "text/csv")
    with col3:
        st.download_button("Text Quote", generate_quote_text(result, order_name), f"{file_stem}.txt",
                           "text/plain")

    if result.per_type_breakdown:
        show_order_message_form(order_lines_from_result(result), result.total_price, key="order")


def show_order_message_form(order_lines, total_price, key):
    """Collect customer details and show the order confirmation message."""
    st.subheader("📱 Confirm Order")
    col1, col2 = st.columns(2)
    with col1:
        customer_name = st.text_input("Name", key=f"{key}_name")
    with col2:
        customer_phone = st.text_input("Phone", key=f"{key}_phone")
    comments = st.text_area("Comments", key=f"{key}_comments")

    if st.button("Build Order Message", key=f"{key}_button"):
        try:
            message = build_order_message(customer_name, customer_phone, order_lines, total_price, comments)
        except ValidationError as e:
            st.error(str(e))
            return
        st.code(message, language=None)


def show_cut_layout_page():
    """Display the per order line cut layouts."""
    st.header("📐 Cut Layout")

    if not st.session_state.data_loaded:
        st.warning("Please load an order first in the 'Order Input' section.")
        return

    try:
        plan_results = plan_order(st.session_state.cut_requests, get_catalog())
    except ValidationError as e:
        st.error(f"Invalid order line: {e}")
        return

    generator = PDFLayoutGenerator()
    layouts = []
    for cut_request, outcome in plan_results:
        title = f"{cut_request.glass_type_code} - item {cut_request.item_id}"
        st.subheader(title)
        if not isinstance(outcome, LayoutPlan):
            st.error(str(outcome))
            continue
        layouts.append((title, outcome))
        st.table([summarize_plan(outcome)])
        st.image(generator.generate_layout_png(outcome, title))
        if outcome.has_overflow:
            st.warning(f"{outcome.overflow_count} pieces need additional sheets")

    if layouts:
        st.download_button("📄 Download Layout PDF", generate_cut_layout_pdf(layouts), "cut_layouts.pdf",
                           "application/pdf")


def show_product_quote_page():
    """Quote a single product by category."""
    st.header("🪟 Product Quote")

    category = st.selectbox("Product", DEFAULT_PRODUCT_CATEGORIES, format_func=lambda c: c['name'])
    glass_type = st.selectbox("Glass type", category['glass_types'], format_func=lambda g: g.description)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        unit = st.selectbox("Unit", ["mm", "cm"])
    with col2:
        width = st.number_input(f"Width ({unit})", min_value=0.0, value=0.0)
    with col3:
        height = st.number_input(f"Height ({unit})", min_value=0.0, value=0.0)
    with col4:
        quantity = st.number_input("Quantity", min_value=1, value=1, step=1)

    if not width or not height:
        st.info("Enter the dimensions to see the price.")
        return

    try:
        quote = quote_single_product(glass_type, width, height, int(quantity), unit)
    except ValidationError as e:
        st.error(str(e))
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Area", format_area(quote.total_area_m2))
    col2.metric("Billed Area", format_area(quote.total_billed_area_m2), delta=f"{quote.billing_unit} sheet",
                delta_color="off")
    col3.metric("Total Price", format_currency(quote.total_price))

    show_order_message_form([order_line_from_product_quote(quote, category['name'])], quote.total_price,
                            key="product")


def show_dvh_page():
    """Quote a double glazing unit."""
    st.header("🧊 DVH - Double Glazing")
    st.markdown("Maximum size: 3600 × 2500 mm. At least one pane must be laminated (safety).")

    glass_types = sorted(get_catalog().values(), key=lambda g: g.name)

    col1, col2 = st.columns(2)
    with col1:
        glass_a = st.selectbox("Glass A", glass_types, format_func=lambda g: g.name)
        glass_b = st.selectbox("Glass B", glass_types, format_func=lambda g: g.name)
        chamber_mm = st.selectbox("Chamber", sorted(CHAMBER_PRICES),
                                  format_func=lambda c: f"{c} mm - {format_currency(CHAMBER_PRICES[c], 0)} / ml")
    with col2:
        unit = st.selectbox("Unit", ["mm", "cm"], key="dvh_unit")
        width = st.number_input(f"Width ({unit})", min_value=0.0, value=0.0, key="dvh_width")
        height = st.number_input(f"Height ({unit})", min_value=0.0, value=0.0, key="dvh_height")
        quantity = st.number_input("Quantity", min_value=1, value=1, step=1, key="dvh_quantity")

    if not width or not height:
        st.info("Enter the dimensions to see the price.")
        return

    try:
        quote = quote_dvh(glass_a, glass_b, width, height, chamber_mm, int(quantity), unit)
    except ValidationError as e:
        st.error(str(e))
        return

    st.subheader(quote.description)
    col1, col2, col3 = st.columns(3)
    col1.metric("Billed Area per Unit", format_area(quote.area_per_unit_m2))
    col2.metric("Billed Perimeter per Unit", f"{quote.perimeter_per_unit_m:.2f} m")
    col3.metric("Total Price", format_currency(quote.total_price, 0))

    with st.expander("Calculation details"):
        st.text(f"Glass A: {format_currency(quote.glass_a_cost)}")
        st.text(f"Glass B: {format_currency(quote.glass_b_cost)}")
        st.text(f"Chamber: {format_currency(quote.chamber_cost)}")
        st.text(f"Unit price: {format_currency(quote.unit_price)}")

    show_order_message_form([order_line_from_product_quote(quote, "DVH")], quote.total_price, key="dvh")


def show_help_page():
    """Display help and documentation."""
    st.header("❓ Help & Documentation")

    st.markdown(f"""
    ## 🧾 How orders are billed

    All cuts of the same glass type are pooled. The pooled area is billed in
    whole stock sheets; types that can be sold by half sheet bill a final
    remainder of up to half a sheet as one half sheet.

    The "savings" figure compares the quote with a naive purchase of whole
    sheets inflated by a waste estimate. It is for display only.

    ## 📋 Cut List Format
    ```
    Item ID,Glass Type,Width (mm),Height (mm),Quantity
    V1,FL104,1000,500,4
    ```
    Spanish headers (Vidrio, Ancho, Alto, Cantidad) are accepted too. Without
    a header row, columns are read as {", ".join(DEFAULT_TEXT_COLUMN_LABELS)}.

    ## 📐 Cut Layouts
    Each order line is laid out on its own sheet as a grid. The cut is turned
    90° only when that fits strictly more pieces.

    ## 🧊 DVH
    Billed area is at least 0.5 m² and perimeter at least 2.8 m per unit.
    Chamber prices per linear metre: {", ".join(f"{c} mm {format_currency(p, 0)}" for c, p in sorted(CHAMBER_PRICES.items()))}.

    ## 🔧 Troubleshooting
    - Unknown glass type codes are listed as skipped and left out of the total
    - Width, height and quantity must be positive
    """)


if __name__ == "__main__":
    setup_logging(os.environ.get("GLASSWISE_LOG_LEVEL", "INFO"))
    main()
