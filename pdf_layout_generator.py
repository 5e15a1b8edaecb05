"""
PDF/PNG cut layout generator for GlassWise.
Draws the grid layout of each order line on its stock sheet, with rotation
markers and an overflow note for pieces that need more sheets.
"""

import colorsys
import io
import logging
from typing import List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.backends.backend_pdf import PdfPages
import numpy as np

from data_models import LayoutPlan

logger = logging.getLogger(__name__)

GOLDEN_ANGLE_DEG = 137.5

# Above this many pieces the per-piece labels are left out
MAX_LABELLED_PIECES = 60


def piece_colors(count: int) -> List[Tuple[Tuple[float, float, float], Tuple[float, float, float]]]:
    """
    Fill and edge colours for ``count`` pieces, spread around the hue circle by the golden angle.

    Returns:
        List of (fill_rgb, edge_rgb) tuples
    """
    hues = (np.arange(count) * GOLDEN_ANGLE_DEG % 360) / 360
    return [(colorsys.hls_to_rgb(hue, 0.85, 0.7), colorsys.hls_to_rgb(hue, 0.45, 0.7)) for hue in hues]


class PDFLayoutGenerator:
    """Generate visual cut layouts of LayoutPlans."""

    def __init__(self, figsize: Tuple[float, float] = (11, 8.5)):
        self.figsize = figsize

    def create_layout_figure(self, layout_plan: LayoutPlan, title: str = ""):
        """
        Draw one plan on its stock sheet.

        Args:
            layout_plan: Plan to draw
            title: First header line, e.g. the glass type and item id

        Returns:
            The matplotlib Figure; the caller closes it
        """
        fig, ax = plt.subplots(1, 1, figsize=self.figsize)
        fig.patch.set_facecolor('white')
        plt.subplots_adjust(left=0.08, right=0.95, top=0.78, bottom=0.08)

        piece_width, piece_height = layout_plan.piece_dimensions
        header_lines = [
            title or "Cut Layout",
            f"Sheet: {layout_plan.stock_width_mm:.0f} mm x {layout_plan.stock_height_mm:.0f} mm",
            f"Cut: {layout_plan.cut_width_mm:.0f} x {layout_plan.cut_height_mm:.0f} mm"
            + (f" (placed rotated as {piece_width:.0f} x {piece_height:.0f})" if layout_plan.rotated else ""),
            f"Pieces on this sheet: {layout_plan.pieces_in_this_sheet} of {layout_plan.quantity} "
            f"({layout_plan.pieces_per_sheet} fit per sheet)",
            f"Efficiency: {layout_plan.efficiency_percentage:.1f}%    Symbols: ↻ = Rotated piece"
        ]

        header_y_start = 0.97
        for i, line in enumerate(header_lines):
            weight = 'bold' if i == 0 else 'normal'
            size = 12 if i == 0 else 9
            fig.text(0.5, header_y_start - i * 0.035, line,
                     ha='center', va='top', fontsize=size, fontweight=weight)

        ax.set_xlim(0, layout_plan.stock_width_mm)
        ax.set_ylim(0, layout_plan.stock_height_mm)
        ax.set_aspect('equal')
        # Row 0 is drawn at the top of the sheet
        ax.invert_yaxis()

        sheet_rect = patches.Rectangle(
            (0, 0), layout_plan.stock_width_mm, layout_plan.stock_height_mm,
            linewidth=2, edgecolor='black', facecolor='#F5F5F5'
        )
        ax.add_patch(sheet_rect)

        show_labels = len(layout_plan.positions) <= MAX_LABELLED_PIECES
        for position, (fill, edge) in zip(layout_plan.positions, piece_colors(len(layout_plan.positions))):
            ax.add_patch(patches.Rectangle(
                (position.x, position.y), position.width, position.height,
                linewidth=1, edgecolor=edge, facecolor=fill
            ))
            if show_labels:
                label = f"{position.id}{' ↻' if position.rotated else ''}"
                ax.text(position.x + position.width / 2, position.y + position.height / 2, label,
                        ha='center', va='center', fontsize=7, fontweight='bold')

        if layout_plan.pieces_per_sheet == 0:
            ax.text(layout_plan.stock_width_mm / 2, layout_plan.stock_height_mm / 2,
                    "Cut does not fit on this sheet", ha='center', va='center',
                    fontsize=14, color='darkred', fontweight='bold')
        elif layout_plan.has_overflow:
            fig.text(0.5, 0.03, f"{layout_plan.overflow_count} more pieces need additional sheets",
                     ha='center', va='bottom', fontsize=10, color='darkred', fontweight='bold')

        ax.set_xlabel('Width (mm)', fontsize=10)
        ax.set_ylabel('Height (mm)', fontsize=10)
        ax.set_facecolor('white')
        ax.grid(False)

        return fig

    def generate_layouts_pdf(self, layouts: Sequence[Tuple[str, LayoutPlan]],
                             output_path: Optional[str] = None) -> bytes:
        """
        Render one PDF page per plan.

        Args:
            layouts: (title, LayoutPlan) pairs
            output_path: Also write the PDF there when given

        Returns:
            PDF file content
        """
        pdf_buffer = io.BytesIO()

        try:
            with PdfPages(pdf_buffer) as pdf:
                for title, layout_plan in layouts:
                    fig = self.create_layout_figure(layout_plan, title)
                    pdf.savefig(fig, facecolor='white')
                    plt.close(fig)

            pdf_bytes = pdf_buffer.getvalue()
            pdf_buffer.close()

            if output_path:
                with open(output_path, 'wb') as f:
                    f.write(pdf_bytes)
                logger.info(f"PDF cut layout saved to {output_path}")

            return pdf_bytes

        except Exception as e:
            logger.error(f"Error generating PDF layout: {e}")
            raise

    def generate_layout_png(self, layout_plan: LayoutPlan, title: str = "", dpi: int = 100) -> bytes:
        """Render a single plan as PNG bytes."""
        fig = self.create_layout_figure(layout_plan, title)
        try:
            buffer = io.BytesIO()
            fig.savefig(buffer, format='png', dpi=dpi, facecolor='white')
            return buffer.getvalue()
        finally:
            plt.close(fig)


def generate_cut_layout_pdf(layouts: Sequence[Tuple[str, LayoutPlan]],
                            output_path: Optional[str] = None) -> bytes:
    """Generate PDF cut layouts using the default generator."""
    generator = PDFLayoutGenerator()
    return generator.generate_layouts_pdf(layouts, output_path)
