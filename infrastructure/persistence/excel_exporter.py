"""Excel export functionality.

Exports a blend, its chemical composition and the analysis text to Excel
with formatting.
"""

from pathlib import Path
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from domain.exceptions import ExportError
from domain.models import BlendItem, CompositionResult
from domain.services.chemical_families import family_label

HEADER_FILL = PatternFill(start_color="059669", end_color="059669", fill_type="solid")


class ExcelExporter:
    """Export blends to Excel format."""

    def export_blend(
        self,
        name: str,
        blend_items: Sequence[BlendItem],
        composition: Sequence[CompositionResult],
        analysis: str,
        output_path: Path | str,
    ) -> None:
        """Export blend with composition and analysis to Excel.

        Args:
            name: Blend name (used as sheet title prefix)
            blend_items: Oils and drop counts
            composition: Aggregated composition
            analysis: Analysis text (may be empty)
            output_path: Path to save Excel file

        Raises:
            ExportError: If export fails
        """
        try:
            wb = Workbook()
            wb.remove(wb.active)  # Remove default sheet

            self._create_blend_sheet(wb, name, blend_items)
            self._create_composition_sheet(wb, composition)
            self._create_analysis_sheet(wb, analysis)

            wb.save(output_path)

        except Exception as exc:
            raise ExportError(f"Failed to export to Excel: {exc}") from exc

    def _create_blend_sheet(
        self,
        wb: Workbook,
        name: str,
        blend_items: Sequence[BlendItem],
    ) -> None:
        """Create blend sheet."""
        ws = wb.create_sheet("Blend")

        ws.append([name or "Blend"])
        ws.cell(1, 1).font = Font(bold=True, size=14)
        ws.append([])

        headers = ["Oil", "Oil ID", "Drops", "Share of drops (%)"]
        ws.append(headers)
        self._style_header(ws, row=3, count=len(headers))

        total_drops = sum(item.drops for item in blend_items)
        for item in blend_items:
            ws.append(
                [
                    item.oil.name,
                    item.oil.id,
                    item.drops,
                    round(float(item.calculate_share(total_drops)), 2),
                ]
            )

        ws.append(["TOTAL", "", total_drops, 100.0 if total_drops else 0.0])

        self._autosize(ws, limit=50)

    def _create_composition_sheet(
        self,
        wb: Workbook,
        composition: Sequence[CompositionResult],
    ) -> None:
        """Create composition sheet."""
        ws = wb.create_sheet("Composition")

        headers = ["Component", "Family", "Percentage"]
        ws.append(headers)
        self._style_header(ws, row=1, count=len(headers))

        for result in composition:
            ws.append([result.name, family_label(result.name), float(result.value)])

        self._autosize(ws, limit=40)

    def _create_analysis_sheet(self, wb: Workbook, analysis: str) -> None:
        """Create analysis sheet, one line of text per row."""
        ws = wb.create_sheet("Analysis")
        for line in (analysis or "").splitlines():
            ws.append([line])
        ws.column_dimensions["A"].width = 120
        for row in ws.iter_rows():
            for cell in row:
                cell.alignment = Alignment(wrap_text=True, vertical="top")

    def _style_header(self, ws: Worksheet, row: int, count: int) -> None:
        for col_num in range(1, count + 1):
            cell = ws.cell(row, col_num)
            cell.fill = HEADER_FILL
            cell.font = Font(bold=True, color="FFFFFF")
            cell.alignment = Alignment(horizontal="center", vertical="center")

    def _autosize(self, ws: Worksheet, limit: int) -> None:
        for column in ws.columns:
            max_length = 0
            column_letter = get_column_letter(column[0].column)
            for cell in column:
                if cell.value:
                    max_length = max(max_length, len(str(cell.value)))
            ws.column_dimensions[column_letter].width = min(max_length + 2, limit)
