from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QBrush, QColor
from PySide6.QtWidgets import (
    QLabel,
    QTableWidget,
    QTableWidgetItem,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from ui.formatters import fmt_percent
from ui.panels.table_utils import (
    attach_copy_shortcut,
    configure_read_only_table,
    set_composition_column_widths,
)
from ui.presenters.blend_presenter import BlendPresenter
from ui.widgets.composition_chart import CompositionChart

ANALYSIS_PLACEHOLDER = "블렌드를 분석하면 AI 아로마테라피 리포트가 여기에 표시됩니다."
ANALYSIS_LOADING = "AI가 블렌드를 분석하고 있습니다..."


class CompositionPanel(QWidget):
    """Chemical composition chart and table plus the analysis report."""

    def __init__(self, blend_presenter: BlendPresenter, parent=None) -> None:
        super().__init__(parent)
        self._presenter = blend_presenter
        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)

        title = QLabel("2. 화학 구성 분석")
        title.setStyleSheet("font-size: 18px; font-weight: bold;")
        layout.addWidget(title)

        self.chart = CompositionChart(self)
        layout.addWidget(self.chart, 2)

        self.composition_table = QTableWidget(0, 3)
        self.composition_table.setHorizontalHeaderLabels(["성분", "계열", "비율"])
        configure_read_only_table(self.composition_table)
        attach_copy_shortcut(self.composition_table)
        set_composition_column_widths(self.composition_table)
        layout.addWidget(self.composition_table, 1)

        report_title = QLabel("3. AI 아로마테라피 리포트")
        report_title.setStyleSheet("font-size: 18px; font-weight: bold;")
        layout.addWidget(report_title)

        self.error_label = QLabel("")
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet(
            "color: #b91c1c; background: #fee2e2; padding: 6px; border-radius: 4px;"
        )
        self.error_label.hide()
        layout.addWidget(self.error_label)

        self.analysis_view = QTextBrowser()
        self.analysis_view.setOpenExternalLinks(True)
        self.analysis_view.setPlaceholderText(ANALYSIS_PLACEHOLDER)
        layout.addWidget(self.analysis_view, 2)

    def refresh(self) -> None:
        """Redraw chart, table and report from the presenter state."""
        self.refresh_composition()
        self.refresh_analysis()

    def refresh_composition(self) -> None:
        self.chart.set_slices(self._presenter.get_chart_slices())

        rows = self._presenter.get_composition_rows()
        self.composition_table.setRowCount(len(rows))
        for row, entry in enumerate(rows):
            name_item = QTableWidgetItem(entry["name"])
            name_item.setForeground(QBrush(QColor(entry["color"])))
            self.composition_table.setItem(row, 0, name_item)
            self.composition_table.setItem(row, 1, QTableWidgetItem(entry["family"]))
            value_item = QTableWidgetItem(fmt_percent(entry["value"]))
            value_item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.composition_table.setItem(row, 2, value_item)

    def refresh_analysis(self) -> None:
        error = self._presenter.error
        self.error_label.setText(error or "")
        self.error_label.setVisible(bool(error))

        if self._presenter.is_loading:
            self.analysis_view.setPlainText(ANALYSIS_LOADING)
        elif self._presenter.analysis:
            self.analysis_view.setMarkdown(self._presenter.analysis)
        else:
            self.analysis_view.clear()
