from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import QApplication, QHeaderView, QTableWidget


def configure_read_only_table(table: QTableWidget) -> None:
    table.setEditTriggers(QTableWidget.NoEditTriggers)
    table.setSelectionBehavior(QTableWidget.SelectRows)
    table.setSelectionMode(QTableWidget.ExtendedSelection)
    table.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
    table.verticalHeader().setVisible(False)
    table.horizontalHeader().setStretchLastSection(True)


def attach_copy_shortcut(table: QTableWidget) -> None:
    shortcut = QShortcut(QKeySequence.Copy, table)
    shortcut.setContext(Qt.WidgetWithChildrenShortcut)
    shortcut.activated.connect(lambda t=table: copy_table_selection(t))


def copy_table_selection(table: QTableWidget) -> None:
    sel_model = table.selectionModel()
    if not sel_model or not sel_model.hasSelection():
        return
    ranges = table.selectedRanges()
    if not ranges:
        return
    selected_range = ranges[0]
    rows = range(selected_range.topRow(), selected_range.bottomRow() + 1)
    cols = range(selected_range.leftColumn(), selected_range.rightColumn() + 1)

    headers: list[str] = []
    for col in cols:
        header_item = table.horizontalHeaderItem(col)
        headers.append(header_item.text() if header_item else "")
    lines = ["\t".join(headers)]

    for row in rows:
        row_vals: list[str] = []
        for col in cols:
            item = table.item(row, col)
            row_vals.append("" if item is None else item.text())
        lines.append("\t".join(row_vals))

    QApplication.clipboard().setText("\n".join(lines))


def set_blend_column_widths(blend_table: QTableWidget) -> None:
    blend_table.horizontalHeader().setSectionResizeMode(QHeaderView.Interactive)
    blend_table.setColumnWidth(0, 230)  # Oil
    blend_table.setColumnWidth(1, 90)   # Drops
    blend_table.setColumnWidth(2, 80)   # Share
    blend_table.setColumnWidth(3, 60)   # Remove


def set_composition_column_widths(composition_table: QTableWidget) -> None:
    composition_table.horizontalHeader().setSectionResizeMode(QHeaderView.Interactive)
    composition_table.setColumnWidth(0, 200)  # Component
    composition_table.setColumnWidth(1, 120)  # Family
    composition_table.setColumnWidth(2, 80)   # %
