from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from domain.exceptions import PersistenceError, SavedBlendNotFoundError
from ui.formatters import fmt_drops
from ui.panels.table_utils import configure_read_only_table
from ui.presenters.blend_presenter import BlendPresenter

logger = logging.getLogger(__name__)


class SavedBlendsPanel(QWidget):
    """List of saved blends with load and delete actions."""

    blend_loaded = Signal()
    status_message = Signal(str)

    def __init__(
        self,
        blend_presenter: BlendPresenter,
        confirm: Callable[[str], bool],
        parent=None,
    ) -> None:
        super().__init__(parent)
        self._presenter = blend_presenter
        self._confirm = confirm
        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)

        title = QLabel("저장된 블렌드")
        title.setStyleSheet("font-size: 18px; font-weight: bold;")
        layout.addWidget(title)

        self.saved_table = QTableWidget(0, 4)
        self.saved_table.setHorizontalHeaderLabels(["이름", "오일", "방울 수", "저장일"])
        configure_read_only_table(self.saved_table)
        self.saved_table.setSelectionMode(QTableWidget.SingleSelection)
        layout.addWidget(self.saved_table, 1)

        self.empty_label = QLabel("저장된 블렌드가 없습니다.")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setStyleSheet("color: gray; padding: 12px;")
        layout.addWidget(self.empty_label)

        buttons_layout = QHBoxLayout()
        self.load_button = QPushButton("불러오기")
        self.delete_button = QPushButton("삭제")
        buttons_layout.addWidget(self.load_button)
        buttons_layout.addWidget(self.delete_button)
        buttons_layout.addStretch()
        layout.addLayout(buttons_layout)

        self.load_button.clicked.connect(self.on_load_clicked)
        self.delete_button.clicked.connect(self.on_delete_clicked)
        self.saved_table.itemDoubleClicked.connect(lambda _item: self.on_load_clicked())
        self.saved_table.itemSelectionChanged.connect(self._update_buttons)

    def refresh(self) -> None:
        entries = self._presenter.get_saved_blends()

        self.saved_table.setRowCount(len(entries))
        for row, entry in enumerate(entries):
            name_item = QTableWidgetItem(entry["name"])
            name_item.setData(Qt.UserRole, entry["id"])
            self.saved_table.setItem(row, 0, name_item)

            oils_item = QTableWidgetItem(f"{entry['oil_count']}종")
            oils_item.setToolTip(entry["oils"])
            self.saved_table.setItem(row, 1, oils_item)
            self.saved_table.setItem(row, 2, QTableWidgetItem(fmt_drops(entry["total_drops"])))
            self.saved_table.setItem(row, 3, QTableWidgetItem(entry["created_at"][:16].replace("T", " ")))

        self.saved_table.setVisible(bool(entries))
        self.empty_label.setVisible(not entries)
        self._update_buttons()

    def _selected_id(self) -> Optional[str]:
        row = self.saved_table.currentRow()
        if row < 0:
            return None
        item = self.saved_table.item(row, 0)
        if item is None:
            return None
        return item.data(Qt.UserRole)

    def _update_buttons(self) -> None:
        has_selection = self._selected_id() is not None
        self.load_button.setEnabled(has_selection)
        self.delete_button.setEnabled(has_selection)

    def on_load_clicked(self) -> None:
        blend_id = self._selected_id()
        if blend_id is None:
            return
        try:
            saved = self._presenter.load_saved(blend_id)
        except SavedBlendNotFoundError as exc:
            logger.warning("Saved blend disappeared: %s", blend_id)
            self.status_message.emit(str(exc))
            self.refresh()
            return
        self.blend_loaded.emit()
        self.status_message.emit(f"'{saved.name}' 블렌드를 불러왔습니다.")

    def on_delete_clicked(self) -> None:
        blend_id = self._selected_id()
        if blend_id is None:
            return
        try:
            deleted = self._presenter.delete_saved(blend_id, self._confirm)
        except PersistenceError as exc:
            logger.error("Could not delete saved blend %s: %s", blend_id, exc)
            self.status_message.emit(str(exc))
            return
        if deleted:
            self.status_message.emit("블렌드를 삭제했습니다.")
            self.refresh()
