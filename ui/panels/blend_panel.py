from __future__ import annotations

import logging
from functools import partial

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from domain.exceptions import OilNotFoundError
from ui.formatters import fmt_drops, fmt_percent
from ui.panels.table_utils import configure_read_only_table, set_blend_column_widths
from ui.presenters.blend_presenter import BlendPresenter

logger = logging.getLogger(__name__)

MAX_DROPS = 999


class BlendPanel(QWidget):
    """Oil selector, working blend table and blend actions."""

    blend_changed = Signal()
    analyze_requested = Signal()
    save_requested = Signal()
    export_requested = Signal()
    status_message = Signal(str)

    def __init__(self, blend_presenter: BlendPresenter, parent=None) -> None:
        super().__init__(parent)
        self._presenter = blend_presenter
        self._build_ui()
        self._load_oils()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)

        title = QLabel("1. 블렌드 구성하기")
        title.setStyleSheet("font-size: 18px; font-weight: bold;")
        layout.addWidget(title)

        # Oil selector
        selector_layout = QHBoxLayout()
        self.oil_selector = QComboBox()
        self.add_button = QPushButton("오일 추가")
        selector_layout.addWidget(self.oil_selector, 1)
        selector_layout.addWidget(self.add_button)
        layout.addLayout(selector_layout)

        self.blend_table = QTableWidget(0, 4)
        self.blend_table.setHorizontalHeaderLabels(["오일", "방울 수", "비율", ""])
        configure_read_only_table(self.blend_table)
        self.blend_table.setSelectionMode(QTableWidget.NoSelection)
        layout.addWidget(self.blend_table, 1)

        self.empty_label = QLabel("블렌드에 오일을 추가해주세요.")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setStyleSheet("color: gray; padding: 24px;")
        layout.addWidget(self.empty_label)

        self.total_label = QLabel("")
        self.total_label.setStyleSheet("color: gray;")
        layout.addWidget(self.total_label)

        actions_layout = QHBoxLayout()
        self.analyze_button = QPushButton("블렌드 분석하기")
        self.save_button = QPushButton("현재 블렌드 저장")
        self.export_button = QPushButton("엑셀로 내보내기")
        self.clear_button = QPushButton("비우기")
        actions_layout.addWidget(self.analyze_button)
        actions_layout.addWidget(self.save_button)
        actions_layout.addWidget(self.export_button)
        actions_layout.addStretch()
        actions_layout.addWidget(self.clear_button)
        layout.addLayout(actions_layout)

        self.add_button.clicked.connect(self.on_add_clicked)
        self.analyze_button.clicked.connect(self.analyze_requested.emit)
        self.save_button.clicked.connect(self.save_requested.emit)
        self.export_button.clicked.connect(self.export_requested.emit)
        self.clear_button.clicked.connect(self.on_clear_clicked)

        set_blend_column_widths(self.blend_table)

    def _load_oils(self) -> None:
        self.oil_selector.clear()
        for oil in self._presenter.get_oils():
            self.oil_selector.addItem(oil["name"], oil["id"])
            if oil["description"]:
                self.oil_selector.setItemData(
                    self.oil_selector.count() - 1,
                    oil["description"],
                    Qt.ToolTipRole,
                )

    def refresh(self) -> None:
        """Rebuild the table from the presenter state."""
        items = self._presenter.get_blend_items()

        self.blend_table.setRowCount(len(items))
        for row, item in enumerate(items):
            name_item = QTableWidgetItem(item["name"])
            name_item.setData(Qt.UserRole, item["oil_id"])
            self.blend_table.setItem(row, 0, name_item)

            drops_input = QSpinBox()
            drops_input.setRange(1, MAX_DROPS)
            drops_input.setValue(item["drops"])
            drops_input.setSuffix(" 방울")
            drops_input.valueChanged.connect(partial(self.on_drops_changed, item["oil_id"]))
            self.blend_table.setCellWidget(row, 1, drops_input)

            share_item = QTableWidgetItem(fmt_percent(item["share"], decimals=1))
            share_item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.blend_table.setItem(row, 2, share_item)

            remove_button = QPushButton("삭제")
            remove_button.clicked.connect(partial(self.on_remove_clicked, item["oil_id"]))
            self.blend_table.setCellWidget(row, 3, remove_button)

        has_items = bool(items)
        self.blend_table.setVisible(has_items)
        self.empty_label.setVisible(not has_items)
        self.total_label.setText(
            f"총 {fmt_drops(self._presenter.get_total_drops())}" if has_items else ""
        )
        self.update_actions()

    def update_actions(self) -> None:
        loading = self._presenter.is_loading
        self.analyze_button.setEnabled(self._presenter.can_analyze())
        self.analyze_button.setText("분석 중..." if loading else "블렌드 분석하기")
        self.save_button.setEnabled(self._presenter.can_save())
        self.export_button.setEnabled(not self._presenter.blend.is_empty())
        self.clear_button.setEnabled(not self._presenter.blend.is_empty())

    def on_add_clicked(self) -> None:
        oil_id = self.oil_selector.currentData()
        if not oil_id:
            return
        try:
            self._presenter.add_oil(oil_id)
        except OilNotFoundError as exc:
            logger.warning("Selected oil is not in the catalog: %s", oil_id)
            self.status_message.emit(str(exc))
            return
        self._after_change()

    def on_drops_changed(self, oil_id: str, value: int) -> None:
        if self._presenter.set_drops(oil_id, value):
            # Only the share column and totals change; keep the spin box alive
            self._refresh_shares()
            self.blend_changed.emit()
            self.update_actions()

    def on_remove_clicked(self, oil_id: str) -> None:
        if self._presenter.remove_oil(oil_id):
            self._after_change()

    def on_clear_clicked(self) -> None:
        self._presenter.clear_blend()
        self._after_change()

    def _after_change(self) -> None:
        self.refresh()
        self.blend_changed.emit()

    def _refresh_shares(self) -> None:
        items = self._presenter.get_blend_items()
        for row, item in enumerate(items):
            share_item = self.blend_table.item(row, 2)
            if share_item is not None:
                share_item.setText(fmt_percent(item["share"], decimals=1))
        self.total_label.setText(f"총 {fmt_drops(self._presenter.get_total_drops())}")
