from __future__ import annotations

import logging
from typing import Callable

from PySide6.QtCore import QThread
from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

from domain.exceptions import MissingCredentialError, ServiceError
from ui.presenters.settings_presenter import SettingsPresenter
from ui.workers import ApiWorker

logger = logging.getLogger(__name__)

MSG_TEST_RUNNING = "연결을 테스트하는 중..."
MSG_TEST_OK = "연결 성공! API Key가 올바르게 작동합니다."
MSG_TEST_FAILED = "연결 실패: API Key를 확인해주세요."
MSG_SAVED = "API Key가 저장되었습니다."
MSG_DELETED = "API Key가 삭제되었습니다."


class ApiKeyDialog(QDialog):
    """Enter, test, save or delete the analysis service API key."""

    def __init__(
        self,
        parent,
        *,
        settings_presenter: SettingsPresenter,
        confirm: Callable[[str], bool],
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("API Key 설정")
        self.setMinimumWidth(480)
        self._presenter = settings_presenter
        self._confirm = confirm
        self._threads: list[QThread] = []
        self._workers: list[ApiWorker] = []

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Gemini API Key"))

        input_layout = QHBoxLayout()
        self.key_input = QLineEdit()
        self.key_input.setEchoMode(QLineEdit.Password)
        self.key_input.setPlaceholderText("API Key를 입력하세요")
        self.key_input.setText(self._presenter.get_stored_key())
        self.toggle_button = QPushButton("보기")
        self.toggle_button.setCheckable(True)
        input_layout.addWidget(self.key_input, 1)
        input_layout.addWidget(self.toggle_button)
        layout.addLayout(input_layout)

        hint = QLabel("API Key는 이 컴퓨터에만 저장됩니다.")
        hint.setStyleSheet("color: gray;")
        layout.addWidget(hint)

        self.status_label = QLabel("")
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        actions_layout = QHBoxLayout()
        self.test_button = QPushButton("연결 테스트")
        self.save_button = QPushButton("저장")
        self.delete_button = QPushButton("삭제")
        actions_layout.addWidget(self.test_button)
        actions_layout.addWidget(self.save_button)
        actions_layout.addWidget(self.delete_button)
        actions_layout.addStretch()
        layout.addLayout(actions_layout)

        buttons = QDialogButtonBox(QDialogButtonBox.Close, parent=self)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        self.toggle_button.toggled.connect(self._on_toggle_visibility)
        self.test_button.clicked.connect(self.on_test_clicked)
        self.save_button.clicked.connect(self.on_save_clicked)
        self.delete_button.clicked.connect(self.on_delete_clicked)
        self.key_input.textChanged.connect(lambda _text: self._update_buttons())
        self._update_buttons()

    def _update_buttons(self, testing: bool = False) -> None:
        has_text = bool(self.key_input.text().strip())
        self.test_button.setEnabled(has_text and not testing)
        self.save_button.setEnabled(has_text and not testing)
        self.delete_button.setEnabled(self._presenter.has_key() and not testing)

    def _show_status(self, message: str, ok: bool | None = None) -> None:
        if ok is None:
            color = "gray"
        else:
            color = "#15803d" if ok else "#b91c1c"
        self.status_label.setStyleSheet(f"color: {color};")
        self.status_label.setText(message)

    def _on_toggle_visibility(self, checked: bool) -> None:
        self.key_input.setEchoMode(QLineEdit.Normal if checked else QLineEdit.Password)
        self.toggle_button.setText("숨기기" if checked else "보기")

    def on_test_clicked(self) -> None:
        raw = self.key_input.text()
        if not raw.strip():
            return
        self._update_buttons(testing=True)
        self._show_status(MSG_TEST_RUNNING)
        self._run_in_thread(
            self._presenter.test_key,
            (raw,),
            self._on_test_success,
            self._on_test_error,
        )

    def _on_test_success(self, _result) -> None:
        self._show_status(MSG_TEST_OK, ok=True)
        self._update_buttons()

    def _on_test_error(self, exc) -> None:
        if isinstance(exc, (MissingCredentialError, ServiceError)):
            message = f"{MSG_TEST_FAILED}\n{exc}"
        else:
            logger.error("Connection test failed unexpectedly: %s", type(exc).__name__)
            message = MSG_TEST_FAILED
        self._show_status(message, ok=False)
        self._update_buttons()

    def on_save_clicked(self) -> None:
        try:
            self._presenter.save_key(self.key_input.text())
        except MissingCredentialError as exc:
            self._show_status(str(exc), ok=False)
            return
        self._show_status(MSG_SAVED, ok=True)
        self._update_buttons()

    def on_delete_clicked(self) -> None:
        if not self._presenter.delete_key(self._confirm):
            return
        self.key_input.clear()
        self._show_status(MSG_DELETED)
        self._update_buttons()

    def _run_in_thread(self, fn, args, on_success, on_error) -> None:
        """Start a worker thread for API calls and handle cleanup."""
        thread = QThread(self)
        worker = ApiWorker(fn, *args)
        worker.moveToThread(thread)
        self._workers.append(worker)

        thread.started.connect(worker.run)
        worker.finished.connect(on_success)
        worker.error.connect(on_error)
        worker.finished.connect(thread.quit)
        worker.error.connect(thread.quit)
        worker.finished.connect(worker.deleteLater)
        worker.error.connect(worker.deleteLater)
        thread.finished.connect(thread.deleteLater)

        def _cleanup() -> None:
            if thread in self._threads:
                self._threads.remove(thread)
            if worker in self._workers:
                self._workers.remove(worker)

        thread.finished.connect(_cleanup)

        self._threads.append(thread)
        thread.start()

    def done(self, result: int) -> None:
        for thread in list(self._threads):
            thread.quit()
            thread.wait()
        super().done(result)
