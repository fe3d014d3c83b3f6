"""MainWindow - coordinator between the blend panels.

Each panel renders presenter state and raises signals; the window owns
the analysis thread, the dialogs and the status bar.
"""

import logging
from pathlib import Path

from PySide6.QtCore import QThread, Qt
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from config.constants import (
    APP_WINDOW_TITLE,
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
    LOG_FILE,
)
from config.container import Container
from domain.exceptions import (
    AnalysisInProgressError,
    BlendValidationError,
    EmptyBlendError,
    ExportError,
    MissingCredentialError,
    PersistenceError,
)
from ui.dialogs.api_key_dialog import ApiKeyDialog
from ui.panels.blend_panel import BlendPanel
from ui.panels.composition_panel import CompositionPanel
from ui.panels.saved_blends_panel import SavedBlendsPanel
from ui.presenters.blend_presenter import BlendPresenter
from ui.presenters.settings_presenter import SettingsPresenter
from ui.workers import ApiWorker

logging.basicConfig(
    filename=LOG_FILE,
    level=logging.DEBUG,
    format="%(asctime)s [%(threadName)s] %(levelname)s %(message)s",
)


class MainWindow(QMainWindow):
    """Main application window - thin coordinator.

    Responsibilities:
    - Create and hold panels
    - Run the analysis request off the UI thread
    - Ask for names, paths and confirmations
    - Display status messages
    """

    def __init__(self, container: Container | None = None) -> None:
        super().__init__()

        # Presenters share one container so they see the same storage
        self._container = container if container is not None else Container()
        self._blend_presenter = BlendPresenter(self._container)
        self._settings_presenter = SettingsPresenter(self._container)
        self._threads: list[QThread] = []
        self._workers: list[ApiWorker] = []

        self.setWindowTitle(APP_WINDOW_TITLE)
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)

        self._build_ui()
        self._connect_signals()
        self._update_key_indicator()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)

        header_layout = QHBoxLayout()
        title = QLabel(APP_WINDOW_TITLE)
        title.setStyleSheet("font-size: 22px; font-weight: bold;")
        header_layout.addWidget(title)
        header_layout.addStretch()
        self.key_indicator = QLabel("")
        header_layout.addWidget(self.key_indicator)
        self.settings_button = QPushButton("API Key 설정")
        header_layout.addWidget(self.settings_button)
        main_layout.addLayout(header_layout)

        self.blend_panel = BlendPanel(self._blend_presenter)
        self.saved_blends_panel = SavedBlendsPanel(
            self._blend_presenter,
            confirm=self._confirm,
        )
        self.composition_panel = CompositionPanel(self._blend_presenter)

        left = QSplitter(Qt.Vertical)
        left.addWidget(self.blend_panel)
        left.addWidget(self.saved_blends_panel)
        left.setStretchFactor(0, 3)
        left.setStretchFactor(1, 2)

        splitter = QSplitter(Qt.Horizontal)
        splitter.addWidget(left)
        splitter.addWidget(self.composition_panel)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 1)
        main_layout.addWidget(splitter, 1)

        # Status bar
        self.status_label = QLabel("")
        self.status_label.setStyleSheet("color: gray; padding: 4px;")
        main_layout.addWidget(self.status_label)

    def _connect_signals(self) -> None:
        self.settings_button.clicked.connect(self.on_settings_clicked)

        self.blend_panel.blend_changed.connect(self._on_blend_changed)
        self.blend_panel.analyze_requested.connect(self.on_analyze_requested)
        self.blend_panel.save_requested.connect(self.on_save_requested)
        self.blend_panel.export_requested.connect(self.on_export_requested)

        self.saved_blends_panel.blend_loaded.connect(self._on_saved_blend_loaded)

        # Status messages from all panels
        self.blend_panel.status_message.connect(self._show_status)
        self.saved_blends_panel.status_message.connect(self._show_status)

    # ---- Blend state ----
    def _on_blend_changed(self) -> None:
        self.composition_panel.refresh()

    def _on_saved_blend_loaded(self) -> None:
        self.blend_panel.refresh()
        self.composition_panel.refresh()

    # ---- Analysis ----
    def on_analyze_requested(self) -> None:
        try:
            composition = self._blend_presenter.begin_analysis()
        except AnalysisInProgressError:
            return
        except (EmptyBlendError, MissingCredentialError) as exc:
            self.composition_panel.refresh_analysis()
            self._show_status(str(exc))
            if isinstance(exc, MissingCredentialError):
                self.on_settings_clicked()
            return

        self.blend_panel.update_actions()
        self.composition_panel.refresh_analysis()
        self._show_status("블렌드를 분석하는 중...")
        self._run_in_thread(
            self._blend_presenter.execute_analysis,
            (composition,),
            self._on_analysis_success,
            self._on_analysis_error,
        )

    def _on_analysis_success(self, text: str) -> None:
        accepted = self._blend_presenter.finish_analysis(text)
        self.blend_panel.update_actions()
        self.composition_panel.refresh_analysis()
        if accepted:
            self._show_status("분석이 완료되었습니다.")
        else:
            self._show_status("블렌드가 변경되어 분석 결과를 버렸습니다.")

    def _on_analysis_error(self, exc) -> None:
        message = self._blend_presenter.fail_analysis(exc)
        self.blend_panel.update_actions()
        self.composition_panel.refresh_analysis()
        self._show_status(message)

    # ---- Saved blends ----
    def on_save_requested(self) -> None:
        name, ok = QInputDialog.getText(self, "블렌드 저장", "블렌드 이름:")
        if not ok:
            return
        try:
            saved = self._blend_presenter.save_current(name)
        except BlendValidationError as exc:
            QMessageBox.warning(self, "블렌드 저장", str(exc))
            return
        except PersistenceError as exc:
            logging.error("Saving blend failed: %s", exc)
            QMessageBox.critical(self, "블렌드 저장", f"저장하지 못했습니다:\n{exc}")
            return

        self.saved_blends_panel.refresh()
        self._show_status(f"'{saved.name}' 블렌드가 저장되었습니다.")

    def on_export_requested(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self,
            "엑셀로 내보내기",
            "blend.xlsx",
            "Excel 파일 (*.xlsx)",
        )
        if not path:
            return

        if not path.lower().endswith(".xlsx"):
            path += ".xlsx"

        try:
            self._blend_presenter.export_current(path, name=Path(path).stem)
        except (EmptyBlendError, ExportError) as exc:
            QMessageBox.critical(
                self,
                "내보내기 오류",
                f"파일을 내보내지 못했습니다:\n{exc}",
            )
        else:
            QMessageBox.information(
                self,
                "내보내기 완료",
                f"파일이 저장되었습니다:\n{path}",
            )

    # ---- Settings ----
    def on_settings_clicked(self) -> None:
        dialog = ApiKeyDialog(
            self,
            settings_presenter=self._settings_presenter,
            confirm=self._confirm,
        )
        dialog.exec()
        self._update_key_indicator()

    def _update_key_indicator(self) -> None:
        if self._settings_presenter.has_key():
            self.key_indicator.setText("API Key 설정됨")
            self.key_indicator.setStyleSheet("color: #15803d;")
        else:
            self.key_indicator.setText("API Key 필요")
            self.key_indicator.setStyleSheet("color: #b91c1c;")

    # ---- Helpers ----
    def _confirm(self, message: str) -> bool:
        answer = QMessageBox.question(
            self,
            "확인",
            message,
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        return answer == QMessageBox.Yes

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

    def _show_status(self, message: str) -> None:
        """Display status message in status bar."""
        self.status_label.setText(message)
        logging.debug(f"Status: {message}")

    def closeEvent(self, event) -> None:
        for thread in list(self._threads):
            thread.quit()
            thread.wait()
        super().closeEvent(event)
