import logging
import sys

from PySide6.QtWidgets import QApplication, QMessageBox

from config.constants import APP_NAME
from domain.exceptions import InvalidCatalogError
from ui.main_window import MainWindow


def main() -> int:
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    try:
        window = MainWindow()
    except InvalidCatalogError as exc:
        logging.exception("Cannot start without the oil catalog")
        QMessageBox.critical(None, APP_NAME, f"오일 카탈로그를 불러올 수 없습니다:\n{exc}")
        return 1
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
