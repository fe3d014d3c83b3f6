from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal, Slot

logger = logging.getLogger(__name__)


class ApiWorker(QObject):
    """Run a callable in a background thread and emit results via signals.

    The error signal carries the exception itself so presenters can tell
    a missing key apart from a service failure.
    """

    finished = Signal(object)
    error = Signal(object)

    def __init__(self, fn, *args) -> None:
        super().__init__()
        self.fn = fn
        self.args = args

    @Slot()
    def run(self) -> None:
        logger.debug("ApiWorker start %s", getattr(self.fn, "__qualname__", self.fn))
        try:
            result = self.fn(*self.args)
        except Exception as exc:  # noqa: BLE001 - surface any API/Value errors to UI
            logger.debug("ApiWorker failed: %s", type(exc).__name__)
            self.error.emit(exc)
        else:
            self.finished.emit(result)
