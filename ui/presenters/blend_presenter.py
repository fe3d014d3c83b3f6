"""Blend presenter - owns the working blend and orchestrates use cases for UI.

Handles all blend-related operations:
- Add/remove oils and change drop counts
- Keep the composition in step with the blend
- Request an analysis (one at a time)
- Save, load, delete and export blends
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from config.constants import (
    CHART_TOP_N,
    MSG_ANALYSIS_FAILED,
    MSG_EMPTY_BLEND,
    MSG_MISSING_API_KEY,
    MSG_SAVE_REQUIRES_ANALYSIS,
    MSG_SAVE_REQUIRES_NAME,
)
from config.container import Container
from domain.exceptions import (
    AnalysisInProgressError,
    BlendValidationError,
    EmptyBlendError,
    MissingCredentialError,
    ServiceError,
)
from domain.models import Blend, CompositionResult, SavedBlend
from ui.adapters.blend_mapper import BlendMapper, CompositionDisplayMapper

logger = logging.getLogger(__name__)


class BlendPresenter:
    """Presenter for the blend workbench.

    Holds the blend under construction, its composition and the current
    analysis text. Every blend change recomputes the composition right
    away and discards the analysis, which no longer matches.
    """

    def __init__(self, container: Optional[Container] = None) -> None:
        """Initialize presenter.

        Args:
            container: DI container (creates new one if not provided)
        """
        self._container = container if container is not None else Container()
        self._blend = Blend()
        self._composition: tuple[CompositionResult, ...] = ()
        self._analysis = ""
        self._error: Optional[str] = None
        self._is_loading = False
        # Bumped on every blend change; an analysis is only accepted for
        # the revision it was requested for
        self._revision = 0
        self._analysis_revision: Optional[int] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def blend(self) -> Blend:
        return self._blend

    @property
    def composition(self) -> tuple[CompositionResult, ...]:
        return self._composition

    @property
    def analysis(self) -> str:
        return self._analysis

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def can_analyze(self) -> bool:
        return not self._blend.is_empty() and not self._is_loading

    def can_save(self) -> bool:
        return bool(self._analysis) and not self._blend.is_empty() and not self._is_loading

    def get_oils(self) -> List[Dict[str, Any]]:
        """Catalog oils for the selector."""
        return [BlendMapper.oil_to_ui_item(oil) for oil in self._container.list_oils.execute()]

    def get_blend_items(self) -> List[Dict[str, Any]]:
        return BlendMapper.blend_to_ui_items(self._blend)

    def get_composition_rows(self) -> List[Dict[str, Any]]:
        return CompositionDisplayMapper.to_rows(self._composition)

    def get_chart_slices(self) -> List[Dict[str, Any]]:
        return CompositionDisplayMapper.to_chart_slices(self._composition, CHART_TOP_N)

    def get_total_drops(self) -> int:
        return self._blend.total_drops

    # ------------------------------------------------------------------
    # Blend editing
    # ------------------------------------------------------------------
    def add_oil(self, oil_id: str) -> None:
        """Add one drop of a catalog oil.

        Raises:
            OilNotFoundError: If the id is not in the catalog
        """
        oil = self._container.oil_catalog.get(oil_id)
        self._blend.add_oil(oil)
        self._on_blend_changed()

    def set_drops(self, oil_id: str, drops: int) -> bool:
        """Set an oil's drop count. Counts below 1 are ignored."""
        if not self._blend.set_drops(oil_id, drops):
            return False
        self._on_blend_changed()
        return True

    def increment(self, oil_id: str) -> bool:
        item = self._blend.find(oil_id)
        if item is None:
            return False
        return self.set_drops(oil_id, item.drops + 1)

    def decrement(self, oil_id: str) -> bool:
        item = self._blend.find(oil_id)
        if item is None:
            return False
        return self.set_drops(oil_id, item.drops - 1)

    def remove_oil(self, oil_id: str) -> bool:
        if not self._blend.remove_oil(oil_id):
            return False
        self._on_blend_changed()
        return True

    def clear_blend(self) -> None:
        if self._blend.is_empty():
            return
        self._blend.clear()
        self._on_blend_changed()

    def _on_blend_changed(self) -> None:
        self._revision += 1
        self._composition = tuple(
            self._container.calculate_composition.execute(self._blend)
        )
        self._analysis = ""
        logger.debug(
            "Blend changed: %d oils, %d drops, %d components",
            self._blend.item_count,
            self._blend.total_drops,
            len(self._composition),
        )

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------
    def begin_analysis(self) -> tuple[CompositionResult, ...]:
        """Validate and mark an analysis as running.

        Returns:
            The composition to send to the service

        Raises:
            AnalysisInProgressError: If an analysis is already running
            EmptyBlendError: If there is nothing to analyze
            MissingCredentialError: If no API key is stored
        """
        if self._is_loading:
            raise AnalysisInProgressError("An analysis is already running")

        if not self._composition:
            self._error = MSG_EMPTY_BLEND
            raise EmptyBlendError(MSG_EMPTY_BLEND)

        if not self._container.credential_store.has_credential():
            self._error = MSG_MISSING_API_KEY
            raise MissingCredentialError(MSG_MISSING_API_KEY)

        self._is_loading = True
        self._error = None
        self._analysis_revision = self._revision
        return self._composition

    def execute_analysis(self, composition: tuple[CompositionResult, ...]) -> str:
        """Call the analysis service. Safe to run off the UI thread."""
        return self._container.analyze_blend.execute(composition)

    def finish_analysis(self, text: str) -> bool:
        """Store an analysis result.

        Returns:
            False if the blend changed while the request was running; the
            result is then dropped
        """
        self._is_loading = False
        if self._analysis_revision != self._revision:
            logger.info("Discarding analysis for an outdated blend")
            return False
        self._analysis = text
        return True

    def fail_analysis(self, exc: Exception) -> str:
        """Record a failed analysis and return the message to display.

        The blend and any previous state are left unchanged.
        """
        self._is_loading = False
        if isinstance(exc, MissingCredentialError):
            message = MSG_MISSING_API_KEY
        elif isinstance(exc, EmptyBlendError):
            message = MSG_EMPTY_BLEND
        elif isinstance(exc, ServiceError):
            message = str(exc) or MSG_ANALYSIS_FAILED
        else:
            logger.exception("Unexpected analysis failure", exc_info=exc)
            message = MSG_ANALYSIS_FAILED
        self._error = message
        return message

    def analyze(self) -> str:
        """Run a complete analysis synchronously.

        Returns:
            The analysis text

        Raises:
            Same as begin_analysis, plus ServiceError from the service
        """
        composition = self.begin_analysis()
        try:
            text = self.execute_analysis(composition)
        except Exception as exc:
            self.fail_analysis(exc)
            raise
        self.finish_analysis(text)
        return text

    # ------------------------------------------------------------------
    # Saved blends
    # ------------------------------------------------------------------
    def save_current(self, name: str) -> SavedBlend:
        """Save the working blend with its composition and analysis.

        Raises:
            BlendValidationError: If the blend is empty or not analyzed, or
                the name is blank
        """
        if self._blend.is_empty() or not self._analysis:
            raise BlendValidationError(MSG_SAVE_REQUIRES_ANALYSIS)
        if not (name or "").strip():
            raise BlendValidationError(MSG_SAVE_REQUIRES_NAME)

        return self._container.save_blend.execute(
            name,
            self._blend,
            self._composition,
            self._analysis,
        )

    def get_saved_blends(self) -> List[Dict[str, Any]]:
        return [
            BlendMapper.saved_blend_to_ui_item(saved)
            for saved in self._container.list_saved_blends.execute()
        ]

    def load_saved(self, blend_id: str) -> SavedBlend:
        """Replace the working state with a saved blend.

        Raises:
            SavedBlendNotFoundError: If the id does not exist
        """
        saved = self._container.load_saved_blend.execute(blend_id)

        self._blend.replace_items(saved.blend_items)
        self._revision += 1
        self._composition = saved.composition or tuple(
            self._container.calculate_composition.execute(self._blend)
        )
        self._analysis = saved.analysis
        self._error = None
        logger.debug("Loaded saved blend %s", blend_id)
        return saved

    def delete_saved(self, blend_id: str, confirm: Callable[[str], bool]) -> bool:
        """Delete a saved blend if the user confirms."""
        return self._container.delete_saved_blend.execute(blend_id, confirm)

    def export_current(self, output_path: Path | str, name: str = "") -> None:
        """Export the working blend to Excel.

        Raises:
            EmptyBlendError: If the blend is empty
            ExportError: If the file cannot be written
        """
        if self._blend.is_empty():
            raise EmptyBlendError(MSG_EMPTY_BLEND)
        self._container.export_blend.execute(
            name,
            self._blend,
            self._composition,
            self._analysis,
            output_path,
        )
