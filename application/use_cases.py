"""Application use cases.

Use cases orchestrate domain services and infrastructure to fulfill
business workflows.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from config.constants import (
    API_CONNECT_TIMEOUT,
    API_READ_TIMEOUT_CONNECTION_TEST,
    CONNECTION_TEST_PROMPT,
    MSG_CONFIRM_DELETE_BLEND,
    NO_RESULT_TEXT,
)
from domain.exceptions import MissingCredentialError, NoCompositionError
from domain.models import Blend, BlendItem, CompositionResult, EssentialOil, SavedBlend
from domain.services.analysis_prompt import build_prompt
from domain.services.blend_aggregator import BlendAggregator
from infrastructure.api.gemini_client import TextGenerationClient
from infrastructure.persistence.credential_store import CredentialStore
from infrastructure.persistence.excel_exporter import ExcelExporter
from infrastructure.persistence.oil_catalog import OilCatalog
from infrastructure.persistence.saved_blend_repository import SavedBlendRepository

logger = logging.getLogger(__name__)


class ListOilsUseCase:
    """List the oils available for blending."""

    def __init__(self, catalog: OilCatalog) -> None:
        self._catalog = catalog

    def execute(self) -> List[EssentialOil]:
        return self._catalog.all()


class CalculateCompositionUseCase:
    """Calculate the composition of a blend."""

    def __init__(self, aggregator: BlendAggregator) -> None:
        self._aggregator = aggregator

    def execute(self, blend: Blend | Iterable[BlendItem]) -> List[CompositionResult]:
        """Calculate composition.

        Args:
            blend: Blend to calculate

        Returns:
            Composition sorted by value, highest first
        """
        return self._aggregator.aggregate(blend)


class AnalyzeBlendUseCase:
    """Ask the text-generation service to interpret a composition."""

    def __init__(
        self,
        text_client: TextGenerationClient,
        credential_store: CredentialStore,
    ) -> None:
        self._client = text_client
        self._credentials = credential_store

    def execute(self, composition: Sequence[CompositionResult]) -> str:
        """Analyze a composition.

        Args:
            composition: Composition to analyze, highest value first

        Returns:
            Analysis text, or a fixed notice when the service sent no text

        Raises:
            NoCompositionError: If the composition is empty
            MissingCredentialError: If no API key is stored
            ServiceError: If the service call fails
        """
        if not composition:
            raise NoCompositionError("Composition is empty")

        api_key = self._credentials.get()
        if not api_key:
            raise MissingCredentialError("No API key stored")

        prompt = build_prompt(composition)
        logger.debug("Requesting analysis for %d components", len(composition))

        text = self._client.generate(prompt, api_key)

        if not text or not text.strip():
            logger.warning("Analysis response contained no text")
            return NO_RESULT_TEXT
        return text


class CheckCredentialUseCase:
    """Check that an API key is accepted by the service."""

    def __init__(self, text_client: TextGenerationClient) -> None:
        self._client = text_client

    def execute(self, raw_key: str) -> bool:
        """Send a minimal request with the given key.

        Returns:
            True when the service answered

        Raises:
            MissingCredentialError: If the key is empty
            ServiceError: If the service rejected the request
        """
        api_key = (raw_key or "").strip()
        if not api_key:
            raise MissingCredentialError("No API key to test")

        self._client.generate(
            CONNECTION_TEST_PROMPT,
            api_key,
            timeout=(API_CONNECT_TIMEOUT, API_READ_TIMEOUT_CONNECTION_TEST),
        )
        return True


class SaveBlendUseCase:
    """Save the current blend with its composition and analysis."""

    def __init__(self, repository: SavedBlendRepository) -> None:
        self._repository = repository

    def execute(
        self,
        name: str,
        blend: Blend | Iterable[BlendItem],
        composition: Iterable[CompositionResult],
        analysis: str,
    ) -> SavedBlend:
        """Save blend.

        Raises:
            BlendValidationError: If name, blend or analysis is missing
        """
        items = blend.items if isinstance(blend, Blend) else blend
        return self._repository.save(name, items, composition, analysis)


class ListSavedBlendsUseCase:
    """List saved blends, oldest first."""

    def __init__(self, repository: SavedBlendRepository) -> None:
        self._repository = repository

    def execute(self) -> tuple[SavedBlend, ...]:
        return self._repository.list()


class LoadSavedBlendUseCase:
    """Fetch a saved blend snapshot."""

    def __init__(self, repository: SavedBlendRepository) -> None:
        self._repository = repository

    def execute(self, blend_id: str) -> SavedBlend:
        """Load saved blend.

        Raises:
            SavedBlendNotFoundError: If the id does not exist
        """
        return self._repository.get(blend_id)


class DeleteSavedBlendUseCase:
    """Delete a saved blend after the user confirms."""

    def __init__(self, repository: SavedBlendRepository) -> None:
        self._repository = repository

    def execute(self, blend_id: str, confirm: Callable[[str], bool]) -> bool:
        """Delete saved blend.

        Args:
            blend_id: Id of the blend to delete
            confirm: Asked with a yes/no question; deletion only happens on True

        Returns:
            True if a blend was deleted
        """
        if not confirm(MSG_CONFIRM_DELETE_BLEND):
            return False
        return self._repository.delete(blend_id)


class ExportBlendUseCase:
    """Export a blend to Excel."""

    def __init__(self, exporter: ExcelExporter) -> None:
        self._exporter = exporter

    def execute(
        self,
        name: str,
        blend: Blend | Sequence[BlendItem],
        composition: Sequence[CompositionResult],
        analysis: str,
        output_path: Path | str,
    ) -> None:
        items = list(blend.items if isinstance(blend, Blend) else blend)
        self._exporter.export_blend(name, items, composition, analysis, output_path)
