"""Dependency Injection container.

Provides centralized dependency management for the application.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from application.use_cases import (
    AnalyzeBlendUseCase,
    CalculateCompositionUseCase,
    CheckCredentialUseCase,
    DeleteSavedBlendUseCase,
    ExportBlendUseCase,
    ListOilsUseCase,
    ListSavedBlendsUseCase,
    LoadSavedBlendUseCase,
    SaveBlendUseCase,
)
from config.constants import DEFAULT_STORAGE_PATH, OIL_CATALOG_PATH
from domain.services.blend_aggregator import BlendAggregator
from infrastructure.api.gemini_client import GeminiTextClient, TextGenerationClient
from infrastructure.persistence.credential_store import CredentialStore
from infrastructure.persistence.excel_exporter import ExcelExporter
from infrastructure.persistence.key_value_store import JSONFileKeyValueStore, KeyValueStore
from infrastructure.persistence.oil_catalog import OilCatalog
from infrastructure.persistence.saved_blend_repository import SavedBlendRepository

load_dotenv()


class Container:
    """Dependency injection container.

    Provides singleton instances of services and use cases.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        text_client: Optional[TextGenerationClient] = None,
        catalog_path: Optional[Path | str] = None,
        model: Optional[str] = None,
    ) -> None:
        """Initialize container.

        Args:
            store: Key/value store (if None, a JSON file under the user's
                home or BLENDER_STORAGE_PATH)
            text_client: Text-generation client (if None, Gemini)
            catalog_path: Oil catalog JSON (if None, the bundled catalog)
            model: Gemini model id (if None, reads GEMINI_MODEL)
        """
        self._store = store
        self._text_client = text_client
        self._catalog_path = Path(catalog_path) if catalog_path else OIL_CATALOG_PATH
        self._model = model or os.getenv("GEMINI_MODEL")

        # Lazy-initialized singletons
        self._oil_catalog: Optional[OilCatalog] = None
        self._saved_blend_repository: Optional[SavedBlendRepository] = None
        self._credential_store: Optional[CredentialStore] = None
        self._excel_exporter: Optional[ExcelExporter] = None

        self._blend_aggregator: Optional[BlendAggregator] = None

        self._list_oils_use_case: Optional[ListOilsUseCase] = None
        self._calculate_composition_use_case: Optional[CalculateCompositionUseCase] = None
        self._analyze_blend_use_case: Optional[AnalyzeBlendUseCase] = None
        self._check_credential_use_case: Optional[CheckCredentialUseCase] = None
        self._save_blend_use_case: Optional[SaveBlendUseCase] = None
        self._list_saved_blends_use_case: Optional[ListSavedBlendsUseCase] = None
        self._load_saved_blend_use_case: Optional[LoadSavedBlendUseCase] = None
        self._delete_saved_blend_use_case: Optional[DeleteSavedBlendUseCase] = None
        self._export_blend_use_case: Optional[ExportBlendUseCase] = None

    # Infrastructure
    @property
    def store(self) -> KeyValueStore:
        """Get key/value store."""
        if self._store is None:
            path = os.getenv("BLENDER_STORAGE_PATH") or DEFAULT_STORAGE_PATH
            self._store = JSONFileKeyValueStore(path)
        return self._store

    @property
    def text_client(self) -> TextGenerationClient:
        """Get text-generation client."""
        if self._text_client is None:
            self._text_client = GeminiTextClient(model=self._model)
        return self._text_client

    @property
    def oil_catalog(self) -> OilCatalog:
        """Get oil catalog."""
        if self._oil_catalog is None:
            self._oil_catalog = OilCatalog.from_file(self._catalog_path)
        return self._oil_catalog

    @property
    def saved_blend_repository(self) -> SavedBlendRepository:
        """Get saved blend repository."""
        if self._saved_blend_repository is None:
            self._saved_blend_repository = SavedBlendRepository(self.store)
        return self._saved_blend_repository

    @property
    def credential_store(self) -> CredentialStore:
        """Get API key store."""
        if self._credential_store is None:
            self._credential_store = CredentialStore(self.store)
        return self._credential_store

    @property
    def excel_exporter(self) -> ExcelExporter:
        """Get Excel exporter."""
        if self._excel_exporter is None:
            self._excel_exporter = ExcelExporter()
        return self._excel_exporter

    # Domain Services
    @property
    def blend_aggregator(self) -> BlendAggregator:
        """Get blend aggregator service."""
        if self._blend_aggregator is None:
            self._blend_aggregator = BlendAggregator()
        return self._blend_aggregator

    # Use Cases
    @property
    def list_oils(self) -> ListOilsUseCase:
        """Get list oils use case."""
        if self._list_oils_use_case is None:
            self._list_oils_use_case = ListOilsUseCase(self.oil_catalog)
        return self._list_oils_use_case

    @property
    def calculate_composition(self) -> CalculateCompositionUseCase:
        """Get calculate composition use case."""
        if self._calculate_composition_use_case is None:
            self._calculate_composition_use_case = CalculateCompositionUseCase(
                self.blend_aggregator
            )
        return self._calculate_composition_use_case

    @property
    def analyze_blend(self) -> AnalyzeBlendUseCase:
        """Get analyze blend use case."""
        if self._analyze_blend_use_case is None:
            self._analyze_blend_use_case = AnalyzeBlendUseCase(
                text_client=self.text_client,
                credential_store=self.credential_store,
            )
        return self._analyze_blend_use_case

    @property
    def check_credential(self) -> CheckCredentialUseCase:
        """Get API key check use case."""
        if self._check_credential_use_case is None:
            self._check_credential_use_case = CheckCredentialUseCase(self.text_client)
        return self._check_credential_use_case

    @property
    def save_blend(self) -> SaveBlendUseCase:
        """Get save blend use case."""
        if self._save_blend_use_case is None:
            self._save_blend_use_case = SaveBlendUseCase(self.saved_blend_repository)
        return self._save_blend_use_case

    @property
    def list_saved_blends(self) -> ListSavedBlendsUseCase:
        """Get list saved blends use case."""
        if self._list_saved_blends_use_case is None:
            self._list_saved_blends_use_case = ListSavedBlendsUseCase(
                self.saved_blend_repository
            )
        return self._list_saved_blends_use_case

    @property
    def load_saved_blend(self) -> LoadSavedBlendUseCase:
        """Get load saved blend use case."""
        if self._load_saved_blend_use_case is None:
            self._load_saved_blend_use_case = LoadSavedBlendUseCase(
                self.saved_blend_repository
            )
        return self._load_saved_blend_use_case

    @property
    def delete_saved_blend(self) -> DeleteSavedBlendUseCase:
        """Get delete saved blend use case."""
        if self._delete_saved_blend_use_case is None:
            self._delete_saved_blend_use_case = DeleteSavedBlendUseCase(
                self.saved_blend_repository
            )
        return self._delete_saved_blend_use_case

    @property
    def export_blend(self) -> ExportBlendUseCase:
        """Get export blend use case."""
        if self._export_blend_use_case is None:
            self._export_blend_use_case = ExportBlendUseCase(self.excel_exporter)
        return self._export_blend_use_case
