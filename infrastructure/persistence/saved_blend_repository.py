"""Persistence for saved blends.

All saved blends live in one JSON document under a fixed storage key. The
document is read once when the repository is created and rewritten as a
whole on every change.
"""

import json
import logging
import time
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from config.constants import SAVED_BLENDS_STORAGE_KEY
from domain.exceptions import (
    BlendValidationError,
    DeserializationError,
    PersistenceError,
    SavedBlendNotFoundError,
)
from domain.models import BlendItem, CompositionResult, SavedBlend
from infrastructure.persistence.key_value_store import KeyValueStore
from infrastructure.persistence.oil_catalog import dict_to_oil, oil_to_dict

logger = logging.getLogger(__name__)


class SavedBlendRepository:
    """Repository for named blend snapshots, kept in creation order."""

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = SAVED_BLENDS_STORAGE_KEY,
    ) -> None:
        """Initialize repository and load existing blends.

        Args:
            store: Backing key/value store
            storage_key: Key holding the serialized list

        Note:
            Corrupt stored data is logged and replaced by an empty list;
            it never prevents the application from starting.
        """
        self._store = store
        self._storage_key = storage_key
        self._blends: List[SavedBlend] = self._load_all()

    def save(
        self,
        name: str,
        blend_items: Iterable[BlendItem],
        composition: Iterable[CompositionResult],
        analysis: str,
    ) -> SavedBlend:
        """Append a new saved blend.

        Args:
            name: User-supplied name
            blend_items: Blend to snapshot
            composition: Composition computed for the blend
            analysis: Analysis text for the blend

        Returns:
            The created SavedBlend

        Raises:
            BlendValidationError: If name, blend or analysis is empty
            PersistenceError: If the store cannot be written
        """
        items = tuple(BlendItem(oil=item.oil, drops=item.drops) for item in blend_items)
        clean_name = (name or "").strip()

        if not clean_name:
            raise BlendValidationError("Blend name cannot be empty")
        if not items:
            raise BlendValidationError("Cannot save an empty blend")
        if not analysis or not analysis.strip():
            raise BlendValidationError("Blend must be analyzed before saving")

        saved = SavedBlend(
            id=self._next_id(),
            name=clean_name,
            blend_items=items,
            composition=tuple(composition),
            analysis=analysis,
            created_at=datetime.now().isoformat(timespec="seconds"),
        )

        self._persist(self._blends + [saved])
        self._blends.append(saved)
        logger.debug("Saved blend %s (%s)", saved.id, saved.name)
        return saved

    def get(self, blend_id: str) -> SavedBlend:
        """Get a saved blend by id.

        Raises:
            SavedBlendNotFoundError: If no blend has that id
        """
        found = self.find(blend_id)
        if found is None:
            raise SavedBlendNotFoundError(f"Saved blend not found: {blend_id}")
        return found

    def find(self, blend_id: str) -> Optional[SavedBlend]:
        for saved in self._blends:
            if saved.id == blend_id:
                return saved
        return None

    def list(self) -> tuple[SavedBlend, ...]:
        """All saved blends, oldest first."""
        return tuple(self._blends)

    def delete(self, blend_id: str) -> bool:
        """Delete a saved blend.

        Returns:
            True if a blend was removed, False if the id was unknown
        """
        remaining = [saved for saved in self._blends if saved.id != blend_id]
        if len(remaining) == len(self._blends):
            return False

        self._persist(remaining)
        self._blends = remaining
        logger.debug("Deleted saved blend %s", blend_id)
        return True

    def __len__(self) -> int:
        return len(self._blends)

    def _next_id(self) -> str:
        candidate = time.time_ns() // 1_000_000
        existing = {saved.id for saved in self._blends}
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def _persist(self, blends: List[SavedBlend]) -> None:
        payload = json.dumps(
            [self._saved_blend_to_dict(saved) for saved in blends],
            ensure_ascii=False,
        )
        try:
            self._store.set(self._storage_key, payload)
        except OSError as exc:
            raise PersistenceError(f"Could not write saved blends: {exc}") from exc

    def _load_all(self) -> List[SavedBlend]:
        raw = self._store.get(self._storage_key)
        if not raw:
            return []

        try:
            return self.deserialize(raw)
        except DeserializationError:
            logger.exception("Saved blends are corrupt, starting with an empty list")
            return []

    @classmethod
    def deserialize(cls, raw: str) -> List[SavedBlend]:
        """Parse a serialized blend list.

        Raises:
            DeserializationError: If the text is not a valid blend list
        """
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError(f"Expected a list, got {type(data).__name__}")
            return [cls._dict_to_saved_blend(entry) for entry in data]
        except (
            json.JSONDecodeError,
            AttributeError,
            KeyError,
            TypeError,
            ValueError,
            InvalidOperation,
        ) as exc:
            raise DeserializationError(f"Invalid saved blend data: {exc}") from exc

    @staticmethod
    def _saved_blend_to_dict(saved: SavedBlend) -> Dict[str, Any]:
        """Convert SavedBlend to dictionary."""
        return {
            "id": saved.id,
            "name": saved.name,
            "createdAt": saved.created_at,
            "blend": [
                {"oil": oil_to_dict(item.oil), "drops": item.drops}
                for item in saved.blend_items
            ],
            "composition": [
                {"name": result.name, "value": str(result.value)}
                for result in saved.composition
            ],
            "analysis": saved.analysis,
        }

    @staticmethod
    def _dict_to_saved_blend(data: Dict[str, Any]) -> SavedBlend:
        """Convert dictionary to SavedBlend."""
        items = tuple(
            BlendItem(oil=dict_to_oil(entry["oil"]), drops=int(entry["drops"]))
            for entry in data.get("blend", [])
        )
        composition = tuple(
            CompositionResult(name=entry["name"], value=Decimal(str(entry["value"])))
            for entry in data.get("composition") or []
        )
        return SavedBlend(
            id=str(data["id"]),
            name=data["name"],
            blend_items=items,
            composition=composition,
            analysis=data.get("analysis", "") or "",
            created_at=data.get("createdAt", "") or "",
        )
