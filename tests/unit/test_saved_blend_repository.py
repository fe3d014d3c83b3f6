"""Tests for SavedBlendRepository."""

import json
from decimal import Decimal
from unittest.mock import Mock

import pytest

from domain.exceptions import (
    BlendValidationError,
    DeserializationError,
    PersistenceError,
    SavedBlendNotFoundError,
)
from domain.models import BlendItem, ChemicalComponent, CompositionResult, EssentialOil
from infrastructure.persistence.key_value_store import InMemoryKeyValueStore
from infrastructure.persistence.saved_blend_repository import SavedBlendRepository

STORAGE_KEY = "essentialOilBlends"


@pytest.fixture
def lavender() -> EssentialOil:
    return EssentialOil(
        id="lavender",
        name="라벤더",
        composition=(
            ChemicalComponent(name="Linalool", percentage=Decimal("35")),
            ChemicalComponent(name="Linalyl acetate", percentage=Decimal("30.5")),
        ),
        description="Calming",
    )


@pytest.fixture
def items(lavender) -> list[BlendItem]:
    return [BlendItem(oil=lavender, drops=3)]


@pytest.fixture
def composition() -> list[CompositionResult]:
    return [
        CompositionResult(name="Linalool", value=Decimal("35.00")),
        CompositionResult(name="Linalyl acetate", value=Decimal("30.50")),
    ]


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(store) -> SavedBlendRepository:
    return SavedBlendRepository(store)


class TestSave:
    def test_save_and_list(self, repository, items, composition) -> None:
        saved = repository.save("Relax", items, composition, "## 분석")

        assert repository.list() == (saved,)
        assert saved.name == "Relax"
        assert saved.total_drops == 3
        assert saved.created_at

    def test_name_is_stripped(self, repository, items, composition) -> None:
        saved = repository.save("  Relax  ", items, composition, "text")

        assert saved.name == "Relax"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_rejects_blank_name(self, repository, items, composition, name) -> None:
        with pytest.raises(BlendValidationError):
            repository.save(name, items, composition, "text")
        assert len(repository) == 0

    def test_rejects_empty_blend(self, repository) -> None:
        with pytest.raises(BlendValidationError):
            repository.save("X", [], [], "text")

    def test_rejects_missing_analysis(self, repository, items, composition) -> None:
        with pytest.raises(BlendValidationError):
            repository.save("X", items, composition, "")

    def test_snapshot_is_detached_from_working_items(self, repository, items, composition) -> None:
        saved = repository.save("Relax", items, composition, "text")

        items[0].drops = 10

        assert saved.blend_items[0].drops == 3

    def test_ids_are_unique(self, repository, items, composition) -> None:
        first = repository.save("A", items, composition, "text")
        second = repository.save("B", items, composition, "text")

        assert first.id != second.id
        assert [s.name for s in repository.list()] == ["A", "B"]

    def test_write_failure(self, items, composition) -> None:
        store = Mock()
        store.get.return_value = None
        store.set.side_effect = OSError("disk full")
        repository = SavedBlendRepository(store)

        with pytest.raises(PersistenceError):
            repository.save("A", items, composition, "text")
        assert len(repository) == 0


class TestPersistence:
    def test_reload_from_store(self, store, items, composition) -> None:
        saved = SavedBlendRepository(store).save("Relax", items, composition, "text")

        reloaded = SavedBlendRepository(store).get(saved.id)

        assert reloaded == saved
        assert reloaded.composition[1].value == Decimal("30.50")
        assert reloaded.blend_items[0].oil.description == "Calming"

    def test_stored_format(self, store, repository, items, composition) -> None:
        repository.save("Relax", items, composition, "text")

        data = json.loads(store.get(STORAGE_KEY))

        assert set(data[0]) == {"id", "name", "createdAt", "blend", "composition", "analysis"}
        assert data[0]["blend"][0]["drops"] == 3
        assert data[0]["blend"][0]["oil"]["id"] == "lavender"
        assert data[0]["composition"][0] == {"name": "Linalool", "value": "35.00"}

    @pytest.mark.parametrize("raw", ["{oops", '{"not": "a list"}', '[{"name": "no id"}]'])
    def test_corrupt_data_starts_empty(self, raw) -> None:
        store = InMemoryKeyValueStore({STORAGE_KEY: raw})

        repository = SavedBlendRepository(store)

        assert repository.list() == ()
        # Corrupt data stays in place until the next write
        assert store.get(STORAGE_KEY) == raw

    def test_deserialize_raises(self) -> None:
        with pytest.raises(DeserializationError):
            SavedBlendRepository.deserialize("{oops")


class TestGetAndDelete:
    def test_get_unknown(self, repository) -> None:
        with pytest.raises(SavedBlendNotFoundError):
            repository.get("missing")
        assert repository.find("missing") is None

    def test_delete_removes_exactly_one(self, repository, items, composition) -> None:
        first = repository.save("A", items, composition, "text")
        second = repository.save("B", items, composition, "text")

        assert repository.delete(first.id) is True
        assert repository.list() == (second,)

    def test_delete_unknown_is_noop(self, store, repository, items, composition) -> None:
        repository.save("A", items, composition, "text")
        before = store.get(STORAGE_KEY)

        assert repository.delete("missing") is False
        assert len(repository) == 1
        assert store.get(STORAGE_KEY) == before
