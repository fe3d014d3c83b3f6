"""Tests for key/value stores and the credential store."""

import json
from decimal import Decimal
from unittest.mock import patch

import pytest

from domain.exceptions import PersistenceError
from domain.models import BlendItem, ChemicalComponent, CompositionResult, EssentialOil
from infrastructure.persistence.credential_store import CredentialStore, decode_key, encode_key
from infrastructure.persistence.key_value_store import InMemoryKeyValueStore, JSONFileKeyValueStore
from infrastructure.persistence.saved_blend_repository import SavedBlendRepository


class TestInMemoryKeyValueStore:
    def test_set_get_remove(self) -> None:
        store = InMemoryKeyValueStore()

        store.set("a", "1")
        assert store.get("a") == "1"

        store.remove("a")
        assert store.get("a") is None

    def test_remove_missing_key_is_ignored(self) -> None:
        store = InMemoryKeyValueStore({"a": "1"})

        store.remove("missing")

        assert store.keys() == ["a"]


class TestJSONFileKeyValueStore:
    def test_values_survive_reopen(self, tmp_path) -> None:
        path = tmp_path / "nested" / "storage.json"
        store = JSONFileKeyValueStore(path)
        store.set("essentialOilBlends", "[]")
        store.set("gemini_api_key", "a2V5")

        reopened = JSONFileKeyValueStore(path)

        assert reopened.get("essentialOilBlends") == "[]"
        assert reopened.get("gemini_api_key") == "a2V5"

    def test_remove_persists(self, tmp_path) -> None:
        path = tmp_path / "storage.json"
        store = JSONFileKeyValueStore(path)
        store.set("a", "1")
        store.set("b", "2")
        store.remove("a")

        assert json.loads(path.read_text(encoding="utf-8")) == {"b": "2"}

    def test_missing_file_starts_empty(self, tmp_path) -> None:
        store = JSONFileKeyValueStore(tmp_path / "none.json")

        assert store.get("anything") is None
        assert not (tmp_path / "none.json").exists()

    @pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
    def test_unreadable_file_starts_empty(self, tmp_path, content) -> None:
        path = tmp_path / "storage.json"
        path.write_text(content, encoding="utf-8")

        store = JSONFileKeyValueStore(path)

        assert store.get("a") is None
        store.set("a", "1")
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1"}

    def test_failed_set_leaves_memory_unchanged(self, tmp_path) -> None:
        path = tmp_path / "storage.json"
        store = JSONFileKeyValueStore(path)
        store.set("a", "1")

        with patch("infrastructure.persistence.key_value_store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                store.set("a", "2")
            with pytest.raises(OSError):
                store.remove("a")

        assert store.get("a") == "1"
        store.set("b", "3")
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1", "b": "3"}
        assert sorted(p.name for p in tmp_path.iterdir()) == ["storage.json"]

    def test_failed_blend_save_is_not_written_later(self, tmp_path) -> None:
        path = tmp_path / "storage.json"
        store = JSONFileKeyValueStore(path)
        repository = SavedBlendRepository(store)
        oil = EssentialOil(
            id="lemon",
            name="레몬",
            composition=(ChemicalComponent(name="Limonene", percentage=Decimal("100")),),
        )
        composition = [CompositionResult(name="Limonene", value=Decimal("100.00"))]

        with patch("infrastructure.persistence.key_value_store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError):
                repository.save("Failed", [BlendItem(oil=oil, drops=1)], composition, "text")

        CredentialStore(store).save("key")

        reopened = SavedBlendRepository(JSONFileKeyValueStore(path))
        assert reopened.list() == ()
        assert CredentialStore(JSONFileKeyValueStore(path)).get() == "key"

    def test_no_temp_files_left_behind(self, tmp_path) -> None:
        store = JSONFileKeyValueStore(tmp_path / "storage.json")
        store.set("a", "1")
        store.set("a", "2")

        assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]


class TestCredentialStore:
    @pytest.fixture
    def backing(self) -> InMemoryKeyValueStore:
        return InMemoryKeyValueStore()

    @pytest.fixture
    def credentials(self, backing) -> CredentialStore:
        return CredentialStore(backing)

    def test_round_trip(self, credentials) -> None:
        credentials.save("AIzaSyExampleKey")

        assert credentials.get() == "AIzaSyExampleKey"
        assert credentials.has_credential()

    def test_stored_encoded(self, credentials, backing) -> None:
        credentials.save("secret")

        assert backing.get("gemini_api_key") == "c2VjcmV0"
        assert backing.get("gemini_api_key") != "secret"

    def test_empty_store(self, credentials) -> None:
        assert credentials.get() is None
        assert not credentials.has_credential()

    def test_empty_save_is_ignored(self, credentials, backing) -> None:
        credentials.save("")

        assert backing.get("gemini_api_key") is None

    def test_remove(self, credentials) -> None:
        credentials.save("secret")
        credentials.remove()

        assert credentials.get() is None

    def test_invalid_encoding_falls_back_to_stored_text(self, backing) -> None:
        backing.set("gemini_api_key", "plain-key!")

        assert CredentialStore(backing).get() == "plain-key!"

    def test_decode_non_utf8_falls_back(self) -> None:
        assert decode_key("//79") == "//79"

    def test_encode_decode_non_ascii(self) -> None:
        assert decode_key(encode_key("키-123")) == "키-123"
