"""Integration tests for presenters.

Tests presenters with real use cases and the bundled catalog, with an
in-memory store and a mocked text-generation client.
"""

from decimal import Decimal
from unittest.mock import Mock

import pytest

from config.constants import (
    MSG_ANALYSIS_FAILED,
    MSG_CONFIRM_DELETE_API_KEY,
    MSG_EMPTY_BLEND,
    MSG_MISSING_API_KEY,
)
from config.container import Container
from domain.exceptions import (
    AnalysisInProgressError,
    BlendValidationError,
    EmptyBlendError,
    MissingCredentialError,
    OilNotFoundError,
    SavedBlendNotFoundError,
    ServiceError,
)
from domain.services.chart_summary import OTHERS_LABEL
from infrastructure.persistence.key_value_store import InMemoryKeyValueStore
from ui.presenters.blend_presenter import BlendPresenter
from ui.presenters.settings_presenter import SettingsPresenter


@pytest.fixture
def text_client() -> Mock:
    client = Mock()
    client.generate.return_value = "## 분석 결과"
    return client


@pytest.fixture
def container(text_client) -> Container:
    return Container(store=InMemoryKeyValueStore(), text_client=text_client)


@pytest.fixture
def presenter(container) -> BlendPresenter:
    return BlendPresenter(container)


@pytest.fixture
def settings(container) -> SettingsPresenter:
    return SettingsPresenter(container)


class TestBlendEditing:
    """Test BlendPresenter blend state."""

    def test_initial_state(self, presenter) -> None:
        assert presenter.blend.is_empty()
        assert presenter.composition == ()
        assert presenter.analysis == ""
        assert not presenter.can_analyze()
        assert not presenter.can_save()
        assert len(presenter.get_oils()) == 16

    def test_add_oil_recomputes_composition(self, presenter) -> None:
        presenter.add_oil("sweet-orange")

        rows = presenter.get_composition_rows()
        assert rows[0]["name"] == "Limonene"
        assert rows[0]["value"] == pytest.approx(93.0)
        assert presenter.get_total_drops() == 1

    def test_add_twice_increments(self, presenter) -> None:
        presenter.add_oil("lavender")
        presenter.add_oil("lavender")

        items = presenter.get_blend_items()
        assert len(items) == 1
        assert items[0]["drops"] == 2
        assert items[0]["share"] == pytest.approx(100.0)

    def test_add_unknown_oil(self, presenter) -> None:
        with pytest.raises(OilNotFoundError):
            presenter.add_oil("unicorn")
        assert presenter.blend.is_empty()

    def test_set_drops_below_one_is_ignored(self, presenter) -> None:
        presenter.add_oil("lavender")

        assert presenter.set_drops("lavender", 0) is False
        assert presenter.decrement("lavender") is False
        assert presenter.get_total_drops() == 1

    def test_increment_and_shares(self, presenter) -> None:
        presenter.add_oil("sweet-orange")
        presenter.add_oil("lavender")
        presenter.increment("sweet-orange")
        presenter.increment("sweet-orange")

        shares = {item["oil_id"]: item["share"] for item in presenter.get_blend_items()}
        assert shares == {
            "sweet-orange": pytest.approx(75.0),
            "lavender": pytest.approx(25.0),
        }

    def test_composition_sums_to_hundred(self, presenter) -> None:
        for oil_id in ("lavender", "peppermint", "tea-tree", "lemon"):
            presenter.add_oil(oil_id)
        presenter.set_drops("lemon", 4)

        total = sum(result.value for result in presenter.composition)
        assert float(total) == pytest.approx(100.0, abs=0.1)

    def test_remove_last_oil_clears_composition(self, presenter) -> None:
        presenter.add_oil("lavender")
        presenter.remove_oil("lavender")

        assert presenter.composition == ()
        assert presenter.get_chart_slices() == []

    def test_chart_slices_fold_remainder(self, presenter) -> None:
        for oil_id in ("lavender", "peppermint", "rosemary", "ylang-ylang"):
            presenter.add_oil(oil_id)

        slices = presenter.get_chart_slices()

        assert len(slices) == 11
        assert slices[-1]["name"] == OTHERS_LABEL
        assert all(entry["color"].startswith("#") for entry in slices)


class TestAnalysis:
    """Test the analysis lifecycle."""

    def test_analyze(self, presenter, settings, text_client) -> None:
        settings.save_key("test-key")
        presenter.add_oil("lavender")

        text = presenter.analyze()

        assert text == "## 분석 결과"
        assert presenter.analysis == "## 분석 결과"
        assert presenter.can_save()
        assert not presenter.is_loading
        assert text_client.generate.call_args.args[1] == "test-key"

    def test_empty_blend(self, presenter, settings, text_client) -> None:
        settings.save_key("test-key")

        with pytest.raises(EmptyBlendError):
            presenter.begin_analysis()
        assert presenter.error == MSG_EMPTY_BLEND
        text_client.generate.assert_not_called()

    def test_missing_key(self, presenter, text_client) -> None:
        presenter.add_oil("lavender")

        with pytest.raises(MissingCredentialError):
            presenter.begin_analysis()
        assert presenter.error == MSG_MISSING_API_KEY
        assert not presenter.is_loading
        text_client.generate.assert_not_called()

    def test_one_analysis_at_a_time(self, presenter, settings) -> None:
        settings.save_key("test-key")
        presenter.add_oil("lavender")
        presenter.begin_analysis()

        assert presenter.is_loading
        assert not presenter.can_analyze()
        with pytest.raises(AnalysisInProgressError):
            presenter.begin_analysis()

    def test_service_failure_keeps_blend(self, presenter, settings, text_client) -> None:
        settings.save_key("test-key")
        presenter.add_oil("lavender")
        text_client.generate.side_effect = ServiceError("한도 초과", status_code=429)

        with pytest.raises(ServiceError):
            presenter.analyze()

        assert presenter.error == "한도 초과"
        assert presenter.analysis == ""
        assert presenter.get_total_drops() == 1
        assert presenter.can_analyze()

    def test_failed_reanalysis_keeps_previous_report(self, presenter, settings, text_client) -> None:
        settings.save_key("test-key")
        presenter.add_oil("lavender")
        presenter.analyze()
        text_client.generate.side_effect = ServiceError("서비스 오류", status_code=503)

        with pytest.raises(ServiceError):
            presenter.analyze()

        assert presenter.analysis == "## 분석 결과"
        assert presenter.error == "서비스 오류"
        assert presenter.can_save()

    def test_unexpected_failure_message(self, presenter) -> None:
        presenter.add_oil("lavender")

        message = presenter.fail_analysis(RuntimeError("boom"))

        assert message == MSG_ANALYSIS_FAILED

    def test_stale_result_is_dropped(self, presenter, settings) -> None:
        settings.save_key("test-key")
        presenter.add_oil("lavender")
        composition = presenter.begin_analysis()
        text = presenter.execute_analysis(composition)

        presenter.add_oil("lemon")

        assert presenter.finish_analysis(text) is False
        assert presenter.analysis == ""
        assert not presenter.is_loading

    def test_blend_change_clears_analysis(self, presenter, settings) -> None:
        settings.save_key("test-key")
        presenter.add_oil("lavender")
        presenter.analyze()

        presenter.increment("lavender")

        assert presenter.analysis == ""
        assert not presenter.can_save()


class TestSavedBlends:
    """Test save, load and delete through the presenter."""

    @pytest.fixture
    def analyzed(self, presenter, settings) -> BlendPresenter:
        settings.save_key("test-key")
        presenter.add_oil("sweet-orange")
        presenter.add_oil("sweet-orange")
        presenter.add_oil("lavender")
        presenter.analyze()
        return presenter

    def test_save_requires_analysis(self, presenter) -> None:
        presenter.add_oil("lavender")

        with pytest.raises(BlendValidationError):
            presenter.save_current("Relax")

    def test_save_requires_name(self, analyzed) -> None:
        with pytest.raises(BlendValidationError):
            analyzed.save_current("   ")

    def test_save_and_list(self, analyzed) -> None:
        saved = analyzed.save_current("Citrus calm")

        entries = analyzed.get_saved_blends()
        assert [entry["id"] for entry in entries] == [saved.id]
        assert entries[0]["total_drops"] == 3
        assert entries[0]["oil_count"] == 2

    def test_load_replaces_working_state(self, analyzed) -> None:
        saved = analyzed.save_current("Citrus calm")
        analyzed.clear_blend()
        analyzed.add_oil("peppermint")

        analyzed.load_saved(saved.id)

        assert [item["oil_id"] for item in analyzed.get_blend_items()] == [
            "sweet-orange",
            "lavender",
        ]
        assert analyzed.composition == saved.composition
        assert analyzed.analysis == saved.analysis
        assert analyzed.error is None

    def test_loaded_blend_is_editable_copy(self, analyzed) -> None:
        saved = analyzed.save_current("Citrus calm")
        analyzed.load_saved(saved.id)

        analyzed.increment("lavender")

        reloaded = analyzed.get_saved_blends()[0]
        assert reloaded["total_drops"] == 3

    def test_load_unknown(self, presenter) -> None:
        with pytest.raises(SavedBlendNotFoundError):
            presenter.load_saved("missing")

    def test_delete_with_confirmation(self, analyzed) -> None:
        saved = analyzed.save_current("Citrus calm")

        assert analyzed.delete_saved(saved.id, lambda _msg: False) is False
        assert len(analyzed.get_saved_blends()) == 1

        assert analyzed.delete_saved(saved.id, lambda _msg: True) is True
        assert analyzed.get_saved_blends() == []

    def test_saved_blends_survive_new_presenter(self, analyzed, container) -> None:
        saved = analyzed.save_current("Citrus calm")

        fresh = BlendPresenter(Container(store=container.store, text_client=Mock()))

        assert [entry["id"] for entry in fresh.get_saved_blends()] == [saved.id]
        assert fresh.blend.is_empty()

    def test_export_requires_blend(self, presenter, tmp_path) -> None:
        with pytest.raises(EmptyBlendError):
            presenter.export_current(tmp_path / "blend.xlsx")

    def test_export(self, analyzed, tmp_path) -> None:
        path = tmp_path / "blend.xlsx"

        analyzed.export_current(path, name="Citrus calm")

        assert path.exists()


class TestSettingsPresenter:
    """Test API key management."""

    def test_save_and_read(self, settings) -> None:
        settings.save_key("  my-key  ")

        assert settings.has_key()
        assert settings.get_stored_key() == "my-key"

    def test_save_blank(self, settings) -> None:
        with pytest.raises(MissingCredentialError):
            settings.save_key("   ")
        assert not settings.has_key()

    def test_delete_asks_first(self, settings) -> None:
        settings.save_key("my-key")
        confirm = Mock(return_value=False)

        assert settings.delete_key(confirm) is False
        confirm.assert_called_once_with(MSG_CONFIRM_DELETE_API_KEY)
        assert settings.has_key()

        assert settings.delete_key(lambda _msg: True) is True
        assert settings.get_stored_key() == ""

    def test_test_key_uses_entered_key(self, settings, text_client) -> None:
        assert settings.test_key("unsaved-key") is True

        assert text_client.generate.call_args.args[1] == "unsaved-key"
        assert not settings.has_key()

    def test_test_key_failure(self, settings, text_client) -> None:
        text_client.generate.side_effect = ServiceError("거부됨", status_code=401)

        with pytest.raises(ServiceError):
            settings.test_key("bad-key")

    def test_test_blank_key(self, settings, text_client) -> None:
        with pytest.raises(MissingCredentialError):
            settings.test_key("")
        text_client.generate.assert_not_called()
