"""Settings presenter - handles API key management."""

import logging
from typing import Callable, Optional

from config.constants import MSG_CONFIRM_DELETE_API_KEY
from config.container import Container
from domain.exceptions import MissingCredentialError

logger = logging.getLogger(__name__)

MSG_KEY_REQUIRED = "API Key를 입력해주세요."
MSG_TEST_KEY_REQUIRED = "테스트할 API Key를 입력해주세요."


class SettingsPresenter:
    """Presenter for the API key settings dialog."""

    def __init__(self, container: Optional[Container] = None) -> None:
        """Initialize presenter.

        Args:
            container: DI container (creates new one if not provided)
        """
        self._container = container if container is not None else Container()

    def get_stored_key(self) -> str:
        """Stored key for pre-filling the input, or an empty string."""
        return self._container.credential_store.get() or ""

    def has_key(self) -> bool:
        return self._container.credential_store.has_credential()

    def save_key(self, raw: str) -> None:
        """Store the entered key.

        Raises:
            MissingCredentialError: If the input is blank
        """
        key = (raw or "").strip()
        if not key:
            raise MissingCredentialError(MSG_KEY_REQUIRED)
        self._container.credential_store.save(key)

    def delete_key(self, confirm: Callable[[str], bool]) -> bool:
        """Remove the stored key if the user confirms."""
        if not confirm(MSG_CONFIRM_DELETE_API_KEY):
            return False
        self._container.credential_store.remove()
        return True

    def test_key(self, raw: str) -> bool:
        """Check the entered (not necessarily saved) key against the service.

        Raises:
            MissingCredentialError: If the input is blank
            ServiceError: If the service rejected the key
        """
        if not (raw or "").strip():
            raise MissingCredentialError(MSG_TEST_KEY_REQUIRED)
        return self._container.check_credential.execute(raw)
