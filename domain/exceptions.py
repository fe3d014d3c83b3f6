"""Domain-specific exceptions.

Custom exceptions provide better error handling and clearer intent
than generic exceptions.
"""


class BlendLabError(Exception):
    """Base exception for all application errors."""


# ============================================================================
# Domain Errors
# ============================================================================


class EmptyBlendError(BlendLabError):
    """Raised when an operation needs at least one drop in the blend."""


class NoCompositionError(EmptyBlendError):
    """Raised when analysis is requested for an empty composition."""


class OilNotFoundError(BlendLabError):
    """Raised when an oil id is not in the catalog."""


class BlendValidationError(BlendLabError):
    """Raised when a blend cannot be saved (missing name, oils or analysis)."""


class AnalysisInProgressError(BlendLabError):
    """Raised when a second analysis is started while one is running."""


# ============================================================================
# Infrastructure Errors
# ============================================================================


class AnalysisAPIError(BlendLabError):
    """Base exception for text-generation API errors."""


class MissingCredentialError(AnalysisAPIError):
    """Raised when no API key is stored."""


class ServiceError(AnalysisAPIError):
    """The text-generation call failed.

    The message is safe to show to the user; it never contains the key.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# ============================================================================
# Persistence Errors
# ============================================================================


class PersistenceError(BlendLabError):
    """Base exception for persistence-related errors."""


class DeserializationError(PersistenceError):
    """Raised when persisted data cannot be decoded."""


class SavedBlendNotFoundError(PersistenceError):
    """Raised when a saved blend id does not exist."""


class InvalidCatalogError(PersistenceError):
    """Raised when the oil catalog file is malformed."""


class ExportError(PersistenceError):
    """Raised when export operation fails."""
