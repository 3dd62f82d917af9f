"""Application error types."""

from enum import StrEnum


class AppError(Exception):
    """Base exception for application-level errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Raised when a required field is missing or invalid."""

    status_code = 400


class StorageError(AppError):
    """Raised when a document store operation fails."""

    def __init__(self, message: str, saved_ids: list[str] | None = None) -> None:
        super().__init__(message)
        self.saved_ids = saved_ids or []


class AuthErrorKind(StrEnum):
    """Classification of identity provider failures."""

    CANCELLED = "cancelled"
    POPUP_BLOCKED = "popup-blocked"
    NETWORK = "network"
    UNAUTHORIZED_DOMAIN = "unauthorized-domain"
    GENERIC = "generic"


class AuthError(AppError):
    """Raised for a classified sign-in or sign-out failure."""

    status_code = 401

    def __init__(self, kind: AuthErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class UpstreamServiceError(AppError):
    """Raised when a third-party API call fails."""


class UpstreamTimeoutError(UpstreamServiceError):
    """Raised when a third-party API does not answer in time."""

    status_code = 408


class ServiceDisabledError(AppError):
    """Raised when a feature's external credential is not configured."""

    status_code = 503


class ModelUnavailableError(UpstreamServiceError):
    """Raised when a hosted model version cannot be run with our credentials."""

    status_code = 422
