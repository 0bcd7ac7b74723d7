"""Failure taxonomy for a single relay turn."""

from dataclasses import dataclass


@dataclass(eq=False)
class ServiceError(Exception):
    """Base exception for relay failures."""

    message: str
    code: str = "service_error"
    status_code: int = 500

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class InvalidInputError(ServiceError):
    """The client did not send usable text."""

    message: str = "Invalid input. Please provide text."
    code: str = "invalid_input"
    status_code: int = 400


@dataclass(eq=False)
class MissingCredentialError(ServiceError):
    """The provider API key is not configured."""

    message: str = (
        "Failed to generate response: Missing GEMINI_API_KEY environment variable."
    )
    code: str = "missing_credential"


@dataclass(eq=False)
class ProviderError(ServiceError):
    """Gemini answered with an error status or an error object."""

    code: str = "provider_error"


@dataclass(eq=False)
class EmptyResultError(ServiceError):
    """Gemini returned no candidate or no usable text."""

    code: str = "empty_result"


@dataclass(eq=False)
class AbnormalFinishError(ServiceError):
    """Generation stopped for a reason other than normal completion."""

    code: str = "abnormal_finish"


@dataclass(eq=False)
class InternalRelayError(ServiceError):
    """Anything unexpected that escaped the steps above."""

    code: str = "internal_error"
