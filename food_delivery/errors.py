"""Error taxonomy shared by the gateway, session and coordinators."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional


class FoodDeliveryError(Exception):
    """Base class for client-side failures.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field name, status code)
    """

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ValidationError(FoodDeliveryError):
    """Bad local input. Raised before any network call."""


class AccessDenied(FoodDeliveryError):
    """The active identity's role does not allow the requested action."""


class TransportError(FoodDeliveryError):
    """The remote service could not be reached or its reply could not be decoded."""


class RemoteRejected(FoodDeliveryError):
    """The remote service answered with a non-success status."""

    def __init__(self, status_code: int, message: str, details: Optional[Mapping[str, Any]] = None):
        merged = {"status_code": status_code, **(details or {})}
        super().__init__(message, merged)
        self.status_code = status_code


class LoginError(str, Enum):
    EMPTY_INPUT = "empty_input"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNREACHABLE = "unreachable"


class RegisterError(str, Enum):
    EMPTY_INPUT = "empty_input"
    REMOTE_FAILURE = "remote_failure"


LOGIN_MESSAGES: dict[LoginError, str] = {
    LoginError.EMPTY_INPUT: "Enter your account id.",
    LoginError.INVALID_CREDENTIALS: "No account matches that id and role.",
    LoginError.UNREACHABLE: "Could not reach the server. Try again.",
}

REGISTER_MESSAGES: dict[RegisterError, str] = {
    RegisterError.EMPTY_INPUT: "Enter a name to register.",
    RegisterError.REMOTE_FAILURE: "Registration failed on the server. Try again.",
}


def describe_failure(exc: FoodDeliveryError) -> str:
    """Map an error to the status-line text shown to the user."""
    if isinstance(exc, ValidationError):
        return f"Fix your input: {exc.message}"
    if isinstance(exc, AccessDenied):
        return f"Not allowed: {exc.message}"
    if isinstance(exc, RemoteRejected):
        return f"Server rejected the request ({exc.status_code}): {exc.message}"
    if isinstance(exc, TransportError):
        return f"Could not reach the server: {exc.message}"
    return exc.message
