"""Failures raised by the generative client."""
from __future__ import annotations


class GenerationError(Exception):
    """Base class for any failed call to the generation backend."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(GenerationError):
    """Required credentials (project id, access token) are missing."""


class AuthenticationError(GenerationError):
    """Backend rejected the credentials (HTTP 401/403)."""


class BackendError(GenerationError):
    """Transport failure or a non-success status from the backend."""
