"""Dataclasses for relay request, conversation and backend configuration types."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any

# Raw decoded JSON from the backend; shape is not enforced.
CompletionResult = dict[str, Any]


@dataclass(frozen=True)
class PromptRequest:
    """Inbound prompt. Empty or absent prompts are forwarded as-is."""
    prompt: str | None = None


@dataclass(frozen=True)
class Turn:
    """One role/content pair of a conversation."""
    role: str
    content: str


Conversation = tuple[Turn, ...]


@dataclass(frozen=True)
class ProviderCredentials:
    """Backend identity: service name, deployment region and tenant."""
    service: str
    region: str
    project_id: str | None
    access_token: str | None = None

    def __repr__(self) -> str:
        token = "***" if self.access_token else None
        return (
            f"ProviderCredentials(service={self.service!r}, region={self.region!r}, "
            f"project_id={self.project_id!r}, access_token={token!r})"
        )


@dataclass(frozen=True)
class GenerationConfig:
    """Per-call backend configuration. Built fresh for every request."""
    provider_credentials: ProviderCredentials
    model: str
    streaming: bool
