"""Prompt relay: one prompt in, one backend call, first text fragment out."""
from __future__ import annotations
import logging
from typing import Any

from prompt_relay.common.schema import (
    CompletionResult,
    Conversation,
    GenerationConfig,
    PromptRequest,
    ProviderCredentials,
    Turn,
)
from prompt_relay.common.settings import (
    DEFAULT_MODEL_ID,
    DEFAULT_REGION,
    SERVICE,
    Settings,
)
from prompt_relay.core.gemini_client import GenerativeClient

LOGGER = logging.getLogger("prompt_relay.core.relay")

TEXT_PATH: tuple[Any, ...] = ("candidates", 0, "content", "parts", 0, "text")


def extract_text(result: Any) -> str | None:
    """
    Walk candidates[0].content.parts[0].text.

    Returns None if any step is absent or of the wrong shape.
    """
    node = result
    for step in TEXT_PATH:
        if isinstance(step, int):
            if not isinstance(node, (list, tuple)) or len(node) <= step:
                return None
        elif not isinstance(node, dict) or step not in node:
            return None
        node = node[step]
    return node if isinstance(node, str) else None


class PromptRelay:
    def __init__(
        self,
        client: GenerativeClient,
        project_id: str | None,
        access_token: str | None = None,
        region: str = DEFAULT_REGION,
        model: str = DEFAULT_MODEL_ID,
        streaming: bool = True,
    ) -> None:
        self.client = client
        self.project_id = project_id
        self.access_token = access_token
        self.region = region
        self.model = model
        self.streaming = streaming

    @classmethod
    def from_settings(cls, client: GenerativeClient, settings: Settings) -> "PromptRelay":
        return cls(
            client,
            project_id=settings.project_id,
            access_token=settings.access_token,
            region=settings.region,
            model=settings.model,
            streaming=settings.streaming,
        )

    def build_config(self) -> GenerationConfig:
        return GenerationConfig(
            provider_credentials=ProviderCredentials(
                service=SERVICE,
                region=self.region,
                project_id=self.project_id,
                access_token=self.access_token,
            ),
            model=self.model,
            streaming=self.streaming,
        )

    def handle(self, request: PromptRequest) -> str | None:
        """
        Forward the prompt as a single user turn and extract the reply text.

        Backend failures are not caught here; they propagate to the caller.
        """
        prompt = request.prompt if request.prompt is not None else ""
        turns: Conversation = (Turn(role="user", content=prompt),)
        config = self.build_config()
        LOGGER.info("Relaying prompt (%d chars) to %s", len(prompt), config.model)

        result: CompletionResult = self.client.generate(config, turns)

        text = extract_text(result)
        if text is None:
            LOGGER.info("Completion result carried no text")
        return text
