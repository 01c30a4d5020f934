"""Send a single prompt to Gemini on Vertex AI from the command line."""
from __future__ import annotations
import argparse
import logging

from prompt_relay.common.logging_setup import setup_logging
from prompt_relay.common.schema import PromptRequest
from prompt_relay.common.settings import load_settings
from prompt_relay.core.gemini_client import VertexGeminiClient
from prompt_relay.core.relay import PromptRelay

LOGGER = logging.getLogger("prompt_relay.cli")

def run_prompt(prompt: str, credentials_path: str | None = None) -> str | None:
    """
    Relay one prompt using process settings.

    Args:
        prompt: User prompt text.
        credentials_path: Optional credentials YAML path.
    """
    settings = load_settings(credentials_path)
    relay = PromptRelay.from_settings(VertexGeminiClient(timeout=settings.timeout), settings)
    return relay.handle(PromptRequest(prompt=prompt))

def main() -> None:
    setup_logging()
    ap = argparse.ArgumentParser(description="Relay a prompt to Gemini (Vertex AI)")
    ap.add_argument("--prompt", required=True, help="Prompt text")
    ap.add_argument("--credentials", default=None, help="Credentials YAML path")
    args = ap.parse_args()

    text = run_prompt(args.prompt, args.credentials)
    if text is None:
        LOGGER.info("No text returned")
        return
    print(text)

if __name__ == "__main__":
    main()
