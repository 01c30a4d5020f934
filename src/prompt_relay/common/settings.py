"""Process-wide, read-only configuration.

Deployment parameters default to the values the relay was built for and can be
overridden through the environment. The tenant (project id) and access token
come from a YAML credentials file, with environment variables taking priority.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

SERVICE = "vertex-ai-api"
DEFAULT_REGION = "us-central1"
DEFAULT_MODEL_ID = "gemini-2.5-flash"
DEFAULT_CREDENTIALS_PATH = "configs/credentials.yaml"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Snapshot of process configuration consumed by the relay and its client."""
    project_id: str | None
    access_token: str | None
    region: str = DEFAULT_REGION
    model: str = DEFAULT_MODEL_ID
    streaming: bool = True
    timeout: float = 120.0


def load_credentials(path: str | os.PathLike[str]) -> dict[str, Any]:
    """
    Load the credentials YAML file.

    Args:
        path: Credentials file path.

    Returns:
        Parsed mapping, or an empty dict when the file does not exist.
    """
    p = Path(path)
    if not p.exists():
        return {}
    with open(p, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _lookup(data: dict[str, Any], *keys: str) -> Any:
    node: Any = data
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def load_settings(credentials_path: str | None = None) -> Settings:
    """
    Resolve settings from the environment and the credentials file.

    Args:
        credentials_path: Overrides PROMPT_RELAY_CREDENTIALS / the default path.
    """
    path = credentials_path or os.getenv("PROMPT_RELAY_CREDENTIALS", DEFAULT_CREDENTIALS_PATH)
    creds = load_credentials(path)

    project_id = os.getenv("VERTEX_AI_PROJECT_ID") or _lookup(creds, "google", "vertex_ai", "project_id")
    access_token = os.getenv("VERTEX_AI_ACCESS_TOKEN") or _lookup(creds, "google", "vertex_ai", "access_token")

    return Settings(
        project_id=str(project_id) if project_id else None,
        access_token=str(access_token) if access_token else None,
        region=os.getenv("VERTEX_AI_REGION", DEFAULT_REGION),
        model=os.getenv("GEMINI_MODEL_ID", DEFAULT_MODEL_ID),
        streaming=_env_bool("GEMINI_STREAMING", True),
        timeout=float(os.getenv("GENERATION_TIMEOUT", "120")),
    )
