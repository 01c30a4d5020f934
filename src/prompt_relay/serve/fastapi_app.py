"""FastAPI front end for the prompt relay.

Endpoints:
- GET  /health
- GET  /              prompt form
- POST /prompts       form field `prompt`, renders the form with the reply
- POST /api/prompts   { "prompt": "..." } -> { "text": "..." | null }
"""
from __future__ import annotations
import logging
from pathlib import Path

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from prompt_relay.common.logging_setup import setup_logging
from prompt_relay.common.schema import PromptRequest
from prompt_relay.common.settings import Settings, load_settings
from prompt_relay.core.errors import GenerationError
from prompt_relay.core.gemini_client import GenerativeClient, VertexGeminiClient
from prompt_relay.core.relay import PromptRelay

LOGGER = logging.getLogger("prompt_relay.serve.app")
setup_logging()

templates = Jinja2Templates(directory=Path(__file__).parent / "templates")

class PromptIn(BaseModel):
    prompt: str | None = None

class PromptOut(BaseModel):
    text: str | None = None

app = FastAPI(title="prompt-relay")

@app.on_event("startup")
def _validate_settings_on_startup() -> None:
    """Warn early when credentials needed by the backend are not configured."""
    try:
        settings = load_settings()
        if not settings.project_id:
            LOGGER.warning("Vertex AI project id is not configured; generation calls will fail")
        if not settings.access_token:
            LOGGER.warning("Vertex AI access token is not configured; generation calls will fail")
    except Exception as e:
        LOGGER.warning("Failed to load settings: %s", e)

@app.exception_handler(GenerationError)
async def _generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    LOGGER.error("Generation request failed: %s", exc)
    return JSONResponse(status_code=502, content={"detail": "Upstream generation error"})

def get_settings() -> Settings:
    return load_settings()

def get_client(settings: Settings = Depends(get_settings)) -> GenerativeClient:
    return VertexGeminiClient(timeout=settings.timeout)

def get_relay(
    settings: Settings = Depends(get_settings),
    client: GenerativeClient = Depends(get_client),
) -> PromptRelay:
    return PromptRelay.from_settings(client, settings)

@app.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {"status": "ok", "model": settings.model}

@app.get("/", response_class=HTMLResponse)
def index(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "index.html", {"prompt": "", "response_text": None})

@app.post("/prompts", response_class=HTMLResponse)
def create_prompt(
    request: Request,
    prompt: str = Form(""),
    relay: PromptRelay = Depends(get_relay),
) -> HTMLResponse:
    response_text = relay.handle(PromptRequest(prompt=prompt))
    return templates.TemplateResponse(
        request, "index.html", {"prompt": prompt, "response_text": response_text}
    )

@app.post("/api/prompts", response_model=PromptOut)
def create_prompt_json(body: PromptIn, relay: PromptRelay = Depends(get_relay)) -> PromptOut:
    return PromptOut(text=relay.handle(PromptRequest(prompt=body.prompt)))
