"""Helper to launch the relay web app under uvicorn."""
from __future__ import annotations
import os

import uvicorn

def main() -> None:
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("prompt_relay.serve.fastapi_app:app", host=host, port=port, log_config=None)

if __name__ == "__main__":
    main()
