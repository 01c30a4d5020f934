"""
Prompt relay package.

Provides:
- A single-call relay from a text prompt to Gemini on Vertex AI
- FastAPI web surface (HTML form + JSON endpoint) and a small CLI
"""
