"""Boilerplate FastAPI application: entry point.

Start with:
    uvicorn boilerplate.api.main:app --reload --host 0.0.0.0 --port 8080

or ``python -m boilerplate`` (reads HOST and PORT). Settings come from the
environment and an optional ``.env`` file; see boilerplate.config.
"""
from boilerplate.api.app import create_app

app = create_app()
