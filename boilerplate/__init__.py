"""Boilerplate backend: FastAPI service with HTTP access logging."""
