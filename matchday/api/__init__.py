"""HTTP API built with FastAPI."""

from matchday.api.app import create_app

__all__ = ["create_app"]
