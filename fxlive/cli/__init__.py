"""Command line interface for fxlive."""

from .main import app, create_app

__all__ = ["app", "create_app"]
