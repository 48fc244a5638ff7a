"""HTTP service exposing the README update pipeline."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
