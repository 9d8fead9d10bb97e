"""HTTP service mode for codesum."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
