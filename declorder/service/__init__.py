"""HTTP service mode for declorder."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
