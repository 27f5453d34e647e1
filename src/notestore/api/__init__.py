"""HTTP API for notestore."""

from .app import create_app

__all__ = ["create_app"]
