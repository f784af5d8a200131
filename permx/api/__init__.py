"""Permx API Module - FastAPI endpoints."""

from .routes import router, get_permission_manager, set_permission_manager

__all__ = [
    "router",
    "get_permission_manager",
    "set_permission_manager",
]
