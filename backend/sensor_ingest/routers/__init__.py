"""
Routers Package
===============

Routers direct incoming requests to the right place.
"""

from .readings import router as readings_router, get_settings, get_store

__all__ = [
    "readings_router",
    "get_settings",
    "get_store",
]
