"""
Sessions router package.

Exports the router for conversation session endpoints.
"""

from .sessions_router import router

__all__ = ["router"]
