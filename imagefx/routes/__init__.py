"""
Routes module - HTTP front end for the playground commands
"""

from .playground import router as playground_router

__all__ = [
    "playground_router",
]
