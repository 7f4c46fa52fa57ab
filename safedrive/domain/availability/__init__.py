"""Availability domain - Owner block/unblock editor"""

from .router import router

__all__ = ["router"]
