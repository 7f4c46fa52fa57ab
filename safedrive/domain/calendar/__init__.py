"""Calendar domain - Per-day availability derivation"""

from .router import router

__all__ = ["router"]
