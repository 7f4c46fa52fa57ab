"""Vehicle domain - Listing switch and admin review"""

from .router import router

__all__ = ["router"]
