"""Booking domain - Admission, pricing and lifecycle"""

from .router import router

__all__ = ["router"]
