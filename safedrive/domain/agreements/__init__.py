"""Agreement domain - Rental terms and two-party signing"""

from .router import router

__all__ = ["router"]
