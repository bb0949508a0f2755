"""Anonymous instant challenge."""
from .router import router as challenges_router

__all__ = ["challenges_router"]
