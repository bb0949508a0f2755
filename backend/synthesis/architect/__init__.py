"""Learning architect coaching chat."""
from .router import router as architect_router

__all__ = ["architect_router"]
