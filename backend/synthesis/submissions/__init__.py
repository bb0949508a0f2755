"""Drafts and submitted work."""
from .router import router as submissions_router

__all__ = ["submissions_router"]
