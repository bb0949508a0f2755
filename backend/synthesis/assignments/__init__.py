"""Assignments generated from topics and resources."""
from .router import router as assignments_router

__all__ = ["assignments_router"]
