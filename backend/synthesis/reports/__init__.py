"""Growth reports and the grading pipeline."""
from .router import router as reports_router

__all__ = ["reports_router"]
