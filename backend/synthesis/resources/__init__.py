"""Resource library: saved notes, PDFs and images."""
from .router import router as resources_router

__all__ = ["resources_router"]
