from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session
import os
import logging
from contextlib import asynccontextmanager

from . import __version__
from .config import CORS_ORIGINS, LOG_LEVEL
from .database import get_db, get_db_session, check_database_connection, create_tables, seed_default_rubrics
from .errors import validation_exception_handler
from .auth import auth_router
from .resources import resources_router
from .assignments import assignments_router
from .submissions import submissions_router
from .reports import reports_router
from .challenges import challenges_router
from .architect import architect_router

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler replacing deprecated startup/shutdown events."""
    logger.info("Starting up Synthesis API...")
    # Tests manage their own in-memory database
    if os.getenv("PYTEST_CURRENT_TEST") is not None:
        logger.info("Skipping DB setup during tests")
    else:
        if check_database_connection():
            logger.info("Database connection successful")
        else:
            logger.error("Database connection failed")
            raise Exception("Cannot connect to database")
        create_tables()
        with get_db_session() as db:
            seed_default_rubrics(db)
    yield
    logger.info("Shutting down Synthesis API...")


app = FastAPI(
    title="Synthesis API",
    description="Learning companion: resources, AI-generated assignments and growth reports",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Routers
app.include_router(auth_router)
app.include_router(resources_router)
app.include_router(assignments_router)
app.include_router(submissions_router)
app.include_router(reports_router)
app.include_router(challenges_router)
app.include_router(architect_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Synthesis API", "version": __version__}


@app.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """Health check endpoint with database connectivity test."""
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "database": "connected",
            "version": __version__,
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e),
            "version": __version__,
        }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
