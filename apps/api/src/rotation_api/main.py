import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rotation_api.config import settings
from rotation_api.exceptions import (
    general_exception_handler,
    http_exception_handler,
    rotation_exception_handler,
    validation_exception_handler,
)
from rotation_api.routers import rotation
from rotation_scheduler import RotationSchedulerError


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logging.basicConfig(level=settings.log_level)
    logger = logging.getLogger(__name__)
    logger.info("Rotation scheduler API starting up...")

    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Host: {settings.host}, Port: {settings.port}")
    logger.info(
        f"Search defaults: strict={settings.search_strict}, "
        f"max_steps={settings.search_max_steps}, "
        f"max_time={settings.search_max_time_seconds}s"
    )
    yield
    # Shutdown
    logger.info("Rotation scheduler API shutting down...")


# Initialize FastAPI app
app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    lifespan=lifespan,
)

# Add exception handlers
# Starlette base class so unknown routes get the same envelope
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(RotationSchedulerError, rotation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include API routers
app.include_router(rotation.router, prefix="/api")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return JSONResponse({"status": "healthy", "message": "OK"})


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information"""
    return JSONResponse({"message": settings.api_title, "status": "active"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rotation_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        reload_dirs=["./"],
    )
