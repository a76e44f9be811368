"""
FastAPI Application

Main entry point for the athlete injury-risk web API.
"""

import logging
from typing import Dict

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from athlete_risk.api.dependencies import get_settings
from athlete_risk.api.routes import activities, athletes, injuries, metrics, recovery, risk
from athlete_risk.errors import (
    ActivityValidationError,
    AthleteExistsError,
    PersistenceError,
    RiskEngineError,
)

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Athlete Injury Risk API",
    description="Per-body-part workload tracking and injury-risk scoring for athletes",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(athletes.router, prefix="/api", tags=["Athletes"])
app.include_router(activities.router, prefix="/api", tags=["Activities"])
app.include_router(risk.router, prefix="/api", tags=["Injury Risk"])
app.include_router(injuries.router, prefix="/api", tags=["Injuries"])
app.include_router(metrics.router, prefix="/api", tags=["Performance Metrics"])
app.include_router(recovery.router, prefix="/api", tags=["Recovery"])


@app.get("/")
async def root() -> Dict[str, str]:
    """Root endpoint - API information."""
    return {
        "name": "Athlete Injury Risk API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "athlete-injury-risk-api"}


# ===== ERROR HANDLERS =====

def _error(status_code: int, error: str, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": str(exc)})


@app.exception_handler(ActivityValidationError)
async def validation_error_handler(request: Request, exc: ActivityValidationError):
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid Activity", exc)


@app.exception_handler(AthleteExistsError)
async def conflict_handler(request: Request, exc: AthleteExistsError):
    return _error(status.HTTP_409_CONFLICT, "Conflict", exc)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage Error", exc)


@app.exception_handler(RiskEngineError)
async def engine_error_handler(request: Request, exc: RiskEngineError):
    """Lookups for unknown athletes, activities and injuries map to 404."""
    if isinstance(exc, LookupError):
        return _error(status.HTTP_404_NOT_FOUND, "Not Found", exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", exc)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent error format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "message": str(exc.detail)},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "message": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=get_settings().log_level)
    uvicorn.run(
        "athlete_risk.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
