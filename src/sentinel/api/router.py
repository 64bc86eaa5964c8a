"""Root API router: probes, the token endpoint and the versioned admin API."""

from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from sentinel.api.dependencies import DBSession
from sentinel.config import settings
from sentinel.core.auth.routes import router as token_router
from sentinel.modules import discover_modules


class LivenessResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    """Overall state plus one entry per collaborator."""

    status: str
    checks: dict[str, str]


health_router = APIRouter(tags=["health"])


@health_router.get("/health/live", response_model=LivenessResponse, summary="Liveness probe")
async def liveness() -> LivenessResponse:
    return LivenessResponse(status="alive")


@health_router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description=(
        "Checks the database round-trip and that an OAuth engine is attached. "
        "Returns 503 when either is missing."
    ),
)
async def readiness(request: Request, db: DBSession) -> JSONResponse:
    checks = {
        "database": await _check_database(db),
        "oauth_engine": "ok" if request.app.state.oauth_engine is not None else "not_configured",
    }
    ready = all(result == "ok" for result in checks.values())

    body = ReadinessResponse(status="ready" if ready else "degraded", checks=checks)
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(),
    )


async def _check_database(db: DBSession) -> str:
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return type(e).__name__
    return "ok"


@health_router.get("/info", summary="Application info")
async def info() -> dict[str, Any]:
    return {
        "app": settings.app_name,
        "environment": settings.environment,
        "email_provider": settings.email_provider,
    }


v1_router = APIRouter(prefix="/api/v1")
for module_router in discover_modules():
    v1_router.include_router(module_router)

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(token_router)
api_router.include_router(v1_router)
