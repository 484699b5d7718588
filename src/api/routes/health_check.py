import time

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel

from src.domain.base import utcnow

router = APIRouter(tags=["Health"])

_STARTED_AT = time.monotonic()


class HealthServices(BaseModel):
    api: str
    database: str
    mail: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
    environment: str
    uptime_seconds: int
    services: HealthServices


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthResponse)
async def health(request: Request, response: Response):
    """Liveness probe; reports configuration, does not touch the database"""
    config = request.app.state.config
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"

    smtp_configured = bool(config.SMTP_HOST and config.SMTP_USER and config.SMTP_PASS)

    return HealthResponse(
        status="healthy",
        timestamp=utcnow().isoformat() + "Z",
        version=config.APP_VERSION,
        environment=config.ENVIRONMENT,
        uptime_seconds=int(time.monotonic() - _STARTED_AT),
        services=HealthServices(
            api="healthy",
            database="configured" if config.DB_URI else "not-configured",
            mail="configured" if smtp_configured else "not-configured",
        ),
    )
