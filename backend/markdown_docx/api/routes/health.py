"""Health check endpoints."""

from fastapi import APIRouter, Depends

from markdown_docx.api.deps import get_app_settings
from markdown_docx.core.config import Settings
from markdown_docx.schemas import HealthResponse

router = APIRouter()


@router.get("/health", tags=["system"], response_model=HealthResponse)
def healthcheck(app_settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Simple readiness probe."""

    return HealthResponse(status="ok", app=app_settings.app_name, environment=app_settings.environment)
