from fastapi import APIRouter

from studysprint.core.config import SERVICE_NAME
from studysprint.goals.models import format_timestamp, utc_now
from studysprint.system.schemas import HealthResponse, ServiceHealthResponse

router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthResponse)
def health_route():
    return HealthResponse(status="ok")


@router.get("/api/health", response_model=ServiceHealthResponse)
def api_health_route():
    return ServiceHealthResponse(status="ok", service=SERVICE_NAME, time=format_timestamp(utc_now()))
