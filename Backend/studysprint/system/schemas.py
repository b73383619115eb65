from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str


class ServiceHealthResponse(HealthResponse):
    service: str
    time: str
