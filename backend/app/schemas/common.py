from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class Message(ORMModel):
    message: str


class HealthResponse(ORMModel):
    service: str
    status: str
    timestamp: datetime


class ApiErrorResponse(BaseModel):
    status_code: int
    timestamp: datetime
    path: str
    message: str | list | dict
    error: str | None = None
