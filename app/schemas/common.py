from datetime import UTC, datetime

from pydantic import BaseModel, Field


class ApiError(BaseModel):
    detail: str
    path: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
