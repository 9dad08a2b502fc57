from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class SyncResultStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class SyncResponse(BaseModel):
    status: SyncResultStatus
    message: str
    details: dict | None = None


class SyncStatusResponse(BaseModel):
    entity_type: str
    last_synced_at: datetime | None = None

    class Config:
        from_attributes = True
