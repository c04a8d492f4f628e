"""Activity Log Schemas — admin-facing view of activity entries."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class ActivityLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int | None
    log_type: str
    entity_type: str
    entity_id: int | None
    details: dict[str, Any] | None = None
    created_at: datetime
