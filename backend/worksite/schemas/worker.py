"""Worker Schemas — create/update payloads and the public worker shape.

Invariants:
    - name, position: 2-50 chars, stripped
    - age: 18-100; salary: 0 up to the 32-bit column maximum (integers)
    - user_id is never accepted from the client
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from worksite.core.query_plan import MAX_STORED_INT


class WorkerPayload(BaseModel):
    """Full worker body for POST and PUT."""
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=2, max_length=50)
    position: str = Field(min_length=2, max_length=50)
    age: int = Field(ge=18, le=100)
    salary: int = Field(ge=0, le=MAX_STORED_INT)

    @field_validator("name", "position", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class WorkerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    position: str
    age: int
    salary: int
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
