"""Project Schemas — create/update payloads, assignment request, project shape.

Invariants:
    - name: 2-100 chars; description: optional, up to 500 chars
    - status in {active, completed, on_hold, cancelled}
    - latitude in [-90, 90], longitude in [-180, 180]
    - end_date, when given, is not before start_date
"""

from datetime import date, datetime

from pydantic import (
    AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator,
)

from worksite.core.domain_types import ProjectStatus
from worksite.core.query_plan import MAX_STORED_INT
from worksite.schemas.worker import WorkerResponse


class ProjectPayload(BaseModel):
    """Full project body for POST and PUT."""
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=2, max_length=100)
    description: str | None = Field(None, max_length=500)
    status: ProjectStatus = ProjectStatus.ACTIVE
    start_date: date
    end_date: date | None = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class AssignWorkerRequest(BaseModel):
    worker_id: int = Field(
        gt=0, le=MAX_STORED_INT,
        validation_alias=AliasChoices("worker_id", "workerId"),
    )


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    status: str
    start_date: date
    end_date: date | None = None
    latitude: float
    longitude: float
    user_id: int
    workers: list[WorkerResponse] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None
