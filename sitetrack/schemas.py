"""Request and response schemas.

Field names mirror the SQLAlchemy models; on the wire they are camelCase
(``assigneeId``, ``startOnSiteDate``). Request bodies accept either form.
"""
from typing import Annotated, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, BeforeValidator, AfterValidator, Field, field_validator
from pydantic.alias_generators import to_camel

from sitetrack.models import ProjectStatus


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Date-like strings become datetimes at validation time; "" means "no date"
DateInput = Annotated[Optional[datetime], BeforeValidator(_blank_to_none), AfterValidator(_to_naive_utc)]


# Row ids are INTEGER columns; anything outside this range cannot exist
MAX_ROW_ID = 2**31 - 1

RowId = Annotated[int, Field(ge=1, le=MAX_ROW_ID)]
ForeignId = Optional[RowId]

# Query-string ids where an empty value means "no filter"
FilterId = Annotated[Optional[RowId], BeforeValidator(_blank_to_none)]


def _reject_null(value):
    if value is None:
        raise ValueError("may be omitted but not null")
    return value


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Users

class UserCreate(ApiModel):
    username: str
    password: str
    name: str
    email: str
    discipline: Optional[str] = None


class UserUpdate(ApiModel):
    username: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    discipline: Optional[str] = None

    reject_nulls = field_validator("username", "password", "name", "email", mode="before")(_reject_null)


class UserResponse(ApiModel):
    id: int
    username: str
    name: str
    email: str
    discipline: Optional[str] = None


# Projects

class ProjectFields(ApiModel):
    project_number: Optional[str] = None
    description: Optional[str] = None
    value: Optional[str] = None
    retention: Optional[str] = None

    latitude: Optional[str] = None
    longitude: Optional[str] = None
    postcode: Optional[str] = None

    start_on_site_date: DateInput = None
    contract_completion_date: DateInput = None
    construction_completion_date: DateInput = None

    foundations_status: Optional[str] = None
    foundations_start_date: DateInput = None
    foundations_finish_date: DateInput = None
    foundations_contractor: Optional[str] = None

    frame_status: Optional[str] = None
    frame_start_date: DateInput = None
    frame_finish_date: DateInput = None
    frame_contractor: Optional[str] = None

    envelope_status: Optional[str] = None
    envelope_start_date: DateInput = None
    envelope_finish_date: DateInput = None
    envelope_contractor: Optional[str] = None

    internals_status: Optional[str] = None
    internals_start_date: DateInput = None
    internals_finish_date: DateInput = None
    internals_contractor: Optional[str] = None

    mep_status: Optional[str] = None
    mep_start_date: DateInput = None
    mep_finish_date: DateInput = None
    mep_contractor: Optional[str] = None


class ProjectCreate(ProjectFields):
    name: str
    status: ProjectStatus = ProjectStatus.TENDER


class ProjectUpdate(ProjectFields):
    name: Optional[str] = None
    status: Optional[ProjectStatus] = None

    reject_nulls = field_validator("name", "status", mode="before")(_reject_null)


class ProjectResponse(ProjectFields):
    id: int
    name: str
    status: ProjectStatus
    created_at: datetime


# Actions

class ActionCreate(ApiModel):
    description: str
    discipline: str
    phase: str = "construction"
    status: str = "open"
    priority: str = "medium"
    assignee_id: ForeignId = None
    project_id: ForeignId = None
    due_date: DateInput = None


class ActionUpdate(ApiModel):
    description: Optional[str] = None
    discipline: Optional[str] = None
    phase: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    assignee_id: ForeignId = None
    project_id: ForeignId = None
    due_date: DateInput = None

    reject_nulls = field_validator(
        "description", "discipline", "phase", "status", "priority", mode="before"
    )(_reject_null)


class ActionResponse(ApiModel):
    id: int
    description: str
    discipline: str
    phase: str
    status: str
    priority: str
    assignee_id: Optional[int] = None
    project_id: Optional[int] = None
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ActionWithRelationsResponse(ActionResponse):
    assignee: Optional[UserResponse] = None
    project: Optional[ProjectResponse] = None


# Dashboard

class StatsResponse(ApiModel):
    open: int
    closed: int
    total: int
    projects: int
    team_members: int
