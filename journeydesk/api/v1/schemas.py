"""Request bodies for the v1 endpoints."""

import datetime as dt
import uuid

from pydantic import BaseModel, Field

from journeydesk.models.enums import AttendanceType, SessionType


class TaskSelection(BaseModel):
    task_ids: list[uuid.UUID] = Field(default_factory=list)


class DocumentSelection(BaseModel):
    document_ids: list[uuid.UUID] = Field(default_factory=list)


class StageSelection(BaseModel):
    stage_ids: list[uuid.UUID] = Field(default_factory=list)


class LinkIn(BaseModel):
    title: str = ""
    link_url: str = ""
    description: str | None = None
    session_type: SessionType = SessionType.SPECIAL_SESSION
    target_batch: str | None = "all"
    is_active: bool = True


class LinkActiveIn(BaseModel):
    is_active: bool


class CompletionToggleIn(BaseModel):
    notes: str | None = None


class AttendanceMarkIn(BaseModel):
    user_ids: list[uuid.UUID] = Field(default_factory=list)
    date: dt.date
    attendance_type: AttendanceType = AttendanceType.DAILY
    session_name: str | None = None


class AttendanceAllPresentIn(BaseModel):
    date: dt.date
    batch: str | None = "all"
