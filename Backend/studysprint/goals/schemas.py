from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_serializer, field_validator

from studysprint.core.schema import BaseSchema
from studysprint.goals.models import DEFAULT_PRIORITY, Goal, format_timestamp
from studysprint.goals.validation import (
    parse_import_mode,
    validate_archived,
    validate_due_date,
    validate_priority,
    validate_title,
)


# Requests

class GoalCreate(BaseSchema):
    title: str = Field(default=None, validate_default=True)
    priority: str = DEFAULT_PRIORITY
    due_date: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _check_title(cls, value):
        return validate_title(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _check_priority(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_PRIORITY
        return validate_priority(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def _check_due_date(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return validate_due_date(value)


class GoalUpdate(BaseSchema):
    """Partial update. Only fields present in the request body are applied."""

    title: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[str] = None
    archived: Optional[bool] = None

    @field_validator("title", mode="before")
    @classmethod
    def _check_title(cls, value):
        return validate_title(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _check_priority(cls, value):
        return validate_priority(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def _check_due_date(cls, value):
        return validate_due_date(value)

    @field_validator("archived", mode="before")
    @classmethod
    def _check_archived(cls, value):
        return validate_archived(value)


class GoalArchiveUpdate(BaseSchema):
    archived: Optional[bool] = None

    @field_validator("archived", mode="before")
    @classmethod
    def _check_archived(cls, value):
        if value is None:
            return None
        return validate_archived(value)


class GoalImportRequest(BaseSchema):
    mode: str = Field(default=None, validate_default=True)
    items: List[Any]

    @field_validator("mode", mode="before")
    @classmethod
    def _check_mode(cls, value):
        return parse_import_mode(value)


# Responses

class GoalItemResponse(BaseSchema):
    item: Goal


class PageMeta(BaseSchema):
    page: int
    page_size: int
    total_items: int
    total_pages: int


class GoalPage(BaseSchema):
    items: List[Goal]
    meta: PageMeta


class PriorityCounts(BaseSchema):
    low: int = 0
    medium: int = 0
    high: int = 0


class GoalStats(BaseSchema):
    total: int
    active: int
    completed: int
    overdue: int
    by_priority: PriorityCounts


class GoalExport(BaseSchema):
    items: List[Goal]
    exported_at: datetime

    @field_serializer("exported_at")
    def _serialize_exported_at(self, value: datetime) -> str:
        return format_timestamp(value)


class ImportResult(BaseSchema):
    imported: int
    total: int
    mode: str


class UpdatedCount(BaseSchema):
    updated: int


class DeletedCount(BaseSchema):
    deleted: int
