import re
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import field_serializer, field_validator

from studysprint.core.schema import BaseSchema

PRIORITIES = ("low", "medium", "high")
DEFAULT_PRIORITY = "medium"
PRIORITY_RANK = {"low": 1, "medium": 2, "high": 3}

DUE_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_now() -> datetime:
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_priority(value) -> Optional[str]:
    """Returns the normalized priority, or None if value is not a known priority."""
    if not isinstance(value, str):
        return None
    normalized = value.strip().lower()
    return normalized if normalized in PRIORITIES else None


def parse_due_date(value) -> Optional[str]:
    """Returns the trimmed YYYY-MM-DD string, or None for anything else."""
    if not isinstance(value, str):
        return None
    clean = value.strip()
    return clean if DUE_DATE_PATTERN.match(clean) else None


def parse_timestamp(value) -> Optional[datetime]:
    """Parses an ISO-8601 timestamp. Naive values are taken as UTC."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        # offset pushes the instant outside the representable range
        return None


class Goal(BaseSchema):
    id: int
    title: str
    priority: str = DEFAULT_PRIORITY
    due_date: Optional[str] = None
    completed: bool = False
    archived: bool = False
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        try:
            return value.astimezone(timezone.utc)
        except OverflowError as e:
            raise ValueError(f"createdAt is out of range: {e}") from e

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        return format_timestamp(value)

    def is_overdue(self, today: date) -> bool:
        return self.due_date is not None and self.due_date < today.isoformat() and not self.completed
