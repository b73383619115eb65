"""
Validation for goal list queries and mutation payloads.

Query parameters arrive as raw strings and are parsed once, here, into a
typed GoalQuery. Everything downstream (query engine, stats) works on the
typed record only.
"""

from typing import Mapping, Optional

from pydantic import BaseModel

from studysprint.core.errors import GoalValidationError
from studysprint.goals.models import PRIORITIES, parse_due_date, parse_priority

STATUSES = ("active", "completed", "overdue", "archived")
SORT_FIELDS = {"createdat": "createdAt", "duedate": "dueDate", "priority": "priority"}
SORT_ORDERS = ("asc", "desc")
IMPORT_MODES = ("replace", "merge")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


class GoalQuery(BaseModel):
    status: Optional[str] = None
    priority: Optional[str] = None
    q: str = ""
    sort_by: str = "createdAt"
    order: str = "desc"
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    include_archived: bool = False


def _normalize(value: str) -> str:
    return value.strip().lower()


def _parse_int(value: str) -> Optional[int]:
    clean = value.strip()
    return int(clean) if clean.isascii() and clean.isdigit() else None


def parse_goal_query(params: Mapping[str, Optional[str]]) -> GoalQuery:
    """
    Validates raw list/stats query parameters and builds a GoalQuery.

    Checks run in a fixed order and the first failure wins.

    Args:
        params (Mapping[str, Optional[str]]): Raw parameter values; None or a
            missing key means the parameter was not supplied.

    Returns:
        GoalQuery: The typed query.

    Raises:
        GoalValidationError: Naming the first invalid parameter.
    """
    query = {}

    status = params.get("status")
    if status is not None:
        status = _normalize(status)
        if status not in STATUSES:
            raise GoalValidationError("status must be active, completed, overdue, or archived.", "status")
        query["status"] = status

    priority = params.get("priority")
    if priority is not None:
        priority = _normalize(priority)
        if priority != "all" and priority not in PRIORITIES:
            raise GoalValidationError("priority must be low, medium, high, or all.", "priority")
        if priority != "all":
            query["priority"] = priority

    sort_by = params.get("sortBy")
    if sort_by is not None:
        sort_by = SORT_FIELDS.get(_normalize(sort_by))
        if sort_by is None:
            raise GoalValidationError("sortBy must be createdAt, dueDate, or priority.", "sortBy")
        query["sort_by"] = sort_by

    order = params.get("order")
    if order is not None:
        order = _normalize(order)
        if order not in SORT_ORDERS:
            raise GoalValidationError("order must be asc or desc.", "order")
        query["order"] = order

    page = params.get("page")
    if page is not None:
        parsed = _parse_int(page)
        if parsed is None or parsed < 1:
            raise GoalValidationError("page must be a positive integer.", "page")
        query["page"] = parsed

    page_size = params.get("pageSize")
    if page_size is not None:
        parsed = _parse_int(page_size)
        if parsed is None or parsed < 1 or parsed > MAX_PAGE_SIZE:
            raise GoalValidationError(f"pageSize must be between 1 and {MAX_PAGE_SIZE}.", "pageSize")
        query["page_size"] = parsed

    include_archived = params.get("includeArchived")
    if include_archived is not None:
        include_archived = _normalize(include_archived)
        if include_archived not in ("true", "false"):
            raise GoalValidationError("includeArchived must be true or false.", "includeArchived")
        query["include_archived"] = include_archived == "true"

    q = params.get("q")
    if q is not None:
        query["q"] = q.strip()

    return GoalQuery(**query)


def parse_import_mode(value) -> str:
    if value is None:
        return "replace"
    if not isinstance(value, str) or _normalize(value) not in IMPORT_MODES:
        raise GoalValidationError("mode must be replace or merge.", "mode")
    return _normalize(value)


# Payload fields

def validate_title(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise GoalValidationError("title must be a non-empty string.", "title")
    return value.strip()


def validate_priority(value) -> str:
    parsed = parse_priority(value)
    if parsed is None:
        raise GoalValidationError("priority must be low, medium, or high.", "priority")
    return parsed


def validate_due_date(value) -> Optional[str]:
    if value is None:
        return None
    parsed = parse_due_date(value)
    if parsed is None:
        raise GoalValidationError("dueDate must be null or use YYYY-MM-DD format.", "dueDate")
    return parsed


def validate_archived(value) -> bool:
    if not isinstance(value, bool):
        raise GoalValidationError("archived must be a boolean.", "archived")
    return value
