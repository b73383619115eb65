"""
Bulk export and import of the goal collection.
"""

import logging
import math
from datetime import datetime
from typing import Any, List, Optional

from studysprint.core.errors import GoalImportError
from studysprint.goals.models import (
    DEFAULT_PRIORITY,
    Goal,
    parse_due_date,
    parse_priority,
    parse_timestamp,
    utc_now,
)
from studysprint.goals.schemas import GoalExport, ImportResult
from studysprint.goals.service import GoalStore

logger = logging.getLogger(__name__)


def export_filename(exported_at: datetime) -> str:
    return f"goals-export-{exported_at.date().isoformat()}.json"


def export_goals(store: GoalStore) -> GoalExport:
    """Snapshot of the whole collection, archived and completed goals included."""
    return GoalExport(items=store.list_goals(), exported_at=utc_now())


def _candidate_id(value: Any) -> Optional[int]:
    # bool is an int subclass but never a valid id
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        return None
    return int(value) if value >= 1 else None


def normalize_import(items: List[Any], base_id: int, now: datetime) -> List[Goal]:
    """
    Normalizes raw import records into goals.

    Args:
        items (List[Any]): Raw records in import order.
        base_id (int): Store's next id captured before the batch; records
            without a usable id get base_id + index.
        now (datetime): Creation time for records without a usable createdAt.

    Returns:
        List[Goal]: Normalized goals, same order as items.

    Raises:
        GoalImportError: For the first record that cannot be imported.
    """
    goals = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise GoalImportError(index, "item must be an object.")

        title = item.get("title")
        if not isinstance(title, str) or not title.strip():
            raise GoalImportError(index, "title is required.")

        goal_id = _candidate_id(item.get("id"))
        goals.append(Goal(
            id=goal_id if goal_id is not None else base_id + index,
            title=title.strip(),
            priority=parse_priority(item.get("priority")) or DEFAULT_PRIORITY,
            due_date=parse_due_date(item.get("dueDate")),
            completed=bool(item.get("completed")),
            archived=bool(item.get("archived")),
            created_at=parse_timestamp(item.get("createdAt")) or now,
        ))
    return goals


def import_goals(store: GoalStore, mode: str, items: List[Any]) -> ImportResult:
    """
    Imports a batch of goals, replacing or extending the collection.

    The batch is admitted only if every record normalizes; otherwise the
    store is left untouched.
    """
    with store.lock:
        goals = normalize_import(items, store.next_id, utc_now())
        if mode == "merge":
            total = store.extend(goals)
        else:
            total = store.replace_all(goals)

    logger.info(f"Imported {len(goals)} goals (mode={mode}, total={total})")
    return ImportResult(imported=len(goals), total=total, mode=mode)
