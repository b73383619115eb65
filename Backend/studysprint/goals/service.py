import logging
import threading
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from studysprint.core.errors import GoalNotFoundError, PersistenceError
from studysprint.core.storage import JsonGoalStorage
from studysprint.goals.models import DEFAULT_PRIORITY, Goal, utc_now

logger = logging.getLogger(__name__)


class GoalStore:
    """
    Owns the goal collection and the id counter.

    Every mutation runs under a single lock and is persisted before it
    returns, so a caller never sees state that has not been written to disk.
    Reads return copies taken under the same lock.
    """

    def __init__(self, storage: JsonGoalStorage):
        self.storage = storage
        self.lock = threading.RLock()
        try:
            self._goals: List[Goal] = [Goal.model_validate(record) for record in storage.load()]
        except ValidationError as e:
            raise PersistenceError(f"Stored goals data is malformed: {e}") from e
        self._next_id = self._compute_next_id()
        logger.info(f"Loaded {len(self._goals)} goals (next id {self._next_id})")

    # Helpers

    def _compute_next_id(self) -> int:
        return max((goal.id for goal in self._goals), default=0) + 1

    def _find(self, goal_id: int) -> Goal:
        for goal in self._goals:
            if goal.id == goal_id:
                return goal
        raise GoalNotFoundError(goal_id)

    def _persist(self) -> None:
        self.storage.save([goal.model_dump(mode="json", by_alias=True) for goal in self._goals])

    def _append_new(self, title: str, priority: str, due_date: Optional[str]) -> Goal:
        goal = Goal(
            id=self._next_id,
            title=title,
            priority=priority,
            due_date=due_date,
            completed=False,
            archived=False,
            created_at=utc_now(),
        )
        self._next_id += 1
        self._goals.append(goal)
        return goal

    @property
    def next_id(self) -> int:
        with self.lock:
            return self._next_id

    # Reads

    def list_goals(self) -> List[Goal]:
        with self.lock:
            return [goal.model_copy() for goal in self._goals]

    def get(self, goal_id: int) -> Goal:
        with self.lock:
            return self._find(goal_id).model_copy()

    # Single goal mutations

    def create(self, title: str, priority: str = DEFAULT_PRIORITY, due_date: Optional[str] = None) -> Goal:
        with self.lock:
            goal = self._append_new(title, priority, due_date)
            self._persist()
            return goal.model_copy()

    def update(self, goal_id: int, fields: Dict[str, Any]) -> Goal:
        """
        Applies a partial update.

        Args:
            goal_id (int): Goal to update.
            fields (Dict[str, Any]): Already validated values keyed by attribute
                name. Keys that are absent leave the field unchanged.

        Returns:
            Goal: The updated goal.

        Raises:
            GoalNotFoundError: If no goal has this id.
        """
        with self.lock:
            goal = self._find(goal_id)
            for field, value in fields.items():
                if field in ("id", "created_at"):
                    continue
                setattr(goal, field, value)
            self._persist()
            return goal.model_copy()

    def toggle_completed(self, goal_id: int) -> Goal:
        with self.lock:
            goal = self._find(goal_id)
            goal.completed = not goal.completed
            self._persist()
            return goal.model_copy()

    def set_archived(self, goal_id: int, archived: Optional[bool] = None) -> Goal:
        """Sets the archived flag, or flips it when archived is None."""
        with self.lock:
            goal = self._find(goal_id)
            goal.archived = (not goal.archived) if archived is None else archived
            self._persist()
            return goal.model_copy()

    def delete(self, goal_id: int) -> None:
        with self.lock:
            goal = self._find(goal_id)
            self._goals = [item for item in self._goals if item is not goal]
            self._persist()

    def duplicate_for_tomorrow(self, goal_id: int, today: date) -> Goal:
        with self.lock:
            source = self._find(goal_id)
            tomorrow = (today + timedelta(days=1)).isoformat()
            goal = self._append_new(source.title, source.priority, tomorrow)
            self._persist()
            return goal.model_copy()

    # Bulk mutations

    def complete_all(self) -> int:
        with self.lock:
            updated = 0
            for goal in self._goals:
                if not goal.completed:
                    goal.completed = True
                    updated += 1
            self._persist()
            logger.info(f"Marked {updated} goals completed")
            return updated

    def clear_completed(self) -> int:
        with self.lock:
            before = len(self._goals)
            self._goals = [goal for goal in self._goals if not goal.completed]
            deleted = before - len(self._goals)
            self._persist()
            logger.info(f"Cleared {deleted} completed goals")
            return deleted

    def replace_all(self, goals: List[Goal]) -> int:
        """Installs goals as the whole collection. Returns the new total."""
        with self.lock:
            self._goals = list(goals)
            self._next_id = self._compute_next_id()
            self._persist()
            return len(self._goals)

    def extend(self, goals: List[Goal]) -> int:
        """Appends goals to the collection. Returns the new total."""
        with self.lock:
            self._goals.extend(goals)
            self._next_id = max(self._next_id, self._compute_next_id())
            self._persist()
            return len(self._goals)
