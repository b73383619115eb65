import math
from datetime import date
from functools import cmp_to_key
from typing import List

from studysprint.goals.models import PRIORITY_RANK, Goal
from studysprint.goals.schemas import GoalPage, PageMeta
from studysprint.goals.validation import GoalQuery


def _is_visible(goal: Goal, query: GoalQuery) -> bool:
    if query.status == "archived":
        return goal.archived
    if not goal.archived:
        return True
    # archived goals never show up inside a status view
    return query.include_archived and query.status is None


def _matches(goal: Goal, query: GoalQuery, today: date) -> bool:
    if not _is_visible(goal, query):
        return False
    if query.status == "active" and goal.completed:
        return False
    if query.status == "completed" and not goal.completed:
        return False
    if query.status == "overdue" and not goal.is_overdue(today):
        return False
    if query.priority and goal.priority != query.priority:
        return False
    if query.q and query.q.casefold() not in goal.title.casefold():
        return False
    return True


def filter_goals(goals: List[Goal], query: GoalQuery, today: date) -> List[Goal]:
    return [goal for goal in goals if _matches(goal, query, today)]


def _sort_key(goal: Goal, sort_by: str):
    if sort_by == "priority":
        return PRIORITY_RANK.get(goal.priority, 0)
    if sort_by == "dueDate":
        # missing due dates sort after every real date
        return (goal.due_date is None, goal.due_date or "")
    return goal.created_at


def sort_goals(goals: List[Goal], query: GoalQuery) -> List[Goal]:
    """
    Sorts goals by the query's sort field and order.

    Goals with equal keys keep their input order in both directions, which
    keeps page boundaries stable between requests.
    """
    direction = 1 if query.order == "asc" else -1

    def compare(left: Goal, right: Goal) -> int:
        a = _sort_key(left, query.sort_by)
        b = _sort_key(right, query.sort_by)
        if a == b:
            return 0
        return direction if a > b else -direction

    return sorted(goals, key=cmp_to_key(compare))


def paginate_goals(goals: List[Goal], query: GoalQuery) -> GoalPage:
    total_items = len(goals)
    total_pages = max(1, math.ceil(total_items / query.page_size))
    page = min(max(query.page, 1), total_pages)
    start = (page - 1) * query.page_size

    return GoalPage(
        items=goals[start:start + query.page_size],
        meta=PageMeta(
            page=page,
            page_size=query.page_size,
            total_items=total_items,
            total_pages=total_pages,
        ),
    )


def run_query(goals: List[Goal], query: GoalQuery, today: date) -> GoalPage:
    """Filters, sorts and paginates a snapshot of the collection."""
    return paginate_goals(sort_goals(filter_goals(goals, query, today), query), query)
