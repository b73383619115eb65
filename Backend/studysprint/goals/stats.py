from datetime import date
from typing import List

from studysprint.goals.models import PRIORITIES, Goal
from studysprint.goals.schemas import GoalStats, PriorityCounts


def compute_stats(goals: List[Goal], today: date) -> GoalStats:
    """
    Aggregates counts over an already filtered snapshot.

    Args:
        goals (List[Goal]): Filtered goals; order does not matter.
        today (date): Reference date for the overdue count.

    Returns:
        GoalStats: Totals plus a per-priority breakdown. Goals with an
        unrecognized priority are left out of the breakdown.
    """
    completed = sum(1 for goal in goals if goal.completed)
    by_priority = {priority: 0 for priority in PRIORITIES}
    for goal in goals:
        if goal.priority in by_priority:
            by_priority[goal.priority] += 1

    return GoalStats(
        total=len(goals),
        active=len(goals) - completed,
        completed=completed,
        overdue=sum(1 for goal in goals if goal.is_overdue(today)),
        by_priority=PriorityCounts(**by_priority),
    )
