# studysprint/core/dependency.py
from datetime import date
from typing import Optional

from fastapi import HTTPException, Query, Request

from studysprint.core.errors import GoalValidationError
from studysprint.goals.service import GoalStore
from studysprint.goals.validation import GoalQuery, parse_goal_query


def get_goal_store(request: Request) -> GoalStore:
    return request.app.state.goal_store


def get_today() -> date:
    return date.today()


def get_goal_query(
    status: Optional[str] = Query(None, description="active | completed | overdue | archived"),
    priority: Optional[str] = Query(None, description="low | medium | high | all"),
    q: Optional[str] = Query(None, description="Case-insensitive title search"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="createdAt | dueDate | priority"),
    order: Optional[str] = Query(None, description="asc | desc"),
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    page_size: Optional[str] = Query(None, alias="pageSize", description="Items per page, 1 to 50"),
    include_archived: Optional[str] = Query(None, alias="includeArchived", description="true | false"),
) -> GoalQuery:
    try:
        return parse_goal_query({
            "status": status,
            "priority": priority,
            "q": q,
            "sortBy": sort_by,
            "order": order,
            "page": page,
            "pageSize": page_size,
            "includeArchived": include_archived,
        })
    except GoalValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
