from datetime import date
from typing import Optional
import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from studysprint.core.dependency import get_goal_query, get_goal_store, get_today
from studysprint.core.errors import GoalImportError, GoalNotFoundError, PersistenceError
from studysprint.goals.query import filter_goals, run_query
from studysprint.goals.schemas import (
    DeletedCount,
    GoalArchiveUpdate,
    GoalCreate,
    GoalExport,
    GoalImportRequest,
    GoalItemResponse,
    GoalPage,
    GoalStats,
    GoalUpdate,
    ImportResult,
    UpdatedCount,
)
from studysprint.goals.service import GoalStore
from studysprint.goals.stats import compute_stats
from studysprint.goals.transfer import export_filename, export_goals, import_goals
from studysprint.goals.validation import GoalQuery

router = APIRouter(prefix="/api/goals", tags=["Goals"])
logger = logging.getLogger(__name__)

SAVE_FAILED = "Failed to save goals."


@router.get(
    "",
    response_model=GoalPage,
    summary="List goals",
    description="Filter, sort and paginate the goal collection.",
    responses={
        200: {"description": "Goals retrieved successfully."},
        400: {"description": "Invalid query parameter."},
    },
)
def list_goals_route(
    query: GoalQuery = Depends(get_goal_query),
    store: GoalStore = Depends(get_goal_store),
    today: date = Depends(get_today),
) -> GoalPage:
    return run_query(store.list_goals(), query, today)


@router.get(
    "/stats",
    response_model=GoalStats,
    summary="Goal statistics",
    description="Counts over the goals matched by the same filters a list request would apply.",
    responses={
        200: {"description": "Statistics computed successfully."},
        400: {"description": "Invalid query parameter."},
    },
)
def goal_stats_route(
    query: GoalQuery = Depends(get_goal_query),
    store: GoalStore = Depends(get_goal_store),
    today: date = Depends(get_today),
) -> GoalStats:
    return compute_stats(filter_goals(store.list_goals(), query, today), today)


@router.get(
    "/export",
    response_model=GoalExport,
    summary="Export all goals",
    description="Download the whole collection, including archived and completed goals.",
    responses={200: {"description": "Export file."}},
)
def export_goals_route(
    response: Response,
    store: GoalStore = Depends(get_goal_store),
) -> GoalExport:
    export = export_goals(store)
    response.headers["Content-Disposition"] = f'attachment; filename="{export_filename(export.exported_at)}"'
    return export


@router.post(
    "/import",
    response_model=ImportResult,
    summary="Import goals",
    description="Replace the collection with, or merge into it, a batch of goals. The batch is all or nothing.",
    responses={
        200: {"description": "Goals imported successfully."},
        400: {"description": "Invalid mode or an invalid item in the batch."},
        500: {"description": "Failed to save goals."},
    },
)
def import_goals_route(
    payload: GoalImportRequest,
    store: GoalStore = Depends(get_goal_store),
) -> ImportResult:
    try:
        return import_goals(store, payload.mode, payload.items)
    except GoalImportError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except PersistenceError as e:
        logger.error(f"Failed to import goals: {e}")
        raise HTTPException(status_code=500, detail=SAVE_FAILED)


@router.post(
    "",
    response_model=GoalItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a goal",
    responses={
        201: {"description": "Goal created successfully."},
        400: {"description": "Invalid title, priority or dueDate."},
        500: {"description": "Failed to save goals."},
    },
)
def create_goal_route(
    goal: GoalCreate,
    store: GoalStore = Depends(get_goal_store),
) -> GoalItemResponse:
    try:
        return GoalItemResponse(item=store.create(goal.title, goal.priority, goal.due_date))
    except PersistenceError as e:
        logger.error(f"Failed to create goal: {e}")
        raise HTTPException(status_code=500, detail=SAVE_FAILED)


@router.patch(
    "/actions/complete-all",
    response_model=UpdatedCount,
    summary="Complete every goal",
    responses={
        200: {"description": "Number of goals marked completed."},
        500: {"description": "Failed to save goals."},
    },
)
def complete_all_route(store: GoalStore = Depends(get_goal_store)) -> UpdatedCount:
    try:
        return UpdatedCount(updated=store.complete_all())
    except PersistenceError as e:
        logger.error(f"Failed to complete all goals: {e}")
        raise HTTPException(status_code=500, detail=SAVE_FAILED)


@router.delete(
    "/actions/clear-completed",
    response_model=DeletedCount,
    summary="Delete completed goals",
    responses={
        200: {"description": "Number of goals deleted."},
        500: {"description": "Failed to save goals."},
    },
)
def clear_completed_route(store: GoalStore = Depends(get_goal_store)) -> DeletedCount:
    try:
        return DeletedCount(deleted=store.clear_completed())
    except PersistenceError as e:
        logger.error(f"Failed to clear completed goals: {e}")
        raise HTTPException(status_code=500, detail=SAVE_FAILED)


@router.get(
    "/{goal_id}",
    response_model=GoalItemResponse,
    summary="Get a goal",
    responses={
        200: {"description": "Goal retrieved successfully."},
        404: {"description": "Goal not found."},
    },
)
def read_goal_route(
    goal_id: int,
    store: GoalStore = Depends(get_goal_store),
) -> GoalItemResponse:
    try:
        return GoalItemResponse(item=store.get(goal_id))
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.patch(
    "/{goal_id}",
    response_model=GoalItemResponse,
    summary="Update a goal",
    description="Partial update. Fields left out of the body are unchanged; a null dueDate clears it.",
    responses={
        200: {"description": "Goal updated successfully."},
        400: {"description": "Invalid field value."},
        404: {"description": "Goal not found."},
        500: {"description": "Failed to save goals."},
    },
)
def update_goal_route(
    goal_id: int,
    goal: GoalUpdate,
    store: GoalStore = Depends(get_goal_store),
) -> GoalItemResponse:
    try:
        return GoalItemResponse(item=store.update(goal_id, goal.model_dump(exclude_unset=True)))
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PersistenceError as e:
        logger.error(f"Failed to update goal {goal_id}: {e}")
        raise HTTPException(status_code=500, detail=SAVE_FAILED)


@router.patch(
    "/{goal_id}/toggle",
    response_model=GoalItemResponse,
    summary="Toggle completion",
    responses={
        200: {"description": "Goal toggled successfully."},
        404: {"description": "Goal not found."},
        500: {"description": "Failed to save goals."},
    },
)
def toggle_goal_route(
    goal_id: int,
    store: GoalStore = Depends(get_goal_store),
) -> GoalItemResponse:
    try:
        return GoalItemResponse(item=store.toggle_completed(goal_id))
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PersistenceError as e:
        logger.error(f"Failed to toggle goal {goal_id}: {e}")
        raise HTTPException(status_code=500, detail=SAVE_FAILED)


@router.patch(
    "/{goal_id}/archive",
    response_model=GoalItemResponse,
    summary="Archive or unarchive a goal",
    description="Sets archived to the given value, or flips it when the body has no archived value.",
    responses={
        200: {"description": "Goal archive flag updated."},
        400: {"description": "archived is not a boolean."},
        404: {"description": "Goal not found."},
        500: {"description": "Failed to save goals."},
    },
)
def archive_goal_route(
    goal_id: int,
    payload: Optional[GoalArchiveUpdate] = Body(default=None),
    store: GoalStore = Depends(get_goal_store),
) -> GoalItemResponse:
    archived = payload.archived if payload is not None else None
    try:
        return GoalItemResponse(item=store.set_archived(goal_id, archived))
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PersistenceError as e:
        logger.error(f"Failed to archive goal {goal_id}: {e}")
        raise HTTPException(status_code=500, detail=SAVE_FAILED)


@router.post(
    "/{goal_id}/duplicate-tomorrow",
    response_model=GoalItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Duplicate a goal for tomorrow",
    description="Creates a fresh copy of the goal's title and priority, due tomorrow.",
    responses={
        201: {"description": "Copy created successfully."},
        404: {"description": "Goal not found."},
        500: {"description": "Failed to save goals."},
    },
)
def duplicate_goal_route(
    goal_id: int,
    store: GoalStore = Depends(get_goal_store),
    today: date = Depends(get_today),
) -> GoalItemResponse:
    try:
        return GoalItemResponse(item=store.duplicate_for_tomorrow(goal_id, today))
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PersistenceError as e:
        logger.error(f"Failed to duplicate goal {goal_id}: {e}")
        raise HTTPException(status_code=500, detail=SAVE_FAILED)


@router.delete(
    "/{goal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a goal",
    responses={
        204: {"description": "Goal deleted successfully."},
        404: {"description": "Goal not found."},
        500: {"description": "Failed to save goals."},
    },
)
def delete_goal_route(
    goal_id: int,
    store: GoalStore = Depends(get_goal_store),
) -> Response:
    try:
        store.delete(goal_id)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PersistenceError as e:
        logger.error(f"Failed to delete goal {goal_id}: {e}")
        raise HTTPException(status_code=500, detail=SAVE_FAILED)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
