from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.exc import SQLAlchemyError
import logging

from sitetrack.dependencies import PathId, get_storage
from sitetrack.schemas import ActionCreate, ActionUpdate, ActionResponse, ActionWithRelationsResponse, FilterId
from sitetrack.storage import ActionFilters, Storage


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[ActionWithRelationsResponse])
async def list_actions(
    discipline: Optional[str] = Query(None, description="Exact discipline"),
    phase: Optional[str] = Query(None, description="Exact phase"),
    status: Optional[str] = Query(None, description="Exact status"),
    assignee_id: Annotated[FilterId, Query(alias="assigneeId", description="Assigned user id")] = None,
    assignee: Optional[str] = Query(None, description="Part of the assignee's name"),
    project_id: Annotated[FilterId, Query(alias="projectId", description="Project id")] = None,
    search: Optional[str] = Query(None, description="Part of the description"),
    storage: Storage = Depends(get_storage)
):
    """List actions, newest first, narrowed by any supplied filters"""
    filters = ActionFilters(
        discipline=discipline,
        phase=phase,
        status=status,
        assignee_id=assignee_id,
        assignee=assignee,
        project_id=project_id,
        search=search
    )
    try:
        return await storage.get_all_actions(filters)
    except SQLAlchemyError:
        logger.exception("Failed to fetch actions")
        raise HTTPException(status_code=500, detail="Failed to fetch actions")


@router.get("/{action_id}", response_model=ActionWithRelationsResponse)
async def get_action(
    action_id: PathId,
    storage: Storage = Depends(get_storage)
):
    """Get one action with its assignee and project"""
    try:
        action = await storage.get_action(action_id)
    except SQLAlchemyError:
        logger.exception("Failed to fetch action id=%s", action_id)
        raise HTTPException(status_code=500, detail="Failed to fetch action")

    if not action:
        raise HTTPException(status_code=404, detail="Action not found")

    return action


@router.post("", response_model=ActionResponse, status_code=201)
async def create_action(
    action: ActionCreate,
    storage: Storage = Depends(get_storage)
):
    """Create a new action"""
    try:
        return await storage.create_action(action.model_dump())
    except SQLAlchemyError:
        logger.exception("Failed to create action")
        raise HTTPException(status_code=500, detail="Failed to create action")


@router.patch("/{action_id}", response_model=ActionResponse)
async def update_action(
    action_id: PathId,
    action_update: ActionUpdate,
    storage: Storage = Depends(get_storage)
):
    """Apply only the supplied fields to an action"""
    try:
        action = await storage.update_action(action_id, action_update.model_dump(exclude_unset=True))
    except SQLAlchemyError:
        logger.exception("Failed to update action id=%s", action_id)
        raise HTTPException(status_code=500, detail="Failed to update action")

    if not action:
        raise HTTPException(status_code=404, detail="Action not found")

    return action


@router.delete("/{action_id}", status_code=204)
async def delete_action(
    action_id: PathId,
    storage: Storage = Depends(get_storage)
):
    """Delete an action"""
    try:
        deleted = await storage.delete_action(action_id)
    except SQLAlchemyError:
        logger.exception("Failed to delete action id=%s", action_id)
        raise HTTPException(status_code=500, detail="Failed to delete action")

    if not deleted:
        raise HTTPException(status_code=404, detail="Action not found")

    return Response(status_code=204)
