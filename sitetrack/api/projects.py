from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError
import logging

from sitetrack.dependencies import PathId, get_storage
from sitetrack.schemas import ProjectCreate, ProjectUpdate, ProjectResponse
from sitetrack.storage import Storage


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[ProjectResponse])
async def list_projects(storage: Storage = Depends(get_storage)):
    """List all projects"""
    try:
        return await storage.get_all_projects()
    except SQLAlchemyError:
        logger.exception("Failed to fetch projects")
        raise HTTPException(status_code=500, detail="Failed to fetch projects")


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: PathId,
    storage: Storage = Depends(get_storage)
):
    """Get project details"""
    try:
        project = await storage.get_project(project_id)
    except SQLAlchemyError:
        logger.exception("Failed to fetch project id=%s", project_id)
        raise HTTPException(status_code=500, detail="Failed to fetch project")

    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    return project


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    project: ProjectCreate,
    storage: Storage = Depends(get_storage)
):
    """Create a new project"""
    try:
        return await storage.create_project(project.model_dump())
    except SQLAlchemyError:
        logger.exception("Failed to create project")
        raise HTTPException(status_code=500, detail="Failed to create project")


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: PathId,
    project_update: ProjectUpdate,
    storage: Storage = Depends(get_storage)
):
    """Update project details"""
    try:
        project = await storage.update_project(project_id, project_update.model_dump(exclude_unset=True))
    except SQLAlchemyError:
        logger.exception("Failed to update project id=%s", project_id)
        raise HTTPException(status_code=500, detail="Failed to update project")

    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    return project


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: PathId,
    storage: Storage = Depends(get_storage)
):
    """Delete a project; its actions are kept but detached"""
    try:
        deleted = await storage.delete_project(project_id)
    except SQLAlchemyError:
        logger.exception("Failed to delete project id=%s", project_id)
        raise HTTPException(status_code=500, detail="Failed to delete project")

    if not deleted:
        raise HTTPException(status_code=404, detail="Project not found")

    return Response(status_code=204)
