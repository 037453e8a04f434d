from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError
import logging

from sitetrack.dependencies import PathId, get_storage
from sitetrack.exceptions import DuplicateValueError
from sitetrack.schemas import UserCreate, UserUpdate, UserResponse
from sitetrack.security import get_password_hash
from sitetrack.storage import Storage


logger = logging.getLogger(__name__)

router = APIRouter()

DUPLICATE_MESSAGES = {
    "email": "Email address already exists",
    "username": "Username already exists",
}


def _duplicate_error(exc: DuplicateValueError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail=DUPLICATE_MESSAGES.get(exc.field, "Value already exists")
    )


@router.get("", response_model=List[UserResponse])
async def list_users(storage: Storage = Depends(get_storage)):
    """List all users"""
    try:
        return await storage.get_all_users()
    except SQLAlchemyError:
        logger.exception("Failed to fetch users")
        raise HTTPException(status_code=500, detail="Failed to fetch users")


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: PathId,
    storage: Storage = Depends(get_storage)
):
    """Get user details"""
    try:
        user = await storage.get_user(user_id)
    except SQLAlchemyError:
        logger.exception("Failed to fetch user id=%s", user_id)
        raise HTTPException(status_code=500, detail="Failed to fetch user")

    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return user


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    user_create: UserCreate,
    storage: Storage = Depends(get_storage)
):
    """Create a new user"""
    data = user_create.model_dump()
    data["password"] = get_password_hash(user_create.password)

    try:
        return await storage.create_user(data)
    except DuplicateValueError as exc:
        logger.info("Rejected user %r: duplicate %s", user_create.username, exc.field)
        raise _duplicate_error(exc)
    except SQLAlchemyError:
        logger.exception("Failed to create user")
        raise HTTPException(status_code=500, detail="Failed to create user")


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: PathId,
    user_update: UserUpdate,
    storage: Storage = Depends(get_storage)
):
    """Apply only the supplied fields to a user"""
    data = user_update.model_dump(exclude_unset=True)
    if "password" in data:
        data["password"] = get_password_hash(data["password"])

    try:
        user = await storage.update_user(user_id, data)
    except DuplicateValueError as exc:
        raise _duplicate_error(exc)
    except SQLAlchemyError:
        logger.exception("Failed to update user id=%s", user_id)
        raise HTTPException(status_code=500, detail="Failed to update user")

    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return user


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: PathId,
    storage: Storage = Depends(get_storage)
):
    """Delete a user; their actions are kept but unassigned"""
    try:
        deleted = await storage.delete_user(user_id)
    except SQLAlchemyError:
        logger.exception("Failed to delete user id=%s", user_id)
        raise HTTPException(status_code=500, detail="Failed to delete user")

    if not deleted:
        raise HTTPException(status_code=404, detail="User not found")

    return Response(status_code=204)
