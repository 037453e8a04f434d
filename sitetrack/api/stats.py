from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
import logging

from sitetrack.dependencies import get_storage
from sitetrack.schemas import StatsResponse
from sitetrack.storage import Storage


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=StatsResponse)
async def get_stats(storage: Storage = Depends(get_storage)):
    """Dashboard counters.

    ``open`` and ``closed`` count actions with exactly that status; ``total``
    counts every action, so actions in any other status only show up there.
    """
    try:
        action_stats = await storage.get_action_stats()
        projects = await storage.count_projects()
        team_members = await storage.count_users()
    except SQLAlchemyError:
        logger.exception("Failed to fetch stats")
        raise HTTPException(status_code=500, detail="Failed to fetch stats")

    return StatsResponse(
        open=action_stats.open,
        closed=action_stats.closed,
        total=action_stats.total,
        projects=projects,
        team_members=team_members
    )
