"""Persistence layer for users, projects and actions.

:class:`Storage` is the interface the HTTP routes depend on;
:class:`DatabaseStorage` implements it on top of an injected
:class:`~sqlalchemy.ext.asyncio.AsyncSession`.

Lookups signal absence with ``None`` (or ``False`` for deletes) rather than
raising. Unique-column collisions on users surface as
:class:`~sitetrack.exceptions.DuplicateValueError`; every other database
failure propagates after the session has been rolled back.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select, update, delete, func, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from sitetrack.exceptions import DuplicateValueError
from sitetrack.models import Action, Project, User, utcnow


logger = logging.getLogger(__name__)

# An Action whose ``assignee`` and ``project`` relationships are already loaded
ActionWithRelations = Action


@dataclass
class ActionFilters:
    """Filters for :meth:`Storage.get_all_actions`; unset fields are ignored."""
    discipline: Optional[str] = None
    phase: Optional[str] = None
    status: Optional[str] = None
    assignee_id: Optional[int] = None
    assignee: Optional[str] = None
    project_id: Optional[int] = None
    search: Optional[str] = None


@dataclass
class ActionStats:
    open: int
    closed: int
    total: int


class Storage(ABC):
    """Typed CRUD and filtered listing for every entity."""

    # Users
    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    async def get_all_users(self) -> List[User]: ...

    @abstractmethod
    async def count_users(self) -> int: ...

    @abstractmethod
    async def create_user(self, data: Dict[str, Any]) -> User: ...

    @abstractmethod
    async def update_user(self, user_id: int, data: Dict[str, Any]) -> Optional[User]: ...

    @abstractmethod
    async def delete_user(self, user_id: int) -> bool: ...

    # Projects
    @abstractmethod
    async def get_project(self, project_id: int) -> Optional[Project]: ...

    @abstractmethod
    async def get_all_projects(self) -> List[Project]: ...

    @abstractmethod
    async def count_projects(self) -> int: ...

    @abstractmethod
    async def create_project(self, data: Dict[str, Any]) -> Project: ...

    @abstractmethod
    async def update_project(self, project_id: int, data: Dict[str, Any]) -> Optional[Project]: ...

    @abstractmethod
    async def delete_project(self, project_id: int) -> bool: ...

    # Actions
    @abstractmethod
    async def get_action(self, action_id: int) -> Optional[ActionWithRelations]: ...

    @abstractmethod
    async def get_all_actions(self, filters: Optional[ActionFilters] = None) -> List[ActionWithRelations]: ...

    @abstractmethod
    async def create_action(self, data: Dict[str, Any]) -> Action: ...

    @abstractmethod
    async def update_action(self, action_id: int, data: Dict[str, Any]) -> Optional[Action]: ...

    @abstractmethod
    async def delete_action(self, action_id: int) -> bool: ...

    @abstractmethod
    async def get_action_stats(self) -> ActionStats: ...


def _duplicate_field(exc: IntegrityError) -> Optional[str]:
    """Name the user column a unique violation collided on, if any.

    PostgreSQL reports the constraint name (``users_email_unique``), SQLite
    the column (``UNIQUE constraint failed: users.email``).
    """
    message = str(exc.orig).lower()
    if "unique" not in message and "duplicate" not in message:
        return None
    for field in ("email", "username"):
        if f"users_{field}_unique" in message or f"users.{field}" in message:
            return field
    return None


class DatabaseStorage(Storage):
    """:class:`Storage` backed by a SQLAlchemy async session.

    The session is owned by the caller; this class only commits or rolls
    back the work it starts.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def _commit_user(self) -> None:
        try:
            await self._commit()
        except IntegrityError as exc:
            field = _duplicate_field(exc)
            if field is None:
                raise
            raise DuplicateValueError(field, {"database_error": str(exc.orig)}) from exc

    # Users

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def get_all_users(self) -> List[User]:
        result = await self.session.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def count_users(self) -> int:
        return await self.session.scalar(select(func.count(User.id))) or 0

    async def create_user(self, data: Dict[str, Any]) -> User:
        user = User(**data)
        self.session.add(user)
        await self._commit_user()
        await self.session.refresh(user)
        logger.info("Created user id=%s username=%s", user.id, user.username)
        return user

    async def update_user(self, user_id: int, data: Dict[str, Any]) -> Optional[User]:
        user = await self.session.get(User, user_id)
        if user is None:
            return None
        for field, value in data.items():
            setattr(user, field, value)
        await self._commit_user()
        await self.session.refresh(user)
        logger.info("Updated user id=%s fields=%s", user_id, sorted(data))
        return user

    async def delete_user(self, user_id: int) -> bool:
        """Unassign the user's actions, then delete the user, in one transaction."""
        return await self._delete_parent(User, Action.assignee_id, user_id)

    # Projects

    async def get_project(self, project_id: int) -> Optional[Project]:
        return await self.session.get(Project, project_id)

    async def get_all_projects(self) -> List[Project]:
        result = await self.session.execute(select(Project).order_by(Project.id))
        return list(result.scalars().all())

    async def count_projects(self) -> int:
        return await self.session.scalar(select(func.count(Project.id))) or 0

    async def create_project(self, data: Dict[str, Any]) -> Project:
        project = Project(**data)
        self.session.add(project)
        await self._commit()
        await self.session.refresh(project)
        logger.info("Created project id=%s name=%s", project.id, project.name)
        return project

    async def update_project(self, project_id: int, data: Dict[str, Any]) -> Optional[Project]:
        project = await self.session.get(Project, project_id)
        if project is None:
            return None
        for field, value in data.items():
            setattr(project, field, value)
        await self._commit()
        await self.session.refresh(project)
        logger.info("Updated project id=%s fields=%s", project_id, sorted(data))
        return project

    async def delete_project(self, project_id: int) -> bool:
        """Detach the project's actions, then delete the project, in one transaction."""
        return await self._delete_parent(Project, Action.project_id, project_id)

    async def _delete_parent(self, model, foreign_key, row_id: int) -> bool:
        try:
            await self.session.execute(
                update(Action)
                .where(foreign_key == row_id)
                .values({foreign_key.key: None})
            )
            result = await self.session.execute(
                delete(model)
                .where(model.id == row_id)
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted %s id=%s", model.__tablename__, row_id)
        return deleted

    # Actions

    def _actions_query(self):
        return (
            select(Action)
            .outerjoin(Action.assignee)
            .outerjoin(Action.project)
            .options(contains_eager(Action.assignee), contains_eager(Action.project))
            # Objects already in the session may predate a bulk unassign/detach
            .execution_options(populate_existing=True)
        )

    async def get_action(self, action_id: int) -> Optional[ActionWithRelations]:
        result = await self.session.execute(
            self._actions_query().where(Action.id == action_id)
        )
        return result.unique().scalar_one_or_none()

    async def get_all_actions(self, filters: Optional[ActionFilters] = None) -> List[ActionWithRelations]:
        conditions = []

        if filters is not None:
            if filters.discipline:
                conditions.append(Action.discipline == filters.discipline)

            if filters.phase:
                conditions.append(Action.phase == filters.phase)

            if filters.status:
                conditions.append(Action.status == filters.status)

            if filters.assignee_id:
                conditions.append(Action.assignee_id == filters.assignee_id)

            if filters.assignee:
                conditions.append(User.name.icontains(filters.assignee, autoescape=True))

            if filters.project_id:
                conditions.append(Action.project_id == filters.project_id)

            if filters.search:
                conditions.append(Action.description.icontains(filters.search, autoescape=True))

        query = self._actions_query().order_by(Action.created_at.desc(), Action.id.desc())
        if conditions:
            query = query.where(and_(*conditions))

        result = await self.session.execute(query)
        return list(result.unique().scalars().all())

    async def create_action(self, data: Dict[str, Any]) -> Action:
        now = utcnow()
        action = Action(**data, created_at=now, updated_at=now)
        self.session.add(action)
        await self._commit()
        await self.session.refresh(action)
        logger.info("Created action id=%s project_id=%s", action.id, action.project_id)
        return action

    async def update_action(self, action_id: int, data: Dict[str, Any]) -> Optional[Action]:
        action = await self.session.get(Action, action_id)
        if action is None:
            return None
        for field, value in data.items():
            setattr(action, field, value)
        action.updated_at = utcnow()
        await self._commit()
        await self.session.refresh(action)
        logger.info("Updated action id=%s fields=%s", action_id, sorted(data))
        return action

    async def delete_action(self, action_id: int) -> bool:
        try:
            result = await self.session.execute(
                delete(Action)
                .where(Action.id == action_id)
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted action id=%s", action_id)
        return deleted

    async def get_action_stats(self) -> ActionStats:
        result = await self.session.execute(
            select(
                func.count(Action.id).filter(Action.status == "open"),
                func.count(Action.id).filter(Action.status == "closed"),
                func.count(Action.id),
            )
        )
        open_count, closed_count, total = result.one()
        return ActionStats(open=open_count or 0, closed=closed_count or 0, total=total or 0)
