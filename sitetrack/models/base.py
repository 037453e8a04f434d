from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how the timestamp columns are stored"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class IdMixin:
    id = Column(Integer, primary_key=True, index=True)


class CreatedAtMixin(IdMixin):
    """Mixin for adding a created_at timestamp"""
    created_at = Column(DateTime, default=utcnow, nullable=False)
