from .base import Base, utcnow
from .user import User
from .project import Project, ProjectStatus, WORK_PACKAGES
from .action import Action

__all__ = [
    "Base",
    "utcnow",
    "User",
    "Project",
    "ProjectStatus",
    "WORK_PACKAGES",
    "Action",
]
