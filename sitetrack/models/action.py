from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, CreatedAtMixin


class Action(Base, CreatedAtMixin):
    __tablename__ = "actions"

    description = Column(Text, nullable=False)
    discipline = Column(String(50), nullable=False)  # operations, commercial, design, she, qa, general
    phase = Column(String(50), nullable=False, default="construction")  # tender, precon, construction, aftercare, strategy
    status = Column(String(50), nullable=False, default="open")  # open, closed
    priority = Column(String(50), nullable=False, default="medium")  # low, medium, high, urgent
    assignee_id = Column(Integer, ForeignKey("users.id"), index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), index=True)
    due_date = Column(DateTime)
    updated_at = Column(DateTime, nullable=False)

    # Relationships
    assignee = relationship("User", back_populates="assigned_actions")
    project = relationship("Project", back_populates="actions")
