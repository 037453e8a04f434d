from sqlalchemy import Column, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base, IdMixin


class User(Base, IdMixin):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", name="users_username_unique"),
        UniqueConstraint("email", name="users_email_unique"),
    )

    username = Column(String(255), nullable=False)
    password = Column(Text, nullable=False)  # passlib hash
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    discipline = Column(String(50))  # operations, commercial, design, she, qa

    # Relationships
    assigned_actions = relationship("Action", back_populates="assignee")
