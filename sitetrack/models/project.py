from enum import Enum
from sqlalchemy import Column, String, Text, DateTime, Enum as SAEnum
from sqlalchemy.orm import relationship
from .base import Base, CreatedAtMixin


class ProjectStatus(str, Enum):
    """Construction lifecycle stage of a project"""
    TENDER = "tender"
    PRECON = "precon"
    CONSTRUCTION = "construction"
    AFTERCARE = "aftercare"


WORK_PACKAGES = ("foundations", "frame", "envelope", "internals", "mep")


class Project(Base, CreatedAtMixin):
    __tablename__ = "projects"

    project_number = Column(String(50))
    name = Column(String(255), nullable=False)
    status = Column(
        SAEnum(
            ProjectStatus,
            name="project_status",
            values_callable=lambda enum: [member.value for member in enum],
            create_constraint=True,
            validate_strings=True,
        ),
        nullable=False,
        default=ProjectStatus.TENDER,
    )
    description = Column(Text)
    value = Column(String(100))  # e.g. "£12300000"
    retention = Column(String(100))

    # Location
    latitude = Column(String(50))
    longitude = Column(String(50))
    postcode = Column(String(20))

    # Programme
    start_on_site_date = Column(DateTime)
    contract_completion_date = Column(DateTime)
    construction_completion_date = Column(DateTime)

    # Work packages
    foundations_status = Column(String(50))
    foundations_start_date = Column(DateTime)
    foundations_finish_date = Column(DateTime)
    foundations_contractor = Column(String(255))

    frame_status = Column(String(50))
    frame_start_date = Column(DateTime)
    frame_finish_date = Column(DateTime)
    frame_contractor = Column(String(255))

    envelope_status = Column(String(50))
    envelope_start_date = Column(DateTime)
    envelope_finish_date = Column(DateTime)
    envelope_contractor = Column(String(255))

    internals_status = Column(String(50))
    internals_start_date = Column(DateTime)
    internals_finish_date = Column(DateTime)
    internals_contractor = Column(String(255))

    mep_status = Column(String(50))
    mep_start_date = Column(DateTime)
    mep_finish_date = Column(DateTime)
    mep_contractor = Column(String(255))

    # Relationships
    actions = relationship("Action", back_populates="project")
