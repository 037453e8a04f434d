"""Request schema behaviour that the routes rely on."""
from datetime import datetime

import pytest
from pydantic import ValidationError

from sitetrack.models import ProjectStatus
from sitetrack.schemas import ActionCreate, ActionUpdate, ProjectCreate, ProjectUpdate, UserUpdate


class TestActionSchemas:

    def test_defaults(self) -> None:
        action = ActionCreate(description="Inspect site", discipline="operations")
        assert (action.phase, action.status, action.priority) == ("construction", "open", "medium")
        assert action.due_date is None

    def test_accepts_camel_and_snake_case(self) -> None:
        camel = ActionCreate.model_validate({"description": "d", "discipline": "qa", "assigneeId": 3})
        snake = ActionCreate.model_validate({"description": "d", "discipline": "qa", "assignee_id": 3})
        assert camel.assignee_id == snake.assignee_id == 3

    def test_offset_dates_become_naive_utc(self) -> None:
        action = ActionCreate(description="d", discipline="qa", due_date="2025-03-01T10:00:00+01:00")
        assert action.due_date == datetime(2025, 3, 1, 9, 0)
        assert action.due_date.tzinfo is None

    def test_free_text_status_and_phase(self) -> None:
        action = ActionCreate(description="d", discipline="anything", status="blocked", phase="strategy")
        assert action.status == "blocked"
        assert action.phase == "strategy"

    def test_update_tracks_only_supplied_fields(self) -> None:
        update = ActionUpdate.model_validate({"status": "closed"})
        assert update.model_dump(exclude_unset=True) == {"status": "closed"}

    def test_update_rejects_null_for_required_columns(self) -> None:
        with pytest.raises(ValidationError):
            ActionUpdate.model_validate({"discipline": None})


class TestProjectSchemas:

    def test_status_enum(self) -> None:
        assert ProjectCreate(name="Site").status is ProjectStatus.TENDER
        with pytest.raises(ValidationError):
            ProjectCreate(name="Site", status="demolition")

    def test_blank_dates_are_null(self) -> None:
        project = ProjectCreate(name="Site", start_on_site_date="", mep_finish_date="  ")
        assert project.start_on_site_date is None
        assert project.mep_finish_date is None

    def test_update_null_status_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ProjectUpdate.model_validate({"status": None})


def test_user_update_allows_clearing_discipline() -> None:
    update = UserUpdate.model_validate({"discipline": None})
    assert update.model_dump(exclude_unset=True) == {"discipline": None}
