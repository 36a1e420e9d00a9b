import pytest
from pydantic import ValidationError

from sig_change.github.models import (
    ActionIdentifier,
    App,
    CheckRun,
    CheckRunAction,
    CheckRunConclusion,
    CheckRunEvent,
    CheckRunOutput,
    CheckRunStatus,
    CheckRunUpdate,
    CheckSuite,
    CheckSuiteEvent,
    Installation,
    Repository,
)


def test_check_suite_requested_model(check_suite_requested):
    event = CheckSuiteEvent.model_validate(check_suite_requested)

    assert event.action == "requested"
    assert isinstance(event.check_suite, CheckSuite)
    assert event.check_suite.id == 118578147
    assert event.check_suite.head_sha == "abc123"
    assert isinstance(event.check_suite.app, App)
    assert event.check_suite.app.id == 12345
    assert isinstance(event.repository, Repository)
    assert event.repository.full_name == "org/repo"
    assert isinstance(event.installation, Installation)
    assert event.installation.id == 2311213


def test_check_run_created_model(check_run_created):
    event = CheckRunEvent.model_validate(check_run_created)

    assert event.action == "created"
    assert isinstance(event.check_run, CheckRun)
    assert event.check_run.id == 128620228
    assert event.check_run.head_sha == "def456"
    assert event.check_run.app.id == 12345
    assert event.requested_action is None


def test_check_run_requested_action_model(check_run_requested_action):
    event = CheckRunEvent.model_validate(check_run_requested_action)

    assert event.action == "requested_action"
    assert event.requested_action is not None
    assert event.requested_action.identifier == ActionIdentifier.is_sig_change


def test_check_run_event_requires_check_run(check_run_created):
    del check_run_created["check_run"]
    with pytest.raises(ValidationError):
        CheckRunEvent.model_validate(check_run_created)


def test_check_run_update_dump():
    update = CheckRunUpdate(
        status=CheckRunStatus.completed,
        conclusion=CheckRunConclusion.failure,
        output=CheckRunOutput(title="Title", summary="Summary"),
        actions=[
            CheckRunAction(
                label="Yes",
                description="This is a significant change.",
                identifier=ActionIdentifier.is_sig_change,
            )
        ],
    )

    assert update.model_dump(mode="json", exclude_none=True) == {
        "status": "completed",
        "conclusion": "failure",
        "output": {"title": "Title", "summary": "Summary"},
        "actions": [
            {
                "label": "Yes",
                "description": "This is a significant change.",
                "identifier": "is_sig_change",
            }
        ],
    }


def test_check_run_action_rejects_unknown_identifier():
    with pytest.raises(ValidationError):
        CheckRunAction(label="Maybe", description="", identifier="maybe_sig_change")
