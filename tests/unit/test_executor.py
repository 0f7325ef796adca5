"""Unit tests for guarded transition execution."""

from __future__ import annotations

import pytest

from workflow_engine.engine.errors import (
    ActionNotApplicable,
    ActionNotFound,
    TargetStateDisabled,
)
from workflow_engine.engine.executor import execute
from workflow_engine.engine.models import Workflow


def test_new_workflow_starts_at_initial_state(review_workflow: Workflow) -> None:
    assert review_workflow.current_state_id == 1
    assert review_workflow.history == []


def test_review_scenario(review_workflow: Workflow) -> None:
    execute(review_workflow, 10)
    assert review_workflow.current_state_id == 2
    assert review_workflow.history == [2]

    execute(review_workflow, 11)
    assert review_workflow.current_state_id == 3
    assert review_workflow.history == [2, 3]

    with pytest.raises(ActionNotApplicable) as excinfo:
        execute(review_workflow, 10)
    assert excinfo.value.current_state_id == 3
    assert review_workflow.current_state_id == 3
    assert review_workflow.history == [2, 3]


def test_unknown_action(review_workflow: Workflow) -> None:
    with pytest.raises(ActionNotFound):
        execute(review_workflow, 999)
    assert review_workflow.history == []


def test_not_applicable_leaves_state_unchanged(review_workflow: Workflow) -> None:
    with pytest.raises(ActionNotApplicable):
        execute(review_workflow, 11)
    assert review_workflow.current_state_id == 1
    assert review_workflow.history == []


def test_disabled_target_blocks_until_reenabled(review_workflow: Workflow) -> None:
    review_workflow.states[2].enabled = False
    with pytest.raises(TargetStateDisabled) as excinfo:
        execute(review_workflow, 10)
    assert excinfo.value.to_state_id == 2
    assert review_workflow.current_state_id == 1

    review_workflow.states[2].enabled = True
    execute(review_workflow, 10)
    assert review_workflow.current_state_id == 2
    assert review_workflow.history == [2]
