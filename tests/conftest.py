"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from workflow_engine.engine.models import Action, State, Workflow
from workflow_engine.engine.service import WorkflowService
from workflow_engine.engine.store import WorkflowStore


def _review_workflow(workflow_id: int = 1) -> Workflow:
    """Draft(1, initial) -> Review(2) -> Done(3, final)."""

    return Workflow(
        id=workflow_id,
        name="Review",
        states={
            1: State(id=1, name="Draft", is_initial=True),
            2: State(id=2, name="Review"),
            3: State(id=3, name="Done", is_final=True),
        },
        actions={
            10: Action(id=10, name="submit", from_state_ids={1}, to_state_id=2),
            11: Action(id=11, name="approve", from_state_ids={2}, to_state_id=3),
        },
        initial_state_id=1,
        final_state_id=3,
    )


@pytest.fixture
def workflows_file(tmp_path: Path) -> Path:
    """Provide a workflow data file inside a temporary directory."""
    return tmp_path / "data" / "workflows.json"


@pytest.fixture
def store(workflows_file: Path) -> WorkflowStore:
    return WorkflowStore(workflows_file)


@pytest.fixture
def service(store: WorkflowStore) -> WorkflowService:
    return WorkflowService(store)


@pytest.fixture
def review_workflow() -> Workflow:
    return _review_workflow()


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """The CLI reconfigures root logging; undo it after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
