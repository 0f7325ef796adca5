"""Workflow service: the single owner of all workflow state.

The service keeps every workflow in memory, serializes all access behind one lock,
and flushes the whole mapping to its :class:`WorkflowStore` after each mutation.
Callers only ever receive deep copies.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import TypeVar

from workflow_engine.engine import compiler, executor, registry
from workflow_engine.engine.errors import (
    DuplicateWorkflowId,
    PersistenceError,
    WorkflowError,
    WorkflowNotFound,
)
from workflow_engine.engine.models import ActionRecord, State, Workflow
from workflow_engine.engine.store import WorkflowStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WorkflowService:
    """High-level, testable workflow operations."""

    def __init__(self, store: WorkflowStore) -> None:
        """Load existing workflows from ``store``.

        Raises:
            StoreLoadError: the stored data cannot be parsed.
        """

        self._store = store
        self._lock = threading.RLock()
        self._workflows: dict[int, Workflow] = store.load_all()

    # Reads

    def get_all(self) -> list[Workflow]:
        with self._lock:
            return [wf.model_copy(deep=True) for _, wf in sorted(self._workflows.items())]

    def get(self, workflow_id: int) -> Workflow:
        with self._lock:
            return self._require(workflow_id).model_copy(deep=True)

    # Definition

    def create(self, workflow: Workflow) -> Workflow:
        """Store a new workflow, compiling the actions embedded in it."""

        records = compiler.flatten_actions(workflow.actions.values())
        return self.create_from_records(workflow, records)

    def create_from_records(self, workflow: Workflow, records: Iterable[ActionRecord]) -> Workflow:
        """Store a new workflow whose actions arrive as flattened records.

        The submitted current state, history and embedded actions are ignored: a new
        workflow starts at its initial state with no history.
        """

        flattened = list(records)
        with self._lock:
            if workflow.id in self._workflows:
                raise DuplicateWorkflowId(workflow.id)

            draft = Workflow(
                id=workflow.id,
                name=workflow.name,
                initial_state_id=workflow.initial_state_id,
                final_state_id=workflow.final_state_id,
            )
            draft.states = registry.validate_states(draft, list(workflow.states.values()))
            compiler.install_actions(draft, compiler.compile_actions(draft, flattened))

            self._workflows[draft.id] = draft
            logger.info(
                "Workflow created",
                extra={
                    "workflow_id": draft.id,
                    "states": len(draft.states),
                    "actions": len(draft.actions),
                },
            )
            self._flush()
            return draft.model_copy(deep=True)

    def add_state(self, workflow_id: int, state: State) -> Workflow:
        return self._mutate(workflow_id, "add_state", lambda wf: registry.add_state(wf, state))

    def toggle_state(self, workflow_id: int, state_id: int, enabled: bool) -> Workflow:
        return self._mutate(
            workflow_id, "toggle_state", lambda wf: registry.toggle_state(wf, state_id, enabled)
        )

    def add_action(
        self,
        workflow_id: int,
        *,
        action_id: int,
        name: str | None,
        to_state_id: int,
        from_state_id: int,
    ) -> Workflow:
        """Add ``from_state_id`` as a source of an action, creating the action if needed."""

        return self._mutate(
            workflow_id,
            "add_action",
            lambda wf: compiler.add_action(
                wf,
                action_id=action_id,
                name=name,
                from_state_id=from_state_id,
                to_state_id=to_state_id,
            ),
        )

    # Execution

    def execute(self, workflow_id: int, action_id: int) -> Workflow:
        return self._mutate(workflow_id, "execute", lambda wf: executor.execute(wf, action_id))

    # Internals

    def _require(self, workflow_id: int) -> Workflow:
        wf = self._workflows.get(workflow_id)
        if wf is None:
            raise WorkflowNotFound(workflow_id)
        return wf

    def _mutate(
        self, workflow_id: int, operation: str, change: Callable[[Workflow], T]
    ) -> Workflow:
        with self._lock:
            wf = self._require(workflow_id)
            try:
                change(wf)
            except WorkflowError as e:
                logger.info(
                    "Request rejected",
                    extra={
                        "workflow_id": workflow_id,
                        "operation": operation,
                        "code": e.code,
                        "reason": str(e),
                    },
                )
                raise
            self._flush()
            logger.info(
                "Workflow updated", extra={"workflow_id": workflow_id, "operation": operation}
            )
            return wf.model_copy(deep=True)

    def _flush(self) -> None:
        try:
            self._store.save_all(self._workflows)
        except OSError as e:
            logger.exception("Failed to save workflows", extra={"path": str(self._store.path)})
            raise PersistenceError(str(self._store.path)) from e
