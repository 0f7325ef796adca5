"""Pydantic request models for the REST server.

Responses reuse :class:`workflow_engine.engine.models.Workflow` directly.
"""

from __future__ import annotations

from typing import cast

from pydantic import BaseModel, Field, model_validator

from workflow_engine.engine.errors import DuplicateStateId
from workflow_engine.engine.models import ActionRecord, State, Workflow


class ActionDefinition(BaseModel):
    """An action as submitted by clients.

    Either grouped (``from_state_ids``) or flat (``from_state_id``, one entry per
    source state sharing the same ``id``). Both are translated into
    :class:`ActionRecord` values before reaching the engine.
    """

    id: int
    name: str | None = None
    to_state_id: int
    from_state_ids: list[int] | None = None
    from_state_id: int | None = None

    @model_validator(mode="after")
    def _exactly_one_source_form(self) -> ActionDefinition:
        if (self.from_state_ids is None) == (self.from_state_id is None):
            raise ValueError("Provide exactly one of from_state_ids or from_state_id")
        if self.from_state_ids is not None and not self.from_state_ids:
            raise ValueError("from_state_ids must not be empty")
        return self

    def to_records(self) -> list[ActionRecord]:
        sources = self.from_state_ids or [cast(int, self.from_state_id)]
        return [
            ActionRecord(
                action_id=self.id,
                name=self.name,
                from_state_id=source,
                to_state_id=self.to_state_id,
            )
            for source in sources
        ]


class WorkflowDefinition(BaseModel):
    id: int
    name: str | None = None
    states: list[State]
    actions: list[ActionDefinition] = Field(default_factory=list)
    initial_state_id: int
    final_state_id: int

    def to_workflow(self) -> Workflow:
        """The workflow shell (states, no actions); actions go through :meth:`to_records`."""

        states: dict[int, State] = {}
        for state in self.states:
            if state.id in states:
                raise DuplicateStateId(state.id)
            states[state.id] = state.model_copy()
        return Workflow(
            id=self.id,
            name=self.name,
            states=states,
            initial_state_id=self.initial_state_id,
            final_state_id=self.final_state_id,
        )

    def to_records(self) -> list[ActionRecord]:
        return [record for action in self.actions for record in action.to_records()]


class ActionIn(BaseModel):
    id: int
    name: str | None = None
    to_state_id: int


class AddActionRequest(BaseModel):
    action: ActionIn
    from_state_id: int
