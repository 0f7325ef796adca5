"""Workflow aggregate types.

States and actions live in per-workflow tables keyed by id. Actions refer to
states by id only; nothing is embedded or shared between tables.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field, field_serializer, model_validator


class State(BaseModel):
    id: int
    name: str | None = None
    is_initial: bool = False
    is_final: bool = False
    enabled: bool = True


class Action(BaseModel):
    """A transition from any of ``from_state_ids`` to ``to_state_id``."""

    id: int
    name: str | None = None
    from_state_ids: set[int] = Field(min_length=1)
    to_state_id: int

    @field_serializer("from_state_ids")
    def _sorted_sources(self, value: set[int]) -> list[int]:
        return sorted(value)


class Workflow(BaseModel):
    id: int
    name: str | None = None
    states: dict[int, State] = Field(default_factory=dict)
    actions: dict[int, Action] = Field(default_factory=dict)
    initial_state_id: int
    final_state_id: int
    current_state_id: int | None = None
    history: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def _start_at_initial_state(self) -> Workflow:
        if self.current_state_id is None:
            self.current_state_id = self.initial_state_id
        return self


@dataclass(frozen=True, slots=True)
class ActionRecord:
    """One (action, source state) pair of an action definition.

    A multi-source action may be submitted as several records sharing an id;
    :func:`workflow_engine.engine.compiler.compile_actions` regroups them.
    """

    action_id: int
    name: str | None
    from_state_id: int
    to_state_id: int
