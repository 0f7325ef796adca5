"""State registry operations for a single workflow."""

from __future__ import annotations

from workflow_engine.engine.errors import (
    DuplicateStateId,
    InvalidWorkflowDefinition,
    StateNotFound,
)
from workflow_engine.engine.models import State, Workflow


def add_state(workflow: Workflow, state: State) -> State:
    if state.id in workflow.states:
        raise DuplicateStateId(state.id)
    # initial_state_id / final_state_id are fixed at creation; later states are ordinary.
    state = state.model_copy(update={"is_initial": False, "is_final": False})
    workflow.states[state.id] = state
    return state


def toggle_state(workflow: Workflow, state_id: int, enabled: bool) -> State:
    state = workflow.states.get(state_id)
    if state is None:
        raise StateNotFound(state_id)
    state.enabled = enabled
    return state


def validate_states(workflow: Workflow, states: list[State]) -> dict[int, State]:
    """Build the state table for a new workflow.

    Enforces unique ids, that the initial and final ids name distinct existing
    states, and that the ``is_initial`` / ``is_final`` flags agree with them. The
    returned table has the flags normalized so exactly those two states carry them.
    """

    table: dict[int, State] = {}
    for state in states:
        if state.id in table:
            raise DuplicateStateId(state.id)
        table[state.id] = state.model_copy()

    initial_id = workflow.initial_state_id
    final_id = workflow.final_state_id
    if initial_id not in table:
        raise InvalidWorkflowDefinition(f"Initial state {initial_id} is not one of the states")
    if final_id not in table:
        raise InvalidWorkflowDefinition(f"Final state {final_id} is not one of the states")
    if initial_id == final_id:
        raise InvalidWorkflowDefinition("Initial and final state must differ")

    flagged_initial = [s.id for s in table.values() if s.is_initial]
    if any(sid != initial_id for sid in flagged_initial):
        raise InvalidWorkflowDefinition(
            f"States {sorted(flagged_initial)} are flagged initial, "
            f"but initial_state_id is {initial_id}"
        )
    flagged_final = [s.id for s in table.values() if s.is_final]
    if any(sid != final_id for sid in flagged_final):
        raise InvalidWorkflowDefinition(
            f"States {sorted(flagged_final)} are flagged final, but final_state_id is {final_id}"
        )

    table[initial_id].is_initial = True
    table[final_id].is_final = True
    return table
