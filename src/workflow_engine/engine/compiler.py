"""Action compilation.

An action reachable from several states may arrive as one record per source
state. Compilation regroups the records by action id, checks that they agree,
and validates the resulting multi-source action against the workflow's states.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from workflow_engine.engine.errors import (
    ActionFromFinalState,
    ConflictingActionDefinition,
    SelfLoop,
    UnknownSourceState,
    UnknownTargetState,
)
from workflow_engine.engine.models import Action, ActionRecord, Workflow


def flatten_actions(actions: Iterable[Action]) -> list[ActionRecord]:
    records: list[ActionRecord] = []
    for action in actions:
        for from_state_id in sorted(action.from_state_ids):
            records.append(
                ActionRecord(
                    action_id=action.id,
                    name=action.name,
                    from_state_id=from_state_id,
                    to_state_id=action.to_state_id,
                )
            )
    return records


def _check_target(workflow: Workflow, action_id: int, to_state_id: int) -> None:
    if to_state_id not in workflow.states:
        raise UnknownTargetState(action_id, to_state_id)


def _check_source(workflow: Workflow, action_id: int, from_state_id: int, to_state_id: int) -> None:
    if from_state_id not in workflow.states:
        raise UnknownSourceState(action_id, from_state_id)
    if from_state_id == to_state_id:
        raise SelfLoop(action_id)
    if from_state_id == workflow.final_state_id:
        raise ActionFromFinalState(action_id)


def compile_actions(workflow: Workflow, records: Iterable[ActionRecord]) -> dict[int, Action]:
    """Regroup and validate ``records`` into canonical actions.

    Nothing is written to ``workflow``; the caller installs the returned actions
    once every group has compiled.

    Raises:
        ConflictingActionDefinition: records sharing an id disagree on name or target.
        UnknownTargetState: the target is not a state of the workflow.
        UnknownSourceState: a source is not a state of the workflow.
        SelfLoop: a source equals the target.
        ActionFromFinalState: a source is the workflow's final state.
    """

    groups: dict[int, list[ActionRecord]] = {}
    for record in records:
        groups.setdefault(record.action_id, []).append(record)

    compiled: dict[int, Action] = {}
    for action_id, group in groups.items():
        first = group[0]
        if any(r.name != first.name or r.to_state_id != first.to_state_id for r in group):
            raise ConflictingActionDefinition(action_id)

        action = Action(
            id=action_id,
            name=first.name,
            from_state_ids={r.from_state_id for r in group},
            to_state_id=first.to_state_id,
        )

        _check_target(workflow, action_id, action.to_state_id)
        for from_state_id in sorted(action.from_state_ids):
            _check_source(workflow, action_id, from_state_id, action.to_state_id)

        compiled[action_id] = action
    return compiled


def install_actions(workflow: Workflow, actions: Mapping[int, Action]) -> None:
    # Full replace per id: a bulk definition is authoritative for the ids it names.
    workflow.actions.update(actions)


def add_action(
    workflow: Workflow,
    *,
    action_id: int,
    name: str | None,
    from_state_id: int,
    to_state_id: int,
) -> Action:
    """Add one source state to an action, creating the action if needed."""

    existing = workflow.actions.get(action_id)
    if existing is not None and (existing.name != name or existing.to_state_id != to_state_id):
        raise ConflictingActionDefinition(action_id)

    _check_target(workflow, action_id, to_state_id)
    _check_source(workflow, action_id, from_state_id, to_state_id)

    if existing is not None:
        existing.from_state_ids.add(from_state_id)
        return existing

    action = Action(
        id=action_id, name=name, from_state_ids={from_state_id}, to_state_id=to_state_id
    )
    workflow.actions[action_id] = action
    return action
