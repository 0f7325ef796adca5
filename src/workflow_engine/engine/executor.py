from __future__ import annotations

import logging

from workflow_engine.engine.errors import (
    ActionNotApplicable,
    ActionNotFound,
    TargetStateDisabled,
    UnknownTargetState,
)
from workflow_engine.engine.models import Workflow

logger = logging.getLogger(__name__)


def execute(workflow: Workflow, action_id: int) -> Workflow:
    """Move ``workflow`` along ``action_id`` and record the new state in its history.

    This is the only place ``current_state_id`` and ``history`` are written.
    All checks run before either is touched.
    """

    action = workflow.actions.get(action_id)
    if action is None:
        raise ActionNotFound(action_id)

    current = workflow.current_state_id
    if current not in action.from_state_ids:
        raise ActionNotApplicable(action_id, current)

    target = workflow.states.get(action.to_state_id)
    if target is None:
        # Only reachable with hand-edited data; definitions validate targets.
        raise UnknownTargetState(action_id, action.to_state_id)
    if not target.enabled:
        raise TargetStateDisabled(action_id, target.id)

    workflow.current_state_id = target.id
    workflow.history.append(target.id)
    logger.debug(
        "Transition applied",
        extra={
            "workflow_id": workflow.id,
            "action_id": action_id,
            "from_state_id": current,
            "to_state_id": target.id,
        },
    )
    return workflow
