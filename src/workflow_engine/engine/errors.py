"""Error types raised by the workflow engine.

Every failure carries the offending ids and a stable ``code`` so callers (the HTTP
layer, the CLI) can report it without parsing messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


class WorkflowError(Exception):
    """Base class for all engine errors."""

    code: ClassVar[str] = "workflow_error"


class NotFoundError(WorkflowError):
    pass


class ConflictError(WorkflowError):
    pass


class InvalidDefinitionError(WorkflowError):
    """The submitted states/actions violate the workflow's structure."""


class TransitionRejected(WorkflowError):
    """A well-formed action could not be executed from the current state."""


@dataclass(eq=False)
class WorkflowNotFound(NotFoundError):
    workflow_id: int

    code: ClassVar[str] = "workflow_not_found"

    def __str__(self) -> str:
        return f"Workflow {self.workflow_id} not found"


@dataclass(eq=False)
class StateNotFound(NotFoundError):
    state_id: int

    code: ClassVar[str] = "state_not_found"

    def __str__(self) -> str:
        return f"State {self.state_id} not found"


@dataclass(eq=False)
class ActionNotFound(NotFoundError):
    action_id: int

    code: ClassVar[str] = "action_not_found"

    def __str__(self) -> str:
        return f"Action {self.action_id} not found"


@dataclass(eq=False)
class DuplicateWorkflowId(ConflictError):
    workflow_id: int

    code: ClassVar[str] = "duplicate_workflow_id"

    def __str__(self) -> str:
        return f"Workflow ID {self.workflow_id} already exists"


@dataclass(eq=False)
class DuplicateStateId(ConflictError):
    state_id: int

    code: ClassVar[str] = "duplicate_state_id"

    def __str__(self) -> str:
        return f"State ID {self.state_id} already exists"


@dataclass(eq=False)
class ConflictingActionDefinition(ConflictError):
    action_id: int

    code: ClassVar[str] = "conflicting_action_definition"

    def __str__(self) -> str:
        return f"Action {self.action_id} has conflicting name or target state"


class UnknownState(InvalidDefinitionError):
    pass


@dataclass(eq=False)
class UnknownTargetState(UnknownState):
    action_id: int
    to_state_id: int

    code: ClassVar[str] = "unknown_target_state"

    def __str__(self) -> str:
        return f"Target state {self.to_state_id} not found for action {self.action_id}"


@dataclass(eq=False)
class UnknownSourceState(UnknownState):
    action_id: int
    from_state_id: int

    code: ClassVar[str] = "unknown_source_state"

    def __str__(self) -> str:
        return f"From state {self.from_state_id} not found for action {self.action_id}"


@dataclass(eq=False)
class SelfLoop(InvalidDefinitionError):
    action_id: int

    code: ClassVar[str] = "self_loop"

    def __str__(self) -> str:
        return f"Action {self.action_id} cannot lead from a state to itself"


@dataclass(eq=False)
class ActionFromFinalState(InvalidDefinitionError):
    action_id: int

    code: ClassVar[str] = "action_from_final_state"

    def __str__(self) -> str:
        return f"Action {self.action_id} cannot leave the final state"


@dataclass(eq=False)
class InvalidWorkflowDefinition(InvalidDefinitionError):
    reason: str

    code: ClassVar[str] = "invalid_workflow_definition"

    def __str__(self) -> str:
        return self.reason


@dataclass(eq=False)
class ActionNotApplicable(TransitionRejected):
    action_id: int
    current_state_id: int | None

    code: ClassVar[str] = "action_not_applicable"

    def __str__(self) -> str:
        return f"Action {self.action_id} is not valid from current state {self.current_state_id}"


@dataclass(eq=False)
class TargetStateDisabled(TransitionRejected):
    action_id: int
    to_state_id: int

    code: ClassVar[str] = "target_state_disabled"

    def __str__(self) -> str:
        return f"Target state {self.to_state_id} of action {self.action_id} is disabled"


@dataclass(eq=False)
class PersistenceError(WorkflowError):
    """The in-memory change was applied but could not be flushed to disk.

    The outcome of the request is unconfirmed.
    """

    path: str

    code: ClassVar[str] = "persistence_error"

    def __str__(self) -> str:
        return f"Change applied in memory but could not be saved to {self.path}"


@dataclass(eq=False)
class StoreLoadError(Exception):
    """Existing workflow data could not be parsed at startup."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"Failed to load workflows from {self.path}: {self.message}"
