"""Workflow Engine.

Define finite-state workflows (states plus named actions between them) and drive
them forward one action at a time, with local JSON persistence and a REST API.
"""

__version__ = "0.1.0"

from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.models import Action, State, Workflow
from workflow_engine.engine.service import WorkflowService
from workflow_engine.engine.store import WorkflowStore

__all__ = [
    "__version__",
    "Action",
    "EngineSettings",
    "State",
    "Workflow",
    "WorkflowService",
    "WorkflowStore",
]
