"""Workflow REST API.

All routes are mounted under `/workflows`. Handlers translate request bodies into
engine calls and engine errors into HTTP errors; no workflow rules live here.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request, status

from workflow_engine.engine.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    TransitionRejected,
    WorkflowError,
)
from workflow_engine.engine.models import State, Workflow
from workflow_engine.engine.service import WorkflowService
from workflow_engine.server.models import AddActionRequest, WorkflowDefinition

router = APIRouter()


def _service(request: Request) -> WorkflowService:
    service = getattr(request.app.state, "service", None)
    if not isinstance(service, WorkflowService):
        # This should never happen for the real app, but keeps the API fail-fast.
        raise HTTPException(status_code=500, detail="Workflow service not configured")
    return service


def _status_for(exc: WorkflowError) -> int:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError | TransitionRejected):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, PersistenceError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


def _http_error(exc: WorkflowError) -> HTTPException:
    return HTTPException(
        status_code=_status_for(exc),
        detail={"code": exc.code, "message": str(exc)},
    )


@router.post("", response_model=Workflow, status_code=status.HTTP_201_CREATED)
def create_workflow(definition: WorkflowDefinition, request: Request) -> Workflow:
    service = _service(request)
    try:
        return service.create_from_records(definition.to_workflow(), definition.to_records())
    except WorkflowError as e:
        raise _http_error(e) from e


@router.get("", response_model=list[Workflow])
def list_workflows(request: Request) -> list[Workflow]:
    return _service(request).get_all()


@router.get("/{workflow_id}", response_model=Workflow)
def get_workflow(workflow_id: int, request: Request) -> Workflow:
    try:
        return _service(request).get(workflow_id)
    except WorkflowError as e:
        raise _http_error(e) from e


@router.post("/{workflow_id}/execute/{action_id}", response_model=Workflow)
def execute_action(workflow_id: int, action_id: int, request: Request) -> Workflow:
    try:
        return _service(request).execute(workflow_id, action_id)
    except WorkflowError as e:
        raise _http_error(e) from e


@router.post("/{workflow_id}/states", response_model=Workflow)
def add_state(workflow_id: int, state: State, request: Request) -> Workflow:
    try:
        return _service(request).add_state(workflow_id, state)
    except WorkflowError as e:
        raise _http_error(e) from e


@router.put("/{workflow_id}/states/{state_id}/toggle", response_model=Workflow)
def toggle_state(
    workflow_id: int,
    state_id: int,
    request: Request,
    enable: bool = Query(..., description="New value of the state's enabled flag"),
) -> Workflow:
    try:
        return _service(request).toggle_state(workflow_id, state_id, enable)
    except WorkflowError as e:
        raise _http_error(e) from e


@router.post("/{workflow_id}/actions", response_model=Workflow)
def add_action(workflow_id: int, req: AddActionRequest, request: Request) -> Workflow:
    try:
        return _service(request).add_action(
            workflow_id,
            action_id=req.action.id,
            name=req.action.name,
            to_state_id=req.action.to_state_id,
            from_state_id=req.from_state_id,
        )
    except WorkflowError as e:
        raise _http_error(e) from e
