"""CLI entrypoint for the workflow engine.

`serve` runs the REST API; the remaining commands operate directly on the local
workflow file, through the same service the server uses.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from workflow_engine import __version__
from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.errors import StoreLoadError, WorkflowError
from workflow_engine.engine.logging import configure_logging
from workflow_engine.engine.models import State, Workflow
from workflow_engine.engine.service import WorkflowService
from workflow_engine.engine.store import WorkflowStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-engine",
        description="Define and drive finite-state workflows",
    )
    parser.add_argument("--version", action="version", version=f"workflow-engine {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default=None, help="Bind address (default: WORKFLOW_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: WORKFLOW_PORT)")

    subparsers.add_parser("list", help="List all workflows")

    show = subparsers.add_parser("show", help="Show one workflow as JSON")
    show.add_argument("workflow_id", type=int)

    create = subparsers.add_parser("create", help="Create a workflow from a JSON definition")
    create.add_argument(
        "--file",
        type=Path,
        required=True,
        help="JSON file with id, name, states, actions, initial_state_id, final_state_id",
    )

    execute = subparsers.add_parser("execute", help="Execute an action on a workflow")
    execute.add_argument("workflow_id", type=int)
    execute.add_argument("action_id", type=int)

    add_state = subparsers.add_parser("add-state", help="Add a state to a workflow")
    add_state.add_argument("workflow_id", type=int)
    add_state.add_argument("state_id", type=int)
    add_state.add_argument("--name", default=None, help="Display name")
    add_state.add_argument(
        "--disabled", action="store_true", help="Create the state disabled"
    )

    toggle = subparsers.add_parser("toggle-state", help="Enable or disable a state")
    toggle.add_argument("workflow_id", type=int)
    toggle.add_argument("state_id", type=int)
    group = toggle.add_mutually_exclusive_group(required=True)
    group.add_argument("--enable", dest="enable", action="store_true")
    group.add_argument("--disable", dest="enable", action="store_false")

    add_action = subparsers.add_parser(
        "add-action", help="Add an action, or another source state to an existing action"
    )
    add_action.add_argument("workflow_id", type=int)
    add_action.add_argument("action_id", type=int)
    add_action.add_argument("--name", default=None, help="Display name")
    add_action.add_argument("--from", dest="from_state_id", type=int, required=True)
    add_action.add_argument("--to", dest="to_state_id", type=int, required=True)

    return parser


def _print_workflow(workflow: Workflow) -> None:
    print(json.dumps(workflow.model_dump(mode="json"), indent=2, ensure_ascii=False))


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from workflow_engine.server.app import create_app
    from workflow_engine.server.config import ServerSettings

    settings = ServerSettings()
    app = create_app(settings)
    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_config=None,
    )
    return 0


def _create(service: WorkflowService, path: Path) -> Workflow:
    # Same request shape as POST /workflows.
    from workflow_engine.server.models import WorkflowDefinition

    definition = WorkflowDefinition.model_validate_json(path.read_text(encoding="utf-8"))
    return service.create_from_records(definition.to_workflow(), definition.to_records())


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = EngineSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    if args.command == "serve":
        return _serve(args)

    try:
        service = WorkflowService(WorkflowStore(settings.workflows_file))
    except StoreLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == "list":
            for wf in service.get_all():
                print(f"{wf.id}\t{wf.name or ''}\tcurrent={wf.current_state_id}")
            return 0

        if args.command == "show":
            _print_workflow(service.get(args.workflow_id))
            return 0

        if args.command == "create":
            try:
                workflow = _create(service, args.file)
            except (OSError, ValidationError) as e:
                print(f"Invalid definition file {args.file}: {e}", file=sys.stderr)
                return 1
            print(f"Created workflow {workflow.id}: {workflow.name or ''}")
            return 0

        if args.command == "execute":
            workflow = service.execute(args.workflow_id, args.action_id)
            print(f"Workflow {workflow.id} is now in state {workflow.current_state_id}")
            return 0

        if args.command == "add-state":
            state = State(id=args.state_id, name=args.name, enabled=not args.disabled)
            _print_workflow(service.add_state(args.workflow_id, state))
            return 0

        if args.command == "toggle-state":
            _print_workflow(service.toggle_state(args.workflow_id, args.state_id, args.enable))
            return 0

        if args.command == "add-action":
            workflow = service.add_action(
                args.workflow_id,
                action_id=args.action_id,
                name=args.name,
                to_state_id=args.to_state_id,
                from_state_id=args.from_state_id,
            )
            _print_workflow(workflow)
            return 0

    except WorkflowError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.error(f"Unknown command: {args.command}")
