"""FastAPI app factory.

Endpoints are intentionally thin wrappers over :class:`WorkflowService`.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workflow_engine import __version__
from workflow_engine.engine.service import WorkflowService
from workflow_engine.engine.store import WorkflowStore
from workflow_engine.server.config import ServerSettings
from workflow_engine.server.workflows_router import router as workflows_router

logger = logging.getLogger(__name__)


def create_app(
    settings: ServerSettings | None = None, service: WorkflowService | None = None
) -> FastAPI:
    """Build the API around one workflow service.

    The service (and therefore the store load) is created here, so unreadable
    workflow data stops the server from starting.
    """

    settings = settings or ServerSettings()
    if service is None:
        service = WorkflowService(WorkflowStore(settings.workflows_file))

    app = FastAPI(
        title="Workflow Engine",
        version=__version__,
        description="REST API for defining and executing finite-state workflows.",
    )

    app.state.settings = settings
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(workflows_router, prefix="/workflows", tags=["workflows"])

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    logger.info("App created", extra={"workflows_file": str(settings.workflows_file)})
    return app
