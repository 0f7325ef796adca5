"""JSON-file backed store for workflows.

The whole mapping is read once at startup and rewritten after every mutation.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from workflow_engine.engine.errors import StoreLoadError
from workflow_engine.engine.models import Workflow

logger = logging.getLogger(__name__)

_WORKFLOWS = TypeAdapter(dict[int, Workflow])


class WorkflowStore:
    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load_all(self) -> dict[int, Workflow]:
        """Load every stored workflow.

        A missing or blank file is an empty store. Anything else that does not parse
        raises :class:`StoreLoadError`; starting over silently would drop data.
        """

        if not self._path.exists():
            logger.info("No workflow data found, starting empty", extra={"path": str(self._path)})
            return {}

        text = self._path.read_text(encoding="utf-8").strip()
        if not text:
            return {}

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise StoreLoadError(str(self._path), str(e)) from e
        try:
            workflows = _WORKFLOWS.validate_python(raw)
        except ValidationError as e:
            raise StoreLoadError(str(self._path), str(e)) from e

        for wf_id, wf in workflows.items():
            if wf_id != wf.id:
                raise StoreLoadError(
                    str(self._path), f"workflow stored under key {wf_id} has id {wf.id}"
                )

        logger.info(
            "Workflows loaded", extra={"path": str(self._path), "count": len(workflows)}
        )
        return workflows

    def save_all(self, workflows: Mapping[int, Workflow]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            str(wf_id): wf.model_dump(mode="json") for wf_id, wf in sorted(workflows.items())
        }
        text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"

        # Write next to the target and swap it in, so a crash never leaves half a file.
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
