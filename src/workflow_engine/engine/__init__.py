"""Workflow definition and transition engine.

- `models`: the workflow aggregate (states, actions, history)
- `registry`, `compiler`, `executor`: the rules for defining and driving a workflow
- `service`: the lock-guarded owner of all workflows, persisted through `store`
"""

__all__: list[str] = []
