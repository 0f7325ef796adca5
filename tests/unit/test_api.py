from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from workflow_engine.server.app import create_app


def _definition(**overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "id": 1,
        "name": "Review",
        "states": [
            {"id": 1, "name": "Draft", "is_initial": True},
            {"id": 2, "name": "Review"},
            {"id": 3, "name": "Done", "is_final": True},
        ],
        "initial_state_id": 1,
        "final_state_id": 3,
        "actions": [
            {"id": 10, "name": "submit", "from_state_ids": [1], "to_state_id": 2},
            {"id": 11, "name": "approve", "from_state_id": 2, "to_state_id": 3},
        ],
    }
    body.update(overrides)
    return body


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> TestClient:
    monkeypatch.setenv("WORKFLOW_DATA_PATH", str(tmp_path / "data"))
    return TestClient(create_app())


def test_health(client: TestClient) -> None:
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert "version" in body


def test_create_and_drive_workflow(client: TestClient) -> None:
    resp = client.post("/workflows", json=_definition())
    assert resp.status_code == 201
    created = resp.json()
    assert created["current_state_id"] == 1
    assert created["actions"]["10"]["from_state_ids"] == [1]

    wf = client.post("/workflows/1/execute/10").json()
    assert wf["current_state_id"] == 2
    assert wf["history"] == [2]

    wf = client.post("/workflows/1/execute/11").json()
    assert wf["current_state_id"] == 3
    assert wf["history"] == [2, 3]

    resp = client.post("/workflows/1/execute/10")
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "action_not_applicable"

    assert client.get("/workflows/1").json()["history"] == [2, 3]


def test_flat_records_are_regrouped(client: TestClient) -> None:
    body = _definition(
        actions=[
            {"id": 10, "name": "submit", "from_state_id": 1, "to_state_id": 3},
            {"id": 10, "name": "submit", "from_state_id": 2, "to_state_id": 3},
        ]
    )
    created = client.post("/workflows", json=body).json()
    assert created["actions"]["10"]["from_state_ids"] == [1, 2]


def test_conflicting_flat_records_rejected(client: TestClient) -> None:
    body = _definition(
        actions=[
            {"id": 10, "name": "submit", "from_state_id": 1, "to_state_id": 2},
            {"id": 10, "name": "submit", "from_state_id": 2, "to_state_id": 3},
        ]
    )
    resp = client.post("/workflows", json=body)
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "conflicting_action_definition"
    assert client.get("/workflows").json() == []


def test_action_from_final_state_rejected_at_creation(client: TestClient) -> None:
    body = _definition(
        actions=[{"id": 12, "name": "reopen", "from_state_ids": [3], "to_state_id": 1}]
    )
    resp = client.post("/workflows", json=body)
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "action_from_final_state"
    assert client.get("/workflows/1").status_code == 404


def test_duplicate_workflow_and_state_ids(client: TestClient) -> None:
    assert client.post("/workflows", json=_definition()).status_code == 201
    resp = client.post("/workflows", json=_definition())
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "duplicate_workflow_id"

    dup_states = _definition(id=2, states=[{"id": 1}, {"id": 1}, {"id": 3}])
    resp = client.post("/workflows", json=dup_states)
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "duplicate_state_id"


def test_action_needs_exactly_one_source_form(client: TestClient) -> None:
    body = _definition(
        actions=[
            {"id": 10, "name": "x", "from_state_ids": [1], "from_state_id": 1, "to_state_id": 2}
        ]
    )
    assert client.post("/workflows", json=body).status_code == 422


def test_list_and_get(client: TestClient) -> None:
    client.post("/workflows", json=_definition(id=2))
    client.post("/workflows", json=_definition(id=1))

    assert [wf["id"] for wf in client.get("/workflows").json()] == [1, 2]
    assert client.get("/workflows/2").json()["name"] == "Review"

    resp = client.get("/workflows/9")
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "workflow_not_found"


def test_add_and_toggle_state(client: TestClient) -> None:
    client.post("/workflows", json=_definition())

    wf = client.post("/workflows/1/states", json={"id": 4, "name": "Archived"}).json()
    assert wf["states"]["4"]["enabled"] is True

    resp = client.post("/workflows/1/states", json={"id": 4, "name": "Again"})
    assert resp.status_code == 409

    wf = client.put("/workflows/1/states/2/toggle", params={"enable": False}).json()
    assert wf["states"]["2"]["enabled"] is False
    resp = client.post("/workflows/1/execute/10")
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "target_state_disabled"

    client.put("/workflows/1/states/2/toggle", params={"enable": True})
    assert client.post("/workflows/1/execute/10").json()["current_state_id"] == 2

    resp = client.put("/workflows/1/states/99/toggle", params={"enable": True})
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "state_not_found"


def test_added_state_cannot_claim_initial_or_final(client: TestClient) -> None:
    client.post("/workflows", json=_definition())

    resp = client.post(
        "/workflows/1/states",
        json={"id": 4, "name": "Late", "is_initial": True, "is_final": True},
    )
    assert resp.status_code == 200
    wf = resp.json()
    assert wf["states"]["4"]["is_initial"] is False
    assert wf["states"]["4"]["is_final"] is False
    assert (wf["initial_state_id"], wf["final_state_id"]) == (1, 3)


def test_add_action(client: TestClient) -> None:
    client.post("/workflows", json=_definition())

    wf = client.post(
        "/workflows/1/actions",
        json={"action": {"id": 12, "name": "back", "to_state_id": 1}, "from_state_id": 2},
    ).json()
    assert wf["actions"]["12"]["from_state_ids"] == [2]

    resp = client.post(
        "/workflows/1/actions",
        json={"action": {"id": 12, "name": "back", "to_state_id": 2}, "from_state_id": 1},
    )
    assert resp.status_code == 409

    resp = client.post(
        "/workflows/1/actions",
        json={"action": {"id": 13, "name": "loop", "to_state_id": 2}, "from_state_id": 2},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "self_loop"


def test_state_survives_app_restart(client: TestClient) -> None:
    client.post("/workflows", json=_definition())
    client.post("/workflows/1/execute/10")

    restarted = TestClient(create_app())
    assert restarted.get("/workflows/1").json()["history"] == [2]
