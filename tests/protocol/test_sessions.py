from __future__ import annotations

from fastapi.testclient import TestClient

from tumblestone.protocol.http.app import create_app
from tumblestone.protocol.http.session import InMemorySessionStore


SURVIVOR_TSB = "width = 3\n---\na # a\nb b a\n. . b\n"


def _client() -> TestClient:
    return TestClient(create_app())


def _create(client: TestClient, tsb: str = SURVIVOR_TSB) -> str:
    r = client.post("/api/puzzles", json={"tsb": tsb})
    assert r.status_code == 200
    return r.json()["puzzle_id"]


def test_create_puzzle_and_get_state() -> None:
    client = _client()
    r = client.post("/api/puzzles", json={"tsb": SURVIVOR_TSB})
    assert r.status_code == 200
    body = r.json()
    puzzle_id = body["puzzle_id"]
    assert puzzle_id
    assert body["tsb"] == "width = 3\nlock = no\n---\na # a\nb b a\n. . b\n"

    r2 = client.get(f"/api/puzzles/{puzzle_id}/state")
    assert r2.status_code == 200
    state = r2.json()
    assert state["puzzle_id"] == puzzle_id
    assert (state["width"], state["height"], state["turn"]) == (3, 3, 0)
    assert state["rows"] == ["a # a", "b b a", ". . b"]
    assert state["removable"] == 6
    assert state["solved"] is False
    assert state["legal_moves"] == ["0,1", "1,1", "2,2"]
    assert state["plan"] is None and state["next_hint"] is None
    assert state["frame"].startswith("Turn 0\n")


def test_get_state_unknown_id_404() -> None:
    client = _client()
    r = client.get("/api/puzzles/does-not-exist/state")
    assert r.status_code == 404
    body = r.json()
    assert body["error"]["code"] == "not_found"


def test_list_and_delete_puzzles() -> None:
    client = _client()
    puzzle_id = _create(client)
    assert client.get("/api/puzzles").json() == {"puzzle_ids": [puzzle_id]}
    assert client.delete(f"/api/puzzles/{puzzle_id}").json() == {"deleted": True}
    assert client.delete(f"/api/puzzles/{puzzle_id}").status_code == 404


def test_move_validation() -> None:
    client = _client()
    puzzle_id = _create(client)

    r_bad = client.post(f"/api/puzzles/{puzzle_id}/move", json={"move": "zero"})
    assert r_bad.status_code == 400
    assert r_bad.json()["error"]["code"] == "bad_request"

    r_illegal = client.post(f"/api/puzzles/{puzzle_id}/move", json={"move": "2,0"})
    assert r_illegal.status_code == 400
    assert r_illegal.json()["error"]["message"] == "illegal move"

    r_ok = client.post(f"/api/puzzles/{puzzle_id}/move", json={"move": "0,1"})
    assert r_ok.status_code == 200
    state = r_ok.json()
    assert state["turn"] == 1
    assert state["move_history"] == ["0,1"]
    assert state["legal_moves"] == ["1,1", "2,2"]


def test_solve_then_step_until_solved() -> None:
    client = _client()
    puzzle_id = _create(client)

    r_step = client.post(f"/api/puzzles/{puzzle_id}/step")
    assert r_step.status_code == 409
    assert r_step.json()["error"]["code"] == "conflict"

    r_solve = client.post(f"/api/puzzles/{puzzle_id}/solve")
    assert r_solve.status_code == 200
    data = r_solve.json()
    assert data["solvable"] is True
    assert data["moves"] == ["0,1", "1,1", "2,2", "0,0", "2,1", "2,0"]
    assert data["nodes"] >= 6

    state = client.get(f"/api/puzzles/{puzzle_id}/state").json()
    assert state["next_hint"] == "0,1"
    assert "Remove 0,1" in state["frame"]

    for _ in data["moves"]:
        state = client.post(f"/api/puzzles/{puzzle_id}/step").json()
    assert state["solved"] is True
    assert state["rows"] == [". . .", ". . .", ". . ."]
    assert state["next_hint"] is None
    assert client.post(f"/api/puzzles/{puzzle_id}/step").status_code == 409


def test_unsolvable_puzzle() -> None:
    client = _client()
    puzzle_id = _create(client, "width = 3\n---\na a b\n")
    data = client.post(f"/api/puzzles/{puzzle_id}/solve").json()
    assert data == {"solvable": False, "moves": [], "nodes": data["nodes"], "time_ms": data["time_ms"]}


def test_store_evicts_oldest() -> None:
    store = InMemorySessionStore(max_sessions=2)
    first = store.create(object())
    store.create(object())
    store.create(object())
    assert store.get(first) is None
    assert len(store.ids()) == 2
