from __future__ import annotations

from collections.abc import Generator

import fakeredis
import pytest
from fastapi.testclient import TestClient

from scriptcore.api.deps import get_command_registry, get_redis
from scriptcore.commands.base import Command
from scriptcore.commands.library import load_builtin_commands
from scriptcore.commands.registry import CommandRegistry
from scriptcore.core.entry import ScriptEntry
from scriptcore.main import app


class _Hold(Command):
    """Stands in for a long-running command; completion arrives over HTTP."""

    name = "HOLD"

    def parse(self, entry: ScriptEntry) -> None:
        pass

    def execute(self, entry: ScriptEntry) -> None:
        self.report(entry, "holding")


@pytest.fixture()
def client_and_redis() -> Generator[tuple[TestClient, fakeredis.FakeRedis], None, None]:
    r = fakeredis.FakeRedis(decode_responses=True)
    registry = load_builtin_commands(registry=CommandRegistry())
    registry.register(_Hold())

    def _override_redis() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    app.dependency_overrides[get_redis] = _override_redis
    app.dependency_overrides[get_command_registry] = lambda: registry
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()


def test_info_and_healthcheck(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis
    assert client.get("/healthcheck").json() == {"status": "ok"}
    assert client.get("/info").json()["name"] == "scriptcore"


def test_ex_runs_an_ad_hoc_command(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, r = client_and_redis

    resp = client.post("/ex", json={"command": "narrate", "arguments": ["hello there"]})
    assert resp.status_code == 201
    data = resp.json()
    assert data["queue_id"].startswith("ex_")
    assert data["state"] == "drained"
    assert data["pending"] == []
    assert data["held"] is None

    entries = r.xrange(f"debug:{data['queue_id']}")
    assert any(f["type"] == "report" and f["command"] == "NARRATE" for _, f in entries)

    debug = client.get(f"/queues/{data['queue_id']}/debug").json()
    assert debug["stream"] == f"debug:{data['queue_id']}"
    assert len(debug["messages"]) == len(entries)


def test_ex_parse_failure_is_reported_not_raised(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, r = client_and_redis

    resp = client.post("/ex", json={"command": "narrate", "arguments": []})
    assert resp.status_code == 201
    qid = resp.json()["queue_id"]

    entries = r.xrange(f"debug:{qid}")
    assert any(f["type"] == "error" and "Missing any text" in f["message"] for _, f in entries)


def test_ex_rejects_unknown_and_empty_commands(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis

    resp = client.post("/ex", json={"command": "teleport", "arguments": ["1", "2", "3"]})
    assert resp.status_code == 422
    assert "TELEPORT" in resp.json()["detail"]

    resp = client.post("/ex", json={"command": "^"})
    assert resp.status_code == 422


def test_wait_for_entry_is_finished_over_http(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis

    resp = client.post("/ex", json={"command": "~hold"})
    assert resp.status_code == 201
    data = resp.json()
    assert data["state"] == "awaiting_completion"
    assert data["held"]["command"] == "HOLD"
    assert data["held"]["wait_for"] is True
    qid = data["queue_id"]

    listed = client.get("/queues").json()["queues"]
    assert [q["queue_id"] for q in listed] == [qid]

    resp2 = client.post(f"/queues/{qid}/finish")
    assert resp2.status_code == 200
    assert resp2.json()["state"] == "drained"
    assert resp2.json()["held"] is None

    # A drained queue is released from the directory.
    assert client.get("/queues").json()["queues"] == []
    resp3 = client.post(f"/queues/{qid}/finish")
    assert resp3.status_code == 404


def test_finish_on_a_queue_that_is_not_waiting(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis

    qid = client.post("/ex", json={"command": "hold"}).json()["queue_id"]
    assert client.post(f"/queues/{qid}/finish").status_code == 404


def test_drained_ex_queues_are_not_kept(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, r = client_and_redis

    qids = [client.post("/ex", json={"command": "narrate", "arguments": ["hi"]}).json()["queue_id"] for _ in range(5)]

    assert client.get("/queues").json()["queues"] == []
    assert client.get(f"/queues/{qids[0]}").status_code == 404
    # The debug stream outlives the queue.
    assert r.xlen(f"debug:{qids[0]}") > 0


def test_stop_queue(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis

    qid = client.post("/ex", json={"command": "~hold"}).json()["queue_id"]

    resp = client.delete(f"/queues/{qid}")
    assert resp.status_code == 200
    assert resp.json() == {"queue_id": qid, "dropped": 0}

    assert client.get(f"/queues/{qid}").status_code == 404
    assert client.post(f"/queues/{qid}/finish").status_code == 404


def test_debug_stream_count_bounds(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis
    assert client.get("/queues/x/debug", params={"count": 0}).status_code == 422
