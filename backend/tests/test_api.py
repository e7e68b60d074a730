"""End-to-end tests for the read API."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from bottletrail.app import create_app
from bottletrail.config import settings
from bottletrail.models import ProfileCounters
from factories import cast_away, make_bottle, scenario_b1, seed_database


@pytest.fixture
def client(db_path, monkeypatch):
    bottle, events = scenario_b1()
    legacy = make_bottle("B2", message=None, status="adrift")
    profiles = [
        ProfileCounters(username="Alice", total_bottles_created=1),
        ProfileCounters(username="Bob", total_bottles_found=1),
    ]
    asyncio.run(seed_database(
        db_path,
        [bottle, legacy],
        events + [cast_away("B2", 40, tosser="Dan", lat=1.0, lon=2.0)],
        profiles,
    ))
    monkeypatch.setattr(settings, "DATABASE_PATH", db_path)
    with TestClient(create_app()) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_root_advertises_refresh_interval(client):
    assert client.get("/").json()["refresh_interval_seconds"] == settings.SNAPSHOT_REFRESH_SECONDS


def test_journey(client):
    response = client.get("/api/bottles/B1/journey")
    assert response.status_code == 200

    body = response.json()
    assert body["can_retoss"] is True
    assert [step["actor_name"] for step in body["steps"]] == ["Alice", "Bob"]
    assert body["steps"][1]["replies"][0]["message"] == "Carol found it"


def test_journey_unknown_bottle(client):
    assert client.get("/api/bottles/nope/journey").status_code == 404


def test_chat_thread(client):
    body = client.get("/api/bottles/B1/chat").json()
    assert [m["sender"] for m in body["messages"]] == ["Alice", "Bob", "Carol"]


def test_chat_without_message_is_unprocessable(client):
    assert client.get("/api/bottles/B2/chat").status_code == 422


def test_trail(client):
    markers = client.get("/api/trail/").json()
    assert [m["action_type"] for m in markers] == ["created", "found", "retossed", "found", "created"]
    assert sum(1 for m in markers if m["is_offset"]) == 3


def test_trail_filter(client):
    markers = client.get("/api/trail/", params={"action": "retossed"}).json()
    assert len(markers) == 1
    assert markers[0]["tosser_name"] == "Bob"
    assert markers[0]["is_offset"] is False


def test_trail_invalid_filter(client):
    assert client.get("/api/trail/", params={"action": "sunk"}).status_code == 422


def test_user_stats(client):
    body = client.get("/api/stats/users/Bob").json()
    assert body == {"created": 0, "found": 1, "retossed": 1}


def test_global_stats(client):
    body = client.get("/api/stats/global").json()
    assert body["total_bottles"] == 2
    assert body["active_bottles"] == 1
    assert body["total_retossed"] == 1


def test_reconciliation(client):
    body = client.get("/api/stats/reconciliation").json()
    assert body["checked_users"] == 2
    assert body["consistent"] is False
    assert [d["username"] for d in body["discrepancies"]] == ["Bob"]


def test_conversations(client):
    body = client.get("/api/conversations/").json()
    assert [c["id"] for c in body] == ["B1-hop2", "B1-hop1"]


def test_conversations_merged(client):
    body = client.get("/api/conversations/", params={"merge_by_hop": "true"}).json()
    assert all(c["reply_count"] == 1 for c in body)
