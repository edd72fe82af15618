"""Scorecard Routes - verifies save, export, import merge and resume.

Invariants:
    - A saved scorecard holds the game snapshot at save time
    - Export output imports back unchanged (nothing newer, nothing added)
    - Import keeps the newer copy per id and answers 400 IMPORT_EMPTY when nothing is usable
    - Resume starts a new game from the stored snapshot with skins re-derived
"""

import json

import pytest


@pytest.fixture
async def game(client) -> dict:
    res = await client.post("/api/v1/games", json={
        "course_id": "pebble-beach",
        "event_name": "Club Championship",
        "players": [{"id": "p1", "name": "Ana"}, {"id": "p2", "name": "Ben"}],
    })
    game = res.json()
    await client.post(
        f"/api/v1/games/{game['id']}/scores",
        json={"player_id": "p1", "hole_number": 1, "strokes": 3},
    )
    return game


@pytest.fixture
async def saved(client, game) -> dict:
    res = await client.post("/api/v1/scorecards", json={"game_id": game["id"]})
    assert res.status_code == 201
    return res.json()


def _export_file(*scorecards: dict) -> str:
    return json.dumps({
        "schema": "the-tour-scorecard",
        "version": 1,
        "exportedAt": "2026-05-01T00:00:00+00:00",
        "scorecards": list(scorecards),
    })


def _scorecard(card_id: str, updated: str, name: str) -> dict:
    return {
        "id": card_id,
        "name": name,
        "createdAt": "2026-01-01T00:00:00+00:00",
        "updatedAt": updated,
        "data": {"id": "g-old", "eventName": name, "players": []},
    }


# ─── Save / list ─────────────────────────────────────────────────

async def test_save_names_scorecard_after_event(saved):
    assert saved["name"] == "Club Championship"
    assert saved["courseName"] == "Pebble Beach Golf Links"
    assert saved["playerCount"] == 2


async def test_save_with_explicit_name(client, game):
    res = await client.post("/api/v1/scorecards", json={"game_id": game["id"], "name": "  Final Round "})
    assert res.json()["name"] == "Final Round"


async def test_save_unknown_game_404(client):
    res = await client.post("/api/v1/scorecards", json={"game_id": "missing"})
    assert res.status_code == 404


async def test_get_scorecard_holds_snapshot(client, saved):
    res = await client.get(f"/api/v1/scorecards/{saved['id']}")
    body = res.json()
    assert body["data"]["eventName"] == "Club Championship"
    assert body["data"]["players"][0]["totalScore"] == 3


async def test_list_and_delete(client, saved):
    listed = (await client.get("/api/v1/scorecards")).json()["scorecards"]
    assert [s["id"] for s in listed] == [saved["id"]]

    assert (await client.delete(f"/api/v1/scorecards/{saved['id']}")).status_code == 204
    assert (await client.get("/api/v1/scorecards")).json()["scorecards"] == []
    assert (await client.delete(f"/api/v1/scorecards/{saved['id']}")).status_code == 404


# ─── Export / import ─────────────────────────────────────────────

async def test_export_then_import_changes_nothing(client, saved):
    exported = (await client.get("/api/v1/scorecards/export")).json()
    assert exported["schema"] == "the-tour-scorecard"
    assert [s["id"] for s in exported["scorecards"]] == [saved["id"]]

    res = await client.post("/api/v1/scorecards/import", json={"content": json.dumps(exported)})
    assert res.status_code == 200
    assert res.json() == {"added": 0, "updated": 0, "total": 1, "warnings": []}


async def test_import_adds_and_keeps_newer(client):
    first = _export_file(
        _scorecard("a", "2026-01-02T00:00:00Z", "Old A"),
        _scorecard("b", "2026-01-05T00:00:00Z", "B"),
    )
    res = await client.post("/api/v1/scorecards/import", json={"content": first})
    assert res.json()["added"] == 2

    second = _export_file(
        _scorecard("a", "2026-01-03T00:00:00Z", "New A"),
        _scorecard("b", "2026-01-01T00:00:00Z", "Stale B"),
        _scorecard("c", "2026-01-04T00:00:00Z", "C"),
    )
    res = await client.post("/api/v1/scorecards/import", json={"content": second})
    assert res.json() == {"added": 1, "updated": 1, "total": 3, "warnings": []}

    listed = (await client.get("/api/v1/scorecards")).json()["scorecards"]
    assert [(s["id"], s["name"]) for s in listed] == [("b", "B"), ("c", "C"), ("a", "New A")]


async def test_import_invalid_json_400(client):
    res = await client.post("/api/v1/scorecards/import", json={"content": "{nope"})
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "IMPORT_EMPTY"
    assert "not valid JSON" in error["message"]


async def test_import_wrong_schema_400(client):
    content = json.dumps({"schema": "other", "scorecards": []})
    res = await client.post("/api/v1/scorecards/import", json={"content": content})
    assert res.status_code == 400


# ─── Resume ──────────────────────────────────────────────────────

async def test_resume_starts_new_game(client, game, saved):
    res = await client.post(f"/api/v1/scorecards/{saved['id']}/resume")
    assert res.status_code == 201
    resumed = res.json()
    assert resumed["id"] != game["id"]
    assert resumed["eventName"] == "Club Championship"
    assert resumed["players"][0]["skins"] == 2

    res = await client.get(f"/api/v1/games/{resumed['id']}")
    assert res.status_code == 200


async def test_resume_unknown_scorecard_404(client):
    res = await client.post("/api/v1/scorecards/missing/resume")
    assert res.status_code == 404


async def test_import_non_object_data_is_400_not_500(client):
    content = _export_file({"id": "a", "data": "oops"}, {"id": "b", "data": ["x"]})
    res = await client.post("/api/v1/scorecards/import", json={"content": content})
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "IMPORT_EMPTY"
    assert "Scorecard 1 skipped" in error["message"]


async def test_import_reports_skipped_cards_as_warnings(client):
    content = _export_file({"id": "a", "data": "oops"}, _scorecard("b", "2026-01-01T00:00:00Z", "B"))
    res = await client.post("/api/v1/scorecards/import", json={"content": content})
    assert res.status_code == 200
    assert res.json() == {
        "added": 1, "updated": 0, "total": 1,
        "warnings": ["Scorecard 1 skipped: missing id or game data."],
    }
