"""Scorecard Archive - tests for export files, import parsing and merging.

Tests cover:
    - export file carries schema, version and timestamp
    - import never raises: bad JSON, wrong schema and empty lists become warnings
    - names fall back to the event name, then "Untitled Scorecard"
    - merge keeps the newer copy per id and sorts newest first
"""

import json
from datetime import datetime, timezone

from tour_scorecard.core.scorecard_archive import (
    EXPORT_SCHEMA,
    EXPORT_VERSION,
    UNTITLED,
    build_export_file,
    merge_scorecards,
    normalize_scorecard,
    parse_scorecard_import,
)


def _card(card_id: str, updated: str, name: str = "Round") -> dict:
    return {
        "id": card_id,
        "name": name,
        "createdAt": "2026-01-01T00:00:00+00:00",
        "updatedAt": updated,
        "data": {"id": card_id, "eventName": name},
    }


def _file(scorecards, **overrides) -> str:
    return json.dumps({"schema": EXPORT_SCHEMA, "version": EXPORT_VERSION, "scorecards": scorecards, **overrides})


# ─── Export ──────────────────────────────────────────────────────

def test_build_export_file():
    at = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)
    exported = build_export_file([_card("a", "2026-05-01T00:00:00Z")], at)
    assert exported["schema"] == "the-tour-scorecard"
    assert exported["version"] == 1
    assert exported["exportedAt"] == "2026-05-01T12:00:00+00:00"
    assert len(exported["scorecards"]) == 1


def test_export_file_round_trips_through_import():
    at = datetime(2026, 5, 1, tzinfo=timezone.utc)
    cards = [_card("a", "2026-05-01T00:00:00Z", "Club Day")]
    parsed, warnings = parse_scorecard_import(json.dumps(build_export_file(cards, at)))
    assert parsed == cards
    assert warnings == []


# ─── Import ──────────────────────────────────────────────────────

def test_import_invalid_json():
    assert parse_scorecard_import("{not json") == ([], ["Import file is not valid JSON."])


def test_import_not_an_object():
    assert parse_scorecard_import("[1, 2]") == ([], ["Import file format is not recognized."])


def test_import_wrong_schema():
    raw = _file([_card("a", "2026-01-01T00:00:00Z")], schema="something-else")
    assert parse_scorecard_import(raw) == ([], ["Import file is missing scorecards data."])


def test_import_drops_cards_without_id_or_data():
    raw = _file([{"name": "no id", "data": {"x": 1}}, {"id": "b", "data": {}}, "junk"])
    scorecards, warnings = parse_scorecard_import(raw)
    assert scorecards == []
    assert warnings == [
        "Scorecard 1 skipped: missing id or game data.",
        "Scorecard 2 skipped: missing id or game data.",
        "Scorecard 3 skipped: missing id or game data.",
        "No valid scorecards found in the import.",
    ]


def test_import_skips_cards_whose_data_is_not_an_object():
    raw = _file([
        {"id": "a", "data": "oops"},
        {"id": "b", "data": [1, 2]},
        {"id": 7, "data": {"eventName": "Numeric id"}},
        _card("c", "2026-01-01T00:00:00Z", "Kept"),
    ])
    scorecards, warnings = parse_scorecard_import(raw)
    assert [s["id"] for s in scorecards] == ["c"]
    assert warnings == [
        "Scorecard 1 skipped: missing id or game data.",
        "Scorecard 2 skipped: missing id or game data.",
        "Scorecard 3 skipped: missing id or game data.",
    ]


def test_normalize_ignores_non_string_name():
    card = normalize_scorecard({"id": "a", "name": ["x"], "data": {"eventName": "Club Day"}})
    assert card["name"] == "Club Day"


def test_import_newer_version_warns_but_imports():
    raw = _file([_card("a", "2026-01-01T00:00:00Z")], version=EXPORT_VERSION + 1)
    scorecards, warnings = parse_scorecard_import(raw)
    assert [s["id"] for s in scorecards] == ["a"]
    assert warnings == ["Import file was created by a newer version of the app."]


def test_normalize_names_from_event_name():
    card = normalize_scorecard({"id": "a", "name": "", "data": {"eventName": "Member Guest"}})
    assert card["name"] == "Member Guest"


def test_normalize_untitled_fills_both_names():
    card = normalize_scorecard({"id": "a", "data": {"players": []}})
    assert card["name"] == UNTITLED
    assert card["data"]["eventName"] == UNTITLED


# ─── Merge ───────────────────────────────────────────────────────

def test_merge_adds_new_and_keeps_newer():
    existing = [_card("a", "2026-01-02T00:00:00Z", "old a"), _card("b", "2026-01-05T00:00:00Z", "b")]
    incoming = [
        _card("a", "2026-01-03T00:00:00Z", "new a"),
        _card("b", "2026-01-01T00:00:00Z", "stale b"),
        _card("c", "2026-01-04T00:00:00Z", "c"),
    ]
    merged, added = merge_scorecards(existing, incoming)
    assert added == 1
    assert [(s["id"], s["name"]) for s in merged] == [("b", "b"), ("c", "c"), ("a", "new a")]


def test_merge_unparseable_timestamp_sorts_last():
    merged, _ = merge_scorecards([], [_card("x", "garbage"), _card("y", "2026-01-01T00:00:00Z")])
    assert [s["id"] for s in merged] == ["y", "x"]
