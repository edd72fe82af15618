"""Scorecard Archive - export file building, import parsing and merge of saved scorecards.

Invariants:
    - parse_scorecard_import never raises: every problem becomes a warning string
    - A scorecard without a string id or an object of game data is dropped on
      import, with one warning naming its position in the file
    - merge_scorecards: existing ids replaced only by a strictly newer updatedAt;
      result sorted newest first
    - Scorecards stay JSON-shaped dicts ({id, name, createdAt, updatedAt, data})

Design Decisions:
    - Dicts, not dataclasses: the scorecard payload is an opaque game snapshot
      that this module never interprets beyond the event name
"""

import json
from datetime import datetime, timezone


EXPORT_SCHEMA: str = "the-tour-scorecard"
EXPORT_VERSION: int = 1
UNTITLED: str = "Untitled Scorecard"


def _parse_time(raw: object) -> datetime:
    """ISO timestamp -> aware datetime; unparseable values sort oldest."""
    try:
        parsed = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_scorecard(scorecard: dict) -> dict:
    """Fill in the event name / scorecard name from each other."""
    raw_data = scorecard.get("data")
    data = dict(raw_data) if isinstance(raw_data, dict) else {}
    name = scorecard.get("name")
    name = name.strip() if isinstance(name, str) else ""
    if data and not data.get("eventName"):
        data["eventName"] = name or UNTITLED
    event_name = data.get("eventName")
    return {
        **scorecard,
        "name": name or (event_name if isinstance(event_name, str) else "") or UNTITLED,
        "data": data,
    }


def build_export_file(scorecards: list[dict], exported_at: datetime) -> dict:
    return {
        "schema": EXPORT_SCHEMA,
        "version": EXPORT_VERSION,
        "exportedAt": exported_at.isoformat(),
        "scorecards": scorecards,
    }


def _importable(scorecard: object) -> bool:
    return (
        isinstance(scorecard, dict)
        and isinstance(scorecard.get("id"), str) and bool(scorecard["id"])
        and isinstance(scorecard.get("data"), dict) and bool(scorecard["data"])
    )


def parse_scorecard_import(raw: str) -> tuple[list[dict], list[str]]:
    """Parse an export file. Returns (scorecards, warnings)."""
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return [], ["Import file is not valid JSON."]

    if not isinstance(parsed, dict):
        return [], ["Import file format is not recognized."]

    if parsed.get("schema") != EXPORT_SCHEMA or not isinstance(parsed.get("scorecards"), list):
        return [], ["Import file is missing scorecards data."]

    warnings: list[str] = []
    scorecards: list[dict] = []
    for position, s in enumerate(parsed["scorecards"], start=1):
        if _importable(s):
            scorecards.append(normalize_scorecard(s))
        else:
            warnings.append(f"Scorecard {position} skipped: missing id or game data.")
    if not scorecards:
        warnings.append("No valid scorecards found in the import.")

    version = parsed.get("version")
    if isinstance(version, int) and version > EXPORT_VERSION:
        warnings.append("Import file was created by a newer version of the app.")

    return scorecards, warnings


def merge_scorecards(
    existing: list[dict], incoming: list[dict],
) -> tuple[list[dict], int]:
    """Merge by id; returns (merged newest-first, number of new ids)."""
    merged = {s["id"]: s for s in existing}
    added = 0
    for scorecard in incoming:
        current = merged.get(scorecard["id"])
        if current is None:
            merged[scorecard["id"]] = scorecard
            added += 1
        elif _parse_time(scorecard.get("updatedAt")) > _parse_time(current.get("updatedAt")):
            merged[scorecard["id"]] = scorecard
    ordered = sorted(
        merged.values(), key=lambda s: _parse_time(s.get("updatedAt")), reverse=True,
    )
    return ordered, added
