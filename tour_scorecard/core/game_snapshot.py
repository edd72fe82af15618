"""Game Snapshot - serialization / deserialization of a Game for persistence.

Invariants:
    - game_to_snapshot produces a JSON-safe dict: camelCase keys, every mark map
      keyed by the stringified hole number
    - game_from_snapshot reconstructs the exact Game (round-trips verbatim)
    - Missing keys fall back to defaults (forward-compatible with older saves)
    - Keys that are not hole numbers are skipped, never raised on

Design Decisions:
    - Shape matches the scorecard files the web client already stores, so saved
      games and exported scorecards need no migration
    - Bulk key mappings keep the ten mark maps DRY
"""

from tour_scorecard.core.game_state import (
    Course, CourseHole, Game, HoleScore, Player, SideGameMarks,
)

# SideGameMarks field -> snapshot key
_DECISION_KEYS: dict[str, str] = {
    "closest_to_pin": "closestToPin",
    "longest_drive": "longestDrive",
}
_PLAYER_MARK_KEYS: dict[str, str] = {
    "greenies": "greenies",
    "fivers": "fivers",
    "fours": "fours",
    "sandies": "sandies",
    "double_sandies": "doubleSandies",
    "lost_balls": "lostBalls",
}
_TOGGLE_KEYS: dict[str, str] = {
    "sandy_holes": "sandyHoles",
    "lost_ball_holes": "lostBallHoles",
}


def _hole_key(raw: object) -> int | None:
    try:
        return int(raw)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return None


# ─── Course ──────────────────────────────────────────────────────

def course_to_snapshot(course: Course) -> dict:
    data: dict = {
        "id": course.id,
        "name": course.name,
        "totalPar": course.total_par,
        "holes": [
            {
                "holeNumber": h.hole_number,
                "par": h.par,
                "handicap": h.handicap,
                **({"distance": h.distance} if h.distance is not None else {}),
                **({"description": h.description} if h.description is not None else {}),
            }
            for h in course.holes
        ],
    }
    if course.location is not None:
        data["location"] = course.location
    if course.total_distance is not None:
        data["totalDistance"] = course.total_distance
    return data


def course_from_snapshot(data: dict) -> Course:
    holes = tuple(
        CourseHole(
            hole_number=int(h["holeNumber"]),
            par=int(h["par"]),
            handicap=int(h["handicap"]),
            distance=h.get("distance"),
            description=h.get("description"),
        )
        for h in data.get("holes", [])
    )
    return Course(
        id=str(data.get("id", "")),
        name=str(data.get("name", "")),
        holes=holes,
        total_par=int(data.get("totalPar", sum(h.par for h in holes))),
        location=data.get("location"),
        total_distance=data.get("totalDistance"),
    )


# ─── Players ─────────────────────────────────────────────────────

def _player_to_snapshot(player: Player) -> dict:
    data: dict = {
        "id": player.id,
        "name": player.name,
        "totalScore": player.total_score,
        "totalPutts": player.total_putts,
        "skins": player.skins,
        "holes": [
            {
                "holeNumber": h.hole_number,
                "strokes": h.strokes,
                "putts": h.putts,
                "par": h.par,
                "holeHandicap": h.hole_handicap,
            }
            for h in player.holes
        ],
    }
    if player.color is not None:
        data["color"] = player.color
    return data


def _player_from_snapshot(data: dict) -> Player:
    return Player(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        color=data.get("color"),
        total_score=int(data.get("totalScore", 0)),
        total_putts=int(data.get("totalPutts", 0)),
        skins=int(data.get("skins", 0)),
        holes=tuple(
            HoleScore(
                hole_number=int(h["holeNumber"]),
                strokes=int(h.get("strokes", 0)),
                putts=int(h.get("putts", 0)),
                par=int(h.get("par", 0)),
                hole_handicap=int(h.get("holeHandicap", 0)),
            )
            for h in data.get("holes", [])
        ),
    )


# ─── Marks ───────────────────────────────────────────────────────

def marks_to_snapshot(marks: SideGameMarks) -> dict:
    data: dict = {}
    for attr, key in _DECISION_KEYS.items():
        data[key] = {str(h): w for h, w in getattr(marks, attr).items()}
    for attr, key in _PLAYER_MARK_KEYS.items():
        data[key] = {
            str(h): dict(by_player) for h, by_player in getattr(marks, attr).items()
        }
    for attr, key in _TOGGLE_KEYS.items():
        data[key] = {str(h): v for h, v in getattr(marks, attr).items()}
    return data


def _by_hole(raw_map: dict | None, convert) -> dict:
    """Re-key a snapshot map by int hole number, dropping unparseable keys."""
    result: dict = {}
    for raw, value in (raw_map or {}).items():
        hole = _hole_key(raw)
        if hole is not None:
            result[hole] = convert(value)
    return result


def marks_from_snapshot(data: dict) -> SideGameMarks:
    fields: dict = {}
    for attr, key in _DECISION_KEYS.items():
        fields[attr] = _by_hole(data.get(key), lambda w: None if w is None else str(w))
    for attr, key in _PLAYER_MARK_KEYS.items():
        fields[attr] = _by_hole(
            data.get(key),
            lambda by_player: {str(pid): bool(v) for pid, v in (by_player or {}).items()},
        )
    for attr, key in _TOGGLE_KEYS.items():
        fields[attr] = _by_hole(data.get(key), bool)
    return SideGameMarks(**fields)


# ─── Game ────────────────────────────────────────────────────────

def game_to_snapshot(game: Game) -> dict:
    """Serialize a Game to a JSON-safe dict. Pure, no IO."""
    data = {
        "id": game.id,
        "date": game.date,
        "course": course_to_snapshot(game.course),
        "players": [_player_to_snapshot(p) for p in game.players],
        "currentHole": game.current_hole,
        "totalHoles": game.total_holes,
        **marks_to_snapshot(game.marks),
    }
    if game.event_name is not None:
        data["eventName"] = game.event_name
    return data


def game_from_snapshot(data: dict) -> Game:
    """Reconstruct a Game from a snapshot dict. Pure, no IO.

    Stored skins are taken as-is; call game_mutations.recompute to re-derive.
    """
    return Game(
        id=str(data["id"]),
        date=str(data.get("date", "")),
        course=course_from_snapshot(data.get("course") or {}),
        players=tuple(_player_from_snapshot(p) for p in data.get("players", [])),
        marks=marks_from_snapshot(data),
        current_hole=int(data.get("currentHole", 1)),
        total_holes=int(data.get("totalHoles", 18)),
        event_name=data.get("eventName"),
    )
