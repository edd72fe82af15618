"""Mark Enforcement - no-op guards checked before any game mutation is applied.

Invariants:
    - All functions are PURE: no IO, no side effects
    - Return a rejection dict on violation, None when the operation applies
    - validate_* chains checks: first rejection wins
    - A rejection is "not applicable", not a failure: the orchestrator returns
      the input game unchanged

Design Decisions:
    - Return dicts (not exceptions): the shell forwards them to the API caller
      as-is, keeping the rejected path identical in shape to the applied path
"""

from tour_scorecard.core.domain_types import DecisionCategory, MarkCategory, Side
from tour_scorecard.core.eligibility import adjudicable_holes, eligible_mark_holes
from tour_scorecard.core.game_state import Game


def _reject(error_code: str, message: str, **details: object) -> dict:
    return {"status": "rejected", "error_code": error_code, "message": message, **details}


# ─── Identity checks ─────────────────────────────────────────────

def check_hole_known(game: Game, hole_number: int) -> dict | None:
    if game.course.hole(hole_number) is None:
        return _reject(
            "UNKNOWN_HOLE",
            f"Hole {hole_number} is not on {game.course.name}.",
            hole_number=hole_number,
        )
    return None


def check_player_known(game: Game, player_id: str) -> dict | None:
    if game.player(player_id) is None:
        return _reject(
            "UNKNOWN_PLAYER",
            f"Player '{player_id}' is not in this game.",
            player_id=player_id,
        )
    return None


def check_score_values(strokes: int, putts: int | None) -> dict | None:
    if strokes < 0 or (putts is not None and putts < 0):
        return _reject(
            "NEGATIVE_SCORE",
            "Strokes and putts must be zero or more.",
            strokes=strokes, putts=putts,
        )
    return None


# ─── Category checks ─────────────────────────────────────────────

def check_decision_adjudicable(
    game: Game, category: DecisionCategory, hole_number: int,
) -> dict | None:
    """A CTP / LD decision may only land on a hole that is live for its side."""
    decisions = getattr(game.marks, category.value)
    for side in Side:
        if not side.contains(hole_number):
            continue
        live = adjudicable_holes(game.course.holes, decisions, side, category.par)
        if hole_number in live:
            return None
        return _reject(
            "HOLE_NOT_ADJUDICABLE",
            f"Hole {hole_number} does not accept a {category.value} decision "
            f"(live holes on the {side.value} side: {live}).",
            hole_number=hole_number, live_holes=live,
        )
    return _reject(
        "HOLE_NOT_ADJUDICABLE",
        f"Hole {hole_number} is outside both sides.",
        hole_number=hole_number, live_holes=[],
    )


def check_decision_recorded(
    game: Game, category: DecisionCategory, hole_number: int,
) -> dict | None:
    if hole_number not in getattr(game.marks, category.value):
        return _reject(
            "NO_DECISION",
            f"Hole {hole_number} has no {category.value} decision to clear.",
            hole_number=hole_number,
        )
    return None


def check_mark_eligible(
    game: Game, category: MarkCategory, hole_number: int,
) -> dict | None:
    """Greenie / fiver / four / sandy / lost-ball marks need an eligible hole."""
    eligible = eligible_mark_holes(game.course.holes, game.marks, category)
    if hole_number not in eligible:
        return _reject(
            "HOLE_NOT_ELIGIBLE",
            f"Hole {hole_number} is not eligible for {category.value}.",
            hole_number=hole_number, eligible_holes=sorted(eligible),
        )
    return None


def check_sandy_held(game: Game, hole_number: int, player_id: str) -> dict | None:
    """A double sandy stacks on a sandy the same player already holds."""
    if not game.marks.has_mark(MarkCategory.SANDY.value, hole_number, player_id):
        return _reject(
            "SANDY_REQUIRED",
            f"Player '{player_id}' has no sandy on hole {hole_number}.",
            hole_number=hole_number, player_id=player_id,
        )
    return None


def check_hole_in_round(game: Game, hole_number: int) -> dict | None:
    if not 1 <= hole_number <= game.total_holes:
        return _reject(
            "HOLE_OUT_OF_RANGE",
            f"Hole {hole_number} is outside 1..{game.total_holes}.",
            hole_number=hole_number,
        )
    return None


# ─── Chains ──────────────────────────────────────────────────────

def validate_score(
    game: Game, player_id: str, hole_number: int, strokes: int, putts: int | None,
) -> dict | None:
    return (
        check_player_known(game, player_id)
        or check_hole_known(game, hole_number)
        or check_score_values(strokes, putts)
    )


def validate_decision(
    game: Game, category: DecisionCategory, hole_number: int, player_id: str | None,
) -> dict | None:
    return (
        check_hole_known(game, hole_number)
        or (check_player_known(game, player_id) if player_id is not None else None)
        or check_decision_adjudicable(game, category, hole_number)
    )


def validate_mark(
    game: Game, category: MarkCategory, hole_number: int, player_id: str, value: bool,
) -> dict | None:
    """Chain for per-player marks. Clearing a double sandy needs no sandy."""
    error = (
        check_player_known(game, player_id)
        or check_hole_known(game, hole_number)
        or check_mark_eligible(game, category, hole_number)
    )
    if error or category is not MarkCategory.DOUBLE_SANDY or not value:
        return error
    return check_sandy_held(game, hole_number, player_id)


def validate_clear_decision(
    game: Game, category: DecisionCategory, hole_number: int,
) -> dict | None:
    return (
        check_hole_known(game, hole_number)
        or check_decision_recorded(game, category, hole_number)
    )
