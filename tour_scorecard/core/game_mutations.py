"""Mutation Orchestrator - the closed set of operations that move a Game forward.

Invariants:
    - Every operation is PURE: takes a Game, returns a new Game, never mutates input
    - A rejected operation (see enforce_marks.py) returns the input object itself
    - Every applied operation ends in _commit: reconcile_marks, then compute_skins,
      so no partially derived Game is ever returned
    - Operations take explicit values (not flips): repeating a call is idempotent

Design Decisions:
    - Cascades are not patched per operation; the raw write is followed by a full
      reconcile so out-of-order edits (earlier CTP after later greenies) stay consistent
    - Only clear_* removes later decisions itself: the removed hole leaves no winner
      for the retained-hole rule to stop at
"""

from collections.abc import Iterable
from dataclasses import replace

from tour_scorecard.core.domain_types import DecisionCategory, MarkCategory, HoleToggle, Side
from tour_scorecard.core.eligibility import candidate_holes, reconcile_marks
from tour_scorecard.core.enforce_marks import (
    validate_score, validate_decision, validate_mark,
    validate_clear_decision, check_hole_known, check_hole_in_round,
)
from tour_scorecard.core.game_state import (
    Course, Game, Player, PlayerSetup, SideGameMarks, blank_scores,
)
from tour_scorecard.core.skins import compute_skins


PlayerMarks = dict[int, dict[str, bool]]


# ─── Commit ──────────────────────────────────────────────────────

def _commit(
    game: Game,
    *,
    course: Course | None = None,
    players: tuple[Player, ...] | None = None,
    marks: SideGameMarks | None = None,
    **changes: object,
) -> Game:
    """Reconcile marks and recompute skins for the raw next state."""
    course = course or game.course
    marks = reconcile_marks(course.holes, game.marks if marks is None else marks)
    players = compute_skins(
        game.players if players is None else players, course.holes, marks,
    )
    return replace(game, course=course, players=players, marks=marks, **changes)


def recompute(game: Game) -> Game:
    """Full recompute of derived state, e.g. after loading a snapshot."""
    return _commit(game)


# ─── Map writers (copy-on-write) ─────────────────────────────────

def _write_mark(marks: PlayerMarks, hole: int, player_id: str, value: bool) -> PlayerMarks:
    updated = {h: dict(by_player) for h, by_player in marks.items()}
    by_player = updated.setdefault(hole, {})
    if value:
        by_player[player_id] = True
    else:
        by_player.pop(player_id, None)
    if not by_player:
        del updated[hole]
    return updated


def _write_toggle(toggles: dict[int, bool], hole: int, value: bool) -> dict[int, bool]:
    updated = dict(toggles)
    if value:
        updated[hole] = True
    else:
        updated.pop(hole, None)
    return updated


# ─── Lifecycle ───────────────────────────────────────────────────

def start_game(
    game_id: str,
    date: str,
    course: Course,
    roster: Iterable[PlayerSetup],
    event_name: str | None = None,
) -> Game:
    """Fresh game: zero strokes against the course, every mark map empty."""
    players = tuple(
        Player(id=p.id, name=p.name, color=p.color, holes=blank_scores(course))
        for p in roster
    )
    game = Game(
        id=game_id, date=date, course=course, players=players,
        event_name=event_name,
    )
    return _commit(game)


def change_course(game: Game, course: Course) -> Game:
    """Swap the course: every score reset, every mark map cleared."""
    players = tuple(
        replace(p, holes=blank_scores(course), total_score=0, total_putts=0)
        for p in game.players
    )
    return _commit(
        game, course=course, players=players, marks=SideGameMarks(), current_hole=1,
    )


def set_current_hole(game: Game, hole_number: int) -> Game:
    if check_hole_in_round(game, hole_number):
        return game
    return replace(game, current_hole=hole_number)


# ─── Scores ──────────────────────────────────────────────────────

def record_score(
    game: Game, player_id: str, hole_number: int, strokes: int, putts: int | None = None,
) -> Game:
    """Overwrite one player's strokes (and putts) on one hole; totals re-summed."""
    if validate_score(game, player_id, hole_number, strokes, putts):
        return game

    def _rescored(player: Player) -> Player:
        holes = tuple(
            replace(h, strokes=strokes, putts=h.putts if putts is None else putts)
            if h.hole_number == hole_number else h
            for h in player.holes
        )
        return replace(
            player,
            holes=holes,
            total_score=sum(h.strokes for h in holes),
            total_putts=sum(h.putts for h in holes),
        )

    players = tuple(
        _rescored(p) if p.id == player_id else p for p in game.players
    )
    return _commit(game, players=players)


# ─── Single-winner decisions ─────────────────────────────────────

def _set_decision(
    game: Game, category: DecisionCategory, hole_number: int, player_id: str | None,
) -> Game:
    if validate_decision(game, category, hole_number, player_id):
        return game
    decisions = dict(getattr(game.marks, category.value))
    decisions[hole_number] = player_id
    return _commit(game, marks=replace(game.marks, **{category.value: decisions}))


def _clear_decision(game: Game, category: DecisionCategory, hole_number: int) -> Game:
    if validate_clear_decision(game, category, hole_number):
        return game
    side = Side.FRONT if Side.FRONT.contains(hole_number) else Side.BACK
    dropped = {
        h for h in candidate_holes(game.course.holes, side, category.par)
        if h >= hole_number
    } | {hole_number}
    decisions = {
        h: winner for h, winner in getattr(game.marks, category.value).items()
        if h not in dropped
    }
    return _commit(game, marks=replace(game.marks, **{category.value: decisions}))


def set_closest_to_pin(game: Game, hole_number: int, player_id: str | None) -> Game:
    """Record the CTP winner (or None: no qualifying winner) for a par 3."""
    return _set_decision(game, DecisionCategory.CLOSEST_TO_PIN, hole_number, player_id)


def clear_closest_to_pin(game: Game, hole_number: int) -> Game:
    """Un-adjudicate a par 3; later decisions on its side go with it."""
    return _clear_decision(game, DecisionCategory.CLOSEST_TO_PIN, hole_number)


def set_longest_drive(game: Game, hole_number: int, player_id: str | None) -> Game:
    return _set_decision(game, DecisionCategory.LONGEST_DRIVE, hole_number, player_id)


def clear_longest_drive(game: Game, hole_number: int) -> Game:
    return _clear_decision(game, DecisionCategory.LONGEST_DRIVE, hole_number)


# ─── Per-player marks ────────────────────────────────────────────

def _toggle_mark(
    game: Game, category: MarkCategory, hole_number: int, player_id: str, value: bool,
) -> Game:
    if validate_mark(game, category, hole_number, player_id, value):
        return game
    marks = _write_mark(getattr(game.marks, category.value), hole_number, player_id, value)
    return _commit(game, marks=replace(game.marks, **{category.value: marks}))


def toggle_greenie(game: Game, hole_number: int, player_id: str, value: bool) -> Game:
    return _toggle_mark(game, MarkCategory.GREENIE, hole_number, player_id, value)


def toggle_fiver(game: Game, hole_number: int, player_id: str, value: bool) -> Game:
    return _toggle_mark(game, MarkCategory.FIVER, hole_number, player_id, value)


def toggle_four(game: Game, hole_number: int, player_id: str, value: bool) -> Game:
    return _toggle_mark(game, MarkCategory.FOUR, hole_number, player_id, value)


def toggle_sandy(game: Game, hole_number: int, player_id: str, value: bool) -> Game:
    """Turning a sandy off also drops that player's double sandy (via reconcile)."""
    return _toggle_mark(game, MarkCategory.SANDY, hole_number, player_id, value)


def toggle_double_sandy(game: Game, hole_number: int, player_id: str, value: bool) -> Game:
    return _toggle_mark(game, MarkCategory.DOUBLE_SANDY, hole_number, player_id, value)


def toggle_lost_ball(game: Game, hole_number: int, player_id: str, value: bool) -> Game:
    return _toggle_mark(game, MarkCategory.LOST_BALL, hole_number, player_id, value)


# ─── Hole-level toggles ──────────────────────────────────────────

def _toggle_hole(game: Game, toggle: HoleToggle, hole_number: int, value: bool) -> Game:
    if check_hole_known(game, hole_number):
        return game
    toggles = _write_toggle(getattr(game.marks, toggle.value), hole_number, value)
    return _commit(game, marks=replace(game.marks, **{toggle.value: toggles}))


def toggle_sandy_hole(game: Game, hole_number: int, value: bool) -> Game:
    """Turning a sandy hole off deletes its sandy and double-sandy marks."""
    return _toggle_hole(game, HoleToggle.SANDY, hole_number, value)


def toggle_lost_ball_hole(game: Game, hole_number: int, value: bool) -> Game:
    return _toggle_hole(game, HoleToggle.LOST_BALL, hole_number, value)
