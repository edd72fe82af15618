"""Skins Calculator - pure recomputation of every player's skins total.

Invariants:
    - compute_skins is PURE and deterministic: same snapshot in, same totals out
    - Only Player.skins is overwritten; every other player field passes through
    - strokes == 0 is "not yet played" and never scores
    - Ties award nobody; points are never split
    - Marks are trusted as already reconciled; unknown holes / players are skipped

Design Decisions:
    - Per-category breakdown computed first, total is its sum: the same numbers
      back both the scorecard total and the per-category read model
"""

from collections.abc import Iterable
from dataclasses import dataclass, fields, replace

from tour_scorecard.core.domain_types import (
    Side, DecisionCategory, MarkCategory, WIN_BONUS_MAX_OVER_PAR,
)
from tour_scorecard.core.eligibility import active_winner_hole, lowest_handicap_hole
from tour_scorecard.core.game_state import CourseHole, Player, SideGameMarks


@dataclass
class SkinsBreakdown:
    """Points per category for one player."""
    low_score: int = 0
    birdies: int = 0
    handicap_hole: int = 0
    closest_to_pin: int = 0
    longest_drive: int = 0
    greenies: int = 0
    fivers: int = 0
    fours: int = 0
    sandies: int = 0
    double_sandies: int = 0
    lost_balls: int = 0

    @property
    def total(self) -> int:
        return sum(getattr(self, f.name) for f in fields(self))

    def to_dict(self) -> dict:
        return {**{f.name: getattr(self, f.name) for f in fields(self)}, "total": self.total}


def birdie_bonus(strokes: int, par: int) -> int:
    """2 for eagle or better, 1 for birdie, else 0. Unplayed holes score 0."""
    if strokes <= 0:
        return 0
    if strokes <= par - 2:
        return 2
    if strokes == par - 1:
        return 1
    return 0


def hole_winner(players: Iterable[Player], hole: CourseHole) -> str | None:
    """Player id holding the un-tied low score within par + 2, else None."""
    played = [
        (p.id, p.strokes_on(hole.hole_number)) for p in players
        if p.strokes_on(hole.hole_number) > 0
    ]
    if not played:
        return None
    low = min(strokes for _, strokes in played)
    leaders = [pid for pid, strokes in played if strokes == low]
    if len(leaders) != 1 or low > hole.par + WIN_BONUS_MAX_OVER_PAR:
        return None
    return leaders[0]


def _score_holes(
    players: tuple[Player, ...], holes: list[CourseHole], board: dict[str, SkinsBreakdown],
) -> None:
    for hole in holes:
        for p in players:
            board[p.id].birdies += birdie_bonus(p.strokes_on(hole.hole_number), hole.par)
        winner = hole_winner(players, hole)
        if winner is not None:
            board[winner].low_score += 1


def _score_handicap_holes(
    players: tuple[Player, ...], holes: list[CourseHole], board: dict[str, SkinsBreakdown],
) -> None:
    for side in Side:
        hardest = lowest_handicap_hole(holes, side)
        if hardest is None:
            continue
        for p in players:
            strokes = p.strokes_on(hardest.hole_number)
            if 0 < strokes <= hardest.par:
                board[p.id].handicap_hole += 1


def _score_decisions(
    holes: list[CourseHole], marks: SideGameMarks, board: dict[str, SkinsBreakdown],
) -> None:
    for category in DecisionCategory:
        decisions: dict[int, str | None] = getattr(marks, category.value)
        for side in Side:
            hole = active_winner_hole(holes, decisions, side, category.par)
            if hole is None:
                continue
            winner = decisions[hole]
            if winner in board:
                setattr(board[winner], category.value, getattr(board[winner], category.value) + 1)


def _score_marks(
    holes: list[CourseHole], marks: SideGameMarks, board: dict[str, SkinsBreakdown],
) -> None:
    course_holes = {h.hole_number for h in holes}
    for category in MarkCategory:
        by_hole: dict[int, dict[str, bool]] = getattr(marks, category.value)
        for hole_number, by_player in by_hole.items():
            if hole_number not in course_holes:
                continue
            for pid, marked in by_player.items():
                if marked and pid in board:
                    setattr(board[pid], category.value, getattr(board[pid], category.value) + 1)


def skins_breakdown(
    players: Iterable[Player], course_holes: Iterable[CourseHole], marks: SideGameMarks,
) -> dict[str, SkinsBreakdown]:
    """Per-category points for every player id."""
    players = tuple(players)
    holes = sorted(course_holes, key=lambda h: h.hole_number)
    board = {p.id: SkinsBreakdown() for p in players}

    _score_holes(players, holes, board)
    _score_handicap_holes(players, holes, board)
    _score_decisions(holes, marks, board)
    _score_marks(holes, marks, board)
    return board


def compute_skins(
    players: Iterable[Player], course_holes: Iterable[CourseHole], marks: SideGameMarks,
) -> tuple[Player, ...]:
    """Players with `skins` overwritten by the sum of every category."""
    players = tuple(players)
    board = skins_breakdown(players, course_holes, marks)
    return tuple(replace(p, skins=board[p.id].total) for p in players)
