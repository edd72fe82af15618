"""Eligibility Resolver - which holes are live for each side game, and which marks survive.

Invariants:
    - All functions are PURE and total: unknown holes are ignored, never raised on
    - CTP (par 3) and LD (par 5) run per side: at most one hole per side carries a winner
    - A decision survives only on candidate holes up to and including the side's first winner
    - Greenie holes: par 3s of a side after the first par 3 with a CTP winner
    - Four hole: lowest-handicap par 4 of a side, excluding the side's hardest hole
    - reconcile_marks is a full recompute from course layout + marks, never a patch

Design Decisions:
    - Cascades expressed as set differences: derive the eligible hole set,
      then filter each mark map down to it
    - Hole lists are sorted ascending on every call; the course tuple order is not trusted
"""

from collections.abc import Iterable

from tour_scorecard.core.domain_types import (
    Side, DecisionCategory, MarkCategory, CTP_PAR, FOUR_PAR, FIVER_PAR,
)
from tour_scorecard.core.game_state import CourseHole, SideGameMarks


Decisions = dict[int, str | None]
PlayerMarks = dict[int, dict[str, bool]]


# ─── Course layout ───────────────────────────────────────────────

def side_holes(holes: Iterable[CourseHole], side: Side) -> list[CourseHole]:
    """Holes on `side`, ascending by hole number."""
    return sorted(
        (h for h in holes if side.contains(h.hole_number)),
        key=lambda h: h.hole_number,
    )


def candidate_holes(holes: Iterable[CourseHole], side: Side, par: int) -> list[int]:
    """Hole numbers on `side` with the given par, ascending."""
    return [h.hole_number for h in side_holes(holes, side) if h.par == par]


def lowest_handicap_hole(holes: Iterable[CourseHole], side: Side) -> CourseHole | None:
    """The hardest hole of a side.

    A repeated lowest rank is a course data gap: validate_course reports it and
    custom courses carrying it are refused. Courses that reach scoring anyway
    (remote lookups, stored snapshots) resolve it to the lower hole number so
    the result stays deterministic; the shell logs the gap when it loads them.
    """
    on_side = side_holes(holes, side)
    if not on_side:
        return None
    return min(on_side, key=lambda h: (h.handicap, h.hole_number))


# ─── Single-winner decisions (CTP / LD) ──────────────────────────

def next_open_hole(
    holes: Iterable[CourseHole], decisions: Decisions, side: Side, par: int,
) -> int | None:
    """First candidate still waiting for a decision, or None once a winner is reached."""
    for hole in candidate_holes(holes, side, par):
        if hole not in decisions:
            return hole
        if decisions[hole] is None:
            continue
        return None
    return None


def adjudicable_holes(
    holes: Iterable[CourseHole], decisions: Decisions, side: Side, par: int,
) -> list[int]:
    """Candidates that accept a (re)decision right now.

    Every candidate whose predecessors were all decided "no winner": the
    no-winner prefix plus the hole that ends it (undecided or winner).
    """
    accepted: list[int] = []
    for hole in candidate_holes(holes, side, par):
        accepted.append(hole)
        if hole not in decisions or decisions[hole] is not None:
            break
    return accepted


def active_winner_hole(
    holes: Iterable[CourseHole], decisions: Decisions, side: Side, par: int,
) -> int | None:
    """The hole currently carrying the award for a side, if it has a winner."""
    for hole in candidate_holes(holes, side, par):
        if hole not in decisions:
            return None
        if decisions[hole] is not None:
            return hole
    return None


def retained_decision_holes(
    holes: Iterable[CourseHole], decisions: Decisions, side: Side, par: int,
) -> set[int]:
    """Candidate holes whose decisions survive: everything up to the first winner."""
    kept: set[int] = set()
    for hole in candidate_holes(holes, side, par):
        kept.add(hole)
        if decisions.get(hole) is not None:
            break
    return kept


def decision_holes(
    holes: Iterable[CourseHole], decisions: Decisions, category: DecisionCategory,
) -> set[int]:
    """Retained decision holes for both sides of a category."""
    holes = list(holes)
    return {
        hole
        for side in Side
        for hole in retained_decision_holes(holes, decisions, side, category.par)
    }


# ─── Per-player marks ────────────────────────────────────────────

def greenie_holes_for_side(
    holes: Iterable[CourseHole], closest: Decisions, side: Side,
) -> list[int]:
    par3 = candidate_holes(holes, side, CTP_PAR)
    awarded = next((h for h in par3 if closest.get(h) is not None), None)
    if awarded is None:
        return []
    return [h for h in par3 if h > awarded]


def greenie_holes(holes: Iterable[CourseHole], closest: Decisions) -> list[int]:
    holes = list(holes)
    return [
        *greenie_holes_for_side(holes, closest, Side.FRONT),
        *greenie_holes_for_side(holes, closest, Side.BACK),
    ]


def four_hole_for_side(holes: Iterable[CourseHole], side: Side) -> int | None:
    on_side = side_holes(holes, side)
    hardest = lowest_handicap_hole(on_side, side)
    if hardest is None:
        return None
    par4 = [
        h for h in on_side
        if h.par == FOUR_PAR and h.hole_number != hardest.hole_number
    ]
    if not par4:
        return None
    return min(par4, key=lambda h: (h.handicap, h.hole_number)).hole_number


def four_holes(holes: Iterable[CourseHole]) -> list[int]:
    holes = list(holes)
    found = (four_hole_for_side(holes, side) for side in Side)
    return [h for h in found if h is not None]


def fiver_holes(holes: Iterable[CourseHole]) -> list[int]:
    return sorted(h.hole_number for h in holes if h.par == FIVER_PAR)


def enabled_holes(holes: Iterable[CourseHole], toggles: dict[int, bool]) -> list[int]:
    """Course holes whose hole-level toggle is on."""
    return sorted(h.hole_number for h in holes if toggles.get(h.hole_number))


def eligible_mark_holes(
    holes: Iterable[CourseHole], marks: SideGameMarks, category: MarkCategory,
) -> set[int]:
    """Holes on which a per-player mark of `category` may currently be recorded."""
    holes = list(holes)
    if category is MarkCategory.GREENIE:
        return set(greenie_holes(holes, marks.closest_to_pin))
    if category is MarkCategory.FIVER:
        return set(fiver_holes(holes))
    if category is MarkCategory.FOUR:
        return set(four_holes(holes))
    if category in (MarkCategory.SANDY, MarkCategory.DOUBLE_SANDY):
        return set(enabled_holes(holes, marks.sandy_holes))
    return set(enabled_holes(holes, marks.lost_ball_holes))


# ─── Reconciliation ──────────────────────────────────────────────

def _retain_holes(marks: PlayerMarks, eligible: set[int]) -> PlayerMarks:
    """Keep only true marks on eligible holes; empty hole entries are dropped."""
    kept: PlayerMarks = {}
    for hole, by_player in marks.items():
        if hole not in eligible:
            continue
        on = {pid: True for pid, value in by_player.items() if value}
        if on:
            kept[hole] = on
    return kept


def _retain_pairs(marks: PlayerMarks, required: PlayerMarks) -> PlayerMarks:
    """Keep only (hole, player) marks that also exist in `required`."""
    kept: PlayerMarks = {}
    for hole, by_player in marks.items():
        on = {
            pid: True for pid, value in by_player.items()
            if value and required.get(hole, {}).get(pid)
        }
        if on:
            kept[hole] = on
    return kept


def reconcile_marks(holes: Iterable[CourseHole], marks: SideGameMarks) -> SideGameMarks:
    """Recompute every eligible hole set and drop the marks that fell outside it."""
    holes = list(holes)

    ctp_kept = decision_holes(holes, marks.closest_to_pin, DecisionCategory.CLOSEST_TO_PIN)
    ld_kept = decision_holes(holes, marks.longest_drive, DecisionCategory.LONGEST_DRIVE)
    closest = {h: w for h, w in marks.closest_to_pin.items() if h in ctp_kept}
    longest = {h: w for h, w in marks.longest_drive.items() if h in ld_kept}

    sandy_holes = {h: True for h in enabled_holes(holes, marks.sandy_holes)}
    lost_ball_holes = {h: True for h in enabled_holes(holes, marks.lost_ball_holes)}

    sandies = _retain_holes(marks.sandies, set(sandy_holes))
    double_sandies = _retain_pairs(
        _retain_holes(marks.double_sandies, set(sandy_holes)), sandies,
    )

    return SideGameMarks(
        closest_to_pin=closest,
        longest_drive=longest,
        greenies=_retain_holes(marks.greenies, set(greenie_holes(holes, closest))),
        fivers=_retain_holes(marks.fivers, set(fiver_holes(holes))),
        fours=_retain_holes(marks.fours, set(four_holes(holes))),
        sandies=sandies,
        double_sandies=double_sandies,
        lost_balls=_retain_holes(marks.lost_balls, set(lost_ball_holes)),
        sandy_holes=sandy_holes,
        lost_ball_holes=lost_ball_holes,
    )


# ─── Read model ──────────────────────────────────────────────────

def describe_eligibility(holes: Iterable[CourseHole], marks: SideGameMarks) -> dict:
    """JSON-safe summary of every category's live holes, per side where relevant."""
    holes = list(holes)
    decisions: dict[str, dict] = {}
    for category in DecisionCategory:
        recorded: Decisions = getattr(marks, category.value)
        decisions[category.value] = {
            side.value: {
                "candidates": candidate_holes(holes, side, category.par),
                "open_hole": next_open_hole(holes, recorded, side, category.par),
                "adjudicable": adjudicable_holes(holes, recorded, side, category.par),
                "winner_hole": active_winner_hole(holes, recorded, side, category.par),
            }
            for side in Side
        }
    return {
        **decisions,
        MarkCategory.GREENIE.value: greenie_holes(holes, marks.closest_to_pin),
        MarkCategory.FIVER.value: fiver_holes(holes),
        MarkCategory.FOUR.value: four_holes(holes),
        MarkCategory.SANDY.value: enabled_holes(holes, marks.sandy_holes),
        MarkCategory.LOST_BALL.value: enabled_holes(holes, marks.lost_ball_holes),
    }
