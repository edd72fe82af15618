"""Game State - immutable snapshot of one round and all of its side-game marks.

Invariants:
    - Every dataclass is frozen; mutations build a new Game (see game_mutations.py)
    - HoleScore.par / hole_handicap are copied from the course at game creation
    - strokes == 0 means "not yet played"
    - Mark maps are keyed by int hole number; closest_to_pin / longest_drive map
      to a player id or None ("adjudicated, no winner"); an absent key means
      "not yet adjudicated"

Design Decisions:
    - Frozen dataclasses with tuples for sequences: a snapshot cannot be edited
      behind the orchestrator's back
    - Mark maps stay plain dicts; the orchestrator copies them before writing
"""

from dataclasses import dataclass, field

from tour_scorecard.core.domain_types import HOLES_PER_ROUND


@dataclass(frozen=True)
class CourseHole:
    hole_number: int
    par: int
    handicap: int
    distance: int | None = None
    description: str | None = None


@dataclass(frozen=True)
class Course:
    id: str
    name: str
    holes: tuple[CourseHole, ...]
    total_par: int
    location: str | None = None
    total_distance: int | None = None

    @property
    def hole_numbers(self) -> set[int]:
        return {h.hole_number for h in self.holes}

    def hole(self, hole_number: int) -> CourseHole | None:
        for h in self.holes:
            if h.hole_number == hole_number:
                return h
        return None


@dataclass(frozen=True)
class HoleScore:
    hole_number: int
    par: int
    hole_handicap: int
    strokes: int = 0
    putts: int = 0


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    holes: tuple[HoleScore, ...]
    color: str | None = None
    total_score: int = 0
    total_putts: int = 0
    skins: int = 0

    def hole(self, hole_number: int) -> HoleScore | None:
        for h in self.holes:
            if h.hole_number == hole_number:
                return h
        return None

    def strokes_on(self, hole_number: int) -> int:
        score = self.hole(hole_number)
        return score.strokes if score else 0


@dataclass(frozen=True)
class PlayerSetup:
    """Roster entry supplied when a game starts."""
    id: str
    name: str
    color: str | None = None


@dataclass(frozen=True)
class SideGameMarks:
    """All side-game mark maps of a game."""

    closest_to_pin: dict[int, str | None] = field(default_factory=dict)
    longest_drive: dict[int, str | None] = field(default_factory=dict)
    greenies: dict[int, dict[str, bool]] = field(default_factory=dict)
    fivers: dict[int, dict[str, bool]] = field(default_factory=dict)
    fours: dict[int, dict[str, bool]] = field(default_factory=dict)
    sandies: dict[int, dict[str, bool]] = field(default_factory=dict)
    double_sandies: dict[int, dict[str, bool]] = field(default_factory=dict)
    lost_balls: dict[int, dict[str, bool]] = field(default_factory=dict)
    sandy_holes: dict[int, bool] = field(default_factory=dict)
    lost_ball_holes: dict[int, bool] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not any((
            self.closest_to_pin, self.longest_drive, self.greenies,
            self.fivers, self.fours, self.sandies, self.double_sandies,
            self.lost_balls, self.sandy_holes, self.lost_ball_holes,
        ))

    def has_mark(self, category: str, hole_number: int, player_id: str) -> bool:
        """Whether the per-player mark map `category` holds True for the pair."""
        marks: dict[int, dict[str, bool]] = getattr(self, category)
        return bool(marks.get(hole_number, {}).get(player_id, False))


@dataclass(frozen=True)
class Game:
    """The unit of recomputation: course, players and every mark map."""

    id: str
    date: str
    course: Course
    players: tuple[Player, ...]
    marks: SideGameMarks = field(default_factory=SideGameMarks)
    current_hole: int = 1
    total_holes: int = HOLES_PER_ROUND
    event_name: str | None = None

    @property
    def player_ids(self) -> set[str]:
        return {p.id for p in self.players}

    def player(self, player_id: str) -> Player | None:
        for p in self.players:
            if p.id == player_id:
                return p
        return None


def blank_scores(course: Course) -> tuple[HoleScore, ...]:
    """Zero strokes / putts for every course hole, pars and handicaps copied."""
    return tuple(
        HoleScore(hole_number=h.hole_number, par=h.par, hole_handicap=h.handicap)
        for h in sorted(course.holes, key=lambda h: h.hole_number)
    )
