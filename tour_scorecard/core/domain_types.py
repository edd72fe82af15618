"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - PlayerId, GameId, CourseId wrap str (stable for the game's lifetime)
    - HoleNumber is 1..18; handicap ranks are 1..18 (1 = hardest)
    - All valid categories encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

PlayerId = NewType("PlayerId", str)
GameId = NewType("GameId", str)
CourseId = NewType("CourseId", str)


# ─── Value Types ─────────────────────────────────────────────────

HoleNumber = NewType("HoleNumber", int)     # 1..18
HandicapRank = NewType("HandicapRank", int)  # 1..18, 1 = hardest


# ─── Constants ───────────────────────────────────────────────────

HOLES_PER_ROUND: int = 18
CTP_PAR: int = 3
LONGEST_DRIVE_PAR: int = 5
FOUR_PAR: int = 4
FIVER_PAR: int = 5
# Win bonus only counts for a low score no worse than double bogey
WIN_BONUS_MAX_OVER_PAR: int = 2


# ─── Enums ───────────────────────────────────────────────────────

class Side(str, Enum):
    """The two independently administered nines."""
    FRONT = "front"
    BACK = "back"

    @property
    def hole_range(self) -> tuple[int, int]:
        """Inclusive (first, last) hole numbers of this side."""
        return (1, 9) if self is Side.FRONT else (10, 18)

    def contains(self, hole_number: int) -> bool:
        first, last = self.hole_range
        return first <= hole_number <= last


class DecisionCategory(str, Enum):
    """Side games adjudicated once per side (single winner)."""
    CLOSEST_TO_PIN = "closest_to_pin"
    LONGEST_DRIVE = "longest_drive"

    @property
    def par(self) -> int:
        return CTP_PAR if self is DecisionCategory.CLOSEST_TO_PIN else LONGEST_DRIVE_PAR


class MarkCategory(str, Enum):
    """Per-player opt-in marks, one point each."""
    GREENIE = "greenies"
    FIVER = "fivers"
    FOUR = "fours"
    SANDY = "sandies"
    DOUBLE_SANDY = "double_sandies"
    LOST_BALL = "lost_balls"


class HoleToggle(str, Enum):
    """Hole-level switches gating whether a per-player mark is meaningful."""
    SANDY = "sandy_holes"
    LOST_BALL = "lost_ball_holes"
