"""Core test fixtures - a synthetic course whose layout makes every rule visible.

Layout (same pattern on both sides, odd handicaps front, even back):

    hole   1  2  3  4  5  6  7  8  9 | 10 11 12 13 14 15 16 17 18
    par    4  3  5  4  3  4  5  3  4 |  4  3  5  4  3  4  5  3  4
    hcp    1 17  5  3 13  9 11 15  7 |  2 18  6  4 14 10 12 16  8

    CTP candidates: front 2, 5, 8 / back 11, 14, 17
    LD candidates:  front 3, 7    / back 12, 16
    Hardest hole:   front 1       / back 10
    Four hole:      front 4       / back 13
"""

import pytest

from tour_scorecard.core.game_mutations import start_game
from tour_scorecard.core.game_state import Course, CourseHole, PlayerSetup

PARS = (4, 3, 5, 4, 3, 4, 5, 3, 4)
FRONT_HCP = (1, 17, 5, 3, 13, 9, 11, 15, 7)
BACK_HCP = (2, 18, 6, 4, 14, 10, 12, 16, 8)


def _holes() -> tuple[CourseHole, ...]:
    front = [
        CourseHole(hole_number=i + 1, par=PARS[i], handicap=FRONT_HCP[i])
        for i in range(9)
    ]
    back = [
        CourseHole(hole_number=i + 10, par=PARS[i], handicap=BACK_HCP[i])
        for i in range(9)
    ]
    return tuple(front + back)


@pytest.fixture
def course() -> Course:
    holes = _holes()
    return Course(
        id="test-links", name="Test Links", holes=holes,
        total_par=sum(h.par for h in holes), location="Testville",
    )


@pytest.fixture
def other_course() -> Course:
    """Every hole a par 4, handicap == hole number."""
    holes = tuple(CourseHole(hole_number=n, par=4, handicap=n) for n in range(1, 19))
    return Course(id="flat-links", name="Flat Links", holes=holes, total_par=72)


@pytest.fixture
def game(course):
    """Two players, nothing played."""
    return start_game(
        game_id="g1", date="2026-05-01", course=course,
        roster=[PlayerSetup(id="p1", name="Ana"), PlayerSetup(id="p2", name="Ben")],
        event_name="Saturday Skins",
    )


@pytest.fixture
def skins_of():
    """skins_of(game) -> {player_id: skins}."""
    return lambda g: {p.id: p.skins for p in g.players}
