"""Domain Types - verifies rich type definitions and enum values.

Tests:
    - NewType wrappers exist and are callable
    - Side knows its hole range
    - Enums serialize to string and carry their par
"""

from tour_scorecard.core.domain_types import (
    CTP_PAR, LONGEST_DRIVE_PAR,
    CourseId, DecisionCategory, GameId, HoleToggle, MarkCategory, PlayerId, Side,
)


def test_identity_types_wrap_str():
    assert PlayerId("p1") == "p1"
    assert GameId("g1") == "g1"
    assert CourseId("pebble-beach") == "pebble-beach"


def test_side_contains():
    assert Side.FRONT.contains(1) and Side.FRONT.contains(9)
    assert not Side.FRONT.contains(10)
    assert Side.BACK.contains(10) and Side.BACK.contains(18)
    assert not Side.BACK.contains(19)
    assert not Side.FRONT.contains(0)


def test_decision_category_par():
    assert DecisionCategory.CLOSEST_TO_PIN.par == CTP_PAR == 3
    assert DecisionCategory.LONGEST_DRIVE.par == LONGEST_DRIVE_PAR == 5


def test_enums_are_strings():
    assert MarkCategory("double_sandies") is MarkCategory.DOUBLE_SANDY
    assert HoleToggle.SANDY.value == "sandy_holes"
    assert isinstance(Side.BACK, str)


def test_mark_category_has_six_members():
    assert len(MarkCategory) == 6
