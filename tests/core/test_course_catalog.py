"""Course Catalog - tests for built-ins, validation, id generation, search and suggestions."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from tour_scorecard.core.course_catalog import (
    BUILT_IN_COURSES,
    CUSTOM_COURSE_ID,
    DEFAULT_CUSTOM_COURSE,
    MAX_SUGGESTIONS,
    PEBBLE_BEACH,
    course_suggestions,
    find_course,
    generate_course_id,
    search_courses,
    validate_course,
)
from tour_scorecard.core.game_state import Course, CourseHole

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _custom(course_id: str, name: str) -> Course:
    return replace(DEFAULT_CUSTOM_COURSE, id=course_id, name=name, location="Somewhere")


# ─── Built-ins / validation ──────────────────────────────────────

@pytest.mark.parametrize("course", BUILT_IN_COURSES, ids=lambda c: c.id)
def test_built_in_courses_are_playable(course):
    assert validate_course(course) == []
    assert course.total_par == 72


def test_validate_course_reports_wrong_hole_count(course):
    short = replace(course, holes=course.holes[:9])
    problems = validate_course(short)
    assert any("9 holes" in p for p in problems)


def test_validate_course_reports_duplicate_handicaps(course):
    holes = list(course.holes)
    holes[1] = replace(holes[1], handicap=1)  # hole 2 now shares rank 1 with hole 1
    problems = validate_course(replace(course, holes=tuple(holes)))
    assert problems == ["Handicap ranks repeat: [1]."]


def test_validate_course_reports_par_out_of_range(course):
    holes = list(course.holes)
    holes[0] = replace(holes[0], par=7)
    assert validate_course(replace(course, holes=tuple(holes))) == [
        "Hole 1 has par 7, expected 3..6.",
    ]


def test_validate_course_reports_gaps_and_blank_name():
    holes = tuple(CourseHole(hole_number=n, par=4, handicap=n) for n in range(2, 20))
    problems = validate_course(Course(id="x", name="  ", holes=holes, total_par=72))
    assert "Course name is empty." in problems
    assert any("without gaps" in p for p in problems)


# ─── Ids ─────────────────────────────────────────────────────────

def test_generate_course_id_slug_and_timestamp():
    assert generate_course_id("Pine Valley!", EPOCH) == "pine-valley-0"
    assert generate_course_id("Pine  Valley", EPOCH + timedelta(seconds=36)) == "pine-valley-rs0"


def test_generate_course_id_truncates_long_names():
    course_id = generate_course_id("a" * 50, EPOCH)
    assert course_id == "a" * 30 + "-0"


# ─── Search / suggestions ────────────────────────────────────────

def test_search_courses_matches_name_and_location():
    assert search_courses(list(BUILT_IN_COURSES), "PEBBLE") == [PEBBLE_BEACH]
    assert [c.id for c in search_courses(list(BUILT_IN_COURSES), "scotland")] == ["st-andrews-old"]
    assert search_courses(list(BUILT_IN_COURSES), "nowhere") == []


def test_find_course():
    assert find_course(list(BUILT_IN_COURSES), "pebble-beach") is PEBBLE_BEACH
    assert find_course(list(BUILT_IN_COURSES), "missing") is None


def test_suggestions_blank_query_builtins_then_newest_custom():
    custom = [_custom(f"c{i}", f"Club {i}") for i in range(1, 4)]
    suggested = course_suggestions(list(BUILT_IN_COURSES), custom, "  ")
    assert [c.id for c in suggested] == [
        "pebble-beach", "augusta-national", "st-andrews-old", "c2", "c3",
    ]


def test_suggestions_query_always_offers_custom_template():
    suggested = course_suggestions(list(BUILT_IN_COURSES), [], "pebble")
    assert [c.id for c in suggested] == ["pebble-beach", CUSTOM_COURSE_ID]


def test_suggestions_capped():
    custom = [_custom(f"c{i}", f"Pebble Copy {i}") for i in range(10)]
    assert len(course_suggestions(list(BUILT_IN_COURSES), custom, "pebble")) == MAX_SUGGESTIONS
