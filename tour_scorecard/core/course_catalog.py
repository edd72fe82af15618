"""Course Catalog - built-in courses, custom-course validation, search and suggestions.

Invariants:
    - A playable course has 18 holes numbered 1..18, pars 3..6, handicaps a permutation of 1..18
    - validate_course returns problems as strings; it never raises
    - Duplicate handicap ranks are reported, not repaired (scoring takes the lower hole number)
    - Suggestions are capped at MAX_SUGGESTIONS

Design Decisions:
    - Pure functions over the catalog: custom courses come from the shell
      (database), built-ins are module constants
    - Hole tables as tuples of (number, par, handicap, distance, description)
"""

import re
from datetime import datetime

from tour_scorecard.core.domain_types import HOLES_PER_ROUND
from tour_scorecard.core.game_state import Course, CourseHole


MAX_SUGGESTIONS: int = 5
CUSTOM_COURSE_ID: str = "custom-course"
_ID_BASE_LENGTH = 30


def _course(
    course_id: str, name: str, location: str, rows: tuple[tuple, ...],
) -> Course:
    holes = tuple(
        CourseHole(hole_number=n, par=par, handicap=hcp, distance=dist, description=desc)
        for n, par, hcp, dist, desc in rows
    )
    return Course(
        id=course_id,
        name=name,
        location=location,
        holes=holes,
        total_par=sum(h.par for h in holes),
        total_distance=sum(h.distance or 0 for h in holes),
    )


# ─── Built-in courses ────────────────────────────────────────────

PEBBLE_BEACH = _course("pebble-beach", "Pebble Beach Golf Links", "Pebble Beach, CA", (
    (1, 4, 9, 380, "Opening hole with ocean views"),
    (2, 5, 13, 516, "Reachable par 5"),
    (3, 4, 11, 404, "Dogleg left"),
    (4, 4, 7, 331, "Short par 4"),
    (5, 3, 17, 195, "Over the ocean"),
    (6, 5, 15, 523, "Long par 5"),
    (7, 3, 3, 109, "Famous short par 3"),
    (8, 4, 1, 428, "Iconic cliff-top hole"),
    (9, 4, 5, 462, "Along the ocean"),
    (10, 4, 8, 495, "Back nine starts"),
    (11, 4, 12, 390, "Dogleg right"),
    (12, 3, 18, 202, "Over the ocean"),
    (13, 4, 14, 445, "Along the coast"),
    (14, 5, 16, 580, "Long par 5"),
    (15, 4, 6, 397, "Dogleg left"),
    (16, 4, 4, 403, "Uphill approach"),
    (17, 3, 2, 208, "Famous island green"),
    (18, 5, 10, 543, "Iconic finishing hole"),
))

AUGUSTA_NATIONAL = _course("augusta-national", "Augusta National Golf Club", "Augusta, GA", (
    (1, 4, 7, 445, "Tea Olive"),
    (2, 5, 15, 575, "Pink Dogwood"),
    (3, 4, 11, 350, "Flowering Peach"),
    (4, 3, 17, 240, "Flowering Crab Apple"),
    (5, 4, 3, 495, "Magnolia"),
    (6, 3, 13, 180, "Juniper"),
    (7, 4, 1, 450, "Pampas"),
    (8, 5, 9, 570, "Yellow Jasmine"),
    (9, 4, 5, 460, "Carolina Cherry"),
    (10, 4, 2, 495, "Camellia"),
    (11, 4, 4, 505, "White Dogwood"),
    (12, 3, 16, 155, "Golden Bell"),
    (13, 5, 14, 510, "Azalea"),
    (14, 4, 8, 440, "Chinese Fir"),
    (15, 5, 12, 550, "Firethorn"),
    (16, 3, 18, 170, "Redbud"),
    (17, 4, 6, 440, "Nandina"),
    (18, 4, 10, 465, "Holly"),
))

ST_ANDREWS_OLD = _course("st-andrews-old", "St Andrews Old Course", "St Andrews, Scotland", (
    (1, 4, 11, 376, "Burn"),
    (2, 4, 5, 453, "Dyke"),
    (3, 4, 15, 397, "Cartgate (Out)"),
    (4, 4, 7, 480, "Ginger Beer"),
    (5, 5, 13, 568, "Hole O'Cross (Out)"),
    (6, 4, 3, 412, "Heathery (Out)"),
    (7, 4, 9, 371, "High (Out)"),
    (8, 3, 17, 175, "Short"),
    (9, 4, 1, 352, "End"),
    (10, 4, 8, 386, "Bobby Jones"),
    (11, 3, 16, 174, "High (In)"),
    (12, 4, 4, 348, "Heathery (In)"),
    (13, 4, 12, 465, "Hole O'Cross (In)"),
    (14, 5, 6, 618, "Long"),
    (15, 4, 2, 455, "Cartgate (In)"),
    (16, 4, 10, 423, "Corner of the Dyke"),
    (17, 4, 14, 495, "Road"),
    (18, 4, 18, 357, "Tom Morris"),
))

BUILT_IN_COURSES: tuple[Course, ...] = (PEBBLE_BEACH, AUGUSTA_NATIONAL, ST_ANDREWS_OLD)

# Template offered while searching: all par 4s, handicap == hole number
DEFAULT_CUSTOM_COURSE = _course(CUSTOM_COURSE_ID, "Custom Course", "Your Location", tuple(
    (n, 4, n, 400, f"Hole {n}") for n in range(1, HOLES_PER_ROUND + 1)
))


# ─── Validation ──────────────────────────────────────────────────

def validate_course(course: Course) -> list[str]:
    """Structural problems with a course; empty list means playable."""
    problems: list[str] = []
    if not course.name.strip():
        problems.append("Course name is empty.")
    if len(course.holes) != HOLES_PER_ROUND:
        problems.append(f"Course has {len(course.holes)} holes, expected {HOLES_PER_ROUND}.")

    numbers = sorted(h.hole_number for h in course.holes)
    if numbers != list(range(1, len(numbers) + 1)):
        problems.append(f"Hole numbers must run 1..{len(numbers)} without gaps: {numbers}.")

    for h in course.holes:
        if not 3 <= h.par <= 6:
            problems.append(f"Hole {h.hole_number} has par {h.par}, expected 3..6.")

    ranks = [h.handicap for h in course.holes]
    duplicates = sorted({r for r in ranks if ranks.count(r) > 1})
    if duplicates:
        problems.append(f"Handicap ranks repeat: {duplicates}.")
    if sorted(ranks) != list(range(1, len(ranks) + 1)) and not duplicates:
        problems.append("Handicap ranks must be a permutation of 1..18.")
    return problems


def generate_course_id(name: str, now: datetime) -> str:
    """Slug of the name (30 chars max) plus a base-36 millisecond timestamp."""
    slug = re.sub(r"[^a-z0-9\s]", "", name.lower())
    slug = re.sub(r"\s+", "-", slug)[:_ID_BASE_LENGTH]
    return f"{slug}-{_base36(int(now.timestamp() * 1000))}"


def _base36(value: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


# ─── Search ──────────────────────────────────────────────────────

def _matches(course: Course, term: str) -> bool:
    return term in course.name.lower() or term in (course.location or "").lower()


def search_courses(courses: list[Course], query: str) -> list[Course]:
    """Courses whose name or location contains `query` (case-insensitive)."""
    term = query.lower().strip()
    return [c for c in courses if _matches(c, term)]


def find_course(courses: list[Course], course_id: str) -> Course | None:
    return next((c for c in courses if c.id == course_id), None)


def course_suggestions(
    builtin: list[Course], custom: list[Course], query: str,
) -> list[Course]:
    """Blank query: first 3 built-ins plus the 2 newest custom courses.

    Otherwise matches from both lists, always offering the custom-course template.
    """
    if not query.strip():
        return [*builtin[:3], *custom[-2:]][:MAX_SUGGESTIONS]
    found = search_courses([*builtin, *custom], query)
    if not any(c.id == CUSTOM_COURSE_ID for c in found):
        found.append(DEFAULT_CUSTOM_COURSE)
    return found[:MAX_SUGGESTIONS]
