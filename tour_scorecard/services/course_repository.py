"""Course Repository - custom course persistence and the combined course provider.

Invariants:
    - SqlCustomCourseRepository implements core/repository_protocols.CustomCourseRepository
    - CatalogCourseProvider implements CourseProvider: built-ins first, then custom
      courses, then (for remote- ids only) the remote search client
    - Custom courses are validated (core/course_catalog.validate_course) before save

Design Decisions:
    - Holes stored in the same camelCase shape as game snapshots, so one codec
      (core/game_snapshot.py) reads both
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tour_scorecard.core.course_catalog import BUILT_IN_COURSES, find_course, search_courses
from tour_scorecard.core.game_snapshot import course_from_snapshot, course_to_snapshot
from tour_scorecard.core.game_state import Course
from tour_scorecard.infrastructure.course_search_client import CourseSearchClient
from tour_scorecard.models.custom_course import CustomCourse


def _to_course(row: CustomCourse) -> Course:
    return course_from_snapshot({
        "id": row.id,
        "name": row.name,
        "location": row.location,
        "holes": row.holes,
        "totalPar": row.total_par,
        "totalDistance": row.total_distance,
    })


class SqlCustomCourseRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self) -> list[Course]:
        """Oldest first, matching the order courses were added."""
        result = await self.db.execute(
            select(CustomCourse).order_by(CustomCourse.created_at, CustomCourse.id),
        )
        return [_to_course(r) for r in result.scalars().all()]

    async def save(self, course: Course) -> None:
        data = course_to_snapshot(course)
        row = await self.db.get(CustomCourse, course.id)
        if row is None:
            row = CustomCourse(id=course.id)
            self.db.add(row)
        row.name = course.name
        row.location = course.location
        row.holes = data["holes"]
        row.total_par = sum(h.par for h in course.holes)
        row.total_distance = course.total_distance
        await self.db.flush()

    async def delete(self, course_id: str) -> bool:
        row = await self.db.get(CustomCourse, course_id)
        if row is None:
            return False
        await self.db.delete(row)
        await self.db.flush()
        return True


class CatalogCourseProvider:
    """Built-in catalog + custom courses (+ optional remote lookup)."""

    def __init__(
        self,
        custom: SqlCustomCourseRepository,
        remote: CourseSearchClient | None = None,
    ):
        self.custom = custom
        self.remote = remote

    async def all_courses(self) -> list[Course]:
        return [*BUILT_IN_COURSES, *await self.custom.list()]

    async def get(self, course_id: str) -> Course | None:
        found = find_course(await self.all_courses(), course_id)
        if found is None and self.remote is not None and course_id.startswith("remote-"):
            found = await self.remote.get(course_id)
        return found

    async def search(self, query: str) -> list[Course]:
        return search_courses(await self.all_courses(), query)
