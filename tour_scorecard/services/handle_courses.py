"""Course Handlers - catalog listing, suggestions, custom course CRUD and remote search.

Invariants:
    - Built-in courses are read-only: delete only ever touches custom courses
    - A custom course is saved only when validate_course reports no problems
    - Custom course ids come from generate_course_id (name slug + timestamp)
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from tour_scorecard.core.course_catalog import (
    BUILT_IN_COURSES, course_suggestions, generate_course_id, validate_course,
)
from tour_scorecard.core.errors import (
    CourseValidationError, ErrorContext, ResourceNotFoundError,
)
from tour_scorecard.core.game_state import Course, CourseHole
from tour_scorecard.infrastructure.course_search_client import CourseSearchClient
from tour_scorecard.schemas.course import CourseCreate
from tour_scorecard.services.course_repository import (
    CatalogCourseProvider, SqlCustomCourseRepository,
)

logger = logging.getLogger(__name__)


class CourseHandlers:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.custom = SqlCustomCourseRepository(db)
        self.provider = CatalogCourseProvider(self.custom)

    async def list_courses(self, query: str | None) -> list[Course]:
        if query and query.strip():
            return await self.provider.search(query)
        return await self.provider.all_courses()

    async def suggestions(self, query: str) -> list[Course]:
        return course_suggestions(list(BUILT_IN_COURSES), await self.custom.list(), query)

    async def get(self, course_id: str) -> Course:
        course = await self.provider.get(course_id)
        if course is None:
            raise ResourceNotFoundError(
                "Course", course_id, ErrorContext(operation="get_course"),
            )
        return course

    async def create(self, body: CourseCreate) -> Course:
        holes = tuple(sorted(
            (
                CourseHole(
                    hole_number=h.hole_number, par=h.par, handicap=h.handicap,
                    distance=h.distance, description=h.description,
                )
                for h in body.holes
            ),
            key=lambda h: h.hole_number,
        ))
        distances = [h.distance for h in holes if h.distance is not None]
        course = Course(
            id=generate_course_id(body.name, datetime.now(timezone.utc)),
            name=body.name,
            location=body.location,
            holes=holes,
            total_par=sum(h.par for h in holes),
            total_distance=sum(distances) if distances else None,
        )
        problems = validate_course(course)
        if problems:
            raise CourseValidationError(problems, ErrorContext(operation="create_course"))
        await self.custom.save(course)
        await self.db.commit()
        logger.info(f"Custom course saved: {course.name} ({course.id})")
        return course

    async def delete(self, course_id: str) -> None:
        if not await self.custom.delete(course_id):
            raise ResourceNotFoundError(
                "Custom course", course_id, ErrorContext(operation="delete_course"),
            )
        await self.db.commit()
        logger.info(f"Custom course deleted: {course_id}")

    async def remote_search(self, query: str, client: CourseSearchClient) -> list[Course]:
        courses = await client.search(query)
        logger.info(
            f"Remote course search returned {len(courses)} courses",
            extra={"query": query},
        )
        return courses
