"""Course Routes - built-in and custom course catalog, plus remote search.

Invariants:
    - List responses carry course summaries; GET /{course_id} carries all holes
    - Remote search answers 503 (COURSE_LOOKUP_ERROR) when no API key is configured
    - Static paths (/suggestions, /remote) are declared before /{course_id}
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tour_scorecard.core.game_snapshot import course_to_snapshot
from tour_scorecard.core.game_state import Course
from tour_scorecard.infrastructure.course_search_client import (
    CourseSearchClient, get_course_search_client,
)
from tour_scorecard.infrastructure.database import get_db
from tour_scorecard.schemas.course import CourseCreate
from tour_scorecard.services.handle_courses import CourseHandlers

router = APIRouter(prefix="/api/v1/courses", tags=["courses"])


def get_course_handlers(db: AsyncSession = Depends(get_db)) -> CourseHandlers:
    return CourseHandlers(db)


def _summary(course: Course) -> dict:
    return {
        "id": course.id,
        "name": course.name,
        "location": course.location,
        "totalPar": course.total_par,
        "totalDistance": course.total_distance,
    }


@router.get("")
async def list_courses(
    q: str | None = Query(None, max_length=100),
    handlers: CourseHandlers = Depends(get_course_handlers),
):
    """Built-in and custom courses, filtered by name / location when q is given."""
    return {"courses": [_summary(c) for c in await handlers.list_courses(q)]}


@router.get("/suggestions")
async def course_suggestions(
    q: str = Query("", max_length=100),
    handlers: CourseHandlers = Depends(get_course_handlers),
):
    return {"courses": [_summary(c) for c in await handlers.suggestions(q)]}


@router.get("/remote")
async def remote_search(
    q: str = Query(min_length=2, max_length=100),
    handlers: CourseHandlers = Depends(get_course_handlers),
    client: CourseSearchClient = Depends(get_course_search_client),
):
    """Search the remote course directory; full courses, ready to start a game on."""
    courses = await handlers.remote_search(q, client)
    return {"courses": [course_to_snapshot(c) for c in courses]}


@router.get("/{course_id}")
async def get_course(
    course_id: str, handlers: CourseHandlers = Depends(get_course_handlers),
):
    return course_to_snapshot(await handlers.get(course_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_course(
    body: CourseCreate, handlers: CourseHandlers = Depends(get_course_handlers),
):
    return course_to_snapshot(await handlers.create(body))


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    course_id: str, handlers: CourseHandlers = Depends(get_course_handlers),
):
    await handlers.delete(course_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
