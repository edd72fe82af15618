"""Game Routes - game lifecycle, orchestrator operations and read models.

Invariants:
    - Every operation route answers 200 with {"status": "ok" | "rejected", ...,
      "game": snapshot}; ?strict=true turns a rejection into 409
    - Category path parameters are validated against the core enums (422 -> 400)
    - Read models (skins, eligibility) are computed from the current game, never stored

Design Decisions:
    - Mark and hole-toggle routes take the category in the path: one route per
      family, dispatched by the handler's category table
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

import tour_scorecard.infrastructure.course_search_client as course_search
from tour_scorecard.core.domain_types import DecisionCategory, HoleToggle, MarkCategory
from tour_scorecard.core.game_snapshot import game_to_snapshot
from tour_scorecard.infrastructure.database import get_db
from tour_scorecard.schemas.game import (
    CourseChange, CurrentHoleUpdate, DecisionClear, DecisionUpdate, GameCreate,
    HoleToggleUpdate, MarkUpdate, ScoreUpdate,
)
from tour_scorecard.services.course_repository import (
    CatalogCourseProvider, SqlCustomCourseRepository,
)
from tour_scorecard.services.handle_game import (
    GameHandlers, eligibility_report, skins_report,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/games", tags=["games"])

StrictQuery = Query(False, description="Answer 409 instead of a no-op when the operation does not apply")


def get_game_handlers(db: AsyncSession = Depends(get_db)) -> GameHandlers:
    provider = CatalogCourseProvider(
        SqlCustomCourseRepository(db), course_search.search_client,
    )
    return GameHandlers(db, provider)


# ─── Lifecycle ───────────────────────────────────────────────────

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_game(
    body: GameCreate, handlers: GameHandlers = Depends(get_game_handlers),
):
    """Start a game: zero scores on the chosen course, no side-game marks."""
    game = await handlers.create(body)
    return game_to_snapshot(game)


@router.get("")
async def list_games(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    handlers: GameHandlers = Depends(get_game_handlers),
):
    return {
        "games": await handlers.list_games(limit, offset),
        "pagination": {"limit": limit, "offset": offset},
    }


@router.get("/{game_id}")
async def get_game(game_id: str, handlers: GameHandlers = Depends(get_game_handlers)):
    return game_to_snapshot(await handlers.load(game_id))


@router.delete("/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_game(game_id: str, handlers: GameHandlers = Depends(get_game_handlers)):
    await handlers.delete(game_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─── Read models ─────────────────────────────────────────────────

@router.get("/{game_id}/skins")
async def get_skins(game_id: str, handlers: GameHandlers = Depends(get_game_handlers)):
    """Skins per player, split by category."""
    return skins_report(await handlers.load(game_id))


@router.get("/{game_id}/eligibility")
async def get_eligibility(game_id: str, handlers: GameHandlers = Depends(get_game_handlers)):
    """Holes currently open for each side-game category."""
    return eligibility_report(await handlers.load(game_id))


# ─── Operations ──────────────────────────────────────────────────

@router.post("/{game_id}/course")
async def post_change_course(
    game_id: str, body: CourseChange, strict: bool = StrictQuery,
    handlers: GameHandlers = Depends(get_game_handlers),
):
    """Swap the course. Every score and mark is reset."""
    return await handlers.change_course(game_id, body.course_id, strict)


@router.post("/{game_id}/current-hole")
async def post_current_hole(
    game_id: str, body: CurrentHoleUpdate, strict: bool = StrictQuery,
    handlers: GameHandlers = Depends(get_game_handlers),
):
    return await handlers.set_current_hole(game_id, body.hole_number, strict)


@router.post("/{game_id}/scores")
async def post_score(
    game_id: str, body: ScoreUpdate, strict: bool = StrictQuery,
    handlers: GameHandlers = Depends(get_game_handlers),
):
    return await handlers.record_score(game_id, body, strict)


@router.post("/{game_id}/decisions/{category}")
async def post_decision(
    game_id: str, category: DecisionCategory, body: DecisionUpdate,
    strict: bool = StrictQuery,
    handlers: GameHandlers = Depends(get_game_handlers),
):
    """Record a closest-to-pin / longest-drive outcome (player_id null: nobody qualified)."""
    return await handlers.set_decision(game_id, category, body, strict)


@router.post("/{game_id}/decisions/{category}/clear")
async def post_clear_decision(
    game_id: str, category: DecisionCategory, body: DecisionClear,
    strict: bool = StrictQuery,
    handlers: GameHandlers = Depends(get_game_handlers),
):
    """Remove a decision; later decisions on the same side are removed with it."""
    return await handlers.clear_decision(game_id, category, body, strict)


@router.post("/{game_id}/marks/{category}")
async def post_mark(
    game_id: str, category: MarkCategory, body: MarkUpdate,
    strict: bool = StrictQuery,
    handlers: GameHandlers = Depends(get_game_handlers),
):
    return await handlers.toggle_mark(game_id, category, body, strict)


@router.post("/{game_id}/hole-toggles/{toggle}")
async def post_hole_toggle(
    game_id: str, toggle: HoleToggle, body: HoleToggleUpdate,
    strict: bool = StrictQuery,
    handlers: GameHandlers = Depends(get_game_handlers),
):
    """Enable / disable sandies or lost balls on a hole."""
    return await handlers.toggle_hole(game_id, toggle, body, strict)
