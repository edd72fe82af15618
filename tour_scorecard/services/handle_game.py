"""Game Handlers - load, mutate and persist games on behalf of the API routes.

Invariants:
    - _games holds the single in-memory Game per id; values are replaced wholesale
    - Every operation is guarded (core/enforce_marks.py) BEFORE the mutation runs
    - A rejected operation is not persisted and leaves _games untouched
    - An applied operation is persisted as a snapshot in the same request
    - Rejections are logged at INFO with error_code (they are normal play, not faults)
    - Operations on one game are serialized by its _locks entry; a request never
      mutates a snapshot another request is still persisting

Design Decisions:
    - _games as module-level dict: single-process server, the database copy is
      what survives a restart (load falls back to it)
    - Result dicts mirror the rejection dicts from the core: {"status": ...,
      "operation": ..., "game": snapshot}, so callers handle one shape
    - Strict mode turns a rejection into OperationRejectedError (HTTP 409) for
      callers that prefer failures over no-ops
"""

import asyncio
import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from tour_scorecard.core.course_catalog import validate_course
from tour_scorecard.core.domain_types import DecisionCategory, HoleToggle, MarkCategory
from tour_scorecard.core.eligibility import describe_eligibility
from tour_scorecard.core.enforce_marks import (
    check_hole_in_round, check_hole_known,
    validate_clear_decision, validate_decision, validate_mark, validate_score,
)
from tour_scorecard.core.errors import (
    ErrorContext, OperationRejectedError, ResourceNotFoundError,
)
from tour_scorecard.core.game_mutations import (
    change_course, clear_closest_to_pin, clear_longest_drive, record_score,
    recompute, set_closest_to_pin, set_current_hole, set_longest_drive, start_game,
    toggle_double_sandy, toggle_fiver, toggle_four, toggle_greenie, toggle_lost_ball,
    toggle_lost_ball_hole, toggle_sandy, toggle_sandy_hole,
)
from tour_scorecard.core.game_snapshot import game_from_snapshot, game_to_snapshot
from tour_scorecard.core.game_state import Course, Game, PlayerSetup
from tour_scorecard.core.repository_protocols import CourseProvider
from tour_scorecard.core.skins import skins_breakdown
from tour_scorecard.schemas.game import (
    DecisionClear, DecisionUpdate, GameCreate, HoleToggleUpdate, MarkUpdate, ScoreUpdate,
)
from tour_scorecard.services.game_repository import SqlGameRepository

logger = logging.getLogger(__name__)

_games: dict[str, Game] = {}
# One lock per game id: load, guard, mutate and persist run as one step
_locks: dict[str, asyncio.Lock] = {}

_DECISION_SETTERS: dict[DecisionCategory, Callable[[Game, int, str | None], Game]] = {
    DecisionCategory.CLOSEST_TO_PIN: set_closest_to_pin,
    DecisionCategory.LONGEST_DRIVE: set_longest_drive,
}
_DECISION_CLEARERS: dict[DecisionCategory, Callable[[Game, int], Game]] = {
    DecisionCategory.CLOSEST_TO_PIN: clear_closest_to_pin,
    DecisionCategory.LONGEST_DRIVE: clear_longest_drive,
}
_MARK_TOGGLES: dict[MarkCategory, Callable[[Game, int, str, bool], Game]] = {
    MarkCategory.GREENIE: toggle_greenie,
    MarkCategory.FIVER: toggle_fiver,
    MarkCategory.FOUR: toggle_four,
    MarkCategory.SANDY: toggle_sandy,
    MarkCategory.DOUBLE_SANDY: toggle_double_sandy,
    MarkCategory.LOST_BALL: toggle_lost_ball,
}
_HOLE_TOGGLES: dict[HoleToggle, Callable[[Game, int, bool], Game]] = {
    HoleToggle.SANDY: toggle_sandy_hole,
    HoleToggle.LOST_BALL: toggle_lost_ball_hole,
}


def _lock_for(game_id: str) -> asyncio.Lock:
    lock = _locks.get(game_id)
    if lock is None:
        lock = _locks[game_id] = asyncio.Lock()
    return lock


def _warn_course_problems(course: Course, operation: str, game_id: str | None = None) -> None:
    """Remote and stored courses skip custom-course validation; surface their gaps.

    Scoring still runs: a repeated hardest-hole rank resolves to the lower hole number.
    """
    problems = validate_course(course)
    if problems:
        logger.warning(
            f"Course {course.id} has data problems: {'; '.join(problems)}",
            extra={"game_id": game_id, "operation": operation},
        )


def skins_report(game: Game) -> dict:
    board = skins_breakdown(game.players, game.course.holes, game.marks)
    return {
        "game_id": game.id,
        "players": [
            {
                "id": p.id,
                "name": p.name,
                "skins": p.skins,
                "breakdown": board[p.id].to_dict(),
            }
            for p in game.players
        ],
    }


def eligibility_report(game: Game) -> dict:
    return {
        "game_id": game.id,
        "eligibility": describe_eligibility(game.course.holes, game.marks),
    }


class GameHandlers:
    """Game lifecycle and the orchestrator operations, one method per route."""

    def __init__(self, db: AsyncSession, courses: CourseProvider):
        self.db = db
        self.repo = SqlGameRepository(db)
        self.courses = courses

    # ─── Lifecycle ───────────────────────────────────────────────

    async def create(self, body: GameCreate) -> Game:
        course = await self._course_or_404(body.course_id)
        roster = [
            PlayerSetup(id=p.id or uuid.uuid4().hex[:12], name=p.name, color=p.color)
            for p in body.players
        ]
        game = start_game(
            game_id=uuid.uuid4().hex,
            date=body.date or datetime.now(timezone.utc).date().isoformat(),
            course=course,
            roster=roster,
            event_name=body.event_name,
        )
        await self._persist(game)
        logger.info(
            f"Game created on {course.name} with {len(roster)} players",
            extra={"game_id": game.id},
        )
        return game

    async def load(self, game_id: str) -> Game:
        """In-memory game, else the persisted snapshot (re-derived), else 404."""
        game = _games.get(game_id)
        if game is not None:
            return game
        snapshot = await self.repo.load(game_id)
        if snapshot is None:
            raise ResourceNotFoundError(
                "Game", game_id, ErrorContext(game_id=game_id, operation="load_game"),
            )
        game = recompute(game_from_snapshot(snapshot))
        _warn_course_problems(game.course, "load_game", game_id)
        _games[game_id] = game
        return game

    async def adopt(self, snapshot: dict) -> Game:
        """Make a stored snapshot (e.g. a saved scorecard) the current game under a new id."""
        game = recompute(game_from_snapshot({**snapshot, "id": uuid.uuid4().hex}))
        await self._persist(game)
        return game

    async def delete(self, game_id: str) -> None:
        async with _lock_for(game_id):
            in_memory = _games.pop(game_id, None) is not None
            deleted = await self.repo.delete(game_id)
            if not (in_memory or deleted):
                _locks.pop(game_id, None)
                raise ResourceNotFoundError(
                    "Game", game_id, ErrorContext(game_id=game_id, operation="delete_game"),
                )
            await self.db.commit()
        _locks.pop(game_id, None)
        logger.info("Game deleted", extra={"game_id": game_id})

    async def list_games(self, limit: int, offset: int) -> list[dict]:
        return [
            {
                "id": s.get("id"),
                "date": s.get("date"),
                "event_name": s.get("eventName"),
                "course_name": (s.get("course") or {}).get("name"),
                "players": [
                    {"id": p.get("id"), "name": p.get("name"), "skins": p.get("skins", 0)}
                    for p in s.get("players") or []
                ],
            }
            for s in await self.repo.list_snapshots(limit, offset)
        ]

    # ─── Operations ──────────────────────────────────────────────

    async def change_course(self, game_id: str, course_id: str, strict: bool) -> dict:
        course = await self._course_or_404(course_id)
        return await self._apply(
            game_id, "change_course", strict,
            lambda g: None,
            lambda g: change_course(g, course),
        )

    async def set_current_hole(self, game_id: str, hole_number: int, strict: bool) -> dict:
        return await self._apply(
            game_id, "set_current_hole", strict,
            lambda g: check_hole_in_round(g, hole_number),
            lambda g: set_current_hole(g, hole_number),
            hole_number=hole_number,
        )

    async def record_score(self, game_id: str, body: ScoreUpdate, strict: bool) -> dict:
        return await self._apply(
            game_id, "record_score", strict,
            lambda g: validate_score(g, body.player_id, body.hole_number, body.strokes, body.putts),
            lambda g: record_score(g, body.player_id, body.hole_number, body.strokes, body.putts),
            hole_number=body.hole_number,
        )

    async def set_decision(
        self, game_id: str, category: DecisionCategory, body: DecisionUpdate, strict: bool,
    ) -> dict:
        setter = _DECISION_SETTERS[category]
        return await self._apply(
            game_id, f"set_{category.value}", strict,
            lambda g: validate_decision(g, category, body.hole_number, body.player_id),
            lambda g: setter(g, body.hole_number, body.player_id),
            hole_number=body.hole_number,
        )

    async def clear_decision(
        self, game_id: str, category: DecisionCategory, body: DecisionClear, strict: bool,
    ) -> dict:
        clearer = _DECISION_CLEARERS[category]
        return await self._apply(
            game_id, f"clear_{category.value}", strict,
            lambda g: validate_clear_decision(g, category, body.hole_number),
            lambda g: clearer(g, body.hole_number),
            hole_number=body.hole_number,
        )

    async def toggle_mark(
        self, game_id: str, category: MarkCategory, body: MarkUpdate, strict: bool,
    ) -> dict:
        toggle = _MARK_TOGGLES[category]
        return await self._apply(
            game_id, f"toggle_{category.value}", strict,
            lambda g: validate_mark(g, category, body.hole_number, body.player_id, body.value),
            lambda g: toggle(g, body.hole_number, body.player_id, body.value),
            hole_number=body.hole_number,
        )

    async def toggle_hole(
        self, game_id: str, toggle: HoleToggle, body: HoleToggleUpdate, strict: bool,
    ) -> dict:
        apply_toggle = _HOLE_TOGGLES[toggle]
        return await self._apply(
            game_id, f"toggle_{toggle.value}", strict,
            lambda g: check_hole_known(g, body.hole_number),
            lambda g: apply_toggle(g, body.hole_number, body.value),
            hole_number=body.hole_number,
        )

    # ─── Internals ───────────────────────────────────────────────

    async def _apply(
        self,
        game_id: str,
        operation: str,
        strict: bool,
        guard: Callable[[Game], dict | None],
        mutate: Callable[[Game], Game],
        hole_number: int | None = None,
    ) -> dict:
        async with _lock_for(game_id):
            try:
                return await self._apply_locked(
                    game_id, operation, strict, guard, mutate, hole_number,
                )
            except ResourceNotFoundError:
                _locks.pop(game_id, None)
                raise

    async def _apply_locked(
        self,
        game_id: str,
        operation: str,
        strict: bool,
        guard: Callable[[Game], dict | None],
        mutate: Callable[[Game], Game],
        hole_number: int | None,
    ) -> dict:
        game = await self.load(game_id)
        rejection = guard(game)
        if rejection:
            logger.info(
                f"Operation rejected: {rejection['message']}",
                extra={
                    "game_id": game_id, "operation": operation,
                    "error_code": rejection["error_code"], "hole_number": hole_number,
                },
            )
            if strict:
                raise OperationRejectedError(
                    rejection,
                    ErrorContext(game_id=game_id, operation=operation, hole_number=hole_number),
                )
            return {**rejection, "operation": operation, "game": game_to_snapshot(game)}

        updated = mutate(game)
        if updated is not game:
            await self._persist(updated)
        return {"status": "ok", "operation": operation, "game": game_to_snapshot(updated)}

    async def _persist(self, game: Game) -> None:
        await self.repo.save(game.id, game_to_snapshot(game))
        await self.db.commit()
        _games[game.id] = game

    async def _course_or_404(self, course_id: str) -> Course:
        course = await self.courses.get(course_id)
        if course is None:
            raise ResourceNotFoundError(
                "Course", course_id, ErrorContext(operation="resolve_course"),
            )
        _warn_course_problems(course, "resolve_course")
        return course
