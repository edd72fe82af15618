"""Scorecard Routes - save the current game, browse, export, import and resume.

Invariants:
    - Export returns the versioned file that import accepts unchanged
    - Import answers 400 (IMPORT_EMPTY) with the parse warnings when nothing is usable
    - Static paths (/export, /import) are declared before /{scorecard_id}
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tour_scorecard.api.routes.games import get_game_handlers
from tour_scorecard.core.game_snapshot import game_to_snapshot
from tour_scorecard.infrastructure.database import get_db
from tour_scorecard.schemas.scorecard import ScorecardImport, ScorecardSave
from tour_scorecard.services.handle_game import GameHandlers
from tour_scorecard.services.handle_scorecards import ScorecardHandlers, summarize

router = APIRouter(prefix="/api/v1/scorecards", tags=["scorecards"])


def get_scorecard_handlers(
    db: AsyncSession = Depends(get_db),
    games: GameHandlers = Depends(get_game_handlers),
) -> ScorecardHandlers:
    return ScorecardHandlers(db, games)


@router.get("")
async def list_scorecards(
    handlers: ScorecardHandlers = Depends(get_scorecard_handlers),
):
    """Saved scorecards, newest first."""
    return {"scorecards": [summarize(s) for s in await handlers.list_scorecards()]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def save_scorecard(
    body: ScorecardSave, handlers: ScorecardHandlers = Depends(get_scorecard_handlers),
):
    return summarize(await handlers.save(body))


@router.get("/export")
async def export_scorecards(
    handlers: ScorecardHandlers = Depends(get_scorecard_handlers),
):
    return await handlers.export_file()


@router.post("/import")
async def import_scorecards(
    body: ScorecardImport, handlers: ScorecardHandlers = Depends(get_scorecard_handlers),
):
    return await handlers.import_file(body.content)


@router.get("/{scorecard_id}")
async def get_scorecard(
    scorecard_id: str, handlers: ScorecardHandlers = Depends(get_scorecard_handlers),
):
    return await handlers.get(scorecard_id)


@router.post("/{scorecard_id}/resume", status_code=status.HTTP_201_CREATED)
async def resume_scorecard(
    scorecard_id: str, handlers: ScorecardHandlers = Depends(get_scorecard_handlers),
):
    """Continue a saved scorecard as a new current game."""
    return game_to_snapshot(await handlers.resume(scorecard_id))


@router.delete("/{scorecard_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_scorecard(
    scorecard_id: str, handlers: ScorecardHandlers = Depends(get_scorecard_handlers),
):
    await handlers.delete(scorecard_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
