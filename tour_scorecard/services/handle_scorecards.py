"""Scorecard Handlers - save, list, export, import and reload saved scorecards.

Invariants:
    - A saved scorecard's data is a game snapshot taken at save time
    - Import never overwrites a stored scorecard with an older updatedAt
    - An import yielding no scorecards raises ScorecardImportError (nothing written)

Design Decisions:
    - Export/import/merge rules live in core/scorecard_archive.py; this module only
      moves dicts between those functions and the repository
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from tour_scorecard.core.errors import (
    ErrorContext, ResourceNotFoundError, ScorecardImportError,
)
from tour_scorecard.core.game_snapshot import game_to_snapshot
from tour_scorecard.core.game_state import Game
from tour_scorecard.core.scorecard_archive import (
    build_export_file, merge_scorecards, normalize_scorecard, parse_scorecard_import,
)
from tour_scorecard.schemas.scorecard import ScorecardSave
from tour_scorecard.services.handle_game import GameHandlers
from tour_scorecard.services.scorecard_repository import SqlScorecardRepository

logger = logging.getLogger(__name__)


def summarize(scorecard: dict) -> dict:
    data = scorecard.get("data") or {}
    return {
        "id": scorecard["id"],
        "name": scorecard["name"],
        "createdAt": scorecard.get("createdAt"),
        "updatedAt": scorecard.get("updatedAt"),
        "date": data.get("date"),
        "courseName": (data.get("course") or {}).get("name"),
        "playerCount": len(data.get("players") or []),
    }


class ScorecardHandlers:
    def __init__(self, db: AsyncSession, games: GameHandlers):
        self.db = db
        self.repo = SqlScorecardRepository(db)
        self.games = games

    async def save(self, body: ScorecardSave) -> dict:
        game = await self.games.load(body.game_id)
        now = datetime.now(timezone.utc).isoformat()
        scorecard = normalize_scorecard({
            "id": uuid.uuid4().hex,
            "name": (body.name or "").strip() or game.event_name,
            "createdAt": now,
            "updatedAt": now,
            "data": game_to_snapshot(game),
        })
        await self.repo.save(scorecard)
        await self.db.commit()
        logger.info(f"Scorecard saved: {scorecard['name']}", extra={"game_id": game.id})
        return scorecard

    async def list_scorecards(self) -> list[dict]:
        return await self.repo.list()

    async def get(self, scorecard_id: str) -> dict:
        scorecard = await self.repo.get(scorecard_id)
        if scorecard is None:
            raise ResourceNotFoundError(
                "Scorecard", scorecard_id, ErrorContext(operation="get_scorecard"),
            )
        return scorecard

    async def delete(self, scorecard_id: str) -> None:
        if not await self.repo.delete(scorecard_id):
            raise ResourceNotFoundError(
                "Scorecard", scorecard_id, ErrorContext(operation="delete_scorecard"),
            )
        await self.db.commit()

    async def export_file(self) -> dict:
        return build_export_file(await self.repo.list(), datetime.now(timezone.utc))

    async def import_file(self, content: str) -> dict:
        incoming, warnings = parse_scorecard_import(content)
        if not incoming:
            raise ScorecardImportError(warnings, ErrorContext(operation="import_scorecards"))

        merged, added = merge_scorecards(await self.repo.list(), incoming)
        incoming_by_id = {s["id"]: s for s in incoming}
        written = [s for s in merged if s is incoming_by_id.get(s["id"])]
        for scorecard in written:
            await self.repo.save(scorecard)
        await self.db.commit()
        logger.info(
            f"Imported {len(incoming)} scorecards: {added} added, "
            f"{len(written) - added} updated",
        )
        return {
            "added": added,
            "updated": len(written) - added,
            "total": len(merged),
            "warnings": warnings,
        }

    async def resume(self, scorecard_id: str) -> Game:
        """Continue a saved scorecard as a new current game."""
        scorecard = await self.get(scorecard_id)
        return await self.games.adopt(scorecard["data"])
