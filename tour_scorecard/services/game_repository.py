"""Game Repository - SQLAlchemy persistence of current-game snapshots.

Invariants:
    - Implements core/repository_protocols.GameRepository
    - save is an upsert keyed by game id; the caller commits
    - Snapshots are stored verbatim; decoding belongs to core/game_snapshot.py
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tour_scorecard.models.game_record import GameRecord


class SqlGameRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def load(self, game_id: str) -> dict | None:
        record = await self.db.get(GameRecord, game_id)
        return record.snapshot if record else None

    async def save(self, game_id: str, snapshot: dict) -> None:
        record = await self.db.get(GameRecord, game_id)
        if record is None:
            self.db.add(GameRecord(id=game_id, snapshot=snapshot))
        else:
            record.snapshot = snapshot
        await self.db.flush()

    async def delete(self, game_id: str) -> bool:
        record = await self.db.get(GameRecord, game_id)
        if record is None:
            return False
        await self.db.delete(record)
        await self.db.flush()
        return True

    async def list_snapshots(self, limit: int, offset: int) -> list[dict]:
        """Most recently updated first."""
        result = await self.db.execute(
            select(GameRecord)
            .order_by(GameRecord.updated_at.desc())
            .limit(limit)
            .offset(offset),
        )
        return [r.snapshot for r in result.scalars().all()]
