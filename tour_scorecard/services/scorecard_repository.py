"""Scorecard Repository - SQLAlchemy persistence of saved scorecards.

Invariants:
    - Implements core/repository_protocols.ScorecardRepository
    - Scorecards cross this boundary as {id, name, createdAt, updatedAt, data} dicts
    - list() is ordered newest updatedAt first
"""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tour_scorecard.models.scorecard import Scorecard


def _iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _parse(raw: object) -> datetime:
    try:
        parsed = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return datetime.now(timezone.utc)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def scorecard_to_dict(row: Scorecard) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "createdAt": _iso(row.created_at),
        "updatedAt": _iso(row.updated_at),
        "data": row.data,
    }


class SqlScorecardRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self) -> list[dict]:
        result = await self.db.execute(
            select(Scorecard).order_by(Scorecard.updated_at.desc()),
        )
        return [scorecard_to_dict(r) for r in result.scalars().all()]

    async def get(self, scorecard_id: str) -> dict | None:
        row = await self.db.get(Scorecard, scorecard_id)
        return scorecard_to_dict(row) if row else None

    async def save(self, scorecard: dict) -> None:
        """Insert or overwrite by id."""
        row = await self.db.get(Scorecard, scorecard["id"])
        if row is None:
            row = Scorecard(id=scorecard["id"])
            self.db.add(row)
        row.name = scorecard["name"]
        row.data = scorecard["data"]
        row.created_at = _parse(scorecard.get("createdAt"))
        row.updated_at = _parse(scorecard.get("updatedAt"))
        await self.db.flush()

    async def delete(self, scorecard_id: str) -> bool:
        row = await self.db.get(Scorecard, scorecard_id)
        if row is None:
            return False
        await self.db.delete(row)
        await self.db.flush()
        return True
