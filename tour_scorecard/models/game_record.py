"""GameRecord ORM - persists the in-progress game as a snapshot.

Invariants:
    - id is the game id chosen by the shell (string primary key)
    - snapshot is the output of game_to_snapshot, never a partial game

Design Decisions:
    - JSON column for the whole game: the game is always read and written as one value
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from tour_scorecard.db.base import Base


class GameRecord(Base):
    __tablename__ = "games"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    snapshot: Mapped[dict] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
