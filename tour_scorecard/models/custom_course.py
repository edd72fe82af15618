"""CustomCourse ORM - user-entered courses that extend the built-in catalog.

Invariants:
    - holes is a list of {holeNumber, par, handicap, distance?} dicts, 18 entries
    - total_par always equals the sum of hole pars (computed on save)
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from tour_scorecard.db.base import Base


class CustomCourse(Base):
    __tablename__ = "custom_courses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    holes: Mapped[list] = mapped_column(JSON, nullable=False)
    total_par: Mapped[int] = mapped_column(Integer, nullable=False)
    total_distance: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
