"""Game Schemas - request bodies for game creation and every orchestrator operation.

Invariants:
    - Hole numbers are 1..18 and stroke counts non-negative before reaching a handler
    - Player names are stripped and non-empty
    - Decision bodies allow player_id=None ("no qualifying winner")

Design Decisions:
    - Field-level limits only; whether an operation applies to the current game
      is decided by core/enforce_marks.py, so a valid body may still be rejected
"""

from typing import Annotated

from pydantic import BaseModel, Field, field_validator

from tour_scorecard.core.domain_types import HOLES_PER_ROUND

HoleNumber = Annotated[int, Field(ge=1, le=HOLES_PER_ROUND)]


class PlayerCreate(BaseModel):
    """One roster entry; id generated when omitted."""
    id: str | None = Field(None, min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=60)
    color: str | None = Field(None, max_length=32)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class GameCreate(BaseModel):
    course_id: str = Field(min_length=1, max_length=64)
    players: list[PlayerCreate] = Field(min_length=1, max_length=12)
    event_name: str | None = Field(None, max_length=200)
    date: str | None = Field(None, max_length=40)

    @field_validator("players")
    @classmethod
    def unique_player_ids(cls, v: list[PlayerCreate]) -> list[PlayerCreate]:
        ids = [p.id for p in v if p.id is not None]
        if len(ids) != len(set(ids)):
            raise ValueError("player ids must be unique")
        return v


class CourseChange(BaseModel):
    course_id: str = Field(min_length=1, max_length=64)


class CurrentHoleUpdate(BaseModel):
    hole_number: HoleNumber


class ScoreUpdate(BaseModel):
    player_id: str
    hole_number: HoleNumber
    strokes: int = Field(ge=0, le=20)
    putts: int | None = Field(None, ge=0, le=20)


class DecisionUpdate(BaseModel):
    """CTP / LD winner; None records "no qualifying winner"."""
    hole_number: HoleNumber
    player_id: str | None = None


class DecisionClear(BaseModel):
    hole_number: HoleNumber


class MarkUpdate(BaseModel):
    hole_number: HoleNumber
    player_id: str
    value: bool


class HoleToggleUpdate(BaseModel):
    hole_number: HoleNumber
    value: bool
