"""Scorecard Schemas - save and import requests."""

from pydantic import BaseModel, Field


class ScorecardSave(BaseModel):
    """Save the current state of a game under a name (event name when omitted)."""
    game_id: str = Field(min_length=1, max_length=64)
    name: str | None = Field(None, max_length=200)


class ScorecardImport(BaseModel):
    """Raw export-file text, exactly as produced by GET /scorecards/export."""
    content: str = Field(min_length=1, max_length=5_000_000)
