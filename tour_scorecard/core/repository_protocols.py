"""Boundary Protocols - contracts between core and shell.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, while the core functions fed by
      them (scoring, eligibility, mutations) are never async themselves
"""

from typing import Protocol

from tour_scorecard.core.game_state import Course


class CourseProvider(Protocol):
    """Supplies Course values: built-in catalog, custom courses or a remote lookup."""
    async def get(self, course_id: str) -> Course | None: ...
    async def search(self, query: str) -> list[Course]: ...


class CustomCourseRepository(Protocol):
    """Contract for custom course persistence."""
    async def list(self) -> list[Course]: ...
    async def save(self, course: Course) -> None: ...
    async def delete(self, course_id: str) -> bool: ...


class GameRepository(Protocol):
    """Contract for current-game snapshot persistence."""
    async def load(self, game_id: str) -> dict | None: ...
    async def save(self, game_id: str, snapshot: dict) -> None: ...
    async def delete(self, game_id: str) -> bool: ...


class ScorecardRepository(Protocol):
    """Contract for saved scorecards ({id, name, createdAt, updatedAt, data})."""
    async def list(self) -> list[dict]: ...
    async def save(self, scorecard: dict) -> None: ...
    async def delete(self, scorecard_id: str) -> bool: ...
