"""Services Layer - request handlers and repositories between the API routes and the core.

Invariants:
    - Handlers validate with core/enforce_marks.py, mutate with core/game_mutations.py,
      then persist through a repository
    - Repositories are the only code that touches the ORM models

Design Decisions:
    - One handler class per resource (games, courses, scorecards)
"""
