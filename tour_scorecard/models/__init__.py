"""ORM Models - SQLAlchemy declarative models for persisted games, scorecards and courses.

Invariants:
    - All models inherit from Base (db/base.py)
    - Game state lives in one JSON snapshot column; the snapshot codec owns its shape

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata knows every table before create_all
"""

from tour_scorecard.models.game_record import GameRecord  # noqa: F401
from tour_scorecard.models.scorecard import Scorecard  # noqa: F401
from tour_scorecard.models.custom_course import CustomCourse  # noqa: F401
