"""Course Schemas - custom course creation.

Invariants:
    - Exactly 18 holes, pars 3..6, handicap ranks 1..18 at field level
    - Cross-hole rules (numbering, unique ranks) checked by core/course_catalog.validate_course
"""

from pydantic import BaseModel, Field, field_validator

from tour_scorecard.core.domain_types import HOLES_PER_ROUND


class HoleCreate(BaseModel):
    hole_number: int = Field(ge=1, le=HOLES_PER_ROUND)
    par: int = Field(ge=3, le=6)
    handicap: int = Field(ge=1, le=HOLES_PER_ROUND)
    distance: int | None = Field(None, ge=0, le=1000)
    description: str | None = Field(None, max_length=200)


class CourseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    location: str | None = Field(None, max_length=200)
    holes: list[HoleCreate] = Field(min_length=HOLES_PER_ROUND, max_length=HOLES_PER_ROUND)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v
