from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field


class GwaCourseRequest(BaseModel):
    name: str | None = Field(default=None, max_length=120)
    units: Decimal | str | None = None
    grade: Decimal | str | None = None


class GwaRequest(BaseModel):
    scale: Literal["4-point", "5-point"] = "4-point"
    grade_format: Literal["ascending", "descending"] = "descending"
    courses: list[GwaCourseRequest] = Field(default_factory=list, max_length=200)


class GwaResponse(BaseModel):
    gwa: Decimal
    latin_honors: str
    scale: str
    grade_format: str
    valid_courses: int
    total_units: Decimal
