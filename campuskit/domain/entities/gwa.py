from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal


GradingScale = Literal["4-point", "5-point"]
GradeFormat = Literal["ascending", "descending"]
LatinHonors = Literal["Summa Cum Laude", "Magna Cum Laude", "Cum Laude", "No Latin Honors"]


@dataclass(frozen=True)
class GwaCourse:
    units: Decimal | None
    grade: Decimal | None
    name: str | None = None


@dataclass(frozen=True)
class HonorsBand:
    honors: LatinHonors
    lower: Decimal
    upper: Decimal
    lower_inclusive: bool


@dataclass(frozen=True)
class GwaSummary:
    gwa: Decimal
    latin_honors: LatinHonors
    valid_courses: int
    total_units: Decimal
