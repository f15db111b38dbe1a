from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from campuskit.domain.entities.gwa import GradeFormat, GradingScale, GwaCourse, LatinHonors


@dataclass(frozen=True)
class CalculateGwaInput:
    scale: GradingScale
    grade_format: GradeFormat
    courses: list[GwaCourse]


@dataclass(frozen=True)
class CalculateGwaOutput:
    gwa: Decimal
    latin_honors: LatinHonors
    scale: GradingScale
    grade_format: GradeFormat
    valid_courses: int
    total_units: Decimal
