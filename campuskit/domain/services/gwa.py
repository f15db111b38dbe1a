from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from campuskit.domain.entities.gwa import (
    GradeFormat,
    GradingScale,
    GwaCourse,
    GwaSummary,
    HonorsBand,
    LatinHonors,
)
from campuskit.domain.exceptions import GwaInputError


TWO_PLACES = Decimal("0.01")
NO_HONORS: LatinHonors = "No Latin Honors"

# Bands are expressed in descending format (1.00 is the best grade).
HONORS_BANDS: dict[GradingScale, tuple[HonorsBand, ...]] = {
    "4-point": (
        HonorsBand("Summa Cum Laude", Decimal("1.00"), Decimal("1.20"), lower_inclusive=True),
        HonorsBand("Magna Cum Laude", Decimal("1.20"), Decimal("1.45"), lower_inclusive=False),
        HonorsBand("Cum Laude", Decimal("1.45"), Decimal("1.75"), lower_inclusive=False),
    ),
    "5-point": (
        HonorsBand("Summa Cum Laude", Decimal("1.00"), Decimal("1.25"), lower_inclusive=True),
        HonorsBand("Magna Cum Laude", Decimal("1.25"), Decimal("1.56"), lower_inclusive=False),
        HonorsBand("Cum Laude", Decimal("1.56"), Decimal("1.94"), lower_inclusive=False),
    ),
}


def max_grade_for_scale(scale: GradingScale) -> Decimal:
    if scale == "4-point":
        return Decimal("4")
    if scale == "5-point":
        return Decimal("5")
    raise GwaInputError(f"Unsupported grading scale: {scale!r}.")


def _check_format(grade_format: GradeFormat) -> None:
    if grade_format not in ("ascending", "descending"):
        raise GwaInputError(f"Unsupported grade format: {grade_format!r}.")


def flip_grade(grade: Decimal, *, max_grade: Decimal) -> Decimal:
    """Convert a grade between ascending and descending conventions."""
    return max_grade - grade + Decimal("1")


def is_valid_course(course: GwaCourse, *, max_grade: Decimal) -> bool:
    if course.units is None or course.grade is None:
        return False
    if not course.units.is_finite() or not course.grade.is_finite():
        return False
    if course.units <= 0:
        return False
    return Decimal("0") <= course.grade <= max_grade


def compute_gwa(
    *,
    courses: list[GwaCourse],
    scale: GradingScale,
    grade_format: GradeFormat,
) -> Decimal:
    """Units-weighted mean grade, rounded half-up to two places.

    Ascending grades are normalized to the descending convention before
    weighting and the mean is converted back afterwards. Courses with
    missing or non-positive units or an out-of-range grade are skipped.
    """
    _check_format(grade_format)
    max_grade = max_grade_for_scale(scale)
    valid = [course for course in courses if is_valid_course(course, max_grade=max_grade)]
    if not valid:
        return Decimal("0.00")

    weighted_points = Decimal("0")
    total_units = Decimal("0")
    for course in valid:
        grade = course.grade
        if grade_format == "ascending":
            grade = flip_grade(grade, max_grade=max_grade)
        weighted_points += course.units * grade
        total_units += course.units

    gwa = weighted_points / total_units
    if grade_format == "ascending":
        gwa = flip_grade(gwa, max_grade=max_grade)
    return gwa.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _in_band(value: Decimal, band: HonorsBand) -> bool:
    above_lower = value >= band.lower if band.lower_inclusive else value > band.lower
    return above_lower and value <= band.upper


def classify_latin_honors(
    *,
    gwa: Decimal,
    scale: GradingScale,
    grade_format: GradeFormat,
) -> LatinHonors:
    _check_format(grade_format)
    max_grade = max_grade_for_scale(scale)
    adjusted = gwa
    if grade_format == "ascending":
        adjusted = flip_grade(gwa, max_grade=max_grade)

    for band in HONORS_BANDS[scale]:
        if _in_band(adjusted, band):
            return band.honors
    return NO_HONORS


def summarize_gwa(
    *,
    courses: list[GwaCourse],
    scale: GradingScale,
    grade_format: GradeFormat,
) -> GwaSummary:
    max_grade = max_grade_for_scale(scale)
    valid = [course for course in courses if is_valid_course(course, max_grade=max_grade)]
    gwa = compute_gwa(courses=courses, scale=scale, grade_format=grade_format)
    return GwaSummary(
        gwa=gwa,
        latin_honors=classify_latin_honors(gwa=gwa, scale=scale, grade_format=grade_format),
        valid_courses=len(valid),
        total_units=sum((course.units for course in valid), Decimal("0")),
    )
