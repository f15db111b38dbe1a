from __future__ import annotations

from decimal import Decimal, InvalidOperation

from fastapi import APIRouter, Depends, HTTPException

from campuskit.api.deps import get_calculate_gwa_use_case
from campuskit.api.schemas.gwa import GwaRequest, GwaResponse
from campuskit.application.dto.gwa import CalculateGwaInput
from campuskit.application.use_cases.calculate_gwa import CalculateGwaUseCase
from campuskit.domain.entities.gwa import GwaCourse
from campuskit.domain.exceptions import GwaInputError


router = APIRouter()


def _to_decimal(value: Decimal | str | None) -> Decimal | None:
    """Unparseable values become None so the course is skipped, not the request."""
    if value is None or isinstance(value, Decimal):
        return value
    try:
        return Decimal(value.strip())
    except InvalidOperation:
        return None


@router.post("/v1/gwa", response_model=GwaResponse)
def calculate_gwa(
    req: GwaRequest,
    use_case: CalculateGwaUseCase = Depends(get_calculate_gwa_use_case),
):
    try:
        result = use_case.execute(
            CalculateGwaInput(
                scale=req.scale,
                grade_format=req.grade_format,
                courses=[
                    GwaCourse(
                        units=_to_decimal(course.units),
                        grade=_to_decimal(course.grade),
                        name=course.name,
                    )
                    for course in req.courses
                ],
            )
        )
    except GwaInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return GwaResponse(
        gwa=result.gwa,
        latin_honors=result.latin_honors,
        scale=result.scale,
        grade_format=result.grade_format,
        valid_courses=result.valid_courses,
        total_units=result.total_units,
    )
