from __future__ import annotations

from campuskit.application.dto.gwa import CalculateGwaInput, CalculateGwaOutput
from campuskit.domain.services.gwa import summarize_gwa


class CalculateGwaUseCase:
    def execute(self, command: CalculateGwaInput) -> CalculateGwaOutput:
        summary = summarize_gwa(
            courses=command.courses,
            scale=command.scale,
            grade_format=command.grade_format,
        )
        return CalculateGwaOutput(
            gwa=summary.gwa,
            latin_honors=summary.latin_honors,
            scale=command.scale,
            grade_format=command.grade_format,
            valid_courses=summary.valid_courses,
            total_units=summary.total_units,
        )
