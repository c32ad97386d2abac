"""Fee and display resolution for a course selection.

Resolves which weekly fee applies to a course variant, the class-time
string to show, and the human-readable period label.
"""

from datetime import date
from typing import Optional

from tuitioncalc.domain.calendar import DateInput, parse_date_only, weekday_index
from tuitioncalc.domain.models import (
    CourseCatalog,
    CourseDefinition,
    CourseDetails,
    CourseType,
)
from tuitioncalc.domain.policies import DefaultFeePolicy, FeePolicy, ScheduleConfig
from tuitioncalc.scheduling.schedule_resolver import get_end_date


def weeks_label(weeks: int) -> str:
    return f"{weeks} week" if weeks == 1 else f"{weeks} weeks"


def duration_label(paid_weeks: int, schedule_weeks: Optional[int] = None) -> str:
    """Period label; mentions both counts when breaks or skips extend the schedule."""
    if schedule_weeks and schedule_weeks > paid_weeks:
        return f"{weeks_label(paid_weeks)} enrolled / {weeks_label(schedule_weeks)} scheduled"
    return weeks_label(paid_weeks)


class FeeResolver:
    """Resolves weekly fee, class time and period for a course variant.

    Example:
        >>> resolver = FeeResolver(catalog)
        >>> details = resolver.get_course_details("sat_1500", 4, start_date="2026-01-05")
        >>> details.total_fee
        3200000
    """

    def __init__(
        self,
        catalog: CourseCatalog,
        fee_policy: Optional[FeePolicy] = None,
        schedule_config: Optional[ScheduleConfig] = None,
    ):
        self.catalog = catalog
        self.fee_policy = fee_policy or DefaultFeePolicy()
        self.schedule_config = schedule_config or ScheduleConfig()

    def get_course_details(
        self,
        course_key: str,
        paid_weeks: int,
        start_date: DateInput = None,
        exclude_math: bool = False,
        campus: Optional[str] = None,
        dynamic_time: Optional[str] = None,
        course_type: Optional[str] = None,
        schedule_weeks: Optional[int] = None,
    ) -> Optional[CourseDetails]:
        """Resolve fee and display data.

        Args:
            course_key: Catalog key.
            paid_weeks: Billed weeks; the total fee is weekly fee times this.
            start_date: First day; without it the period reads as TBD.
            exclude_math: Apply the math-exclusion fee.
            campus: Campus label for dynamic-campus courses.
            dynamic_time: Selected time-slot label.
            course_type: Selected delivery mode label.
            schedule_weeks: Calendar weeks spanned; the end date is computed
                from this, not from the paid weeks.

        Returns:
            CourseDetails, or None for an unknown course.
        """
        course = self.catalog.get(course_key)
        if course is None:
            return None

        weekly_fee = course.weekly_fee
        time_text = ""

        linked = self.catalog.get(course.linked_course_key(campus))
        if linked is not None:
            weekly_fee = linked.weekly_fee
            linked_time = linked.time_spec.resolve(CourseType.ONLINE) if linked.time_spec else None
            if linked_time:
                time_text = self._with_suffix(linked_time)

        if exclude_math:
            weekly_fee = self.fee_policy.math_excluded_weekly_fee(course, weekly_fee)

        own_time = self._resolve_time(course, dynamic_time, course_type)
        if own_time:
            time_text = self._with_suffix(own_time)

        span_weeks = schedule_weeks if schedule_weeks and schedule_weeks > 0 else paid_weeks
        label = duration_label(paid_weeks, span_weeks)

        start = parse_date_only(start_date)
        end = None
        if start is not None:
            end = get_end_date(start, span_weeks, course.end_day, self.schedule_config)
            duration_text = f"{self._short_date(start)} ~ {self._short_date(end)} ({label})"
        else:
            duration_text = f"Dates TBD ({label})"

        return CourseDetails(
            duration_text=duration_text,
            time_text=time_text,
            total_fee=weekly_fee * paid_weeks,
            weekly_fee=weekly_fee,
            paid_weeks=paid_weeks,
            schedule_weeks=span_weeks,
            start_date=start,
            end_date=end,
        )

    def _resolve_time(
        self,
        course: CourseDefinition,
        dynamic_time: Optional[str],
        course_type: Optional[str],
    ) -> Optional[str]:
        if course.time_spec is None:
            return None
        return course.time_spec.resolve(CourseType.parse(course_type), dynamic_time)

    def _with_suffix(self, text: str) -> str:
        return text + self.fee_policy.time_suffix()

    def _short_date(self, value: Optional[date]) -> str:
        if value is None:
            return ""
        return f"{value.month}.{value.day}({self.catalog.weekday_name(weekday_index(value))})"
