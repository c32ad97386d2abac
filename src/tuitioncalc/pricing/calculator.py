"""Tuition calculation for a single course selection.

Ties the schedule engine and the fee resolver together to produce the
amount due for one course, as shown in the live fee preview.
"""

from typing import Optional

from tuitioncalc.domain.calendar import coerce_int
from tuitioncalc.domain.models import (
    CourseCatalog,
    CourseDefinition,
    CourseInputs,
    FeeResult,
    ScheduleInput,
    ScheduleResult,
)
from tuitioncalc.domain.policies import DefaultFeePolicy, FeePolicy, ScheduleConfig
from tuitioncalc.pricing.fee_resolver import FeeResolver
from tuitioncalc.pricing.recording import (
    calculate_recording_fee,
    distinct_recording_dates,
    is_valid_discount,
)
from tuitioncalc.scheduling.schedule_resolver import calculate_total_days, get_schedule_weeks

ALL_RECORDING_ERROR = "All days cannot be recording"
INVALID_DISCOUNT_ERROR = "Discount must be at least 0 and below 1"


def resolve_schedule(
    course: CourseDefinition,
    inputs: CourseInputs,
    config: Optional[ScheduleConfig] = None,
) -> ScheduleResult:
    """Schedule for a course selection, using the course's days, end day and breaks."""
    return get_schedule_weeks(
        ScheduleInput(
            start_date=inputs.start_date,
            paid_weeks=coerce_int(inputs.period) or 0,
            skip_weeks=tuple(inputs.skip_weeks or ()),
            course_days=course.class_days,
            end_day=course.end_day,
            break_ranges=course.break_ranges,
        ),
        config,
    )


class TuitionCalculator:
    """Calculates tuition for course selections against one catalog snapshot.

    Example:
        >>> calculator = TuitionCalculator(catalog)
        >>> result = calculator.calculate_total_fee("sat_1500", 0.1, inputs)
        >>> result.total_fee
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
        self.fee_resolver = FeeResolver(catalog, self.fee_policy, self.schedule_config)

    def calculate_total_fee(
        self,
        course_key: str,
        discount: float,
        inputs: CourseInputs,
    ) -> FeeResult:
        """Amount due for one course selection.

        Args:
            course_key: Catalog key.
            discount: Discount rate for live days, in [0, 1).
            inputs: The student's choices.

        Returns:
            FeeResult. Unknown courses and non-positive periods give a zero
            total with no details. Selecting every class day as a recording
            day, or a discount outside [0, 1), gives a zero total with an
            error message. Repeated recording dates count once.
        """
        course = self.catalog.get(course_key)
        period = coerce_int(inputs.period) or 0
        if course is None or period <= 0:
            return FeeResult(total_fee=0)
        if not is_valid_discount(discount):
            return FeeResult(total_fee=0, error=INVALID_DISCOUNT_ERROR)

        recording_days = len(distinct_recording_dates(inputs.recording_dates))
        schedule = resolve_schedule(course, inputs, self.schedule_config)
        total_days = calculate_total_days(course.class_days, course.end_day, period)

        if recording_days > 0 and recording_days >= total_days:
            return FeeResult(total_fee=0, error=ALL_RECORDING_ERROR)

        details = self.fee_resolver.get_course_details(
            course_key,
            period,
            start_date=inputs.start_date,
            exclude_math=inputs.exclude_math,
            campus=inputs.campus,
            dynamic_time=inputs.dynamic_time,
            course_type=inputs.course_type,
            schedule_weeks=schedule.schedule_weeks,
        )
        if details is None:
            return FeeResult(total_fee=0)

        split = calculate_recording_fee(
            details.total_fee,
            total_days,
            recording_days,
            discount,
            rate=self.fee_policy.recording_rate(),
        )
        return FeeResult(total_fee=split.total, details=details)


def calculate_total_fee(
    catalog: CourseCatalog,
    course_key: str,
    discount: float,
    inputs: CourseInputs,
) -> FeeResult:
    """Convenience wrapper around TuitionCalculator with default policies."""
    return TuitionCalculator(catalog).calculate_total_fee(course_key, discount, inputs)
