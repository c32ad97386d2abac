"""Validation of cart line items.

This module is the single place where a student's course selection is
checked before it is priced and added to a cart. Every problem found is
reported; nothing is priced until the selection is clean.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from tuitioncalc.domain.calendar import coerce_int, parse_date_only, weekday_index
from tuitioncalc.domain.models import (
    CartInputs,
    CourseDefinition,
    CourseType,
    ScheduleResult,
)
from tuitioncalc.domain.policies import CoursePolicy, DefaultCoursePolicy
from tuitioncalc.pricing.recording import distinct_recording_dates, is_valid_discount
from tuitioncalc.scheduling.schedule_resolver import get_available_recording_dates


class ValidationErrorType(Enum):
    """Types of validation errors."""

    MISSING_STUDENT_NAME = "missing_student_name"
    MISSING_START_DATE = "missing_start_date"
    INVALID_START_DATE = "invalid_start_date"
    INVALID_PERIOD = "invalid_period"
    INVALID_DISCOUNT = "invalid_discount"
    START_DAY_NOT_ALLOWED = "start_day_not_allowed"
    MISSING_COURSE_TYPE = "missing_course_type"
    MISSING_TIME_OPTION = "missing_time_option"
    MISSING_LEVEL = "missing_level"
    RECORDING_UNAVAILABLE = "recording_unavailable"
    INVALID_RECORDING_DATE = "invalid_recording_date"
    DUPLICATE_RECORDING_DATE = "duplicate_recording_date"
    ALL_DAYS_RECORDING = "all_days_recording"
    SKIP_FIRST_WEEK = "skip_first_week"
    DUPLICATE_ITEM = "duplicate_item"


MESSAGES = {
    ValidationErrorType.MISSING_STUDENT_NAME: "Enter the student's name.",
    ValidationErrorType.MISSING_START_DATE: "Enter a start date.",
    ValidationErrorType.INVALID_START_DATE: "The start date is not a valid date.",
    ValidationErrorType.INVALID_PERIOD: "Select a number of weeks within the course's allowed range.",
    ValidationErrorType.INVALID_DISCOUNT: "The discount must be at least 0% and below 100%.",
    ValidationErrorType.START_DAY_NOT_ALLOWED: "Classes can only start on the course's start weekdays.",
    ValidationErrorType.MISSING_COURSE_TYPE: "Select a course type.",
    ValidationErrorType.MISSING_TIME_OPTION: "Select a time option.",
    ValidationErrorType.MISSING_LEVEL: "Select a level.",
    ValidationErrorType.RECORDING_UNAVAILABLE: "Recorded lectures are not available for the selected course type.",
    ValidationErrorType.INVALID_RECORDING_DATE: "Recorded lecture dates must be scheduled class days.",
    ValidationErrorType.DUPLICATE_RECORDING_DATE: "Each recorded lecture date can only be selected once.",
    ValidationErrorType.ALL_DAYS_RECORDING: "At least one day must be attended live.",
    ValidationErrorType.SKIP_FIRST_WEEK: "Week 1 cannot be skipped.",
    ValidationErrorType.DUPLICATE_ITEM: "This course is already in the list.",
}


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    details: dict = field(default_factory=dict)

    @classmethod
    def of(cls, error_type: ValidationErrorType, **details) -> "ValidationError":
        return cls(error_type=error_type, message=MESSAGES[error_type], details=details)

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationResult:
    """Result of validating a line item."""

    is_valid: bool = True
    errors: list[ValidationError] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def has_error(self, error_type: ValidationErrorType) -> bool:
        return any(error.error_type == error_type for error in self.errors)

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]


class LineItemValidator:
    """Validates a course selection before it is priced.

    Example:
        >>> validator = LineItemValidator()
        >>> result = validator.validate(course, cart_inputs, schedule, total_days)
        >>> if not result.is_valid:
        ...     print("\\n".join(result.messages))
    """

    def __init__(self, course_policy: Optional[CoursePolicy] = None):
        self.course_policy = course_policy or DefaultCoursePolicy()

    def validate(
        self,
        course: CourseDefinition,
        cart_inputs: CartInputs,
        schedule: ScheduleResult,
        total_days: int,
    ) -> ValidationResult:
        """Validate a complete selection.

        Args:
            course: The selected course.
            cart_inputs: Student name, discount and course choices.
            schedule: Resolved schedule for the choices.
            total_days: Class days over the paid weeks.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult()

        if not (cart_inputs.student_name or "").strip():
            result.add_error(ValidationError.of(ValidationErrorType.MISSING_STUDENT_NAME))

        self._validate_start_date(course, cart_inputs, result)
        self._validate_period(course, cart_inputs, result)
        if not is_valid_discount(cart_inputs.discount):
            result.add_error(
                ValidationError.of(ValidationErrorType.INVALID_DISCOUNT, discount=cart_inputs.discount)
            )
        self._validate_selections(course, cart_inputs, result)
        self._validate_recording(course, cart_inputs, schedule, total_days, result)
        self._validate_skip_weeks(cart_inputs, result)

        return result

    def _validate_start_date(
        self,
        course: CourseDefinition,
        cart_inputs: CartInputs,
        result: ValidationResult,
    ) -> None:
        raw = cart_inputs.course.start_date
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            result.add_error(ValidationError.of(ValidationErrorType.MISSING_START_DATE))
            return

        start = parse_date_only(raw)
        if start is None:
            result.add_error(ValidationError.of(ValidationErrorType.INVALID_START_DATE, value=raw))
            return

        allowed = course.allowed_start_days
        if allowed and weekday_index(start) not in allowed:
            result.add_error(
                ValidationError.of(
                    ValidationErrorType.START_DAY_NOT_ALLOWED,
                    weekday=weekday_index(start),
                    allowed=list(allowed),
                )
            )

    def _validate_period(
        self,
        course: CourseDefinition,
        cart_inputs: CartInputs,
        result: ValidationResult,
    ) -> None:
        period = coerce_int(cart_inputs.course.period)
        too_short = course.min_weeks is not None and period is not None and period < course.min_weeks
        too_long = course.max_weeks is not None and period is not None and period > course.max_weeks
        if period is None or period <= 0 or too_short or too_long:
            result.add_error(
                ValidationError.of(
                    ValidationErrorType.INVALID_PERIOD,
                    period=cart_inputs.course.period,
                    min_weeks=course.min_weeks,
                    max_weeks=course.max_weeks,
                )
            )

    def _validate_selections(
        self,
        course: CourseDefinition,
        cart_inputs: CartInputs,
        result: ValidationResult,
    ) -> None:
        inputs = cart_inputs.course
        if course.is_on_off and not inputs.course_type:
            result.add_error(ValidationError.of(ValidationErrorType.MISSING_COURSE_TYPE))
        elif course.has_time_options and not inputs.dynamic_time:
            result.add_error(ValidationError.of(ValidationErrorType.MISSING_TIME_OPTION))

        if (
            self.course_policy.requires_course_type(course.key)
            and not inputs.course_type
            and not result.has_error(ValidationErrorType.MISSING_COURSE_TYPE)
        ):
            result.add_error(ValidationError.of(ValidationErrorType.MISSING_COURSE_TYPE))

        if self.course_policy.requires_level(course.key) and not inputs.level:
            result.add_error(ValidationError.of(ValidationErrorType.MISSING_LEVEL))

    def _validate_recording(
        self,
        course: CourseDefinition,
        cart_inputs: CartInputs,
        schedule: ScheduleResult,
        total_days: int,
        result: ValidationResult,
    ) -> None:
        inputs = cart_inputs.course
        recording_dates = list(inputs.recording_dates or ())
        if not recording_dates:
            return

        if not course.recording.allows(CourseType.parse(inputs.course_type)):
            result.add_error(
                ValidationError.of(
                    ValidationErrorType.RECORDING_UNAVAILABLE,
                    course_type=inputs.course_type,
                )
            )

        start = parse_date_only(inputs.start_date)
        if start is not None and schedule.schedule_weeks > 0:
            available = set(
                get_available_recording_dates(
                    start,
                    schedule.schedule_weeks,
                    course.class_days,
                    schedule.normalized_skip_weeks,
                    course.break_ranges,
                )
            )
            invalid = [raw for raw in recording_dates if parse_date_only(raw) not in available]
            if invalid:
                result.add_error(
                    ValidationError.of(ValidationErrorType.INVALID_RECORDING_DATE, dates=invalid)
                )

        parsed = [day for day in map(parse_date_only, recording_dates) if day is not None]
        distinct = distinct_recording_dates(parsed)
        if len(distinct) < len(parsed):
            repeated = sorted({day for day in parsed if parsed.count(day) > 1})
            result.add_error(
                ValidationError.of(ValidationErrorType.DUPLICATE_RECORDING_DATE, dates=repeated)
            )

        if len(distinct) >= total_days:
            result.add_error(
                ValidationError.of(
                    ValidationErrorType.ALL_DAYS_RECORDING,
                    recording_days=len(distinct),
                    total_days=total_days,
                )
            )

    def _validate_skip_weeks(self, cart_inputs: CartInputs, result: ValidationResult) -> None:
        for raw in cart_inputs.course.skip_weeks or ():
            if coerce_int(raw) == 1:
                result.add_error(ValidationError.of(ValidationErrorType.SKIP_FIRST_WEEK))
                return
