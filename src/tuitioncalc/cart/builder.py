"""Cart line-item construction.

This module provides the CartBuilder that validates a student's course
selection, prices it, and returns the line item the caller keeps in its
cart. The builder holds no state between calls.
"""

import logging
from typing import Iterable, Optional

from tuitioncalc.domain.calendar import coerce_int, parse_date_only
from tuitioncalc.domain.models import (
    CartInputs,
    CartLineItem,
    CourseCatalog,
    CourseDefinition,
    CourseInputs,
)
from tuitioncalc.domain.policies import (
    CoursePolicy,
    DefaultCoursePolicy,
    DefaultFeePolicy,
    FeePolicy,
    ScheduleConfig,
)
from tuitioncalc.errors import InvalidLineItemError, UnknownCourseError
from tuitioncalc.pricing.calculator import resolve_schedule
from tuitioncalc.pricing.fee_resolver import FeeResolver
from tuitioncalc.pricing.recording import calculate_recording_fee, distinct_recording_dates
from tuitioncalc.scheduling.schedule_resolver import calculate_total_days
from tuitioncalc.scheduling.skip_weeks import normalize_skip_weeks
from tuitioncalc.validation.validator import (
    LineItemValidator,
    ValidationError,
    ValidationErrorType,
)

log = logging.getLogger(__name__)


def is_duplicate_item(
    course_key: str,
    inputs: CourseInputs,
    current_cart: Iterable[CartLineItem],
) -> bool:
    """Whether the cart already holds the same course selection.

    Two selections match when course, start date, course type and
    normalized skip weeks are all equal.
    """
    start = parse_date_only(inputs.start_date)
    skip_weeks = normalize_skip_weeks(inputs.skip_weeks, inputs.period)
    for item in current_cart:
        other = item.inputs
        if (
            item.course_key == course_key
            and parse_date_only(other.start_date) == start
            and other.course_type == inputs.course_type
            and normalize_skip_weeks(other.skip_weeks, other.period) == skip_weeks
        ):
            return True
    return False


class CartBuilder:
    """Builds priced cart line items.

    Example:
        >>> builder = CartBuilder(catalog)
        >>> item = builder.create_cart_item(cart_inputs, current_cart=cart)
        >>> cart.append(item)
    """

    def __init__(
        self,
        catalog: CourseCatalog,
        fee_policy: Optional[FeePolicy] = None,
        course_policy: Optional[CoursePolicy] = None,
        schedule_config: Optional[ScheduleConfig] = None,
    ):
        self.catalog = catalog
        self.fee_policy = fee_policy or DefaultFeePolicy()
        self.course_policy = course_policy or DefaultCoursePolicy()
        self.schedule_config = schedule_config or ScheduleConfig()
        self.fee_resolver = FeeResolver(catalog, self.fee_policy, self.schedule_config)
        self.validator = LineItemValidator(self.course_policy)

    def create_cart_item(
        self,
        cart_inputs: CartInputs,
        current_cart: Iterable[CartLineItem] = (),
    ) -> CartLineItem:
        """Validate, price and return a cart line item.

        Args:
            cart_inputs: Student name, course key, discount and choices.
            current_cart: Items already in the caller's cart.

        Returns:
            The priced CartLineItem.

        Raises:
            UnknownCourseError: If the course key is not in the catalog.
            InvalidLineItemError: If the selection fails validation or
                duplicates an item already in the cart.
        """
        course = self.catalog.get(cart_inputs.course_key)
        if course is None:
            raise UnknownCourseError(cart_inputs.course_key)

        inputs = cart_inputs.course
        period = coerce_int(inputs.period) or 0
        schedule = resolve_schedule(course, inputs, self.schedule_config)
        total_days = calculate_total_days(course.class_days, course.end_day, period)

        result = self.validator.validate(course, cart_inputs, schedule, total_days)
        if not result.is_valid:
            raise InvalidLineItemError(result.errors)

        if is_duplicate_item(course.key, inputs, current_cart):
            raise InvalidLineItemError([ValidationError.of(ValidationErrorType.DUPLICATE_ITEM)])

        details = self.fee_resolver.get_course_details(
            course.key,
            period,
            start_date=inputs.start_date,
            exclude_math=inputs.exclude_math,
            campus=inputs.campus,
            dynamic_time=inputs.dynamic_time,
            course_type=inputs.course_type,
            schedule_weeks=schedule.schedule_weeks,
        )

        recording_dates = distinct_recording_dates(inputs.recording_dates)
        recording_days = len(recording_dates)
        split = calculate_recording_fee(
            details.total_fee,
            total_days,
            recording_days,
            cart_inputs.discount,
            rate=self.fee_policy.recording_rate(),
        )

        item = CartLineItem(
            student_name=cart_inputs.student_name.strip(),
            course_key=course.key,
            discount=cart_inputs.discount,
            inputs=inputs,
            display_name=self.display_name(course, inputs),
            final_fee=split.total,
            normal_fee=split.normal,
            recording_fee=split.recording,
            details=details,
            total_class_days=total_days,
            recording_days=recording_days,
            recording_dates=recording_dates,
            normalized_skip_weeks=list(schedule.normalized_skip_weeks),
            schedule_weeks=schedule.schedule_weeks,
        )
        log.debug("Priced %s for %s: %d", item.display_name, item.student_name, item.final_fee)
        return item

    def display_name(self, course: CourseDefinition, inputs: CourseInputs) -> str:
        """Course name with the selected variant appended."""
        name = self.catalog.course_name(course.key)

        if (course.has_time_options or course.dynamic_time) and inputs.dynamic_time:
            name = f"{name} ({inputs.dynamic_time})"
        elif course.campus_options and inputs.campus:
            name = f"{name} ({inputs.campus})"

        if self.course_policy.requires_level(course.key):
            name = self.course_policy.level_display_name(course.key, inputs.level) or name

        course_type = (inputs.course_type or "").strip()
        if course_type and course_type not in name:
            name = f"{name} {course_type}"
        return name


def create_cart_item(
    catalog: CourseCatalog,
    cart_inputs: CartInputs,
    current_cart: Iterable[CartLineItem] = (),
) -> CartLineItem:
    """Convenience wrapper around CartBuilder with default policies."""
    return CartBuilder(catalog).create_cart_item(cart_inputs, current_cart)
