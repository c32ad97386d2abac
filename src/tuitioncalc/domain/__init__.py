"""Domain models, calendar utilities and business rules."""

from tuitioncalc.domain.calendar import (
    add_days,
    format_date_only,
    normalize_course_days,
    parse_date_only,
    week_index,
    weekday_index,
)
from tuitioncalc.domain.models import (
    BreakRange,
    CartInputs,
    CartLineItem,
    CourseCatalog,
    CourseCategory,
    CourseDefinition,
    CourseDetails,
    CourseInputs,
    CourseType,
    DynamicTime,
    FeeResult,
    FixedTime,
    OnOffTime,
    RecordingAvailability,
    RecordingSplit,
    ScheduleInput,
    ScheduleResult,
    TimeOption,
    TimeSpec,
)
from tuitioncalc.domain.policies import (
    CoursePolicy,
    DefaultCoursePolicy,
    DefaultFeePolicy,
    FeePolicy,
    ScheduleConfig,
)

__all__ = [
    # Calendar
    "add_days",
    "format_date_only",
    "normalize_course_days",
    "parse_date_only",
    "week_index",
    "weekday_index",
    # Catalog models
    "BreakRange",
    "CourseCatalog",
    "CourseCategory",
    "CourseDefinition",
    "CourseType",
    "DynamicTime",
    "FixedTime",
    "OnOffTime",
    "RecordingAvailability",
    "TimeOption",
    "TimeSpec",
    # Calculation models
    "CartInputs",
    "CartLineItem",
    "CourseDetails",
    "CourseInputs",
    "FeeResult",
    "RecordingSplit",
    "ScheduleInput",
    "ScheduleResult",
    # Policies
    "CoursePolicy",
    "DefaultCoursePolicy",
    "DefaultFeePolicy",
    "FeePolicy",
    "ScheduleConfig",
]
