"""Domain models for the tuition calculation engine.

This module contains the data structures shared by every part of the
engine: the immutable course catalog, the per-calculation schedule
inputs and results, and the priced cart line items handed back to the
caller.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Union

from tuitioncalc.domain.calendar import ALL_WEEK_DAYS


class CourseType(Enum):
    """Delivery mode of a course."""

    ONLINE = "online"
    OFFLINE = "offline"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["CourseType"]:
        """Recognize a course-type label.

        Catalog data and UI selections use both English and Korean labels,
        sometimes with extra decoration (e.g. "온라인 (Zoom)").
        """
        text = str(value or "").strip().lower()
        if not text:
            return None
        if "offline" in text or "오프라인" in text:
            return cls.OFFLINE
        if "online" in text or "온라인" in text:
            return cls.ONLINE
        return None


@dataclass(frozen=True)
class BreakRange:
    """A course-wide holiday range, both ends inclusive.

    Attributes:
        start: First day without classes.
        end: Last day without classes.
    """

    start: date
    end: date

    def clip(self, start: date, end: date) -> Optional["BreakRange"]:
        """Intersect with [start, end]; None when they do not overlap."""
        lo = max(self.start, start)
        hi = min(self.end, end)
        if lo > hi:
            return None
        return BreakRange(start=lo, end=hi)


@dataclass(frozen=True)
class FixedTime:
    """A single class-time string."""

    text: str

    def resolve(
        self,
        course_type: Optional[CourseType] = None,
        label: Optional[str] = None,
    ) -> Optional[str]:
        return self.text or None


@dataclass(frozen=True)
class OnOffTime:
    """Separate class times for online and offline delivery."""

    online: Optional[str] = None
    offline: Optional[str] = None

    def resolve(
        self,
        course_type: Optional[CourseType] = None,
        label: Optional[str] = None,
    ) -> Optional[str]:
        if course_type == CourseType.ONLINE:
            return self.online
        if course_type == CourseType.OFFLINE:
            return self.offline
        return None


@dataclass(frozen=True)
class TimeOption:
    """One selectable time slot of a dynamic-time course."""

    label: str
    time: str


@dataclass(frozen=True)
class DynamicTime:
    """A list of labelled time slots; the student picks one."""

    options: tuple[TimeOption, ...] = ()

    @property
    def labels(self) -> list[str]:
        return [option.label for option in self.options]

    def resolve(
        self,
        course_type: Optional[CourseType] = None,
        label: Optional[str] = None,
    ) -> Optional[str]:
        if not label:
            return None
        for option in self.options:
            if option.label == label:
                return option.time or None
        return None


TimeSpec = Union[FixedTime, OnOffTime, DynamicTime]


@dataclass(frozen=True)
class RecordingAvailability:
    """Whether recorded lectures may replace live days.

    Attributes:
        uniform: If set, applies regardless of course type.
        online: Allowed for online delivery (when uniform is None).
        offline: Allowed for offline delivery (when uniform is None).
    """

    uniform: Optional[bool] = None
    online: bool = False
    offline: bool = False

    @classmethod
    def unavailable(cls) -> "RecordingAvailability":
        return cls(uniform=False)

    def allows(self, course_type: Optional[CourseType]) -> bool:
        if self.uniform is not None:
            return self.uniform
        if course_type == CourseType.ONLINE:
            return self.online
        if course_type == CourseType.OFFLINE:
            return self.offline
        return False


@dataclass(frozen=True)
class CourseDefinition:
    """An immutable course catalog entry.

    Attributes:
        key: Catalog key of the course (e.g. "sat_1500").
        name: Course name as stored on the entry itself.
        weekly_fee: Fee for one paid week.
        math_excluded_weekly_fee: Weekly fee when the math part is excluded.
        class_days: Weekdays with classes, 0=Sunday..6=Saturday, in
            schedule order (a weekend course may list Saturday before Sunday).
        allowed_start_days: Weekdays a student may start on (empty = any).
        end_day: Weekday the course schedule ends on.
        min_weeks: Minimum enrolment length, if restricted.
        max_weeks: Maximum enrolment length, if restricted.
        break_ranges: Normalized holiday ranges.
        time_spec: Class-time configuration.
        recording: Recorded-lecture availability.
        campus_options: Campus label -> linked course key.
        dynamic_time: Whether the course offers selectable time slots.
        has_math_option: Whether math exclusion may be selected.
    """

    key: str
    name: str = ""
    weekly_fee: int = 0
    math_excluded_weekly_fee: Optional[int] = None
    class_days: tuple[int, ...] = (1, 2, 3, 4, 5)
    allowed_start_days: tuple[int, ...] = ()
    end_day: int = 5
    min_weeks: Optional[int] = None
    max_weeks: Optional[int] = None
    break_ranges: tuple[BreakRange, ...] = ()
    time_spec: Optional[TimeSpec] = None
    recording: RecordingAvailability = field(default_factory=RecordingAvailability.unavailable)
    campus_options: tuple[tuple[str, str], ...] = ()
    dynamic_time: bool = False
    has_math_option: bool = False

    @property
    def class_day_set(self) -> frozenset[int]:
        return frozenset(self.class_days or ALL_WEEK_DAYS)

    @property
    def is_on_off(self) -> bool:
        return isinstance(self.time_spec, OnOffTime)

    @property
    def has_time_options(self) -> bool:
        return isinstance(self.time_spec, DynamicTime)

    def linked_course_key(self, campus: Optional[str]) -> Optional[str]:
        if not campus:
            return None
        for label, key in self.campus_options:
            if label == campus:
                return key
        return None


@dataclass(frozen=True)
class CourseCategory:
    """A named group of courses with their display labels."""

    name: str
    courses: tuple[tuple[str, str], ...] = ()  # (course key, label)


DEFAULT_WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class CourseCatalog:
    """An immutable snapshot of the course catalog.

    Every engine call receives a catalog explicitly; nothing is read from
    module state.
    """

    courses: dict[str, CourseDefinition] = field(default_factory=dict)
    categories: tuple[CourseCategory, ...] = ()
    weekday_names: tuple[str, ...] = DEFAULT_WEEKDAY_NAMES
    name: str = ""

    def __contains__(self, course_key: object) -> bool:
        return course_key in self.courses

    def get(self, course_key: Optional[str]) -> Optional[CourseDefinition]:
        if not course_key:
            return None
        return self.courses.get(course_key)

    def course_name(self, course_key: str) -> str:
        """Display name: category label, then the entry's own name, then the key."""
        for category in self.categories:
            for key, label in category.courses:
                if key == course_key:
                    return label
        course = self.courses.get(course_key)
        if course is not None and course.name:
            return course.name
        return course_key

    def category_of(self, course_key: str) -> Optional[str]:
        for category in self.categories:
            for key, _ in category.courses:
                if key == course_key:
                    return category.name
        return None

    def weekday_name(self, day: int) -> str:
        if 0 <= day < len(self.weekday_names):
            return self.weekday_names[day]
        return DEFAULT_WEEKDAY_NAMES[day % 7]


@dataclass(frozen=True)
class ScheduleInput:
    """Inputs for resolving the calendar span of one enrolment.

    Attributes:
        start_date: First day of the enrolment.
        paid_weeks: Number of weeks billed.
        skip_weeks: Requested skip-week numbers (raw, 1-based).
        course_days: Weekdays with classes (empty = every day).
        end_day: Weekday the schedule ends on (None = policy default).
        break_ranges: Course-wide holiday ranges (raw or normalized).
    """

    start_date: Optional[date]
    paid_weeks: int
    skip_weeks: tuple = ()
    course_days: tuple = ()
    end_day: Optional[int] = None
    break_ranges: tuple = ()


@dataclass(frozen=True)
class ScheduleResult:
    """Resolved calendar span.

    Attributes:
        schedule_weeks: Paid weeks plus skip weeks plus break-affected weeks.
        normalized_skip_weeks: Cleaned, ascending skip-week numbers.
        break_week_set: Week numbers touched by a break range.
        end_date: Last day of the schedule (None without a start date).
        converged: False when the iteration cap was reached first.
    """

    schedule_weeks: int
    normalized_skip_weeks: list[int] = field(default_factory=list)
    break_week_set: frozenset[int] = frozenset()
    end_date: Optional[date] = None
    converged: bool = True

    @classmethod
    def empty(cls) -> "ScheduleResult":
        return cls(schedule_weeks=0)


@dataclass
class CourseInputs:
    """A student's choices for one course.

    Attributes:
        period: Paid weeks.
        start_date: Requested start date (ISO string or date).
        course_type: Selected delivery mode label.
        level: Selected level for level-based course families.
        campus: Selected campus for dynamic-campus courses.
        dynamic_time: Selected time-slot label.
        skip_weeks: Requested skip-week numbers.
        recording_dates: Dates attended by recorded lecture.
        exclude_math: Whether the math component is excluded.
    """

    period: int
    start_date: Union[date, str, None] = None
    course_type: Optional[str] = None
    level: Optional[str] = None
    campus: Optional[str] = None
    dynamic_time: Optional[str] = None
    skip_weeks: tuple = ()
    recording_dates: tuple = ()
    exclude_math: bool = False


@dataclass
class CartInputs:
    """Everything needed to price and add one course to a cart."""

    student_name: str
    course_key: str
    course: CourseInputs
    discount: float = 0.0


@dataclass
class CourseDetails:
    """Resolved fee and display data for one course selection.

    Attributes:
        duration_text: Human-readable period, e.g. "1.5(Mon) ~ 1.30(Fri) (4 weeks)".
        time_text: Class time with time-zone suffix ("" if unknown).
        total_fee: weekly_fee * paid_weeks, before any discount.
        weekly_fee: Applicable weekly fee.
        paid_weeks: Billed weeks.
        schedule_weeks: Calendar weeks spanned.
        start_date: First day, if known.
        end_date: Last day, if known.
    """

    duration_text: str
    time_text: str
    total_fee: int
    weekly_fee: int
    paid_weeks: int
    schedule_weeks: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass
class FeeResult:
    """Result of a fee calculation; total_fee is 0 for degenerate input."""

    total_fee: int
    details: Optional[CourseDetails] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class RecordingSplit:
    """Fee split between live and recorded days."""

    recording: int
    normal: int
    total: int


@dataclass
class CartLineItem:
    """A fully priced cart entry.

    Attributes:
        student_name: Student the quote is for.
        course_key: Catalog key of the course.
        discount: Discount rate applied to live days.
        inputs: The original choices, kept for later editing.
        display_name: Course name with variant suffixes.
        final_fee: Amount due.
        normal_fee: Live-day part of the fee.
        recording_fee: Recorded-day part of the fee.
        details: Fee resolver output.
        total_class_days: Class days over the paid weeks.
        recording_days: Number of recorded days.
        recording_dates: Parsed recorded-lecture dates.
        normalized_skip_weeks: Cleaned skip weeks.
        schedule_weeks: Calendar weeks spanned.
        textbook_option: "none", "tbd" or "amount".
        textbook_amount: Textbook fee when textbook_option is "amount".
        note: Free-form note printed under the item.
    """

    student_name: str
    course_key: str
    discount: float
    inputs: CourseInputs
    display_name: str
    final_fee: int
    normal_fee: int
    recording_fee: int
    details: CourseDetails
    total_class_days: int
    recording_days: int
    recording_dates: list[date] = field(default_factory=list)
    normalized_skip_weeks: list[int] = field(default_factory=list)
    schedule_weeks: int = 0
    textbook_option: Optional[str] = None
    textbook_amount: Optional[int] = None
    note: Optional[str] = None

    @property
    def live_days(self) -> int:
        return max(self.total_class_days - self.recording_days, 0)
