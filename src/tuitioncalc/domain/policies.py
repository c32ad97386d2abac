"""Policy definitions for pricing and course rules.

Business constants that have accumulated around the catalog (recording
rates, legacy course codes, naming exceptions) are kept in policy objects
rather than in the engine, so they can be tested and replaced on their own.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from tuitioncalc.domain.models import CourseDefinition


class FeePolicy(ABC):
    """Abstract base class for fee rules."""

    @abstractmethod
    def recording_rate(self) -> float:
        """Share of the per-day fee billed for a recorded day."""
        pass

    @abstractmethod
    def math_excluded_weekly_fee(self, course: CourseDefinition, weekly_fee: int) -> int:
        """Weekly fee when the math component is excluded.

        Args:
            course: The course being priced.
            weekly_fee: The weekly fee resolved so far (campus variant applied).

        Returns:
            The weekly fee to bill.
        """
        pass

    @abstractmethod
    def time_suffix(self) -> str:
        """Suffix appended to every class-time string."""
        pass


class CoursePolicy(ABC):
    """Abstract base class for course-specific selection and naming rules."""

    @abstractmethod
    def requires_course_type(self, course_key: str) -> bool:
        """Whether the course always needs an online/offline selection."""
        pass

    @abstractmethod
    def requires_level(self, course_key: str) -> bool:
        """Whether the course belongs to a level-based family."""
        pass

    @abstractmethod
    def level_display_name(self, course_key: str, level: Optional[str]) -> Optional[str]:
        """Family-specific display name, or None to keep the catalog name."""
        pass


@dataclass
class DefaultFeePolicy(FeePolicy):
    """Default fee policy.

    - Recorded days are billed at 40% of the per-day rate.
    - Math exclusion uses the course's own math-excluded fee when set;
      otherwise a flat 120,000 deduction for the legacy SAT courses.
    """

    recording_share: float = 0.4
    legacy_math_deduction: int = 120000
    legacy_math_courses: frozenset[str] = frozenset({"sat_1500", "sat_1400", "sat_bridge"})
    time_zone_label: str = "(KST)"

    def recording_rate(self) -> float:
        return self.recording_share

    def math_excluded_weekly_fee(self, course: CourseDefinition, weekly_fee: int) -> int:
        if course.math_excluded_weekly_fee:
            return course.math_excluded_weekly_fee
        if course.key in self.legacy_math_courses:
            return weekly_fee - self.legacy_math_deduction
        return weekly_fee

    def time_suffix(self) -> str:
        return f" {self.time_zone_label}" if self.time_zone_label else ""


@dataclass
class DefaultCoursePolicy(CoursePolicy):
    """Default course policy.

    The legacy SAT/TOEFL/math codes always need a course type, and the
    winter DRW courses need a level and are named after it.
    """

    course_type_required: frozenset[str] = frozenset(
        {"sat_1500", "sat_1400", "sat_bridge", "toefl_l1", "toefl_l2", "dm_alg2"}
    )
    level_name_templates: dict[str, str] = field(
        default_factory=lambda: {
            "drw_morning": "Winter Intensive DRW US {level}",
            "drw_a": "Winter Intensive DRW {level}A",
            "drw_b": "Winter Intensive DRW {level}B",
        }
    )

    def requires_course_type(self, course_key: str) -> bool:
        return course_key in self.course_type_required

    def requires_level(self, course_key: str) -> bool:
        return course_key in self.level_name_templates

    def level_display_name(self, course_key: str, level: Optional[str]) -> Optional[str]:
        template = self.level_name_templates.get(course_key)
        if template is None:
            return None
        return template.format(level=level or "")


@dataclass
class ScheduleConfig:
    """Defaults for schedule resolution.

    Attributes:
        max_rounds: Cap on fixed-point rounds when break weeks extend the schedule.
        default_end_day: End weekday when a course does not set one (Friday).
        default_class_days: Class weekdays when a course does not set them.
    """

    max_rounds: int = 12
    default_end_day: int = 5
    default_class_days: tuple[int, ...] = (1, 2, 3, 4, 5)
