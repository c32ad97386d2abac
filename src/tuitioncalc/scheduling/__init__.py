"""Schedule engine: skip weeks, break ranges, and calendar span."""

from tuitioncalc.scheduling.break_ranges import (
    get_break_dates,
    get_break_weeks,
    get_range_break_weeks,
    normalize_break_ranges,
)
from tuitioncalc.scheduling.schedule_resolver import (
    calculate_total_days,
    get_available_recording_dates,
    get_end_date,
    get_schedule_weeks,
    registration_end_date,
)
from tuitioncalc.scheduling.skip_weeks import normalize_skip_weeks

__all__ = [
    # Normalizers
    "normalize_break_ranges",
    "normalize_skip_weeks",
    # Schedule resolution
    "get_schedule_weeks",
    "get_end_date",
    "registration_end_date",
    # Derived day sets
    "calculate_total_days",
    "get_available_recording_dates",
    "get_break_dates",
    "get_break_weeks",
    "get_range_break_weeks",
]
