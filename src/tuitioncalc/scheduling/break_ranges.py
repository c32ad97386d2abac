"""Break-range normalization and break-day lookup.

Break ranges are course-wide holidays. Each range is cleaned on its own:
overlapping ranges stay separate entries, and the downstream day and
week sets absorb any overlap.
"""

import logging
from collections.abc import Mapping
from datetime import date
from typing import Iterable, Optional

from tuitioncalc.domain.calendar import (
    ALL_WEEK_DAYS,
    DateInput,
    iter_days,
    normalize_course_days,
    parse_date_only,
    week_index,
    weekday_index,
)
from tuitioncalc.domain.models import BreakRange

log = logging.getLogger(__name__)


def _range_bounds(raw) -> tuple[DateInput, DateInput]:
    if isinstance(raw, BreakRange):
        return raw.start, raw.end
    if isinstance(raw, Mapping):
        start = raw.get("startDate") or raw.get("start")
        end = raw.get("endDate") or raw.get("end")
        return start, end
    if isinstance(raw, (tuple, list)) and len(raw) == 2:
        return raw[0], raw[1]
    return None, None


def normalize_break_ranges(ranges: Optional[Iterable]) -> list[BreakRange]:
    """Clean a list of raw break ranges.

    Args:
        ranges: BreakRange objects, mappings with ``startDate``/``start``
            and ``endDate``/``end`` keys, or ``(start, end)`` pairs.

    Returns:
        Ranges sorted by start then end. Entries with a missing or
        unparseable bound are dropped; reversed bounds are swapped.
    """
    if ranges is None or isinstance(ranges, (str, bytes, Mapping)):
        return []

    result = []
    for raw in ranges:
        start_raw, end_raw = _range_bounds(raw)
        start = parse_date_only(start_raw)
        end = parse_date_only(end_raw)
        if start is None or end is None:
            log.debug("Dropping break range with unusable bounds: %r", raw)
            continue
        if start > end:
            start, end = end, start
        result.append(BreakRange(start=start, end=end))

    result.sort(key=lambda r: (r.start, r.end))
    return result


def get_break_dates(
    start_date: DateInput,
    end_date: DateInput,
    course_days: Optional[Iterable] = None,
    break_ranges: Optional[Iterable] = None,
) -> set[date]:
    """Class days inside [start_date, end_date] that fall in a break range.

    An empty ``course_days`` means every weekday counts as a class day.
    """
    start = parse_date_only(start_date)
    end = parse_date_only(end_date)
    if start is None or end is None or start > end:
        return set()

    normalized = normalize_break_ranges(break_ranges)
    if not normalized:
        return set()

    day_set = set(normalize_course_days(course_days) or ALL_WEEK_DAYS)
    result = set()
    for break_range in normalized:
        clipped = break_range.clip(start, end)
        if clipped is None:
            continue
        for day in iter_days(clipped.start, clipped.end):
            if weekday_index(day) in day_set:
                result.add(day)
    return result


def get_break_weeks(
    start_date: DateInput,
    end_date: DateInput,
    course_days: Optional[Iterable] = None,
    break_ranges: Optional[Iterable] = None,
) -> set[int]:
    """1-based week numbers (from start_date) containing at least one break day."""
    start = parse_date_only(start_date)
    if start is None:
        return set()
    break_dates = get_break_dates(start, end_date, course_days, break_ranges)
    return {week_index(start, day) for day in break_dates if day >= start}


def get_range_break_weeks(
    start_date: date,
    end_date: date,
    break_range: BreakRange,
    course_days: Optional[Iterable] = None,
) -> set[int]:
    """Week numbers touched by one break range, limited to [start_date, end_date]."""
    clipped = break_range.clip(start_date, end_date)
    if clipped is None:
        return set()
    day_set = set(normalize_course_days(course_days) or ALL_WEEK_DAYS)
    return {
        week_index(start_date, day)
        for day in iter_days(clipped.start, clipped.end)
        if weekday_index(day) in day_set
    }
