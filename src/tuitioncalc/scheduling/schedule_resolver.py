"""Schedule resolution.

Works out how many calendar weeks an enrolment spans once skip weeks and
course-wide breaks are added to the paid weeks, and derives the dates
that depend on it.

Schedule length and break coverage depend on each other: adding a week
for a break can pull a later break into the window. ``get_schedule_weeks``
therefore iterates until the break-week count stops changing, with a
fixed cap on the number of rounds.
"""

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from tuitioncalc.domain.calendar import (
    DateInput,
    add_days,
    coerce_int,
    iter_days,
    normalize_course_days,
    parse_date_only,
    week_index,
    weekday_index,
)
from tuitioncalc.domain.models import ScheduleInput, ScheduleResult
from tuitioncalc.domain.policies import ScheduleConfig
from tuitioncalc.scheduling.break_ranges import (
    get_break_dates,
    get_break_weeks,
    normalize_break_ranges,
)
from tuitioncalc.scheduling.skip_weeks import normalize_skip_weeks

log = logging.getLogger(__name__)

DEFAULT_CONFIG = ScheduleConfig()


def _resolve_end_day(end_day, config: ScheduleConfig) -> int:
    day = coerce_int(end_day)
    if day is None or not 0 <= day <= 6:
        return config.default_end_day
    return day


def get_end_date(
    start_date: DateInput,
    weeks,
    end_day: Optional[int] = None,
    config: Optional[ScheduleConfig] = None,
) -> Optional[date]:
    """Last day of a schedule spanning ``weeks`` calendar weeks.

    Moves ``(weeks - 1) * 7`` days from the start, then forward to the
    next ``end_day`` (0=Sunday..6=Saturday): later in the same week when
    the landing weekday is not past it, otherwise in the following week.

    Returns:
        The end date, or None when the start date or week count is unusable.
    """
    config = config or DEFAULT_CONFIG
    start = parse_date_only(start_date)
    week_count = coerce_int(weeks)
    if start is None or week_count is None or week_count <= 0:
        return None

    target = _resolve_end_day(end_day, config)
    end = add_days(start, (week_count - 1) * 7)
    current = weekday_index(end)
    if current <= target:
        return add_days(end, target - current)
    return add_days(end, 7 - current + target)


def get_schedule_weeks(
    schedule_input: ScheduleInput,
    config: Optional[ScheduleConfig] = None,
) -> ScheduleResult:
    """Resolve the number of calendar weeks an enrolment spans.

    Args:
        schedule_input: Start date, paid weeks, skip weeks, class days,
            end weekday and break ranges.
        config: Iteration cap and defaults.

    Returns:
        ScheduleResult with ``schedule_weeks >= paid_weeks``. A week that
        is both skipped and inside a break adds only one week. For
        ``paid_weeks <= 0`` an empty result is returned.
    """
    config = config or DEFAULT_CONFIG
    paid_weeks = coerce_int(schedule_input.paid_weeks) or 0
    if paid_weeks <= 0:
        return ScheduleResult.empty()

    skip_weeks = normalize_skip_weeks(schedule_input.skip_weeks, paid_weeks)
    skip_set = set(skip_weeks)
    base_weeks = paid_weeks + len(skip_set)
    schedule_weeks = base_weeks

    start = parse_date_only(schedule_input.start_date)
    end_day = _resolve_end_day(schedule_input.end_day, config)
    breaks = normalize_break_ranges(schedule_input.break_ranges)
    if start is None:
        return ScheduleResult(schedule_weeks=schedule_weeks, normalized_skip_weeks=skip_weeks)
    if not breaks:
        return ScheduleResult(
            schedule_weeks=schedule_weeks,
            normalized_skip_weeks=skip_weeks,
            end_date=get_end_date(start, schedule_weeks, end_day, config),
        )

    course_days = normalize_course_days(schedule_input.course_days)
    break_weeks: set[int] = set()
    previous_count = -1
    converged = False
    for round_number in range(1, config.max_rounds + 1):
        end_date = get_end_date(start, schedule_weeks, end_day, config)
        if end_date is None:
            break
        round_weeks = get_break_weeks(start, end_date, course_days, breaks)
        count = len(round_weeks - skip_set)
        log.debug(
            "Schedule round %d: %d weeks to %s, %d extra break weeks",
            round_number,
            schedule_weeks,
            end_date,
            count,
        )
        break_weeks = round_weeks
        if count == previous_count:
            converged = True
            break
        previous_count = count
        schedule_weeks = base_weeks + count

    if not converged:
        log.warning(
            "Schedule did not settle after %d rounds (start %s, %d paid weeks); "
            "using %d schedule weeks",
            config.max_rounds,
            start,
            paid_weeks,
            schedule_weeks,
        )

    return ScheduleResult(
        schedule_weeks=schedule_weeks,
        normalized_skip_weeks=skip_weeks,
        break_week_set=frozenset(break_weeks),
        end_date=get_end_date(start, schedule_weeks, end_day, config),
        converged=converged,
    )


def calculate_total_days(course_days: Sequence[int], end_day: Optional[int], period) -> int:
    """Number of class days over ``period`` paid weeks.

    Counting goes by position in ``course_days`` rather than by weekday
    number, so a weekend course listed as ``[6, 0]`` with ``end_day=0``
    counts Saturday and Sunday as one week.

    Args:
        course_days: Class weekdays in schedule order.
        end_day: Last class weekday of the final week; None counts full weeks.
        period: Paid weeks.
    """
    weeks = coerce_int(period) or 0
    days = list(course_days or [])
    if not days or weeks <= 0:
        return 0

    if end_day is None:
        return weeks * len(days)

    days_in_last_week = days.index(end_day) + 1 if end_day in days else len(days)
    return (weeks - 1) * len(days) + days_in_last_week


def get_available_recording_dates(
    start_date: DateInput,
    schedule_weeks,
    allowed_days: Iterable,
    skip_weeks: Optional[Iterable] = None,
    break_ranges: Optional[Iterable] = None,
) -> list[date]:
    """Class dates that may be attended by recorded lecture.

    Covers ``schedule_weeks * 7`` days from the start and leaves out days
    that are not class days, days in a skipped week, and break days.
    """
    start = parse_date_only(start_date)
    weeks = coerce_int(schedule_weeks) or 0
    if start is None or weeks <= 0:
        return []

    end = add_days(start, weeks * 7 - 1)
    day_set = set(normalize_course_days(allowed_days))
    skip_set = set()
    for raw in skip_weeks or ():
        week = coerce_int(raw)
        if week is not None and 1 < week <= weeks:
            skip_set.add(week)
    break_dates = get_break_dates(start, end, allowed_days, break_ranges)

    return [
        day
        for day in iter_days(start, end)
        if weekday_index(day) in day_set
        and week_index(start, day) not in skip_set
        and day not in break_dates
    ]


def registration_end_date(start_date: DateInput, weeks, skip_weeks: Optional[Iterable] = None) -> Optional[date]:
    """End date stored on registration records.

    Registrations keep the plain formula ``start + (weeks + skips) * 7 - 1``
    without end-weekday rolling or break weeks.
    """
    start = parse_date_only(start_date)
    paid = coerce_int(weeks)
    if start is None or not paid:
        return None
    skip_count = len(list(skip_weeks or ()))
    total = paid + skip_count
    if total <= 0:
        return None
    return add_days(start, total * 7 - 1)
