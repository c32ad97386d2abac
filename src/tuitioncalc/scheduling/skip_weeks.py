"""Skip-week normalization.

A skip week is a paid week the student is excused from; it pushes the
schedule out by one calendar week. Week 1 can never be skipped, and a
skip week must fall inside the schedule it extends, so the upper bound
grows with every skip week kept.
"""

from typing import Iterable, Optional

from tuitioncalc.domain.calendar import coerce_int


def normalize_skip_weeks(skip_weeks: Optional[Iterable], paid_weeks) -> list[int]:
    """Clean a requested skip-week list.

    Args:
        skip_weeks: Raw week numbers (ints or numeric strings).
        paid_weeks: Billed weeks.

    Returns:
        Distinct ascending week numbers ``w`` with ``1 < w <= paid_weeks + n``,
        where ``n`` is the length of the returned list.
    """
    paid = coerce_int(paid_weeks) or 0
    if paid <= 0 or skip_weeks is None or isinstance(skip_weeks, (str, bytes)):
        return []

    cleaned = set()
    for raw in skip_weeks:
        week = coerce_int(raw)
        if week is not None and week > 1:
            cleaned.add(week)

    # The ceiling depends on how many weeks survive, so filter until stable.
    while True:
        ceiling = paid + len(cleaned)
        kept = {week for week in cleaned if week <= ceiling}
        if len(kept) == len(cleaned):
            break
        cleaned = kept

    return sorted(cleaned)
