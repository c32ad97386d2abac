"""Recording fee split.

Recorded days are billed at a fixed share of the per-day rate and are not
discounted; the discount applies to live days only.
"""

import math
from datetime import date
from typing import Iterable, Optional

from tuitioncalc.domain.calendar import parse_date_only
from tuitioncalc.domain.models import RecordingSplit

RECORDING_RATE = 0.4


def round_half_up(value: float) -> int:
    """Round to the nearest whole won, halves rounding up."""
    return int(math.floor(value + 0.5))


def calculate_recording_fee(
    total_fee: float,
    total_days: int,
    recording_days: int,
    discount: float = 0.0,
    rate: float = RECORDING_RATE,
) -> RecordingSplit:
    """Split a course fee between live days and recorded days.

    Args:
        total_fee: Undiscounted fee for the paid weeks.
        total_days: Class days over the paid weeks.
        recording_days: Days attended by recorded lecture.
        discount: Discount rate for live days, in [0, 1).
        rate: Share of the per-day fee billed for a recorded day.

    Returns:
        RecordingSplit whose total is the sum of the two rounded parts.
        Without recorded days the discount applies to the whole fee
        directly. Recorded days with zero class days give an all-zero split.
    """
    if recording_days <= 0:
        normal = round_half_up(total_fee * (1 - discount))
        return RecordingSplit(recording=0, normal=normal, total=normal)

    if total_days <= 0:
        return RecordingSplit(recording=0, normal=0, total=0)

    daily_fee = total_fee / total_days
    recording = round_half_up(daily_fee * recording_days * rate)
    normal = round_half_up(daily_fee * (total_days - recording_days) * (1 - discount))
    return RecordingSplit(recording=recording, normal=normal, total=recording + normal)


def distinct_recording_dates(values: Optional[Iterable]) -> list[date]:
    """Parsed recording dates, each day once, ascending; unparseable values are dropped."""
    return sorted({day for day in map(parse_date_only, values or ()) if day is not None})


def is_valid_discount(discount) -> bool:
    """Discount rates must lie in [0, 1)."""
    if isinstance(discount, bool) or not isinstance(discount, (int, float)):
        return False
    return 0 <= discount < 1
