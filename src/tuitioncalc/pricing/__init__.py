"""Tuition pricing: fee resolution, recording split, totals."""

from tuitioncalc.pricing.calculator import (
    TuitionCalculator,
    calculate_total_fee,
    resolve_schedule,
)
from tuitioncalc.pricing.fee_resolver import FeeResolver, duration_label
from tuitioncalc.pricing.recording import calculate_recording_fee, round_half_up

__all__ = [
    "FeeResolver",
    "TuitionCalculator",
    "calculate_recording_fee",
    "calculate_total_fee",
    "duration_label",
    "resolve_schedule",
    "round_half_up",
]
