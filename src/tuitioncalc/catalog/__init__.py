"""Course catalog loading."""

from tuitioncalc.catalog.loader import (
    parse_catalog,
    parse_course,
    parse_recording_availability,
    parse_time_spec,
)
from tuitioncalc.catalog.repository import CatalogRepository

__all__ = [
    "CatalogRepository",
    "parse_catalog",
    "parse_course",
    "parse_recording_availability",
    "parse_time_spec",
]
