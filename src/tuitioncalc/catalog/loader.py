"""Catalog payload parsing.

Turns the raw catalog document (as served to the calculator UI) into an
immutable CourseCatalog. The payload keeps class times and recording
availability in several loosely-typed shapes; they are resolved into
explicit types here, once, so the engine never has to probe dict keys.

Payload keys:
    courseTree: ``[{"cat": str, "items": [{"val": key, "label": str}]}]``
    courseInfo: ``{key: {...course fields...}}``
    timeTable: ``{key or course name: str | dict}``
    recordingAvailable: ``{key, name or label: bool | dict}``
    weekdayName: seven weekday labels, Sunday first
    courseConfigSetName: name of the configuration set
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from tuitioncalc.domain.calendar import coerce_int
from tuitioncalc.domain.models import (
    DEFAULT_WEEKDAY_NAMES,
    CourseCatalog,
    CourseCategory,
    CourseDefinition,
    DynamicTime,
    FixedTime,
    OnOffTime,
    RecordingAvailability,
    TimeOption,
    TimeSpec,
)
from tuitioncalc.domain.policies import ScheduleConfig
from tuitioncalc.errors import CatalogError
from tuitioncalc.scheduling.break_ranges import normalize_break_ranges

log = logging.getLogger(__name__)

ONLINE_KEYS = ("온라인", "online")
OFFLINE_KEYS = ("오프라인", "offline")


def parse_time_spec(entry: Any) -> Optional[TimeSpec]:
    """Classify a time-table entry.

    - a string is a fixed class time
    - ``{"type": "onoff", "online": ..., "offline": ...}`` or a mapping
      keyed by online/offline labels is an online/offline pair
    - ``{"type": "dynamic", "options": [{"label", "time"}]}`` or any other
      label -> time mapping is a list of selectable slots
    """
    if isinstance(entry, str):
        return FixedTime(text=entry) if entry.strip() else None
    if not isinstance(entry, Mapping) or not entry:
        return None

    kind = entry.get("type")
    if kind == "onoff":
        return OnOffTime(
            online=_text(entry.get("online")),
            offline=_text(entry.get("offline")),
        )
    if kind == "dynamic":
        options = []
        for raw in entry.get("options") or []:
            if isinstance(raw, Mapping) and raw.get("label"):
                options.append(TimeOption(label=str(raw["label"]), time=str(raw.get("time") or "")))
        return DynamicTime(options=tuple(options))

    if any(key in entry for key in ONLINE_KEYS + OFFLINE_KEYS):
        return OnOffTime(
            online=_first_text(entry, ONLINE_KEYS),
            offline=_first_text(entry, OFFLINE_KEYS),
        )

    options = tuple(
        TimeOption(label=str(label), time=value)
        for label, value in entry.items()
        if isinstance(value, str)
    )
    return DynamicTime(options=options)


def parse_recording_availability(config: Any) -> RecordingAvailability:
    """Classify a recording-availability entry (bool or per-course-type mapping)."""
    if config is None:
        return RecordingAvailability.unavailable()
    if isinstance(config, bool):
        return RecordingAvailability(uniform=config)
    if isinstance(config, Mapping):
        return RecordingAvailability(
            online=bool(_first_value(config, ONLINE_KEYS)),
            offline=bool(_first_value(config, OFFLINE_KEYS)),
        )
    return RecordingAvailability(uniform=bool(config))


def parse_categories(tree: Any) -> tuple[CourseCategory, ...]:
    if not isinstance(tree, list):
        return ()
    categories = []
    for group in tree:
        if not isinstance(group, Mapping):
            continue
        items = []
        for item in group.get("items") or []:
            if isinstance(item, Mapping) and item.get("val"):
                items.append((str(item["val"]), str(item.get("label") or item["val"])))
        categories.append(CourseCategory(name=str(group.get("cat") or ""), courses=tuple(items)))
    return tuple(categories)


def parse_course(
    key: str,
    info: Mapping,
    time_spec: Optional[TimeSpec] = None,
    recording: Optional[RecordingAvailability] = None,
    config: Optional[ScheduleConfig] = None,
) -> CourseDefinition:
    """Build a CourseDefinition from one ``courseInfo`` entry."""
    config = config or ScheduleConfig()

    raw_days = info.get("days")
    if isinstance(raw_days, list):
        class_days = _ordered_weekdays(raw_days)
    else:
        class_days = tuple(config.default_class_days)

    campus_options = ()
    dynamic_options = info.get("dynamicOptions")
    if isinstance(dynamic_options, Mapping):
        campus_options = tuple(
            (str(label), value)
            for label, value in dynamic_options.items()
            if isinstance(value, str) and value
        )

    return CourseDefinition(
        key=key,
        name=str(info.get("name") or ""),
        weekly_fee=_money(info.get("fee")) or 0,
        math_excluded_weekly_fee=_money(info.get("mathExcludedFee")),
        class_days=class_days,
        allowed_start_days=_ordered_weekdays(info.get("startDays") or []),
        end_day=_end_day(info, config.default_end_day),
        min_weeks=coerce_int(info.get("minDuration")),
        max_weeks=coerce_int(info.get("maxDuration")),
        break_ranges=tuple(normalize_break_ranges(info.get("breakRanges"))),
        time_spec=time_spec,
        recording=recording or RecordingAvailability.unavailable(),
        campus_options=campus_options,
        dynamic_time=bool(info.get("dynamicTime")),
        has_math_option=bool(info.get("hasMathOption")),
    )


def parse_catalog(
    payload: Mapping,
    name: Optional[str] = None,
    config: Optional[ScheduleConfig] = None,
) -> CourseCatalog:
    """Parse a full catalog payload.

    Args:
        payload: The catalog document.
        name: Configuration-set name; defaults to ``courseConfigSetName``.
        config: Defaults for class days and end weekday.

    Raises:
        CatalogError: If the payload is not a mapping.
    """
    if not isinstance(payload, Mapping):
        raise CatalogError(f"Catalog payload must be a mapping, got {type(payload).__name__}")

    categories = parse_categories(payload.get("courseTree"))
    course_info = _mapping(payload.get("courseInfo"))
    time_table = _mapping(payload.get("timeTable"))
    recording_table = _mapping(payload.get("recordingAvailable"))

    weekday_names = payload.get("weekdayName")
    if not (isinstance(weekday_names, list) and len(weekday_names) == 7):
        weekday_names = DEFAULT_WEEKDAY_NAMES

    labels = {key: label for category in categories for key, label in category.courses}

    courses = {}
    for key, info in course_info.items():
        if not isinstance(info, Mapping):
            log.warning("Skipping catalog entry %r: expected a mapping", key)
            continue
        course_name = str(info.get("name") or "")

        time_entry = time_table.get(key)
        if time_entry is None and course_name:
            time_entry = time_table.get(course_name)

        recording_entry = recording_table.get(key)
        if recording_entry is None and course_name:
            recording_entry = recording_table.get(course_name)
        if recording_entry is None:
            recording_entry = recording_table.get(labels.get(key) or course_name or key)

        courses[key] = parse_course(
            key,
            info,
            time_spec=parse_time_spec(time_entry),
            recording=parse_recording_availability(recording_entry),
            config=config,
        )
        log.debug("Parsed course %s: time spec %s", key, type(courses[key].time_spec).__name__)

    catalog_name = name if name is not None else str(payload.get("courseConfigSetName") or "")
    return CourseCatalog(
        courses=courses,
        categories=categories,
        weekday_names=tuple(str(label) for label in weekday_names),
        name=catalog_name.strip(),
    )


def _mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _first_text(entry: Mapping, keys: tuple[str, ...]) -> Optional[str]:
    for key in keys:
        text = _text(entry.get(key))
        if text:
            return text
    return None


def _first_value(entry: Mapping, keys: tuple[str, ...]) -> Any:
    for key in keys:
        if entry.get(key) is not None:
            return entry[key]
    return None


def _money(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(round(float(value)))
    except (TypeError, ValueError):
        return None


def _ordered_weekdays(values: list) -> tuple[int, ...]:
    seen = []
    for raw in values:
        day = coerce_int(raw)
        if day is not None and 0 <= day <= 6 and day not in seen:
            seen.append(day)
    return tuple(seen)


def _end_day(info: Mapping, default: int) -> int:
    end_days = info.get("endDays")
    if isinstance(end_days, list) and end_days:
        day = coerce_int(end_days[0])
        if day is not None and 0 <= day <= 6:
            return day
    day = coerce_int(info.get("endDay"))
    if day is not None and 0 <= day <= 6:
        return day
    return default
