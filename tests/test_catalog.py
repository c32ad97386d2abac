"""Tests for catalog parsing and the catalog repository."""

import logging
from datetime import date

import pytest

from tuitioncalc.catalog.loader import (
    parse_catalog,
    parse_recording_availability,
    parse_time_spec,
)
from tuitioncalc.catalog.repository import CatalogRepository
from tuitioncalc.domain.models import (
    BreakRange,
    CourseType,
    DynamicTime,
    FixedTime,
    OnOffTime,
)
from tuitioncalc.errors import CatalogError


class TestParseTimeSpec:
    """Tests for time-table entry classification."""

    def test_string_is_fixed(self):
        spec = parse_time_spec("19:00-21:00")
        assert spec == FixedTime("19:00-21:00")
        assert spec.resolve(CourseType.OFFLINE) == "19:00-21:00"

    def test_tagged_onoff(self):
        spec = parse_time_spec({"type": "onoff", "online": "09:00", "offline": "13:00"})
        assert isinstance(spec, OnOffTime)
        assert spec.resolve(CourseType.ONLINE) == "09:00"
        assert spec.resolve(CourseType.OFFLINE) == "13:00"
        assert spec.resolve(None) is None

    def test_korean_keyed_onoff(self):
        spec = parse_time_spec({"온라인": "09:00", "오프라인": "13:00"})
        assert spec == OnOffTime(online="09:00", offline="13:00")

    def test_tagged_dynamic(self):
        spec = parse_time_spec(
            {"type": "dynamic", "options": [{"label": "A", "time": "09:00"}, {"time": "no label"}]}
        )
        assert isinstance(spec, DynamicTime)
        assert spec.labels == ["A"]
        assert spec.resolve(label="A") == "09:00"

    def test_bare_label_map_is_dynamic(self):
        spec = parse_time_spec({"Morning": "09:00-11:00", "Evening": "19:00-21:00"})
        assert isinstance(spec, DynamicTime)
        assert spec.labels == ["Morning", "Evening"]
        assert spec.resolve(label="Evening") == "19:00-21:00"
        assert spec.resolve(label="Night") is None
        assert spec.resolve() is None

    @pytest.mark.parametrize("entry", [None, "", "   ", {}, 42])
    def test_empty_entries(self, entry):
        assert parse_time_spec(entry) is None


class TestParseRecordingAvailability:
    """Tests for recording-availability classification."""

    def test_missing_is_unavailable(self):
        availability = parse_recording_availability(None)
        assert availability.allows(CourseType.ONLINE) is False

    def test_boolean_applies_to_every_course_type(self):
        availability = parse_recording_availability(True)
        assert availability.allows(CourseType.OFFLINE) is True
        assert availability.allows(None) is True

    def test_per_course_type(self):
        availability = parse_recording_availability({"online": True, "offline": False})
        assert availability.allows(CourseType.ONLINE) is True
        assert availability.allows(CourseType.OFFLINE) is False
        assert availability.allows(None) is False

    def test_korean_keys(self):
        availability = parse_recording_availability({"오프라인": True})
        assert availability.allows(CourseType.OFFLINE) is True
        assert availability.allows(CourseType.ONLINE) is False


class TestParseCatalog:
    """Tests for parse_catalog."""

    def test_courses_and_names(self, catalog):
        assert catalog.name == "2026 Winter"
        assert len(catalog.courses) == 7
        assert "sat_1500" in catalog
        assert "missing" not in catalog
        assert catalog.course_name("toefl_l1") == "TOEFL L1"
        assert catalog.category_of("ap_calc") == "AP"
        assert catalog.course_name("unknown_key") == "unknown_key"

    def test_default_days_and_end_day(self, catalog):
        course = catalog.get("sat_gangnam")
        assert course.class_days == (1, 2, 3, 4, 5)
        assert course.end_day == 5

    def test_weekend_days_keep_their_order(self, catalog):
        course = catalog.get("weekend_math")
        assert course.class_days == (6, 0)
        assert course.end_day == 0
        assert course.math_excluded_weekly_fee == 150000
        assert course.has_math_option is True

    def test_course_rules(self, catalog):
        course = catalog.get("ap_calc")
        assert course.allowed_start_days == (1,)
        assert course.min_weeks == 2
        assert course.max_weeks == 8
        assert course.break_ranges == (BreakRange(date(2026, 1, 19), date(2026, 1, 23)),)

    def test_time_lookup_by_key_and_name(self, catalog):
        assert catalog.get("sat_1500").is_on_off
        assert isinstance(catalog.get("ap_calc").time_spec, FixedTime)
        toefl = catalog.get("toefl_l1")
        assert toefl.has_time_options
        assert toefl.dynamic_time is True

    def test_recording_lookup_by_key_and_label(self, catalog):
        assert catalog.get("sat_1500").recording.allows(CourseType.ONLINE)
        assert catalog.get("ap_calc").recording.allows(None)
        assert not catalog.get("drw_a").recording.allows(CourseType.ONLINE)

    def test_campus_options(self, catalog):
        course = catalog.get("sat_campus")
        assert course.linked_course_key("Gangnam") == "sat_gangnam"
        assert course.linked_course_key("Busan") is None
        assert course.linked_course_key(None) is None

    def test_weekday_names(self, catalog_payload):
        catalog_payload["weekdayName"] = ["일", "월", "화", "수", "목", "금", "토"]
        catalog = parse_catalog(catalog_payload)
        assert catalog.weekday_name(1) == "월"

    def test_bad_weekday_names_fall_back(self, catalog_payload):
        catalog_payload["weekdayName"] = ["Sun"]
        catalog = parse_catalog(catalog_payload)
        assert catalog.weekday_name(1) == "Mon"

    def test_malformed_entry_is_skipped(self, catalog_payload, caplog):
        catalog_payload["courseInfo"]["broken"] = "oops"
        with caplog.at_level(logging.WARNING, logger="tuitioncalc.catalog.loader"):
            catalog = parse_catalog(catalog_payload)
        assert "broken" not in catalog
        assert "broken" in caplog.text

    def test_explicit_name_wins(self, catalog_payload):
        assert parse_catalog(catalog_payload, name="Spring").name == "Spring"

    def test_non_mapping_payload(self):
        with pytest.raises(CatalogError):
            parse_catalog(["not", "a", "mapping"])


class TestCatalogRepository:
    """Tests for CatalogRepository."""

    def test_starts_empty(self):
        repository = CatalogRepository()
        assert repository.is_loaded is False
        assert repository.current.courses == {}

    def test_load_file(self, catalog_file):
        repository = CatalogRepository()
        catalog = repository.load_file(catalog_file)
        assert repository.is_loaded
        assert repository.current is catalog
        assert "ap_calc" in catalog

    def test_replace_keeps_old_snapshot_intact(self, catalog_payload):
        repository = CatalogRepository()
        first = repository.load_payload(catalog_payload)
        del catalog_payload["courseInfo"]["ap_calc"]
        second = repository.load_payload(catalog_payload)
        assert "ap_calc" in first
        assert "ap_calc" not in second
        assert repository.current is second

    def test_reset(self, catalog_payload):
        repository = CatalogRepository()
        repository.load_payload(catalog_payload)
        repository.reset()
        assert repository.is_loaded is False

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError):
            CatalogRepository().load_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError):
            CatalogRepository().load_file(tmp_path / "missing.json")
