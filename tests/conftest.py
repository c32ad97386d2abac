"""Shared fixtures: a small winter-term catalog."""

import copy
import json

import pytest

from tuitioncalc.catalog.loader import parse_catalog

# 2026-01-05 is a Monday.
CATALOG_PAYLOAD = {
    "courseConfigSetName": "2026 Winter",
    "courseTree": [
        {
            "cat": "SAT",
            "items": [
                {"val": "sat_1500", "label": "SAT 1500"},
                {"val": "sat_campus", "label": "SAT Campus"},
                {"val": "sat_gangnam", "label": "SAT Gangnam"},
            ],
        },
        {"cat": "TOEFL", "items": [{"val": "toefl_l1", "label": "TOEFL L1"}]},
        {"cat": "DRW", "items": [{"val": "drw_a", "label": "Winter DRW"}]},
        {
            "cat": "AP",
            "items": [
                {"val": "ap_calc", "label": "AP Calculus"},
                {"val": "weekend_math", "label": "Weekend Math"},
            ],
        },
    ],
    "courseInfo": {
        "sat_1500": {
            "name": "SAT 1500",
            "fee": 800000,
            "days": [1, 2, 3, 4, 5],
            "endDays": [5],
        },
        "sat_campus": {
            "name": "SAT Campus",
            "fee": 700000,
            "dynamicOptions": {"Gangnam": "sat_gangnam"},
        },
        "sat_gangnam": {"name": "SAT Gangnam", "fee": 900000},
        "toefl_l1": {
            "name": "TOEFL Level 1",
            "fee": 400000,
            "dynamicTime": True,
        },
        "drw_a": {"name": "DRW", "fee": 300000, "days": [1, 3, 5], "endDay": 5},
        "ap_calc": {
            "fee": 500000,
            "startDays": [1],
            "minDuration": 2,
            "maxDuration": 8,
            "breakRanges": [{"startDate": "2026-01-19", "endDate": "2026-01-23"}],
        },
        "weekend_math": {
            "name": "Weekend Math",
            "fee": 200000,
            "mathExcludedFee": 150000,
            "hasMathOption": True,
            "days": [6, 0],
            "endDays": [0],
        },
    },
    "timeTable": {
        "sat_1500": {"type": "onoff", "online": "09:00-12:00", "offline": "13:00-16:00"},
        "sat_gangnam": "10:00-13:00",
        "TOEFL Level 1": {"Morning": "09:00-11:00", "Evening": "19:00-21:00"},
        "ap_calc": "19:00-21:00",
    },
    "recordingAvailable": {
        "sat_1500": {"online": True, "offline": False},
        "AP Calculus": True,
    },
}


@pytest.fixture
def catalog_payload():
    """A fresh copy of the catalog payload."""
    return copy.deepcopy(CATALOG_PAYLOAD)


@pytest.fixture
def catalog(catalog_payload):
    """The parsed catalog."""
    return parse_catalog(catalog_payload)


@pytest.fixture
def catalog_file(tmp_path, catalog_payload):
    """The catalog payload written to a JSON file."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(catalog_payload, ensure_ascii=False), encoding="utf-8")
    return path
