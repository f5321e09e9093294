"""
Tests for the rotation scheduler API wrapper functions.
"""

from rotation_scheduler.api import (
    ScheduleRequest,
    SearchOptions,
    build_schedule_api,
    resolve_config,
    validate_schedule_request,
)
from rotation_scheduler.core import SearchConfig


def _request(**overrides):
    data = {
        "candidates": [{"id": "m1"}, {"id": "m2"}, {"id": "m3"}],
        "slots": ["2025-06-02", "2025-06-09", "2025-06-16"],
    }
    data.update(overrides)
    return data


class TestBuildScheduleApi:
    """Test cases for build_schedule_api."""

    def test_success(self):
        """Test successful rotation via the dict API"""
        response = build_schedule_api(_request())

        assert "request_id" in response
        assert "generated_at" in response
        result = response["result"]
        assert result["success"] is True
        assert result["cost"] == 3
        assert result["status"] == "FLOOR_REACHED"
        preferred = result["schedules"][result["preferred_index"]]
        assert [a["candidate_id"] for a in preferred["assignments"]] == ["m1", "m2", "m3"]
        assert preferred["assignments"][0]["date"] == "2025-06-02"
        assert result["stats"]["nodes_built"] == 9

    def test_blackouts_and_conflicts(self):
        """Blackouts and conflicts both keep candidates off their dates."""
        response = build_schedule_api(
            _request(
                candidates=[
                    {"id": "m1", "blackout_dates": ["2025-06-02"]},
                    {"id": "m2"},
                    {"id": "m3"},
                ],
                conflicts={"m2": ["2025-06-09"]},
            )
        )

        result = response["result"]
        assert result["success"] is True
        ids = [a["candidate_id"] for a in result["schedules"][0]["assignments"]]
        assert ids[0] != "m1"
        assert ids[1] != "m2"

    def test_invalid_date_is_validation_error(self):
        """Unparseable dates come back as a validation error, not an exception."""
        response = build_schedule_api(_request(slots=["invalid-date"]))

        assert response["result"]["success"] is False
        assert response["result"]["error_code"] == "VALIDATION_ERROR"
        assert "ERROR" in response["result"]["status"]

    def test_empty_roster_is_configuration_error(self):
        """Test empty roster handling"""
        response = build_schedule_api(_request(candidates=[]))

        assert response["result"]["success"] is False
        assert response["result"]["error_code"] == "CONFIGURATION_ERROR"

    def test_infeasible_reports_slot(self):
        """The failing slot index is reported and no schedules are returned."""
        response = build_schedule_api(
            _request(
                candidates=[
                    {"id": "m1", "blackout_dates": ["2025-06-09"]},
                    {"id": "m2", "blackout_dates": ["2025-06-09"]},
                ]
            )
        )

        result = response["result"]
        assert result["success"] is False
        assert result["error_code"] == "SCHEDULING_INFEASIBLE"
        assert result["infeasible_slot_index"] == 1
        assert result["schedules"] == []

    def test_step_budget_option(self):
        """A per-request step budget is honored."""
        response = build_schedule_api(
            _request(
                slots=["2025-06-02", "2025-06-09", "2025-06-16", "2025-06-23"],
                options={"max_steps": 1},
            )
        )

        assert response["result"]["error_code"] == "COMPUTATION_TIMEOUT"


class TestRequestHelpers:
    """Validation and configuration helpers."""

    def test_validate_schedule_request_valid(self):
        """Test validation of a valid request"""
        assert validate_schedule_request(_request()) is None

    def test_validate_schedule_request_errors(self):
        """Each malformed shape gets its own message."""
        assert validate_schedule_request({"slots": []}) == "Missing required field: candidates"
        assert (
            validate_schedule_request(_request(candidates=[]))
            == "At least one candidate is required"
        )
        assert (
            validate_schedule_request(_request(candidates=[{"label": "x"}]))
            == "Candidate 0 missing required field: id"
        )
        assert validate_schedule_request(_request(slots=[])) == "At least one slot is required"
        assert (
            validate_schedule_request(_request(slots=["2025-13-40"]))
            == "Slot 0 must be in YYYY-MM-DD format"
        )

    def test_resolve_config_overrides_defaults(self):
        """Request options replace only the fields they set."""
        defaults = SearchConfig(max_steps=100, max_time_in_seconds=5.0)

        config = resolve_config(SearchOptions(strict=True), defaults)

        assert config.strict is True
        assert config.max_steps == 100
        assert config.max_time_in_seconds == 5.0

    def test_resolve_config_without_options_keeps_defaults(self):
        """No options means the defaults object is used as is."""
        defaults = SearchConfig(max_steps=100)
        assert resolve_config(SearchOptions(), defaults) is defaults

    def test_request_parses_dates(self):
        """Slot and conflict strings are parsed into dates."""
        request = ScheduleRequest(**_request(conflicts={"m1": ["2025-06-02"]}))

        assert request.slots[0].isoformat() == "2025-06-02"
        assert request.conflicts["m1"][0].year == 2025
