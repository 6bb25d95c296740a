"""Tests for request builders."""
import json

import pytest

from betterstack_operator.handlers.builders import (
    build_heartbeat_request,
    build_monitor_group_request,
    build_monitor_request,
    merge_request_headers,
    request_timeout,
)
from betterstack_operator.models import HeartbeatSpec, MonitorGroupSpec, MonitorHeaderSpec, MonitorSpec
from betterstack_operator.models.api import Monitor, MonitorRequest


def monitor_spec(**fields):
    return MonitorSpec.model_validate(fields)


def existing_with_headers(*headers):
    return Monitor.model_validate({
        "id": "1",
        "attributes": {"request_headers": [
            {"id": header_id, "name": name, "value": "old"} for header_id, name in headers
        ]},
    })


class TestMonitorRequest:
    """Tests for build_monitor_request."""

    def test_minimal_spec_only_sends_paused(self):
        assert build_monitor_request(monitor_spec()).to_payload() == {"paused": False}

    def test_unit_conversions(self):
        payload = build_monitor_request(monitor_spec(
            url="https://example.com",
            checkFrequencyMinutes=2,
            requestMethod="POST",
            port=8443,
            expectedStatusCode=204,
            teamWaitSeconds=0,
        )).to_payload()
        assert payload["check_frequency"] == 120
        assert payload["http_method"] == "post"
        assert payload["port"] == "8443"
        assert payload["expected_status_codes"] == [204]
        assert "team_wait" not in payload

    def test_status_code_list_wins(self):
        payload = build_monitor_request(monitor_spec(
            expectedStatusCode=200, expectedStatusCodes=[200, 201])).to_payload()
        assert payload["expected_status_codes"] == [200, 201]

    def test_contact_flags_pass_through(self):
        payload = build_monitor_request(monitor_spec(email=False, sms=True)).to_payload()
        assert payload["email"] is False
        assert payload["sms"] is True
        assert "call" not in payload

    def test_empty_environment_is_omitted(self):
        payload = build_monitor_request(monitor_spec(environmentVariables={})).to_payload()
        assert "environment_variables" not in payload

    def test_additional_attributes_merged(self):
        payload = build_monitor_request(monitor_spec(
            url="https://example.com",
            additionalAttributes={"url": "https://override", "sla": True},
        )).to_payload()
        assert payload["url"] == "https://override"
        assert payload["sla"] is True

    def test_payload_survives_json_round_trip(self):
        request = build_monitor_request(monitor_spec(
            url="https://example.com",
            requestHeaders=[{"name": "X-Token", "value": "abc"}, {"name": "X-Empty", "value": ""}],
            additionalAttributes={"sla": True, "team_wait": 30, "escalation": {"steps": [1, 2]}},
        ))
        payload = request.to_payload()

        decoded = MonitorRequest.model_validate(json.loads(json.dumps(payload)))

        assert payload["paused"] is False
        assert decoded.to_payload() == payload

    def test_empty_header_value_is_omitted(self):
        payload = build_monitor_request(monitor_spec(requestHeaders=[{"name": "X-Empty", "value": ""}])).to_payload()
        assert payload["request_headers"] == [{"name": "X-Empty"}]
        merged = merge_request_headers([MonitorHeaderSpec(name="X-Empty", value="")])
        assert merged[0].to_payload() == {"name": "X-Empty"}

    def test_builder_is_deterministic(self):
        spec = monitor_spec(url="https://example.com", regions=["us", "eu"], maintenanceDays=["mon"])
        assert build_monitor_request(spec).to_payload() == build_monitor_request(spec).to_payload()


class TestRequestTimeout:
    """Tests for request_timeout unit handling."""

    @pytest.mark.parametrize("monitor_type, expected", [
        ("tcp", 5000),
        ("PING", 5000),
        ("dns", 5000),
        ("status", 5),
        ("keyword", 5),
        ("", 5),
    ])
    def test_units(self, monitor_type, expected):
        assert request_timeout(monitor_spec(monitorType=monitor_type, requestTimeoutSeconds=5)) == expected

    def test_unset(self):
        assert request_timeout(monitor_spec(monitorType="tcp")) is None


class TestHeaderMerge:
    """Tests for merge_request_headers."""

    def test_no_headers(self):
        assert merge_request_headers([]) is None

    def test_ids_matched_case_insensitively(self):
        merged = merge_request_headers(
            [MonitorHeaderSpec(name="x-token", value="new"), MonitorHeaderSpec(name="X-Other", value="v")],
            existing_with_headers(("h1", "X-Token")),
        )
        assert [h.model_dump(exclude_none=True) for h in merged] == [
            {"id": "h1", "name": "x-token", "value": "new"},
            {"name": "X-Other", "value": "v"},
        ]

    def test_duplicate_names_consume_in_order(self):
        merged = merge_request_headers(
            [MonitorHeaderSpec(name="X-A", value="1"),
             MonitorHeaderSpec(name="X-A", value="2"),
             MonitorHeaderSpec(name="X-A", value="3")],
            existing_with_headers(("h1", "X-A"), ("h2", "x-a")),
        )
        assert [h.id for h in merged] == ["h1", "h2", None]


class TestOtherRequests:
    """Tests for heartbeat and group builders."""

    def test_heartbeat_zero_sort_index_is_sent(self):
        spec = HeartbeatSpec.model_validate({"name": "hb", "sortIndex": 0, "paused": True, "policyID": "p1"})
        assert build_heartbeat_request(spec).to_payload() == {
            "name": "hb",
            "sort_index": 0,
            "paused": True,
            "policy_id": "p1",
        }

    def test_heartbeat_non_positive_period_is_omitted(self):
        spec = HeartbeatSpec.model_validate({"periodSeconds": 0, "graceSeconds": -1})
        assert build_heartbeat_request(spec).to_payload() == {}

    def test_group(self):
        spec = MonitorGroupSpec.model_validate({"name": "Core", "teamName": "ops"})
        assert build_monitor_group_request(spec).to_payload() == {"name": "Core", "team_name": "ops"}
