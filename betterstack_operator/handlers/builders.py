"""Translate resource specs into Better Stack request payloads.

The builders are pure: the same spec (and existing monitor) always yields the
same request. Empty strings, empty collections and non-positive numbers mean
"unset" and are left out so the API keeps its defaults.
"""
from collections import defaultdict
from typing import Any, Dict, List, Optional

from ..constants import SERVER_MONITOR_TYPES
from ..models import HeartbeatSpec, MonitorGroupSpec, MonitorHeaderSpec, MonitorSpec
from ..models.api import GroupRequest, HeartbeatRequest, Monitor, MonitorHeader, MonitorRequest, MonitorRequestHeader


def _text(value: str) -> Optional[str]:
    return value or None


def _positive(value: int) -> Optional[int]:
    return value if value and value > 0 else None


def _items(values) -> Optional[List[Any]]:
    return list(values) if values else None


def request_timeout(spec: MonitorSpec) -> Optional[int]:
    """Request timeout in the unit the monitor type expects.

    Server checks take milliseconds, HTTP-style monitors take seconds.
    """
    timeout = _positive(spec.request_timeout_seconds)
    if timeout is None:
        return None
    if spec.monitor_type.lower() in SERVER_MONITOR_TYPES:
        return timeout * 1000
    return timeout


def merge_request_headers(
    headers: List[MonitorHeaderSpec], existing: Optional[Monitor] = None
) -> Optional[List[MonitorRequestHeader]]:
    """Pair desired headers with remote header ids by case-insensitive name.

    Remote headers are consumed in order, so duplicate names match one to one.
    """
    if not headers:
        return None

    pool: Dict[str, List[MonitorHeader]] = defaultdict(list)
    if existing is not None:
        for header in existing.attributes.request_headers:
            pool[header.name.lower()].append(header)

    merged = []
    for header in headers:
        request_header = MonitorRequestHeader(name=_text(header.name), value=_text(header.value))
        candidates = pool.get(header.name.lower())
        if candidates:
            request_header.id = candidates.pop(0).id
        merged.append(request_header)
    return merged


def build_monitor_request(spec: MonitorSpec, existing: Optional[Monitor] = None) -> MonitorRequest:
    """Build the create/update payload for a monitor.

    ``paused`` is always sent because the API treats a missing value as
    "leave unchanged".
    """
    if spec.expected_status_codes:
        expected_status_codes = list(spec.expected_status_codes)
    elif spec.expected_status_code > 0:
        expected_status_codes = [spec.expected_status_code]
    else:
        expected_status_codes = None

    check_frequency = _positive(spec.check_frequency_minutes)

    return MonitorRequest(
        url=_text(spec.url),
        pronounceable_name=_text(spec.name),
        monitor_type=_text(spec.monitor_type),
        team_name=_text(spec.team_name),
        check_frequency=check_frequency * 60 if check_frequency else None,
        regions=_items(spec.regions),
        http_method=spec.request_method.lower() or None,
        expected_status_codes=expected_status_codes,
        required_keyword=_text(spec.required_keyword),
        paused=bool(spec.paused),
        email=spec.email,
        sms=spec.sms,
        call=spec.call,
        push=spec.push,
        critical_alert=spec.critical_alert,
        follow_redirects=spec.follow_redirects,
        verify_ssl=spec.verify_ssl,
        remember_cookies=spec.remember_cookies,
        policy_id=_text(spec.policy_id),
        expiration_policy_id=_text(spec.expiration_policy_id),
        monitor_group_id=_text(spec.monitor_group_id),
        team_wait=_positive(spec.team_wait_seconds),
        domain_expiration=_positive(spec.domain_expiration_days),
        ssl_expiration=_positive(spec.ssl_expiration_days),
        # The API takes ports as a string, e.g. "25,465".
        port=str(spec.port) if spec.port > 0 else None,
        request_timeout=request_timeout(spec),
        recovery_period=_positive(spec.recovery_period_seconds),
        confirmation_period=_positive(spec.confirmation_period_seconds),
        ip_version=_text(spec.ip_version),
        maintenance_days=_items(spec.maintenance_days),
        maintenance_from=_text(spec.maintenance_from),
        maintenance_to=_text(spec.maintenance_to),
        maintenance_timezone=_text(spec.maintenance_timezone),
        request_headers=merge_request_headers(spec.request_headers, existing),
        request_body=_text(spec.request_body),
        auth_username=_text(spec.auth_username),
        auth_password=_text(spec.auth_password),
        environment_variables=dict(spec.environment_variables) or None,
        playwright_script=_text(spec.playwright_script),
        scenario_name=_text(spec.scenario_name),
        additional_attributes=dict(spec.additional_attributes),
    )


def build_heartbeat_request(spec: HeartbeatSpec) -> HeartbeatRequest:
    """Build the create/update payload for a heartbeat."""
    return HeartbeatRequest(
        team_name=_text(spec.team_name),
        name=_text(spec.name),
        period=_positive(spec.period_seconds),
        grace=_positive(spec.grace_seconds),
        call=spec.call,
        sms=spec.sms,
        email=spec.email,
        push=spec.push,
        critical_alert=spec.critical_alert,
        team_wait=_positive(spec.team_wait_seconds),
        heartbeat_group_id=spec.heartbeat_group_id,
        sort_index=spec.sort_index,
        paused=spec.paused,
        maintenance_days=_items(spec.maintenance_days),
        maintenance_from=_text(spec.maintenance_from),
        maintenance_to=_text(spec.maintenance_to),
        maintenance_timezone=_text(spec.maintenance_timezone),
        policy_id=spec.policy_id,
    )


def build_monitor_group_request(spec: MonitorGroupSpec) -> GroupRequest:
    return GroupRequest(
        name=_text(spec.name),
        team_name=_text(spec.team_name),
        sort_index=spec.sort_index,
        paused=spec.paused,
    )
