"""Pydantic models for Better Stack API payloads and responses."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class APIModel(BaseModel):
    """Lenient base for responses.

    Unknown fields are ignored and explicit nulls fall back to the field
    default, since the API emits ``null`` for most unset attributes.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class RequestModel(BaseModel):
    """Base for request payloads; unset (None) fields are never serialised."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _coerce_id(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


# Monitors

class MonitorHeader(APIModel):
    """Request header as returned by the API."""

    id: str = ""
    name: str = ""
    value: str = ""
    destroy: bool = Field(default=False, alias="_destroy")

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v):
        return _coerce_id(v)


class MonitorAttributes(APIModel):
    url: str = ""
    pronounceable_name: str = ""
    monitor_type: str = ""
    monitor_group_id: Optional[str] = None
    last_checked_at: Optional[datetime] = None
    status: str = ""
    policy_id: Optional[Any] = None
    expiration_policy_id: Optional[Any] = None
    team_name: str = ""
    required_keyword: Optional[str] = None
    verify_ssl: bool = False
    check_frequency: int = 0
    follow_redirects: bool = False
    remember_cookies: bool = False
    call: bool = False
    sms: bool = False
    email: bool = False
    push: bool = False
    critical_alert: bool = False
    paused: bool = False
    team_wait: Optional[int] = None
    http_method: str = ""
    request_timeout: int = 0
    recovery_period: int = 0
    request_headers: List[MonitorHeader] = Field(default_factory=list)
    request_body: Optional[str] = None
    paused_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    ssl_expiration: Optional[int] = None
    domain_expiration: Optional[int] = None
    regions: List[str] = Field(default_factory=list)
    port: Optional[str] = None
    confirmation_period: int = 0
    expected_status_codes: List[int] = Field(default_factory=list)
    maintenance_days: List[str] = Field(default_factory=list)
    maintenance_from: Optional[str] = None
    maintenance_to: Optional[str] = None
    maintenance_timezone: Optional[str] = None
    playwright_script: Optional[str] = None
    environment_variables: Dict[str, str] = Field(default_factory=dict)
    ip_version: Optional[str] = None

    @field_validator("monitor_group_id", mode="before")
    @classmethod
    def normalise_group_id(cls, v):
        # Documented as a string, but some endpoints return a bare number.
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            v = str(int(v)) if float(v).is_integer() else str(v)
        v = str(v).strip()
        return v or None

    @field_validator("port", mode="before")
    @classmethod
    def port_as_string(cls, v):
        return None if v is None else str(v)


class Monitor(APIModel):
    id: str = ""
    attributes: MonitorAttributes = Field(default_factory=MonitorAttributes)

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v):
        return _coerce_id(v)


class MonitorRequestHeader(RequestModel):
    id: Optional[str] = None
    name: Optional[str] = None
    value: Optional[str] = None
    destroy: Optional[bool] = Field(default=None, alias="_destroy")


class MonitorRequest(RequestModel):
    """Writable monitor attributes, shared by create and update calls.

    ``additional_attributes`` is merged over the serialised payload, so raw
    keys win over structured fields on collision.
    """

    team_name: Optional[str] = None
    monitor_type: Optional[str] = None
    url: Optional[str] = None
    pronounceable_name: Optional[str] = None
    email: Optional[bool] = None
    sms: Optional[bool] = None
    call: Optional[bool] = None
    push: Optional[bool] = None
    critical_alert: Optional[bool] = None
    check_frequency: Optional[int] = None
    request_headers: Optional[List[MonitorRequestHeader]] = None
    expected_status_codes: Optional[List[int]] = None
    domain_expiration: Optional[int] = None
    ssl_expiration: Optional[int] = None
    policy_id: Optional[str] = None
    expiration_policy_id: Optional[str] = None
    follow_redirects: Optional[bool] = None
    required_keyword: Optional[str] = None
    team_wait: Optional[int] = None
    paused: Optional[bool] = None
    port: Optional[str] = None
    regions: Optional[List[str]] = None
    monitor_group_id: Optional[str] = None
    recovery_period: Optional[int] = None
    verify_ssl: Optional[bool] = None
    confirmation_period: Optional[int] = None
    http_method: Optional[str] = None
    request_timeout: Optional[int] = None
    request_body: Optional[str] = None
    auth_username: Optional[str] = None
    auth_password: Optional[str] = None
    maintenance_days: Optional[List[str]] = None
    maintenance_from: Optional[str] = None
    maintenance_to: Optional[str] = None
    maintenance_timezone: Optional[str] = None
    remember_cookies: Optional[bool] = None
    playwright_script: Optional[str] = None
    scenario_name: Optional[str] = None
    environment_variables: Optional[Dict[str, str]] = None
    ip_version: Optional[str] = None
    additional_attributes: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def collect_additional_attributes(cls, data):
        # Keys outside the known attributes are kept as raw additional attributes.
        if not isinstance(data, dict):
            return data
        known = set()
        for name, field in cls.model_fields.items():
            known.add(name)
            if field.alias:
                known.add(field.alias)
        extra = {k: v for k, v in data.items() if k not in known}
        if not extra:
            return data
        data = {k: v for k, v in data.items() if k in known}
        data["additional_attributes"] = {**(data.get("additional_attributes") or {}), **extra}
        return data

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload.update(self.additional_attributes)
        return payload


MonitorCreateRequest = MonitorRequest
MonitorUpdateRequest = MonitorRequest


# Heartbeats

class HeartbeatAttributes(APIModel):
    url: str = ""
    name: str = ""
    period: int = 0
    grace: int = 0
    call: bool = False
    sms: bool = False
    email: bool = False
    push: bool = False
    critical_alert: bool = False
    team_wait: Optional[int] = None
    heartbeat_group_id: Optional[int] = None
    team_name: str = ""
    sort_index: Optional[int] = None
    paused_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    status: str = ""
    maintenance_days: List[str] = Field(default_factory=list)
    maintenance_from: Optional[str] = None
    maintenance_to: Optional[str] = None
    maintenance_timezone: Optional[str] = None


class Heartbeat(APIModel):
    id: str = ""
    attributes: HeartbeatAttributes = Field(default_factory=HeartbeatAttributes)

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v):
        return _coerce_id(v)


class HeartbeatRequest(RequestModel):
    team_name: Optional[str] = None
    name: Optional[str] = None
    period: Optional[int] = None
    grace: Optional[int] = None
    call: Optional[bool] = None
    sms: Optional[bool] = None
    email: Optional[bool] = None
    push: Optional[bool] = None
    critical_alert: Optional[bool] = None
    team_wait: Optional[int] = None
    heartbeat_group_id: Optional[int] = None
    sort_index: Optional[int] = None
    paused: Optional[bool] = None
    maintenance_days: Optional[List[str]] = None
    maintenance_from: Optional[str] = None
    maintenance_to: Optional[str] = None
    maintenance_timezone: Optional[str] = None
    policy_id: Optional[str] = None


HeartbeatCreateRequest = HeartbeatRequest
HeartbeatUpdateRequest = HeartbeatRequest


# Monitor groups and heartbeat groups share one attribute shape.

class GroupAttributes(APIModel):
    name: str = ""
    sort_index: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    team_name: str = ""
    paused: bool = False


class MonitorGroup(APIModel):
    id: str = ""
    attributes: GroupAttributes = Field(default_factory=GroupAttributes)

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v):
        return _coerce_id(v)


class HeartbeatGroup(MonitorGroup):
    pass


class GroupRequest(RequestModel):
    team_name: Optional[str] = None
    paused: Optional[bool] = None
    name: Optional[str] = None
    sort_index: Optional[int] = None


MonitorGroupRequest = GroupRequest
MonitorGroupCreateRequest = GroupRequest
MonitorGroupUpdateRequest = GroupRequest
HeartbeatGroupRequest = GroupRequest
HeartbeatGroupCreateRequest = GroupRequest
HeartbeatGroupUpdateRequest = GroupRequest
