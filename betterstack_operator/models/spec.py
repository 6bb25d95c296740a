"""Pydantic models for the desired state of Better Stack custom resources."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SpecModel(BaseModel):
    """Base for CRD spec models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SecretKeySelector(SpecModel):
    """Reference to a key inside a Secret in the resource's namespace."""

    name: str = Field(default="", description="Name of the referenced secret")
    key: str = Field(default="", description="Key holding the API token")


class MonitorHeaderSpec(SpecModel):
    """HTTP header sent with each monitor check."""

    name: str = Field(..., description="Header name")
    value: str = Field(default="", description="Header value")


class MonitorSpec(SpecModel):
    """Specification for a BetterStackMonitor custom resource."""

    url: str = Field(default="", description="Endpoint Better Stack should monitor")
    name: str = Field(default="", description="Human readable display name")
    monitor_type: str = Field(default="", alias="monitorType")
    team_name: str = Field(default="", alias="teamName")
    check_frequency_minutes: int = Field(default=0, alias="checkFrequencyMinutes")
    regions: List[str] = Field(default_factory=list)
    request_method: str = Field(default="", alias="requestMethod")
    expected_status_code: int = Field(default=0, alias="expectedStatusCode")
    expected_status_codes: List[int] = Field(default_factory=list, alias="expectedStatusCodes")
    required_keyword: str = Field(default="", alias="requiredKeyword")
    paused: bool = Field(default=False)

    # Contact preference overrides; None leaves the remote default untouched.
    email: Optional[bool] = None
    sms: Optional[bool] = None
    call: Optional[bool] = None
    push: Optional[bool] = None
    critical_alert: Optional[bool] = Field(default=None, alias="criticalAlert")
    follow_redirects: Optional[bool] = Field(default=None, alias="followRedirects")
    verify_ssl: Optional[bool] = Field(default=None, alias="verifySSL")
    remember_cookies: Optional[bool] = Field(default=None, alias="rememberCookies")

    policy_id: str = Field(default="", alias="policyID")
    expiration_policy_id: str = Field(default="", alias="expirationPolicyID")
    monitor_group_id: str = Field(default="", alias="monitorGroupID")
    team_wait_seconds: int = Field(default=0, alias="teamWaitSeconds")
    domain_expiration_days: int = Field(default=0, alias="domainExpirationDays")
    ssl_expiration_days: int = Field(default=0, alias="sslExpirationDays")

    port: int = Field(default=0, description="Converted to the string form the API expects")
    request_timeout_seconds: int = Field(default=0, alias="requestTimeoutSeconds")
    recovery_period_seconds: int = Field(default=0, alias="recoveryPeriodSeconds")
    confirmation_period_seconds: int = Field(default=0, alias="confirmationPeriodSeconds")
    ip_version: str = Field(default="", alias="ipVersion")

    maintenance_days: List[str] = Field(default_factory=list, alias="maintenanceDays")
    maintenance_from: str = Field(default="", alias="maintenanceFrom")
    maintenance_to: str = Field(default="", alias="maintenanceTo")
    maintenance_timezone: str = Field(default="", alias="maintenanceTimezone")

    request_headers: List[MonitorHeaderSpec] = Field(default_factory=list, alias="requestHeaders")
    request_body: str = Field(default="", alias="requestBody")
    auth_username: str = Field(default="", alias="authUsername")
    auth_password: str = Field(default="", alias="authPassword")
    environment_variables: Dict[str, str] = Field(default_factory=dict, alias="environmentVariables")
    playwright_script: str = Field(default="", alias="playwrightScript")
    scenario_name: str = Field(default="", alias="scenarioName")

    additional_attributes: Dict[str, Any] = Field(
        default_factory=dict,
        alias="additionalAttributes",
        description="Raw API attributes merged over the structured payload",
    )

    base_url: str = Field(default="", alias="baseURL")
    api_token_secret_ref: SecretKeySelector = Field(
        default_factory=SecretKeySelector, alias="apiTokenSecretRef"
    )

    @field_validator("regions", "expected_status_codes", "maintenance_days", "request_headers", mode="before")
    @classmethod
    def none_as_empty_list(cls, v):
        return [] if v is None else v

    @field_validator("environment_variables", "additional_attributes", mode="before")
    @classmethod
    def none_as_empty_dict(cls, v):
        return {} if v is None else v


class HeartbeatSpec(SpecModel):
    """Specification for a BetterStackHeartbeat custom resource."""

    name: str = Field(default="", description="Human readable display name")
    period_seconds: int = Field(default=0, alias="periodSeconds")
    grace_seconds: int = Field(default=0, alias="graceSeconds")
    team_name: str = Field(default="", alias="teamName")

    call: Optional[bool] = None
    sms: Optional[bool] = None
    email: Optional[bool] = None
    push: Optional[bool] = None
    critical_alert: Optional[bool] = Field(default=None, alias="criticalAlert")

    team_wait_seconds: int = Field(default=0, alias="teamWaitSeconds")
    heartbeat_group_id: Optional[int] = Field(default=None, alias="heartbeatGroupID")
    sort_index: Optional[int] = Field(default=None, alias="sortIndex")
    paused: Optional[bool] = None

    maintenance_days: List[str] = Field(default_factory=list, alias="maintenanceDays")
    maintenance_from: str = Field(default="", alias="maintenanceFrom")
    maintenance_to: str = Field(default="", alias="maintenanceTo")
    maintenance_timezone: str = Field(default="", alias="maintenanceTimezone")

    policy_id: Optional[str] = Field(default=None, alias="policyID")

    base_url: str = Field(default="", alias="baseURL")
    api_token_secret_ref: SecretKeySelector = Field(
        default_factory=SecretKeySelector, alias="apiTokenSecretRef"
    )

    @field_validator("maintenance_days", mode="before")
    @classmethod
    def none_as_empty_list(cls, v):
        return [] if v is None else v


class MonitorGroupSpec(SpecModel):
    """Specification for a BetterStackMonitorGroup custom resource."""

    name: str = Field(default="", description="Human readable display name")
    team_name: str = Field(default="", alias="teamName")
    sort_index: Optional[int] = Field(default=None, alias="sortIndex")
    paused: Optional[bool] = None

    base_url: str = Field(default="", alias="baseURL")
    api_token_secret_ref: SecretKeySelector = Field(
        default_factory=SecretKeySelector, alias="apiTokenSecretRef"
    )
