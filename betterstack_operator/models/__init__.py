"""Data models for the Better Stack operator."""
from .spec import HeartbeatSpec, MonitorGroupSpec, MonitorHeaderSpec, MonitorSpec, SecretKeySelector
from .status import (
    Condition,
    HeartbeatStatus,
    MonitorGroupStatus,
    MonitorStatus,
    ResourceStatus,
    new_condition,
)
from .resources import (
    BetterStackHeartbeat,
    BetterStackMonitor,
    BetterStackMonitorGroup,
    CustomResource,
    ObjectMeta,
)

__all__ = [
    "SecretKeySelector",
    "MonitorHeaderSpec",
    "MonitorSpec",
    "HeartbeatSpec",
    "MonitorGroupSpec",
    "Condition",
    "new_condition",
    "ResourceStatus",
    "MonitorStatus",
    "HeartbeatStatus",
    "MonitorGroupStatus",
    "ObjectMeta",
    "CustomResource",
    "BetterStackMonitor",
    "BetterStackHeartbeat",
    "BetterStackMonitorGroup",
]
