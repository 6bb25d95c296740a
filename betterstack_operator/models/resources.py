"""Typed wrappers around the raw custom objects returned by the cluster."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .spec import HeartbeatSpec, MonitorGroupSpec, MonitorSpec
from .status import HeartbeatStatus, MonitorGroupStatus, MonitorStatus


class ObjectMeta(BaseModel):
    """Subset of Kubernetes object metadata the reconcilers rely on."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    namespace: str = "default"
    uid: str = ""
    generation: int = 0
    resource_version: str = Field(default="", alias="resourceVersion")
    deletion_timestamp: Optional[datetime] = Field(default=None, alias="deletionTimestamp")
    finalizers: List[str] = Field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.name}"


class CustomResource(BaseModel):
    """Base for the three custom resource kinds.

    ``raw`` keeps the object exactly as read from the cluster so that writes
    send back every field, including ones these models do not describe.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: str = ""
    metadata: ObjectMeta
    raw: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]):
        data = dict(obj)
        data["spec"] = data.get("spec") or {}
        data["status"] = data.get("status") or {}
        instance = cls.model_validate(data)
        instance.raw = obj
        return instance

    @property
    def key(self) -> str:
        return self.metadata.key

    @property
    def being_deleted(self) -> bool:
        return self.metadata.deletion_timestamp is not None

    def has_finalizer(self, finalizer: str) -> bool:
        return finalizer in self.metadata.finalizers

    def add_finalizer(self, finalizer: str) -> None:
        if finalizer not in self.metadata.finalizers:
            self.metadata.finalizers.append(finalizer)

    def remove_finalizer(self, finalizer: str) -> None:
        self.metadata.finalizers = [f for f in self.metadata.finalizers if f != finalizer]

    def to_update_body(self) -> Dict[str, Any]:
        """Raw object with this model's finalizers applied, for a full update."""
        body = dict(self.raw)
        metadata = dict(body.get("metadata") or {})
        metadata["finalizers"] = list(self.metadata.finalizers)
        body["metadata"] = metadata
        return body


class BetterStackMonitor(CustomResource):
    spec: MonitorSpec
    status: MonitorStatus = Field(default_factory=MonitorStatus)


class BetterStackHeartbeat(CustomResource):
    spec: HeartbeatSpec
    status: HeartbeatStatus = Field(default_factory=HeartbeatStatus)


class BetterStackMonitorGroup(CustomResource):
    spec: MonitorGroupSpec
    status: MonitorGroupStatus = Field(default_factory=MonitorGroupStatus)
