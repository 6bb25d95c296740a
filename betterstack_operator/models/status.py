"""Pydantic models for the observed state of Better Stack custom resources."""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Condition(BaseModel):
    """Condition represents one aspect of the resource's reconciliation health."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., description="Type of condition")
    status: str = Field(..., description="Status of condition (True/False/Unknown)")
    reason: str = Field(..., description="Machine-readable reason for condition")
    message: str = Field(default="", description="Human-readable message for condition")
    last_transition_time: datetime = Field(..., alias="lastTransitionTime")
    observed_generation: int = Field(default=0, alias="observedGeneration")


def new_condition(
    condition_type: str,
    status: bool,
    reason: str,
    message: str,
    now: Optional[datetime] = None,
    generation: int = 0,
) -> Condition:
    """Build a condition with a True/False status string."""
    return Condition(
        type=condition_type,
        status="True" if status else "False",
        reason=reason,
        message=message,
        last_transition_time=now or datetime.now(timezone.utc),
        observed_generation=generation,
    )


class ResourceStatus(BaseModel):
    """Status shared by all Better Stack resource kinds."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    remote_id: str = Field(default="")
    observed_generation: int = Field(default=0, alias="observedGeneration")
    conditions: List[Condition] = Field(default_factory=list)
    last_synced_time: Optional[datetime] = Field(default=None, alias="lastSyncedTime")

    def get_condition(self, condition_type: str) -> Optional[Condition]:
        """Get the condition of the given type if it exists."""
        for condition in self.conditions:
            if condition.type == condition_type:
                return condition
        return None

    def set_condition(self, condition: Condition) -> None:
        """Insert or replace the condition with the same type.

        The transition time only moves when the status value flips.
        """
        for index, existing in enumerate(self.conditions):
            if existing.type != condition.type:
                continue
            if existing.status == condition.status:
                condition = condition.model_copy(
                    update={"last_transition_time": existing.last_transition_time}
                )
            self.conditions[index] = condition
            return
        self.conditions.append(condition)

    def is_ready(self) -> bool:
        condition = self.get_condition("Ready")
        return condition is not None and condition.status == "True"

    def to_dict(self) -> dict:
        """Serialise to the camelCase form stored on the cluster object."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MonitorStatus(ResourceStatus):
    """Status of a BetterStackMonitor."""

    remote_id: str = Field(default="", alias="monitorID")


class HeartbeatStatus(ResourceStatus):
    """Status of a BetterStackHeartbeat."""

    remote_id: str = Field(default="", alias="heartbeatID")


class MonitorGroupStatus(ResourceStatus):
    """Status of a BetterStackMonitorGroup."""

    remote_id: str = Field(default="", alias="monitorGroupID")
