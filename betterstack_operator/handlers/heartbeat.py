"""Reconciler for BetterStackHeartbeat resources."""
from ..constants import (
    HEARTBEAT_FINALIZER,
    HEARTBEAT_KIND,
    REASON_HEARTBEAT_QUOTA_EXCEEDED,
    REASON_HEARTBEAT_SYNCED,
)
from ..models import BetterStackHeartbeat
from .builders import build_heartbeat_request
from .reconciler import BaseReconciler


class HeartbeatReconciler(BaseReconciler):
    """Keeps a Better Stack heartbeat in line with a BetterStackHeartbeat object."""

    kind = HEARTBEAT_KIND
    label = "heartbeat"
    resource_class = BetterStackHeartbeat
    finalizer = HEARTBEAT_FINALIZER
    synced_reason = REASON_HEARTBEAT_SYNCED
    quota_reason = REASON_HEARTBEAT_QUOTA_EXCEEDED

    def service(self, client):
        return client.heartbeats

    def build_request(self, resource: BetterStackHeartbeat, existing=None):
        return build_heartbeat_request(resource.spec)
