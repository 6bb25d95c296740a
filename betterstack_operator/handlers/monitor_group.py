"""Reconciler for BetterStackMonitorGroup resources."""
from ..constants import MONITOR_GROUP_FINALIZER, MONITOR_GROUP_KIND, REASON_MONITOR_GROUP_SYNCED
from ..models import BetterStackMonitorGroup
from .builders import build_monitor_group_request
from .reconciler import BaseReconciler


class MonitorGroupReconciler(BaseReconciler):
    """Keeps a Better Stack monitor group in line with a BetterStackMonitorGroup object.

    The API has no group quota, so every sync failure is reported as SyncFailed.
    """

    kind = MONITOR_GROUP_KIND
    label = "monitor group"
    resource_class = BetterStackMonitorGroup
    finalizer = MONITOR_GROUP_FINALIZER
    synced_reason = REASON_MONITOR_GROUP_SYNCED

    def service(self, client):
        return client.monitor_groups

    def build_request(self, resource: BetterStackMonitorGroup, existing=None):
        return build_monitor_group_request(resource.spec)
