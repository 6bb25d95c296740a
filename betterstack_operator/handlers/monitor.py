"""Reconciler for BetterStackMonitor resources."""
from typing import Optional

from ..clients.exceptions import is_not_found
from ..constants import MONITOR_FINALIZER, MONITOR_KIND, REASON_MONITOR_QUOTA_EXCEEDED, REASON_MONITOR_SYNCED
from ..models import BetterStackMonitor
from ..models.api import Monitor
from .builders import build_monitor_request
from .reconciler import SYNC_ERRORS, BaseReconciler


class MonitorReconciler(BaseReconciler):
    """Keeps a Better Stack monitor in line with a BetterStackMonitor object."""

    kind = MONITOR_KIND
    label = "monitor"
    resource_class = BetterStackMonitor
    finalizer = MONITOR_FINALIZER
    synced_reason = REASON_MONITOR_SYNCED
    quota_reason = REASON_MONITOR_QUOTA_EXCEEDED

    def service(self, client):
        return client.monitors

    def build_request(self, resource: BetterStackMonitor, existing: Optional[Monitor] = None):
        return build_monitor_request(resource.spec, existing)

    async def sync(self, resource: BetterStackMonitor, api, log):
        # The current remote monitor carries the header ids that updates must reuse.
        existing = None
        remote_id = resource.status.remote_id
        if remote_id:
            try:
                existing = await api.get(remote_id)
            except SYNC_ERRORS as e:
                if is_not_found(e):
                    log.info(f"Remote monitor {remote_id} missing, creating anew")
                    resource.status.remote_id = ""
                else:
                    log.error(f"Unable to fetch existing Better Stack monitor {remote_id}: {e}")

        request = self.build_request(resource, existing)
        return await self.create_or_update(resource, api, request, log)
