"""Cluster-visible constants shared by the reconcilers."""

API_GROUP = "monitoring.betterstack.io"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

DEFAULT_BASE_URL = "https://uptime.betterstack.com/api/v2"

# Finalizers guard remote cleanup during deletion.
MONITOR_FINALIZER = "betterstack.monitoring.loks0n/monitor-finalizer"
HEARTBEAT_FINALIZER = "betterstack.monitoring.loks0n/heartbeat-finalizer"
MONITOR_GROUP_FINALIZER = "betterstack.monitoring.loks0n/monitorgroup-finalizer"

# Condition types
CONDITION_READY = "Ready"
CONDITION_CREDENTIALS = "CredentialsAvailable"
CONDITION_SYNC = "Synced"

# Condition reasons
REASON_TOKEN_UNAVAILABLE = "TokenUnavailable"
REASON_TOKEN_RESOLVED = "TokenResolved"
REASON_SYNC_FAILED = "SyncFailed"
REASON_MONITOR_SYNCED = "MonitorSynced"
REASON_HEARTBEAT_SYNCED = "HeartbeatSynced"
REASON_MONITOR_GROUP_SYNCED = "MonitorGroupSynced"
REASON_MONITOR_QUOTA_EXCEEDED = "MonitorQuotaExceeded"
REASON_HEARTBEAT_QUOTA_EXCEEDED = "HeartbeatQuotaExceeded"

# Monitor types whose request timeout is expressed in milliseconds remotely.
SERVER_MONITOR_TYPES = frozenset({"ping", "tcp", "udp", "smtp", "pop", "imap", "dns"})

# Custom resource kinds and their plural resource names.
MONITOR_KIND = "BetterStackMonitor"
HEARTBEAT_KIND = "BetterStackHeartbeat"
MONITOR_GROUP_KIND = "BetterStackMonitorGroup"

PLURALS = {
    MONITOR_KIND: "betterstackmonitors",
    HEARTBEAT_KIND: "betterstackheartbeats",
    MONITOR_GROUP_KIND: "betterstackmonitorgroups",
}

# Annotation bumped on referencing objects when their API token secret changes,
# and the prefix under which kopf keeps handler progress.
SECRET_VERSION_ANNOTATION = "monitoring.betterstack.io/secret-version"
PROGRESS_ANNOTATION_PREFIX = "betterstack.monitoring.loks0n"
