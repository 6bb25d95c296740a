"""Kopf handlers that drive the reconcilers for each resource kind."""
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import kopf
from kubernetes.client.rest import ApiException
from loguru import logger

from ..constants import (
    API_GROUP,
    API_VERSION,
    HEARTBEAT_KIND,
    MONITOR_GROUP_KIND,
    MONITOR_KIND,
    PLURALS,
    SECRET_VERSION_ANNOTATION,
)
from ..utils.helpers import object_key, secret_index_key, split_key


async def reconcile_object(memo, kind: str, namespace: str, name: str) -> None:
    """Run the kind's reconciler for one object and hand retries to kopf.

    A pass that installed the finalizer is followed by a second pass at once,
    since finalizer changes do not re-trigger kopf's change handlers. A pass
    that asks to be requeued becomes a ``kopf.TemporaryError`` with that delay.
    Any other exception propagates and is retried with kopf's error backoff.
    """
    reconciler = memo.reconcilers[kind]
    key = object_key(namespace, name)

    result = await reconciler.reconcile(key)
    if result is not None and result.requeue:
        result = await reconciler.reconcile(key)

    if result is not None and (result.requeue or result.requeue_after):
        delay = result.requeue_after or reconciler.error_requeue_seconds
        raise kopf.TemporaryError(f"{kind} {key} is not synchronized yet", delay=delay)


def secret_index_entry(namespace: str, name: str, spec: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Index entry mapping ``namespace/secretName`` to the object's key."""
    secret_ref = (spec or {}).get("apiTokenSecretRef") or {}
    index_key = secret_index_key(namespace, secret_ref.get("name"))
    if index_key is None:
        return {}
    return {index_key: object_key(namespace, name)}


def requests_for_secret(
    namespace: str, name: str, indices: Mapping[str, Mapping[str, Iterable[str]]]
) -> List[Tuple[str, str]]:
    """List the ``(kind, key)`` pairs that reference the given secret."""
    index_key = secret_index_key(namespace, name)
    requests = []
    for kind, index in indices.items():
        for key in sorted(set(index.get(index_key, []))):
            requests.append((kind, key))
    return requests


def secret_version(event: Mapping[str, Any]) -> str:
    """Annotation value that changes with every change of the secret, deletion included."""
    metadata = (event.get("object") or {}).get("metadata") or {}
    version = str(metadata.get("resourceVersion") or "")
    if event.get("type") == "DELETED":
        return f"{version}-deleted"
    return version


@kopf.index(API_GROUP, API_VERSION, PLURALS[MONITOR_KIND])
def monitors_by_secret(namespace, name, spec, **_):
    return secret_index_entry(namespace, name, spec)


@kopf.index(API_GROUP, API_VERSION, PLURALS[HEARTBEAT_KIND])
def heartbeats_by_secret(namespace, name, spec, **_):
    return secret_index_entry(namespace, name, spec)


@kopf.index(API_GROUP, API_VERSION, PLURALS[MONITOR_GROUP_KIND])
def monitor_groups_by_secret(namespace, name, spec, **_):
    return secret_index_entry(namespace, name, spec)


@kopf.on.resume(API_GROUP, API_VERSION, PLURALS[MONITOR_KIND])
@kopf.on.create(API_GROUP, API_VERSION, PLURALS[MONITOR_KIND])
@kopf.on.update(API_GROUP, API_VERSION, PLURALS[MONITOR_KIND])
async def reconcile_monitor(namespace, name, memo, **_):
    """Handle BetterStackMonitor changes."""
    await reconcile_object(memo, MONITOR_KIND, namespace, name)


@kopf.on.delete(API_GROUP, API_VERSION, PLURALS[MONITOR_KIND], optional=True)
async def finalize_monitor(namespace, name, memo, **_):
    """Handle BetterStackMonitor deletion."""
    await reconcile_object(memo, MONITOR_KIND, namespace, name)


@kopf.on.resume(API_GROUP, API_VERSION, PLURALS[HEARTBEAT_KIND])
@kopf.on.create(API_GROUP, API_VERSION, PLURALS[HEARTBEAT_KIND])
@kopf.on.update(API_GROUP, API_VERSION, PLURALS[HEARTBEAT_KIND])
async def reconcile_heartbeat(namespace, name, memo, **_):
    """Handle BetterStackHeartbeat changes."""
    await reconcile_object(memo, HEARTBEAT_KIND, namespace, name)


@kopf.on.delete(API_GROUP, API_VERSION, PLURALS[HEARTBEAT_KIND], optional=True)
async def finalize_heartbeat(namespace, name, memo, **_):
    """Handle BetterStackHeartbeat deletion."""
    await reconcile_object(memo, HEARTBEAT_KIND, namespace, name)


@kopf.on.resume(API_GROUP, API_VERSION, PLURALS[MONITOR_GROUP_KIND])
@kopf.on.create(API_GROUP, API_VERSION, PLURALS[MONITOR_GROUP_KIND])
@kopf.on.update(API_GROUP, API_VERSION, PLURALS[MONITOR_GROUP_KIND])
async def reconcile_monitor_group(namespace, name, memo, **_):
    """Handle BetterStackMonitorGroup changes."""
    await reconcile_object(memo, MONITOR_GROUP_KIND, namespace, name)


@kopf.on.delete(API_GROUP, API_VERSION, PLURALS[MONITOR_GROUP_KIND], optional=True)
async def finalize_monitor_group(namespace, name, memo, **_):
    """Handle BetterStackMonitorGroup deletion."""
    await reconcile_object(memo, MONITOR_GROUP_KIND, namespace, name)


@kopf.on.event("", "v1", "secrets")
async def on_secret_event(
    event, namespace, name, memo,
    monitors_by_secret: kopf.Index,
    heartbeats_by_secret: kopf.Index,
    monitor_groups_by_secret: kopf.Index,
    **_,
):
    """Re-reconcile every resource that references a changed secret.

    The referencing objects get their secret version annotation bumped, which
    kopf sees as an update and hands to the kind's change handler.
    """
    if event.get("type") is None:
        # Initial listing; every resource is resumed on startup anyway.
        return
    indices = {
        MONITOR_KIND: monitors_by_secret,
        HEARTBEAT_KIND: heartbeats_by_secret,
        MONITOR_GROUP_KIND: monitor_groups_by_secret,
    }
    version = secret_version(event)
    for kind, key in requests_for_secret(namespace, name, indices):
        object_namespace, object_name = split_key(key)
        logger.info(f"Secret {namespace}/{name} changed, re-reconciling {kind} {key}")
        try:
            await memo.cluster.annotate(
                kind, object_namespace, object_name, {SECRET_VERSION_ANNOTATION: version})
        except ApiException as e:
            logger.warning(f"Unable to flag {kind} {key} for reconciliation: {e.reason}")


def register_handlers():
    """Register all handlers. This function is called from main.py."""
    logger.info("Better Stack resource and secret handlers registered")
