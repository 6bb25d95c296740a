"""Startup and cleanup of the operator runtime."""
import logging

import httpx
import kopf
from loguru import logger

from ..clients import KubernetesClusterState, load_kube_configuration
from ..constants import HEARTBEAT_KIND, MONITOR_GROUP_KIND, MONITOR_KIND, PROGRESS_ANNOTATION_PREFIX
from ..utils.config import Config
from .heartbeat import HeartbeatReconciler
from .monitor import MonitorReconciler
from .monitor_group import MonitorGroupReconciler

RECONCILERS = {
    MONITOR_KIND: MonitorReconciler,
    HEARTBEAT_KIND: HeartbeatReconciler,
    MONITOR_GROUP_KIND: MonitorGroupReconciler,
}


def configure_operator(settings: kopf.OperatorSettings, app_config: Config):
    """Configure kopf and the Kubernetes client on startup."""
    settings.posting.level = logging.INFO
    settings.watching.connect_timeout = 1 * 60
    settings.watching.server_timeout = 10 * 60
    # The status subresource belongs to the reconcilers; kopf keeps its progress in annotations.
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage(prefix=PROGRESS_ANNOTATION_PREFIX)

    try:
        load_kube_configuration(app_config.kubeconfig)
    except Exception as e:
        logger.error(f"Failed to load Kubernetes configuration: {e}")
        raise


def build_reconcilers(app_config: Config, cluster, http_client: httpx.AsyncClient):
    """Create one reconciler per resource kind, all sharing one HTTP client."""
    return {
        kind: reconciler_class(
            cluster,
            http_client=http_client,
            error_requeue_seconds=app_config.error_requeue_seconds,
            default_base_url=app_config.default_base_url,
        )
        for kind, reconciler_class in RECONCILERS.items()
    }


def build_http_client(app_config: Config) -> httpx.AsyncClient:
    """Shared Better Stack transport; redirects are followed like any HTTP client would."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(app_config.http_timeout_seconds),
        follow_redirects=True,
    )


async def start_runtime(memo: kopf.Memo, app_config: Config):
    """Build the shared clients and reconcilers, keeping them on the memo."""
    memo.http_client = build_http_client(app_config)
    memo.cluster = KubernetesClusterState()
    memo.reconcilers = build_reconcilers(app_config, memo.cluster, memo.http_client)
    logger.info(f"Better Stack base URL defaults to {app_config.default_base_url}")


async def stop_runtime(memo: kopf.Memo):
    http_client = getattr(memo, "http_client", None)
    if http_client is not None:
        await http_client.aclose()
