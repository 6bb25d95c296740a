"""Cluster state access for the reconcilers, backed by the Kubernetes API."""
import asyncio
import base64
from typing import Any, Dict, Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from loguru import logger

from ..constants import API_GROUP, API_VERSION, PLURALS


def load_kube_configuration(kubeconfig: Optional[str] = None) -> None:
    """Load client configuration.

    An explicit kubeconfig path wins; otherwise in-cluster configuration is
    tried first, falling back to the local kubeconfig for development.
    """
    if kubeconfig:
        config.load_kube_config(config_file=kubeconfig)
        logger.info(f"Loaded Kubernetes configuration from {kubeconfig}")
        return
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes configuration")
    except ConfigException:
        config.load_kube_config()
        logger.info("Loaded local Kubernetes configuration")


class KubernetesClusterState:
    """Async facade over CustomObjectsApi and CoreV1Api.

    The official client is blocking, so every call runs in a worker thread.
    """

    def __init__(
        self,
        custom_api: Optional[client.CustomObjectsApi] = None,
        core_api: Optional[client.CoreV1Api] = None,
    ):
        self.custom_api = custom_api or client.CustomObjectsApi()
        self.core_api = core_api or client.CoreV1Api()

    async def get(self, kind: str, namespace: str, name: str) -> Optional[Dict[str, Any]]:
        """Fetch a custom object, or None if it does not exist."""
        try:
            return await asyncio.to_thread(
                self.custom_api.get_namespaced_custom_object,
                API_GROUP, API_VERSION, namespace, PLURALS[kind], name,
            )
        except ApiException as e:
            if e.status == 404:
                return None
            raise

    async def update(self, kind: str, obj: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the object; the embedded resourceVersion guards against lost updates."""
        metadata = obj["metadata"]
        return await asyncio.to_thread(
            self.custom_api.replace_namespaced_custom_object,
            API_GROUP, API_VERSION, metadata["namespace"], PLURALS[kind], metadata["name"], obj,
        )

    async def patch_status(
        self, kind: str, namespace: str, name: str, patch: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Apply a JSON merge patch to the status subresource."""
        return await asyncio.to_thread(
            self.custom_api.patch_namespaced_custom_object_status,
            API_GROUP, API_VERSION, namespace, PLURALS[kind], name,
            {"status": patch},
            _content_type="application/merge-patch+json",
        )

    async def annotate(
        self, kind: str, namespace: str, name: str, annotations: Dict[str, str]
    ) -> Dict[str, Any]:
        """Merge annotations into the object's metadata."""
        return await asyncio.to_thread(
            self.custom_api.patch_namespaced_custom_object,
            API_GROUP, API_VERSION, namespace, PLURALS[kind], name,
            {"metadata": {"annotations": annotations}},
            _content_type="application/merge-patch+json",
        )

    async def get_secret(self, namespace: str, name: str) -> Optional[Dict[str, bytes]]:
        """Return the secret's base64-decoded data map, or None if it does not exist.

        Values stay bytes; a secret may hold binary keys next to the token.
        """
        try:
            secret = await asyncio.to_thread(self.core_api.read_namespaced_secret, name, namespace)
        except ApiException as e:
            if e.status == 404:
                return None
            raise
        data = secret.data or {}
        return {
            key: base64.b64decode(value) if value else b""
            for key, value in data.items()
        }
