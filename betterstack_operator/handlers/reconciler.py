"""Reconciliation state machine shared by all Better Stack resource kinds."""
from dataclasses import dataclass
from typing import Callable, Optional, Type

import httpx
from loguru import logger

from ..clients import BetterStackClient
from ..clients.exceptions import (
    BetterStackAPIError,
    CredentialsError,
    MissingRemoteID,
    is_not_found,
    is_quota_exceeded,
)
from ..constants import (
    CONDITION_CREDENTIALS,
    CONDITION_READY,
    CONDITION_SYNC,
    DEFAULT_BASE_URL,
    REASON_SYNC_FAILED,
    REASON_TOKEN_RESOLVED,
    REASON_TOKEN_UNAVAILABLE,
)
from ..models import CustomResource, ResourceStatus, new_condition
from ..utils.helpers import create_merge_patch, split_key, utcnow
from .credentials import resolve_api_token

# Errors that end a sync attempt with a SyncFailed condition rather than a crash.
# ValueError covers undecodable response bodies and responses without an id.
SYNC_ERRORS = (BetterStackAPIError, httpx.HTTPError, ValueError)

ClientFactory = Callable[[str, str], BetterStackClient]


@dataclass(frozen=True)
class ReconcileResult:
    """Directive returned by a reconcile pass.

    ``requeue`` asks for another pass right away, ``requeue_after`` for one
    after the given number of seconds.
    """

    requeue_after: Optional[float] = None
    requeue: bool = False


class BaseReconciler:
    """Drives one custom object towards its remote Better Stack entity.

    Subclasses describe the kind (finalizer, reasons, messages), pick the API
    service and build the request; the flow itself lives here:

    1. load the object, stop if it is gone
    2. on deletion, delete the remote entity and release the finalizer
    3. install the finalizer before any remote write
    4. resolve the API token from the referenced secret
    5. update the remote entity, recreating it if it vanished
    6. commit the remote id, generation and Ready condition to status
    """

    kind: str = ""
    label: str = ""
    resource_class: Type[CustomResource] = CustomResource
    finalizer: str = ""
    synced_reason: str = ""
    quota_reason: Optional[str] = None

    def __init__(
        self,
        cluster,
        http_client: Optional[httpx.AsyncClient] = None,
        client_factory: Optional[ClientFactory] = None,
        error_requeue_seconds: float = 30.0,
        default_base_url: str = DEFAULT_BASE_URL,
    ):
        self.cluster = cluster
        self.http_client = http_client
        self.client_factory = client_factory
        self.error_requeue_seconds = error_requeue_seconds
        self.default_base_url = default_base_url

    @property
    def synced_message(self) -> str:
        return f"{self.label.capitalize()} synchronized with Better Stack"

    @property
    def failed_message(self) -> str:
        return f"{self.label.capitalize()} reconciliation failed"

    @property
    def quota_message(self) -> str:
        return f"Better Stack {self.label} quota reached"

    def api_client(self, base_url: str, token: str) -> BetterStackClient:
        base_url = base_url or self.default_base_url
        if self.client_factory is not None:
            return self.client_factory(base_url, token)
        return BetterStackClient(base_url, token, self.http_client)

    def service(self, client: BetterStackClient):
        raise NotImplementedError

    def build_request(self, resource, existing=None):
        raise NotImplementedError

    def requeue(self) -> ReconcileResult:
        return ReconcileResult(requeue_after=self.error_requeue_seconds)

    async def reconcile(self, key: str) -> Optional[ReconcileResult]:
        namespace, name = split_key(key)
        log = logger.bind(kind=self.kind, key=key)

        raw = await self.cluster.get(self.kind, namespace, name)
        if raw is None:
            log.debug(f"{self.kind} {key} no longer exists")
            return None
        resource = self.resource_class.from_dict(raw)

        if resource.being_deleted:
            return await self.handle_delete(resource, log)

        if not resource.has_finalizer(self.finalizer):
            resource.add_finalizer(self.finalizer)
            await self.cluster.update(self.kind, resource.to_update_body())
            log.info(f"Added finalizer to {self.kind} {key}")
            return ReconcileResult(requeue=True)

        secret_ref = resource.spec.api_token_secret_ref
        try:
            token = await resolve_api_token(self.cluster, namespace, secret_ref)
        except CredentialsError as e:
            log.error(f"Unable to fetch Better Stack API token for {key}: {e}")
            now = utcnow()
            generation = resource.metadata.generation

            def credentials_unavailable(status: ResourceStatus):
                status.set_condition(new_condition(
                    CONDITION_CREDENTIALS, False, REASON_TOKEN_UNAVAILABLE, str(e), now, generation))
                status.set_condition(new_condition(
                    CONDITION_READY, False, REASON_TOKEN_UNAVAILABLE,
                    "API credentials not available", now, generation))

            await self.try_patch_status(resource, credentials_unavailable, log)
            return self.requeue()

        now = utcnow()
        generation = resource.metadata.generation
        await self.try_patch_status(
            resource,
            lambda status: status.set_condition(new_condition(
                CONDITION_CREDENTIALS, True, REASON_TOKEN_RESOLVED,
                f"Using secret {namespace}/{secret_ref.name}", now, generation)),
            log,
        )

        api = self.service(self.api_client(resource.spec.base_url, token))
        try:
            entity = await self.sync(resource, api, log)
        except SYNC_ERRORS as e:
            log.error(f"Unable to reconcile Better Stack {self.label} for {key}: {e}")
            await self.try_patch_status(resource, self._sync_failed(e, resource), log)
            return self.requeue()

        now = utcnow()

        def synced(status: ResourceStatus):
            status.remote_id = entity.id
            status.observed_generation = generation
            status.last_synced_time = now
            status.set_condition(new_condition(
                CONDITION_SYNC, True, self.synced_reason, self.synced_message, now, generation))
            status.set_condition(new_condition(
                CONDITION_READY, True, self.synced_reason, self.synced_message, now, generation))

        # The remote write already happened, so a failure here must surface.
        await self.patch_status(resource, synced)
        log.info(f"{self.kind} {key} synchronized as {self.label} {entity.id}")
        return None

    async def sync(self, resource, api, log):
        """Create or update the remote entity and return it."""
        return await self.create_or_update(resource, api, self.build_request(resource), log)

    async def create_or_update(self, resource, api, request, log):
        status = resource.status
        entity = None
        if status.remote_id:
            try:
                entity = await api.update(status.remote_id, request)
            except BetterStackAPIError as e:
                if not is_not_found(e):
                    raise
                log.info(f"Remote {self.label} {status.remote_id} missing, creating anew")
                status.remote_id = ""
        if entity is None:
            entity = await api.create(request)
        # An id-less entity would commit an empty remote id as synced.
        if not entity.id:
            raise MissingRemoteID(f"Better Stack returned no id for the {self.label}")
        return entity

    def _sync_failed(self, error: Exception, resource) -> Callable[[ResourceStatus], None]:
        now = utcnow()
        generation = resource.metadata.generation
        if self.quota_reason and is_quota_exceeded(error):
            reason, sync_message, ready_message = self.quota_reason, self.quota_message, self.quota_message
        else:
            reason, sync_message, ready_message = REASON_SYNC_FAILED, str(error), self.failed_message

        def mutate(status: ResourceStatus):
            status.set_condition(new_condition(CONDITION_SYNC, False, reason, sync_message, now, generation))
            status.set_condition(new_condition(CONDITION_READY, False, reason, ready_message, now, generation))

        return mutate

    async def handle_delete(self, resource, log) -> Optional[ReconcileResult]:
        if not resource.has_finalizer(self.finalizer):
            return None

        remote_id = resource.status.remote_id
        if remote_id:
            try:
                token = await resolve_api_token(
                    self.cluster, resource.metadata.namespace, resource.spec.api_token_secret_ref)
            except CredentialsError as e:
                log.warning(f"Skipping remote deletion of {self.label} {remote_id}, missing credentials: {e}")
            else:
                api = self.service(self.api_client(resource.spec.base_url, token))
                try:
                    await api.delete(remote_id)
                    log.info(f"Deleted Better Stack {self.label} {remote_id}")
                except SYNC_ERRORS as e:
                    if not is_not_found(e):
                        log.error(f"Unable to delete Better Stack {self.label} {remote_id}: {e}")

        resource.remove_finalizer(self.finalizer)
        await self.cluster.update(self.kind, resource.to_update_body())
        log.info(f"Removed finalizer from {self.kind} {resource.key}")
        return None

    async def patch_status(self, resource, mutate: Callable[[ResourceStatus], None]) -> None:
        """Mutate the in-memory status and send only the difference as a merge patch."""
        before = resource.status.to_dict()
        mutate(resource.status)
        patch = create_merge_patch(before, resource.status.to_dict())
        if not patch:
            return
        await self.cluster.patch_status(
            self.kind, resource.metadata.namespace, resource.metadata.name, patch)

    async def try_patch_status(self, resource, mutate, log) -> None:
        try:
            await self.patch_status(resource, mutate)
        except Exception as e:
            log.warning(f"Unable to patch status of {self.kind} {resource.key}: {e}")
