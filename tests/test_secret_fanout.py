"""Tests for the kopf handler glue and secret fan-out."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock, call

import kopf
import pytest
from kubernetes.client.rest import ApiException

from betterstack_operator.constants import (
    HEARTBEAT_KIND,
    MONITOR_FINALIZER,
    MONITOR_GROUP_KIND,
    MONITOR_KIND,
    SECRET_VERSION_ANNOTATION,
)
from betterstack_operator.handlers import MonitorReconciler, ReconcileResult, reconcile_object
from betterstack_operator.handlers.resources import (
    on_secret_event,
    requests_for_secret,
    secret_index_entry,
    secret_version,
)
from betterstack_operator.models.api import Monitor

from fakes import make_object


def secret_event(event_type="MODIFIED", resource_version="7"):
    return {"type": event_type, "object": {"metadata": {"resourceVersion": resource_version}}}


def memo_with(reconciler, kind=MONITOR_KIND):
    return SimpleNamespace(reconcilers={kind: reconciler})


def stub_reconciler(*results):
    return Mock(reconcile=AsyncMock(side_effect=list(results)), error_requeue_seconds=30.0)


class TestSecretIndex:
    """Tests for secret index entries and lookups."""

    def test_index_entry(self):
        spec = {"apiTokenSecretRef": {"name": "creds", "key": "token"}}
        assert secret_index_entry("apps", "web", spec) == {"apps/creds": "apps/web"}

    def test_no_secret_reference(self):
        assert secret_index_entry("apps", "web", {}) == {}
        assert secret_index_entry("apps", "web", None) == {}
        assert secret_index_entry("apps", "web", {"apiTokenSecretRef": {"name": ""}}) == {}

    def test_requests_for_secret(self):
        indices = {
            MONITOR_KIND: {"apps/creds": ["apps/web", "apps/api", "apps/web"], "apps/other": ["apps/x"]},
            HEARTBEAT_KIND: {"apps/creds": ["apps/backup"]},
            MONITOR_GROUP_KIND: {},
        }
        assert requests_for_secret("apps", "creds", indices) == [
            (MONITOR_KIND, "apps/api"),
            (MONITOR_KIND, "apps/web"),
            (HEARTBEAT_KIND, "apps/backup"),
        ]

    def test_secret_in_other_namespace_matches_nothing(self):
        indices = {MONITOR_KIND: {"apps/creds": ["apps/web"]}}
        assert requests_for_secret("default", "creds", indices) == []


class TestSecretEvents:
    """Tests for on_secret_event."""

    def test_secret_version(self):
        assert secret_version(secret_event()) == "7"
        assert secret_version(secret_event(event_type="DELETED")) == "7-deleted"
        assert secret_version({"type": "MODIFIED"}) == ""

    @pytest.mark.asyncio
    async def test_dependents_are_annotated(self):
        memo = SimpleNamespace(cluster=Mock(annotate=AsyncMock()))

        await on_secret_event(
            event=secret_event(), namespace="apps", name="creds", memo=memo,
            monitors_by_secret={"apps/creds": ["apps/web"]},
            heartbeats_by_secret={},
            monitor_groups_by_secret={"apps/creds": ["apps/core"]},
        )

        assert memo.cluster.annotate.await_args_list == [
            call(MONITOR_KIND, "apps", "web", {SECRET_VERSION_ANNOTATION: "7"}),
            call(MONITOR_GROUP_KIND, "apps", "core", {SECRET_VERSION_ANNOTATION: "7"}),
        ]

    @pytest.mark.asyncio
    async def test_deleted_secret_is_flagged(self):
        memo = SimpleNamespace(cluster=Mock(annotate=AsyncMock()))

        await on_secret_event(
            event=secret_event(event_type="DELETED"), namespace="apps", name="creds", memo=memo,
            monitors_by_secret={},
            heartbeats_by_secret={"apps/creds": ["apps/backup"]},
            monitor_groups_by_secret={},
        )

        memo.cluster.annotate.assert_awaited_once_with(
            HEARTBEAT_KIND, "apps", "backup", {SECRET_VERSION_ANNOTATION: "7-deleted"})

    @pytest.mark.asyncio
    async def test_initial_secret_listing_is_ignored(self):
        memo = SimpleNamespace(cluster=Mock(annotate=AsyncMock()))

        await on_secret_event(
            event=secret_event(event_type=None), namespace="apps", name="creds", memo=memo,
            monitors_by_secret={"apps/creds": ["apps/web"]},
            heartbeats_by_secret={},
            monitor_groups_by_secret={},
        )

        memo.cluster.annotate.assert_not_called()

    @pytest.mark.asyncio
    async def test_annotation_failure_does_not_stop_fan_out(self):
        annotate = AsyncMock(side_effect=[ApiException(status=404, reason="Not Found"), None])
        memo = SimpleNamespace(cluster=Mock(annotate=annotate))

        await on_secret_event(
            event=secret_event(), namespace="apps", name="creds", memo=memo,
            monitors_by_secret={"apps/creds": ["apps/api", "apps/web"]},
            heartbeats_by_secret={},
            monitor_groups_by_secret={},
        )

        assert annotate.await_count == 2
        assert annotate.await_args.args[2] == "web"


class TestReconcileObject:
    """Tests for reconcile_object."""

    @pytest.mark.asyncio
    async def test_synchronized_object_returns(self):
        reconciler = stub_reconciler(None)

        await reconcile_object(memo_with(reconciler), MONITOR_KIND, "apps", "web")

        reconciler.reconcile.assert_awaited_once_with("apps/web")

    @pytest.mark.asyncio
    async def test_requeue_after_becomes_temporary_error(self):
        reconciler = stub_reconciler(ReconcileResult(requeue_after=12.0))

        with pytest.raises(kopf.TemporaryError) as excinfo:
            await reconcile_object(memo_with(reconciler), MONITOR_KIND, "apps", "web")

        assert excinfo.value.delay == 12.0

    @pytest.mark.asyncio
    async def test_finalizer_pass_is_followed_by_second_pass(self):
        reconciler = stub_reconciler(ReconcileResult(requeue=True), None)

        await reconcile_object(memo_with(reconciler), MONITOR_KIND, "apps", "web")

        assert reconciler.reconcile.await_count == 2

    @pytest.mark.asyncio
    async def test_repeated_requeue_uses_error_delay(self):
        reconciler = stub_reconciler(ReconcileResult(requeue=True), ReconcileResult(requeue=True))

        with pytest.raises(kopf.TemporaryError) as excinfo:
            await reconcile_object(memo_with(reconciler), MONITOR_KIND, "apps", "web")

        assert excinfo.value.delay == 30.0

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self):
        reconciler = stub_reconciler(ApiException(status=500, reason="etcd unavailable"))

        with pytest.raises(ApiException):
            await reconcile_object(memo_with(reconciler), MONITOR_KIND, "apps", "web")

    @pytest.mark.asyncio
    async def test_new_monitor_is_created_in_one_call(self, cluster, client_factory, betterstack_api):
        cluster.add(MONITOR_KIND, make_object(spec={"url": "https://example.com"}))
        betterstack_api.monitors.create.return_value = Monitor(id="m1")
        reconciler = MonitorReconciler(cluster, client_factory=client_factory, error_requeue_seconds=30.0)

        await reconcile_object(memo_with(reconciler), MONITOR_KIND, "default", "example")

        obj = cluster.stored(MONITOR_KIND, "example")
        assert obj["metadata"]["finalizers"] == [MONITOR_FINALIZER]
        assert obj["status"]["monitorID"] == "m1"
        betterstack_api.monitors.create.assert_awaited_once()
