"""Tests for BetterStackMonitorGroup reconciliation."""
import pytest

from betterstack_operator.clients.exceptions import BetterStackAPIError
from betterstack_operator.constants import MONITOR_GROUP_FINALIZER, MONITOR_GROUP_KIND
from betterstack_operator.handlers import MonitorGroupReconciler
from betterstack_operator.models.api import MonitorGroup

from fakes import find_condition, make_object

KEY = "default/example"


@pytest.fixture
def reconciler(cluster, client_factory):
    return MonitorGroupReconciler(cluster, client_factory=client_factory)


@pytest.fixture
def groups(betterstack_api):
    return betterstack_api.monitor_groups


def stored(cluster):
    return cluster.stored(MONITOR_GROUP_KIND, "example")


@pytest.mark.asyncio
async def test_create_group(cluster, reconciler, groups):
    cluster.add(MONITOR_GROUP_KIND, make_object(finalizers=[MONITOR_GROUP_FINALIZER], spec={
        "name": "Production",
        "sortIndex": 0,
        "paused": True,
    }))
    groups.create.return_value = MonitorGroup(id="g-9")

    await reconciler.reconcile(KEY)

    payload = groups.create.call_args.args[0].to_payload()
    assert payload == {"name": "Production", "sort_index": 0, "paused": True}
    obj = stored(cluster)
    assert obj["status"]["monitorGroupID"] == "g-9"
    assert find_condition(obj, "Synced")["reason"] == "MonitorGroupSynced"
    assert find_condition(obj, "Ready")["message"] == "Monitor group synchronized with Better Stack"


@pytest.mark.asyncio
async def test_update_group(cluster, reconciler, groups):
    cluster.add(MONITOR_GROUP_KIND, make_object(
        finalizers=[MONITOR_GROUP_FINALIZER], status={"monitorGroupID": "g-9"}, spec={"name": "Staging"}))
    groups.update.return_value = MonitorGroup(id="g-9")

    await reconciler.reconcile(KEY)

    remote_id, request = groups.update.call_args.args
    assert remote_id == "g-9"
    assert request.to_payload() == {"name": "Staging"}


@pytest.mark.asyncio
async def test_group_quota_message_is_a_plain_failure(cluster, reconciler, groups):
    cluster.add(MONITOR_GROUP_KIND, make_object(finalizers=[MONITOR_GROUP_FINALIZER], spec={"name": "x"}))
    groups.create.side_effect = BetterStackAPIError(403, "quota reached")

    result = await reconciler.reconcile(KEY)

    assert result.requeue_after == 30.0
    obj = stored(cluster)
    assert find_condition(obj, "Synced")["reason"] == "SyncFailed"
    assert find_condition(obj, "Ready")["message"] == "Monitor group reconciliation failed"


@pytest.mark.asyncio
async def test_delete_group(cluster, reconciler, groups):
    cluster.add(MONITOR_GROUP_KIND, make_object(
        finalizers=[MONITOR_GROUP_FINALIZER, "example.com/keep"],
        status={"monitorGroupID": "g-9"}, deleting=True))

    await reconciler.reconcile(KEY)

    groups.delete.assert_awaited_once_with("g-9")
    assert stored(cluster)["metadata"]["finalizers"] == ["example.com/keep"]
