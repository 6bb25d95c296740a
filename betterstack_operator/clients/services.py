"""Per-resource services exposed by BetterStackClient."""
from typing import Any, Dict, List, Optional, Type
from urllib.parse import quote

from ..models.api import (
    GroupRequest,
    Heartbeat,
    HeartbeatGroup,
    HeartbeatRequest,
    Monitor,
    MonitorGroup,
    MonitorRequest,
)
from .exceptions import BetterStackAPIError, is_not_found


def _page_params(page: Optional[int], per_page: Optional[int]) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    if page and page > 0:
        params["page"] = page
    if per_page and per_page > 0:
        params["per_page"] = per_page
    return params


class ResourceService:
    """CRUD over one collection path using the ``{data: {...}}`` envelope."""

    path: str = ""
    model: Type = None

    def __init__(self, client):
        self.client = client

    def _item_path(self, resource_id: str) -> str:
        return f"{self.path}/{quote(str(resource_id), safe='')}"

    def _decode(self, envelope: Optional[Dict[str, Any]], fallback_id: str = ""):
        data = (envelope or {}).get("data") or {}
        entity = self.model.model_validate(data)
        if not entity.id and fallback_id:
            entity.id = fallback_id
        return entity

    async def create(self, request):
        envelope = await self.client.request("POST", self.path, payload=request.to_payload())
        return self._decode(envelope)

    async def get(self, resource_id: str):
        envelope = await self.client.request("GET", self._item_path(resource_id))
        return self._decode(envelope)

    async def update(self, resource_id: str, request):
        """PATCH the entity; a response without an id keeps the addressed id."""
        envelope = await self.client.request(
            "PATCH", self._item_path(resource_id), payload=request.to_payload()
        )
        return self._decode(envelope, fallback_id=resource_id)

    async def delete(self, resource_id: str) -> None:
        """Delete the entity. Deleting an absent entity is not an error."""
        try:
            await self.client.request("DELETE", self._item_path(resource_id), expect_body=False)
        except BetterStackAPIError as e:
            if is_not_found(e):
                return
            raise

    async def list(self, page: Optional[int] = None, per_page: Optional[int] = None) -> List:
        items = await self.client.paginate(self.path, params=_page_params(page, per_page) or None)
        return [self.model.model_validate(item) for item in items]


class MonitorService(ResourceService):
    path = "/monitors"
    model = Monitor

    async def create(self, request: MonitorRequest) -> Monitor:
        return await super().create(request)

    async def update(self, resource_id: str, request: MonitorRequest) -> Monitor:
        return await super().update(resource_id, request)

    async def list(
        self,
        url: Optional[str] = None,
        pronounceable_name: Optional[str] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> List[Monitor]:
        """List monitors, optionally filtered by URL or display name."""
        params: Dict[str, Any] = {}
        if url:
            params["url"] = url
        if pronounceable_name:
            params["pronounceable_name"] = pronounceable_name
        params.update(_page_params(page, per_page))
        items = await self.client.paginate(self.path, params=params or None)
        return [Monitor.model_validate(item) for item in items]


class HeartbeatService(ResourceService):
    path = "/heartbeats"
    model = Heartbeat

    async def create(self, request: HeartbeatRequest) -> Heartbeat:
        return await super().create(request)

    async def update(self, resource_id: str, request: HeartbeatRequest) -> Heartbeat:
        return await super().update(resource_id, request)


class MonitorGroupService(ResourceService):
    path = "/monitor-groups"
    model = MonitorGroup

    async def create(self, request: GroupRequest) -> MonitorGroup:
        return await super().create(request)

    async def update(self, resource_id: str, request: GroupRequest) -> MonitorGroup:
        return await super().update(resource_id, request)

    async def list_monitors(self, group_id: str) -> List[Monitor]:
        items = await self.client.paginate(f"{self._item_path(group_id)}/monitors")
        return [Monitor.model_validate(item) for item in items]


class HeartbeatGroupService(ResourceService):
    path = "/heartbeat-groups"
    model = HeartbeatGroup

    async def create(self, request: GroupRequest) -> HeartbeatGroup:
        return await super().create(request)

    async def update(self, resource_id: str, request: GroupRequest) -> HeartbeatGroup:
        return await super().update(resource_id, request)

    async def list_heartbeats(self, group_id: str) -> List[Heartbeat]:
        items = await self.client.paginate(f"{self._item_path(group_id)}/heartbeats")
        return [Heartbeat.model_validate(item) for item in items]
