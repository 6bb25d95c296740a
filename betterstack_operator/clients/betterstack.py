"""Async HTTP client for the Better Stack Uptime API."""
import json
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from ..constants import DEFAULT_BASE_URL
from .exceptions import BetterStackAPIError
from .services import HeartbeatGroupService, HeartbeatService, MonitorGroupService, MonitorService


def parse_api_error(response: httpx.Response) -> BetterStackAPIError:
    """Build an API error from a failed response.

    Prefers the JSON:API ``errors`` list (detail over title), then a top level
    ``error`` or ``message`` string, then the raw body, then the status line.
    """
    raw = response.text or ""
    message = raw.strip()
    data: Dict[str, Any] = {}
    if raw:
        try:
            decoded = json.loads(raw)
        except ValueError:
            decoded = None
        if isinstance(decoded, dict):
            data = decoded

    errors = data.get("errors")
    if isinstance(errors, list) and errors:
        parts = []
        for item in errors:
            if not isinstance(item, dict):
                continue
            if item.get("detail"):
                parts.append(str(item["detail"]))
            elif item.get("title"):
                parts.append(str(item["title"]))
        if parts:
            message = "; ".join(parts)
    elif isinstance(data.get("error"), str) and data["error"]:
        message = data["error"]
    elif isinstance(data.get("message"), str) and data["message"]:
        message = data["message"]

    if not message:
        message = f"{response.status_code} {response.reason_phrase}".strip()

    return BetterStackAPIError(response.status_code, message, response_data=data)


class BetterStackClient:
    """Better Stack API client bound to one base URL and token.

    The underlying ``httpx.AsyncClient`` is shared and owned by the caller;
    this class never closes it.
    """

    def __init__(self, base_url: str, token: str, http_client: httpx.AsyncClient):
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.token = token
        self.http_client = http_client

        self.monitors = MonitorService(self)
        self.heartbeats = HeartbeatService(self)
        self.monitor_groups = MonitorGroupService(self)
        self.heartbeat_groups = HeartbeatGroupService(self)

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}{path}"

    def _headers(self, has_body: bool) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if has_body:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        expect_body: bool = True,
    ) -> Optional[Dict[str, Any]]:
        """Send one request and return the decoded JSON body.

        Returns None for 204 responses, empty bodies and calls made with
        ``expect_body=False``, whose body is never parsed. Raises
        BetterStackAPIError for any status outside 200..399.
        """
        content = json.dumps(payload).encode() if payload is not None else None
        logger.debug(f"Better Stack {method} {path}")

        response = await self.http_client.request(
            method,
            self._url(path),
            content=content,
            params=params,
            headers=self._headers(content is not None),
        )

        if not 200 <= response.status_code < 400:
            raise parse_api_error(response)

        if not expect_body or response.status_code == 204 or not response.content.strip():
            return None
        return response.json()

    def _relative(self, link: str) -> str:
        link = link.strip()
        if link.startswith(self.base_url):
            link = link[len(self.base_url):]
        return link

    async def paginate(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Collect ``data`` items from every page, following ``pagination.next``."""
        items: List[Dict[str, Any]] = []
        next_path: Optional[str] = path
        while next_path:
            envelope = await self.request("GET", next_path, params=params) or {}
            items.extend(envelope.get("data") or [])
            # The next link already carries the query string.
            params = None
            pagination = envelope.get("pagination") or {}
            next_path = self._relative(pagination.get("next") or "")
        return items
