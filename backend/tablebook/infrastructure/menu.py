from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

import httpx

from ..domain.errors import RemoteUnavailableError

logger = logging.getLogger(__name__)

ACTIVE_MENUS_PATH = "menus_activos.json"


class MenuCatalog:
    """
    Read-only projection of the menu images currently shown on the home page.

    The list lives in a remote JSON store. A failed refresh keeps the last
    known good list and records a warning; it never raises.
    """

    def __init__(
        self,
        source_url: Optional[str],
        *,
        max_active: int = 2,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.source_url = source_url.rstrip("/") if source_url else None
        self.max_active = max_active
        self.timeout = timeout
        self._transport = transport
        self._images: List[str] = []
        self.warning: Optional[str] = None
        self.refreshed_at: Optional[datetime] = None

    def active_images(self) -> List[str]:
        return list(self._images)

    async def fetch_active(self) -> List[str]:
        if self.source_url is None:
            raise RemoteUnavailableError("menu source is not configured")
        url = f"{self.source_url}/{ACTIVE_MENUS_PATH}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise RemoteUnavailableError(f"menu source unreachable: {exc}") from exc

        if data is None:
            return []
        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            raise RemoteUnavailableError("menu source returned an unexpected payload")
        images = [item for item in data if item.startswith(("https://", "http://"))]
        return images[: self.max_active]

    async def refresh(self, *, now: Optional[datetime] = None) -> bool:
        try:
            images = await self.fetch_active()
        except RemoteUnavailableError as exc:
            self.warning = str(exc)
            logger.warning("menu refresh failed, keeping %d cached images: %s", len(self._images), exc)
            return False
        self._images = images
        self.warning = None
        self.refreshed_at = now or datetime.now(timezone.utc)
        return True

    async def poll(self, interval_seconds: float) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(interval_seconds)
