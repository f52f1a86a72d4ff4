# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Building directory used to label permission scopes.

The permission engine treats scope ids as opaque; this module only maps
them to display names for the editor's building selector.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx
from sqlalchemy.orm import Session

from src.models import Building

logger = logging.getLogger(__name__)


@dataclass
class BuildingOption:
    """Selectable building scope."""

    value: str
    label: str


class BuildingDirectoryError(Exception):
    """Building directory could not be queried."""


class BuildingDirectory(ABC):
    """Lookup of building ids to display names."""

    @abstractmethod
    async def list_buildings(self) -> list[BuildingOption]:
        """List all buildings available as scopes."""
        ...

    async def get_label(self, scope_id: str) -> str:
        """Display name of a scope, falling back to the raw id."""
        for option in await self.list_buildings():
            if option.value == scope_id:
                return option.label
        return scope_id

    async def close(self) -> None:
        """Clean up resources."""
        pass


class DatabaseBuildingDirectory(BuildingDirectory):
    """Directory backed by the local buildings table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    async def list_buildings(self) -> list[BuildingOption]:
        buildings = self.db.query(Building).order_by(Building.name).all()
        return [BuildingOption(value=str(b.id), label=b.name) for b in buildings]


class HttpBuildingDirectory(BuildingDirectory):
    """Directory backed by a remote, paginated ``/buildings/`` endpoint."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        page_size: int = 1000,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def list_buildings(self) -> list[BuildingOption]:
        """Fetch every page of buildings from the remote directory."""
        results: list[dict[str, Any]] = []
        url: str | None = "/buildings/"
        params: dict[str, Any] | None = {"page_size": self.page_size}
        visited: set[str] = set()
        try:
            while url:
                resp = await self._client.get(url, params=params)
                resp.raise_for_status()
                data = resp.json()
                if isinstance(data, list):
                    results.extend(data)
                    break
                results.extend(data.get("results", []))
                url = data.get("next")
                if url:
                    # next links are absolute and already carry the query
                    url = url.replace(self.base_url, "")
                    params = None
                    if url in visited:
                        logger.warning(f"Building directory repeated page {url}, stopping")
                        break
                    visited.add(url)
        except httpx.HTTPStatusError as e:
            logger.error(f"Building directory returned HTTP {e.response.status_code}")
            raise BuildingDirectoryError(
                f"Building directory returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Building directory request failed: {e}")
            raise BuildingDirectoryError(f"Building directory unavailable: {e}") from e

        return [
            BuildingOption(value=str(item["id"]), label=item.get("name") or str(item["id"]))
            for item in results
        ]
