"""
Source Gateway - one filtered read per record set.

Reads go to the data store's PostgREST interface (Supabase ``/rest/v1``).
Every fault (missing credentials, transport error, non-2xx status, an
unexpected body) is logged and turned into an empty list, so callers never
see an exception and the snapshot always renders, degraded rather than
failed.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from config import settings
from utils.logger import gateway_logger as logger


@dataclass(frozen=True)
class QueryOptions:
    """Filter/sort/limit configuration for a single record-set read."""

    select: str = "*"
    eq: dict[str, Any] = field(default_factory=dict)
    neq: dict[str, Any] = field(default_factory=dict)
    in_: dict[str, list[Any]] = field(default_factory=dict)
    gte: dict[str, Any] = field(default_factory=dict)
    order: Optional[str] = None
    ascending: bool = False
    limit: Optional[int] = None

    def to_params(self) -> list[tuple[str, str]]:
        """Render as PostgREST query parameters (order preserved)."""
        params: list[tuple[str, str]] = [("select", self.select or "*")]
        for column, value in self.eq.items():
            params.append((column, f"eq.{_literal(value)}"))
        for column, value in self.neq.items():
            params.append((column, f"neq.{_literal(value)}"))
        for column, values in self.in_.items():
            joined = ",".join(_literal(v) for v in values)
            params.append((column, f"in.({joined})"))
        for column, value in self.gte.items():
            params.append((column, f"gte.{_literal(value)}"))
        if self.order:
            direction = "asc" if self.ascending else "desc"
            params.append(("order", f"{self.order}.{direction}"))
        if self.limit:
            params.append(("limit", str(int(self.limit))))
        return params


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


class SourceGateway:
    """Read-only access to the named record sets of the data store.

    The underlying ``httpx.AsyncClient`` is created on first use and then
    shared by every read for the life of the process.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        service_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url
        self._service_key = service_key
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> Optional[str]:
        return self._base_url if self._base_url is not None else settings.SUPABASE_URL

    @property
    def service_key(self) -> Optional[str]:
        if self._service_key is not None:
            return self._service_key
        return settings.SUPABASE_SERVICE_KEY

    def is_configured(self) -> bool:
        return bool(self.base_url and self.service_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the long-lived async HTTP client, creating one if needed."""
        if self._client is None or self._client.is_closed:
            key = self.service_key or ""
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/rest/v1",
                timeout=self._timeout or settings.SOURCE_TIMEOUT_SECONDS,
                transport=self._transport,
                headers={
                    "apikey": key,
                    "Authorization": f"Bearer {key}",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self):
        """Shut down the HTTP client cleanly."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def fetch(self, table: str, options: Optional[QueryOptions] = None) -> list[dict]:
        """Read one record set; returns ``[]`` on any fault."""
        options = options or QueryOptions()
        if not self.is_configured():
            logger.warning("Source read skipped: data store not configured", table=table)
            return []
        try:
            client = await self._get_client()
            response = await client.get(f"/{table}", params=options.to_params())
            response.raise_for_status()
            body = response.json()
            if not isinstance(body, list):
                raise ValueError(f"expected a list of rows, got {type(body).__name__}")
            return [row for row in body if isinstance(row, dict)]
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Source read failed", table=table, error=str(exc))
            return []


source_gateway = SourceGateway()
