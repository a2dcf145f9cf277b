"""HTTP transport used by the client to execute requests."""

from __future__ import annotations

import logging
from typing import Protocol

import aiohttp

from .errors import (
    CREATING_REQUEST,
    READING_RESPONSE,
    SENDING_REQUEST,
    TransportError,
)

logger = logging.getLogger(__name__)


class ProxyConfig:
    """HTTP proxy configuration."""

    def __init__(self, url: str | None = None, username: str | None = None, password: str | None = None):
        self.url = url
        self.username = username
        self.password = password

    @property
    def proxy_url(self) -> str | None:
        if not self.url:
            return None
        if self.username and self.password:
            protocol = self.url.split("://")[0] if "://" in self.url else "http"
            rest = self.url.split("://")[1] if "://" in self.url else self.url
            return f"{protocol}://{self.username}:{self.password}@{rest}"
        return self.url


class TransportResponse:
    """Status code and raw body of a completed HTTP exchange."""

    def __init__(self, status: int, body: bytes):
        self.status = status
        self.body = body

    def __repr__(self) -> str:
        return f"TransportResponse(status={self.status}, body={len(self.body)} bytes)"


class Transport(Protocol):
    """Protocol for executing a single HTTP request."""

    async def request(self, method: str, url: str, *, headers: dict[str, str]) -> TransportResponse:
        """Execute one request and return its status and body.

        Implementations raise TransportError labelled with the phase that
        failed (creating request, sending request, reading response).
        """
        ...

    async def close(self) -> None:
        """Release pooled connections."""
        ...


class AiohttpTransport:
    """Transport backed by a lazily created aiohttp session."""

    def __init__(self, *, timeout: float = 10.0, proxy: ProxyConfig | None = None):
        self.timeout = timeout
        self.proxy = proxy or ProxyConfig()
        self.session: aiohttp.ClientSession | None = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            connector = aiohttp.TCPConnector()
            self.session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self.session

    async def request(self, method: str, url: str, *, headers: dict[str, str]) -> TransportResponse:
        session = await self._ensure_session()

        try:
            async with session.request(
                method, url, headers=headers, proxy=self.proxy.proxy_url
            ) as resp:
                try:
                    body = await resp.read()
                except (aiohttp.ClientError, TimeoutError) as exc:
                    raise TransportError(
                        "failed to read response body", operation=READING_RESPONSE, cause=exc
                    ) from exc
                return TransportResponse(resp.status, body)
        except aiohttp.InvalidURL as exc:
            raise TransportError(
                "failed to create request", operation=CREATING_REQUEST, cause=exc
            ) from exc
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise TransportError(
                "failed to send request", operation=SENDING_REQUEST, cause=exc
            ) from exc
        except ValueError as exc:
            # aiohttp validates method, headers and URL with plain ValueError
            raise TransportError(
                "failed to create request", operation=CREATING_REQUEST, cause=exc
            ) from exc

    async def close(self) -> None:
        """Close connections."""
        if self.session:
            await self.session.close()
            self.session = None
