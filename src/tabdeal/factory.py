"""Factories for building configured Tabdeal clients."""

from __future__ import annotations

import logging
from typing import Any

from .client import ClientConfig, TabdealClient
from .settings import BASE_URL, VERSION, Settings
from .transport import AiohttpTransport, ProxyConfig, Transport

logger = logging.getLogger(__name__)


def create_client(
    api_key: str = "",
    api_secret: str = "",
    *,
    base_url: str | None = None,
    version: str | None = None,
    timeout: float = 10.0,
    proxy: dict[str, Any] | None = None,
    transport: Transport | None = None,
) -> TabdealClient:
    """Create a Tabdeal client.

    Args:
        api_key: API key (empty for public endpoints only)
        api_secret: API secret (empty for public endpoints only)
        base_url: Override for the API root URL
        version: Override for the API version segment
        timeout: Total request timeout in seconds for the default transport
        proxy: Proxy configuration (url, username, password)
        transport: Custom transport; replaces the default aiohttp one

    Returns:
        Configured client
    """
    if transport is None:
        proxy_config = None
        if proxy:
            proxy_config = ProxyConfig(
                url=proxy.get("url"),
                username=proxy.get("username"),
                password=proxy.get("password"),
            )
        transport = AiohttpTransport(timeout=timeout, proxy=proxy_config)

    if bool(api_key) != bool(api_secret):
        logger.warning("only one of api_key/api_secret is set; signed endpoints will fail")

    config = ClientConfig(
        base_url=base_url or BASE_URL,
        version=version or VERSION,
        api_key=api_key,
        api_secret=api_secret,
        transport=transport,
    )
    return TabdealClient(config)


def create_client_from_settings(settings: Settings, *, transport: Transport | None = None) -> TabdealClient:
    """Create a client from loaded settings."""
    api_key = ""
    api_secret = ""
    if settings.credentials:
        api_key = settings.credentials.api_key.get_secret_value()
        api_secret = settings.credentials.api_secret.get_secret_value()
    else:
        logger.info("no credentials configured; only public endpoints are available")

    proxy = None
    if settings.proxy.enabled and settings.proxy.url:
        proxy = {
            "url": settings.proxy.url,
            "username": settings.proxy.username,
            "password": settings.proxy.password.get_secret_value() if settings.proxy.password else None,
        }

    return create_client(
        api_key,
        api_secret,
        base_url=settings.base_url,
        version=settings.version,
        timeout=settings.timeout,
        proxy=proxy,
        transport=transport,
    )
