"""Pytest configuration and fixtures."""

import json
from unittest.mock import AsyncMock

import pytest

from tabdeal.client import ClientConfig, TabdealClient
from tabdeal.transport import TransportResponse


def make_transport(status=200, json_data=None, body=None):
    """Create a mock transport returning one canned response."""
    if body is None:
        body = json.dumps(json_data if json_data is not None else {}).encode()
    transport = AsyncMock()
    transport.request = AsyncMock(return_value=TransportResponse(status, body))
    transport.close = AsyncMock(return_value=None)
    return transport


@pytest.fixture
def api_key():
    """Test API key."""
    return "test_api_key_123456"


@pytest.fixture
def api_secret():
    """Test API secret."""
    return "test_api_secret_789012"


@pytest.fixture
def make_client(api_key, api_secret):
    """Build a client around a mock transport."""

    def _make(transport, *, key=None, secret=None):
        config = ClientConfig(
            base_url="https://api1.tabdeal.org",
            api_key=api_key if key is None else key,
            api_secret=api_secret if secret is None else secret,
            transport=transport,
        )
        return TabdealClient(config)

    return _make


@pytest.fixture
def sample_order_response():
    """Sample order response data."""
    return {
        "symbol": "BTCIRT",
        "tabdealSymbol": "BTC_IRT",
        "orderId": 123456789,
        "orderListId": -1,
        "clientOrderId": "order-001",
        "transactTime": 1700000000123,
        "price": "950000000",
        "origQty": "0.01",
        "executedQty": "0.01",
        "cummulativeQuoteQty": "9500000",
        "status": "FILLED",
        "type": "LIMIT",
        "side": "BUY",
        "fills": [
            {
                "price": "950000000",
                "qty": "0.01",
                "commission": "0.00001",
                "commissionAsset": "BTC",
                "tradeId": 42,
            }
        ],
    }


@pytest.fixture
def sample_wallets_response():
    """Sample funding wallet response data."""
    return [
        {"asset": "BTC", "free": "0.5", "freeze": "0.1"},
        {"asset": "USDT", "free": "1000.0", "freeze": "0"},
    ]
