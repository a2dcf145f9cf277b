"""Tabdeal REST client: routing, signing, dispatch and response handling."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping

import aiohttp
from pydantic import TypeAdapter, ValidationError

from . import __version__
from .encoding import SupportsParams, encode_query, param_record
from .errors import (
    CREATING_REQUEST,
    PARSING_RESPONSE,
    PREPARING_REQUEST,
    SENDING_REQUEST,
    AuthenticationError,
    EncodingError,
    TabdealError,
    TransportError,
    classify_error,
)
from .models import (
    BaseOrderResponse,
    CancelOrderResponse,
    CreateOrderResponse,
    MarketInformation,
    OrderBook,
    OrderStatusResponse,
    ServerTime,
    Trade,
    UserTrade,
    Wallet,
)
from .params import (
    CancelOrderBulkParams,
    CancelOrderParams,
    CreateOrderParams,
    OpenOrdersParams,
    OrderBookParams,
    OrdersHistoryParams,
    OrderStatusParams,
    RecentTradesParams,
    UserTradesParams,
    WalletParams,
)
from .settings import BASE_URL, VERSION
from .signing import current_timestamp_ms, sign_params
from .transport import AiohttpTransport, Transport

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-MBX-APIKEY"
USER_AGENT = f"tabdeal-python/{__version__}"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Immutable client configuration.

    ``api_key`` and ``api_secret`` are either both empty (public endpoints
    only) or both set. A half-configured pair is not rejected here; it fails
    the authentication check of the first signed call.
    """

    base_url: str = BASE_URL
    version: str = VERSION
    api_key: str = ""
    api_secret: str = ""
    transport: Transport | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))

    def __repr__(self) -> str:
        return (
            f"ClientConfig(base_url={self.base_url!r}, version={self.version!r}, "
            f"authenticated={bool(self.api_key and self.api_secret)})"
        )


@lru_cache(maxsize=None)
def _adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


class TabdealClient:
    """Async client for the Tabdeal spot API.

    Public market-data endpoints work without credentials. Account and order
    endpoints are signed with the API secret and carry the API key header.
    """

    def __init__(self, config: ClientConfig | None = None):
        self.config = config or ClientConfig()
        self.transport: Transport = self.config.transport or AiohttpTransport()

    async def __aenter__(self) -> "TabdealClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def assert_auth(self) -> None:
        """Check that both credentials are present.

        Raises:
            AuthenticationError: If the API key or secret is empty
        """
        if not self.config.api_key:
            raise AuthenticationError("api key is empty")
        if not self.config.api_secret:
            raise AuthenticationError("api secret is empty")

    def create_api_uri(self, method: str, endpoint: str) -> str:
        """Build the full URL for an endpoint.

        GET requests go through the read path (``/r/api/{version}``), which
        the server serves from its cached read replicas. Everything else uses
        the regular API path.
        """
        if method.upper() == "GET":
            return f"{self.config.base_url}/r/api/{self.config.version}{endpoint}"
        return f"{self.config.base_url}/api/{self.config.version}{endpoint}"

    def _get_headers(self, auth: bool) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if auth:
            self.assert_auth()
            headers[API_KEY_HEADER] = self.config.api_key
        return headers

    async def request(
        self,
        method: str,
        url: str,
        auth: bool,
        params: SupportsParams | Mapping[str, Any] | None = None,
        result_type: Any = None,
    ) -> Any:
        """Send a request to a fully built URL and decode the response.

        Parameters are always sent in the query string, signed first when
        ``auth`` is set.

        Args:
            method: HTTP method (GET, POST, DELETE)
            url: Full URL without query string
            auth: Whether the call must be signed and carry the API key
            params: Parameter object, plain mapping, or None
            result_type: Type to validate a 2xx body into (optional)

        Returns:
            The decoded result, or None when no result type was given

        Raises:
            TransportError: If parameters, the exchange, or the body fail
            AuthenticationError: If credentials are missing on a signed call
            APIError: If the server answers with a non-2xx status
        """
        method = method.upper()

        if params is not None:
            try:
                record = param_record(params)
                if auth:
                    record = sign_params(record, self.config.api_secret, current_timestamp_ms())
                query = encode_query(record)
            except EncodingError as exc:
                raise TransportError(
                    "failed to convert parameters to URL query",
                    operation=PREPARING_REQUEST,
                    cause=exc,
                ) from exc
            if query:
                url = f"{url}?{query}"

        headers = self._get_headers(auth)

        logger.debug("%s %s auth=%s", method, url.split("?", 1)[0], auth)

        try:
            response = await self.transport.request(method, url, headers=headers)
        except TabdealError:
            raise
        except (aiohttp.ClientError, OSError) as exc:
            raise TransportError(
                "failed to send request", operation=SENDING_REQUEST, cause=exc
            ) from exc
        except ValueError as exc:
            raise TransportError(
                "failed to create request", operation=CREATING_REQUEST, cause=exc
            ) from exc

        if not 200 <= response.status < 300:
            error = classify_error(response.status, response.body)
            logger.warning(
                "%s %s failed: status=%s code=%s message=%s",
                method,
                url.split("?", 1)[0],
                error.status_code,
                error.code,
                error.message,
            )
            raise error

        if result_type is None:
            return None

        try:
            return _adapter(result_type).validate_json(response.body)
        except ValidationError as exc:
            raise TransportError(
                "failed to unmarshal response", operation=PARSING_RESPONSE, cause=exc
            ) from exc

    async def api_request(
        self,
        method: str,
        endpoint: str,
        auth: bool,
        params: SupportsParams | Mapping[str, Any] | None = None,
        result_type: Any = None,
    ) -> Any:
        """Route ``endpoint`` through ``create_api_uri`` and call ``request``."""
        url = self.create_api_uri(method, endpoint)
        return await self.request(method, url, auth, params, result_type)

    async def ping(self) -> bool:
        await self.api_request("GET", "/ping", False)
        return True

    async def get_server_time(self) -> ServerTime:
        return await self.api_request("GET", "/time", False, None, ServerTime)

    async def get_market_information(self) -> list[MarketInformation]:
        """Fetch symbol configuration, precision rules and filters for every market."""
        return await self.api_request("GET", "/exchangeInfo", False, None, list[MarketInformation])

    async def get_order_book(self, params: OrderBookParams) -> OrderBook:
        return await self.api_request("GET", "/depth", False, params, OrderBook)

    async def get_recent_trades(self, params: RecentTradesParams) -> list[Trade]:
        """Fetch the most recent public trades for a market, newest first."""
        return await self.api_request("GET", "/trades", False, params, list[Trade])

    async def get_wallets(self, params: WalletParams | None = None) -> list[Wallet]:
        """Fetch funding wallet balances (free and frozen) for the account."""
        return await self.api_request(
            "GET", "/get-funding-asset", True, params or WalletParams(), list[Wallet]
        )

    async def create_order(self, params: CreateOrderParams) -> CreateOrderResponse:
        """Submit a new spot order.

        Price and lot constraints are not checked locally; the server's
        rejection comes back as an APIError.
        """
        return await self.api_request("POST", "/order", True, params, CreateOrderResponse)

    async def cancel_order(self, params: CancelOrderParams) -> CancelOrderResponse:
        return await self.api_request("DELETE", "/order", True, params, CancelOrderResponse)

    async def cancel_order_bulk(
        self, params: CancelOrderBulkParams | None = None
    ) -> list[CancelOrderResponse]:
        """Cancel every open order, optionally limited to one market."""
        return await self.api_request(
            "DELETE",
            "/openOrders",
            True,
            params or CancelOrderBulkParams(),
            list[CancelOrderResponse],
        )

    async def get_orders_history(
        self, params: OrdersHistoryParams | None = None
    ) -> list[BaseOrderResponse]:
        return await self.api_request(
            "GET", "/allOrders", True, params or OrdersHistoryParams(), list[BaseOrderResponse]
        )

    async def get_open_orders(self, params: OpenOrdersParams | None = None) -> list[BaseOrderResponse]:
        return await self.api_request(
            "GET", "/openOrders", True, params or OpenOrdersParams(), list[BaseOrderResponse]
        )

    async def get_order_status(self, params: OrderStatusParams) -> OrderStatusResponse:
        return await self.api_request("GET", "/order", True, params, OrderStatusResponse)

    async def get_user_trades(self, params: UserTradesParams | None = None) -> list[UserTrade]:
        return await self.api_request(
            "GET", "/myTrades", True, params or UserTradesParams(), list[UserTrade]
        )

    async def close(self) -> None:
        """Close connections."""
        await self.transport.close()
