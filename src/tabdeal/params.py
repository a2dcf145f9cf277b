"""Request parameter schemas.

Each parameter type lists its wire fields explicitly through
``param_fields()``. The order returned there is the order the fields are
encoded and signed in.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .encoding import ParamField


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class OrderType(str, Enum):
    LIMIT = "LIMIT"
    MARKET = "MARKET"
    STOP_LOSS_LIMIT = "STOP_LOSS_LIMIT"


@dataclass(kw_only=True)
class SymbolParams:
    """Market selector shared by most endpoints.

    Tabdeal accepts either ``symbol`` (compact form, e.g. ``BTCIRT``) or
    ``tabdealSymbol`` (underscore form, e.g. ``BTC_IRT``). When both are set
    the server uses ``symbol``.
    """

    symbol: str = ""
    tabdeal_symbol: str = ""

    def param_fields(self) -> list[ParamField]:
        return [
            ("symbol", self.symbol, True),
            ("tabdealSymbol", self.tabdeal_symbol, True),
        ]


@dataclass(kw_only=True)
class OrderBookParams(SymbolParams):
    limit: int = 0

    def param_fields(self) -> list[ParamField]:
        return [*SymbolParams.param_fields(self), ("limit", self.limit, True)]


@dataclass(kw_only=True)
class RecentTradesParams(SymbolParams):
    limit: int = 0

    def param_fields(self) -> list[ParamField]:
        return [*SymbolParams.param_fields(self), ("limit", self.limit, True)]


@dataclass(kw_only=True)
class WalletParams:
    """Restrict the funding wallet listing to one asset, or list all when empty."""

    asset: str = ""

    def param_fields(self) -> list[ParamField]:
        return [("asset", self.asset, True)]


@dataclass(kw_only=True)
class CreateOrderParams(SymbolParams):
    """New spot order.

    LIMIT orders need price and quantity, MARKET orders quantity only, and
    stop orders a stop price. Quantity is always sent.
    """

    side: OrderSide | str
    type: OrderType | str
    quantity: float
    new_client_order_id: str = ""
    price: float = 0.0
    stop_price: float = 0.0

    def param_fields(self) -> list[ParamField]:
        return [
            *SymbolParams.param_fields(self),
            ("side", self.side, False),
            ("type", self.type, False),
            ("quantity", self.quantity, False),
            ("newClientOrderId", self.new_client_order_id, True),
            ("price", self.price, True),
            ("stopPrice", self.stop_price, True),
        ]


@dataclass(kw_only=True)
class CancelOrderParams(SymbolParams):
    """Cancel one order by ``order_id`` or ``orig_client_order_id``."""

    order_id: int = 0
    orig_client_order_id: str = ""

    def param_fields(self) -> list[ParamField]:
        return [
            *SymbolParams.param_fields(self),
            ("orderId", self.order_id, True),
            ("origClientOrderId", self.orig_client_order_id, True),
        ]


@dataclass(kw_only=True)
class CancelOrderBulkParams(SymbolParams):
    pass


@dataclass(kw_only=True)
class OpenOrdersParams(SymbolParams):
    pass


@dataclass(kw_only=True)
class OrderStatusParams(SymbolParams):
    order_id: int = 0
    orig_client_order_id: str = ""

    def param_fields(self) -> list[ParamField]:
        return [
            *SymbolParams.param_fields(self),
            ("orderId", self.order_id, True),
            ("origClientOrderId", self.orig_client_order_id, True),
        ]


@dataclass(kw_only=True)
class OrdersHistoryParams(SymbolParams):
    """Historical order filter; times are Unix milliseconds."""

    start_time: int = 0
    end_time: int = 0
    limit: int = 0

    def param_fields(self) -> list[ParamField]:
        return [
            *SymbolParams.param_fields(self),
            ("startTime", self.start_time, True),
            ("endTime", self.end_time, True),
            ("limit", self.limit, True),
        ]


@dataclass(kw_only=True)
class UserTradesParams(OrdersHistoryParams):
    order_id: int = 0

    def param_fields(self) -> list[ParamField]:
        return [*OrdersHistoryParams.param_fields(self), ("orderId", self.order_id, True)]
