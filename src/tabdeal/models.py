"""Response schemas decoded from Tabdeal JSON payloads.

Amounts and prices are kept as strings, as Tabdeal sends them, so no
precision is lost. Missing keys fall back to defaults and unknown keys are
ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TabdealModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class ServerTime(TabdealModel):
    server_time: int = 0


class Filter(TabdealModel):
    """Market rule; which fields are set depends on ``filter_type``."""

    filter_type: str = ""

    # PRICE_FILTER
    min_price: str = ""
    max_price: str = ""
    tick_size: str = ""

    # PERCENT_PRICE
    multiplier_up: float = 0.0
    multiplier_down: float = 0.0
    avg_price_mins: int = 0

    # LOT_SIZE / MARKET_LOT_SIZE
    min_qty: str = ""
    max_qty: str = ""
    step_size: str = ""

    # MIN_NOTIONAL
    min_notional: str = ""
    apply_to_market: bool = False


class MarketInformation(TabdealModel):
    symbol: str = ""
    tabdeal_symbol: str = ""
    status: str = ""
    base_asset: str = ""
    base_asset_precision: str = ""
    quote_asset: str = ""
    quote_asset_precision: str = ""
    base_commission_precision: str = ""
    quote_commission_precision: str = ""
    order_types: list[str] = Field(default_factory=list)
    iceberg_allowed: bool = False
    oco_allowed: bool = False
    quote_order_qty_market_allowed: bool = False
    allow_trailing_stop: bool = False
    is_spot_trading_allowed: bool = False
    is_margin_trading_allowed: bool = False
    filters: list[Filter] = Field(default_factory=list)
    permissions: list[str] = Field(default_factory=list)


class OrderBook(TabdealModel):
    """Aggregated depth; each level is a ``[price, quantity]`` pair, best first."""

    asks: list[list[str]] = Field(default_factory=list)
    bids: list[list[str]] = Field(default_factory=list)


class Trade(TabdealModel):
    id: int = 0
    price: str = ""
    qty: str = ""
    quote_qty: str = ""
    time: int = 0
    is_buyer_maker: bool = False


class Wallet(TabdealModel):
    asset: str = ""
    free: str = ""
    freeze: str = ""


class BaseOrderResponse(TabdealModel):
    symbol: str = ""
    tabdeal_symbol: str = ""
    order_id: int = 0
    order_list_id: int = 0
    client_order_id: str = ""
    transact_time: int = 0
    price: str = ""
    orig_qty: str = ""
    executed_qty: str = ""
    cummulative_quote_qty: str = ""
    cumulative_quote_qty: str = ""
    status: str = ""
    type: str = ""
    side: str = ""
    stop_price: str = ""
    update_time: int = 0
    is_working: bool = False
    is_stop_order_triggered: bool = False


class Fill(TabdealModel):
    price: str = ""
    qty: str = ""
    commission: str = ""
    commission_asset: str = ""
    trade_id: int = 0


class CreateOrderResponse(BaseOrderResponse):
    fills: list[Fill] = Field(default_factory=list)


class CancelOrderResponse(BaseOrderResponse):
    pass


class OrderStatusResponse(BaseOrderResponse):
    fee: str = ""


class UserTrade(TabdealModel):
    symbol: str = ""
    tabdeal_symbol: str = ""
    id: int = 0
    order_id: int = 0
    price: str = ""
    qty: str = ""
    quote_qty: str = ""
    commission: str = ""
    commission_asset: str = ""
    time: int = 0
    is_buyer: bool = False
    is_maker: bool = False
