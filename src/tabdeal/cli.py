"""Typer-based CLI for quick Tabdeal queries."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .client import TabdealClient
from .errors import APIError, TransportError
from .params import OpenOrdersParams, OrderBookParams, RecentTradesParams, WalletParams


# Import with local function to keep patch points in this module
def _load_settings(config_path: Optional[Path] = None):
    from .config import load_settings
    return load_settings(config_path)

def _create_client(settings) -> TabdealClient:
    from .factory import create_client_from_settings
    return create_client_from_settings(settings)

def _configure_logging(log_dir: Path | None = None, level: str | None = None):
    from .logging import configure_logging
    return configure_logging(log_dir, level=level)

app = typer.Typer(help="Tabdeal exchange API CLI")
console = Console()
logger = logging.getLogger(__name__)


def run_cli(argv: list[str] | None = None) -> None:
    """Run CLI with optional argv parameter."""
    _configure_logging()
    app(argv)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Tabdeal exchange API CLI"""
    if verbose:
        _configure_logging(level="DEBUG")


def _run(coro, action: str) -> None:
    try:
        asyncio.run(coro)
    except APIError as e:
        logger.error("Failed to %s: status=%s code=%s", action, e.status_code, e.code)
        console.print(f"[red]Error:[/red] {e} (HTTP {e.status_code})")
        raise typer.Exit(1)
    except TransportError as e:
        logger.error("Failed to %s while %s: %s", action, e.operation, e)
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.error("Failed to %s: %s", action, e, exc_info=True)
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def ping(
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Check that the API is reachable."""
    _run(_ping_async(config), "ping")


async def _ping_async(config: Optional[Path]) -> None:
    async with _create_client(_load_settings(config)) as client:
        await client.ping()
    console.print("[green]✓ Tabdeal API is reachable[/green]")


@app.command()
def server_time(
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show the server clock in Unix milliseconds."""
    _run(_server_time_async(config), "fetch server time")


async def _server_time_async(config: Optional[Path]) -> None:
    async with _create_client(_load_settings(config)) as client:
        result = await client.get_server_time()
    console.print(Panel.fit(f"Server time: [bold]{result.server_time}[/bold]", title="Server Time"))


@app.command()
def markets(
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """List markets with their status and assets."""
    _run(_markets_async(config), "fetch market information")


async def _markets_async(config: Optional[Path]) -> None:
    async with _create_client(_load_settings(config)) as client:
        info = await client.get_market_information()

    if not info:
        console.print("[yellow]No markets found[/yellow]")
        return

    table = Table(title="Markets")
    table.add_column("Symbol", style="cyan")
    table.add_column("Tabdeal Symbol", style="magenta")
    table.add_column("Status", style="yellow")
    table.add_column("Base", style="green")
    table.add_column("Quote", style="blue")
    for market in info:
        table.add_row(
            market.symbol,
            market.tabdeal_symbol,
            market.status,
            market.base_asset,
            market.quote_asset,
        )
    console.print(table)
    console.print(f"\n[bold]Total markets:[/bold] {len(info)}")


@app.command()
def depth(
    symbol: str = typer.Argument(..., help="Market symbol, e.g. BTCIRT"),
    limit: int = typer.Option(10, help="Number of price levels"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show the order book for a market."""
    _run(_depth_async(symbol, limit, config), "fetch order book")


async def _depth_async(symbol: str, limit: int, config: Optional[Path]) -> None:
    async with _create_client(_load_settings(config)) as client:
        book = await client.get_order_book(OrderBookParams(symbol=symbol.upper(), limit=limit))

    table = Table(title=f"Order Book {symbol.upper()}")
    table.add_column("Bid Qty", style="green")
    table.add_column("Bid", style="green")
    table.add_column("Ask", style="red")
    table.add_column("Ask Qty", style="red")
    for i in range(max(len(book.bids), len(book.asks))):
        bid = book.bids[i] if i < len(book.bids) else ["", ""]
        ask = book.asks[i] if i < len(book.asks) else ["", ""]
        table.add_row(bid[1], bid[0], ask[0], ask[1])
    console.print(table)


@app.command()
def trades(
    symbol: str = typer.Argument(..., help="Market symbol, e.g. BTCIRT"),
    limit: int = typer.Option(20, help="Number of trades"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show recent public trades for a market."""
    _run(_trades_async(symbol, limit, config), "fetch recent trades")


async def _trades_async(symbol: str, limit: int, config: Optional[Path]) -> None:
    async with _create_client(_load_settings(config)) as client:
        result = await client.get_recent_trades(RecentTradesParams(symbol=symbol.upper(), limit=limit))

    if not result:
        console.print(f"[yellow]No trades found for {symbol.upper()}[/yellow]")
        return

    table = Table(title=f"Recent Trades {symbol.upper()}")
    table.add_column("ID", style="dim")
    table.add_column("Price", style="yellow")
    table.add_column("Qty", style="magenta")
    table.add_column("Side", style="cyan")
    table.add_column("Time", style="dim")
    for trade in result:
        side = "[red]SELL[/red]" if trade.is_buyer_maker else "[green]BUY[/green]"
        table.add_row(str(trade.id), trade.price, trade.qty, side, str(trade.time))
    console.print(table)


@app.command()
def wallets(
    asset: str = typer.Option("", help="Only show this asset"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show funding wallet balances (requires credentials)."""
    _run(_wallets_async(asset, config), "fetch wallets")


async def _wallets_async(asset: str, config: Optional[Path]) -> None:
    async with _create_client(_load_settings(config)) as client:
        result = await client.get_wallets(WalletParams(asset=asset.upper()))

    if not result:
        console.print("[yellow]No balances found[/yellow]")
        return

    table = Table(title="Wallets")
    table.add_column("Asset", style="cyan")
    table.add_column("Free", style="green")
    table.add_column("Freeze", style="red")
    for wallet in result:
        table.add_row(wallet.asset, wallet.free, wallet.freeze)
    console.print(table)


@app.command()
def open_orders(
    symbol: str = typer.Argument("", help="Market symbol (all markets when omitted)"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """List open orders (requires credentials)."""
    _run(_open_orders_async(symbol, config), "fetch open orders")


async def _open_orders_async(symbol: str, config: Optional[Path]) -> None:
    async with _create_client(_load_settings(config)) as client:
        orders = await client.get_open_orders(OpenOrdersParams(symbol=symbol.upper()))

    if not orders:
        console.print("[yellow]No open orders[/yellow]")
        return

    table = Table(title="Open Orders")
    table.add_column("Order ID", style="cyan")
    table.add_column("Symbol", style="green")
    table.add_column("Side", style="magenta")
    table.add_column("Type", style="blue")
    table.add_column("Price", style="yellow")
    table.add_column("Orig Qty", style="white")
    table.add_column("Executed", style="white")
    table.add_column("Status", style="dim")
    for order in orders:
        table.add_row(
            str(order.order_id),
            order.symbol,
            order.side,
            order.type,
            order.price,
            order.orig_qty,
            order.executed_qty,
            order.status,
        )
    console.print(table)
