# Simple CLI for Broker Sim
import asyncio
import json
from typing import Optional

import click

from app.main import BrokerageApplication
from core.config.settings import Settings, SimulationMode
from core.trading.models import OrderKind
from core.utils.exceptions import BrokerSimException
from services.market_simulation import MOVEMENT_CONFIGS


def _build_app(seed: Optional[int] = None, mode: Optional[str] = None) -> BrokerageApplication:
    settings = Settings()
    updates = {}
    if seed is not None:
        updates["simulation_seed"] = seed
    if mode is not None:
        updates["market"] = settings.market.model_copy(update={"mode": SimulationMode(mode)})
    return BrokerageApplication(settings.model_copy(update=updates))


def _seeded_app(seed: Optional[int]) -> BrokerageApplication:
    """Application with default state seeded and the clock left stopped."""
    app = _build_app(seed)
    asyncio.run(app.startup(seed=True, start_clock=False))
    return app


def _echo_json(payload):
    click.echo(json.dumps(payload, indent=2, default=str))


@click.group()
def cli():
    """Broker Sim CLI"""
    pass


@cli.command()
@click.option("--duration", type=float, default=None, help="Seconds to run before stopping")
@click.option("--mode", type=click.Choice([m.value for m in SimulationMode]), default=None)
@click.option("--seed", type=int, default=None, help="Seed for the simulation RNG")
def run(duration, mode, seed):
    """Seed default state and run the market clock"""
    click.echo("Starting Broker Sim...")
    app = _build_app(seed, mode)
    asyncio.run(app.run(duration))

    container = app.container
    _echo_json({
        "status": container.market_clock().status().model_dump(mode="json"),
        "quotes": [q.model_dump(mode="json") for q in container.asset_registry().all()],
    })


@cli.command()
@click.argument("kind", type=click.Choice([k.value for k in OrderKind]))
@click.argument("account_id")
@click.argument("symbol")
@click.argument("quantity", type=int)
@click.option("--seed", type=int, default=None)
def trade(kind, account_id, symbol, quantity, seed):
    """Execute one order against freshly seeded state"""
    app = _seeded_app(seed)
    limits = app.settings.order_limits
    if not limits.min_order_size <= quantity <= limits.max_order_size:
        raise click.BadParameter(
            f"quantity must be between {limits.min_order_size} and {limits.max_order_size}",
            param_hint="QUANTITY",
        )

    container = app.container
    try:
        transaction = container.order_engine().execute(kind, account_id, symbol.upper(), quantity)
    except BrokerSimException as e:
        raise click.ClickException(e.message)

    _echo_json({
        "transaction": transaction.model_dump(mode="json"),
        "account": container.account_store().get(account_id).model_dump(mode="json"),
        "portfolio": container.portfolio_ledger().get(account_id).model_dump(mode="json"),
    })


@cli.command()
@click.argument("movement", type=click.Choice([m.value for m in MOVEMENT_CONFIGS]))
@click.option("--seed", type=int, default=None)
def event(movement, seed):
    """Apply a market event and print the resulting quotes"""
    app = _seeded_app(seed)
    quotes = app.container.market_clock().run_event(movement)
    _echo_json([q.model_dump(mode="json") for q in quotes])


@cli.command()
@click.argument("account_id")
@click.option("--seed", type=int, default=None)
def risk(account_id, seed):
    """Print a risk profile and recommendations for an account"""
    app = _seeded_app(seed)
    engine = app.container.risk_engine()
    try:
        profile = engine.analyze_risk(account_id)
        recommendations = engine.recommend(account_id)
    except BrokerSimException as e:
        raise click.ClickException(e.message)

    _echo_json({
        "profile": profile.model_dump(mode="json"),
        "recommendations": [r.model_dump(mode="json") for r in recommendations],
    })


@cli.command()
@click.argument("symbol")
@click.option("--seed", type=int, default=None)
def technical(symbol, seed):
    """Print the moving-average/RSI signal for an asset"""
    app = _seeded_app(seed)
    try:
        signal = app.container.risk_engine().analyze_technical(symbol.upper())
    except BrokerSimException as e:
        raise click.ClickException(e.message)
    _echo_json(signal.model_dump(mode="json"))


if __name__ == "__main__":
    cli()
