"""
In-App Messaging CLI

Command-line interface for in-app messaging administration.

Commands:
- sync: Fetch every provider's messages into the cache
- clear: Empty every provider's cache slot
- show-cache: List cached messages per provider
- record: Evaluate (or publish) an analytics record
- worker: Relay analytics records from Redis Streams into the engine

The cache backend is selected by INAPP_STORAGE; with the default
"memory" backend nothing survives between commands.
"""

import asyncio
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from basecore.logging import setup_logging
from basecore.settings import get_settings

from messaging_inapp.contracts.envelope import AnalyticsEvent
from messaging_inapp.engine import InAppMessaging
from messaging_inapp.providers.campaigns import PROVIDER_NAME as CAMPAIGNS
from messaging_inapp.storage import MemoryStorage, RedisStorage

app = typer.Typer(
    name="messaging-inapp",
    help="In-App Messaging Engine CLI",
)

console = Console()


def get_redis():
    """Get Redis client."""
    from basecore.redis import get_redis_client
    return get_redis_client()


def get_engine(listen: bool = False) -> InAppMessaging:
    """Build an engine from settings."""
    settings = get_settings()

    if settings.INAPP_STORAGE == "redis":
        storage = RedisStorage(get_redis(), prefix=settings.INAPP_STORAGE_PREFIX)
    else:
        storage = MemoryStorage()

    engine = InAppMessaging(storage=storage)
    engine.configure({
        "listenForAnalyticsEvents": listen,
        CAMPAIGNS: {"endpoint": settings.INAPP_CAMPAIGNS_ENDPOINT},
    })
    return engine


def parse_pairs(values: list[str], option: str) -> dict[str, str]:
    """Parse repeated KEY=VALUE options."""
    pairs = {}
    for value in values:
        key, sep, item = value.partition("=")
        if not sep or not key:
            rprint(f"[red]Invalid {option} '{value}', expected KEY=VALUE[/red]")
            raise typer.Exit(1)
        pairs[key] = item
    return pairs


def describe(message) -> str:
    if isinstance(message, dict) and "id" in message:
        return str(message["id"])
    return repr(message)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    setup_logging(level="DEBUG" if verbose else None)


@app.command()
def sync():
    """Fetch every provider's messages into the cache."""
    engine = get_engine()

    async def run():
        try:
            await engine.sync_messages()
        finally:
            await engine.close()

    try:
        asyncio.run(run())
    except Exception as e:
        rprint(f"[red]Sync failed: {e}[/red]")
        raise typer.Exit(1)

    names = [pluggable.get_provider_name() for pluggable in engine.registry]
    rprint(f"[green]Synced {len(names)} provider(s): {', '.join(names)}[/green]")


@app.command()
def clear():
    """Empty every provider's cache slot."""
    engine = get_engine()

    async def run():
        try:
            await engine.clear_messages()
        finally:
            await engine.close()

    asyncio.run(run())
    rprint("[green]Cleared in-app messages[/green]")


@app.command("show-cache")
def show_cache():
    """List cached messages per provider."""
    engine = get_engine()

    async def run():
        try:
            return [
                (pluggable.get_provider_name(), await engine.cache.read(pluggable.get_provider_name()))
                for pluggable in engine.registry
            ]
        finally:
            await engine.close()

    slots = asyncio.run(run())

    table = Table(title="In-App Message Cache")
    table.add_column("Provider", style="cyan")
    table.add_column("Messages", justify="right")
    table.add_column("IDs")

    for name, messages in slots:
        if messages is None:
            table.add_row(name, "[red]unreadable[/red]", "")
            continue
        table.add_row(name, str(len(messages)), ", ".join(describe(m) for m in messages))

    console.print(table)


@app.command()
def record(
    name: str = typer.Argument(..., help="Analytics event name"),
    attr: list[str] = typer.Option([], "--attr", "-a", help="Attribute KEY=VALUE (repeatable)"),
    metric: list[str] = typer.Option([], "--metric", "-m", help="Metric KEY=NUMBER (repeatable)"),
    publish: bool = typer.Option(False, help="Publish to the analytics stream instead of evaluating locally"),
):
    """
    Evaluate an analytics record against the cached messages.

    With --publish the record is written to the analytics stream for
    a running worker to evaluate.
    """
    attributes = parse_pairs(attr, "--attr")
    try:
        metrics = {key: float(value) for key, value in parse_pairs(metric, "--metric").items()}
    except ValueError:
        rprint("[red]Metric values must be numbers[/red]")
        raise typer.Exit(1)

    if publish:
        from messaging_inapp.streams.producer import AnalyticsStreamProducer

        producer = AnalyticsStreamProducer(get_redis(), stream_name=get_settings().INAPP_ANALYTICS_STREAM)
        msg_id = asyncio.run(producer.publish_record(name, attributes, metrics))
        rprint(f"[green]Published record '{name}' ({msg_id})[/green]")
        return

    engine = get_engine()

    async def run():
        try:
            return await engine.dispatch_event(AnalyticsEvent.record(name, attributes, metrics))
        finally:
            await engine.close()

    try:
        matched = asyncio.run(run())
    except Exception as e:
        rprint(f"[red]Dispatch failed: {e}[/red]")
        raise typer.Exit(1)

    if not matched:
        rprint(f"[yellow]No messages matched '{name}'[/yellow]")
        return

    table = Table(title=f"Messages matched by '{name}'")
    table.add_column("#", justify="right")
    table.add_column("Message")
    for index, message in enumerate(matched, start=1):
        table.add_row(str(index), describe(message))
    console.print(table)


@app.command()
def worker(
    consumer_name: Optional[str] = typer.Option(None, help="Consumer name (default: host + pid)"),
):
    """Relay analytics records from Redis Streams into the engine."""
    from messaging_inapp.worker import main as run_worker

    engine = get_engine(listen=True)
    asyncio.run(run_worker(engine, consumer_name))


if __name__ == "__main__":
    app()
