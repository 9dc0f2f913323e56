from __future__ import annotations

import asyncio
import logging
import signal
from typing import Annotated

import typer
from rich.console import Console

from huereport.core import AggregationContext, run_monitor
from huereport.models import AlertKind, BridgeSnapshot, MonitorEvents

from .common import build_context, load_settings_or_exit

logger = logging.getLogger(__name__)


class EventPrinter:
    def __init__(self, console: Console) -> None:
        self.console = console

    def __call__(self, events: MonitorEvents, snapshots: list[BridgeSnapshot]) -> None:
        console = self.console
        stamp = events.polled_at.strftime("%H:%M:%S")

        if events.priming:
            lights = sum(len(snapshot.lights) for snapshot in snapshots)
            console.print(
                f"[dim]{stamp}[/dim] Watching {lights} lights on "
                f"{len(snapshots)} bridge(s)"
            )

        for change in events.light_changes:
            console.print(
                f"[dim]{stamp}[/dim] [bold]{change.light_name}[/bold] "
                f"({change.bridge_name}): {', '.join(change.changes)}"
            )
        for motion in events.motion:
            console.print(
                f"[dim]{stamp}[/dim] [magenta]Motion[/magenta] "
                f"{motion.device_name} ({motion.bridge_name})"
            )
        for failed in events.failed_bridges:
            console.print(f"[dim]{stamp}[/dim] [red]No response from {failed}[/red]")

        # alerts are recomputed every poll; only show them on the first one
        if events.priming:
            for alert in events.alerts:
                if alert.kind is AlertKind.LOW_BATTERY:
                    detail = f"battery at {alert.battery}%"
                else:
                    detail = "unreachable"
                console.print(
                    f"  [yellow]![/yellow] {alert.device_name} "
                    f"({alert.bridge_name}): {detail}"
                )


async def _monitor(
    context: AggregationContext, interval: float, printer: EventPrinter
) -> None:
    stop_event = asyncio.Event()
    refresh_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    handlers = [
        (signal.SIGINT, stop_event),
        (signal.SIGTERM, stop_event),
        (getattr(signal, "SIGUSR1", None), refresh_event),
    ]
    for signum, event in handlers:
        if signum is None:
            continue
        try:
            loop.add_signal_handler(signum, event.set)
        except NotImplementedError:
            logger.debug("Signal handlers are not supported on this platform")

    await run_monitor(
        context,
        printer,
        stop_event=stop_event,
        refresh_event=refresh_event,
        interval=interval,
    )


def register(app: typer.Typer) -> None:
    @app.command()
    def monitor(
        bridge: Annotated[
            list[str] | None,
            typer.Option("--bridge", "-b", help="Only watch these bridges"),
        ] = None,
        interval: Annotated[
            float | None,
            typer.Option("--interval", "-i", min=1.0, help="Seconds between polls"),
        ] = None,
    ) -> None:
        """Watch bridges and print light changes and motion as they happen.

        Ctrl+C stops after the current poll; SIGUSR1 polls immediately.
        """
        console = Console()
        settings = load_settings_or_exit()
        context = build_context(settings, bridge)
        interval = interval or settings.monitor.interval

        console.print(f"Polling every {interval:g}s. Press Ctrl+C to stop.\n")
        try:
            asyncio.run(_monitor(context, interval, EventPrinter(console)))
        except KeyboardInterrupt:
            pass
        console.print("\n[green]Monitor stopped.[/green]")
