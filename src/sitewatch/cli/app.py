"""Typer CLI for sitewatch."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from sitewatch.config import SitewatchConfig
from sitewatch.core.history import HistoryFile
from sitewatch.models import StatusClass, TargetStatus

app = typer.Typer(
    name="sitewatch",
    help="Probe HTTP endpoints on a fixed cadence and serve their history.",
    no_args_is_help=True,
)
console = Console(stderr=True)

_CLASS_STYLES = {
    StatusClass.OK: "green",
    StatusClass.WARNING: "yellow",
    StatusClass.ERROR: "red",
}


def _config() -> SitewatchConfig:
    try:
        return SitewatchConfig.load()
    except ValueError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(1)


def _styled_code(status_code: int) -> str:
    style = _CLASS_STYLES.get(StatusClass.for_code(status_code))
    return f"[{style}]{status_code}[/{style}]" if style else str(status_code)


def _ms(status: TargetStatus) -> str:
    return f"{status.current.latency.total_seconds() * 1000:.1f}"


@app.command()
def run(
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Dashboard port")] = None,
    interval: Annotated[Optional[float], typer.Option("--interval", "-i", help="Seconds to sleep after each probe")] = None,
    rounds: Annotated[Optional[int], typer.Option("--rounds", help="Stop polling after N rounds")] = None,
    no_server: Annotated[bool, typer.Option("--no-server", help="Poll in the foreground without the dashboard")] = False,
) -> None:
    """Start the poller and the dashboard."""
    from sitewatch.core.prober import Prober
    from sitewatch.core.scheduler import PollScheduler
    from sitewatch.core.store import StatusStore
    from sitewatch.logging_setup import setup_logging

    config = _config()

    try:
        setup_logging(config.log.level, config.log_path)
    except OSError as exc:
        console.print(f"[red]Cannot open log file {config.log_path}:[/red] {exc}")
        raise typer.Exit(1)

    history_file = HistoryFile(config.history_path)
    store = StatusStore(persister=history_file, initial=history_file.load())
    interval_val = interval if interval is not None else config.poll.interval_seconds
    port_val = port if port is not None else config.server.port

    with Prober(config.poll) as prober:
        scheduler = PollScheduler(store, prober, config.poll.targets, interval_val)
        if no_server:
            scheduler.run(rounds=rounds)
            console.print(f"[green]Polled {len(config.poll.targets)} targets[/green]")
            return

        import uvicorn

        from sitewatch.web.app import create_app

        try:
            web_app = create_app(store, config)
        except RuntimeError as exc:
            console.print(f"[red]Cannot start dashboard:[/red] {exc}")
            raise typer.Exit(1)

        scheduler.start(rounds=rounds)
        console.print(f"Starting server on port {port_val}...")
        uvicorn.run(
            web_app,
            host=config.server.host,
            port=port_val,
            log_level=config.log.level.lower(),
        )


@app.command()
def status() -> None:
    """Show the current state of every target in the history file."""
    config = _config()
    statuses = HistoryFile(config.history_path).load()

    if not statuses:
        console.print("[dim]No history recorded yet.[/dim]")
        return

    from sitewatch.web.app import ordered_statuses

    table = Table(title="Website Status")
    table.add_column("URL", style="bold")
    table.add_column("Status", justify="right")
    table.add_column("Message")
    table.add_column("Latency (ms)", justify="right")
    table.add_column("Last checked")
    table.add_column("Checks", justify="right")

    for s in ordered_statuses(statuses, config.poll.targets):
        table.add_row(
            s.target,
            _styled_code(s.current.status_code),
            s.current.status_label,
            _ms(s),
            s.current.observed_at.strftime("%Y-%m-%d %H:%M:%S"),
            str(s.checks),
        )
    console.print(table)


@app.command()
def history(
    target: str,
    limit: Annotated[int, typer.Option("--limit", "-n", help="Max observations")] = 20,
) -> None:
    """Show recent observations for one target, newest first."""
    config = _config()
    statuses = HistoryFile(config.history_path).load()

    found = statuses.get(target)
    if found is None:
        console.print(f"[red]No history for:[/red] {target}")
        raise typer.Exit(1)

    table = Table(title=f"{target} ({found.checks} checks)")
    table.add_column("Checked at")
    table.add_column("Status", justify="right")
    table.add_column("Message")
    table.add_column("Latency (ms)", justify="right")

    for o in list(reversed(found.history))[:limit]:
        table.add_row(
            o.observed_at.strftime("%Y-%m-%d %H:%M:%S"),
            _styled_code(o.status_code),
            o.status_label,
            f"{o.latency.total_seconds() * 1000:.1f}",
        )
    console.print(table)


@app.command()
def probe(target: str) -> None:
    """Probe a single URL once without recording it."""
    from sitewatch.core.prober import Prober

    config = _config()
    with Prober(config.poll) as prober:
        o = prober(target)

    console.print(
        f"[bold]{target}[/bold]  {_styled_code(o.status_code)} {o.status_label}"
        f"  {o.latency.total_seconds() * 1000:.1f} ms"
    )


@app.command()
def targets() -> None:
    """List the configured targets."""
    config = _config()

    if not config.poll.targets:
        console.print("[dim]No targets configured.[/dim]")
        return

    for t in config.poll.targets:
        console.print(f"  {t}")
    console.print(f"[dim]Interval: {config.poll.interval_seconds}s after each probe[/dim]")


def main() -> None:
    """Entry point for the sitewatch CLI."""
    app()


if __name__ == "__main__":
    main()
