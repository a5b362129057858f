"""CLI commands querying an NSP intent catalog directly."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from yang_browser_engine.adapters.transport import HttpxTransport
from yang_browser_engine.core.exceptions import YangBrowserError
from yang_browser_engine.core.models import Credentials, YangModule
from yang_browser_engine.services import ServiceContainer, build_default_services

app = typer.Typer(name="nsp", help="Query an NSP intent type catalog")
console = Console()

ResultT = TypeVar("ResultT")

HostOption = typer.Option(..., "--host", "-H", envvar="NSP_HOST", help="NSP host or address")
UserOption = typer.Option(..., "--user", "-u", envvar="NSP_USER", help="NSP user name")
PasswordOption = typer.Option(
    ..., "--password", "-p", envvar="NSP_PASSWORD", prompt=True, hide_input=True
)


def _run_connected(
    credentials: Credentials,
    action: Callable[[ServiceContainer], Awaitable[ResultT]],
) -> ResultT:
    """Connect, run ``action`` and always disconnect and close the transport."""

    async def _session() -> ResultT:
        services = build_default_services(transport_port=HttpxTransport())
        assert services.sessions is not None  # nosec B101
        try:
            await services.sessions.connect(credentials)
            return await action(services)
        finally:
            await services.aclose()

    try:
        return asyncio.run(_session())
    except YangBrowserError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command("intent-types")
def list_intent_types(
    host: str = HostOption,
    user: str = UserOption,
    password: str = PasswordOption,
    page_size: int = typer.Option(300, "--page-size", min=1, help="Intent types per page"),
) -> None:
    """List every intent type registered on NSP."""

    async def _search(services: ServiceContainer) -> list[str]:
        assert services.catalog is not None  # nosec B101
        return await services.catalog.search_intent_types(page_size)

    keys = _run_connected(Credentials(host=host, username=user, password=password), _search)
    if not keys:
        console.print("[dim]No intent types found.[/dim]")
        return

    table = Table(title=f"Intent types on {host}")
    table.add_column("Name", style="cyan")
    table.add_column("Version", justify="right")
    for key in keys:
        name, _, version = key.rpartition("_")
        table.add_row(name, version)
    console.print(table)


@app.command("modules")
def fetch_modules(
    intent_type: str = typer.Argument(..., help="Intent type as name_version"),
    host: str = HostOption,
    user: str = UserOption,
    password: str = PasswordOption,
    output_dir: Path | None = typer.Option(
        None, "--output-dir", "-o", help="Write each module to <name>.yang here"
    ),
) -> None:
    """Show or save the YANG modules of one intent type."""

    async def _fetch(services: ServiceContainer) -> list[YangModule]:
        assert services.catalog is not None  # nosec B101
        return await services.catalog.fetch_modules(intent_type)

    modules = _run_connected(Credentials(host=host, username=user, password=password), _fetch)

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        for module in modules:
            (output_dir / f"{module.name}.yang").write_text(module.yang_content, encoding="utf-8")
        console.print(f"[green]Wrote {len(modules)} modules to {output_dir}[/green]")
        return

    table = Table(title=f"YANG modules of {intent_type}")
    table.add_column("Module", style="cyan")
    table.add_column("Lines", justify="right")
    for module in modules:
        table.add_row(module.name, str(len(module.yang_content.splitlines())))
    console.print(table)


__all__ = ["app"]
