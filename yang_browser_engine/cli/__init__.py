"""CLI commands for yang-browser-engine."""

import typer

from yang_browser_engine.cli.nsp import app as nsp_app

main_app = typer.Typer(
    name="yang-browser",
    help="YANG Browser Engine CLI",
    no_args_is_help=True,
)
main_app.add_typer(nsp_app, name="nsp")


@main_app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Interface to bind"),
    port: int = typer.Option(8080, "--port", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the HTTP API."""
    import uvicorn  # pylint: disable=import-outside-toplevel

    uvicorn.run(
        "yang_browser_engine.api_factory:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def main() -> None:
    """Entry point for the CLI."""
    main_app()


__all__ = ["main", "main_app"]
