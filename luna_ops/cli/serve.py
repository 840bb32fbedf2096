"""Serve mode: run the FastAPI back-office API under uvicorn."""

import sys

import typer
import uvicorn

from luna_ops.api.server import create_app
from luna_ops.config import SERVER_PORT

from .shared import console, logger


def serve(
    port: int = typer.Option(SERVER_PORT, "--port", "-p", help="Port for the API server"),
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Bind host"),
) -> None:
    """Start the HTTP API (orders, checkout, manufacturing, webhooks, short links)."""
    log = logger.bind(command="serve", port=port)
    log.info("serve.start")
    app = create_app()

    console.print(f"[green]Starting Luna Ops API on http://{host}:{port}[/green]")
    console.print("[dim]Endpoints: /checkout, /orders, /manufacturing/runs, /webhooks/paystack, /r/{code}, GET /health[/dim]")
    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level="info",
            timeout_graceful_shutdown=15,
        )
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
