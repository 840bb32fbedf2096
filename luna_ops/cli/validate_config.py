"""Validate settings: print a table of required configuration and exit 1 when secrets are missing."""

import typer
from rich.table import Table

from luna_ops import config

from .shared import console, logger

MAIL_PROVIDERS = ("zeptomail", "outbox")


def _mask(value: str) -> str:
    if not value:
        return "(missing)"
    if len(value) <= 8:
        return "****"
    return f"{value[:4]}...{value[-4:]}"


def check_settings(
    paystack_secret_key: str,
    mail_provider: str,
    zepto_token: str,
    database_url: str,
    public_base_url: str,
) -> list[tuple[str, str, bool]]:
    """Return (setting, display value, ok) rows."""
    rows = [
        ("DATABASE_URL", database_url, bool(database_url)),
        ("PAYSTACK_SECRET_KEY", _mask(paystack_secret_key), bool(paystack_secret_key)),
        ("MAIL_PROVIDER", mail_provider, mail_provider in MAIL_PROVIDERS),
        ("PUBLIC_BASE_URL", public_base_url, public_base_url.startswith(("http://", "https://"))),
    ]
    if mail_provider == "zeptomail":
        rows.append(("ZEPTO_TOKEN", _mask(zepto_token), bool(zepto_token)))
    return rows


def validate_config() -> None:
    """Check secrets and URLs from the environment / .env and print a summary table."""
    log = logger.bind(command="validate-config")
    log.info("validate_config.start")

    rows = check_settings(
        config.PAYSTACK_SECRET_KEY,
        config.MAIL_PROVIDER,
        config.ZEPTO_TOKEN,
        config.DATABASE_URL,
        config.PUBLIC_BASE_URL,
    )

    table = Table(title="Luna Ops configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("OK", justify="center")
    for name, value, ok in rows:
        table.add_row(name, value, "[green]yes[/green]" if ok else "[red]no[/red]")
    console.print(table)

    failed = [name for name, _, ok in rows if not ok]
    if failed:
        console.print(f"[red]Missing or invalid: {', '.join(failed)}[/red]")
        log.error("validate_config.validation_failed", failed=failed)
        raise typer.Exit(1)
    console.print("[green]Config valid.[/green]")
    log.info("validate_config.ok")
