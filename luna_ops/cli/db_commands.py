"""Database commands: create tables, seed raw materials, register notification recipients."""

import typer
from rich.table import Table

from luna_ops.db.models import KNOWN_ROLES
from luna_ops.services.user_service import UserService

from .shared import console, get_database, logger


def init_db(
    seed: bool = typer.Option(True, "--seed/--no-seed", help="Insert the default raw materials list"),
) -> None:
    """Create all tables (idempotent) and optionally seed raw materials."""
    log = logger.bind(command="init-db", seed=seed)
    db = get_database()
    db.init(seed=seed)
    console.print(f"[green]Database ready at {db.engine.url.render_as_string(hide_password=True)}[/green]")
    log.info("init_db.ok")
    db.dispose()


def add_user(
    email: str = typer.Argument(..., help="Recipient e-mail address"),
    name: str = typer.Argument(..., help="Display name"),
    role: list[str] = typer.Option(["admin"], "--role", "-r", help="Role (repeatable): admin, sales, ..."),
) -> None:
    """Register (or update) a staff user that receives new-order notifications."""
    log = logger.bind(command="add-user", email=email)
    unknown = [r for r in role if r.lower() not in KNOWN_ROLES]
    if unknown:
        console.print(f"[red]Unknown role(s): {', '.join(unknown)}. Known: {', '.join(KNOWN_ROLES)}[/red]")
        log.warning("add_user.unknown_roles", roles=unknown)
        raise typer.Exit(1)

    db = get_database()
    user = UserService(db).add_user(email, name, role)
    table = Table(title="User saved")
    table.add_column("Email", style="cyan")
    table.add_column("Name")
    table.add_column("Roles", style="green")
    table.add_row(user.email, user.display_name, user.roles)
    console.print(table)
    log.info("add_user.ok", roles=user.roles)
    db.dispose()
