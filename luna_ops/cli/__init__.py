"""CLI commands: one module per concern (serve, database, config validation)."""

from typer import Typer

from luna_ops.cli import db_commands, serve as serve_module, validate_config as validate_config_module
from luna_ops.utils.tracing import init_tracing

init_tracing()

app = Typer(help="Luna Ops: orders, payments, inventory and manufacturing back office")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve_module.serve)
    app.command(name="init-db")(db_commands.init_db)
    app.command(name="add-user")(db_commands.add_user)
    app.command(name="validate-config")(validate_config_module.validate_config)


register_commands()
