"""Shared CLI helpers: console, logger, database and service construction."""

from rich.console import Console

from luna_ops.config import DATABASE_URL, TRANSACTION_MAX_ATTEMPTS
from luna_ops.db import Database
from luna_ops.utils.logger import get_logger

console = Console()
logger = get_logger("luna_ops.cli")


def get_database(url: str | None = None) -> Database:
    """Database for the configured (or given) URL."""
    return Database(url or DATABASE_URL, TRANSACTION_MAX_ATTEMPTS)
