"""Entry point: delegates to the CLI app (serve, init-db, add-user, validate-config)."""

from rich.traceback import install

from luna_ops.cli import app
from luna_ops.utils.tracing import shutdown_tracing

if __name__ == "__main__":
    try:
        install(show_locals=False, max_frames=5, word_wrap=True)
        app()
    finally:
        shutdown_tracing()
