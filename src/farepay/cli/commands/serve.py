"""HTTP server command."""

import click
import uvicorn

from farepay.api import create_app


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=8000, show_default=True, type=int, help="Bind port")
@click.pass_context
def serve(ctx, host: str, port: int):
    """Serve the fare tap API for validators."""
    db = ctx.obj["db"]
    uvicorn.run(create_app(db), host=host, port=port, log_config=None)


def register_commands(cli):
    """Register serve command with main CLI."""
    cli.add_command(serve)
