# -*- coding: utf-8 -*-
"""``galleryswitch`` command line entry point."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from .. import __version__
from ..constant import APP_NAME_ENV, LOG_LEVEL_ENV, WORKING_DIR
from .extensions_cmd import extensions_group
from .gallery_cmd import path_cmd, revert_cmd, status_cmd, switch_cmd

LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # Keep request lines out of normal output.
    logging.getLogger("httpx").setLevel(logging.WARNING)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="galleryswitch")
@click.option(
    "--app-name",
    default=None,
    envvar=APP_NAME_ENV,
    help='Editor application name, e.g. "Cursor" or "VSCodium".',
)
@click.option(
    "--product-json",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Use this product.json instead of the resolved one.",
)
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="galleryswitch's own config.json.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help=f"Log level (env: {LOG_LEVEL_ENV}).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    app_name: Optional[str],
    product_json: Optional[Path],
    config_file: Optional[Path],
    log_level: Optional[str],
) -> None:
    """Switch the editor's extension gallery between Open VSX, Microsoft,
    Cursor or a custom endpoint, and install extensions directly."""
    env_path = WORKING_DIR / ".env"
    if env_path.is_file():
        load_dotenv(env_path)
    setup_logging(log_level or os.environ.get(LOG_LEVEL_ENV, "info"))

    ctx.ensure_object(dict)
    ctx.obj.update(
        app_name=app_name or os.environ.get(APP_NAME_ENV),
        product_json=product_json,
        config_file=config_file,
    )


@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8088, type=int, show_default=True)
def serve_cmd(host: str, port: int) -> None:
    """Run the HTTP API (GET/PUT /api/gallery)."""
    import uvicorn

    uvicorn.run("galleryswitch.app._app:app", host=host, port=port)


cli.add_command(status_cmd)
cli.add_command(switch_cmd)
cli.add_command(revert_cmd)
cli.add_command(path_cmd)
cli.add_command(extensions_group)


if __name__ == "__main__":
    cli()
