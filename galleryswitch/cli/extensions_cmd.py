# -*- coding: utf-8 -*-
"""CLI commands for searching registries and installing .vsix packages."""
from __future__ import annotations

from typing import Optional

import click

from ..config import load_config
from ..marketplaces import (
    MARKETPLACES,
    InstallError,
    Marketplace,
    MarketplaceError,
    MarketplaceExtension,
    get_marketplace,
    install_vsix_from_url,
)
from .utils import fail, get_switcher, prompt_choice

_MARKETPLACE_OPTION = click.option(
    "--marketplace",
    "marketplace_id",
    type=click.Choice(sorted(MARKETPLACES)),
    default=None,
    help="Registry to use (defaults to the configured default marketplace).",
)
_EDITOR_OPTION = click.option(
    "--editor",
    "editor_binary",
    default=None,
    help="Editor CLI used for --install-extension (e.g. code, codium).",
)


def _open_marketplace(
    ctx: click.Context,
    marketplace_id: Optional[str],
) -> Marketplace:
    if marketplace_id is None:
        marketplace_id = get_switcher(ctx).get_default_marketplace()
    try:
        return get_marketplace(marketplace_id)
    except MarketplaceError as exc:
        fail(str(exc))


def _install(
    ctx: click.Context,
    marketplace: Marketplace,
    ext: MarketplaceExtension,
    editor_binary: Optional[str],
) -> None:
    switcher = get_switcher(ctx)
    if editor_binary is None:
        editor_binary = load_config(switcher.config_path).editor_binary
    try:
        vsix_url = marketplace.get_vsix_url(ext)
        click.echo(f"Downloading {vsix_url} ...")
        install_vsix_from_url(
            vsix_url,
            switcher.host,
            editor_binary=editor_binary,
        )
    except (MarketplaceError, InstallError) as exc:
        fail(f"Failed to install {ext.id} from {marketplace.label}: {exc}")
    click.echo(f"✓ Installed {ext.id} from {marketplace.label}.")


@click.group("ext")
def extensions_group() -> None:
    """Search Open VSX / VS Marketplace and install extensions directly.

    \b
    Examples:
      galleryswitch ext search python
      galleryswitch ext search eslint --marketplace ms --install
      galleryswitch ext install ms-python.python
    """


@extensions_group.command("search")
@click.argument("query")
@_MARKETPLACE_OPTION
@click.option(
    "--install",
    "pick_install",
    is_flag=True,
    help="Pick one of the results and install it.",
)
@_EDITOR_OPTION
@click.pass_context
def search_cmd(
    ctx: click.Context,
    query: str,
    marketplace_id: Optional[str],
    pick_install: bool,
    editor_binary: Optional[str],
) -> None:
    """Search a registry for QUERY."""
    with _open_marketplace(ctx, marketplace_id) as marketplace:
        try:
            results = marketplace.search_extensions(query)
        except MarketplaceError as exc:
            fail(str(exc))

        if not results:
            click.echo(
                f'No extensions found in {marketplace.label} for "{query}".',
            )
            return

        for ext in results:
            click.echo(f"{ext.id:40s} {ext.version:12s} {ext.display_name}")
            if ext.description:
                click.echo(f"    {ext.description}")

        if not pick_install:
            return
        labels = [f"{ext.id} ({ext.version})" for ext in results]
        chosen = prompt_choice(
            f"Select an extension to install from {marketplace.label}:",
            options=labels,
        )
        ext = results[labels.index(chosen)]
        _install(ctx, marketplace, ext, editor_binary)


@extensions_group.command("install")
@click.argument("extension_id")
@_MARKETPLACE_OPTION
@_EDITOR_OPTION
@click.pass_context
def install_cmd(
    ctx: click.Context,
    extension_id: str,
    marketplace_id: Optional[str],
    editor_binary: Optional[str],
) -> None:
    """Install EXTENSION_ID (publisher.name) from a registry."""
    if "." not in extension_id:
        fail('Please use the format "publisher.name".')
    with _open_marketplace(ctx, marketplace_id) as marketplace:
        try:
            ext = marketplace.get_extension_by_id(extension_id)
        except MarketplaceError as exc:
            fail(str(exc))
        if ext is None:
            fail(
                f'Extension "{extension_id}" not found in '
                f"{marketplace.label}.",
            )
        _install(ctx, marketplace, ext, editor_binary)
