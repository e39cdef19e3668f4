# -*- coding: utf-8 -*-
"""CLI commands for switching the editor's extension gallery."""
from __future__ import annotations

from typing import Optional

import click

from ..errors import GallerySwitchError, NoBackupError
from ..providers import (
    GallerySwitcher,
    ProviderId,
    build_custom_descriptor,
    is_probably_url,
    list_providers,
    status_label,
)
from .utils import fail, get_switcher, print_json, prompt_choice

SWITCH_CHOICES = [p.id.value for p in list_providers()]

RESTART_HINT = (
    "Marketplace switched. A FULL quit/relaunch is required. "
    "Reload Window is NOT enough."
)


# ---------------------------------------------------------------------------
# Interactive helpers
# ---------------------------------------------------------------------------


def _select_provider_interactive(switcher: GallerySwitcher) -> ProviderId:
    """Prompt user to pick a gallery. The active one is the default."""
    current = switcher.detector.current()
    labels: list[str] = []
    ids: list[ProviderId] = []
    for defn in list_providers():
        mark = " [active]" if defn.id == current else ""
        labels.append(f"{defn.name} ({defn.id.value}){mark}")
        ids.append(defn.id)

    default_label: Optional[str] = None
    if current in ids:
        default_label = labels[ids.index(current)]

    chosen = prompt_choice(
        "Select extension gallery:",
        options=labels,
        default=default_label,
    )
    return ids[labels.index(chosen)]


def _prompt_url(text: str, *, required: bool = True) -> str:
    """Ask for a URL until it looks like one (or is skipped if optional)."""
    while True:
        value = click.prompt(
            text,
            default="" if not required else None,
            show_default=False,
        ).strip()
        if not value and not required:
            return ""
        if is_probably_url(value):
            return value
        click.echo(
            click.style("Invalid URL. Must start with http(s)://", fg="red"),
        )


# ---------------------------------------------------------------------------
# status
# ---------------------------------------------------------------------------


@click.command("status")
@click.option("--json", "as_json", is_flag=True, help="Print JSON.")
@click.pass_context
def status_cmd(ctx: click.Context, as_json: bool) -> None:
    """Show which gallery the editor is currently using."""
    try:
        status = get_switcher(ctx).status()
    except GallerySwitchError as exc:
        fail(str(exc))

    if as_json:
        print_json(status.model_dump(mode="json"))
        return

    click.echo(status.label)
    click.echo(f"  {'editor':12s}: {status.app_name}")
    click.echo(f"  {'provider':12s}: {status.provider.value}")
    click.echo(f"  {'serviceUrl':12s}: {status.service_url or '(not set)'}")
    click.echo(f"  {'product.json':12s}: {status.config_path}")


# ---------------------------------------------------------------------------
# switch
# ---------------------------------------------------------------------------


@click.command("switch")
@click.argument(
    "provider_id",
    required=False,
    type=click.Choice(SWITCH_CHOICES),
)
@click.option("--service-url", default=None, help="Custom serviceUrl.")
@click.option("--item-url", default=None, help="Custom itemUrl.")
@click.option("--cache-url", default=None, help="Custom cacheUrl.")
@click.pass_context
def switch_cmd(
    ctx: click.Context,
    provider_id: Optional[str],
    service_url: Optional[str],
    item_url: Optional[str],
    cache_url: Optional[str],
) -> None:
    """Point the editor at another extension gallery.

    \b
    Examples:
      galleryswitch switch openvsx
      galleryswitch switch ms
      galleryswitch switch custom --service-url https://... --item-url ...
    """
    switcher = get_switcher(ctx)
    try:
        pid = (
            ProviderId(provider_id)
            if provider_id
            else _select_provider_interactive(switcher)
        )
        descriptor = None
        if pid == ProviderId.CUSTOM and not switcher.host.is_fork_host:
            if service_url is None:
                service_url = _prompt_url("serviceUrl (e.g. https://...)")
            if item_url is None:
                item_url = _prompt_url("itemUrl (e.g. https://...)")
            if cache_url is None and provider_id is None:
                cache_url = _prompt_url(
                    "cacheUrl (optional, https://...)",
                    required=False,
                )
            descriptor = build_custom_descriptor(
                service_url,
                item_url,
                cache_url,
            )
        detected = switcher.switch(pid, descriptor)
    except (GallerySwitchError, OSError) as exc:
        fail(str(exc))

    click.echo(f"✓ {status_label(detected, switcher.host)}")
    if switcher.host.is_fork_host and pid == ProviderId.CURSOR:
        click.echo(
            "Default marketplace set to Cursor. "
            "Use the built-in Extensions view.",
        )
    click.echo(click.style(RESTART_HINT, fg="yellow"))


# ---------------------------------------------------------------------------
# revert
# ---------------------------------------------------------------------------


@click.command("revert")
@click.pass_context
def revert_cmd(ctx: click.Context) -> None:
    """Restore product.json from its latest backup."""
    switcher = get_switcher(ctx)
    try:
        backup = switcher.restore()
    except NoBackupError as exc:
        fail(str(exc))
    except (GallerySwitchError, OSError) as exc:
        fail(f"Revert failed: {exc}")
    click.echo(
        f"✓ Reverted product.json from {backup.name}. "
        "Quit and relaunch to apply.",
    )


# ---------------------------------------------------------------------------
# path
# ---------------------------------------------------------------------------


@click.command("path")
@click.option("--edit", is_flag=True, help="Open product.json in $EDITOR.")
@click.pass_context
def path_cmd(ctx: click.Context, edit: bool) -> None:
    """Print the product.json path, creating the file if needed."""
    try:
        path = get_switcher(ctx).ensure_config_file()
    except (GallerySwitchError, OSError) as exc:
        fail(f"Open failed: {exc}")
    if edit:
        click.edit(filename=str(path))
        return
    click.echo(str(path))
