# -*- coding: utf-8 -*-
from __future__ import annotations

import json
from typing import Any, NoReturn, Optional, Sequence

import click

from ..errors import GallerySwitchError
from ..providers import GallerySwitcher


def prompt_choice(
    prompt_text: str,
    *,
    options: Sequence[str],
    default: Optional[str] = None,
) -> str:
    """Show a numbered list and return the chosen option."""
    click.echo(prompt_text)
    for idx, label in enumerate(options, start=1):
        click.echo(f"  {idx}) {label}")
    default_idx = options.index(default) + 1 if default in options else None
    chosen = click.prompt(
        "Enter number",
        type=click.IntRange(1, len(options)),
        default=default_idx,
        show_default=default_idx is not None,
    )
    return options[chosen - 1]


def print_json(data: Any) -> None:
    click.echo(json.dumps(data, ensure_ascii=False, indent=2))


def fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    raise SystemExit(1)


def get_switcher(ctx: click.Context) -> GallerySwitcher:
    """Build (once per invocation) the switcher for the global options."""
    obj = ctx.ensure_object(dict)
    if "switcher" not in obj:
        try:
            obj["switcher"] = GallerySwitcher.from_env(
                obj.get("app_name"),
                product_json=obj.get("product_json"),
                config_path=obj.get("config_file"),
            )
        except GallerySwitchError as exc:
            fail(str(exc))
    return obj["switcher"]
