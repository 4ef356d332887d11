"""phonemodel resolve: show the feature bundle of an IPA symbol."""

from __future__ import annotations

import json
import sys

import click

from phonemodel import default_registry
from phonemodel.errors import PhonemeModelError


@click.command()
@click.argument("symbol")
@click.option(
    "--format", "-f",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format. Default: text.",
)
def resolve_cmd(symbol: str, output_format: str) -> None:
    """Resolve an IPA SYMBOL (e.g. pʰ, ã́, t͡ʃ) to its distinctive features."""
    registry = default_registry()
    try:
        sym = registry.parse(symbol)
        bundle = registry.resolve(sym)
    except PhonemeModelError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if output_format == "json":
        data = {
            "symbol": registry.render(sym),
            "base": sym.base,
            "modifiers": [
                m.name for m in registry.modifiers.canonical_order(sym.modifiers)
            ],
            **bundle.to_dict(),
        }
        click.echo(json.dumps(data, ensure_ascii=False, indent=2))
    else:
        click.echo(f"{registry.render(sym)} ({bundle.category})")
        width = max(len(name) for name in bundle.names())
        for name, value in bundle.items():
            click.echo(f"  {name:<{width}}  {value}")
