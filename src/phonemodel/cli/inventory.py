"""phonemodel inventory: show the phoneme inventory of an accent."""

from __future__ import annotations

import json
import sys

import click

from phonemodel import default_mapper, get_inventory
from phonemodel.errors import PhonemeModelError


@click.command()
@click.option(
    "--accent", "-a",
    required=True,
    help="Built-in accent name. Example: genam.",
)
@click.option(
    "--format", "-f",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format. Default: text.",
)
@click.option(
    "--allophones/--no-allophones",
    default=False,
    help="List the symbols realizing each phoneme (text output).",
)
def inventory(accent: str, output_format: str, allophones: bool) -> None:
    """Show the phoneme inventory of an accent."""
    try:
        inv = get_inventory(accent)
    except PhonemeModelError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(inv.to_dict(), ensure_ascii=False, indent=2))
        return

    registry = default_mapper().registry
    click.echo(f"Accent: {inv.accent}")
    click.echo()
    click.echo(
        f"Consonants ({len(inv.consonants)}): "
        f"{' '.join(p.label for p in inv.consonants)}"
    )
    click.echo(
        f"Vowels ({len(inv.vowels)}): {' '.join(p.label for p in inv.vowels)}"
    )
    click.echo(f"Total: {inv.size} phonemes")

    if allophones:
        click.echo()
        for phoneme in inv:
            rendered = [registry.render(s) for s in phoneme.symbols]
            click.echo(f"/{phoneme.label}/ ({len(rendered)}): {' '.join(rendered)}")


@click.command()
def accents_cmd() -> None:
    """List the built-in accents."""
    mapper = default_mapper()
    for name in mapper.accents:
        description = mapper.accent(name).description
        click.echo(f"{name}\t{description}" if description else name)
