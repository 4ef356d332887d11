"""Command-line interface for phonemodel."""

import click

from phonemodel.cli.inventory import accents_cmd, inventory
from phonemodel.cli.resolve import resolve_cmd


@click.group()
@click.version_option()
def main() -> None:
    """phonemodel: IPA symbols, distinctive features, and accent inventories."""


main.add_command(resolve_cmd, name="resolve")
main.add_command(inventory)
main.add_command(accents_cmd, name="accents")
