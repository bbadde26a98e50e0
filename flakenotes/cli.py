#!/usr/bin/env python3

import click

from flakenotes.commands.summarize import summarize_handler
from flakenotes.commands.parse import parse_handler


@click.group()
@click.version_option(package_name='flakenotes')
def cli():
    """flakenotes - Markdown summaries of flake lock file updates.

    Reads the "Flake lock file updates:" notification printed by
    `nix flake update` and turns it into links to each input's
    repository and commit comparison.
    """
    pass


cli.add_command(summarize_handler, name='summarize')
cli.add_command(parse_handler, name='parse')


def main():
    cli()

if __name__ == "__main__":
    main()
