"""
Summarize command for flakenotes.

Reads a flake lock update notification and prints one Markdown line per
changed input, preceded by the raw notification in a collapsible block.
Meant for pull request bodies written by update bots.
"""

import click
from typing import Optional

from ..cli_utils import (
    standard_command, add_common_options, read_notification,
    parse_notification, pick,
)
from ..exit_codes import ConfigError
from ..render import (
    CROSS_ORIGIN_POLICIES, render_markdown, render_entries_table,
)


@click.command('summarize')
@add_common_options('input')
@click.option('--raw/--no-raw', 'raw_details', default=None,
              help='Echo the raw notification in a <details> block (default: from config)')
@click.option('--cross-origin', type=click.Choice(CROSS_ORIGIN_POLICIES), default=None,
              help='Updates across repositories: render without diff link, or fail')
@click.option('--pretty', is_flag=True, help='Show a table instead of Markdown')
@add_common_options('debug')
@standard_command
def summarize_handler(
    input_file,
    raw_details: Optional[bool],
    cross_origin: Optional[str],
    pretty: bool,
    debug: bool,
    config: dict,
):
    """
    Summarize a flake lock update as Markdown.

    INPUT_FILE: Notification text (default: - for stdin)

    \b
    Examples:
        nix flake update 2>&1 | flakenotes summarize
        flakenotes summarize update.txt --no-raw
        flakenotes summarize update.txt --pretty
    """
    cross_origin = pick(cross_origin, config, 'render', 'cross_origin')
    if cross_origin not in CROSS_ORIGIN_POLICIES:
        raise ConfigError(
            f"render.cross_origin must be one of {', '.join(CROSS_ORIGIN_POLICIES)}, "
            f"got {cross_origin!r}"
        )
    raw_details = pick(raw_details, config, 'render', 'raw_details')

    text = read_notification(input_file)
    document = parse_notification(text)

    if pretty:
        render_entries_table(document.entries)
        return

    # Render everything before printing so a failure leaves no partial output
    lines = list(render_markdown(
        document.entries,
        raw=text if raw_details else None,
        cross_origin=cross_origin,
    ))
    for line in lines:
        click.echo(line)
