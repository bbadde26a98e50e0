"""
Parse command for flakenotes.

Prints the entries of a flake lock update notification as structured
data, for scripts that want more than the Markdown summary.
"""

import click
from typing import Optional

from ..cli_utils import (
    standard_command, add_common_options, read_notification,
    parse_notification, pick,
)
from ..exit_codes import ConfigError
from ..format_utils import FORMATS, format_entries


@click.command('parse')
@add_common_options('input')
@click.option('-f', '--format', 'output_format', type=click.Choice(FORMATS), default=None,
              help='Output format (default: jsonl, or output.format from config)')
@click.option('--fields', help='Comma-separated list of fields to include (for CSV/TSV)')
@add_common_options('debug')
@standard_command
def parse_handler(
    input_file,
    output_format: Optional[str],
    fields: Optional[str],
    debug: bool,
    config: dict,
):
    """
    Print the parsed entries of a flake lock update.

    INPUT_FILE: Notification text (default: - for stdin)

    \b
    Examples:
        nix flake update 2>&1 | flakenotes parse
        flakenotes parse update.txt --format yaml
        flakenotes parse update.txt -f csv --fields name,type,diff_url
    """
    output_format = pick(output_format, config, 'output', 'format')
    if output_format not in FORMATS:
        raise ConfigError(f"output.format must be one of {', '.join(FORMATS)}, got {output_format!r}")

    document = parse_notification(read_notification(input_file))

    field_list = [f.strip() for f in fields.split(',')] if fields else None
    for line in format_entries(document.entries, output_format, field_list):
        click.echo(line)
