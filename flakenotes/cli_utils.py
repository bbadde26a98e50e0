"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
import click
from functools import wraps
from typing import Optional, TextIO

from .config import load_config, configure_logging, logger
from .domain import Document
from .exit_codes import (
    INTERRUPTED,
    get_exit_code_for_exception, CommandError, ParseFailedError
)
from .grammar import parse_header, parse_entries


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Loads the configuration and passes it as `config`
    - Applies --debug / configured logging
    - Data on stdout, errors on stderr
    - Consistent exit codes (see exit_codes)
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        config = load_config()
        configure_logging(config, debug=kwargs.get('debug', False))
        kwargs['config'] = config

        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo("Interrupted by user", err=True)
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            click.echo(str(e), err=True)
            sys.exit(e.exit_code)
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            click.echo(f"Command failed: {e}", err=True)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


def read_notification(stream: TextIO) -> str:
    """Read the whole notification into memory."""
    text = stream.read()
    logger.debug(f"Read {len(text)} characters of input")
    return text


def parse_notification(text: str) -> Document:
    """
    Parse a notification, turning a bad header into a command error.

    A block that does not parse only ends the entry list; it is logged and
    otherwise ignored.

    Raises:
        ParseFailedError: If the header is missing or malformed
    """
    header = parse_header(text)
    if not header.ok:
        raise ParseFailedError(f"Failed to parse header: {header.error}", header.error)

    document = parse_entries(header.remaining).value
    if document.stopped_at is not None and document.remaining.strip():
        logger.info(
            f"Ignoring input after entry {len(document)}: {document.stopped_at}"
        )
    return document


def pick(option: Optional[object], config: dict, section: str, key: str):
    """Return a command-line option if given, else the configured value."""
    if option is not None:
        return option
    return config.get(section, {}).get(key)


# Options shared by the commands
common_options = {
    'input': click.argument('input_file', type=click.File('r', encoding='utf-8'),
                            default='-', required=False),
    'debug': click.option('--debug', is_flag=True, help='Enable debug logging'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('input', 'debug')
        def my_command(input_file, debug):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
