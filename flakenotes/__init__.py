"""
flakenotes - Markdown summaries of flake lock file updates.

Parses the notification printed by `nix flake update` into structured
entries and renders them as Markdown with links to each input's
repository and commit comparison.

Quick Start:
    import flakenotes

    result = flakenotes.parse_document(text)
    if result.ok:
        for line in flakenotes.render_markdown(result.value.entries):
            print(line)

Domain Objects:
    Locator - A repository commit on GitHub or GitLab
    DatedLocator - A locator with the date printed next to it
    UpdatedEntry / AddedEntry - One changed input
    Document - The ordered entries of one notification

Parsing:
    parse_header, parse_entry - Single steps, return Success or Failure
    parse_document - Header plus every block that matches
"""

__version__ = "0.1.0"

# Domain objects
from .domain import (
    Provider,
    Locator,
    DatedLocator,
    ShortCommitError,
    UpdateInfo,
    FollowsInput,
    NewInput,
    UpdatedEntry,
    AddedEntry,
    Document,
)

# Parsing
from .grammar import (
    ParseError,
    ParseErrorKind,
    Success,
    Failure,
    parse_locator,
    parse_dated_locator,
    parse_header,
    parse_entry,
    parse_entries,
    parse_document,
)

# Rendering
from .render import summary, render_markdown

# Configuration
from .config import load_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "Provider",
    "Locator",
    "DatedLocator",
    "ShortCommitError",
    "UpdateInfo",
    "FollowsInput",
    "NewInput",
    "UpdatedEntry",
    "AddedEntry",
    "Document",
    # Parsing
    "ParseError",
    "ParseErrorKind",
    "Success",
    "Failure",
    "parse_locator",
    "parse_dated_locator",
    "parse_header",
    "parse_entry",
    "parse_entries",
    "parse_document",
    # Rendering
    "summary",
    "render_markdown",
    # Configuration
    "load_config",
]
