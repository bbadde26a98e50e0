"""
Rendering functions for flakenotes output.

Turns parsed entries into Markdown summary lines (one per entry), the
collapsible raw-input block that precedes them, or a rich table for
terminal viewing. The parse layer returns data; this module makes it
human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import Iterable, Iterator, Optional

from .domain import AddedEntry, Entry, FollowsInput, UpdatedEntry
from .exit_codes import RenderError

console = Console()

CROSS_ORIGIN_OMIT = "omit"
CROSS_ORIGIN_ERROR = "error"
CROSS_ORIGIN_POLICIES = (CROSS_ORIGIN_OMIT, CROSS_ORIGIN_ERROR)


def summary(entry: Entry, cross_origin: str = CROSS_ORIGIN_OMIT) -> str:
    """
    Render one entry as a Markdown list item.

    Args:
        entry: Parsed entry
        cross_origin: What to do with an update whose two pins live in
            different repositories: "omit" renders it without a diff link,
            "error" raises RenderError

    Raises:
        RenderError: Cross-origin update under the "error" policy
        ShortCommitError: A commit is too short to abbreviate
    """
    if isinstance(entry, UpdatedEntry):
        return _summarize_updated(entry, cross_origin)
    return _summarize_added(entry)


def _summarize_updated(entry: UpdatedEntry, cross_origin: str) -> str:
    info = entry.info
    source = info.from_.locator
    target = info.to.locator
    dates = f"<sub>({info.from_.date} to {info.to.date})</sub>"

    diff_url = info.diff_url()
    if diff_url is not None:
        change = f"[`{source.short_commit()}` ➡️ `{target.short_commit()}`]({diff_url})"
    elif cross_origin == CROSS_ORIGIN_ERROR:
        raise RenderError(
            f"Cannot link a diff for input '{entry.name}': "
            f"{source} and {target} are in different repositories"
        )
    else:
        change = (
            f"[`{source.short_commit()}`]({source.tree_url()}) ➡️ "
            f"[`{target.short_commit()}`]({target.tree_url()})"
        )

    return f" - Updated input [`{entry.name}`]({source.repo_url()}): {change} {dates}"


def _summarize_added(entry: AddedEntry) -> str:
    if isinstance(entry.info, FollowsInput):
        return f" - Added input `{entry.name}` (follows `{entry.info.path}`)"

    pin = entry.info.pin
    locator = pin.locator
    return (
        f" - Added input [`{entry.name}`]({locator.repo_url()}): "
        f"[`{locator.short_commit()}`]({locator.tree_url()}) <sub>({pin.date})</sub>"
    )


def render_details(raw: str) -> Iterator[str]:
    """Yield the collapsible block that echoes the raw notification."""
    yield "<details><summary>Raw output</summary><p>"
    yield ""
    yield "```"
    yield raw.rstrip("\n")
    yield "```"
    yield ""
    yield "</p></details>"
    yield ""


def render_markdown(
    entries: Iterable[Entry],
    raw: Optional[str] = None,
    cross_origin: str = CROSS_ORIGIN_OMIT,
) -> Iterator[str]:
    """
    Yield the Markdown lines for a notification.

    Args:
        entries: Parsed entries, in order
        raw: Original notification text; echoed in a <details> block if given
        cross_origin: Policy for updates across repositories (see summary)
    """
    if raw is not None:
        yield from render_details(raw)

    for entry in entries:
        yield summary(entry, cross_origin)


def render_entries_table(entries: Iterable[Entry], title: Optional[str] = None) -> None:
    """
    Render entries as a pretty table.

    Args:
        entries: Parsed entries
        title: Optional table title
    """
    entries = list(entries)
    if not entries:
        console.print("[yellow]No changes found.[/yellow]")
        return

    table = Table(
        title=title or "Flake Lock Updates",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("Input", style="cyan")
    table.add_column("Change", style="green")
    table.add_column("Repository", style="blue")
    table.add_column("From", style="dim")
    table.add_column("To")
    table.add_column("Dates", style="yellow")

    for entry in entries:
        if isinstance(entry, UpdatedEntry):
            source = entry.info.from_
            target = entry.info.to
            repository = source.locator.repo_url()
            if not entry.info.same_origin:
                repository += f" → {target.locator.repo_url()}"
            table.add_row(
                entry.name,
                "updated",
                repository,
                source.locator.short_commit(),
                target.locator.short_commit(),
                f"{source.date} → {target.date}",
            )
        elif isinstance(entry.info, FollowsInput):
            table.add_row(entry.name, "follows", entry.info.path, "", "", "")
        else:
            pin = entry.info.pin
            table.add_row(
                entry.name,
                "added",
                pin.locator.repo_url(),
                "",
                pin.locator.short_commit(),
                pin.date,
            )

    console.print(table)
