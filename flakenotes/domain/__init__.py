"""
Domain layer for flakenotes.

Contains pure domain objects with no I/O or side effects:
- Provider, Locator, DatedLocator: a dependency pinned to a commit
- UpdatedEntry, AddedEntry: one change described by the notification
- Document: the ordered entries of one notification

These objects are immutable and provide serialization methods for
structured output.
"""

from .locator import Provider, Locator, DatedLocator, ShortCommitError
from .entry import (
    UpdateInfo,
    FollowsInput,
    NewInput,
    AddInfo,
    UpdatedEntry,
    AddedEntry,
    Entry,
    Document,
)

__all__ = [
    'Provider',
    'Locator',
    'DatedLocator',
    'ShortCommitError',
    'UpdateInfo',
    'FollowsInput',
    'NewInput',
    'AddInfo',
    'UpdatedEntry',
    'AddedEntry',
    'Entry',
    'Document',
]
