"""
Entry domain objects for flakenotes.

An entry describes what happened to one input of the lock file:

- UpdatedEntry: the input moved from one pinned commit to another
- AddedEntry: the input is new, either pinned to its own commit
  (NewInput) or following another input (FollowsInput)

Entries keep the order in which they appear in the notification. A
Document is the ordered collection produced by one parse.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union, Dict, Any, TYPE_CHECKING

from .locator import DatedLocator, ShortCommitError

if TYPE_CHECKING:
    from ..grammar import ParseError


@dataclass(frozen=True)
class UpdateInfo:
    """The two pins of an updated input."""

    from_: DatedLocator
    to: DatedLocator

    @property
    def same_origin(self) -> bool:
        return self.from_.locator.same_origin(self.to.locator)

    def diff_url(self) -> Optional[str]:
        """
        Comparison URL between the two commits.

        Returns None when the two sides live on different providers or in
        different repositories, since no single comparison page exists.
        """
        if not self.same_origin:
            return None

        source = self.from_.locator
        return (
            f"{source.repo_url()}{source.provider.route_prefix}/compare/"
            f"{source.short_commit()}...{self.to.locator.short_commit()}"
        )

    def to_dict(self) -> Dict[str, Any]:
        try:
            diff_url = self.diff_url()
        except ShortCommitError:
            # Too short to abbreviate, so no comparison link
            diff_url = None
        return {
            'from': self.from_.to_dict(),
            'to': self.to.to_dict(),
            'diff_url': diff_url,
        }


@dataclass(frozen=True)
class FollowsInput:
    """An added input that inherits its pin from another input path."""

    path: str

    kind = 'follows'

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'follows': self.path}


@dataclass(frozen=True)
class NewInput:
    """An added input pinned to its own commit."""

    pin: DatedLocator

    kind = 'new'

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'kind': self.kind}
        data.update(self.pin.to_dict())
        return data


AddInfo = Union[FollowsInput, NewInput]


@dataclass(frozen=True)
class UpdatedEntry:
    """An input whose pin changed."""

    name: str
    info: UpdateInfo

    type = 'updated'

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'type': self.type, 'name': self.name}
        data.update(self.info.to_dict())
        return data


@dataclass(frozen=True)
class AddedEntry:
    """An input that did not exist before."""

    name: str
    info: AddInfo

    type = 'added'

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'type': self.type, 'name': self.name}
        data.update(self.info.to_dict())
        return data


Entry = Union[UpdatedEntry, AddedEntry]


@dataclass(frozen=True)
class Document:
    """
    Entries recognized in one notification.

    Attributes:
        entries: Entries in order of appearance
        remaining: Input left over after the last recognized block
        stopped_at: Why block collection ended, or None if the input
            was consumed completely
    """

    entries: Tuple[Entry, ...] = ()
    remaining: str = ""
    stopped_at: Optional['ParseError'] = None

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'entries': [entry.to_dict() for entry in self.entries],
            'remaining': self.remaining,
            'stopped_at': self.stopped_at.to_dict() if self.stopped_at else None,
        }
