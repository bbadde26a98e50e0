"""
Grammar for flake lock file update notifications.

Recognizes the text printed by `nix flake update` / `nix flake lock`:

    Flake lock file updates:

    • Updated input 'home-manager':
        'github:nix-community/home-manager/bd92e8ee...' (2025-10-03)
      → 'github:nix-community/home-manager/bcccb01d...' (2025-10-10)
    • Added input 'ltstatus/flake-utils':
        'github:numtide/flake-utils/11707dc2...' (2024-11-13)
    • Added input 'a/b/flake-parts':
        follows 'a/flake-parts'

Every parser takes the text still to be read and returns either
Success(remaining, value) or Failure(error). Nothing here raises on
malformed input; callers decide what a failure means.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar, Union

from .domain import (
    AddedEntry,
    AddInfo,
    DatedLocator,
    Document,
    Entry,
    FollowsInput,
    Locator,
    NewInput,
    Provider,
    UpdatedEntry,
    UpdateInfo,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

HEADER = "Flake lock file updates:"
UPDATED_TAG = "• Updated input '"
ADDED_TAG = "• Added input '"
NAME_END = "':"
ARROW = "→"
FOLLOWS_TAG = "follows "

_HORIZONTAL_SPACE = " \t"
_LOCATOR_BODY = re.compile(r"[^?\r\n]*")
_NOT_LINE_ENDING = re.compile(r"[^\r\n]*")
_FRAGMENT_LENGTH = 60


class ParseErrorKind(Enum):
    """What went wrong while reading the notification."""
    EXPECTED = "expected"                    # literal or delimiter not found
    UNKNOWN_PROVIDER = "unknown_provider"
    MALFORMED_LOCATOR = "malformed_locator"
    MALFORMED_BLOCK = "malformed_block"      # block tag matched, body did not
    MALFORMED_HEADER = "malformed_header"


@dataclass(frozen=True)
class ParseError:
    """
    Diagnostic for a failed parse.

    Attributes:
        kind: Category of the failure
        message: Human-readable description
        fragment: Start of the input line where the failure happened
        cause: Failure of an inner parser, if this one wraps it
    """

    kind: ParseErrorKind
    message: str
    fragment: str = ""
    cause: Optional['ParseError'] = None

    @property
    def root_cause(self) -> 'ParseError':
        error = self
        while error.cause is not None:
            error = error.cause
        return error

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'message': self.message,
            'fragment': self.fragment,
            'cause': self.cause.to_dict() if self.cause else None,
        }

    def __str__(self) -> str:
        text = self.message
        if self.fragment:
            text += f" at {self.fragment!r}"
        if self.cause is not None:
            text += f": {self.cause}"
        return text


@dataclass(frozen=True)
class Success(Generic[T]):
    """A parser matched; `remaining` is the text after the match."""

    remaining: str
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A parser did not match."""

    error: ParseError

    @property
    def ok(self) -> bool:
        return False


ParseResult = Union[Success[T], Failure]


# =============================================================================
# PRIMITIVES
# =============================================================================

def _fragment(text: str) -> str:
    line = _NOT_LINE_ENDING.match(text).group(0)
    if len(line) > _FRAGMENT_LENGTH:
        return line[:_FRAGMENT_LENGTH] + "..."
    return line


def _fail(kind: ParseErrorKind, message: str, text: str,
          cause: Optional[ParseError] = None) -> Failure:
    return Failure(ParseError(kind, message, _fragment(text), cause))


def _line_ending(text: str) -> Optional[str]:
    """Consume one "\\n" or "\\r\\n"; None if the text is not at a line end."""
    if text.startswith("\r\n"):
        return text[2:]
    if text.startswith("\n"):
        return text[1:]
    return None


def _space0(text: str) -> str:
    return text.lstrip(_HORIZONTAL_SPACE)


def _delimited(text: str, opening: str, closing: str) -> Optional[Tuple[str, str]]:
    """Split "<opening>content<closing>rest" into (content, rest)."""
    if not text.startswith(opening):
        return None
    end = text.find(closing, len(opening))
    if end < 0:
        return None
    return text[len(opening):end], text[end + len(closing):]


# =============================================================================
# LOCATORS
# =============================================================================

def parse_locator(text: str) -> ParseResult[Locator]:
    """
    Parse "<provider>:<org>/<repo>/<commit>[?<query>]".

    The body must contain exactly two slashes; it is split on the last one.
    A query suffix is consumed up to the end of the line and discarded.
    """
    tag, separator, rest = text.partition(':')
    if not separator:
        return _fail(ParseErrorKind.EXPECTED, "expected ':' after provider tag", text)

    provider = Provider.from_tag(tag)
    if provider is None:
        return _fail(ParseErrorKind.UNKNOWN_PROVIDER,
                     f"unrecognized provider {tag!r}", text)

    body = _LOCATOR_BODY.match(rest).group(0)
    if not body:
        return _fail(ParseErrorKind.MALFORMED_LOCATOR, "empty locator body", text)
    if body.count('/') != 2:
        return _fail(ParseErrorKind.MALFORMED_LOCATOR,
                     f"expected <org>/<repo>/<commit>, got {body!r}", text)

    rest = rest[len(body):]
    if rest.startswith('?'):
        rest = rest[len(_NOT_LINE_ENDING.match(rest).group(0)):]

    repository_path, commit = body.rsplit('/', 1)
    return Success(rest, Locator(provider, repository_path, commit))


def parse_dated_locator(text: str) -> ParseResult[DatedLocator]:
    """Parse "  '<locator>' (<date>)" followed by a line ending."""
    rest = _space0(text)
    quoted = _delimited(rest, "'", "'")
    if quoted is None:
        return _fail(ParseErrorKind.EXPECTED, "expected a quoted locator", rest)
    url, rest = quoted

    spaced = _space0(rest)
    if spaced == rest:
        return _fail(ParseErrorKind.EXPECTED, "expected whitespace before the date", rest)

    dated = _delimited(spaced, "(", ")")
    if dated is None:
        return _fail(ParseErrorKind.EXPECTED, "expected a parenthesized date", spaced)
    date, rest = dated

    after = _line_ending(rest)
    if after is None:
        return _fail(ParseErrorKind.EXPECTED, "expected end of line after the date", rest)

    located = parse_locator(url)
    if not located.ok:
        return located

    return Success(after, DatedLocator(located.value, date))


# =============================================================================
# BLOCK BODIES
# =============================================================================

def parse_update_info(text: str) -> ParseResult[UpdateInfo]:
    """Parse the "from → to" pair of an updated input."""
    source = parse_dated_locator(text)
    if not source.ok:
        return source

    rest = _space0(source.remaining)
    if not rest.startswith(ARROW):
        return _fail(ParseErrorKind.EXPECTED, f"expected {ARROW!r} between pins", rest)

    target = parse_dated_locator(rest[len(ARROW):])
    if not target.ok:
        return target

    return Success(target.remaining, UpdateInfo(source.value, target.value))


def _parse_follows(text: str) -> ParseResult[FollowsInput]:
    rest = _space0(text)
    if not rest.startswith(FOLLOWS_TAG):
        return _fail(ParseErrorKind.EXPECTED, f"expected {FOLLOWS_TAG.strip()!r}", rest)

    quoted = _delimited(rest[len(FOLLOWS_TAG):], "'", "'")
    if quoted is None:
        return _fail(ParseErrorKind.EXPECTED, "expected a quoted input path", rest)
    path, rest = quoted

    after = _line_ending(rest)
    if after is None:
        return _fail(ParseErrorKind.EXPECTED, "expected end of line after the input path", rest)

    return Success(after, FollowsInput(path))


def parse_add_info(text: str) -> ParseResult[AddInfo]:
    """Parse the body of an added input: "follows '<path>'" or a dated locator."""
    follows = _parse_follows(text)
    if follows.ok:
        return follows

    pinned = parse_dated_locator(text)
    if not pinned.ok:
        return pinned

    return Success(pinned.remaining, NewInput(pinned.value))


# =============================================================================
# BLOCKS
# =============================================================================

def _parse_input_name(text: str) -> ParseResult[str]:
    """Parse "<name>':" and the line ending after it."""
    end = text.find(NAME_END)
    if end < 0:
        return _fail(ParseErrorKind.EXPECTED, "unterminated input name", text)

    after = _line_ending(text[end + len(NAME_END):])
    if after is None:
        return _fail(ParseErrorKind.EXPECTED, "expected end of line after the input name",
                     text[end:])

    return Success(after, text[:end])


def _malformed(text: str, what: str, cause: ParseError) -> Failure:
    return _fail(ParseErrorKind.MALFORMED_BLOCK, f"malformed {what}", text, cause)


def parse_updated(text: str) -> ParseResult[Entry]:
    """Parse one "• Updated input '<name>':" block."""
    if not text.startswith(UPDATED_TAG):
        return _fail(ParseErrorKind.EXPECTED, "expected an 'Updated input' block", text)

    named = _parse_input_name(text[len(UPDATED_TAG):])
    if not named.ok:
        return _malformed(text, "updated input header", named.error)

    info = parse_update_info(named.remaining)
    if not info.ok:
        return _malformed(text, f"updated input {named.value!r}", info.error)

    return Success(info.remaining, UpdatedEntry(named.value, info.value))


def parse_added(text: str) -> ParseResult[Entry]:
    """Parse one "• Added input '<name>':" block."""
    if not text.startswith(ADDED_TAG):
        return _fail(ParseErrorKind.EXPECTED, "expected an 'Added input' block", text)

    named = _parse_input_name(text[len(ADDED_TAG):])
    if not named.ok:
        return _malformed(text, "added input header", named.error)

    info = parse_add_info(named.remaining)
    if not info.ok:
        return _malformed(text, f"added input {named.value!r}", info.error)

    return Success(info.remaining, AddedEntry(named.value, info.value))


def parse_entry(text: str) -> ParseResult[Entry]:
    """
    Parse one block, trying Updated before Added.

    Once a block tag has matched, a malformed body is returned as is; the
    other block shape is not tried.
    """
    updated = parse_updated(text)
    if updated.ok or updated.error.kind is ParseErrorKind.MALFORMED_BLOCK:
        return updated

    added = parse_added(text)
    if added.ok or added.error.kind is ParseErrorKind.MALFORMED_BLOCK:
        return added

    return _fail(ParseErrorKind.EXPECTED,
                 "expected an 'Updated input' or 'Added input' block", text)


# =============================================================================
# DOCUMENT
# =============================================================================

def parse_header(text: str) -> ParseResult[None]:
    """Parse the title line and the blank line after it."""
    if not text.startswith(HEADER):
        return _fail(ParseErrorKind.MALFORMED_HEADER, f"expected {HEADER!r}", text)

    rest = _line_ending(text[len(HEADER):])
    if rest is not None:
        rest = _line_ending(rest)
    if rest is None:
        return _fail(ParseErrorKind.MALFORMED_HEADER,
                     "expected a blank line after the header", text)

    return Success(rest, None)


def parse_entries(text: str) -> Success[Document]:
    """
    Parse blocks while they match, then return.

    Collection stops at the first position where no block matches. That
    is not a failure: the entries read so far are returned, the rest of
    the input is left in `remaining`, and the reason is kept in
    `stopped_at`.
    """
    entries: List[Entry] = []
    rest = text
    stopped_at = None

    while rest:
        result = parse_entry(rest)
        if not result.ok:
            stopped_at = result.error
            logger.debug(f"Stopped after {len(entries)} entries: {stopped_at}")
            break
        entries.append(result.value)
        rest = result.remaining

    return Success(rest, Document(tuple(entries), rest, stopped_at))


def parse_document(text: str) -> ParseResult[Document]:
    """Parse a complete notification: header, then blocks."""
    header = parse_header(text)
    if not header.ok:
        return header
    return parse_entries(header.remaining)
