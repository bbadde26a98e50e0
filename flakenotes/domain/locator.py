"""
Locator domain objects for flakenotes.

A locator pins a dependency to one commit of a repository on a known
hosting provider:

    github:nix-community/home-manager/bd92e8ee4a6031ca3dd836c91dc41c13fca1e533

Locators are immutable value objects. Parsing lives in flakenotes.grammar;
this module only knows how to turn a parsed locator into URLs.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum


SHORT_COMMIT_LENGTH = 8


class ShortCommitError(ValueError):
    """Raised when a commit is too short to abbreviate."""

    def __init__(self, commit: str):
        super().__init__(
            f"Commit {commit!r} is shorter than {SHORT_COMMIT_LENGTH} characters"
        )
        self.commit = commit


class Provider(Enum):
    """Hosting backends a locator can point at."""
    GITHUB = "github"
    GITLAB = "gitlab"

    @classmethod
    def from_tag(cls, tag: str) -> Optional['Provider']:
        """Return the provider for an exact tag, or None if unknown."""
        for provider in cls:
            if provider.value == tag:
                return provider
        return None

    @property
    def base_url(self) -> str:
        if self is Provider.GITHUB:
            return "https://github.com"
        return "https://gitlab.com"

    @property
    def route_prefix(self) -> str:
        # GitLab puts repository pages behind a "/-/" separator
        if self is Provider.GITLAB:
            return "/-"
        return ""


@dataclass(frozen=True)
class Locator:
    """
    A dependency pinned to a commit on a hosting provider.

    Attributes:
        provider: Hosting backend
        repository_path: "<org>/<name>"
        commit: Commit identifier, as written in the notification
    """

    provider: Provider
    repository_path: str
    commit: str

    def repo_url(self) -> str:
        """Web URL of the repository."""
        return f"{self.provider.base_url}/{self.repository_path}"

    def short_commit(self) -> str:
        """
        First 8 characters of the commit.

        Raises:
            ShortCommitError: If the commit has fewer than 8 characters
        """
        if len(self.commit) < SHORT_COMMIT_LENGTH:
            raise ShortCommitError(self.commit)
        return self.commit[:SHORT_COMMIT_LENGTH]

    def tree_url(self) -> str:
        """URL browsing the repository at this commit."""
        return f"{self.repo_url()}{self.provider.route_prefix}/tree/{self.commit}"

    def same_origin(self, other: 'Locator') -> bool:
        """True if both locators point at the same repository on the same provider."""
        return (
            self.provider is other.provider
            and self.repository_path == other.repository_path
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'provider': self.provider.value,
            'repository': self.repository_path,
            'commit': self.commit,
        }

    def __str__(self) -> str:
        return f"{self.provider.value}:{self.repository_path}/{self.commit}"


@dataclass(frozen=True)
class DatedLocator:
    """A locator together with the date recorded next to it."""

    locator: Locator
    date: str

    def to_dict(self) -> Dict[str, Any]:
        data = self.locator.to_dict()
        data['date'] = self.date
        return data
