"""Pydantic models for labels and the changes planned against them."""

from enum import Enum
from typing import Any, Mapping, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class Label(BaseModel):
    """A GitHub label, optionally carrying the name it should be renamed to."""

    model_config = ConfigDict(frozen=True)

    name: str
    color: str | None = None
    new_name: str | None = None

    @property
    def key(self) -> str:
        """Lookup key of the label, which is its lower-cased name."""
        return self.name.lower()


class ChangeType(str, Enum):
    """Enum for the kinds of mutation a change performs."""

    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


class Change(BaseModel):
    """One pending mutation of a repository's labels."""

    model_config = ConfigDict(frozen=True)

    type: ChangeType
    repo: str
    label: Label

    def __str__(self) -> str:
        """Human readable summary of the change."""
        return (
            f"{self.repo} - {self.type.value} - {self.label.name} - color: {self.label.color or ''} - new_name: {self.label.new_name or ''}"
        )


# Cached labels of a single repository, keyed by lower-cased label name. A
# value of None marks a label that was deleted since the last refresh.
RepoLabelCache = dict[str, Label | None]


@runtime_checkable
class HasFullName(Protocol):
    """Protocol for repository objects that have a full_name attribute."""

    full_name: str


RepositoryReference = str | Mapping[str, Any] | HasFullName


def resolve_repository_name(repo: RepositoryReference) -> str:
    """Normalize a repository reference to its 'owner/name' identifier."""
    if isinstance(repo, str):
        return repo
    if isinstance(repo, Mapping):
        if "full_name" in repo:
            return str(repo["full_name"])
    elif isinstance(repo, HasFullName):
        return repo.full_name
    raise ValueError(f"Cannot determine repository name from {repo!r}")
