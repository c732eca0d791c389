"""Contains the per-repository cache of GitHub labels."""

from typing import Iterable, Mapping

import structlog

from github_labeler.github.abc import LabelClientBase
from github_labeler.labels.models import Label, RepoLabelCache

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class LabelCache:
    """Last-known labels of each repository, keyed by lower-cased label name.

    The cache is advisory. It is only filled by an explicit refresh and is
    then kept current entry by entry as changes are executed. Lookups never
    fetch from GitHub.
    """

    def __init__(self, client: LabelClientBase, labels: Mapping[str, Iterable[Label]] | None = None) -> None:
        """Initialize the cache, optionally pre-seeded with labels per repository."""
        self.client = client
        self._repo_labels: dict[str, RepoLabelCache] = {}
        for repo, repo_labels in (labels or {}).items():
            self._repo_labels[repo] = {label.key: label for label in repo_labels}

    def refresh(self, repo: str) -> None:
        """Replace the cached labels of a repository with its current labels on GitHub."""
        logger.debug("Fetching label information", repo=repo)
        labels = self.client.list_labels(repo)
        self._repo_labels[repo] = {label.key: label for label in labels}
        logger.debug("Refreshed label cache", repo=repo, label_count=len(labels))

    def get(self, repo: str, name: str) -> Label | None:
        """Return the cached label with the given name (case-insensitive), if any."""
        repo_labels = self._repo_labels.get(repo)
        if repo_labels is None:
            return None
        return repo_labels.get(name.lower())

    def snapshot(self, repo: str) -> RepoLabelCache | None:
        """Return the cached labels of a repository, or None if it was never refreshed."""
        return self._repo_labels.get(repo)

    def apply(self, repo: str, name: str, label: Label | None) -> None:
        """Record the outcome of a successful mutation for a single label.

        Repositories that were never refreshed are left alone.
        """
        if repo not in self:
            return
        self._repo_labels[repo][name.lower()] = label

    def __contains__(self, repo: object) -> bool:
        """Whether the labels of a repository have been cached."""
        return repo in self._repo_labels
