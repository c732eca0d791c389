"""Entry point for planning and executing label synchronization across repositories."""

from typing import Iterable, Mapping, Self, Sequence

import structlog

from github_labeler.github.abc import LabelClientBase
from github_labeler.labels.batch import is_remaining_call_budget_sufficient, plan_batch
from github_labeler.labels.cache import LabelCache
from github_labeler.labels.executor import execute_changes
from github_labeler.labels.models import Change, Label, RepositoryReference, resolve_repository_name
from github_labeler.labels.planner import PlanType, get_planner
from github_labeler.labels.results import ExecutionResult
from github_labeler.labels.validator import validate_changes

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class GitHubLabeler:
    """Plans and executes label changes for a set of repositories.

    Each instance owns its label cache. Bulk operations refresh the cache for
    the repositories they touch, and executing changes keeps it current.
    """

    def __init__(
        self,
        client: LabelClientBase,
        labels: Mapping[str, Iterable[Label]] | None = None,
        create_missing_labels: bool = True,
    ) -> None:
        """Initialize the labeler with a client and an optionally pre-seeded cache.

        Args:
            client: Client used for every call to GitHub.
            labels: Known labels per repository to seed the cache with.
            create_missing_labels: Whether renaming or recoloring a label that
                does not exist creates it instead of doing nothing.
        """
        self.client = client
        self.cache = LabelCache(client, labels)
        self.create_missing_labels = create_missing_labels

    @classmethod
    def create(
        cls,
        client: LabelClientBase,
        labels: Mapping[str, Iterable[Label]] | None = None,
        create_missing_labels: bool = True,
    ) -> Self:
        """Create a labeler after checking that the client's credentials are valid.

        Raises:
            GitHubLabelerAuthenticationError: If GitHub rejects the credentials.
        """
        remaining_call_budget = client.remaining_call_budget()
        logger.debug("Credentials are valid", remaining_call_budget=remaining_call_budget)
        return cls(client, labels=labels, create_missing_labels=create_missing_labels)

    def plan_labels_for_repos(self, repos: Sequence[RepositoryReference], labels: Sequence[Label], plan_type: PlanType) -> list[Change] | None:
        """Plan changes of the given type for a list of labels and a list of repositories."""
        planner = get_planner(plan_type, create_missing=self.create_missing_labels)
        return plan_batch(self.client, self.cache, repos, labels, planner)

    def add_labels_to_repos(self, repos: Sequence[RepositoryReference], labels: Sequence[Label]) -> list[Change] | None:
        """Plan changes for adding a list of labels to a list of repositories."""
        logger.debug("Adding labels to repositories")
        return self.plan_labels_for_repos(repos, labels, PlanType.ADD)

    def delete_labels_from_repos(self, repos: Sequence[RepositoryReference], labels: Sequence[Label]) -> list[Change] | None:
        """Plan changes for deleting a list of labels from a list of repositories."""
        logger.debug("Deleting labels from repositories")
        return self.plan_labels_for_repos(repos, labels, PlanType.DELETE)

    def rename_labels_in_repos(self, repos: Sequence[RepositoryReference], labels: Sequence[Label]) -> list[Change] | None:
        """Plan changes for renaming a list of labels in a list of repositories."""
        logger.debug("Renaming labels in repositories")
        return self.plan_labels_for_repos(repos, labels, PlanType.RENAME)

    def recolor_labels_in_repos(self, repos: Sequence[RepositoryReference], labels: Sequence[Label]) -> list[Change] | None:
        """Plan changes for recoloring a list of labels in a list of repositories."""
        logger.debug("Recoloring labels in repositories")
        return self.plan_labels_for_repos(repos, labels, PlanType.RECOLOR)

    def export_labels_from_repo(self, repo: RepositoryReference) -> list[Label]:
        """Fetch the name and color of every label in a repository."""
        repo_name = resolve_repository_name(repo)
        logger.debug("Exporting labels from repository", repo=repo_name)
        return [Label(name=label.name, color=label.color) for label in self.client.list_labels(repo_name)]

    def duplicate_labels_from_repo(self, source_repo: RepositoryReference, target_repos: Sequence[RepositoryReference]) -> list[Change] | None:
        """Plan changes for copying every label of one repository into other repositories."""
        source_repo_name = resolve_repository_name(source_repo)
        logger.debug("Duplicating labels from repository", repo=source_repo_name)
        # One call to export the source labels plus one refresh per target repository
        if not is_remaining_call_budget_sufficient(self.client, len(target_repos) + 1):
            logger.error("Rate limit is not enough to duplicate labels", repo=source_repo_name, repo_count=len(target_repos))
            return None
        source_labels = self.export_labels_from_repo(source_repo)
        return self.add_labels_to_repos(target_repos, source_labels)

    def validate_changes(self, changes: Sequence[Change]) -> list[Change]:
        """Deduplicate and order a list of changes for execution."""
        return validate_changes(changes)

    def execute_changes(self, changes: Sequence[Change]) -> ExecutionResult:
        """Execute a list of changes, keeping the label cache current."""
        return execute_changes(self.client, self.cache, changes)
