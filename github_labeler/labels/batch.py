"""Plans label changes across many repositories at once."""

from typing import Sequence

import structlog

from github_labeler.github.abc import LabelClientBase
from github_labeler.labels.cache import LabelCache
from github_labeler.labels.models import Change, Label, RepositoryReference, resolve_repository_name
from github_labeler.labels.planner import Planner

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def is_remaining_call_budget_sufficient(client: LabelClientBase, expected_number_of_calls: int) -> bool:
    """Check whether the remaining rate limit allows the given number of API calls."""
    remaining_call_budget = client.remaining_call_budget()
    logger.debug(
        "Checking remaining API rate limit",
        expected_number_of_calls=expected_number_of_calls,
        remaining_call_budget=remaining_call_budget,
    )
    return expected_number_of_calls <= remaining_call_budget


def plan_batch(
    client: LabelClientBase,
    cache: LabelCache,
    repos: Sequence[RepositoryReference],
    labels: Sequence[Label],
    planner: Planner,
) -> list[Change] | None:
    """Plan the changes needed for every requested label in every repository.

    Each repository's labels are refreshed once before planning. Changes are
    returned grouped by repository, in the order the repositories and labels
    were given. Returns None without refreshing anything if the rate limit
    cannot cover one refresh per repository.
    """
    if not is_remaining_call_budget_sufficient(client, len(repos)):
        logger.error("Rate limit is not enough to process all labels in repositories", repo_count=len(repos))
        return None

    changes: list[Change] = []
    for repo in repos:
        repo_name = resolve_repository_name(repo)
        logger.debug("Processing labels for repository", repo=repo_name)
        cache.refresh(repo_name)
        for label in labels:
            logger.debug("Processing label", repo=repo_name, label_name=label.name)
            change = planner(repo_name, label, cache.snapshot(repo_name))
            if change is not None:
                changes.append(change)

    logger.info("Planned label changes", repo_count=len(repos), label_count=len(labels), change_count=len(changes))
    return changes
