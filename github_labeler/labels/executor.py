"""Applies planned label changes to GitHub."""

from typing import Sequence

import structlog

from github_labeler.github.abc import LabelClientBase
from github_labeler.labels.batch import is_remaining_call_budget_sufficient
from github_labeler.labels.cache import LabelCache
from github_labeler.labels.models import Change, ChangeType
from github_labeler.labels.results import ChangeFailure, ExecutionResult
from github_labeler.labels.validator import validate_changes

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def execute_change(client: LabelClientBase, cache: LabelCache, change: Change) -> None:
    """Execute a single change and record its outcome in the cache."""
    label = change.label
    if change.type == ChangeType.ADD:
        created = client.create_label(change.repo, label.name, label.color)
        cache.apply(change.repo, created.name, created)
    elif change.type == ChangeType.UPDATE:
        updated = client.update_label(change.repo, label.name, new_name=label.new_name or label.name, color=label.color)
        if updated.key != label.key:
            cache.apply(change.repo, label.name, None)
        cache.apply(change.repo, updated.name, updated)
    elif change.type == ChangeType.DELETE:
        client.delete_label(change.repo, label.name)
        cache.apply(change.repo, label.name, None)


def execute_changes(client: LabelClientBase, cache: LabelCache, changes: Sequence[Change]) -> ExecutionResult:
    """Validate and execute a list of changes one after the other.

    Nothing is executed if the remaining rate limit cannot cover every
    change. Execution stops at the first change that raises;
    that change is reported as failed, the cache entry it would have
    touched is left unchanged, and the remaining changes are reported as
    not attempted.
    """
    logger.debug("Executing changes", change_count=len(changes))

    if not is_remaining_call_budget_sufficient(client, len(changes)):
        logger.error("Remaining rate limit is not enough to make all changes. Wait for the limit to refresh and try again.")
        return ExecutionResult(budget_exceeded=True)

    validated_changes = validate_changes(changes)
    result = ExecutionResult()
    for index, change in enumerate(validated_changes):
        logger.debug("Executing change", change=str(change))
        try:
            execute_change(client, cache, change)
        except Exception as exc:
            logger.error("Change failed, halting execution", change=str(change), error=str(exc))
            result.failed.append(ChangeFailure(change, exc))
            result.not_attempted.extend(validated_changes[index + 1 :])
            break
        logger.debug("Change succeeded", change=str(change))
        result.succeeded.append(change)

    logger.info(
        "Done executing changes",
        succeeded=len(result.succeeded),
        failed=len(result.failed),
        not_attempted=len(result.not_attempted),
    )
    return result
