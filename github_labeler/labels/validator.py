"""Contains validation of change lists before they are executed."""

from collections import defaultdict
from typing import Sequence

import structlog

from github_labeler.labels.models import Change, ChangeType

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

# Deletes run first so that names they free can be reused by renames and
# additions in the same repository.
CHANGE_TYPE_ORDER: dict[ChangeType, int] = {
    ChangeType.DELETE: 0,
    ChangeType.UPDATE: 1,
    ChangeType.ADD: 2,
}


def _sort_key(change: Change) -> tuple[str, int, str, str, str, str]:
    label = change.label
    return (change.repo, CHANGE_TYPE_ORDER[change.type], label.key, label.name, label.color or "", label.new_name or "")


def _touched_label_keys(change: Change) -> set[str]:
    keys = {change.label.key}
    if change.label.new_name:
        keys.add(change.label.new_name.lower())
    return keys


def find_conflicting_changes(changes: Sequence[Change]) -> dict[tuple[str, str], list[Change]]:
    """Group changes that touch the same label of the same repository.

    Returns only the groups with more than one change, keyed by repository
    and lower-cased label name.
    """
    changes_by_label: dict[tuple[str, str], list[Change]] = defaultdict(list)
    for change in changes:
        for key in _touched_label_keys(change):
            changes_by_label[(change.repo, key)].append(change)
    return {label_key: grouped for label_key, grouped in changes_by_label.items() if len(grouped) > 1}


def validate_changes(changes: Sequence[Change]) -> list[Change]:
    """Normalize a list of changes into a deterministic order that is safe to execute.

    Exact duplicates are collapsed into one change. Changes that conflict
    with each other are kept and reported, since either may be intended.
    The result is ordered by repository, then by change type (deletes,
    updates, additions), then by label.
    """
    unique_changes: list[Change] = []
    seen: set[Change] = set()
    for change in changes:
        if change in seen:
            logger.warning("Dropping duplicate change", change=str(change))
            continue
        seen.add(change)
        unique_changes.append(change)

    for (repo, label_key), conflicting in find_conflicting_changes(unique_changes).items():
        logger.warning(
            "Multiple changes touch the same label",
            repo=repo,
            label_name=label_key,
            changes=[str(change) for change in conflicting],
        )

    return sorted(unique_changes, key=_sort_key)
