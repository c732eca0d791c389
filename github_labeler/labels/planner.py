"""Contains the decision logic turning a requested label into a change.

Every planner takes the repository name, the requested label, and the cached
labels of that repository (None if the repository was never refreshed, which
is treated the same as the label not existing). Planners never raise and
never talk to GitHub; they return a single Change or None when the repository
is already in the requested state.
"""

from enum import Enum
from functools import partial
from typing import Callable

import structlog

from github_labeler.labels.models import Change, ChangeType, Label, RepoLabelCache

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

Planner = Callable[[str, Label, RepoLabelCache | None], Change | None]


class PlanType(str, Enum):
    """Enum for the kinds of label request a batch can be planned for."""

    ADD = "add"
    DELETE = "delete"
    RENAME = "rename"
    RECOLOR = "recolor"


def _find_existing_label(name: str, existing: RepoLabelCache | None) -> Label | None:
    if existing is None:
        return None
    return existing.get(name.lower())


def _colors_differ(requested: str | None, current: str | None) -> bool:
    # A request without a color never asks for a color change.
    if requested is None:
        return False
    return requested.lower() != (current or "").lower()


def plan_add(repo: str, label: Label, existing: RepoLabelCache | None) -> Change | None:
    """Plan the creation of a label, correcting it if it already exists."""
    existing_label = _find_existing_label(label.name, existing)
    if existing_label is None:
        return Change(type=ChangeType.ADD, repo=repo, label=label)

    if _colors_differ(label.color, existing_label.color) or existing_label.name != label.name:
        logger.warning("Label already exists, creating an update", repo=repo, label_name=label.name)
        return Change(type=ChangeType.UPDATE, repo=repo, label=label)

    logger.warning("Label already exists and is the same, no change created", repo=repo, label_name=label.name)
    return None


def plan_delete(repo: str, label: Label, existing: RepoLabelCache | None) -> Change | None:
    """Plan the deletion of a label if it exists."""
    if _find_existing_label(label.name, existing) is not None:
        return Change(type=ChangeType.DELETE, repo=repo, label=label)

    logger.warning("Label doesn't exist, no change created", repo=repo, label_name=label.name)
    return None


def plan_rename(repo: str, label: Label, existing: RepoLabelCache | None, *, create_missing: bool = True) -> Change | None:
    """Plan renaming a label to its new_name.

    When the label to rename does not exist and create_missing is set, the
    rename is planned as the addition of a label named new_name instead.
    """
    if not label.new_name or label.new_name == label.name:
        logger.warning("Label has no new name to rename to, no change created", repo=repo, label_name=label.name)
        return None

    existing_label = _find_existing_label(label.name, existing)
    if existing_label is None:
        if not create_missing:
            logger.warning("Label doesn't exist, no change created", repo=repo, label_name=label.name)
            return None
        logger.warning("Label doesn't exist, creating a create change", repo=repo, label_name=label.name, new_name=label.new_name)
        # Planned as an addition of new_name, so an existing new_name is updated or left alone rather than created twice
        return plan_add(repo, Label(name=label.new_name, color=label.color), existing)

    if existing_label.name == label.new_name and not _colors_differ(label.color, existing_label.color):
        logger.warning("Label exists and is the same, no change created", repo=repo, label_name=label.name)
        return None

    return Change(type=ChangeType.UPDATE, repo=repo, label=label)


def plan_recolor(repo: str, label: Label, existing: RepoLabelCache | None, *, create_missing: bool = True) -> Change | None:
    """Plan changing the color of a label.

    When the label does not exist and create_missing is set, it is planned
    for creation with the requested color instead.
    """
    existing_label = _find_existing_label(label.name, existing)
    if existing_label is None:
        if not create_missing:
            logger.warning("Label doesn't exist, no change created", repo=repo, label_name=label.name)
            return None
        logger.warning("Label doesn't exist, creating a create change", repo=repo, label_name=label.name)
        return Change(type=ChangeType.ADD, repo=repo, label=label)

    if _colors_differ(label.color, existing_label.color):
        return Change(type=ChangeType.UPDATE, repo=repo, label=label)

    logger.warning("Label exists and is the same, no change created", repo=repo, label_name=label.name)
    return None


def get_planner(plan_type: PlanType, create_missing: bool = True) -> Planner:
    """Return the planner for a plan type, bound to the missing-label policy."""
    if plan_type == PlanType.ADD:
        return plan_add
    elif plan_type == PlanType.DELETE:
        return plan_delete
    elif plan_type == PlanType.RENAME:
        return partial(plan_rename, create_missing=create_missing)
    elif plan_type == PlanType.RECOLOR:
        return partial(plan_recolor, create_missing=create_missing)
    raise ValueError(f"Unknown plan type: {plan_type}")
