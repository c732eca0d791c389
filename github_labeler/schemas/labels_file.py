"""Pydantic schema for YAML files declaring labels."""

from pydantic import BaseModel

from github_labeler.labels.models import Label


class LabelsFileModel(BaseModel):
    """Pydantic model for a list of labels and the repositories they apply to."""

    repositories: list[str] = []
    labels: list[Label]
