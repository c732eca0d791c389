"""Contains utility functions for reading and writing label definition files."""

from pathlib import Path
from typing import Sequence

import structlog
from ruamel.yaml import YAML

from github_labeler.labels.models import Label
from github_labeler.schemas.labels_file import LabelsFileModel

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

yaml = YAML(typ="safe")


def load_labels_file(path: Path) -> LabelsFileModel:
    """Load and validate a labels file.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the file does not match the labels schema.
    """
    if not path.exists():
        raise FileNotFoundError(f"Labels file not found: {path.absolute()}")
    with open(path, encoding="utf-8") as f:
        data = yaml.load(f)
    labels_file = LabelsFileModel.model_validate(data or {})
    logger.debug("Loaded labels file", path=str(path), label_count=len(labels_file.labels))
    return labels_file


def create_yaml_dumper() -> YAML:
    """Creates a YAML object for dumping label files in block style."""
    yaml_dumper = YAML()
    yaml_dumper.default_flow_style = False
    yaml_dumper.explicit_start = True
    yaml_dumper.indent(mapping=2, sequence=4, offset=2)  # type: ignore[attr-defined]
    return yaml_dumper


def dump_labels_file(labels: Sequence[Label], path: Path, repositories: Sequence[str] | None = None) -> None:
    """Write labels, and optionally the repositories they apply to, to a labels file."""
    labels_file = LabelsFileModel(repositories=list(repositories or []), labels=list(labels))
    data = labels_file.model_dump(mode="json", exclude_none=True, exclude_defaults=True)
    # Color and name are the point of the file, so they are always written.
    data["labels"] = [label.model_dump(mode="json", exclude_none=True) for label in labels_file.labels]
    with open(path, "w", encoding="utf-8") as f:
        create_yaml_dumper().dump(data, f)
