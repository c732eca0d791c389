"""Fixtures for unit tests."""

from typing import Generator
from unittest.mock import MagicMock

import pytest
import structlog

from github_labeler.github.abc import LabelClientBase
from github_labeler.labels.models import Label


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def remote_labels() -> dict[str, list[Label]]:
    """Labels currently on GitHub, per repository."""
    return {
        "org/repo": [Label(name="bug", color="fc2929")],
        "src/repo": [Label(name="bug", color="fc2929"), Label(name="ui", color="00ff00")],
        "dst/repo": [],
    }


@pytest.fixture
def client(remote_labels: dict[str, list[Label]]) -> MagicMock:
    """A label client serving remote_labels, echoing mutations back, with plenty of rate limit."""
    mock = MagicMock(spec=LabelClientBase)
    mock.remaining_call_budget.return_value = 5000
    mock.list_labels.side_effect = lambda repo: list(remote_labels.get(repo, []))
    mock.create_label.side_effect = lambda repo, name, color: Label(name=name, color=color)
    mock.update_label.side_effect = lambda repo, name, new_name=None, color=None: Label(name=new_name or name, color=color)
    mock.delete_label.return_value = True
    return mock
