"""Unit tests for the command line interface."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch
from typer.testing import CliRunner

from github_labeler.configuration.cli import typer_app
from github_labeler.exceptions import GitHubLabelerError, RemoteOperationError
from github_labeler.labels.models import Label
from github_labeler.utils.yaml import load_labels_file

runner = CliRunner()

LABELS_YAML = """
repositories:
  - org/repo
labels:
  - name: bug
    color: "000000"
  - name: ui
    color: 00ff00
"""


@pytest.fixture(autouse=True)
def cli_environment(monkeypatch: MonkeyPatch, tmp_path: Path, client: MagicMock) -> None:
    """Run commands against the mocked client, without any credentials or .env file from the environment."""
    for name in ("DEBUG", "GITHUB_PAT_TOKEN", "GITHUB_APP_ID", "GITHUB_APP_PRIVATE_KEY_PATH", "GITHUB_APP_INSTALLATION_ID", "GITHUB_API_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("github_labeler.configuration.cli.configure_logging", lambda verbose: None)
    monkeypatch.setattr("github_labeler.configuration.cli.GitHubKitLabelAdapter.create", MagicMock(return_value=client))


@pytest.fixture
def labels_file(tmp_path: Path) -> Path:
    """A labels file applying two labels to org/repo."""
    path = tmp_path / "labels.yaml"
    path.write_text(LABELS_YAML, encoding="utf-8")
    return path


def test_add_dry_run(client: MagicMock, labels_file: Path) -> None:
    """Test that a dry run prints the planned changes without executing them."""
    result = runner.invoke(typer_app, ["--github-pat-token", "token", "add", str(labels_file), "--dry-run"])
    assert result.exit_code == 0, result.output
    assert "Planned 2 change(s):" in result.output
    assert "org/repo - update - bug - color: 000000" in result.output
    assert "org/repo - add - ui - color: 00ff00" in result.output
    client.create_label.assert_not_called()
    client.update_label.assert_not_called()


def test_add_executes_changes(client: MagicMock, labels_file: Path) -> None:
    """Test that planned changes are executed and reported."""
    result = runner.invoke(typer_app, ["--github-pat-token", "token", "add", str(labels_file)])
    assert result.exit_code == 0, result.output
    assert "Applied: org/repo - add - ui" in result.output
    client.create_label.assert_called_once_with("org/repo", "ui", "00ff00")
    client.update_label.assert_called_once_with("org/repo", "bug", new_name="bug", color="000000")


def test_repositories_on_command_line_override_file(client: MagicMock, labels_file: Path) -> None:
    """Test that repositories given on the command line replace those of the labels file."""
    result = runner.invoke(typer_app, ["--github-pat-token", "token", "delete", str(labels_file), "src/repo", "--dry-run"])
    assert result.exit_code == 0, result.output
    assert "src/repo - delete - bug" in result.output
    assert "src/repo - delete - ui" in result.output
    assert [call.args[0] for call in client.list_labels.call_args_list] == ["src/repo"]


def test_no_changes_needed(labels_file: Path) -> None:
    """Test the output when every repository already matches."""
    result = runner.invoke(typer_app, ["--github-pat-token", "token", "delete", str(labels_file), "dst/repo"])
    assert result.exit_code == 0, result.output
    assert "No changes needed." in result.output


def test_failed_change_exits_with_error(client: MagicMock, labels_file: Path) -> None:
    """Test that a failed change is reported and makes the command fail."""
    client.update_label.side_effect = RemoteOperationError("update", "org/repo", "bug", "Validation Failed")
    result = runner.invoke(typer_app, ["--github-pat-token", "token", "add", str(labels_file)])
    assert result.exit_code == 1
    assert "Failed: org/repo - update - bug" in result.output
    assert "Not attempted: org/repo - add - ui" in result.output


def test_insufficient_budget_exits_with_error(client: MagicMock, labels_file: Path) -> None:
    """Test that an exhausted rate limit makes the command fail before planning."""
    client.remaining_call_budget.return_value = 0
    result = runner.invoke(typer_app, ["--github-pat-token", "token", "recolor", str(labels_file)])
    assert result.exit_code == 1
    assert "Remaining rate limit is not enough" in result.output
    client.list_labels.assert_not_called()


def test_missing_credentials(labels_file: Path) -> None:
    """Test that the command fails when no authentication is configured."""
    result = runner.invoke(typer_app, ["add", str(labels_file)])
    assert result.exit_code == 1
    assert "No GitHub authentication configuration provided" in result.output


def test_missing_repositories(tmp_path: Path) -> None:
    """Test that the command fails when no repository is given anywhere."""
    path = tmp_path / "no-repos.yaml"
    path.write_text("labels:\n  - name: bug\n    color: fc2929\n", encoding="utf-8")
    result = runner.invoke(typer_app, ["--github-pat-token", "token", "add", str(path)])
    assert result.exit_code == 1
    assert "No repositories given" in result.output


def test_rename(client: MagicMock, tmp_path: Path) -> None:
    """Test that labels are renamed to their new_name."""
    path = tmp_path / "rename.yaml"
    path.write_text("labels:\n  - name: bug\n    new_name: defect\n", encoding="utf-8")
    result = runner.invoke(typer_app, ["--github-pat-token", "token", "rename", str(path), "org/repo"])
    assert result.exit_code == 0, result.output
    client.update_label.assert_called_once_with("org/repo", "bug", new_name="defect", color=None)


def test_duplicate(client: MagicMock) -> None:
    """Test that every label of the source repository is added to the target repositories."""
    result = runner.invoke(typer_app, ["--github-pat-token", "token", "duplicate", "src/repo", "dst/repo"])
    assert result.exit_code == 0, result.output
    assert client.create_label.call_count == 2
    client.create_label.assert_any_call("dst/repo", "bug", "fc2929")
    client.create_label.assert_any_call("dst/repo", "ui", "00ff00")


def test_export(tmp_path: Path) -> None:
    """Test that the labels of a repository are written to a labels file."""
    output_file = tmp_path / "exported.yaml"
    result = runner.invoke(typer_app, ["--github-pat-token", "token", "export", "src/repo", str(output_file)])
    assert result.exit_code == 0, result.output
    assert "Exported 2 label(s) from src/repo" in result.output
    assert load_labels_file(output_file).labels == [Label(name="bug", color="fc2929"), Label(name="ui", color="00ff00")]


def test_debug_setting_enables_verbose_logging(monkeypatch: MonkeyPatch, labels_file: Path) -> None:
    """Test that DEBUG from the environment turns on debug logging like --verbose."""
    configure_logging = MagicMock()
    monkeypatch.setattr("github_labeler.configuration.cli.configure_logging", configure_logging)
    monkeypatch.setenv("DEBUG", "true")
    result = runner.invoke(typer_app, ["--github-pat-token", "token", "add", str(labels_file), "--dry-run"])
    assert result.exit_code == 0, result.output
    configure_logging.assert_called_with(verbose=True)


def test_unreadable_rate_limit_exits_with_error(client: MagicMock, labels_file: Path) -> None:
    """Test that a failure to read the rate limit at start-up is reported without a traceback."""
    client.remaining_call_budget.side_effect = GitHubLabelerError("Failed to read the remaining rate limit: Service Unavailable")
    result = runner.invoke(typer_app, ["--github-pat-token", "token", "add", str(labels_file)])
    assert result.exit_code == 1
    assert "Service Unavailable" in result.output
