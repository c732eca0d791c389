"""Defines the Command Line Interface (CLI) using Typer."""

import logging
import sys
from pathlib import Path

import structlog
import typer
from pydantic import ValidationError
from typer import Argument, Option
from typing_extensions import Annotated

from github_labeler.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError
from github_labeler.configuration.reconcile import reconcile_github_configuration
from github_labeler.exceptions import GitHubLabelerError
from github_labeler.github.adapter import GitHubKitLabelAdapter
from github_labeler.labeler import GitHubLabeler
from github_labeler.labels.models import Change, Label
from github_labeler.labels.planner import PlanType
from github_labeler.utils.yaml import dump_labels_file, load_labels_file

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Synchronize GitHub labels across repositories.")

RepositoriesArgument = Annotated[
    list[str] | None,
    Argument(help="Repositories (owner/repo) to apply the labels to. Overrides the repositories listed in the labels file."),
]
DryRunOption = Annotated[bool, Option("--dry-run", help="Only print the planned changes without executing them.")]


def configure_logging(verbose: bool) -> None:
    """Send structlog output to stderr, showing debug messages only when verbose."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if verbose else logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


@typer_app.callback()
def main_callback(
    ctx: typer.Context,
    github_api_url: Annotated[str | None, Option(help="GitHub API URL. Defaults to GITHUB_API_URL or https://api.github.com.")] = None,
    github_pat_token: Annotated[str | None, Option(help="GitHub Personal Access Token. Defaults to GITHUB_PAT_TOKEN.")] = None,
    github_app_id: Annotated[int | None, Option(help="GitHub App ID. Defaults to GITHUB_APP_ID.")] = None,
    github_app_private_key_path: Annotated[
        Path | None, Option(help="Path to GitHub App private key. Defaults to GITHUB_APP_PRIVATE_KEY_PATH.")
    ] = None,
    github_app_installation_id: Annotated[int | None, Option(help="GitHub App Installation ID. Defaults to GITHUB_APP_INSTALLATION_ID.")] = None,
    verbose: Annotated[bool, Option("--verbose", "-v", help="Log debugging information.")] = False,
) -> None:
    """Synchronize GitHub labels across repositories."""
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["cli_debug"] = verbose
    ctx.obj["cli_github_api_url"] = github_api_url
    ctx.obj["cli_github_pat_token"] = github_pat_token
    ctx.obj["cli_github_app_id"] = github_app_id
    ctx.obj["cli_github_app_private_key_path"] = github_app_private_key_path
    ctx.obj["cli_github_app_installation_id"] = github_app_installation_id


def create_labeler(ctx: typer.Context) -> GitHubLabeler:
    """Build a labeler from the reconciled configuration, exiting on invalid credentials."""
    try:
        config = reconcile_github_configuration(**ctx.obj)
    except GitHubAuthenticationConfigurationUndefinedError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    if config.debug:
        configure_logging(verbose=True)

    client = GitHubKitLabelAdapter.create(
        github_auth_type=config.github_authentication_type,
        github_pat_token=config.github_pat_token,
        github_app_id=config.github_app_id,
        github_app_private_key_path=config.github_app_private_key_path,
        github_app_installation_id=config.github_app_installation_id,
        github_api_url=config.github_api_url,
    )
    try:
        return GitHubLabeler.create(client)
    except GitHubLabelerError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def load_labels_and_repositories(labels_file: Path, repos: list[str] | None) -> tuple[list[Label], list[str]]:
    """Load the labels file and work out which repositories it applies to."""
    try:
        labels_file_model = load_labels_file(labels_file)
    except (FileNotFoundError, ValidationError) as exc:
        typer.echo(f"Error loading labels file: {exc}", err=True)
        raise typer.Exit(1) from exc

    repositories = repos or labels_file_model.repositories
    if not repositories:
        typer.echo("No repositories given on the command line or in the labels file.", err=True)
        raise typer.Exit(1)
    return labels_file_model.labels, repositories


def run_changes(labeler: GitHubLabeler, changes: list[Change] | None, dry_run: bool) -> None:
    """Print planned changes and execute them unless this is a dry run."""
    if changes is None:
        typer.echo("Remaining rate limit is not enough to process all repositories. Wait for the limit to refresh and try again.", err=True)
        raise typer.Exit(1)
    if not changes:
        typer.echo("No changes needed.")
        return

    validated_changes = labeler.validate_changes(changes)
    typer.echo(f"Planned {len(validated_changes)} change(s):")
    for change in validated_changes:
        typer.echo(f"  {change}")
    if dry_run:
        return

    result = labeler.execute_changes(validated_changes)
    if result.budget_exceeded:
        typer.echo("Remaining rate limit is not enough to make all changes. Wait for the limit to refresh and try again.", err=True)
        raise typer.Exit(1)
    for change in result.succeeded:
        typer.echo(f"Applied: {change}")
    for failure in result.failed:
        typer.echo(f"Failed: {failure.change} ({failure.error})", err=True)
    for change in result.not_attempted:
        typer.echo(f"Not attempted: {change}", err=True)
    if not result.ok:
        raise typer.Exit(1)


def plan_and_run(ctx: typer.Context, labels_file: Path, repos: list[str] | None, plan_type: PlanType, dry_run: bool) -> None:
    """Plan one kind of label request from a labels file and run the resulting changes."""
    labels, repositories = load_labels_and_repositories(labels_file, repos)
    labeler = create_labeler(ctx)
    try:
        changes = labeler.plan_labels_for_repos(repositories, labels, plan_type)
    except GitHubLabelerError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    run_changes(labeler, changes, dry_run)


@typer_app.command(name="add")
def add_cli(
    ctx: typer.Context,
    labels_file: Annotated[Path, Argument(help="Path to YAML file declaring the labels.")],
    repos: RepositoriesArgument = None,
    dry_run: DryRunOption = False,
) -> None:
    """Add labels to repositories, correcting the color of labels that already exist."""
    plan_and_run(ctx, labels_file, repos, PlanType.ADD, dry_run)


@typer_app.command(name="delete")
def delete_cli(
    ctx: typer.Context,
    labels_file: Annotated[Path, Argument(help="Path to YAML file declaring the labels.")],
    repos: RepositoriesArgument = None,
    dry_run: DryRunOption = False,
) -> None:
    """Delete labels from repositories."""
    plan_and_run(ctx, labels_file, repos, PlanType.DELETE, dry_run)


@typer_app.command(name="rename")
def rename_cli(
    ctx: typer.Context,
    labels_file: Annotated[Path, Argument(help="Path to YAML file declaring the labels and their new_name.")],
    repos: RepositoriesArgument = None,
    dry_run: DryRunOption = False,
) -> None:
    """Rename labels in repositories."""
    plan_and_run(ctx, labels_file, repos, PlanType.RENAME, dry_run)


@typer_app.command(name="recolor")
def recolor_cli(
    ctx: typer.Context,
    labels_file: Annotated[Path, Argument(help="Path to YAML file declaring the labels.")],
    repos: RepositoriesArgument = None,
    dry_run: DryRunOption = False,
) -> None:
    """Change the color of labels in repositories."""
    plan_and_run(ctx, labels_file, repos, PlanType.RECOLOR, dry_run)


@typer_app.command(name="duplicate")
def duplicate_cli(
    ctx: typer.Context,
    source_repo: Annotated[str, Argument(help="Repository (owner/repo) to copy the labels from.")],
    repos: Annotated[list[str], Argument(help="Repositories (owner/repo) to copy the labels to.")],
    dry_run: DryRunOption = False,
) -> None:
    """Copy every label of one repository into other repositories."""
    labeler = create_labeler(ctx)
    try:
        changes = labeler.duplicate_labels_from_repo(source_repo, repos)
    except GitHubLabelerError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    run_changes(labeler, changes, dry_run)


@typer_app.command(name="export")
def export_cli(
    ctx: typer.Context,
    repo: Annotated[str, Argument(help="Repository (owner/repo) to export the labels of.")],
    output_file: Annotated[Path, Argument(help="Path of the YAML labels file to write.")],
) -> None:
    """Write the labels of a repository to a labels file."""
    labeler = create_labeler(ctx)
    try:
        labels = labeler.export_labels_from_repo(repo)
    except GitHubLabelerError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    dump_labels_file(labels, output_file)
    typer.echo(f"Exported {len(labels)} label(s) from {repo} to {output_file}")


if __name__ == "__main__":
    typer_app()
