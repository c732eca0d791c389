"""Label client adapter for the githubkit library."""

from functools import wraps
from pathlib import Path
from typing import Any, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestError, RequestFailed
from githubkit.versions.latest.models import Label as GitHubLabel
from githubkit.versions.latest.models import RateLimitOverview

from github_labeler.configuration.models import GitHubAuthenticationType
from github_labeler.exceptions import GitHubLabelerAuthenticationError, GitHubLabelerError, RemoteOperationError, RepositoryNotFoundError
from github_labeler.labels.models import Label
from github_labeler.utils.github import split_repository_name
from github_labeler.utils.retry import retry_on_rate_limit

from .abc import LabelClientBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _error_message(exc: RequestFailed) -> str:
    """Extract GitHub's error message and validation errors from a failed response."""
    try:
        error_data = exc.response.json()
    except ValueError:
        error_data = {}
    if not isinstance(error_data, dict):
        error_data = {}
    message = error_data.get("message", str(exc))
    errors = error_data.get("errors", [])
    if errors:
        return f"{message} | errors: {errors}"
    return message


def handle_github_errors(operation: str) -> Callable[[F], F]:
    """Decorator translating githubkit request failures into labeler exceptions.

    The decorated method must take the repository and, for single-label
    operations, the label name as its first two arguments.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(self: Any, repo: str, *args: Any, **kwargs: Any) -> Any:
            try:
                return func(self, repo, *args, **kwargs)
            except RequestFailed as exc:
                status_code = exc.response.status_code
                message = _error_message(exc)
                logger.error(
                    "GitHub request failed",
                    function=func.__name__,
                    repo=repo,
                    status_code=status_code,
                    message=message,
                    url=getattr(exc.response, "url", None),
                )
                if status_code == 401:
                    raise GitHubLabelerAuthenticationError(f"GitHub rejected the credentials: {message}") from exc
                if operation == "list":
                    if status_code == 404:
                        raise RepositoryNotFoundError(repo) from exc
                    raise GitHubLabelerError(f"Failed to list labels of {repo}: {message}") from exc
                label_name = args[0] if args else kwargs.get("name", "")
                raise RemoteOperationError(operation, repo, label_name, message) from exc
            except RequestError as exc:
                message = str(exc.exc)
                logger.error("GitHub request could not be completed", function=func.__name__, repo=repo, message=message)
                if operation == "list":
                    raise GitHubLabelerError(f"Failed to list labels of {repo}: {message}") from exc
                label_name = args[0] if args else kwargs.get("name", "")
                raise RemoteOperationError(operation, repo, label_name, message) from exc

        return wrapper  # type: ignore

    return decorator


class GitHubKitLabelAdapter(LabelClientBase):
    """Label client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient) -> None:
        """Initialize the adapter with an already-initialized client."""
        self.client = client

    def _omit_null_parameters(self, **kwargs: Any) -> dict[str, Any]:
        """Omit parameters that are None."""
        return {k: v for k, v in kwargs.items() if v is not None}

    @staticmethod
    def _to_label(github_label: GitHubLabel) -> Label:
        return Label(name=github_label.name, color=github_label.color)

    @classmethod
    def create(
        cls,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = "https://api.github.com",
    ) -> Self:
        """Create a new label client adapter.

        Args:
            github_auth_type: Type of authentication (PAT or APP)
            github_pat_token: Personal access token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_app_installation_id: Installation ID (required for APP auth)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitLabelAdapter instance
        """
        logger.info("Creating client for GitHub instance", github_api_url=github_api_url, github_auth_type=github_auth_type.value)
        client = get_github_client(
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
        )
        return cls(client)

    @handle_github_errors("list")
    @retry_on_rate_limit()
    def list_labels(self, repo: str, per_page: int = 100) -> list[Label]:
        """List all labels for a repository, handling pagination."""
        owner, repo_name = split_repository_name(repo)
        all_labels: list[Label] = []
        page: int = 1
        while True:
            response: Response[list[GitHubLabel]] = self.client.rest.issues.list_labels_for_repo(
                owner=owner,
                repo=repo_name,
                per_page=per_page,
                page=page,
            )
            labels: list[GitHubLabel] = response.parsed_data
            if not labels:
                break
            all_labels.extend(self._to_label(label) for label in labels)
            if len(labels) < per_page:
                break
            page += 1
        return all_labels

    @handle_github_errors("create")
    @retry_on_rate_limit()
    def create_label(self, repo: str, name: str, color: str | None) -> Label:
        """Create a label for a repository."""
        owner, repo_name = split_repository_name(repo)
        params = self._omit_null_parameters(name=name, color=color)
        response: Response[GitHubLabel] = self.client.rest.issues.create_label(owner=owner, repo=repo_name, **params)
        return self._to_label(response.parsed_data)

    @handle_github_errors("update")
    @retry_on_rate_limit()
    def update_label(self, repo: str, name: str, new_name: str | None = None, color: str | None = None) -> Label:
        """Update the name and/or color of a label for a repository."""
        owner, repo_name = split_repository_name(repo)
        params = self._omit_null_parameters(new_name=new_name, color=color)
        response: Response[GitHubLabel] = self.client.rest.issues.update_label(owner=owner, repo=repo_name, name=name, **params)
        return self._to_label(response.parsed_data)

    @handle_github_errors("delete")
    @retry_on_rate_limit()
    def delete_label(self, repo: str, name: str) -> bool:
        """Delete a label for a repository."""
        owner, repo_name = split_repository_name(repo)
        response = self.client.rest.issues.delete_label(owner=owner, repo=repo_name, name=name)
        return response.status_code == 204

    def remaining_call_budget(self) -> int:
        """Number of core API calls left before the rate limit resets."""
        try:
            response: Response[RateLimitOverview] = self.client.rest.rate_limit.get()
        except RequestFailed as exc:
            if exc.response.status_code == 401:
                raise GitHubLabelerAuthenticationError(f"GitHub rejected the credentials: {_error_message(exc)}") from exc
            raise GitHubLabelerError(f"Failed to read the remaining rate limit: {_error_message(exc)}") from exc
        except RequestError as exc:
            raise GitHubLabelerError(f"Failed to read the remaining rate limit: {exc.exc}") from exc
        return response.parsed_data.resources.core.remaining
