"""Reconcile GitHub authentication configuration."""

from pathlib import Path

from github_labeler.configuration.env import Settings, get_settings
from github_labeler.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError
from github_labeler.configuration.models import GitHubAuthenticationType, GitHubConfig

# (human readable name, command line option, environment variable)
GITHUB_APP_SETTINGS: tuple[tuple[str, str, str], ...] = (
    ("GitHub App ID", "--github-app-id", "GITHUB_APP_ID"),
    ("GitHub App private key path", "--github-app-private-key-path", "GITHUB_APP_PRIVATE_KEY_PATH"),
    ("GitHub App installation ID", "--github-app-installation-id", "GITHUB_APP_INSTALLATION_ID"),
)


def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Decide which GitHub authentication method the given settings describe.

    Exactly one of a PAT or a complete GitHub App configuration must be set.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If neither or both
            methods are configured, or the GitHub App configuration is incomplete.
    """
    app_values = (github_app_id, github_app_private_key_path, github_app_installation_id)

    if github_pat_token:
        if any(app_values):
            raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")
        return GitHubAuthenticationType.PAT

    if all(app_values):
        return GitHubAuthenticationType.APP

    if not any(app_values):
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a PAT or a GitHub App configuration."
        )

    missing = [
        f"{name} (command line option {cli_name}, environment variable {env_name})"
        for (name, cli_name, env_name), value in zip(GITHUB_APP_SETTINGS, app_values)
        if not value
    ]
    raise GitHubAuthenticationConfigurationUndefinedError("Incomplete GitHub App configuration - missing settings include " + ", ".join(missing))


def reconcile_github_configuration(
    cli_debug: bool = False,
    cli_github_api_url: str | None = None,
    cli_github_pat_token: str | None = None,
    cli_github_app_id: int | None = None,
    cli_github_app_private_key_path: Path | None = None,
    cli_github_app_installation_id: int | None = None,
    settings: Settings | None = None,
) -> GitHubConfig:
    """Merge command line options with environment settings, command line taking precedence."""
    if settings is None:
        settings = get_settings()

    github_pat_token = cli_github_pat_token or settings.GITHUB_PAT_TOKEN
    github_app_id = cli_github_app_id or settings.GITHUB_APP_ID
    github_app_private_key_path = cli_github_app_private_key_path or settings.GITHUB_APP_PRIVATE_KEY_PATH
    github_app_installation_id = cli_github_app_installation_id or settings.GITHUB_APP_INSTALLATION_ID

    github_authentication_type = validate_github_authentication_configuration(
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
    )
    return GitHubConfig(
        debug=cli_debug or settings.DEBUG,
        github_api_url=cli_github_api_url or settings.GITHUB_API_URL,
        github_authentication_type=github_authentication_type,
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
    )
