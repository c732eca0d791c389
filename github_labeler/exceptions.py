"""Contains exceptions raised while planning and executing label changes."""


class GitHubLabelerError(Exception):
    """Base class for all label synchronization errors."""

    pass


class GitHubLabelerAuthenticationError(GitHubLabelerError):
    """Raised when GitHub rejects the configured credentials."""

    pass


class RepositoryNotFoundError(GitHubLabelerError):
    """Raised when a repository does not exist or is not visible to the credentials."""

    def __init__(self, repo: str) -> None:
        """Initializes the exception with the name of the missing repository."""
        super().__init__(f"Repository not found: {repo}")
        self.repo = repo


class RemoteOperationError(GitHubLabelerError):
    """Raised when a single create, update, or delete call against GitHub fails."""

    def __init__(self, operation: str, repo: str, label_name: str, message: str) -> None:
        """Initializes the exception with the failed operation and GitHub's message."""
        super().__init__(f"Failed to {operation} label '{label_name}' in {repo}: {message}")
        self.operation = operation
        self.repo = repo
        self.label_name = label_name
        self.message = message

