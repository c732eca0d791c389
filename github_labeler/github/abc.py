"""Base ABC for label clients."""

from abc import ABC, abstractmethod

from github_labeler.labels.models import Label


class LabelClientBase(ABC):
    """Base ABC for clients able to read and mutate repository labels."""

    @abstractmethod
    def list_labels(self, repo: str) -> list[Label]:
        """List all labels of a repository."""
        pass

    @abstractmethod
    def create_label(self, repo: str, name: str, color: str | None) -> Label:
        """Create a label in a repository."""
        pass

    @abstractmethod
    def update_label(self, repo: str, name: str, new_name: str | None = None, color: str | None = None) -> Label:
        """Update the name and/or color of a label in a repository."""
        pass

    @abstractmethod
    def delete_label(self, repo: str, name: str) -> bool:
        """Delete a label from a repository."""
        pass

    @abstractmethod
    def remaining_call_budget(self) -> int:
        """Number of API calls that can still be made before being rate limited."""
        pass
