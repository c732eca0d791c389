"""Contains results of executing label changes."""

from github_labeler.labels.models import Change


class ChangeFailure:
    """A change whose remote call failed, together with the error raised."""

    def __init__(self, change: Change, error: Exception) -> None:
        """Initialize the failure with the change and the error."""
        self.change = change
        self.error = error


class ExecutionResult:
    """Contains the outcome of executing a list of changes.

    Execution halts at the first failed change, so succeeded, failed, and
    not_attempted together hold every validated change exactly once.
    """

    def __init__(
        self,
        succeeded: list[Change] | None = None,
        failed: list[ChangeFailure] | None = None,
        not_attempted: list[Change] | None = None,
        budget_exceeded: bool = False,
    ) -> None:
        """Initialize the result with the changes in each outcome."""
        self.succeeded = succeeded or []
        self.failed = failed or []
        self.not_attempted = not_attempted or []
        self.budget_exceeded = budget_exceeded

    @property
    def attempted(self) -> list[Change]:
        """Changes for which a remote call was made, in execution order."""
        return self.succeeded + [failure.change for failure in self.failed]

    @property
    def ok(self) -> bool:
        """Whether every change was executed successfully."""
        return not self.budget_exceeded and not self.failed and not self.not_attempted
