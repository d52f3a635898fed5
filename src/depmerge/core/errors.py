"""Error taxonomy for depmerge.

Only ConflictUnresolved is recovered locally (the orchestrator records the
candidate as failed and moves on). Every other error propagates to the CLI
boundary and aborts the current control operation, leaving the persisted
workflow state exactly as it was last written.
"""


class DepmergeError(Exception):
    """Base class for all errors raised by depmerge."""


class ManifestParseError(DepmergeError):
    """A manifest or a version requirement inside it could not be parsed."""


class ExternalToolFailure(DepmergeError, RuntimeError):
    """A git, gh or build invocation exited with a non-zero status.

    Attributes:
        operation: Human-readable name of the operation that failed
    """

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        super().__init__(message if message is not None else f"Failed to {operation}")


class StateError(DepmergeError):
    """The workflow state file is missing, already present, or unreadable."""


class ConflictUnresolved(DepmergeError):
    """Conflict resolution for a single candidate was abandoned or failed validation.

    Attributes:
        candidate: Branch name of the candidate being merged
    """

    def __init__(self, candidate: str, reason: str) -> None:
        self.candidate = candidate
        self.reason = reason
        super().__init__(f"Could not resolve conflicts for '{candidate}': {reason}")


class ConfigError(DepmergeError):
    """The repository configuration file is malformed."""
