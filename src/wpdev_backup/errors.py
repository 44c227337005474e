"""Error taxonomy for the backup orchestrator.

Every error raised on purpose by this package derives from
``WpdevBackupError`` so callers (and the CLI) can map them to a
non-zero exit status in one place.
"""

from collections.abc import Sequence


class WpdevBackupError(Exception):
    """Base class for all orchestrator errors."""


class ConfigurationError(WpdevBackupError):
    """Raised when configuration is missing or invalid."""


class ReadinessTimeout(WpdevBackupError):
    """Raised when a readiness probe did not succeed before the timeout."""

    def __init__(self, description: str, timeout: float, attempts: int) -> None:
        super().__init__(
            f"Timeout waiting for {description} to be ready "
            f"({attempts} attempts in {timeout:g}s)"
        )
        self.description = description
        self.timeout = timeout
        self.attempts = attempts


class ExternalCommandFailure(WpdevBackupError):
    """An external tool (docker, wp, mysqldump, ...) could not be run or failed.

    Attributes:
        argv: The command that was run (secrets already masked).
        returncode: Exit status, or ``None`` when the process never ran
            (binary missing, timeout).
        stderr: Captured standard error, stripped.
    """

    def __init__(
        self,
        message: str,
        argv: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr


class ProbeFailed(WpdevBackupError):
    """The sentinel row-count probe failed and fail-open is disabled."""


class NoBackupAvailable(WpdevBackupError):
    """No backup artifact exists in the backup directory."""


class ArtifactCollision(WpdevBackupError):
    """A backup artifact with the same timestamped name already exists."""
