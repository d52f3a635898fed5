"""Real time implementation using the system clock."""

from datetime import UTC, datetime

from depmerge.core.time.abc import Time


class RealTime(Time):
    """Production implementation using datetime.now()."""

    def now(self) -> datetime:
        """Get the current UTC time."""
        return datetime.now(UTC)
