"""Fake Time implementation for testing.

FakeTime returns a fixed instant, enabling deterministic branch names.
"""

from datetime import UTC, datetime

from depmerge.core.time.abc import Time


class FakeTime(Time):
    """In-memory fake implementation that always reports the same instant.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(self, current: datetime | None = None) -> None:
        """Create FakeTime frozen at `current` (defaults to 2024-01-15 UTC)."""
        self._current = current if current is not None else datetime(2024, 1, 15, tzinfo=UTC)

    def now(self) -> datetime:
        """Return the configured instant."""
        return self._current
