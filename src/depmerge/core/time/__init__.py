from depmerge.core.time.abc import Time
from depmerge.core.time.fake import FakeTime
from depmerge.core.time.real import RealTime

__all__ = ["FakeTime", "RealTime", "Time"]
