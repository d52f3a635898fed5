from depmerge.core.build.abc import Build
from depmerge.core.build.fake import FakeBuild
from depmerge.core.build.real import RealBuild

__all__ = ["Build", "FakeBuild", "RealBuild"]
