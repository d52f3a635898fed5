"""GitHub operations subpackage."""

from depmerge.core.github.abc import GitHub
from depmerge.core.github.fake import FakeGitHub
from depmerge.core.github.real import RealGitHub
from depmerge.core.github.types import CheckInfo, PullRequestInfo

__all__ = [
    "CheckInfo",
    "FakeGitHub",
    "GitHub",
    "PullRequestInfo",
    "RealGitHub",
]
