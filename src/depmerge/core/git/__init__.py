"""Git operations subpackage.

This subpackage provides abstractions over git operations with support for
testing via fakes.
"""

from depmerge.core.git.abc import Git
from depmerge.core.git.fake import FakeGit
from depmerge.core.git.real import RealGit

__all__ = [
    "Git",
    "FakeGit",
    "RealGit",
]
