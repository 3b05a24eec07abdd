"""Git runner subpackage.

Stack operations never start processes themselves. They call a GitRunner,
which tests replace with FakeGitRunner to assert exact argument vectors.
"""

from mrstack.core.git.abc import GitRunner
from mrstack.core.git.fake import FakeGitRunner
from mrstack.core.git.real import RealGitRunner

__all__ = [
    "GitRunner",
    "RealGitRunner",
    "FakeGitRunner",
]
