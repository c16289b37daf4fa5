"""In-memory commit history and branch annotations."""

from cit.history.commits import (
    Commit,
    CommitModel,
    build_model,
    load_commits,
    make_uncommitted_commit,
)
from cit.history.cache import BranchCache
from cit.history.resolver import BranchResolver

__all__ = [
    "Commit",
    "CommitModel",
    "build_model",
    "load_commits",
    "make_uncommitted_commit",
    "BranchCache",
    "BranchResolver",
]
