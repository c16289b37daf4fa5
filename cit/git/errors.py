"""Errors raised by git queries."""

from cit.git.runner import GitResult


class GitError(Exception):
    """A git query failed."""

    def __init__(self, message: str, result: GitResult | None = None):
        self.result = result
        detail = f": {result.error_text}" if result is not None else ""
        super().__init__(f"{message}{detail}")


class OracleUnavailable(GitError):
    """A query whose failure only degrades a feature (HEAD, branch lookups)."""
    pass


class LogUnavailable(GitError):
    """The commit log could not be read. Fatal at startup."""
    pass
