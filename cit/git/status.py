"""Git working tree status queries."""

from pathlib import Path

from cit.git.runner import run_git


def count_porcelain_changes(output: str) -> int:
    """Count changed paths in `git status --porcelain` output."""
    return sum(1 for line in output.splitlines() if line.strip())


def get_uncommitted_summary(repo: Path) -> str | None:
    """
    Describe pending local modifications.

    Returns:
        "N files changed", or None when the tree is clean or git failed
    """
    result = run_git(["status", "--porcelain"], repo)
    if not result.success:
        return None
    count = count_porcelain_changes(result.stdout)
    if count == 0:
        return None
    return f"{count} files changed"


def get_user_name(repo: Path) -> str:
    """Get the configured user.name, or empty string."""
    result = run_git(["config", "user.name"], repo)
    if result.success:
        return result.stdout.strip()
    return ""
