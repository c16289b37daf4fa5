"""Git operations that move HEAD."""

from pathlib import Path

from cit.git.runner import run_git, GitResult


def switch_branch(repo: Path, branch: str) -> GitResult:
    """Attach HEAD to an existing branch."""
    return run_git(["switch", branch], repo)


def checkout_detached(repo: Path, sha: str) -> GitResult:
    """Check out a bare commit, detaching HEAD."""
    return run_git(["checkout", sha], repo)


def combined_output(result: GitResult) -> str:
    """stdout and stderr together, as git prints most checkout chatter on stderr."""
    parts = [result.stdout.strip(), result.stderr.strip()]
    return "\n".join(p for p in parts if p)
