"""Git branch and ref queries."""

from pathlib import Path

from cit.git.errors import OracleUnavailable
from cit.git.runner import run_git


def get_head_sha(repo: Path) -> str:
    """Get the SHA HEAD points to.

    Raises:
        OracleUnavailable: no commits yet, or git failed
    """
    result = run_git(["rev-parse", "HEAD"], repo)
    if not result.success:
        raise OracleUnavailable("Cannot resolve HEAD", result)
    return result.stdout.strip()


def get_branch_sha(repo: Path, branch: str) -> str:
    """Get the SHA a branch currently points to."""
    result = run_git(["rev-parse", branch], repo)
    if not result.success:
        raise OracleUnavailable(f"Cannot resolve branch '{branch}'", result)
    return result.stdout.strip()


def get_current_branch(repo: Path) -> tuple[str, bool]:
    """Get the checked-out branch name and whether HEAD is attached.

    Returns ("", False) when HEAD is detached or the lookup fails.
    """
    result = run_git(["symbolic-ref", "--short", "-q", "HEAD"], repo)
    name = result.stdout.strip()
    if result.success and name:
        return name, True
    return "", False


def parse_branches_containing(output: str) -> list[str]:
    """
    Parse `git branch --contains` output.

    The checked-out branch is marked with "* " and is moved to the front.
    Detached HEAD entries such as "(HEAD detached at abc1234)" are dropped.
    """
    current = None
    branches = []
    for line in output.splitlines():
        name = line.strip()
        is_current = name.startswith("*")
        if is_current:
            name = name[1:].strip()
        if not name or name.startswith("("):
            continue
        if is_current and current is None:
            current = name
        else:
            branches.append(name)

    if current is not None:
        branches.insert(0, current)
    return branches


def get_branches_containing(repo: Path, sha: str) -> list[str]:
    """Get names of local branches whose history includes sha.

    Raises:
        OracleUnavailable: git failed (distinct from an empty result)
    """
    result = run_git(["branch", "--contains", sha], repo)
    if not result.success:
        raise OracleUnavailable(f"Cannot list branches containing {sha[:7]}", result)
    return parse_branches_containing(result.stdout)


def parse_branch_tips(output: str) -> dict[str, str]:
    """Parse "<sha> <short name>" lines into a sha -> branch mapping.

    git lists local branches before remote ones, and the first name seen for
    a sha wins, so a local branch shadows its remote-tracking twin.
    """
    tips: dict[str, str] = {}
    for line in output.splitlines():
        parts = line.strip().split(" ", 1)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            continue
        name = parts[1].strip()
        if name.startswith("("):
            continue
        tips.setdefault(parts[0], name)
    return tips


def get_branch_tips(repo: Path) -> dict[str, str]:
    """Get every branch tip (local and remote) as sha -> branch name."""
    result = run_git(
        ["branch", "-a", "--format=%(objectname) %(refname:short)"],
        repo,
    )
    if not result.success:
        raise OracleUnavailable("Cannot list branch tips", result)
    return parse_branch_tips(result.stdout)


def is_inside_work_tree(repo: Path) -> bool:
    """Check if repo is inside a git work tree."""
    result = run_git(["rev-parse", "--is-inside-work-tree"], repo)
    return result.success and result.stdout.strip() == "true"
