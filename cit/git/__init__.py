"""Git queries for cit.

Every call shells out to the git binary through run_git() and parses its
text output. git is treated as the source of truth and is never modified
except through the functions in cit.git.checkout.

Return type conventions:
- Functions returning GitResult: Caller must check .success before using output.
  Examples: switch_branch(), checkout_detached()
- Functions that raise OracleUnavailable: failure only degrades a feature.
  Examples: get_head_sha(), get_branches_containing(), get_branch_tips()
- get_log() raises LogUnavailable, which is fatal at startup.
- Functions returning plain values: Return empty/None on failure.
  Examples: get_current_branch() -> ("", False), get_uncommitted_summary() -> None
"""

from cit.git.runner import GitResult, run_git
from cit.git.errors import GitError, OracleUnavailable, LogUnavailable
from cit.git.branch import (
    get_head_sha,
    get_branch_sha,
    get_current_branch,
    get_branches_containing,
    get_branch_tips,
    is_inside_work_tree,
)
from cit.git.log import LogEntry, get_log, format_date, format_message
from cit.git.status import get_uncommitted_summary, get_user_name
from cit.git.checkout import switch_branch, checkout_detached, combined_output

__all__ = [
    # runner
    "GitResult",
    "run_git",
    # errors
    "GitError",
    "OracleUnavailable",
    "LogUnavailable",
    # branch
    "get_head_sha",
    "get_branch_sha",
    "get_current_branch",
    "get_branches_containing",
    "get_branch_tips",
    "is_inside_work_tree",
    # log
    "LogEntry",
    "get_log",
    "format_date",
    "format_message",
    # status
    "get_uncommitted_summary",
    "get_user_name",
    # checkout
    "switch_branch",
    "checkout_detached",
    "combined_output",
]
