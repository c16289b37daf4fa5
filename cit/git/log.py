"""Git commit log queries."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from cit.git.errors import LogUnavailable
from cit.git.runner import run_git
from cit.lib.constants import DATE_FORMAT, GIT_DATE_FORMAT

LOG_FORMAT = "%H|%an|%ad|%s"
LOG_FIELD_SEPARATOR = "|"


@dataclass
class LogEntry:
    """One parsed line of `git log`."""
    sha: str
    author: str
    date: str
    message: str


def format_date(date_str: str) -> str:
    """Convert git's default date format to YYYY-MM-DD HH:MM:SS.

    The commit's own UTC offset is kept. Unparsable input is returned as-is.
    """
    try:
        parsed = datetime.strptime(date_str.strip(), GIT_DATE_FORMAT)
    except ValueError:
        return date_str
    return parsed.strftime(DATE_FORMAT)


def format_message(message: str) -> str:
    """Collapse a message onto one line."""
    return message.replace("\r\n", " ").replace("\n", " ")


def parse_log(output: str) -> list[LogEntry]:
    """Parse pipe-delimited log output, newest first. Malformed lines are skipped."""
    entries = []
    for line in output.split("\n"):
        parts = line.split(LOG_FIELD_SEPARATOR, 3)
        if len(parts) != 4:
            continue
        sha, author, date, subject = parts
        entries.append(LogEntry(
            sha=sha,
            author=author,
            date=format_date(date),
            message=format_message(subject),
        ))
    return entries


def get_log(repo: Path) -> list[LogEntry]:
    """
    Get every commit reachable from any ref, newest first.

    Raises:
        LogUnavailable: git could not be started or exited non-zero
    """
    result = run_git(["log", "--all", f"--pretty=format:{LOG_FORMAT}"], repo)
    if not result.success:
        raise LogUnavailable("Failed to read commit log", result)
    return parse_log(result.stdout)
