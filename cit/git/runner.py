"""Subprocess wrapper every git query in cit goes through.

Commands always run as `git -C <repo> ...` so the caller's working
directory never matters. Nothing here raises: a missing binary, a vanished
repository or a hung command all come back as a failed GitResult.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path

DEFAULT_TIMEOUT = 30


@dataclass
class GitResult:
    """Captured outcome of one git invocation."""
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def error_text(self) -> str:
        """stderr, else stdout, else the exit status."""
        text = self.stderr.strip() or self.stdout.strip()
        return text or f"git exited with status {self.returncode}"


def _failure(message: str, timed_out: bool = False) -> GitResult:
    return GitResult(returncode=-1, stdout="", stderr=message, timed_out=timed_out)


def run_git(args: list[str], cwd: Path, timeout: int = DEFAULT_TIMEOUT) -> GitResult:
    """Run `git -C cwd *args` and capture its text output.

    A command still running after timeout seconds is killed and reported
    with timed_out set.
    """
    cmd = ["git", "-C", str(cwd), *args]
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        return _failure(f"Command timed out after {timeout}s", timed_out=True)
    except OSError as e:
        return _failure(f"Failed to run git: {e}")
    return GitResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
