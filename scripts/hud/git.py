"""
Thin wrappers over the ``git`` command line.

Every query shells out with a timeout and reports failure as None or 0;
nothing here raises.
"""

import logging
import subprocess
from dataclasses import dataclass

DEFAULT_GIT_TIMEOUT = 2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AheadBehind:
    ahead: int = 0
    behind: int = 0


def _count_lines(output: str | None) -> int:
    if not output:
        return 0
    return len([line for line in output.splitlines() if line.strip()])


class GitHelper:
    """Run git queries against one working directory."""

    def __init__(self, cwd: str, timeout: float = DEFAULT_GIT_TIMEOUT):
        self.cwd = cwd
        self.timeout = timeout

    def run(self, *args: str) -> str | None:
        """Run ``git <args>``. Returns stdout, or None on a non-zero exit or error."""
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (subprocess.SubprocessError, OSError) as e:
            logger.debug("git %s failed in %s: %s", " ".join(args), self.cwd, e)
            return None
        if result.returncode != 0:
            return None
        return result.stdout

    def is_repo(self) -> bool:
        return self.run("rev-parse", "--git-dir") is not None

    def current_branch(self) -> str | None:
        """Branch name, or ``HEAD@<short sha>`` when detached."""
        branch = (self.run("branch", "--show-current") or "").strip()
        if branch:
            return branch

        sha = (self.run("rev-parse", "--short", "HEAD") or "").strip()
        return f"HEAD@{sha}" if sha else None

    def modified_count(self) -> int:
        return _count_lines(self.run("diff", "--numstat"))

    def staged_count(self) -> int:
        return _count_lines(self.run("diff", "--cached", "--numstat"))

    def untracked_count(self) -> int:
        return _count_lines(self.run("ls-files", "--others", "--exclude-standard"))

    def ahead_behind(self) -> AheadBehind | None:
        """Commits ahead of and behind the upstream, or None without one."""
        output = self.run("rev-list", "--left-right", "--count", "HEAD...@{upstream}")
        if not output:
            return None
        parts = output.split()
        if len(parts) < 2:
            return None
        try:
            return AheadBehind(ahead=int(parts[0]), behind=int(parts[1]))
        except ValueError:
            return None
