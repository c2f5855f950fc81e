"""
Git branch and working tree indicators.

Example output: 🌿 main +3 ~5 ?1 ↑2

- +N staged files (green)
- ~N modified files (yellow)
- ?N untracked files (dim)
- ↑N / ↓N commits ahead of / behind upstream (cyan / magenta)

The counts come from independent git invocations that run concurrently.
Results are cached per session and directory for ``cache_ttl`` seconds.
"""

import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass

from hud.cache import TTLCache
from hud.config import GitStatusWidgetConfig
from hud.git import GitHelper
from hud.snapshot import RenderSnapshot
from hud.widgets.styling import colorize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GitStatus:
    branch: str
    staged: int = 0
    modified: int = 0
    untracked: int = 0
    ahead: int = 0
    behind: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "GitStatus":
        return cls(
            branch=str(data["branch"]),
            staged=int(data.get("staged", 0)),
            modified=int(data.get("modified", 0)),
            untracked=int(data.get("untracked", 0)),
            ahead=int(data.get("ahead", 0)),
            behind=int(data.get("behind", 0)),
        )


def _zero() -> int:
    return 0


def _none() -> None:
    return None


class GitStatusWidget:
    def __init__(self, config: GitStatusWidgetConfig, cache: TTLCache):
        self.config = config
        self.cache = cache

    def cache_key(self, snapshot: RenderSnapshot) -> str:
        digest = hashlib.sha256(snapshot.current_dir.encode()).hexdigest()[:16]
        return f"git-status-{snapshot.session_id}-{digest}"

    def render(self, snapshot: RenderSnapshot) -> str | None:
        if not self.config.enabled:
            return None

        current_dir = snapshot.current_dir
        if not current_dir:
            return None

        key = self.cache_key(snapshot)
        cached = self.cache.get(key)
        if isinstance(cached, dict):
            try:
                return self.format(GitStatus.from_dict(cached))
            except (KeyError, TypeError, ValueError):
                logger.debug("Discarding malformed git status cache entry %s", key)

        status = self.fetch(current_dir)
        if status is None:
            return None

        self.cache.set(key, asdict(status), self.config.cache_ttl or 5)
        return self.format(status)

    def fetch(self, working_dir: str) -> GitStatus | None:
        """Collect branch and counts, or None outside a repository."""
        helper = GitHelper(working_dir)
        if not helper.is_repo():
            return None

        branch = helper.current_branch()
        if not branch:
            return None

        cfg = self.config
        with ThreadPoolExecutor(max_workers=4) as pool:
            staged = pool.submit(helper.staged_count if cfg.show_staged else _zero)
            modified = pool.submit(helper.modified_count if cfg.show_modified else _zero)
            untracked = pool.submit(helper.untracked_count if cfg.show_untracked else _zero)
            ahead_behind = pool.submit(helper.ahead_behind if cfg.show_ahead_behind else _none)

        counts = ahead_behind.result()
        return GitStatus(
            branch=branch,
            staged=staged.result(),
            modified=modified.result(),
            untracked=untracked.result(),
            ahead=counts.ahead if counts else 0,
            behind=counts.behind if counts else 0,
        )

    def format(self, status: GitStatus) -> str | None:
        cfg = self.config
        parts = []

        if cfg.show_branch:
            parts.append(colorize(f"🌿 {status.branch}", "cyan"))
        if cfg.show_staged and status.staged > 0:
            parts.append(colorize(f"+{status.staged}", "green"))
        if cfg.show_modified and status.modified > 0:
            parts.append(colorize(f"~{status.modified}", "yellow"))
        if cfg.show_untracked and status.untracked > 0:
            parts.append(colorize(f"?{status.untracked}", "dim"))
        if cfg.show_ahead_behind:
            if status.ahead > 0:
                parts.append(colorize(f"↑{status.ahead}", "cyan"))
            if status.behind > 0:
                parts.append(colorize(f"↓{status.behind}", "magenta"))

        return " ".join(parts) or None
