"""
Usage limits from the Anthropic OAuth usage endpoint.

The access token is read from Claude Code's credentials file. Responses
are cached under ``usage-limits`` so the endpoint is hit at most once per
TTL window across all renders.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import requests

from hud import timeutil
from hud.cache import TTLCache

USAGE_API_URL = "https://api.anthropic.com/api/oauth/usage"
USAGE_CACHE_KEY = "usage-limits"
CREDENTIALS_PATH = Path.home() / ".claude" / ".credentials.json"
DEFAULT_USAGE_TTL = 60
DEFAULT_HTTP_TIMEOUT = 5

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageWindow:
    utilization: float
    resets_at: str | None = None

    @classmethod
    def from_dict(cls, data) -> "UsageWindow | None":
        if not isinstance(data, dict):
            return None
        utilization = data.get("utilization")
        if isinstance(utilization, bool) or not isinstance(utilization, (int, float)):
            return None
        resets_at = data.get("resets_at")
        return cls(utilization=utilization, resets_at=resets_at if isinstance(resets_at, str) else None)


@dataclass(frozen=True)
class UsageLimits:
    five_hour: UsageWindow | None = None
    seven_day: UsageWindow | None = None
    seven_day_opus: UsageWindow | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "UsageLimits":
        return cls(
            five_hour=UsageWindow.from_dict(data.get("five_hour")),
            seven_day=UsageWindow.from_dict(data.get("seven_day")),
            seven_day_opus=UsageWindow.from_dict(data.get("seven_day_opus")),
        )


class CredentialReader:
    """Reads the OAuth credentials Claude Code stores on disk."""

    def __init__(self, path: Path | None = None):
        self.path = path if path is not None else CREDENTIALS_PATH

    def _oauth(self) -> dict | None:
        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError):
            return None
        oauth = data.get("claudeAiOauth") if isinstance(data, dict) else None
        return oauth if isinstance(oauth, dict) else None

    def access_token(self) -> str | None:
        """Access token, or None when missing or expired."""
        oauth = self._oauth()
        if oauth is None:
            return None

        expires_at = oauth.get("expiresAt")
        if isinstance(expires_at, (int, float)) and expires_at and timeutil.now_ms() > expires_at:
            return None

        token = oauth.get("accessToken")
        return token if isinstance(token, str) and token else None


class UsageFetcher:
    def __init__(
        self,
        cache: TTLCache,
        credentials: CredentialReader,
        ttl_seconds: float = DEFAULT_USAGE_TTL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        self.cache = cache
        self.credentials = credentials
        self.ttl_seconds = ttl_seconds
        self.timeout = timeout

    def fetch(self) -> UsageLimits | None:
        """Current usage limits, from cache when fresh. None on any failure."""
        cached = self.cache.get(USAGE_CACHE_KEY)
        if isinstance(cached, dict):
            return UsageLimits.from_dict(cached)

        token = self.credentials.access_token()
        if not token:
            return None

        try:
            response = requests.get(
                USAGE_API_URL,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                    "anthropic-beta": "oauth-2025-04-20",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.debug("Usage limits request failed: %s", e)
            return None

        if not isinstance(data, dict):
            return None

        self.cache.set(USAGE_CACHE_KEY, data, self.ttl_seconds)
        return UsageLimits.from_dict(data)
