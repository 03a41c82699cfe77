"""
GitHub API integration for fetching user profile information.

This module provides a small client for the GitHub users endpoint. It includes
a TTL cache to minimize API calls, a retry policy with exponential backoff for
transient failures, and classification of failures into not-found,
rate-limited, timeout and generic upstream errors.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

import config
from errors import (
    ProfileNotFound,
    RateLimited,
    UpstreamError,
    UpstreamTimeout,
)

logger = logging.getLogger(__name__)

# Status codes worth another attempt; 4xx responses are never retried
RETRY_STATUS_CODES = (500, 502, 503, 504)


def fallback_avatar_url(username: str) -> str:
    """GitHub's public avatar URL pattern, usable without an API call."""
    return f"https://github.com/{quote(username, safe='')}.png"


@dataclass(frozen=True)
class GitHubProfile:
    """The subset of a GitHub user record used when composing cards."""

    login: str
    name: Optional[str] = None
    avatar_url: str = ""
    bio: Optional[str] = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    html_url: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "GitHubProfile":
        login = data.get("login") or ""
        return cls(
            login=login,
            name=data.get("name"),
            avatar_url=data.get("avatar_url") or fallback_avatar_url(login),
            bio=data.get("bio"),
            public_repos=int(data.get("public_repos") or 0),
            followers=int(data.get("followers") or 0),
            following=int(data.get("following") or 0),
            html_url=data.get("html_url") or f"https://github.com/{login}",
            raw=dict(data),
        )


# ========= PROFILE CACHE =========

class ProfileCache:
    """
    Thread-safe TTL cache with a bounded number of entries.

    Entries older than ttl_seconds are evicted lazily when their key is looked
    up again. When the cache is full the least recently used entry is dropped.
    """

    def __init__(
        self,
        ttl_seconds: float = config.PROFILE_CACHE_TTL,
        max_entries: int = config.PROFILE_CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[Any, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value for key, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, stored_at = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous entry."""
        with self._lock:
            self._entries[key] = (value, self._clock())
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {"size": len(self._entries), "entries": list(self._entries)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# ========= CLIENT =========

def build_retry_policy(
    attempts: int = config.GITHUB_RETRY_ATTEMPTS,
    backoff: float = config.GITHUB_RETRY_BACKOFF,
) -> Retry:
    """
    Retry connection failures and 5xx responses with exponential backoff.

    Read timeouts are not retried so a slow API cannot multiply the request
    timeout. After the last attempt the final response is returned as is.
    """
    retries = max(attempts - 1, 0)
    return Retry(
        total=retries,
        connect=retries,
        read=0,
        status=retries,
        backoff_factor=backoff,
        status_forcelist=RETRY_STATUS_CODES,
        allowed_methods=frozenset(["GET"]),
        raise_on_status=False,
    )


def build_session(
    attempts: int = config.GITHUB_RETRY_ATTEMPTS,
    backoff: float = config.GITHUB_RETRY_BACKOFF,
) -> requests.Session:
    """Create a requests session with the retry policy mounted for http(s)."""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=build_retry_policy(attempts, backoff))
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class GitHubClient:
    """Fetches GitHub user profiles, caching successful lookups."""

    def __init__(
        self,
        cache: Optional[ProfileCache] = None,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout: float = config.GITHUB_API_TIMEOUT,
        user_agent: str = config.GITHUB_USER_AGENT,
    ):
        self.cache = cache if cache is not None else ProfileCache()
        self.session = session if session is not None else build_session()
        self.base_url = (base_url or config.get_github_api_url()).rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent

    def get_user_info(self, username: str) -> GitHubProfile:
        """
        Fetch a user's profile, returning a cached copy when still fresh.

        Args:
            username: GitHub login to look up

        Returns:
            The user's profile

        Raises:
            ProfileNotFound: the user does not exist
            RateLimited: the API quota is exhausted
            UpstreamTimeout: the request took longer than the timeout
            UpstreamError: any other failure
        """
        cached = self.cache.get(username)
        if cached is not None:
            return cached

        url = f"{self.base_url}/users/{quote(username, safe='')}"
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/vnd.github.v3+json",
        }
        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.Timeout as e:
            raise UpstreamTimeout(username, self.timeout) from e
        except requests.RequestException as e:
            raise UpstreamError(username, f"GitHub API request failed: {e}") from e

        self._raise_for_status(username, response)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(username, "GitHub API returned invalid JSON", response.status_code) from e
        if not isinstance(data, dict):
            raise UpstreamError(username, "GitHub API returned an unexpected payload", response.status_code)

        try:
            profile = GitHubProfile.from_api(data)
        except (TypeError, ValueError) as e:
            raise UpstreamError(username, f"GitHub API returned a malformed profile: {e}", response.status_code) from e
        self.cache.set(username, profile)
        return profile

    @staticmethod
    def _raise_for_status(username: str, response: requests.Response) -> None:
        status = response.status_code
        if status == 404:
            raise ProfileNotFound(username)
        if status in (403, 429):
            reset = response.headers.get("X-RateLimit-Reset")
            raise RateLimited(username, status, int(reset) if reset and reset.isdigit() else None)
        if not 200 <= status < 300:
            raise UpstreamError(username, f"GitHub API error: {status} {response.reason}", status)

    def get_user_avatar(self, username: str) -> str:
        """Avatar URL for username, falling back to the public URL pattern on failure."""
        try:
            return self.get_user_info(username).avatar_url
        except Exception as e:
            logger.info("Using fallback avatar for %s: %s", username, e)
            return fallback_avatar_url(username)

    def user_exists(self, username: str) -> bool:
        try:
            self.get_user_info(username)
        except Exception as e:
            logger.debug("Lookup for %s failed: %s", username, e)
            return False
        return True

    def clear_cache(self) -> None:
        """Clear the profile cache. Useful for testing or memory management."""
        self.cache.clear()

    def cache_stats(self) -> Dict[str, Any]:
        return self.cache.stats()
