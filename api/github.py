import logging
import os
import sys
from http.server import BaseHTTPRequestHandler

# Add parent directory to path for Vercel serverless environment
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from typing import Dict, Mapping, Optional, Tuple

from api.image import svg_response
from errors import UpstreamLookupError
from github_api import GitHubClient, ProfileCache
from make_greeting_cards import compose_fallback_card, compose_github_card
from request_utils import (
    CORS_HEADERS,
    SVG_CONTENT_TYPE,
    GitHubImageParams,
    no_cache_headers,
    parse_github_params,
    query_from_path,
    short_cache_headers,
    write_response,
)

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Failed to generate GitHub greeting image"

# Shared by every request handled by this process so the profile cache is reused
_default_client: Optional[GitHubClient] = None


def get_default_client() -> GitHubClient:
    global _default_client
    if _default_client is None:
        _default_client = GitHubClient(cache=ProfileCache())
    return _default_client


def render_github_card(params: GitHubImageParams, client: Optional[GitHubClient] = None) -> Tuple[str, bool]:
    """
    Build the profile card for params.user.

    A failed lookup never fails the request: the failure is logged and the
    degraded card, which still carries the username, is returned instead.

    Returns:
        (svg, degraded) where degraded is True for the fallback card
    """
    client = client or get_default_client()
    try:
        profile = client.get_user_info(params.user)
    except UpstreamLookupError as e:
        logger.warning("GitHub lookup failed, using fallback card: %s", e)
        return compose_fallback_card(params).serialize(), True
    except Exception:
        logger.exception("Unexpected error looking up %s, using fallback card", params.user)
        return compose_fallback_card(params).serialize(), True

    return compose_github_card(params, profile).serialize(), False


def build_github_card(params: GitHubImageParams, client: Optional[GitHubClient] = None) -> str:
    svg, _ = render_github_card(params, client)
    return svg


def build_github_image_from_query(query: Mapping[str, str], client: Optional[GitHubClient] = None) -> str:
    return build_github_card(parse_github_params(query), client)


def handle_github_request(
    query: Mapping[str, str],
    client: Optional[GitHubClient] = None,
) -> Tuple[int, Dict[str, str], bytes]:
    """Profile cards are cached briefly; fallback cards are never cached."""
    degraded = []

    def build(q: Mapping[str, str]) -> str:
        svg, fallback = render_github_card(parse_github_params(q), client)
        degraded.append(fallback)
        return svg

    status, headers, body = svg_response(
        query,
        build,
        cache_headers=short_cache_headers(),
        error_message=ERROR_MESSAGE,
    )
    if status == 200 and any(degraded):
        headers = {"Content-Type": SVG_CONTENT_TYPE}
        headers.update(no_cache_headers())
    return status, headers, body


class handler(BaseHTTPRequestHandler):
    """Vercel serverless function entrypoint for GitHub profile cards."""

    def do_GET(self):
        status, headers, body = handle_github_request(query_from_path(self.path))
        write_response(self, status, headers, body)

    def do_OPTIONS(self):
        write_response(self, 200, CORS_HEADERS)
