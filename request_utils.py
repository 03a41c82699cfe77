"""
Request parameter parsing and response header helpers.

Invalid or out-of-range query values are never rejected: dimensions are
clamped, unknown options fall back to their defaults and a malformed
background color is replaced by a random one.
"""

import re
import time
from dataclasses import dataclass
from email.utils import formatdate
from typing import Any, Dict, Mapping, Tuple
from urllib.parse import parse_qs, urlparse

import config
from color_utils import random_hex_color
from github_api import fallback_avatar_url

_HEX_DIGITS_RE = re.compile(r"^[0-9A-Fa-f]{6}$")
_LEADING_INT_RE = re.compile(r"^\s*[+-]?\d+")

ANIMATE_TYPES = ("color", "position", "opacity")

SVG_CONTENT_TYPE = "image/svg+xml"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
}


@dataclass(frozen=True)
class ImageRequestParams:
    user: str = config.DEFAULT_USER
    avatar_url: str = fallback_avatar_url(config.DEFAULT_USER)
    background_color: str = "#000000"
    width: int = config.DEFAULT_WIDTH
    height: int = config.DEFAULT_HEIGHT
    animated: bool = False
    animate_type: str = "color"
    text_animation: bool = True
    show_avatar: bool = False


@dataclass(frozen=True)
class GitHubImageParams:
    user: str = config.DEFAULT_USER
    width: int = config.DEFAULT_WIDTH
    height: int = config.DEFAULT_HEIGHT


# ========= VALIDATION =========

def _clamp_dimension(value: Any, default: int) -> int:
    # Leading integer only: "800px" is 800, "12.5" is 12. Zero means unset.
    match = _LEADING_INT_RE.match(str(value))
    number = int(match.group(0)) if match else 0
    if number == 0:
        number = default
    return max(config.MIN_DIMENSION, min(config.MAX_DIMENSION, number))


def validate_dimensions(width: Any, height: Any) -> Tuple[int, int]:
    """
    Clamp width and height into the allowed range.

    Only the leading integer of each value is read. Values with no leading
    integer, or a leading integer of 0, are replaced by the default size
    before clamping, so validate_dimensions(50, 5000) == (100, 2000) and
    validate_dimensions("800px", "0") == (800, 630).
    """
    return (
        _clamp_dimension(width, config.DEFAULT_WIDTH),
        _clamp_dimension(height, config.DEFAULT_HEIGHT),
    )


def validate_color(color: Any) -> str:
    """Return '#rrggbb' for a six digit hex color (leading '#' optional), or a random color."""
    if isinstance(color, str):
        digits = color.strip().lstrip("#")
        if _HEX_DIGITS_RE.match(digits):
            return f"#{digits}"
    return random_hex_color()


def parse_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    text = str(value).strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    return default


# ========= QUERY PARSING =========

def parse_image_params(query: Mapping[str, str]) -> ImageRequestParams:
    """Build the parameters of a simple greeting card from query string values."""
    user = (query.get("user") or "").strip() or config.DEFAULT_USER
    width, height = validate_dimensions(
        query.get("w", config.DEFAULT_WIDTH), query.get("h", config.DEFAULT_HEIGHT)
    )
    animate_type = query.get("animateType") or "color"
    if animate_type not in ANIMATE_TYPES:
        animate_type = "color"

    return ImageRequestParams(
        user=user,
        avatar_url=query.get("avatarUrl") or fallback_avatar_url(user),
        background_color=validate_color(query.get("bg")),
        width=width,
        height=height,
        animated=parse_bool(query.get("animated"), False),
        animate_type=animate_type,
        # Text animation is on unless explicitly disabled
        text_animation=parse_bool(query.get("textAnimation"), True),
        show_avatar=parse_bool(query.get("avatar"), False),
    )


def parse_github_params(query: Mapping[str, str]) -> GitHubImageParams:
    """Build the parameters of a profile card from query string values."""
    width, height = validate_dimensions(
        query.get("w", config.DEFAULT_WIDTH), query.get("h", config.DEFAULT_HEIGHT)
    )
    return GitHubImageParams(
        user=(query.get("user") or "").strip() or config.DEFAULT_USER,
        width=width,
        height=height,
    )


# ========= RESPONSE HEADERS =========

def no_cache_headers() -> Dict[str, str]:
    """Headers for cards that change on every request."""
    return {
        "Cache-Control": "private, no-cache, no-store, must-revalidate",
        "Expires": "-1",
        "Pragma": "no-cache",
    }


def short_cache_headers(max_age: int = config.IMAGE_CACHE_MAX_AGE) -> Dict[str, str]:
    """Short-lived caching for cards built from cached upstream data."""
    return {
        "Cache-Control": f"public, max-age={max_age}, s-maxage={max_age}",
        "Expires": formatdate(time.time() + max_age, usegmt=True),
        "Vary": "Accept",
    }


def static_cache_headers(max_age: int = config.STATIC_CACHE_MAX_AGE) -> Dict[str, str]:
    return {
        "Cache-Control": f"public, max-age={max_age}, s-maxage={max_age}",
        "Vary": "Accept-Encoding",
    }


# ========= SERVERLESS RESPONSES =========

def query_from_path(path: str) -> Dict[str, str]:
    """First value of each query string parameter in a request path."""
    parsed = parse_qs(urlparse(path).query, keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items()}


def write_response(handler, status: int, headers: Mapping[str, str], body: bytes = b"") -> None:
    """Send a complete response through a BaseHTTPRequestHandler, adding CORS and security headers."""
    handler.send_response(status)
    for name, value in {**CORS_HEADERS, **SECURITY_HEADERS, **headers}.items():
        handler.send_header(name, value)
    handler.send_header("Content-Length", str(len(body)))
    handler.end_headers()
    if body:
        handler.wfile.write(body)
