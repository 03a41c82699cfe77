import logging
import os
import sys
from http.server import BaseHTTPRequestHandler

# Add parent directory to path for Vercel serverless environment
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from typing import Callable, Dict, Mapping, Optional, Tuple

from make_greeting_cards import compose_simple_card
from request_utils import (
    CORS_HEADERS,
    SVG_CONTENT_TYPE,
    TEXT_CONTENT_TYPE,
    no_cache_headers,
    parse_image_params,
    query_from_path,
    write_response,
)

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Failed to generate image"


def build_image_from_query(query: Mapping[str, str]) -> str:
    """
    Pure logic function that:
    - Receives the query string parameters of a request
    - Returns the SVG document of a simple greeting card.

    Supported parameters (all optional):
      user           name drawn on the card (default "user")
      bg             background color, hex with or without '#' (default random)
      w, h           size in pixels, clamped to 100..2000 (default 1200x630)
      animated       "true" animates the background
      animateType    color | position | opacity
      textAnimation  "false" keeps the text static on animated cards
      avatar         "true" draws the avatar image
      avatarUrl      avatar to draw (default https://github.com/<user>.png)
    """
    params = parse_image_params(query)
    return compose_simple_card(params).serialize()


def svg_response(
    query: Mapping[str, str],
    build: Callable[[Mapping[str, str]], str] = build_image_from_query,
    cache_headers: Optional[Dict[str, str]] = None,
    error_message: str = ERROR_MESSAGE,
) -> Tuple[int, Dict[str, str], bytes]:
    """
    Run a card builder and turn its outcome into (status, headers, body).

    Any exception raised while composing is logged with its traceback and
    answered with a 500 plain text body, since no image can be produced.
    """
    try:
        svg = build(query)
    except Exception:
        logger.exception(error_message)
        return 500, {"Content-Type": TEXT_CONTENT_TYPE}, error_message.encode("utf-8")

    headers = {"Content-Type": SVG_CONTENT_TYPE}
    headers.update(cache_headers if cache_headers is not None else no_cache_headers())
    return 200, headers, svg.encode("utf-8")


def handle_image_request(query: Mapping[str, str]) -> Tuple[int, Dict[str, str], bytes]:
    return svg_response(query, build_image_from_query)


# Vercel serverless function handler
class handler(BaseHTTPRequestHandler):
    """Vercel serverless function entrypoint for greeting card images."""

    def do_GET(self):
        status, headers, body = handle_image_request(query_from_path(self.path))
        write_response(self, status, headers, body)

    def do_OPTIONS(self):
        """Handle CORS preflight requests."""
        write_response(self, 200, CORS_HEADERS)
