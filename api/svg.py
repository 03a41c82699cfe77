import os
import sys
from http.server import BaseHTTPRequestHandler

# Add parent directory to path for Vercel serverless environment
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from typing import Dict, Mapping, Tuple

from api.image import build_image_from_query, svg_response
from request_utils import CORS_HEADERS, query_from_path, write_response


def build_svg_from_query(query: Mapping[str, str]) -> str:
    """Same card as /image, always animated. animateType and textAnimation still apply."""
    forced = dict(query)
    forced["animated"] = "true"
    return build_image_from_query(forced)


def handle_svg_request(query: Mapping[str, str]) -> Tuple[int, Dict[str, str], bytes]:
    return svg_response(query, build_svg_from_query)


class handler(BaseHTTPRequestHandler):
    """Vercel serverless function entrypoint for animated greeting cards."""

    def do_GET(self):
        status, headers, body = handle_svg_request(query_from_path(self.path))
        write_response(self, status, headers, body)

    def do_OPTIONS(self):
        write_response(self, 200, CORS_HEADERS)
