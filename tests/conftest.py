"""
Test configuration and shared fixtures for the greeting card tests.

This module provides common test utilities used across all test modules.
"""

import os
import sys
import xml.etree.ElementTree as ET

# Ensure parent directory is in path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

SVG_NS = "{http://www.w3.org/2000/svg}"

# Shape of a GitHub /users/<login> response, trimmed to the fields cards use
OCTOCAT_PAYLOAD = {
    "login": "octocat",
    "name": "The Octocat",
    "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
    "bio": None,
    "public_repos": 8,
    "followers": 9000,
    "following": 9,
    "html_url": "https://github.com/octocat",
}


def parse_svg(svg: str) -> ET.Element:
    """Parse a serialized document; fails the test if it is not well-formed XML."""
    return ET.fromstring(svg.encode("utf-8"))


def svg_tag(name: str) -> str:
    return f"{SVG_NS}{name}"
