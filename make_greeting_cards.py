"""
Greeting Card Generator

This module composes greeting card scenes: a random multilingual greeting, the
user's name and, for profile cards, GitHub profile details, drawn on a
gradient background. Cards are rendered as SVG documents by svg_builder.

It can also be run from the command line to write a card to disk.
"""

import argparse
import os
from typing import Optional

import config
from color_utils import adjust_brightness, random_hex_color
from github_api import GitHubProfile
from messages import GreetingMessage, random_greeting
from request_utils import GitHubImageParams, ImageRequestParams, validate_color, validate_dimensions
from svg_builder import RectOptions, SvgScene, TextAnimation, TextOptions

# ========= CARD STYLE =========
SHADOW_FILTER_ID = "textShadow"
WHITE = "#ffffff"
BLACK = "#000000"
GITHUB_GREEN = "#03A87C"
PROFILE_GRADIENT = ["#667eea", "#764ba2"]
AVATAR_PLACEHOLDER_GLYPH = "\U0001F464"  # bust in silhouette

BACKGROUND_DARKEN = -20
ANIMATED_BACKGROUND_SECONDS = 4
AVATAR_SIZE = 80


def _headline_style(font_size: int, stroke_width: int = 2, **overrides) -> TextOptions:
    """White bold centered text with a dark outline and the shared drop shadow."""
    style = dict(
        font_size=font_size,
        font_weight="bold",
        fill=WHITE,
        stroke=BLACK,
        stroke_width=stroke_width,
        anchor="middle",
        baseline="middle",
        filter_id=SHADOW_FILTER_ID,
    )
    style.update(overrides)
    return TextOptions(**style)


# ========= SIMPLE CARD =========

def compose_simple_card(params: ImageRequestParams, greeting: Optional[GreetingMessage] = None) -> SvgScene:
    """
    Compose the simple greeting card.

    Static cards use a vertical two-color gradient from the background color
    to a darker shade. Animated cards use a diagonal animated gradient over
    four colors and, unless text animation is disabled, animated text.

    The card always shows the greeting, its language and the user's name.

    Args:
        params: Validated request parameters
        greeting: Greeting to draw (default: random)

    Returns:
        The populated scene, ready to serialize
    """
    greeting = greeting or random_greeting()
    width, height = params.width, params.height
    scene = SvgScene(width, height)

    scene.add_drop_shadow_filter(SHADOW_FILTER_ID, dx=2, dy=2, blur=4, opacity=0.5)

    base = params.background_color
    if params.animated:
        colors = [base, random_hex_color(), random_hex_color(), adjust_brightness(base, BACKGROUND_DARKEN)]
        scene.set_animated_gradient_background(
            colors,
            direction="diagonal",
            duration=ANIMATED_BACKGROUND_SECONDS,
            repeat_count="indefinite",
            animate_type=params.animate_type,
        )
    else:
        scene.set_gradient_background([base, adjust_brightness(base, BACKGROUND_DARKEN)], "vertical")

    center_x = width / 2
    center_y = height / 2
    language_text = f"({greeting.language})"
    user_y = height * 0.85

    if params.animated and params.text_animation:
        scene.draw_animated_text(
            greeting.message, center_x, center_y - 50,
            _headline_style(70, stroke=None, filter_id=None),
            TextAnimation(type="fadeIn", duration=2, delay=0.5, repeat_count=1),
        )
        scene.draw_animated_text(
            language_text, center_x, center_y + 20,
            _headline_style(24, stroke=None, filter_id=None),
            TextAnimation(type="scaleIn", duration=1.5, delay=1.5, repeat_count=1),
        )
        scene.draw_animated_text(
            params.user, center_x, user_y,
            _headline_style(30, stroke_width=1),
            TextAnimation(type="typewriter", duration=1.5, delay=2.5),
        )
    else:
        scene.draw_text(greeting.message, center_x, center_y - 50, _headline_style(70))
        scene.draw_text(language_text, center_x, center_y + 20, _headline_style(24, stroke_width=1))
        scene.draw_text(params.user, center_x, user_y, _headline_style(30, stroke_width=1))

    if params.show_avatar:
        size = min(100, height // 5)
        scene.draw_image(params.avatar_url, center_x - size / 2, user_y - size * 1.6, size, size, clip_circle=True)

    return scene


# ========= PROFILE CARDS =========

def compose_github_card(
    params: GitHubImageParams,
    profile: GitHubProfile,
    greeting: Optional[GreetingMessage] = None,
) -> SvgScene:
    """Compose the profile card: greeting, username, stats line and avatar placeholder."""
    greeting = greeting or random_greeting()
    width, height = params.width, params.height
    scene = SvgScene(width, height)

    scene.add_drop_shadow_filter(SHADOW_FILTER_ID, dx=3, dy=3, blur=6, opacity=0.4)
    scene.set_gradient_background(PROFILE_GRADIENT, "vertical")

    center_x = width / 2
    center_y = height / 2

    scene.draw_text(greeting.message, center_x, center_y - 80, _headline_style(60))
    scene.draw_text(
        f"--({greeting.language})--", center_x, center_y - 20,
        TextOptions(font_size=20, fill=WHITE, anchor="middle", baseline="middle", filter_id=SHADOW_FILTER_ID),
    )

    # Username in the top right, underlined
    scene.draw_text(
        profile.login, width - 200, 80,
        TextOptions(
            font_size=30,
            fill=GITHUB_GREEN,
            stroke="rgba(255, 255, 255, 0.5)",
            stroke_width=1,
            anchor="start",
            baseline="middle",
        ),
    )
    scene.draw_rectangle(50, 100, max(width - 280, 0), 2, RectOptions(fill=GITHUB_GREEN))

    if profile.public_repos > 0 or profile.followers > 0:
        scene.draw_text(
            f"{profile.public_repos} repos • {profile.followers} followers", 50, 140,
            TextOptions(font_size=18, fill=WHITE, anchor="start", baseline="middle"),
        )

    avatar_x = avatar_y = 50
    scene.draw_rectangle(
        avatar_x, avatar_y, AVATAR_SIZE, AVATAR_SIZE,
        RectOptions(fill="#cccccc", stroke=WHITE, stroke_width=3, corner_radius=10),
    )
    scene.draw_text(
        AVATAR_PLACEHOLDER_GLYPH, avatar_x + AVATAR_SIZE / 2, avatar_y + AVATAR_SIZE / 2,
        TextOptions(font_size=40, anchor="middle", baseline="middle"),
    )
    return scene


def compose_fallback_card(params: GitHubImageParams, greeting: Optional[GreetingMessage] = None) -> SvgScene:
    """Compose the degraded card used when the profile lookup fails."""
    greeting = greeting or random_greeting()
    width, height = params.width, params.height
    scene = SvgScene(width, height)

    scene.add_drop_shadow_filter(SHADOW_FILTER_ID, dx=2, dy=2, blur=4, opacity=0.5)
    scene.set_background(random_hex_color())

    center_x = width / 2
    center_y = height / 2

    scene.draw_text("GitHub API Unavailable", center_x, center_y - 100, _headline_style(40))
    scene.draw_text(greeting.message, center_x, center_y - 20, _headline_style(50))
    scene.draw_text(f"({greeting.language})", center_x, center_y + 30, _headline_style(24, stroke_width=1, filter_id=None))
    scene.draw_text(params.user, center_x, center_y + 80, _headline_style(30, stroke_width=1, filter_id=None))
    return scene


# ========= COMMAND LINE =========

def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate a greeting card SVG")
    parser.add_argument("--user", default=config.DEFAULT_USER, help="Name drawn on the card")
    parser.add_argument("--bg", default=None, help="Background color as #rrggbb, random by default")
    parser.add_argument("--width", default=config.DEFAULT_WIDTH, help="Card width in pixels")
    parser.add_argument("--height", default=config.DEFAULT_HEIGHT, help="Card height in pixels")
    parser.add_argument("--animated", action="store_true", help="Animate the background")
    parser.add_argument("--animate-type", default="color", choices=["color", "position", "opacity"])
    parser.add_argument("--no-text-animation", action="store_true", help="Keep text static on animated cards")
    parser.add_argument("--github", action="store_true", help="Build a profile card from the GitHub API")
    parser.add_argument("--output", default=None, help="Output file, default output/<user>.svg")
    args = parser.parse_args(argv)

    config.configure_logging()
    width, height = validate_dimensions(args.width, args.height)

    if args.github:
        # Imported here so plain cards never build an HTTP client
        from api.github import build_github_card

        svg = build_github_card(GitHubImageParams(user=args.user, width=width, height=height))
    else:
        params = ImageRequestParams(
            user=args.user,
            background_color=validate_color(args.bg),
            width=width,
            height=height,
            animated=args.animated,
            animate_type=args.animate_type,
            text_animation=not args.no_text_animation,
        )
        svg = compose_simple_card(params).serialize()

    out_name = args.output or os.path.join("output", f"{args.user}.svg")
    out_dir = os.path.dirname(out_name)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(out_name, "w", encoding="utf-8") as f:
        f.write(svg)
    print(f"Generated file: {out_name}")


if __name__ == "__main__":
    main()
