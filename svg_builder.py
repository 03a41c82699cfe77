"""
SVG scene builder for greeting cards.

The builder accumulates drawing primitives as a tree of SvgNode objects and
serializes the tree with a single formatter, so every attribute value and
every piece of text goes through the same escaping. It provides:
- Solid, gradient and animated gradient backgrounds
- Text, with optional stroke, drop shadow filter and entrance animations
- Circles, rectangles, lines and clipped image references
- Reusable definitions (gradients, filters, clip paths) referenced by id
- Custom SMIL animations attached to any fragment carrying an id

Definitions always precede fragments in the output, whatever order they were
added in. Generated ids follow call order, so the same sequence of calls
always produces the same document.
"""

import re
from dataclasses import dataclass, field
from html import escape
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

import config
from errors import SceneError

Number = Union[int, float]
RepeatCount = Union[int, str]

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

# Gradient vector (x1, y1, x2, y2) per direction
GRADIENT_VECTORS = {
    "horizontal": ("0%", "0%", "100%", "0%"),
    "vertical": ("0%", "0%", "0%", "100%"),
    "diagonal": ("0%", "0%", "100%", "100%"),
}
# Translation applied by the "position" gradient animation, in bounding box units
GRADIENT_SHIFTS = {
    "horizontal": (1, 0),
    "vertical": (0, 1),
    "diagonal": (1, 1),
}
GRADIENT_ANIMATIONS = ("color", "position", "opacity")
TEXT_ANIMATIONS = ("fadeIn", "slideIn", "scaleIn", "bounce", "typewriter")

TYPEWRITER_REVEAL_SECONDS = 0.1

CALC_MODES = ("linear", "discrete", "paced")
EASING_SPLINES = {
    "ease": "0.25 0.1 0.25 1",
    "ease-in": "0.42 0 1 1",
    "ease-out": "0 0 0.58 1",
    "ease-in-out": "0.42 0 0.58 1",
}

# Children of these elements are written without added whitespace, which
# would otherwise be rendered as spaces between characters
_INLINE_TAGS = {"text", "tspan"}
_URL_REF_RE = re.compile(r"url\(#([^)]+)\)")
# Characters outside the XML Char production; they cannot appear even escaped
_INVALID_XML_CHARS_RE = re.compile("[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


# ========= DOCUMENT TREE =========

@dataclass
class SvgNode:
    """One SVG element: tag, ordered attributes, optional text and children."""

    tag: str
    attrs: Dict[str, Any] = field(default_factory=dict)
    children: List["SvgNode"] = field(default_factory=list)
    text: Optional[str] = None

    def append(self, child: "SvgNode") -> "SvgNode":
        self.children.append(child)
        return child

    def iter(self) -> Iterator["SvgNode"]:
        """Depth-first iteration over this node and all descendants."""
        yield self
        for child in self.children:
            yield from child.iter()

    def find(self, element_id: str) -> Optional["SvgNode"]:
        for node in self.iter():
            if node.attrs.get("id") == element_id:
                return node
        return None


def format_value(value: Any) -> str:
    """Format an attribute value: integral floats lose their '.0', others keep 4 decimals."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(round(value, 4))
    return str(value)


def seconds(value: Number) -> str:
    return f"{format_value(value)}s"


def xml_escape(value: str) -> str:
    """Drop characters XML forbids, then escape the five metacharacters."""
    return escape(_INVALID_XML_CHARS_RE.sub("", value), quote=True)


def render_node(node: SvgNode, depth: int = 0, inline: bool = False) -> str:
    """
    Serialize a node and its subtree.

    All text content and attribute values go through xml_escape.
    Attributes whose value is None are omitted.
    """
    attrs = "".join(
        f' {name}="{xml_escape(format_value(value))}"'
        for name, value in node.attrs.items()
        if value is not None
    )
    indent = "" if inline else "  " * depth
    open_tag = f"{indent}<{node.tag}{attrs}"

    if node.text is None and not node.children:
        return open_tag + "/>"

    text = xml_escape(node.text) if node.text is not None else ""
    if inline or node.tag in _INLINE_TAGS:
        children = "".join(render_node(child, inline=True) for child in node.children)
        return f"{open_tag}>{text}{children}</{node.tag}>"

    lines = [f"{open_tag}>{text}"]
    lines.extend(render_node(child, depth + 1) for child in node.children)
    lines.append(f"{indent}</{node.tag}>")
    return "\n".join(lines)


def animation_node(tag: str = "animate", **attrs: Any) -> SvgNode:
    """Build an animation element. A trailing underscore is dropped from keyword names (from_, type_)."""
    return SvgNode(tag, {name.rstrip("_"): value for name, value in attrs.items()})


# ========= OPTIONS =========

@dataclass
class TextOptions:
    font_size: Number = 16
    font_family: str = config.DEFAULT_FONT_FAMILY
    font_weight: str = "normal"
    font_style: str = "normal"
    fill: str = "#000000"
    stroke: Optional[str] = None
    stroke_width: Number = 1
    anchor: str = "start"  # start | middle | end
    baseline: str = "auto"  # auto | middle | hanging
    filter_id: Optional[str] = None
    element_id: Optional[str] = None


@dataclass
class TextAnimation:
    type: str = "fadeIn"
    duration: Number = 1
    delay: Number = 0
    repeat_count: RepeatCount = 1


@dataclass
class CircleOptions:
    fill: str = "#cccccc"
    stroke: Optional[str] = None
    stroke_width: Number = 1
    element_id: Optional[str] = None


@dataclass
class RectOptions:
    fill: str = "#000000"
    stroke: Optional[str] = None
    stroke_width: Number = 1
    corner_radius: Number = 0
    element_id: Optional[str] = None


@dataclass
class LineOptions:
    stroke: str = "#000000"
    stroke_width: Number = 1
    element_id: Optional[str] = None


@dataclass
class AnimationOptions:
    duration: Number = 1
    repeat_count: RepeatCount = "indefinite"
    begin: Number = 0
    easing: str = "linear"


def _stroke_attrs(stroke: Optional[str], stroke_width: Number) -> Dict[str, Any]:
    if not stroke:
        return {}
    return {"stroke": stroke, "stroke-width": stroke_width}


def _url(element_id: Optional[str]) -> Optional[str]:
    return f"url(#{element_id})" if element_id else None


# ========= SCENE =========

class SvgScene:
    """
    Accumulates definitions and drawable fragments for one image.

    A scene is populated by draw calls in any order and then serialized.
    Drawing after serialize() raises SceneError; serialize() itself may be
    called again and returns identical output.
    """

    def __init__(self, width: Number, height: Number):
        self.width = width
        self.height = height
        self._definitions: List[SvgNode] = []
        self._fragments: List[SvgNode] = []
        self._counters: Dict[str, int] = {}
        self._serialized = False

    @property
    def serialized(self) -> bool:
        return self._serialized

    @property
    def definitions(self) -> List[SvgNode]:
        return list(self._definitions)

    @property
    def fragments(self) -> List[SvgNode]:
        return list(self._fragments)

    def _check_open(self) -> None:
        if self._serialized:
            raise SceneError("Cannot draw on a scene that has already been serialized")

    def _next_id(self, prefix: str) -> str:
        self._counters[prefix] = self._counters.get(prefix, 0) + 1
        return f"{prefix}-{self._counters[prefix]}"

    def _add_definition(self, node: SvgNode) -> SvgNode:
        self._check_open()
        self._definitions.append(node)
        return node

    def _add_fragment(self, node: SvgNode) -> SvgNode:
        self._check_open()
        self._fragments.append(node)
        return node

    def _full_canvas_rect(self, fill: str) -> SvgNode:
        return SvgNode("rect", {"width": "100%", "height": "100%", "fill": fill})

    # ----- backgrounds -----

    def set_background(self, color: str) -> SvgNode:
        """Fill the whole canvas with a solid color."""
        return self._add_fragment(self._full_canvas_rect(color))

    def _linear_gradient(self, colors: Sequence[str], direction: str) -> SvgNode:
        self._check_open()
        if not colors:
            raise SceneError("A gradient needs at least one color")
        if direction not in GRADIENT_VECTORS:
            raise SceneError(f"Unknown gradient direction: {direction}")

        x1, y1, x2, y2 = GRADIENT_VECTORS[direction]
        gradient = SvgNode("linearGradient", {
            "id": self._next_id("gradient"),
            "x1": x1, "y1": y1, "x2": x2, "y2": y2,
        })
        last = len(colors) - 1
        for index, color in enumerate(colors):
            # A single color sits at offset 0
            offset = index / last * 100 if last else 0
            gradient.append(SvgNode("stop", {"offset": f"{format_value(float(offset))}%", "stop-color": color}))
        return gradient

    def set_gradient_background(self, colors: Sequence[str], direction: str = "horizontal") -> SvgNode:
        """Fill the canvas with evenly spaced linear gradient stops."""
        gradient = self._add_definition(self._linear_gradient(colors, direction))
        return self._add_fragment(self._full_canvas_rect(_url(gradient.attrs["id"])))

    def set_animated_gradient_background(
        self,
        colors: Sequence[str],
        direction: str = "diagonal",
        duration: Number = 4,
        repeat_count: RepeatCount = "indefinite",
        animate_type: str = "color",
    ) -> SvgNode:
        """
        Fill the canvas with a gradient that changes over time.

        color: each stop cycles to the next stop's color and back.
        opacity: each stop's opacity cycles 1 -> 0.3 -> 1.
        position: the whole gradient slides back and forth.

        Stop animations are staggered by duration / len(colors) so the stops
        do not change in lockstep.
        """
        if animate_type not in GRADIENT_ANIMATIONS:
            raise SceneError(f"Unknown gradient animation: {animate_type}")

        gradient = self._linear_gradient(colors, direction)
        count = len(colors)

        if animate_type == "position":
            dx, dy = GRADIENT_SHIFTS[direction]
            gradient.attrs["spreadMethod"] = "reflect"
            gradient.append(animation_node(
                "animateTransform",
                attributeName="gradientTransform",
                type_="translate",
                values=f"0 0;{dx} {dy};0 0",
                dur=seconds(duration),
                repeatCount=repeat_count,
            ))
        else:
            for index, stop in enumerate(gradient.children):
                begin = seconds(index * duration / count)
                if animate_type == "color":
                    color = colors[index]
                    next_color = colors[(index + 1) % count]
                    stop.append(animation_node(
                        attributeName="stop-color",
                        values=f"{color};{next_color};{color}",
                        begin=begin,
                        dur=seconds(duration),
                        repeatCount=repeat_count,
                    ))
                else:
                    stop.append(animation_node(
                        attributeName="stop-opacity",
                        values="1;0.3;1",
                        begin=begin,
                        dur=seconds(duration),
                        repeatCount=repeat_count,
                    ))

        self._add_definition(gradient)
        return self._add_fragment(self._full_canvas_rect(_url(gradient.attrs["id"])))

    # ----- text -----

    def _text_node(self, text: Optional[str], x: Number, y: Number, options: TextOptions) -> SvgNode:
        attrs: Dict[str, Any] = {
            "id": options.element_id,
            "x": x,
            "y": y,
            "font-family": options.font_family,
            "font-size": options.font_size,
            "font-weight": options.font_weight,
            "font-style": options.font_style if options.font_style != "normal" else None,
            "fill": options.fill,
        }
        attrs.update(_stroke_attrs(options.stroke, options.stroke_width))
        attrs.update({
            "text-anchor": options.anchor,
            "dominant-baseline": options.baseline,
            "filter": _url(options.filter_id),
        })
        return SvgNode("text", attrs, text=text)

    def draw_text(self, text: str, x: Number, y: Number, options: Optional[TextOptions] = None) -> SvgNode:
        """Draw a line of text. The text is escaped on serialization."""
        return self._add_fragment(self._text_node(text, x, y, options or TextOptions()))

    def draw_animated_text(
        self,
        text: str,
        x: Number,
        y: Number,
        options: Optional[TextOptions] = None,
        animation: Optional[TextAnimation] = None,
    ) -> SvgNode:
        """
        Draw text with an entrance animation.

        fadeIn, slideIn and scaleIn start hidden (transparent, off canvas,
        scaled to nothing) and settle in place after the delay; bounce
        repeatedly lifts the text. typewriter reveals one character at a time,
        character i appearing at delay + i * duration / len(text).
        """
        options = options or TextOptions()
        animation = animation or TextAnimation()
        if animation.type not in TEXT_ANIMATIONS:
            raise SceneError(f"Unknown text animation: {animation.type}")

        self._check_open()
        begin = seconds(animation.delay)
        dur = seconds(animation.duration)

        if animation.type == "typewriter":
            node = self._text_node(None, x, y, options)
            step = animation.duration / len(text) if text else 0
            for index, char in enumerate(text):
                tspan = node.append(SvgNode("tspan", {"opacity": 0}, text=char))
                tspan.append(animation_node(
                    attributeName="opacity",
                    from_=0,
                    to=1,
                    begin=seconds(animation.delay + index * step),
                    dur=seconds(TYPEWRITER_REVEAL_SECONDS),
                    fill="freeze",
                ))
            return self._add_fragment(node)

        node = self._text_node(text, x, y, options)
        if animation.type == "fadeIn":
            node.attrs["opacity"] = 0
            node.append(animation_node(
                attributeName="opacity",
                from_=0,
                to=1,
                begin=begin,
                dur=dur,
                fill="freeze",
                repeatCount=animation.repeat_count,
            ))
        elif animation.type == "slideIn":
            start = f"{format_value(-self.width)} 0"
            node.attrs["transform"] = f"translate({start})"
            node.append(animation_node(
                "animateTransform",
                attributeName="transform",
                type_="translate",
                from_=start,
                to="0 0",
                begin=begin,
                dur=dur,
                fill="freeze",
                repeatCount=animation.repeat_count,
            ))
        elif animation.type == "scaleIn":
            node.attrs["transform"] = "scale(0)"
            node.attrs["transform-origin"] = f"{format_value(x)} {format_value(y)}"
            node.append(animation_node(
                "animateTransform",
                attributeName="transform",
                type_="scale",
                from_=0,
                to=1,
                begin=begin,
                dur=dur,
                fill="freeze",
                repeatCount=animation.repeat_count,
            ))
        else:
            lift = format_value(-round(options.font_size * 0.3, 2))
            node.append(animation_node(
                "animateTransform",
                attributeName="transform",
                type_="translate",
                values=f"0 0;0 {lift};0 0",
                begin=begin,
                dur=dur,
                repeatCount=animation.repeat_count,
            ))
        return self._add_fragment(node)

    # ----- shapes -----

    def draw_circle(self, cx: Number, cy: Number, r: Number, options: Optional[CircleOptions] = None) -> SvgNode:
        options = options or CircleOptions()
        attrs: Dict[str, Any] = {"id": options.element_id, "cx": cx, "cy": cy, "r": r, "fill": options.fill}
        attrs.update(_stroke_attrs(options.stroke, options.stroke_width))
        return self._add_fragment(SvgNode("circle", attrs))

    def draw_rectangle(
        self, x: Number, y: Number, width: Number, height: Number, options: Optional[RectOptions] = None
    ) -> SvgNode:
        options = options or RectOptions()
        attrs: Dict[str, Any] = {
            "id": options.element_id,
            "x": x,
            "y": y,
            "width": width,
            "height": height,
            "fill": options.fill,
        }
        attrs.update(_stroke_attrs(options.stroke, options.stroke_width))
        if options.corner_radius > 0:
            attrs["rx"] = options.corner_radius
        return self._add_fragment(SvgNode("rect", attrs))

    def draw_line(
        self, x1: Number, y1: Number, x2: Number, y2: Number, options: Optional[LineOptions] = None
    ) -> SvgNode:
        options = options or LineOptions()
        return self._add_fragment(SvgNode("line", {
            "id": options.element_id,
            "x1": x1,
            "y1": y1,
            "x2": x2,
            "y2": y2,
            "stroke": options.stroke,
            "stroke-width": options.stroke_width,
        }))

    def draw_image(
        self,
        href: str,
        x: Number,
        y: Number,
        width: Number,
        height: Number,
        clip_circle: bool = False,
    ) -> SvgNode:
        """Reference an external image, optionally clipped to the inscribed circle."""
        self._check_open()
        clip_ref = None
        if clip_circle:
            clip_id = self._next_id("clip")
            clip = SvgNode("clipPath", {"id": clip_id})
            clip.append(SvgNode("circle", {
                "cx": x + width / 2,
                "cy": y + height / 2,
                "r": min(width, height) / 2,
            }))
            self._add_definition(clip)
            clip_ref = _url(clip_id)

        return self._add_fragment(SvgNode("image", {
            "href": href,
            "x": x,
            "y": y,
            "width": width,
            "height": height,
            "preserveAspectRatio": "xMidYMid slice",
            "clip-path": clip_ref,
        }))

    # ----- definitions and animations -----

    def add_drop_shadow_filter(
        self,
        filter_id: str,
        dx: Number = 2,
        dy: Number = 2,
        blur: Number = 4,
        opacity: Number = 0.5,
    ) -> SvgNode:
        """Register a drop shadow filter that text can reference through TextOptions.filter_id."""
        node = SvgNode("filter", {"id": filter_id, "x": "-50%", "y": "-50%", "width": "200%", "height": "200%"})
        node.append(SvgNode("feDropShadow", {
            "dx": dx,
            "dy": dy,
            "stdDeviation": blur,
            "flood-opacity": opacity,
        }))
        return self._add_definition(node)

    def add_custom_animation(
        self,
        target_id: str,
        attribute_name: str,
        values: Sequence[Any],
        options: Optional[AnimationOptions] = None,
    ) -> SvgNode:
        """
        Animate an attribute of a previously drawn fragment through a list of values.

        Args:
            target_id: element_id given to the fragment when it was drawn
            attribute_name: SVG attribute to animate, e.g. "fill" or "r"
            values: keyframe values, evenly spaced over the duration
            options: timing and easing

        Returns:
            The animation node attached to the target
        """
        self._check_open()
        options = options or AnimationOptions()
        if not values:
            raise SceneError("A custom animation needs at least one value")

        target = None
        for fragment in self._fragments:
            target = fragment.find(target_id)
            if target is not None:
                break
        if target is None:
            raise SceneError(f"No fragment with id '{target_id}'")

        timing: Dict[str, Any] = {}
        if options.easing in CALC_MODES:
            timing["calcMode"] = options.easing
        elif options.easing in EASING_SPLINES:
            if len(values) < 2:
                raise SceneError("Spline easing needs at least two values")
            segments = len(values) - 1
            timing["calcMode"] = "spline"
            timing["keyTimes"] = ";".join(format_value(round(i / segments, 4)) for i in range(segments + 1))
            timing["keySplines"] = ";".join([EASING_SPLINES[options.easing]] * segments)
        else:
            raise SceneError(f"Unknown easing: {options.easing}")

        return target.append(animation_node(
            attributeName=attribute_name,
            values=";".join(format_value(value) for value in values),
            begin=seconds(options.begin),
            dur=seconds(options.duration),
            repeatCount=options.repeat_count,
            **timing,
        ))

    # ----- output -----

    def _check_references(self) -> None:
        defined = {node.attrs.get("id") for node in self._definitions}
        for fragment in self._fragments:
            for node in fragment.iter():
                for value in node.attrs.values():
                    if not isinstance(value, str):
                        continue
                    for ref in _URL_REF_RE.findall(value):
                        if ref not in defined:
                            raise SceneError(f"Reference to undefined definition '#{ref}'")

    def serialize(self) -> str:
        """
        Render the scene as an SVG document.

        Definitions come first, in the order they were added, followed by
        the fragments in drawing order.
        """
        self._check_references()
        root = SvgNode("svg", {
            "xmlns": SVG_NAMESPACE,
            "width": self.width,
            "height": self.height,
            "viewBox": f"0 0 {format_value(self.width)} {format_value(self.height)}",
        })
        if self._definitions:
            root.append(SvgNode("defs", children=list(self._definitions)))
        root.children.extend(self._fragments)

        self._serialized = True
        return f"{XML_DECLARATION}\n{render_node(root)}\n"

    def to_svg(self) -> str:
        return self.serialize()
