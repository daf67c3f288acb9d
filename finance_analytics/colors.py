"""Chart color disambiguation.

Categories may share a declared color. For charts every repeat of a color
is darkened a step further so slices stay distinguishable, while the first
occurrence keeps its declared color.
"""

import math
import re
from collections import defaultdict
from collections.abc import Mapping
from dataclasses import is_dataclass, replace
from typing import Any, Dict, List, Sequence, Tuple

from finance_analytics.config import DARKEN_STEP

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def is_hex_color(value: str) -> bool:
    return isinstance(value, str) and bool(HEX_COLOR.match(value))


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    raw = color.lstrip("#")
    return int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f"#{r:02x}{g:02x}{b:02x}"


def _scale_channel(value: int, factor: float) -> int:
    # half-up rounding, clamped to a byte
    return min(255, max(0, math.floor(value * factor + 0.5)))


def darken(color: str, repeat: int) -> str:
    """Darken `color` for its `repeat`-th duplicate (repeat >= 1)."""
    factor = max(0.0, 1 - repeat * DARKEN_STEP)
    r, g, b = hex_to_rgb(color)
    return rgb_to_hex(*(_scale_channel(c, factor) for c in (r, g, b)))


def chart_colors(colors: Sequence[str]) -> List[str]:
    seen: Dict[str, int] = defaultdict(int)
    result = []
    for color in colors:
        repeat = seen[color]
        seen[color] += 1
        result.append(color if repeat == 0 else darken(color, repeat))
    return result


def _color_of(entry: Any) -> str:
    if isinstance(entry, Mapping):
        return entry["color"]
    return entry.color


def _with_chart_color(entry: Any, chart_color: str) -> Any:
    if isinstance(entry, Mapping):
        return {**entry, "chart_color": chart_color}
    if is_dataclass(entry):
        return replace(entry, chart_color=chart_color)
    raise TypeError(f"Cannot attach chart color to {type(entry).__name__}")


def disambiguate_colors(entries: Sequence[Any]) -> List[Any]:
    """Return copies of `entries` with `chart_color` set, in the same order.

    Entries are mappings with a "color" key or dataclasses with `color` and
    `chart_color` fields. Only `color` is read, so running this again on its
    own output yields the same chart colors.
    """
    colors = chart_colors([_color_of(e) for e in entries])
    return [_with_chart_color(e, c) for e, c in zip(entries, colors)]
