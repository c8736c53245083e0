from __future__ import annotations

import re

UNKNOWN_CATEGORY = "Unknown"
DEFAULT_COLOR = "#7aa2ff"

# Keys are normalized EONET category titles.
CATEGORY_COLORS = {
    "wildfires": "#ff7b7b",
    "severestorms": "#ffd166",
    "volcanoes": "#f94144",
    "seaandlakeice": "#90e0ef",
    "snow": "#a8dadc",
    "dustandhaze": "#e9c46a",
    "earthquakes": "#f3722c",
    "floods": "#43aa8b",
    "manmade": "#bdb2ff",
    "watercolor": "#48cae4",
    "landslides": "#8ecae6",
}

LEGEND = [
    ("wildfires", "Wildfires"),
    ("severestorms", "Severe Storms"),
    ("volcanoes", "Volcanoes"),
    ("earthquakes", "Earthquakes"),
    ("floods", "Floods"),
]

_STRIP_RE = re.compile(r"[\s()/]+")


def normalize_category_key(title: str | None) -> str:
    """Lookup key for a category title: lowercased, without whitespace, parentheses or slashes."""
    if not title:
        return ""
    return _STRIP_RE.sub("", str(title).lower())


def color_for_key(key: str) -> str:
    return CATEGORY_COLORS.get(key, DEFAULT_COLOR)


def legend_entries() -> list[dict]:
    return [{"key": key, "label": label, "color": CATEGORY_COLORS[key]} for key, label in LEGEND]


def circle_layer_paint() -> dict:
    """MapLibre paint block for the event circles, colored by ``categoryKey``."""
    color_match: list = ["match", ["get", "categoryKey"]]
    for key, color in CATEGORY_COLORS.items():
        color_match.extend([key, color])
    color_match.append(DEFAULT_COLOR)
    return {
        "circle-radius": ["interpolate", ["linear"], ["zoom"], 0, 2, 3, 3, 5, 5, 7, 7, 9, 10],
        "circle-color": color_match,
        "circle-opacity": 0.9,
        "circle-stroke-width": 1.2,
        "circle-stroke-color": "rgba(0,0,0,0.5)",
    }
