"""Colour conversions and the pixel data of the colour picker."""

from __future__ import annotations

import math

CBOX_WIDTH = 180
CBOX_HEIGHT = 180
HUEBAR_WIDTH = 32
HUEBAR_HEIGHT = CBOX_HEIGHT
COLSEL_HEIGHT = 32
COLOR_WIDGET_WIDTH = CBOX_WIDTH + HUEBAR_WIDTH
COLOR_WIDGET_HEIGHT = CBOX_HEIGHT + COLSEL_HEIGHT

_HUEBAR_MARGIN = 5
_H_THRES = 1.0 / HUEBAR_HEIGHT
_S_THRES = 1.0 / CBOX_WIDTH
_V_THRES = 1.0 / CBOX_HEIGHT
_PIXEL_MASK = 0xFFFFFFFF


def rgb_to_hsv(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Convert RGB in [0, 1] to (hue, saturation, value), hue in [0, 1).

    Black has no hue; its hue is reported as -1.
    """
    lo = min(r, g, b)
    hi = max(r, g, b)
    v = hi
    delta = hi - lo

    if hi == 0:
        return -1.0, 0.0, v
    s = delta / hi

    if not delta:
        delta = 1.0

    if r == hi:
        h = (g - b) / delta
    elif g == hi:
        h = 2 + (b - r) / delta
    else:
        h = 4 + (r - g) / delta

    h *= 60
    if h < 0:
        h += 360
    return h / 360, s, v


def hsv_to_rgb(h: float, s: float, v: float) -> tuple[float, float, float]:
    """Convert (hue, saturation, value), hue in [0, 1], to RGB in [0, 1]."""
    if s == 0.0:
        return v, v, v

    scaled = h * 6.0
    sec = math.floor(scaled)
    frac = scaled - sec

    o = v * (1.0 - s)
    p = v * (1.0 - s * frac)
    q = v * (1.0 - s * (1.0 - frac))

    sectors = {
        1: (p, v, o),
        2: (o, v, q),
        3: (o, p, v),
        4: (q, o, v),
        5: (v, o, p),
    }
    return sectors.get(sec, (v, q, o))


def anim_color(t: float) -> tuple[float, float, float]:
    """Return the cycling colour of the minimal wallpaper at time t (seconds * speed)."""
    st = math.sin(t)
    ct = math.cos(t)
    return st * 0.5 + 0.5, ct * 0.5 + 0.5, -st * 0.5 + 0.5


def _pack(r: float, g: float, b: float) -> int:
    return (int(r * 255.0) << 16) | (int(g * 255.0) << 8) | int(b * 255.0)


def _invert(pixel: int) -> int:
    return ~pixel & _PIXEL_MASK


def huebar_pixels(h: float, background: int) -> list[list[int]]:
    """Return the hue bar rows, top (hue 1) to bottom, with the selected hue inverted.

    Each row starts with a margin in the background pixel value.
    """
    rows = []
    for i in range(HUEBAR_HEIGHT):
        hue = 1.0 - i / HUEBAR_HEIGHT
        pixel = _pack(*hsv_to_rgb(hue, 1.0, 1.0))
        if abs(hue - h) <= _H_THRES:
            pixel = _invert(pixel)
        rows.append([background] * _HUEBAR_MARGIN + [pixel] * (HUEBAR_WIDTH - _HUEBAR_MARGIN))
    return rows


def colorbox_pixels(h: float, s: float, v: float, background: int) -> list[list[int]]:
    """Return the picker image rows: the saturation/value box followed by the hue bar.

    The row and column through the selected value and saturation are inverted.
    """
    hue_rows = huebar_pixels(h, background)
    rows = []
    for i, hue_row in enumerate(hue_rows):
        row_v = 1.0 - i / CBOX_HEIGHT
        on_v = abs(row_v - v) <= _V_THRES
        row = []
        for j in range(CBOX_WIDTH):
            col_s = j / CBOX_WIDTH
            pixel = _pack(*hsv_to_rgb(h, col_s, row_v))
            if on_v or abs(col_s - s) <= _S_THRES:
                pixel = _invert(pixel)
            row.append(pixel)
        rows.append(row + hue_row)
    return rows