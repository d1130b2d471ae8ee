"""Helpers behind the configuration tool's sliders, path fields and option menus."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple, TypeVar

T = TypeVar("T")

_MIN_SLIDER_RANGE = 1e-6
_MIN_SLIDER_STEPS = 100.0
_PATH_BUFFER_SIZE = 512


class SliderScale(NamedTuple):
    """Integer representation of a fractional slider range."""

    decimals: int
    factor: int
    minimum: int
    maximum: int


def slider_scale(minimum: float, maximum: float) -> SliderScale:
    """Pick enough decimal places for the range to span at least 100 integer steps."""
    delta = maximum - minimum
    if delta <= _MIN_SLIDER_RANGE:
        raise ValueError(f"invalid slider range: {minimum} .. {maximum}")
    factor = 1
    decimals = 0
    while delta < _MIN_SLIDER_STEPS:
        delta *= 10.0
        factor *= 10
        decimals += 1
    return SliderScale(decimals, factor, int(minimum * factor), int(maximum * factor))


def slider_to_value(ivalue: int, decimals: int) -> float:
    """Convert an integer slider position to the value it stands for."""
    return ivalue / 10**decimals


def value_to_slider(value: float, decimals: int) -> int:
    """Convert a value to an integer slider position, truncating toward zero."""
    return int(value * 10**decimals)


def browse_start_dir(path: str | None) -> str | None:
    """Return the directory a file browser should open in for the given path."""
    if not path:
        return None
    head = path[: _PATH_BUFFER_SIZE - 1]
    slash = head.rfind("/")
    if slash >= 0:
        head = head[:slash]
    return head or None


def select_option(options: Sequence[T], index: int) -> T:
    """Return the option at index, rejecting anything out of range."""
    if index < 0 or index >= len(options):
        raise IndexError(f"option index {index} out of range")
    return options[index]