"""Global and per-wallpaper settings of the running wallpaper daemon."""

from __future__ import annotations

import argparse
import enum
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from livebg.protocol import DEFAULT_SOCKET_PATH, ControlClient, ControlError
from livebg.wallpapers import Property, PropType, Wallpaper, WallpaperCatalog

_COLOR_SCALE = 65535.0
_USEC_PER_SEC = 1000000
_DEFAULT_FPS_SLIDER_MAX = 60
_COLOR_PROPERTIES = ("xlivebg.color", "xlivebg.color2")


class FitMode(enum.Enum):
    """How the background image is fitted to the screen."""

    FULL = "full"
    CROP = "crop"
    STRETCH = "stretch"


class BackgroundMode(enum.Enum):
    """How the background colour is filled."""

    SOLID = "solid"
    VGRAD = "vgrad"
    HGRAD = "hgrad"


class _Client(Protocol):
    def ping(self) -> bool: ...
    def save(self) -> None: ...
    def cfgpath(self) -> str: ...
    def getprop_str(self, name: str) -> str: ...
    def getprop_int(self, name: str) -> int: ...
    def getprop_num(self, name: str) -> float: ...
    def getprop_vec(self, name: str) -> tuple[float, float, float, float]: ...
    def setprop_str(self, name: str, value: str) -> None: ...
    def setprop_int(self, name: str, value: int) -> None: ...
    def setprop_num(self, name: str, value: float) -> None: ...
    def setprop_vec(self, name: str, value: Sequence[float]) -> None: ...
    def getupd(self) -> int: ...


def clean_path(text: str) -> str:
    """Drop leading whitespace and everything from the first line break on."""
    text = text.lstrip()
    for i, ch in enumerate(text):
        if ch in "\r\n":
            return text[:i]
    return text


def _zero_vec() -> list[float]:
    return [0.0, 0.0, 0.0, 0.0]


@dataclass
class Settings:
    """Snapshot of the daemon's global settings."""

    image: str | None = None
    mask: str | None = None
    bgmode: BackgroundMode = BackgroundMode.SOLID
    colors: list[list[float]] = field(default_factory=lambda: [_zero_vec(), _zero_vec()])
    fit: FitMode = FitMode.FULL
    crop_zoom: float = 1.0
    crop_dir: list[float] = field(default_factory=_zero_vec)
    fps: int = -1
    force_fps: bool = False
    fps_slider_max: int = _DEFAULT_FPS_SLIDER_MAX

    @property
    def end_color_enabled(self) -> bool:
        return self.bgmode is not BackgroundMode.SOLID

    @property
    def crop_options_enabled(self) -> bool:
        return self.fit is FitMode.CROP


class SettingsController:
    """Reads the daemon's settings and forwards changes to it."""

    def __init__(self, client: _Client) -> None:
        self.client = client
        self.settings = Settings()

    def _path(self, name: str) -> str | None:
        try:
            return clean_path(self.client.getprop_str(name))
        except ControlError:
            return None

    def load(self) -> Settings:
        """Fetch the global settings from the daemon."""
        client = self.client
        s = Settings()
        s.image = self._path("xlivebg.image")
        s.mask = self._path("xlivebg.anim_mask")

        modes = list(BackgroundMode)
        try:
            idx = client.getprop_int("xlivebg.bgmode")
        except ControlError:
            idx = 0
        if 0 <= idx < len(modes):
            s.bgmode = modes[idx]

        for i, name in enumerate(_COLOR_PROPERTIES):
            try:
                s.colors[i] = list(client.getprop_vec(name))
            except ControlError:
                pass

        fit = self._path("xlivebg.fit")
        if fit == "crop":
            s.fit = FitMode.CROP
        elif fit == "stretch":
            s.fit = FitMode.STRETCH

        try:
            s.crop_zoom = client.getprop_num("xlivebg.crop_zoom")
        except ControlError:
            pass
        try:
            s.crop_dir = list(client.getprop_vec("xlivebg.crop_dir"))
        except ControlError:
            pass

        try:
            s.fps = client.getprop_int("xlivebg.fps")
        except ControlError:
            s.fps = -1
        s.force_fps = s.fps > 0
        if not s.force_fps:
            try:
                upd = client.getupd()
            except ControlError:
                upd = 0
            if upd > 0:
                s.fps = _USEC_PER_SEC // upd
        s.fps_slider_max = max(s.fps, _DEFAULT_FPS_SLIDER_MAX)

        self.settings = s
        return s

    def set_image(self, path: str) -> None:
        self.client.setprop_str("xlivebg.image", path)
        self.settings.image = path

    def set_mask(self, path: str) -> None:
        self.client.setprop_str("xlivebg.anim_mask", path)
        self.settings.mask = path

    def set_bgmode(self, mode: BackgroundMode | int) -> None:
        if not isinstance(mode, BackgroundMode):
            mode = list(BackgroundMode)[mode]
        self.client.setprop_str("xlivebg.bgmode", mode.value)
        self.settings.bgmode = mode

    def set_color(self, index: int, r: int, g: int, b: int) -> None:
        """Set background colour 0 or 1 from 16-bit channel values."""
        color = self.settings.colors[index]
        color[0] = r / _COLOR_SCALE
        color[1] = g / _COLOR_SCALE
        color[2] = b / _COLOR_SCALE
        self.client.setprop_vec(_COLOR_PROPERTIES[index], color)

    def set_fit(self, mode: FitMode | int) -> None:
        if not isinstance(mode, FitMode):
            mode = list(FitMode)[mode]
        self.settings.fit = mode
        self.client.setprop_str("xlivebg.fit", mode.value)

    def set_crop_zoom(self, value: float) -> None:
        self.settings.crop_zoom = value
        self.client.setprop_num("xlivebg.crop_zoom", value)

    def set_crop_dir(self, axis: int, value: float) -> None:
        """Set the horizontal (0) or vertical (1) crop pan."""
        self.settings.crop_dir[axis] = value
        self.client.setprop_vec("xlivebg.crop_dir", self.settings.crop_dir)

    def set_force_fps(self, enabled: bool) -> None:
        self.settings.force_fps = bool(enabled)
        self.client.setprop_int("xlivebg.fps", self.settings.fps if enabled else -1)

    def set_fps(self, fps: int) -> bool:
        """Send a new frame rate if it differs; return whether it was sent."""
        if fps == self.settings.fps:
            return False
        self.settings.fps = fps
        self.client.setprop_int("xlivebg.fps", fps)
        return True

    def set_number_property(self, prop: Property, value: float) -> bool:
        if value == prop.value:
            return False
        prop.value = value
        self.client.setprop_num(prop.fullname, value)
        return True

    def set_integer_property(self, prop: Property, value: int) -> bool:
        if value == prop.value:
            return False
        prop.value = value
        self.client.setprop_int(prop.fullname, value)
        return True

    def set_bool_property(self, prop: Property, value: bool) -> bool:
        value = bool(value)
        if value == prop.value:
            return False
        prop.value = value
        self.client.setprop_int(prop.fullname, int(value))
        return True

    def set_color_property(self, prop: Property, r: int, g: int, b: int) -> bool:
        if prop.value == (r, g, b):
            return False
        prop.value = (r, g, b)
        vec = (r / _COLOR_SCALE, g / _COLOR_SCALE, b / _COLOR_SCALE, 1.0)
        self.client.setprop_vec(prop.fullname, vec)
        return True

    def set_path_property(self, prop: Property, path: str) -> None:
        prop.value = path
        self.client.setprop_str(prop.fullname, path)

    def property_values(self, wallpaper: Wallpaper) -> dict[str, object]:
        """Fetch the current value of each property of a wallpaper.

        Properties whose value cannot be read are left out.
        """
        values: dict[str, object] = {}
        for prop in wallpaper.properties:
            try:
                value = self._fetch(prop)
            except ControlError:
                continue
            prop.value = value
            values[prop.name] = value
        return values

    def _fetch(self, prop: Property) -> object:
        client = self.client
        if prop.type is PropType.BOOL:
            return bool(client.getprop_int(prop.fullname))
        if prop.type is PropType.TEXT:
            return client.getprop_str(prop.fullname).rstrip("\r\n")
        if prop.type is PropType.NUMBER:
            return client.getprop_num(prop.fullname)
        if prop.type is PropType.INTEGER:
            return client.getprop_int(prop.fullname)
        if prop.type is PropType.COLOR:
            vec = client.getprop_vec(prop.fullname)
            return tuple(int(c * _COLOR_SCALE) for c in vec[:3])
        return clean_path(client.getprop_str(prop.fullname))

    def save(self) -> str | None:
        """Ask the daemon to save its configuration; return the file it writes, if known."""
        try:
            path: str | None = self.client.cfgpath()
        except ControlError:
            path = None
        self.client.save()
        return path


def _print_settings(settings: Settings) -> None:
    print(f"image: {settings.image or ''}")
    print(f"animation mask: {settings.mask or ''}")
    print(f"background mode: {settings.bgmode.value}")
    for i, color in enumerate(settings.colors):
        print(f"color {i + 1}: " + " ".join(f"{c:g}" for c in color[:3]))
    print(f"fit: {settings.fit.value}")
    print(f"crop zoom: {settings.crop_zoom:g}")
    print(f"crop pan: {settings.crop_dir[0]:g} {settings.crop_dir[1]:g}")
    forced = " (forced)" if settings.force_fps else ""
    print(f"frame rate: {settings.fps}{forced}")


def main(argv: Sequence[str] | None = None) -> int:
    """Show or change the settings of the running wallpaper daemon."""
    parser = argparse.ArgumentParser(prog="livebg", description="wallpaper daemon configuration")
    parser.add_argument("--socket", default=DEFAULT_SOCKET_PATH, help="control socket path")
    parser.add_argument("--switch", metavar="NAME", help="switch to the named wallpaper")
    parser.add_argument("--save", action="store_true", help="save the daemon configuration")
    args = parser.parse_args(argv)

    client = ControlClient(args.socket)
    try:
        client.ping()
    except ControlError:
        print("No response from xlivebg. Make sure it's running!", file=sys.stderr)
        return 1

    try:
        catalog = WallpaperCatalog(client)
        catalog.refresh()
        controller = SettingsController(client)
        if args.switch:
            catalog.switch(args.switch)
        settings = controller.load()

        print("Wallpapers:")
        active = catalog.active()
        for wp in catalog:
            marker = "*" if active is not None and wp.name == active.name else " "
            print(f" {marker} {wp.name}: {wp.desc or ''}")
        _print_settings(settings)
        if active is not None:
            print(f"Wallpaper settings: {active.name}")
            for name, value in controller.property_values(active).items():
                print(f"  {name}: {value}")
        if args.save:
            path = controller.save()
            if path:
                print(f"saved {path}")
    except (ControlError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0