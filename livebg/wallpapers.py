"""Wallpaper catalogue and the property lists wallpapers publish."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Protocol

from livebg.protocol import ControlError

log = logging.getLogger(__name__)

ACTIVE_PROPERTY = "xlivebg.active"


class PropType(enum.IntEnum):
    """Kinds of tweakable wallpaper property."""

    BOOL = 0
    TEXT = 1
    NUMBER = 2
    INTEGER = 3
    COLOR = 4
    FILENAME = 0x100
    DIRNAME = 0x200
    PATHNAME = 0x300

    @classmethod
    def from_name(cls, name: str) -> PropType:
        """Return the type named in a property list, or raise ValueError."""
        try:
            return _TYPE_NAMES[name]
        except KeyError:
            raise ValueError(f"invalid property type: {name}") from None


_TYPE_NAMES = {
    "boolean": PropType.BOOL,
    "text": PropType.TEXT,
    "number": PropType.NUMBER,
    "integer": PropType.INTEGER,
    "color": PropType.COLOR,
    "filename": PropType.FILENAME,
    "dirname": PropType.DIRNAME,
    "pathname": PropType.PATHNAME,
}


@dataclass
class Property:
    """One property of a wallpaper, as described by its property list."""

    type: PropType
    name: str
    fullname: str
    desc: str | None = None
    multiline: bool = False
    start: float = 0
    end: float = 0
    value: object = None


@dataclass
class Wallpaper:
    """A wallpaper known to the daemon."""

    name: str
    desc: str | None = None
    properties: list[Property] = field(default_factory=list)


class _Client(Protocol):
    def list_wallpapers(self) -> str: ...
    def proplist(self, bgname: str | None = None) -> str: ...
    def getprop_str(self, name: str) -> str: ...
    def setprop_str(self, name: str, value: str) -> None: ...


# ---- property list text format ----

_TOKEN_RE = re.compile(r'\s+|"(?:[^"\\]|\\.)*"|[{}\[\]=,]|[^\s{}\[\]=,"]+')
_PUNCT = frozenset("{}[]=,")


@dataclass
class _Value:
    text: str
    number: float | None = None
    vector: list[float] | None = None


@dataclass
class _Node:
    name: str
    attrs: dict[str, _Value] = field(default_factory=dict)
    children: list[_Node] = field(default_factory=list)

    def attr_str(self, name: str) -> str | None:
        value = self.attrs.get(name)
        return value.text if value else None

    def attr_int(self, name: str, default: int = 0) -> int:
        value = self.attrs.get(name)
        if value is None or value.number is None:
            return default
        return int(value.number)

    def attr_vec(self, name: str) -> list[float] | None:
        value = self.attrs.get(name)
        return value.vector if value else None


def _to_number(text: str) -> float | None:
    try:
        return float(text)
    except ValueError:
        return None


def _tokenize(text: str) -> list[tuple[str, bool]]:
    """Split into (token, quoted) pairs, dropping whitespace."""
    tokens = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise ValueError(f"unterminated string at offset {pos}")
        tok = match.group()
        pos = match.end()
        if tok.isspace():
            continue
        if tok.startswith('"'):
            body = re.sub(r"\\(.)", r"\1", tok[1:-1])
            tokens.append((body, True))
        else:
            tokens.append((tok, False))
    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self._tokens = _tokenize(text)
        self._pos = 0

    def _peek(self) -> tuple[str, bool] | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> tuple[str, bool]:
        tok = self._peek()
        if tok is None:
            raise ValueError("unexpected end of property list")
        self._pos += 1
        return tok

    def _expect(self, punct: str) -> None:
        tok, quoted = self._next()
        if quoted or tok != punct:
            raise ValueError(f"expected {punct!r}, found {tok!r}")

    def _name(self) -> str:
        tok, quoted = self._next()
        if not quoted and tok in _PUNCT:
            raise ValueError(f"expected a name, found {tok!r}")
        return tok

    def parse_root(self) -> _Node:
        if self._peek() is None:
            raise ValueError("empty property list")
        return self._node(self._name())

    def _node(self, name: str) -> _Node:
        node = _Node(name)
        self._expect("{")
        while True:
            tok = self._peek()
            if tok is None:
                raise ValueError(f"unterminated node {name!r}")
            if tok == ("}", False):
                self._pos += 1
                return node
            key = self._name()
            follow = self._peek()
            if follow == ("{", False):
                node.children.append(self._node(key))
            elif follow == ("=", False):
                self._pos += 1
                node.attrs.setdefault(key, self._value())
            else:
                raise ValueError(f"expected '{{' or '=' after {key!r}")

    def _scalar(self) -> str:
        tok, quoted = self._next()
        if not quoted and tok in _PUNCT:
            raise ValueError(f"expected a value, found {tok!r}")
        return tok

    def _value(self) -> _Value:
        tok = self._peek()
        if tok == ("[", False):
            self._pos += 1
            items = []
            while True:
                item = self._scalar()
                number = _to_number(item)
                if number is None:
                    raise ValueError(f"invalid vector element {item!r}")
                items.append(number)
                sep, quoted = self._next()
                if quoted or sep not in ",]":
                    raise ValueError(f"expected ',' or ']', found {sep!r}")
                if sep == "]":
                    break
            text = "[" + ", ".join(f"{v:g}" for v in items) + "]"
            return _Value(text, items[0], items)
        text = self._scalar()
        return _Value(text, _to_number(text))


def parse_proplist(bgname: str, text: str) -> list[Property]:
    """Parse a wallpaper's property list; invalid properties are skipped.

    Raises ValueError if the text cannot be parsed or its root is not a proplist.
    """
    root = _Parser(text).parse_root()
    if root.name != "proplist":
        raise ValueError(
            f"parse_proplist({bgname}): unexpected root node {root.name!r} (expected: proplist)"
        )

    props = []
    for node in root.children:
        ident = node.attr_str("id")
        typestr = node.attr_str("type")
        if ident is None or typestr is None:
            log.warning("parse_proplist(%s): invalid property %d", bgname, len(props))
            continue
        try:
            ptype = PropType.from_name(typestr)
        except ValueError:
            log.warning("parse_proplist(%s): invalid property type: %s", bgname, typestr)
            continue

        prop = Property(
            type=ptype,
            name=ident,
            fullname=f"xlivebg.{bgname}.{ident}",
            desc=node.attr_str("desc"),
        )
        if ptype is PropType.TEXT:
            prop.multiline = bool(node.attr_int("multiline", 0))
        elif ptype in (PropType.NUMBER, PropType.INTEGER):
            vec = node.attr_vec("range")
            if vec and len(vec) >= 2:
                if ptype is PropType.NUMBER:
                    prop.start, prop.end = float(vec[0]), float(vec[1])
                else:
                    prop.start, prop.end = int(vec[0]), int(vec[1])
        props.append(prop)
    return props


def parse_wallpaper_list(text: str) -> list[Wallpaper]:
    """Parse the daemon's "name:description" list into wallpapers."""
    wallpapers = []
    pos = 0
    while True:
        colon = text.find(":", pos)
        if colon < 0:
            break
        wallpaper = Wallpaper(text[pos:colon])
        wallpapers.append(wallpaper)
        pos = colon + 1
        newline = text.find("\n", pos)
        if newline < 0:
            break
        wallpaper.desc = text[pos:newline]
        pos = newline + 1
    return wallpapers


class WallpaperCatalog:
    """The wallpapers the daemon offers, with their property lists."""

    def __init__(self, client: _Client) -> None:
        self.client = client
        self._wallpapers: list[Wallpaper] = []

    def refresh(self) -> None:
        """Fetch the wallpaper list and each wallpaper's properties."""
        self._wallpapers = []
        text = self.client.list_wallpapers()
        if not text:
            raise ControlError("failed to retrieve wallpaper list")
        wallpapers = parse_wallpaper_list(text)

        for wallpaper in wallpapers:
            try:
                plist = self.client.proplist(wallpaper.name)
            except ControlError:
                plist = ""
            if not plist:
                log.warning("failed to retrieve property list for wallpaper: %s", wallpaper.name)
                continue
            try:
                wallpaper.properties = parse_proplist(wallpaper.name, plist)
            except ValueError as exc:
                log.warning("failed to parse property list: %s", exc)
        self._wallpapers = wallpapers

    def __len__(self) -> int:
        return len(self._wallpapers)

    def __getitem__(self, index: int) -> Wallpaper:
        if index < 0 or index >= len(self._wallpapers):
            raise IndexError(f"wallpaper index {index} out of range")
        return self._wallpapers[index]

    def __iter__(self):
        return iter(self._wallpapers)

    def active(self) -> Wallpaper | None:
        """Return the wallpaper the daemon is showing, if it is in the catalogue."""
        try:
            name = self.client.getprop_str(ACTIVE_PROPERTY)
        except ControlError:
            return None
        cut = name.rfind("\n")
        if cut >= 0:
            name = name[:cut]
        return next((wp for wp in self._wallpapers if wp.name == name), None)

    def switch(self, name: str) -> None:
        """Ask the daemon to show the named wallpaper."""
        if not name:
            raise ValueError("wallpaper name must not be empty")
        self.client.setprop_str(ACTIVE_PROPERTY, name)