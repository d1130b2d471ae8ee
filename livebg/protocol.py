"""Client for the wallpaper daemon's line-based control socket."""

from __future__ import annotations

import re
import socket
from collections.abc import Sequence

DEFAULT_SOCKET_PATH = "/tmp/xlivebg.sock"

_STATUS_OK = "OK!\n"
_VECTOR_SIZE = 4

_INT_RE = re.compile(r"\s*[+-]?\d+")
_FLOAT_RE = re.compile(
    r"\s*[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


class ControlError(Exception):
    """Raised when the daemon cannot be reached or rejects a request."""


def _atoi(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group()) if match else 0


def _atof(text: str) -> float:
    match = _FLOAT_RE.match(text)
    return float(match.group()) if match else 0.0


def _scan_floats(text: str, count: int) -> list[float]:
    values: list[float] = []
    pos = 0
    while len(values) < count:
        match = _FLOAT_RE.match(text, pos)
        if not match:
            break
        values.append(float(match.group()))
        pos = match.end()
    return values


class _Session:
    """One request/response exchange over a fresh connection."""

    def __init__(self, path: str, request: str) -> None:
        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            self._sock.connect(path)
            self._sock.sendall(request.encode("utf-8"))
        except OSError as exc:
            self._sock.close()
            reason = exc.strerror or str(exc)
            raise ControlError(f"failed to talk to control socket {path}: {reason}") from exc
        self._reader = self._sock.makefile("rb")

    def __enter__(self) -> _Session:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._reader.close()
        self._sock.close()

    def read_line(self) -> str | None:
        """Return the next complete line with its newline, or None at end of stream."""
        try:
            raw = self._reader.readline()
        except OSError:
            return None
        if not raw.endswith(b"\n"):
            return None
        return raw.decode("utf-8", errors="replace")

    def read_status(self) -> bool | None:
        """Return True for an OK status, False for any other, None at end of stream."""
        line = self.read_line()
        if line is None:
            return None
        return line == _STATUS_OK

    def response_line_count(self) -> int:
        line = self.read_line()
        if line is None:
            return 0
        return max(_atoi(line), 0)


class ControlClient:
    """Sends commands to the running wallpaper daemon."""

    def __init__(self, path: str = DEFAULT_SOCKET_PATH) -> None:
        self.path = path

    def _session(self, request: str) -> _Session:
        return _Session(self.path, request)

    def _simple(self, request: str) -> None:
        with self._session(request) as session:
            if not session.read_status():
                raise ControlError(f"request failed: {request.strip()}")

    def _multiline(self, request: str) -> str:
        with self._session(request) as session:
            if not session.read_status():
                raise ControlError(f"request failed: {request.strip()}")
            lines = []
            for _ in range(session.response_line_count()):
                line = session.read_line()
                if line is None:
                    raise ControlError(f"truncated response to: {request.strip()}")
                lines.append(line)
        return "".join(lines)

    def _single_value(self, request: str) -> str:
        with self._session(request) as session:
            if not session.read_status():
                raise ControlError(f"request failed: {request.strip()}")
            if session.response_line_count() <= 0:
                raise ControlError(f"empty response to: {request.strip()}")
            line = session.read_line()
            if line is None:
                raise ControlError(f"truncated response to: {request.strip()}")
        return line

    def ping(self) -> bool:
        """Check that the daemon answers; return whether it answered OK."""
        with self._session("ping\n") as session:
            status = session.read_status()
        if status is None:
            raise ControlError("no response from daemon")
        return status

    def save(self) -> None:
        """Ask the daemon to write its configuration file."""
        self._simple("save\n")

    def cfgpath(self) -> str:
        """Return the path of the daemon's configuration file."""
        text = self._multiline("cfgpath\n")
        return re.split(r"[\r\n]", text, maxsplit=1)[0]

    def list_wallpapers(self) -> str:
        """Return the raw wallpaper list, one "name:description" per line."""
        return self._multiline("list\n")

    def proplist(self, bgname: str | None = None) -> str:
        """Return the property list text of a wallpaper, or of the active one."""
        if bgname:
            return self._multiline(f"lsprop {bgname}\n")
        return self._multiline("lsprop\n")

    def getprop_str(self, name: str) -> str:
        return self._multiline(f"getpropstr {name}\n")

    def getprop_int(self, name: str) -> int:
        return _atoi(self._single_value(f"getpropint {name}\n"))

    def getprop_num(self, name: str) -> float:
        return _atof(self._single_value(f"getpropnum {name}\n"))

    def getprop_vec(self, name: str) -> tuple[float, float, float, float]:
        values = _scan_floats(self._single_value(f"getpropvec {name}\n"), _VECTOR_SIZE)
        values.extend([0.0] * (_VECTOR_SIZE - len(values)))
        return (values[0], values[1], values[2], values[3])

    def setprop_str(self, name: str, value: str) -> None:
        self._simple(f"propstr {name} {value}\n")

    def setprop_int(self, name: str, value: int) -> None:
        self._simple(f"propint {name} {int(value)}\n")

    def setprop_num(self, name: str, value: float) -> None:
        self._simple(f"propnum {name} {float(value):g}\n")

    def setprop_vec(self, name: str, value: Sequence[float]) -> None:
        values = [float(v) for v in value]
        if len(values) > _VECTOR_SIZE:
            raise ValueError(f"vector has more than {_VECTOR_SIZE} components")
        values.extend([0.0] * (_VECTOR_SIZE - len(values)))
        text = " ".join(f"{v:g}" for v in values)
        self._simple(f"propvec {name} {text}\n")

    def rmprop(self, name: str) -> None:
        self._simple(f"rmprop {name}\n")

    def getupd(self) -> int:
        """Return the daemon's update interval in microseconds."""
        line = self._single_value("getupd\n")
        match = _INT_RE.match(line)
        if not match:
            raise ControlError(f"invalid update rate: {line.strip()}")
        return int(match.group())