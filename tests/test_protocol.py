import os
import queue
import shutil
import socket
import tempfile
import threading

import pytest

from livebg.protocol import ControlClient, ControlError


class FakeDaemon:
    def __init__(self, path):
        self.path = path
        self.requests = []
        self._replies = queue.Queue()
        self._stop = threading.Event()
        self._listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._listener.bind(path)
        self._listener.listen(8)
        self._listener.settimeout(0.1)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def reply(self, *replies):
        for r in replies:
            self._replies.put(r)

    def _serve(self):
        while not self._stop.is_set():
            try:
                conn, _ = self._listener.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            try:
                with conn:
                    conn.settimeout(5)
                    data = b""
                    while not data.endswith(b"\n"):
                        chunk = conn.recv(1024)
                        if not chunk:
                            break
                        data += chunk
                    self.requests.append(data.decode())
                    conn.sendall(self._replies.get(timeout=5))
            except (OSError, queue.Empty):
                continue

    def close(self):
        self._stop.set()
        self._thread.join(2)
        self._listener.close()


@pytest.fixture
def daemon():
    directory = tempfile.mkdtemp(prefix="lbg-")
    server = FakeDaemon(os.path.join(directory, "s.sock"))
    yield server
    server.close()
    shutil.rmtree(directory, ignore_errors=True)


@pytest.fixture
def client(daemon):
    return ControlClient(daemon.path)


def test_ping_ok(daemon, client):
    daemon.reply(b"OK!\n")
    assert client.ping() is True
    assert daemon.requests[-1] == "ping\n"


def test_ping_not_ok_is_not_an_error(daemon, client):
    daemon.reply(b"ERR\n")
    assert client.ping() is False


def test_ping_without_reply_raises(daemon, client):
    daemon.reply(b"")
    with pytest.raises(ControlError):
        client.ping()


def test_ping_partial_line_raises(daemon, client):
    daemon.reply(b"OK!")
    with pytest.raises(ControlError):
        client.ping()


def test_connect_failure_raises():
    directory = tempfile.mkdtemp(prefix="lbg-")
    try:
        missing = ControlClient(os.path.join(directory, "none.sock"))
        with pytest.raises(ControlError):
            missing.ping()
    finally:
        shutil.rmtree(directory, ignore_errors=True)


def test_save_sends_command(daemon, client):
    daemon.reply(b"OK!\n", b"ERR\n")
    client.save()
    assert daemon.requests[-1] == "save\n"
    with pytest.raises(ControlError):
        client.save()
    assert daemon.requests == ["save\n", "save\n"]


def test_save_failure_raises(daemon, client):
    daemon.reply(b"ERR\n")
    with pytest.raises(ControlError):
        client.save()


def test_list_wallpapers_joins_lines(daemon, client):
    daemon.reply(b"OK!\n2\nminimal:Minimal live wallpaper example\ncolcycle:Color cycle\n")
    text = client.list_wallpapers()
    assert text == "minimal:Minimal live wallpaper example\ncolcycle:Color cycle\n"
    assert daemon.requests[-1] == "list\n"


def test_multiline_failure_status_raises(daemon, client):
    daemon.reply(b"ERR\n")
    with pytest.raises(ControlError):
        client.list_wallpapers()


def test_multiline_truncated_raises(daemon, client):
    daemon.reply(b"OK!\n3\nonly:one\n")
    with pytest.raises(ControlError):
        client.list_wallpapers()


def test_multiline_negative_count_is_empty(daemon, client):
    daemon.reply(b"OK!\n-4\n")
    assert client.list_wallpapers() == ""


def test_cfgpath_strips_line_end(daemon, client):
    daemon.reply(b"OK!\n1\n/home/user/.config/xlivebg.conf\r\n")
    assert client.cfgpath() == "/home/user/.config/xlivebg.conf"
    assert daemon.requests[-1] == "cfgpath\n"


def test_proplist_with_name(daemon, client):
    daemon.reply(b"OK!\n2\nproplist {\n}\n")
    assert client.proplist("minimal") == "proplist {\n}\n"
    assert daemon.requests[-1] == "lsprop minimal\n"


def test_proplist_without_name(daemon, client):
    daemon.reply(b"OK!\n0\n")
    assert client.proplist(None) == ""
    assert daemon.requests[-1] == "lsprop\n"


def test_getprop_str(daemon, client):
    daemon.reply(b"OK!\n1\nminimal\n")
    assert client.getprop_str("xlivebg.active") == "minimal\n"
    assert daemon.requests[-1] == "getpropstr xlivebg.active\n"


def test_getprop_int(daemon, client):
    daemon.reply(b"OK!\n1\n42\n")
    assert client.getprop_int("xlivebg.fps") == 42
    assert daemon.requests[-1] == "getpropint xlivebg.fps\n"


def test_getprop_int_non_numeric_is_zero(daemon, client):
    daemon.reply(b"OK!\n1\nabc\n")
    assert client.getprop_int("xlivebg.fps") == 0


def test_getprop_int_without_lines_raises(daemon, client):
    daemon.reply(b"OK!\n0\n")
    with pytest.raises(ControlError):
        client.getprop_int("xlivebg.fps")


def test_getprop_num(daemon, client):
    daemon.reply(b"OK!\n1\n1.5\n")
    assert client.getprop_num("xlivebg.crop_zoom") == 1.5
    assert daemon.requests[-1] == "getpropnum xlivebg.crop_zoom\n"


def test_getprop_vec_pads_missing(daemon, client):
    daemon.reply(b"OK!\n1\n0.5 0.25\n")
    assert client.getprop_vec("xlivebg.crop_dir") == (0.5, 0.25, 0.0, 0.0)
    assert daemon.requests[-1] == "getpropvec xlivebg.crop_dir\n"


def test_getprop_vec_failure_raises(daemon, client):
    daemon.reply(b"NO\n")
    with pytest.raises(ControlError):
        client.getprop_vec("xlivebg.color")


def test_setprop_str(daemon, client):
    daemon.reply(b"OK!\n", b"ERR\n")
    client.setprop_str("xlivebg.active", "minimal")
    assert daemon.requests[-1] == "propstr xlivebg.active minimal\n"
    with pytest.raises(ControlError):
        client.setprop_str("xlivebg.active", "minimal")


def test_setprop_int(daemon, client):
    daemon.reply(b"OK!\n", b"ERR\n")
    client.setprop_int("xlivebg.fps", -1)
    assert daemon.requests[-1] == "propint xlivebg.fps -1\n"
    with pytest.raises(ControlError):
        client.setprop_int("xlivebg.fps", -1)


def test_setprop_num(daemon, client):
    daemon.reply(b"OK!\n", b"ERR\n")
    client.setprop_num("xlivebg.minimal.speed", 0.5)
    assert daemon.requests[-1] == "propnum xlivebg.minimal.speed 0.5\n"
    with pytest.raises(ControlError):
        client.setprop_num("xlivebg.minimal.speed", 0.5)


def test_setprop_vec(daemon, client):
    daemon.reply(b"OK!\n", b"ERR\n")
    client.setprop_vec("xlivebg.color", (1.0, 0.5, 0.0, 1.0))
    assert daemon.requests[-1] == "propvec xlivebg.color 1 0.5 0 1\n"
    with pytest.raises(ControlError):
        client.setprop_vec("xlivebg.color", (1.0, 0.5, 0.0, 1.0))


def test_setprop_vec_too_long_raises(client):
    with pytest.raises(ValueError):
        client.setprop_vec("xlivebg.color", (1, 2, 3, 4, 5))


def test_setprop_failure_raises(daemon, client):
    daemon.reply(b"ERR\n")
    with pytest.raises(ControlError):
        client.setprop_str("xlivebg.active", "none")


def test_rmprop(daemon, client):
    daemon.reply(b"OK!\n", b"ERR\n")
    client.rmprop("xlivebg.image")
    assert daemon.requests[-1] == "rmprop xlivebg.image\n"
    with pytest.raises(ControlError):
        client.rmprop("xlivebg.image")


def test_getupd(daemon, client):
    daemon.reply(b"OK!\n1\n33333\n")
    assert client.getupd() == 33333
    assert daemon.requests[-1] == "getupd\n"


def test_getupd_invalid_raises(daemon, client):
    daemon.reply(b"OK!\n1\nfast\n")
    with pytest.raises(ControlError):
        client.getupd()