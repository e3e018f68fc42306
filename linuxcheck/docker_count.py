"""Count the running Docker containers, grouped by image."""

from __future__ import annotations

import http.client
import json
import socket
from typing import Any

from .collection import Counter
from .messages import NagStatus, PluginError

DOCKER_SOCKET = "/var/run/docker.sock"

_API_VERSION = "1.18"
_RUNNING_FILTER = '{"status":{"running":true}}'
_UNRESERVED = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.~"
)


def _url_encode(text: str) -> str:
    """Percent-encode every byte outside the unreserved set, in lower case."""
    return "".join(
        chr(byte) if chr(byte) in _UNRESERVED else f"%{byte:02x}"
        for byte in text.encode("utf-8")
    )


def _value_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def _walk(node: Any, token: str, increment: int, counter: Counter) -> None:
    if isinstance(node, dict):
        for key, value in node.items():
            if key == token:
                counter.put(_value_text(value), increment)
            _walk(value, token, increment, counter)
    elif isinstance(node, list):
        for item in node:
            _walk(item, token, increment, counter)


def count_json_values(json_text: str, token: str, increment: int = 1) -> Counter:
    """Count the values of every ``token`` key found anywhere in a JSON text."""
    try:
        document = json.loads(json_text)
    except ValueError as exc:
        raise PluginError(
            NagStatus.UNKNOWN, f'unable to parse the json data for "{token}"s'
        ) from exc
    counter = Counter()
    _walk(document, token, increment, counter)
    return counter


def containers_perfdata(counter: Counter, image: str | None = None) -> tuple[int, str]:
    """Return the number of containers and the performance data string.

    With ``image`` only the containers of that image are reported; otherwise
    every image is listed followed by the total.
    """
    if image:
        count = counter.lookup(image) or 0
        return count, f"containers_{image}={count}"

    parts = [f"containers_{key}={count}" for key, count in counter.items()]
    parts.append(f"containers_total={counter.elements}")
    return counter.elements, " ".join(parts)


class _UnixHTTPConnection(http.client.HTTPConnection):
    def __init__(self, socket_path: str, host: str, timeout: float | None = None):
        super().__init__(host, timeout=timeout)
        self._socket_path = socket_path

    def connect(self) -> None:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        if self.timeout is not None:
            sock.settimeout(self.timeout)
        try:
            sock.connect(self._socket_path)
        except OSError:
            sock.close()
            raise
        self.sock = sock


def _fetch_running_containers(socket_path: str) -> str:
    path = f"/containers/json?filters={_url_encode(_RUNNING_FILTER)}"
    conn = _UnixHTTPConnection(socket_path, f"v{_API_VERSION}", timeout=30)
    try:
        conn.request("GET", path, headers={"User-Agent": "linuxcheck-agent/1.0"})
        body = conn.getresponse().read()
    except OSError as exc:
        raise PluginError(NagStatus.UNKNOWN, str(exc), exc.errno) from exc
    except http.client.HTTPException as exc:
        raise PluginError(NagStatus.UNKNOWN, str(exc) or type(exc).__name__) from exc
    finally:
        conn.close()
    return body.decode("utf-8", errors="replace")


def docker_running_containers(
    image: str | None = None, socket_path: str = DOCKER_SOCKET
) -> tuple[int, str]:
    """Ask the Docker daemon for its running containers.

    Returns the number of running containers (of ``image`` if given) and
    the performance data string.
    """
    data = _fetch_running_containers(socket_path)
    counter = count_json_values(data, "Image", 1)
    return containers_perfdata(counter, image)