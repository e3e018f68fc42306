"""A minimal varlink client for the Podman service."""

from __future__ import annotations

import json
import socket
from dataclasses import dataclass
from typing import Any

from .messages import NagStatus, PluginError

VARLINK_ADDRESS = "unix:/run/podman/io.podman"
SHORTID_LEN = 12

_RECV_SIZE = 65536


class VarlinkError(Exception):
    """A varlink call failed or returned an unusable reply."""


@dataclass
class ContainerStats:
    """Resource usage of one running container."""

    name: str = ""
    block_input: int = 0
    block_output: int = 0
    net_input: int = 0
    net_output: int = 0
    cpu: float = 0.0
    mem_usage: int = 0
    mem_limit: int = 0
    pids: int = 0

    @classmethod
    def from_reply(cls, data: dict[str, Any]) -> "ContainerStats":
        """Build the statistics from the ``container`` object of a reply."""
        return cls(
            name=str(data.get("name", "")),
            block_input=int(data.get("block_input", 0)),
            block_output=int(data.get("block_output", 0)),
            net_input=int(data.get("net_input", 0)),
            net_output=int(data.get("net_output", 0)),
            cpu=float(data.get("cpu", 0.0)),
            mem_usage=int(data.get("mem_usage", 0)),
            mem_limit=int(data.get("mem_limit", 0)),
            pids=int(data.get("pids", 0)),
        )


def _socket_path(address: str) -> str:
    scheme, sep, rest = address.partition(":")
    if not sep or scheme != "unix" or not rest:
        raise PluginError(
            NagStatus.UNKNOWN,
            f"varlink_connection_new: unsupported address: {address}",
        )
    path = rest.split(";", 1)[0]
    if path.startswith("@"):
        return "\0" + path[1:]
    return path


class PodmanVarlink:
    """A connection to the Podman varlink service.

    ``sock`` may be given to use an already connected stream socket instead
    of connecting to ``address``.
    """

    def __init__(
        self, address: str | None = None, sock: socket.socket | None = None
    ) -> None:
        self.address = address or VARLINK_ADDRESS
        self._buffer = b""
        if sock is not None:
            self._sock: socket.socket | None = sock
            return
        path = _socket_path(self.address)
        conn = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            conn.connect(path)
        except OSError as exc:
            conn.close()
            raise PluginError(
                NagStatus.UNKNOWN,
                f"varlink_connection_new: {exc.strerror or exc}",
                exc.errno,
            ) from exc
        self._sock = conn

    def __enter__(self) -> "PodmanVarlink":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _receive(self) -> bytes:
        if self._sock is None:
            raise VarlinkError("connection is closed")
        while b"\0" not in self._buffer:
            try:
                chunk = self._sock.recv(_RECV_SIZE)
            except OSError as exc:
                raise VarlinkError(f"receive failed: {exc}") from exc
            if not chunk:
                raise VarlinkError("connection closed by the service")
            self._buffer += chunk
        message, _, self._buffer = self._buffer.partition(b"\0")
        return message

    def call(self, method: str, parameters: dict[str, Any] | None = None) -> dict[str, Any]:
        """Call ``method`` and return the parameters of its reply."""
        if self._sock is None:
            raise VarlinkError("connection is closed")
        request: dict[str, Any] = {"method": method}
        if parameters is not None:
            request["parameters"] = parameters
        payload = json.dumps(request, separators=(",", ":")).encode("utf-8") + b"\0"
        try:
            self._sock.sendall(payload)
        except OSError as exc:
            raise VarlinkError(f"varlink_connection_call: {exc}") from exc

        raw = self._receive()
        try:
            reply = json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            raise VarlinkError(f"{method}: invalid reply") from exc
        if not isinstance(reply, dict):
            raise VarlinkError(f"{method}: invalid reply")
        if reply.get("error"):
            raise VarlinkError(f"{method}: {reply['error']}")
        result = reply.get("parameters", {})
        if not isinstance(result, dict):
            raise VarlinkError(f"{method}: invalid reply parameters")
        return result

    def list_containers(self) -> list[dict[str, Any]]:
        """Return the containers known to Podman, as reported by the service."""
        reply = self.call("io.podman.ListContainers")
        containers = reply.get("containers")
        if not isinstance(containers, list):
            raise VarlinkError("varlink_object_get_array: missing containers array")
        return containers

    def stats(self, shortid: str) -> ContainerStats:
        """Return the statistics of the running container ``shortid``."""
        reply = self.call("io.podman.GetContainerStats", {"name": shortid})
        container = reply.get("container")
        if not isinstance(container, dict):
            raise VarlinkError("varlink_object_get_object: missing container object")
        return ContainerStats.from_reply(container)

    def close(self) -> None:
        """Close the connection; further calls raise VarlinkError."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None


def image_name_normalize(image: str) -> str:
    """Return an image name usable as a performance data label."""
    return image.rsplit("/", 1)[-1].replace(":", "_")


def shortid(container_id: str) -> str:
    """Return the short form of a container ID."""
    return container_id[:SHORTID_LEN]