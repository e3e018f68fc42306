"""Version number of the running Linux kernel."""

from __future__ import annotations

import os
import re

from .messages import NagStatus, PluginError

_INT = r"\s*([+-]?\d+)"
_RELEASE_RE = re.compile(_INT + r"(?:\." + _INT + r"(?:\." + _INT + r")?)?")


def kernel_version(x: int, y: int, z: int) -> int:
    """Encode a kernel version as a single comparable integer."""
    return (x << 16) + (y << 8) + min(z, 255)


def parse_kernel_release(release: str) -> tuple[int, int, int]:
    """Split a kernel release string such as ``5.10.0-8-amd64``.

    Raises PluginError when the string does not look like a kernel release.
    """
    match = _RELEASE_RE.match(release)
    parts = [int(g) for g in match.groups() if g is not None] if match else []
    depth = len(parts)
    x, y, z = (parts + [0, 0, 0])[:3]
    if depth < 2 or (depth < 3 and x < 3):
        raise PluginError(
            NagStatus.UNKNOWN, f"non-standard kernel version: {release}"
        )
    return x, y, z


def linux_version(release: str | None = None) -> int:
    """Return the encoded version of ``release`` or of the running kernel."""
    if release is None:
        try:
            release = os.uname().release
        except OSError as exc:
            raise PluginError(NagStatus.UNKNOWN, "uname() failed", exc.errno) from exc
    return kernel_version(*parse_kernel_release(release))