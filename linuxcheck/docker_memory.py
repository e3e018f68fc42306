"""Memory statistics of Docker containers read from the memory cgroup."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

from .messages import NagStatus, PluginError

PATH_SYS_DOCKER_MEM = "/sys/fs/cgroup/memory/docker"
DOCKER_MEMORY_STAT = f"{PATH_SYS_DOCKER_MEM}/memory.stat"


@dataclass
class DockerMemoryDesc:
    """Totals over all Docker containers: sizes in bytes, events as counts."""

    total_cache: int = 0
    total_rss: int = 0
    total_swap: int = 0
    total_unevictable: int = 0
    total_pgfault: int = 0
    total_pgmajfault: int = 0
    total_pgpgin: int = 0
    total_pgpgout: int = 0


_FIELDS = frozenset(f.name for f in fields(DockerMemoryDesc))


def parse_docker_memory_stat(text: str) -> DockerMemoryDesc:
    """Build a DockerMemoryDesc from the content of a memory.stat file."""
    desc = DockerMemoryDesc()
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 2 or parts[0] not in _FIELDS:
            continue
        try:
            value = int(parts[1])
        except ValueError:
            continue
        setattr(desc, parts[0], value)
    return desc


def read_docker_memory(path: str | None = None) -> DockerMemoryDesc:
    """Read the memory statistics of the Docker cgroup."""
    if path is None:
        path = DOCKER_MEMORY_STAT
        if not os.path.exists(path):
            raise PluginError(NagStatus.UNKNOWN, "sysfs file not found: memory.stat")
    try:
        with open(path, encoding="utf-8", errors="replace") as stream:
            text = stream.read()
    except OSError as exc:
        raise PluginError(NagStatus.UNKNOWN, f"error opening {path}", exc.errno) from exc
    return parse_docker_memory_stat(text)