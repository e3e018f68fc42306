"""Container counts and resource usage summaries for Podman."""

from __future__ import annotations

import enum
import math
from typing import Any, Protocol

from .collection import Counter
from .messages import NagStatus, PluginError
from .podman import ContainerStats, VarlinkError, image_name_normalize, shortid


class _Client(Protocol):
    def list_containers(self) -> list[dict[str, Any]]: ...

    def stats(self, shortid: str) -> ContainerStats: ...


class StatsType(enum.IntEnum):
    """The container metric to report."""

    BLOCK_IN = 0
    BLOCK_OUT = 1
    CPU = 2
    MEMORY = 3
    NETWORK_IN = 4
    NETWORK_OUT = 5
    PIDS = 6

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    StatsType.BLOCK_IN: "block input",
    StatsType.BLOCK_OUT: "block output",
    StatsType.CPU: "cpu",
    StatsType.MEMORY: "memory",
    StatsType.NETWORK_IN: "network input",
    StatsType.NETWORK_OUT: "network output",
    StatsType.PIDS: "pids",
}


class UnitShift(enum.Enum):
    """Unit used to print byte totals."""

    B = "B"
    K = "kB"
    M = "MB"
    G = "GB"


def _list(client: _Client) -> list[dict[str, Any]]:
    try:
        return client.list_containers()
    except VarlinkError as exc:
        raise PluginError(NagStatus.UNKNOWN, f"varlink_varlink_list: {exc}") from exc


def podman_running_containers(
    client: _Client, image: str | None = None
) -> tuple[int, str]:
    """Return the number of running containers and the performance data.

    With ``image`` only containers of that image are considered and the
    data holds the configured, exited and running counts; otherwise it holds
    the number of running containers per image.
    """
    running_by_image = Counter()
    configured = exited = running = 0

    for container in _list(client):
        cnt_image = container.get("image", "")
        if image and cnt_image != image:
            continue
        if container.get("containerrunning", False):
            running_by_image.put(cnt_image, 1)
            running += 1
        elif container.get("status") == "configured":
            configured += 1
        elif container.get("status") == "exited":
            exited += 1

    if image:
        perfdata = f"configured={configured} exited={exited} running={running}"
    else:
        perfdata = "".join(
            f"{image_name_normalize(key)}={count} "
            for key, count in running_by_image.items()
        )
    return running, perfdata


def _ratio_percent(usage: int, limit: int) -> float:
    if limit == 0:
        return math.nan if usage == 0 else math.inf
    return usage / limit * 100


def _perfdata_item(which: StatsType, stats: ContainerStats, report_perc: bool) -> str:
    name = stats.name
    if which is StatsType.BLOCK_IN:
        return f"{name}={stats.block_input // 1000}kB "
    if which is StatsType.BLOCK_OUT:
        return f"{name}={stats.block_output // 1000}kB "
    if which is StatsType.CPU:
        return f"{name}={stats.cpu:.2f}% "
    if which is StatsType.MEMORY:
        if report_perc:
            return f"{name}={_ratio_percent(stats.mem_usage, stats.mem_limit):.2f}% "
        return f"{name}={stats.mem_usage // 1000}kB;;;0;{stats.mem_limit // 1000} "
    if which is StatsType.NETWORK_IN:
        return f"{name}={stats.net_input}B "
    if which is StatsType.NETWORK_OUT:
        return f"{name}={stats.net_output}B "
    return f"{name}={stats.pids} "


_VALUE_OF = {
    StatsType.BLOCK_IN: "block_input",
    StatsType.BLOCK_OUT: "block_output",
    StatsType.CPU: "cpu",
    StatsType.MEMORY: "mem_usage",
    StatsType.NETWORK_IN: "net_input",
    StatsType.NETWORK_OUT: "net_output",
    StatsType.PIDS: "pids",
}


def _format_total(which: StatsType, total: float, shift: UnitShift) -> str:
    if which is StatsType.PIDS:
        return f"{int(total)}"
    if which is StatsType.CPU:
        return f"{total:.2f}%"
    total = int(total)
    if shift is UnitShift.K:
        return f"{total // 1000}kB"
    if shift is UnitShift.M:
        return f"{total / 1000000.0:g}MB"
    if shift is UnitShift.G:
        return f"{total / 1000000000.0:g}GB"
    return f"{total}B"


def podman_stats(
    client: _Client,
    which_stats: StatsType | int,
    report_perc: bool = False,
    shift: UnitShift = UnitShift.B,
    image: str | None = None,
) -> tuple[int | float, str, str]:
    """Summarise one metric over the running containers.

    Returns ``(total, status, perfdata)``: the total is a float for the cpu
    metric and an integer otherwise.
    """
    try:
        which = StatsType(which_stats)
    except ValueError as exc:
        raise PluginError(NagStatus.UNKNOWN, "unknown podman container metric") from exc

    total: int | float = 0.0 if which is StatsType.CPU else 0
    containers = 0
    perfdata: list[str] = []

    for container in _list(client):
        if not container.get("containerrunning", False):
            continue
        if image and container.get("image", "") != image:
            continue
        containers += 1

        try:
            stats = client.stats(shortid(container.get("id", "")))
        except VarlinkError as exc:
            raise PluginError(
                NagStatus.UNKNOWN, f"varlink_varlink_stats: {exc}"
            ) from exc

        perfdata.append(_perfdata_item(which, stats, report_perc))
        total += getattr(stats, _VALUE_OF[which])

    total_str = _format_total(which, total, shift)
    plural = "s" if containers > 1 else ""
    status = (
        f"{total_str} of {which.label} used by {containers} "
        f"running container{plural}"
    )
    return total, status, "".join(perfdata)