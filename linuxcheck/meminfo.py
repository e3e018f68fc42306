"""Memory and swap usage read from /proc/meminfo."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from .kernelver import kernel_version as _encode_version
from .kernelver import linux_version
from .messages import NagStatus, PluginError

PROC_MEMINFO = "/proc/meminfo"
PATH_VM_MIN_FREE_KB = "/proc/sys/vm/min_free_kbytes"

_MEMINFO_ENV = "NPL_TEST_PATH_PROCMEMINFO"
_LEADING_INT = re.compile(r"\s*(\d+)")

# meminfo keys and the MemInfo field each one fills
_TABLE = {
    "Active": "active",
    "Active(file)": "active_file",
    "AnonPages": "anon_pages",
    "Buffers": "main_buffers",
    "Cached": "page_cache",
    "Committed_AS": "committed_as",
    "Dirty": "dirty",
    "HighTotal": "high_total",
    "Inact_clean": "inact_clean",
    "Inact_dirty": "inact_dirty",
    "Inact_laundry": "inact_laundry",
    "Inactive": "inactive",
    "Inactive(file)": "inactive_file",
    "LowFree": "low_free",
    "LowTotal": "low_total",
    "MemAvailable": "main_available",
    "MemFree": "main_free",
    "MemTotal": "main_total",
    "SReclaimable": "slab_reclaimable",
    "Shmem": "main_shared",
    "Slab": "slab",
    "SwapCached": "swap_cached",
    "SwapFree": "swap_free",
    "SwapTotal": "swap_total",
}


@dataclass
class MemInfo:
    """Memory figures in kB.

    ``low_total`` stays None when the kernel does not report it.
    ``inactive`` and ``main_available`` are derived when not reported.
    """

    active: int = 0
    active_file: int = 0
    anon_pages: int = 0
    main_buffers: int = 0
    page_cache: int = 0
    committed_as: int = 0
    dirty: int = 0
    high_total: int = 0
    inact_clean: int = 0
    inact_dirty: int = 0
    inact_laundry: int = 0
    inactive: int | None = None
    inactive_file: int = 0
    low_free: int = 0
    low_total: int | None = None
    main_available: int | None = None
    main_free: int = 0
    main_total: int = 0
    slab_reclaimable: int = 0
    main_shared: int = 0
    slab: int = 0
    swap_cached: int = 0
    swap_free: int = 0
    swap_total: int = 0
    main_cached: int = 0
    main_used: int = 0

    @property
    def swap_used(self) -> int:
        """Swap space in use, in kB."""
        return self.swap_total - self.swap_free


def get_path_proc_meminfo() -> str:
    """Return the meminfo file path, overridable through the environment."""
    return os.environ.get(_MEMINFO_ENV) or PROC_MEMINFO


def _read_min_free_kb() -> int:
    try:
        with open(PATH_VM_MIN_FREE_KB, encoding="ascii") as stream:
            return int(stream.readline().strip())
    except OSError as exc:
        raise PluginError(
            NagStatus.UNKNOWN, f"error reading {PATH_VM_MIN_FREE_KB}", exc.errno
        ) from exc
    except ValueError as exc:
        raise PluginError(
            NagStatus.UNKNOWN, f"{PATH_VM_MIN_FREE_KB}: not a number"
        ) from exc


def _estimate_available(info: MemInfo, min_free_kb: int) -> int:
    watermark_low = min_free_kb * 5 // 4
    file_pages = info.inactive_file + info.active_file
    available = (
        info.main_free
        - watermark_low
        + file_pages
        - min(file_pages // 2, watermark_low)
        + info.slab_reclaimable
        - min(info.slab_reclaimable // 2, watermark_low)
    )
    return max(available, 0)


def parse_meminfo(
    text: str,
    kernel_version: int | None = None,
    min_free_kb: int | None = None,
) -> MemInfo:
    """Build a MemInfo from the content of a meminfo file.

    ``kernel_version`` (as encoded by linuxcheck.kernelver) and
    ``min_free_kb`` are only needed when MemAvailable is missing; when not
    given they are read from the running system.
    """
    values: dict[str, int] = {}
    for line in text.splitlines():
        key, sep, rest = line.partition(":")
        if not sep:
            continue
        field = _TABLE.get(key.strip())
        if field is None:
            continue
        match = _LEADING_INT.match(rest)
        if match:
            values[field] = int(match.group(1))

    info = MemInfo(**values)

    if info.low_total == 0:
        # low equals main except with large-memory support
        info.low_total = info.main_total
        info.low_free = info.main_free

    if info.inactive is None:
        info.inactive = info.inact_dirty + info.inact_clean + info.inact_laundry

    if info.main_available is None:
        version = linux_version() if kernel_version is None else kernel_version
        if version < _encode_version(2, 6, 27):
            info.main_available = info.main_free
        else:
            kb_min_free = _read_min_free_kb() if min_free_kb is None else min_free_kb
            info.main_available = _estimate_available(info, kb_min_free)

    info.main_cached = info.page_cache + info.slab_reclaimable
    info.main_used = (
        info.main_total - info.main_free - info.main_cached - info.main_buffers
    )
    return info


def read_meminfo(path: str | None = None) -> MemInfo:
    """Read the memory figures of the running system."""
    path = path or get_path_proc_meminfo()
    try:
        with open(path, encoding="utf-8", errors="replace") as stream:
            text = stream.read()
    except OSError as exc:
        raise PluginError(NagStatus.UNKNOWN, f"error opening {path}", exc.errno) from exc
    return parse_meminfo(text)