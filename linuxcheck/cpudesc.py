"""Description of the CPU: vendor, model, virtualization and word size."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass

from .cputopology import (
    SYSFS_CPU,
    get_processor_number_kernel_max,
    get_processor_number_total,
)
from .messages import NagStatus, PluginError

PATH_PROC_CPUINFO = "/proc/cpuinfo"


class CpuMode(enum.IntFlag):
    """Word sizes the CPU can run in."""

    NONE = 0
    MODE_32BIT = 1 << 1
    MODE_64BIT = 1 << 2


_ARCH_MODES = {
    "alpha": CpuMode.MODE_64BIT,
    "ia64": CpuMode.MODE_64BIT,
    "i386": CpuMode.MODE_32BIT,
    "i486": CpuMode.MODE_32BIT,
    "i586": CpuMode.MODE_32BIT,
    "i686": CpuMode.MODE_32BIT,
    "x86_64": CpuMode.MODE_32BIT,
    "s390": CpuMode.MODE_32BIT,
    "s390x": CpuMode.MODE_32BIT,
    "sparc64": CpuMode.MODE_32BIT,
}

_BOTH_MODES = CpuMode.MODE_32BIT | CpuMode.MODE_64BIT

# cpuinfo keys and the field each one fills, in lookup order
_CPUINFO_KEYS = (
    ("vendor", "vendor"),
    ("vendor_id", "vendor"),
    ("family", "family"),
    ("cpu family", "family"),
    ("model", "model"),
    ("model name", "modelname"),
    ("cpu MHz", "mhz"),
    ("flags", "flags"),
)

_VIRT_NAMES = {"svm": "AMD-V", "vmx": "VT-x"}


@dataclass
class CpuDesc:
    """What the kernel reports about the installed CPU."""

    arch: str | None = None
    vendor: str | None = None
    family: str | None = None
    model: str | None = None
    modelname: str | None = None
    virtflag: str | None = None
    mhz: str | None = None
    flags: str | None = None
    mode: CpuMode = CpuMode.NONE
    ncpus: int = 0
    ncpuspos: int = 0

    def virtualization(self) -> str | None:
        """Return the name of the hardware virtualization technology, if any."""
        if self.virtflag is None:
            return None
        return _VIRT_NAMES.get(self.virtflag, self.virtflag)


def get_processor_is_hot_pluggable(cpu: int, sysfs_cpu: str = SYSFS_CPU) -> bool:
    """Return True if ``cpu`` can be brought on- and offline."""
    return os.path.exists(f"{sysfs_cpu}/cpu{cpu}/online")


def get_processor_is_online(cpu: int, sysfs_cpu: str = SYSFS_CPU) -> int:
    """Return 1 if ``cpu`` is online, 0 if offline, -1 if not hot-pluggable."""
    path = f"{sysfs_cpu}/cpu{cpu}/online"
    if not os.path.exists(path):
        return -1
    try:
        with open(path, encoding="ascii") as stream:
            return int(stream.readline().strip())
    except (OSError, ValueError) as exc:
        raise PluginError(NagStatus.UNKNOWN, f"error reading {path}") from exc


def _lookup(line: str) -> tuple[str, str] | None:
    head, sep, value = line.partition(":")
    if not sep:
        return None
    value = value.strip()
    if not value:
        return None
    return head.rstrip(" \t"), value


def parse_cpuinfo(text: str, arch: str) -> CpuDesc:
    """Build a CpuDesc from the content of a cpuinfo file.

    The first occurrence of each key wins. ``arch`` is the machine name
    reported by uname and sets the default word size.
    """
    desc = CpuDesc(arch=arch, mode=_ARCH_MODES.get(arch, CpuMode.NONE))
    keys = dict(_CPUINFO_KEYS)

    for line in text.splitlines():
        found = _lookup(line)
        if found is None:
            continue
        key, value = found
        field = keys.get(key)
        if field is not None and getattr(desc, field) is None:
            setattr(desc, field, value)

    if desc.flags:
        flags = set(desc.flags.split())
        if "svm" in flags:
            desc.virtflag = "svm"
        elif "vmx" in flags:
            desc.virtflag = "vmx"
        if "lm" in flags or "zarch" in flags:
            desc.mode |= _BOTH_MODES
        if "sun4v" in flags or "sun4u" in flags:
            desc.mode |= _BOTH_MODES

    return desc


def read_cpu_desc(cpuinfo_path: str = PATH_PROC_CPUINFO) -> CpuDesc:
    """Read the CPU description of the running system."""
    try:
        with open(cpuinfo_path, encoding="utf-8", errors="replace") as stream:
            text = stream.read()
    except OSError as exc:
        raise PluginError(
            NagStatus.UNKNOWN, f"error opening {cpuinfo_path}", exc.errno
        ) from exc

    try:
        arch = os.uname().machine
    except OSError as exc:
        raise PluginError(NagStatus.UNKNOWN, "uname() failed", exc.errno) from exc

    desc = parse_cpuinfo(text, arch)
    desc.ncpus = get_processor_number_total()
    desc.ncpuspos = get_processor_number_kernel_max()
    return desc