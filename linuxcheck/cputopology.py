"""Number of CPUs and their topology (sockets, cores, threads) from sysfs."""

from __future__ import annotations

import os
import string

from .messages import NagStatus, PluginError

SYSFS_CPU = "/sys/devices/system/cpu"

_HEXDIGITS = frozenset(string.hexdigits)


def _sysconf(name: str) -> int:
    try:
        return int(os.sysconf(name))
    except (ValueError, OSError, AttributeError):
        return -1


def get_processor_number_total() -> int:
    """Number of CPUs configured in the system, or -1 if unknown."""
    return _sysconf("SC_NPROCESSORS_CONF")


def get_processor_number_online() -> int:
    """Number of CPUs available to the scheduler, or -1 if unknown."""
    return _sysconf("SC_NPROCESSORS_ONLN")


def _read_line(path: str) -> str | None:
    """Return the first line of a sysfs file, or None if it cannot be read."""
    try:
        with open(path, encoding="ascii", errors="replace") as stream:
            return stream.readline().rstrip("\n")
    except OSError:
        return None


def _read_value(path: str) -> int:
    line = _read_line(path)
    if line is None:
        raise PluginError(NagStatus.UNKNOWN, f"error reading {path}")
    try:
        return int(line.strip())
    except ValueError as exc:
        raise PluginError(
            NagStatus.UNKNOWN, f"{path}: not a number: {line!r}"
        ) from exc


def get_processor_number_kernel_max(sysfs_cpu: str = SYSFS_CPU) -> int:
    """Return the number of CPUs the kernel configuration allows."""
    return _read_value(f"{sysfs_cpu}/kernel_max") + 1


def cpumask_parse(mask: str) -> int:
    """Return the number of CPUs set in a hexadecimal sysfs CPU mask.

    The mask may start with ``0x`` and may hold commas between 32-bit
    words. Raises ValueError if it holds any other character.
    """
    digits = mask[2:] if len(mask) > 1 and mask.startswith("0x") else mask
    digits = digits.replace(",", "")
    bad = set(digits) - _HEXDIGITS
    if bad:
        raise ValueError(f"invalid cpu mask: {mask!r}")
    if not digits:
        return 0
    return bin(int(digits, 16)).count("1")


def _mask_count(mask: str | None) -> int:
    if mask is None:
        return 0
    try:
        return cpumask_parse(mask)
    except ValueError:
        return 0


def get_cputopology_read(sysfs_cpu: str = SYSFS_CPU) -> tuple[int, int, int]:
    """Return ``(sockets, cores per socket, threads per core)``.

    Every value is at least 1; CPUs without topology information are skipped.
    """
    nsockets = ncores = nthreads = 1
    maxcpus = get_processor_number_kernel_max(sysfs_cpu)

    for cpu in range(maxcpus):
        topology = f"{sysfs_cpu}/cpu{cpu}/topology"
        thread_siblings = _read_line(f"{topology}/thread_siblings")
        if thread_siblings is None:
            continue

        nthreads = _mask_count(thread_siblings) or 1

        core_siblings = _read_line(f"{topology}/core_siblings")
        ncores = (_mask_count(core_siblings) // nthreads) or 1

        ncpus = max(get_processor_number_online(), 0)
        nsockets = (ncpus // nthreads // ncores) or 1

    return nsockets, ncores, nthreads