"""CPU time counters and system-wide counters read from /proc/stat."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Iterator

from .messages import NagStatus, PluginError

_PROCSTAT_ENV = "NPL_TEST_PATH_PROCSTAT"
_CPU_FIELDS = (
    "user", "nice", "system", "idle", "iowait",
    "irq", "softirq", "steal", "guest", "guestn",
)
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class CpuTime:
    """Jiffies spent by a CPU (or by all of them) in each state."""

    cpuname: str | None = None
    user: int = 0
    nice: int = 0
    system: int = 0
    idle: int = 0
    iowait: int = 0
    irq: int = 0
    softirq: int = 0
    steal: int = 0
    guest: int = 0
    guestn: int = 0


def get_path_proc_stat() -> str:
    """Return the stat file path, overridable through the environment."""
    return os.environ.get(_PROCSTAT_ENV) or "/proc/stat"


def _read_lines(path: str) -> Iterator[str]:
    try:
        with open(path, encoding="utf-8", errors="replace") as stream:
            yield from stream
    except OSError as exc:
        raise PluginError(NagStatus.UNKNOWN, f"error opening {path}", exc.errno) from exc


def _scan_numbers(text: str, limit: int) -> list[int]:
    """Read up to ``limit`` leading whitespace-separated unsigned integers."""
    values: list[int] = []
    for token in text.split()[:limit]:
        match = re.match(r"\d+", token)
        if match is None:
            break
        values.append(int(match.group()))
        if match.end() < len(token):
            break
    return values


def _fill(cputime: CpuTime, text: str) -> None:
    for field, value in zip(_CPU_FIELDS, _scan_numbers(text, len(_CPU_FIELDS))):
        setattr(cputime, field, value)


def cpu_stats_get_time(lines: int) -> list[CpuTime]:
    """Return ``lines`` CpuTime entries: the total first, then cpu0, cpu1, ...

    With ``lines`` equal to 1 only the aggregate line is read.
    """
    procpath = get_path_proc_stat()
    cputimes = [CpuTime() for _ in range(lines)]
    found = False

    for line in _read_lines(procpath):
        if line.startswith("cpu "):
            cputimes[0].cpuname = "cpu"
            _fill(cputimes[0], line[4:])
            found = True
            if lines == 1:
                break
        elif line.startswith("cpu"):
            rest = line[3:]
            match = _LEADING_INT.match(rest)
            if match:
                cpunum = int(match.group(1))
                tail = rest[match.end():]
            else:
                cpunum, tail = 0, rest
            if lines <= cpunum + 1:
                raise PluginError(
                    NagStatus.UNKNOWN,
                    f"BUG: cpu_stats_get_time(): lines({lines}) <= "
                    f"cpunum({cpunum}) + 1",
                )
            entry = cputimes[cpunum + 1]
            entry.cpuname = f"cpu{cpunum}"
            _fill(entry, tail)

    if not found:
        raise PluginError(
            NagStatus.UNKNOWN, f"{procpath}: pattern not found: 'cpu '"
        )
    return cputimes


def _value_with_pattern(pattern: str, mandatory: bool) -> int:
    procpath = get_path_proc_stat()
    for line in _read_lines(procpath):
        if line.startswith(pattern):
            values = _scan_numbers(line[len(pattern):], 1)
            return values[0] if values else 0
    if mandatory:
        raise PluginError(
            NagStatus.UNKNOWN, f"{procpath}: pattern not found: '{pattern}'"
        )
    return 0


def cpu_stats_get_cswch() -> int:
    """Total number of context switches."""
    return _value_with_pattern("ctxt ", True)


def cpu_stats_get_intr() -> int:
    """Total number of interrupts serviced."""
    return _value_with_pattern("intr ", True)


def cpu_stats_get_softirq() -> int:
    """Total number of soft interrupts, or 0 on kernels that do not report it."""
    return _value_with_pattern("softirq ", False)