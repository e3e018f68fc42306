"""Interrupt counts per CPU read from /proc/interrupts."""

from __future__ import annotations

from typing import Iterable

from .cputopology import get_processor_number_online

PROC_INTERRUPTS = "/proc/interrupts"


def parse_interrupts(lines: Iterable[str], ncpus: int) -> list[int]:
    """Sum the interrupts of every source for each of ``ncpus`` CPUs.

    The first line (the CPU header) is skipped, as are lines without a colon.
    """
    totals = [0] * ncpus
    rows = iter(lines)
    next(rows, None)

    for line in rows:
        _, sep, rest = line.partition(":")
        if not sep:
            continue
        for cpu, token in enumerate(rest.split()[:ncpus]):
            if not token.isdigit():
                break
            totals[cpu] += int(token)

    return totals


def proc_interrupts_get_nintr_per_cpu(path: str = PROC_INTERRUPTS) -> list[int] | None:
    """Return the interrupt count of each online CPU, or None if unreadable."""
    try:
        with open(path, encoding="utf-8", errors="replace") as stream:
            ncpus = max(get_processor_number_online(), 0)
            return parse_interrupts(stream, ncpus)
    except OSError:
        return None