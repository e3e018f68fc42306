"""Plugin exit states and the error raised when a check cannot go on."""

from __future__ import annotations

import enum
import os


class NagStatus(enum.IntEnum):
    """Exit states understood by Nagios-compatible monitoring systems."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3
    DEPENDENT = 4


_STATE_TEXT = {
    NagStatus.OK: "OK",
    NagStatus.WARNING: "WARNING",
    NagStatus.CRITICAL: "CRITICAL",
    NagStatus.DEPENDENT: "DEPENDENT",
}


class PluginError(Exception):
    """A fatal plugin error carrying the exit status to report."""

    def __init__(
        self,
        status: NagStatus | int,
        message: str,
        errnum: int | None = 0,
    ) -> None:
        try:
            self.status: NagStatus | int = NagStatus(status)
        except ValueError:
            self.status = status
        self.message = message
        self.errnum = errnum or 0
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.errnum:
            return f"{self.message} ({os.strerror(self.errnum)})"
        return self.message

    @property
    def exit_code(self) -> int:
        """The process exit code matching this error."""
        return int(self.status)

    def format(self, program_name: str) -> str:
        """Return the error line as the plugin prints it."""
        return f"{program_name}: {self}"


def state_text(result: NagStatus | int) -> str:
    """Return the label of a plugin state; anything unknown is UNKNOWN."""
    try:
        status = NagStatus(result)
    except ValueError:
        return "UNKNOWN"
    return _STATE_TEXT.get(status, "UNKNOWN")