"""Count the entries of a directory tree matching age, size and name filters."""

from __future__ import annotations

import enum
import fnmatch
import os
import stat
import time
from dataclasses import dataclass

from .messages import NagStatus, PluginError


class FileFlags(enum.IntFlag):
    """Options that change which entries are counted."""

    NONE = 0
    INCLUDE_HIDDEN = 1 << 0
    RECURSIVE = 1 << 1
    REGULAR_ONLY = 1 << 2
    IGNORE_UNKNOWN = 1 << 3
    IGNORE_SYMLINKS = 1 << 4


@dataclass
class FileCounts:
    """Counts of entries found, by kind."""

    total: int = 0
    directory: int = 0
    regular_file: int = 0
    special_file: int = 0
    symlink: int = 0
    unknown: int = 0
    hidden: int = 0


def check_age(age: int, now: float, filemtime: float) -> bool:
    """Check a modification time against an age filter in seconds.

    A positive age selects files older than ``age``, a negative one files
    newer than ``-age``; zero accepts everything.
    """
    if age == 0:
        return True
    mtime = now + age if age < 0 else now - age
    return (age < 0 and filemtime > mtime) or (age > 0 and filemtime < mtime)


def check_size(size: int, filesize: int) -> bool:
    """Check a file size against a size filter in bytes.

    A positive size selects larger files, a negative one smaller files;
    zero accepts everything.
    """
    if size == 0:
        return True
    limit = abs(size)
    return (size < 0 and filesize < limit) or (size > 0 and filesize > limit)


def _matches(pattern: str | None, name: str) -> bool:
    return pattern is None or fnmatch.fnmatchcase(name, pattern)


_SPECIAL = (stat.S_IFBLK, stat.S_IFCHR, stat.S_IFIFO, stat.S_IFSOCK)


def _scan(
    directory: str,
    flags: FileFlags,
    age: int,
    size: int,
    pattern: str | None,
    counts: FileCounts,
) -> None:
    now = time.time()
    with os.scandir(directory) as entries:
        names = []
        try:
            for entry in entries:
                names.append(entry.name)
        except OSError as exc:
            raise PluginError(NagStatus.UNKNOWN, "readdir() failure", exc.errno) from exc

    for name in names:
        is_hidden = name.startswith(".")
        if is_hidden and not flags & FileFlags.INCLUDE_HIDDEN:
            continue

        path = f"{directory}/{name}"
        try:
            st = os.lstat(path)
        except OSError as exc:
            raise PluginError(
                NagStatus.UNKNOWN, f"lstat ({path}) failed", exc.errno
            ) from exc
        kind = stat.S_IFMT(st.st_mode)

        if kind == stat.S_IFDIR:
            if flags & FileFlags.RECURSIVE:
                if not flags & FileFlags.REGULAR_ONLY and _matches(pattern, name):
                    counts.directory += 1
                    counts.total += 1
                    if is_hidden:
                        counts.hidden += 1
                try:
                    _scan(path, flags, age, size, pattern, counts)
                except OSError:
                    pass
                continue
            if flags & FileFlags.REGULAR_ONLY:
                continue

        if not _matches(pattern, name):
            continue

        if kind in _SPECIAL:
            counts.special_file += 1
            if flags & FileFlags.REGULAR_ONLY:
                continue
        elif kind == stat.S_IFLNK:
            if flags & (FileFlags.IGNORE_SYMLINKS | FileFlags.REGULAR_ONLY):
                continue
            counts.symlink += 1
        elif kind == stat.S_IFREG:
            if not check_age(age, now, st.st_mtime):
                continue
            if not check_size(size, st.st_size):
                continue
            counts.regular_file += 1
            if is_hidden:
                counts.hidden += 1
        else:
            counts.unknown += 1
            if flags & FileFlags.IGNORE_UNKNOWN:
                continue

        counts.total += 1


def filecount(
    directory: str | os.PathLike[str],
    flags: FileFlags = FileFlags.NONE,
    age: int = 0,
    size: int = 0,
    pattern: str | None = None,
) -> FileCounts:
    """Count the entries of ``directory``.

    Raises OSError if the directory itself cannot be opened; subdirectories
    that cannot be opened during a recursive scan are skipped.
    """
    counts = FileCounts()
    _scan(os.fspath(directory), FileFlags(flags), age, size, pattern, counts)
    return counts