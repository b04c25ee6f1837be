"""Process discovery and status record parsing for pswap."""

import logging
import os
import re
import string
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import psutil

from pswap.models import (
    InvalidValue,
    IoFailure,
    ProcessHandle,
    ProcessStatus,
    ReadError,
)

logger = logging.getLogger(__name__)

PROC_ROOT = Path("/proc")

SWAP_SUFFIX = " kB"

_SIGNED_INT = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT = re.compile(r"\+?[0-9]+")
_DIGITS = frozenset(string.digits)

# pid_t is a signed 32-bit integer
PID_MIN = -(2**31)
PID_MAX = 2**31 - 1


class SortKey(Enum):
    """Sort keys for a collected report."""

    SWAP = "swap"
    PID = "pid"
    NAME = "name"


@dataclass(slots=True)
class SwapReport:
    """All results of one scan, split into parsed records and failures."""

    statuses: list[ProcessStatus] = field(default_factory=list)
    errors: list[ReadError] = field(default_factory=list)

    @property
    def total_swap_kb(self) -> int:
        """Sum of swap over every parsed record."""
        return sum(status.swap_kb_or_zero for status in self.statuses)


@dataclass(slots=True, frozen=True)
class SystemSwap:
    """Host-wide swap figures, in kB."""

    total_kb: int
    used_kb: int


def is_process_dir_name(name: str) -> bool:
    """Return True if name is non-empty and made only of ASCII digits."""
    return bool(name) and all(char in _DIGITS for char in name)


def iter_process_dirs(root: Path | str = PROC_ROOT) -> Iterator[ProcessHandle | IoFailure]:
    """
    List process directories under root.

    The listing happens when this function is called, so an unreadable or
    missing root raises OSError here rather than on first iteration. The
    returned iterator is lazy and yields entries in listing order.

    Args:
        root: Directory to scan, normally /proc.

    Returns:
        Iterator of ProcessHandle, or IoFailure for an entry that could not
        be inspected.

    Raises:
        OSError: If root cannot be listed.
    """
    root = Path(root)
    with os.scandir(root) as it:
        entries = list(it)
    logger.debug("Listed %d entries under %s", len(entries), root)
    return _filter_process_dirs(entries)


def _filter_process_dirs(entries: Iterable[os.DirEntry]) -> Iterator[ProcessHandle | IoFailure]:
    for entry in entries:
        path = Path(entry.path)
        try:
            is_dir = entry.is_dir()
        except OSError as exc:
            yield IoFailure(path, exc)
            continue

        if is_dir and is_process_dir_name(entry.name):
            yield ProcessHandle(name=entry.name, path=path)
        else:
            logger.debug("Skipping non-process entry %s", path)


def _parse_pid(path: Path, value: str) -> int:
    if not _SIGNED_INT.fullmatch(value):
        raise InvalidValue(path, "Pid", value)
    pid = int(value)
    if not PID_MIN <= pid <= PID_MAX:
        raise InvalidValue(path, "Pid", value)
    return pid


def _parse_swap(path: Path, value: str) -> int:
    if not value.endswith(SWAP_SUFFIX):
        raise InvalidValue(path, "VmSwap", value)
    amount = value[: -len(SWAP_SUFFIX)]
    if not _UNSIGNED_INT.fullmatch(amount):
        raise InvalidValue(path, "VmSwap", value)
    return int(amount)


def read_process_status(path: Path | str, *, require_pid: bool = True) -> ProcessStatus:
    """
    Parse one status record.

    Only the Pid, Name and VmSwap labels are used; every other line,
    including lines without a colon, is ignored. Name lines accumulate.

    Args:
        path: Path of the status record.
        require_pid: If True, a record without a Pid line is an
            InvalidValue. If False, pid defaults to 0.

    Raises:
        IoFailure: The record could not be opened or read.
        InvalidValue: Pid or VmSwap is malformed, or Pid is required and
            missing.
    """
    path = Path(path)
    pid: int | None = None
    name = ""
    swap_kb: int | None = None

    try:
        with open(path, encoding="utf-8", errors="replace", newline="\n") as f:
            for line in f:
                label, sep, value = line.partition(":")
                if not sep:
                    continue
                value = value.strip()

                if label == "Pid":
                    pid = _parse_pid(path, value)
                elif label == "Name":
                    name += value
                elif label == "VmSwap":
                    swap_kb = _parse_swap(path, value)
    except OSError as exc:
        raise IoFailure(path, exc) from exc

    if pid is None:
        if require_pid:
            raise InvalidValue(path, "Pid", None)
        pid = 0

    return ProcessStatus(pid=pid, name=name, swap_kb=swap_kb)


def iter_process_statuses(
    root: Path | str = PROC_ROOT,
    *,
    require_pid: bool = True,
) -> Iterator[ProcessStatus | ReadError]:
    """
    Scan root and parse every process's status record.

    Listing root is done immediately (see iter_process_dirs). Records are
    then read one at a time as the iterator is consumed; a failed record is
    yielded as its ReadError and the scan carries on.

    Raises:
        OSError: If root cannot be listed.
    """
    handles = iter_process_dirs(root)
    return _read_statuses(handles, require_pid)


def _read_statuses(
    handles: Iterable[ProcessHandle | IoFailure],
    require_pid: bool,
) -> Iterator[ProcessStatus | ReadError]:
    for handle in handles:
        if isinstance(handle, ReadError):
            yield handle
            continue
        try:
            yield read_process_status(handle.status_path, require_pid=require_pid)
        except ReadError as exc:
            logger.debug("Failed to read %s: %s", handle.status_path, exc)
            yield exc


def sort_statuses(statuses: Iterable[ProcessStatus], key: SortKey) -> list[ProcessStatus]:
    """Sort records; swap is largest first, pid and name ascending."""
    if key is SortKey.SWAP:
        return sorted(statuses, key=lambda s: (-s.swap_kb_or_zero, s.pid))
    if key is SortKey.NAME:
        return sorted(statuses, key=lambda s: (s.name.lower(), s.pid))
    return sorted(statuses, key=lambda s: s.pid)


def collect_report(
    root: Path | str = PROC_ROOT,
    *,
    sort_key: SortKey | None = None,
    require_pid: bool = True,
) -> SwapReport:
    """
    Drain a full scan into a SwapReport.

    Raises:
        OSError: If root cannot be listed.
    """
    report = SwapReport()
    for result in iter_process_statuses(root, require_pid=require_pid):
        if isinstance(result, ReadError):
            report.errors.append(result)
        else:
            report.statuses.append(result)

    if sort_key is not None:
        report.statuses = sort_statuses(report.statuses, sort_key)

    logger.info(
        "Scanned %s: %d processes, %d failed",
        root,
        len(report.statuses),
        len(report.errors),
    )
    return report


def system_swap() -> SystemSwap:
    """Read host-wide swap usage via psutil."""
    swap = psutil.swap_memory()
    return SystemSwap(total_kb=swap.total // 1024, used_kb=swap.used // 1024)
