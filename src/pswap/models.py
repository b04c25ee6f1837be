"""Data models for pswap."""

from dataclasses import dataclass
from pathlib import Path

STATUS_FILENAME = "status"


@dataclass(slots=True, frozen=True)
class ProcessHandle:
    """A numerically named directory found under the proc root."""

    name: str
    path: Path

    @property
    def status_path(self) -> Path:
        """Path of this process's status record."""
        return self.path / STATUS_FILENAME


@dataclass(slots=True, frozen=True)
class ProcessStatus:
    """Fields extracted from one status record."""

    pid: int
    name: str = ""
    swap_kb: int | None = None  # None when the record has no VmSwap line

    @property
    def swap_kb_or_zero(self) -> int:
        """Swap amount for aggregation, treating a missing field as zero."""
        return self.swap_kb if self.swap_kb is not None else 0


class ReadError(Exception):
    """A single process could not be reported. Never fatal to a scan."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class IoFailure(ReadError):
    """The record could not be opened or read."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(path, f"{path}: io failure: {cause.strerror or cause}")
        self.cause = cause


class InvalidValue(ReadError):
    """A field was malformed, or a required field was missing."""

    def __init__(self, path: Path, field: str, value: str | None) -> None:
        if value is None:
            message = f"{path}: missing {field} field"
        else:
            message = f"{path}: invalid {field} value {value!r}"
        super().__init__(path, message)
        self.field = field
        self.value = value
