import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from stat import S_ISREG
from typing import List, Literal, NamedTuple

# --------------------------------------------------------------------------

LOGGER = logging.getLogger(__name__)

# --------------------------------------------------------------------------

#: only files with this name prefix are considered access logs
ACCESS_LOG_PREFIX = "access_"

# --------------------------------------------------------------------------
# errors


FileErrorKind = Literal["stat", "open", "read"]


@dataclass(frozen=True)
class FileError:
    """Recoverable failure on a single log file, the scan continues."""

    path: Path
    kind: FileErrorKind
    message: str

    def __str__(self):
        return f"Could not {self.kind} '{self.path}': {self.message}"


class ListingError(RuntimeError):
    """Root or host directory could not be listed, aborts the whole scan."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        msg = f"Could not list log directory, {path}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


# --------------------------------------------------------------------------
# file filters


class DateRangeCheck(NamedTuple):
    in_range: bool
    error: FileError | None = None


def is_log_file(entry: Path) -> bool:
    """Regular file with the access log prefix.

    A vanished entry is not a log file, other stat failures are raised.
    """
    if not entry.name.startswith(ACCESS_LOG_PREFIX):
        return False
    try:
        return S_ISREG(entry.stat().st_mode)
    except (FileNotFoundError, NotADirectoryError):
        return False


def get_modification_time(entry: Path) -> datetime:
    return datetime.fromtimestamp(entry.stat().st_mtime, tz=timezone.utc)


def check_date_range(entry: Path, date_from: datetime, date_to: datetime):
    # both ends exclusive, a file touched exactly at midnight of a bound is out
    try:
        mtime = get_modification_time(entry)
    except OSError as ex:
        error = FileError(path=entry, kind="stat", message=str(ex))
        LOGGER.warning(
            "Could not get last modified time of file, '%s' - %s", entry, ex
        )
        return DateRangeCheck(in_range=False, error=error)

    return DateRangeCheck(in_range=date_from < mtime < date_to)


def is_in_date_range(entry: Path, date_from: datetime, date_to: datetime) -> bool:
    return check_date_range(entry, date_from, date_to).in_range


# --------------------------------------------------------------------------
# directory listing


def _list_dir(directory: Path) -> List[Path]:
    try:
        return sorted(directory.iterdir())
    except OSError as ex:
        raise ListingError(directory, reason=str(ex)) from ex


def list_host_dirs(root: Path) -> List[Path]:
    """Immediate subdirectories of the log root, one per host."""
    host_dirs: List[Path] = []
    for entry in _list_dir(root):
        try:
            is_dir = entry.is_dir()
        except OSError as ex:
            raise ListingError(entry, reason=str(ex)) from ex
        if not is_dir:
            LOGGER.debug("Ignore non-directory entry in log root: '%s'", entry)
            continue
        host_dirs.append(entry)
    return host_dirs


def list_log_files(
    host_dir: Path, errors: List[FileError] | None = None
) -> List[Path]:
    """Access log files of a single host directory, not recursive.

    Entries that can not be stat'ed are skipped and, if given, added to
    ``errors``.
    """
    log_files: List[Path] = []
    for entry in _list_dir(host_dir):
        try:
            if not is_log_file(entry):
                continue
        except OSError as ex:
            LOGGER.warning("Could not stat log file, '%s' - %s", entry, ex)
            if errors is not None:
                errors.append(FileError(path=entry, kind="stat", message=str(ex)))
            continue
        log_files.append(entry)
    return log_files


# --------------------------------------------------------------------------
