import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, TypedDict

from logsearcher.counters import HitCounters
from logsearcher.lines import LineClassifier, extract_address
from logsearcher.paths import (
    FileError,
    ListingError,
    check_date_range,
    list_host_dirs,
    list_log_files,
)
from logsearcher.utils import open_logfile

# --------------------------------------------------------------------------

LOGGER = logging.getLogger(__name__)

__all__ = [
    "FileError",
    "FileStats",
    "ListingError",
    "ScanRequest",
    "ScanResult",
    "Scanner",
    "process_file",
    "scan",
]

# --------------------------------------------------------------------------


@dataclass(frozen=True)
class ScanRequest:
    #: directory with one subdirectory per host
    root: Path
    #: searched (not anchored) in each line
    pattern: re.Pattern[str]
    #: exclusive lower bound for log file modification times
    date_from: datetime
    #: exclusive upper bound for log file modification times
    date_to: datetime
    #: only count hits, do not collect per-address statistics
    count_only: bool = False

    @property
    def days_between(self) -> int:
        return (self.date_to.date() - self.date_from.date()).days


class FileStats(TypedDict):
    lines: int
    eligible: int
    hits: int
    error: FileError | None


@dataclass
class ScanResult:
    counters: HitCounters = field(default_factory=HitCounters)
    files: Dict[Path, FileStats] = field(default_factory=dict)
    skipped: List[Path] = field(default_factory=list)
    errors: List[FileError] = field(default_factory=list)


# --------------------------------------------------------------------------


def process_file(
    file: Path,
    pattern: re.Pattern[str],
    counters: HitCounters,
    classifier: LineClassifier | None = None,
    count_only: bool = False,
) -> FileStats:
    if classifier is None:
        classifier = LineClassifier()

    stats: FileStats = {"lines": 0, "eligible": 0, "hits": 0, "error": None}

    try:
        fp = open_logfile(file)
    except OSError as ex:
        stats["error"] = FileError(path=file, kind="open", message=str(ex))
        LOGGER.warning("Could not open log file '%s' - %s", file, ex)
        return stats

    with fp:
        try:
            for line in fp:
                stats["lines"] += 1

                line = classifier.prepare(line.rstrip("\r\n"))
                if line is None:
                    continue
                stats["eligible"] += 1

                if pattern.search(line) is None:
                    continue

                if not count_only:
                    address = extract_address(line)
                    if address is not None:
                        counters.record_address(address)

                counters.record_hit()
                stats["hits"] += 1

        except OSError as ex:
            # hits so far are kept
            stats["error"] = FileError(path=file, kind="read", message=str(ex))
            LOGGER.warning(
                "Error reading log file '%s' after %s lines - %s",
                file,
                stats["lines"],
                ex,
            )

    return stats


# --------------------------------------------------------------------------


class Scanner:
    def __init__(self, classifier: LineClassifier | None = None):
        if classifier is None:
            classifier = LineClassifier()
        self.classifier = classifier

    def scan(self, request: ScanRequest) -> ScanResult:
        """Walk ``root/<host>/access_*`` and count matching lines.

        Raises :class:`ListingError` if the root or a host directory can not
        be listed. Failures on single files are collected in the result.
        """
        result = ScanResult()

        host_dirs = list_host_dirs(request.root)
        LOGGER.info(
            f"Found {len(host_dirs)} host director{'ies' if len(host_dirs) != 1 else 'y'}"
            f" in '{request.root}'"
        )

        for host_dir in host_dirs:
            self.scan_host_dir(host_dir, request, result)

        LOGGER.info(
            "Scanned %s files (%s skipped, %s errors): %s hits",
            len(result.files),
            len(result.skipped),
            len(result.errors),
            result.counters.total,
        )

        return result

    def scan_host_dir(self, host_dir: Path, request: ScanRequest, result: ScanResult):
        log_files = list_log_files(host_dir, errors=result.errors)
        LOGGER.debug("Host '%s': %s log files", host_dir.name, len(log_files))

        for file in log_files:
            check = check_date_range(file, request.date_from, request.date_to)
            if check.error is not None:
                result.errors.append(check.error)
            if not check.in_range:
                result.skipped.append(file)
                continue

            LOGGER.debug(f"Processing '{file}' ...")
            stats = process_file(
                file,
                request.pattern,
                result.counters,
                classifier=self.classifier,
                count_only=request.count_only,
            )
            LOGGER.info(f"Processed '{file}': {stats=}")

            result.files[file] = stats
            if stats["error"] is not None:
                result.errors.append(stats["error"])


def scan(request: ScanRequest, classifier: LineClassifier | None = None) -> ScanResult:
    return Scanner(classifier=classifier).scan(request)


# --------------------------------------------------------------------------
