import io
import logging
from functools import partial
from typing import Dict

from logsearcher.lines import LineClassifier
from logsearcher.report import (
    ENTRY_COUNT_PER_DAY_THRESHOLD,
    MAP_STATS_TO_SHOW,
    report,
)
from logsearcher.scanner import ScanRequest, ScanResult, Scanner

# --------------------------------------------------------------------------

LOGGER = logging.getLogger(__name__)

# --------------------------------------------------------------------------


def request_params(request: ScanRequest) -> Dict[str, str]:
    return {
        "Pattern": request.pattern.pattern,
        "Date from": request.date_from.strftime("%Y%m%d"),
        "Date to": request.date_to.strftime("%Y%m%d"),
        "Log dir": str(request.root),
        "Count only": str(request.count_only).lower(),
    }


def print_banner(params: Dict[str, str], stream: io.TextIOBase | None = None):
    sprint = partial(print, file=stream)
    sprint("=====================================")
    for name, value in params.items():
        sprint(f"{name} = ", value)
    sprint("-------------------------------------")


def main(
    request: ScanRequest,
    classifier: LineClassifier | None = None,
    topn: int | None = MAP_STATS_TO_SHOW,
    per_day_threshold: int | None = ENTRY_COUNT_PER_DAY_THRESHOLD,
    stream: io.TextIOBase | None = None,
    params: Dict[str, str] | None = None,
) -> ScanResult:
    """Print the banner, scan and report.

    ``params`` are echoed in the banner as given on the command line,
    derived from ``request`` if not given.
    """
    if params is None:
        params = request_params(request)
    print_banner(params, stream=stream)

    scanner = Scanner(classifier=classifier)
    LOGGER.debug(f"Line classifier: {scanner.classifier!r}")

    result = scanner.scan(request)

    for error in result.errors:
        LOGGER.debug("File error: %s", error)

    report(
        result.counters,
        request.days_between,
        request.count_only,
        stream=stream,
        topn=topn,
        per_day_threshold=per_day_threshold,
    )

    return result


# --------------------------------------------------------------------------
