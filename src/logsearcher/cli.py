import argparse
import logging
import os.path
import re
import sys
from datetime import datetime, timezone
from pathlib import Path
from pprint import pprint

from logsearcher.lines import DEFAULT_EXCLUDED_EXTENSIONS
from logsearcher.paths import ListingError
from logsearcher.report import ENTRY_COUNT_PER_DAY_THRESHOLD, MAP_STATS_TO_SHOW
from logsearcher.utils import setup_logging

# --------------------------------------------------------------------------

LOGGER = logging.getLogger(
    __name__
    if __name__ != "__main__"
    else os.path.splitext(os.path.basename(__file__))[0]
)

# --------------------------------------------------------------------------


def date_type(value: str) -> datetime:
    # compact ISO 8601, midnight UTC
    try:
        return datetime.strptime(value, "%Y%m%d").replace(tzinfo=timezone.utc)
    except ValueError as ex:
        raise argparse.ArgumentTypeError(
            f"invalid date {value!r}, expected YYYYMMDD"
        ) from ex


def pattern_type(value: str) -> re.Pattern[str]:
    try:
        return re.compile(value)
    except re.error as ex:
        raise argparse.ArgumentTypeError(
            f"invalid regular expression {value!r}: {ex}"
        ) from ex


def bool_type(value: str) -> bool:
    # anything but "true" is false
    return value.strip().lower() == "true"


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as ex:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from ex
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value!r}")
    return number


def parse_args(args=None):
    parser = argparse.ArgumentParser(
        prog="logsearcher",
        description=(
            "Count access log lines matching a pattern"
            " and rank the requesting client addresses."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # log level
    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument(
        "-v",
        "--verbose",
        dest="verbosity",
        action="store_true",
        default=None,
        help="More verbose output",
    )
    log_group.add_argument(
        "-q",
        "--quiet",
        dest="verbosity",
        action="store_false",
        default=None,
        help="Less output",
    )

    parser.add_argument(
        "--debug",
        dest="debug",
        action="store_true",
        default=False,
        help="Show debug output (development)",
    )

    # positionals are kept as given, the banner echoes them
    parser.add_argument("date_from", metavar="DATE_FROM", help="YYYYMMDD")
    parser.add_argument("date_to", metavar="DATE_TO", help="YYYYMMDD")
    parser.add_argument(
        "pattern",
        metavar="PATTERN",
        help="Regular expression searched for in each log line",
    )
    parser.add_argument(
        "log_dir",
        metavar="LOG_DIR",
        help="Directory with one subdirectory of access_* log files per host",
    )
    parser.add_argument(
        "count_only",
        metavar="COUNT_ONLY",
        nargs="?",
        default="false",
        help="Only count hits, no per-address statistics ('true' / 'false')",
    )

    # line filters
    filter_group = parser.add_argument_group("line filters")
    ext_group = filter_group.add_mutually_exclusive_group()
    ext_group.add_argument(
        "--exclude-ext",
        dest="excluded_extensions",
        action="append",
        metavar="EXT",
        default=None,
        help=(
            "Skip lines requesting files with this extension, repeatable"
            f" (default: {', '.join(DEFAULT_EXCLUDED_EXTENSIONS)})"
        ),
    )
    ext_group.add_argument(
        "--no-exclude",
        dest="excluded_extensions",
        action="store_const",
        const=[],
        help="Do not skip any static asset requests",
    )
    filter_group.add_argument(
        "--no-decode",
        dest="decode",
        action="store_false",
        default=True,
        help="Do not URL-decode lines before matching",
    )

    # report
    report_group = parser.add_argument_group("report")
    threshold_group = report_group.add_mutually_exclusive_group()
    threshold_group.add_argument(
        "--per-day-threshold",
        type=int,
        default=ENTRY_COUNT_PER_DAY_THRESHOLD,
        help="Average requests per day an address must exceed to be listed",
    )
    threshold_group.add_argument(
        "--no-threshold",
        dest="per_day_threshold",
        action="store_const",
        const=None,
        help="List top addresses regardless of their request rate",
    )
    report_group.add_argument(
        "--top",
        dest="topn",
        type=non_negative_int,
        default=MAP_STATS_TO_SHOW,
        help="Number of top addresses to list",
    )

    args = parser.parse_args(args)

    args.params = {
        "Pattern": args.pattern,
        "Date from": args.date_from,
        "Date to": args.date_to,
        "Log dir": args.log_dir,
        "Count only": args.count_only,
    }

    try:
        args.date_from = date_type(args.date_from)
        args.date_to = date_type(args.date_to)
        args.pattern = pattern_type(args.pattern)
    except argparse.ArgumentTypeError as ex:
        parser.error(str(ex))

    args.count_only = bool_type(args.count_only)
    args.log_dir = Path(args.log_dir)
    if not args.log_dir.exists():
        parser.error(f"Log directory does not exist {args.log_dir}")

    if args.excluded_extensions is None:
        args.excluded_extensions = list(DEFAULT_EXCLUDED_EXTENSIONS)

    return args


# --------------------------------------------------------------------------


def cli_main(args=None):
    args = parse_args(args)

    setup_logging(verbose=args.verbosity)

    if args.debug:
        pprint(args.__dict__, stream=sys.stderr)

    from logsearcher.lines import LineClassifier
    from logsearcher.main import main
    from logsearcher.scanner import ScanRequest

    request = ScanRequest(
        root=args.log_dir,
        pattern=args.pattern,
        date_from=args.date_from,
        date_to=args.date_to,
        count_only=args.count_only,
    )
    classifier = LineClassifier(
        excluded_extensions=args.excluded_extensions, decode=args.decode
    )

    try:
        main(
            request,
            classifier=classifier,
            topn=args.topn,
            per_day_threshold=args.per_day_threshold,
            params=args.params,
        )
    except ListingError as ex:
        LOGGER.error("%s", ex)
        return 1

    return 0


# --------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(cli_main())

# --------------------------------------------------------------------------
