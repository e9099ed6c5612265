import logging
import os
from pathlib import Path

# --------------------------------------------------------------------------


def open_logfile(
    filename: str | os.PathLike | Path,
    encoding: str = "utf-8",
    errors: str = "ignore",
    newline: str | None = None,
    **kwargs,
):
    """Open a log file for text reading.

    Invalid byte sequences are skipped silently by default, a broken line
    should never abort reading the rest of the file.
    """
    return open(
        str(filename),
        mode="rt",
        encoding=encoding,
        errors=errors,
        newline=newline,
        **kwargs,
    )


# --------------------------------------------------------------------------


def setup_logging(verbose: bool | None = None):
    loglevel = logging.INFO
    if verbose is True:
        loglevel = logging.DEBUG
    elif verbose is False:
        loglevel = logging.WARNING

    from rich.console import Console
    from rich.logging import RichHandler

    # stdout is reserved for the report
    logging.basicConfig(
        format="%(message)s",
        level=loglevel,
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                log_time_format="%Y-%m-%d %H:%M:%S",
            )
        ],
    )


# --------------------------------------------------------------------------
