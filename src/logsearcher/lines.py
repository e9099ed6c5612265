import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Tuple
from urllib.parse import unquote_plus

# --------------------------------------------------------------------------

LOGGER = logging.getLogger(__name__)

# --------------------------------------------------------------------------

#: requests for static assets, lines referencing them are never counted
DEFAULT_EXCLUDED_EXTENSIONS: Tuple[str, ...] = ("png", "css", "rss", "js")
#: older variant, kept for comparison runs
SIMPLE_EXCLUDED_EXTENSIONS: Tuple[str, ...] = ("png", "css")

# dotted digit groups at line start, followed by whitespace
# NOTE: syntactic only, "1.2.3.4.5" or "999.1" are accepted as well
ADDRESS_PATTERN = re.compile(r"([0-9]+(?:\.[0-9]+)+)\s.*")

# --------------------------------------------------------------------------


def decode_line(line: str) -> str:
    """URL-decode a log line (``%XX`` escapes and ``+``) as UTF-8.

    Malformed escapes are kept as they are and invalid UTF-8 byte sequences
    are dropped. Falls back to the raw line if decoding fails anyway.
    """
    try:
        return unquote_plus(line, encoding="utf-8", errors="ignore")
    except (UnicodeError, ValueError) as ex:
        LOGGER.debug("Could not URL-decode line %r - %s", line, ex)
        return line


def build_exclusion_pattern(extensions: Iterable[str]) -> re.Pattern[str] | None:
    exts = [re.escape(ext.lstrip(".")) for ext in extensions if ext.lstrip(".")]
    if not exts:
        return None
    return re.compile(r"\w+\.(?:{})".format("|".join(exts)))


def extract_address(line: str) -> str | None:
    match = ADDRESS_PATTERN.match(line)
    if match is None:
        return None
    return match.group(1)


# --------------------------------------------------------------------------


@dataclass(frozen=True)
class LineClassifier:
    #: file extensions (without dot) of static assets to skip
    excluded_extensions: Tuple[str, ...] = DEFAULT_EXCLUDED_EXTENSIONS
    #: URL-decode lines before classifying and matching them
    decode: bool = True

    _exclusion: re.Pattern[str] | None = field(
        init=False, repr=False, compare=False, default=None
    )

    def __post_init__(self):
        # normalize, allows lists to be passed in
        object.__setattr__(self, "excluded_extensions", tuple(self.excluded_extensions))
        object.__setattr__(
            self, "_exclusion", build_exclusion_pattern(self.excluded_extensions)
        )

    @classmethod
    def simple(cls) -> "LineClassifier":
        return cls(excluded_extensions=SIMPLE_EXCLUDED_EXTENSIONS, decode=False)

    def is_eligible(self, line: str) -> bool:
        if self._exclusion is None:
            return True
        return self._exclusion.search(line) is None

    def prepare(self, line: str) -> str | None:
        """Decode (if enabled) and classify a raw line.

        Returns the text the search pattern should be matched against, or
        ``None`` if the line is a static asset request and must be skipped.
        """
        if self.decode:
            line = decode_line(line)
        if not self.is_eligible(line):
            return None
        return line


# --------------------------------------------------------------------------
