import io
import logging
from functools import partial
from typing import List, NamedTuple

from logsearcher.counters import HitCounters

# --------------------------------------------------------------------------

LOGGER = logging.getLogger(__name__)

# --------------------------------------------------------------------------

#: max. number of addresses in the ranking
MAP_STATS_TO_SHOW = 20
#: average requests per day an address must exceed to be listed
ENTRY_COUNT_PER_DAY_THRESHOLD = 10

# --------------------------------------------------------------------------


class RankedEntry(NamedTuple):
    address: str
    count: int


def frequency_threshold(
    days_between: int, per_day_threshold: int | None = ENTRY_COUNT_PER_DAY_THRESHOLD
) -> int | None:
    if per_day_threshold is None:
        return None
    # same day range gives 0, i.e. every address is shown
    return days_between * per_day_threshold


def rank_addresses(
    counters: HitCounters,
    threshold: int | None = None,
    topn: int | None = MAP_STATS_TO_SHOW,
) -> List[RankedEntry]:
    ranked: List[RankedEntry] = []
    for address, cnt in counters.addresses.most_common():
        if threshold is not None and cnt <= threshold:
            # sorted descending, nothing further will pass either
            break
        if topn is not None and len(ranked) >= topn:
            break
        ranked.append(RankedEntry(address, cnt))

    return ranked


# --------------------------------------------------------------------------


def report(
    counters: HitCounters,
    days_between: int,
    count_only: bool = False,
    /,
    stream: io.TextIOBase | None = None,
    topn: int | None = MAP_STATS_TO_SHOW,
    per_day_threshold: int | None = ENTRY_COUNT_PER_DAY_THRESHOLD,
) -> List[RankedEntry]:
    sprint = partial(print, file=stream)
    sprint("Total hits:", "\t", counters.total)

    if count_only:
        return []

    if per_day_threshold is None:
        sprint(f"Top {topn} IPs: (showing all IPs)")
    else:
        sprint(
            f"Top {topn} IPs: (showing IPs requesting *on average* more than"
            f" {per_day_threshold} times per day)"
        )

    threshold = frequency_threshold(days_between, per_day_threshold)
    ranked = rank_addresses(counters, threshold=threshold, topn=topn)
    LOGGER.debug(
        "Ranked %s of %s addresses, threshold=%s",
        len(ranked),
        counters.num_addresses,
        threshold,
    )

    for address, cnt in ranked:
        sprint(address, "\t", cnt)

    return ranked


# --------------------------------------------------------------------------
