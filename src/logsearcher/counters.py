from collections import Counter

# --------------------------------------------------------------------------


class HitCounters:
    """Hit statistics of a single scan.

    ``total`` counts every matching line, ``addresses`` only those where a
    client address could be extracted, so ``total >= addresses.total()``.
    """

    def __init__(self):
        self.total: int = 0
        self.addresses: Counter[str] = Counter()

    def record_hit(self):
        self.total += 1

    def record_address(self, address: str):
        self.addresses[address] += 1

    @property
    def num_addresses(self) -> int:
        return len(self.addresses)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(total={self.total},"
            f" addresses={self.num_addresses})"
        )


# --------------------------------------------------------------------------
