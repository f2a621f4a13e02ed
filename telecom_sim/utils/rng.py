"""Random sources for traffic generation.

The traffic generator only needs ``choice``; any object providing it can be
injected, which lets tests script exact destination sequences.
"""

from typing import Any, Protocol, Sequence


class RandomSource(Protocol):
    """Anything that can pick an item from a sequence, such as ``random.Random``."""

    def choice(self, items: Sequence[Any]) -> Any: ...
