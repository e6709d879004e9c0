from typing import Hashable


class BalancedOutcomesError(Exception):
    """Base class for errors raised by the balancing randomizer."""


class InvalidKeyError(BalancedOutcomesError, ValueError):
    """
    Raised when a key is not part of the original proportions, e.g. a forced
    roll("unknown") or remove("unknown").
    """

    def __init__(self, key: Hashable):
        self.key = key
        super().__init__(f"{key!r} is not one of the original proportions")


class NoAvailableOptionsError(BalancedOutcomesError, RuntimeError):
    """Raised when only/exclude filters leave nothing to choose from."""


class HistoryDisabledError(BalancedOutcomesError, RuntimeError):
    """Raised when history is read or undone without keep_history=True."""
