"""Identifier and clock helpers.

Generated ids take the form ``<prefix>_<epoch-ms>_<suffix>`` where suffix is
ID_SUFFIX_LENGTH random base36 characters.
"""

import secrets
import time

from src.core.constants import ID_SUFFIX_LENGTH

_BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def epoch_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def random_base36(length: int = ID_SUFFIX_LENGTH) -> str:
    """Return a random lowercase base36 string of the given length."""
    return "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(length))


def generate_prefixed_id(prefix: str) -> str:
    """Generate a time-ordered, practically unique id.

    Args:
        prefix: Id prefix (e.g., "notif", "event").

    Returns:
        Id such as ``notif_1718000000000_k3j9x0q2a``.
    """
    return f"{prefix}_{epoch_ms()}_{random_base36()}"
