"""
Centralized transaction ID generation.

IDs are a millisecond timestamp plus a random base-36 suffix drawn from the
injected generator, so seeded runs produce reproducible suffixes while the
timestamp prefix keeps coarse ordering.
"""

from __future__ import annotations

import random
import string
import time
from typing import Optional

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


def generate_transaction_id(rng: random.Random, now_ms: Optional[int] = None) -> str:
    """Generate an opaque, practically unique transaction ID."""
    ts_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(rng.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"txn_{ts_ms}_{suffix}"
