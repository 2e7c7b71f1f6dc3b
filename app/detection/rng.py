"""
Randomness source for demo artifacts (region placement, jitter, OCR draws).

Callers pass a `random.Random`; tests pin it with a seed. `None` falls back
to the module generator, which is unseeded.
"""

import random
from typing import Optional

_default_rng = random.Random()


def resolve_rng(rng: Optional[random.Random] = None) -> random.Random:
    return rng if rng is not None else _default_rng
