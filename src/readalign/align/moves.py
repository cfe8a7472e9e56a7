"""Alignment moves recorded in the DP cells and emitted by the traceback."""
from enum import IntEnum

import numpy as np


# Constants ------------------------------------------------------------------------------------------------------------
class Move(IntEnum):
    """
    Atomic alignment operations.

    ``INSERT`` consumes a reference symbol against a gap in the query, ``DELETE`` consumes a
    query symbol against a gap in the reference. ``NONE`` marks a cell with no predecessor
    and never appears in a finished path.
    """
    MATCH = 0
    SUBSTITUTE = 1
    INSERT = 2
    DELETE = 3
    PREFIX_CLIP = 4
    SUFFIX_CLIP = 5
    NONE = 6

    @property
    def consumes_reference(self) -> bool: return bool(REFERENCE_CONSUMERS[self])
    @property
    def consumes_query(self) -> bool: return bool(QUERY_CONSUMERS[self])
    @property
    def is_clip(self) -> bool: return self is Move.PREFIX_CLIP or self is Move.SUFFIX_CLIP


# Per-move symbol consumption, indexed by Move. Clips consume a variable number of query symbols.
REFERENCE_CONSUMERS = np.array([True, True, True, False, False, False, False], dtype=bool)
QUERY_CONSUMERS = np.array([True, True, False, True, False, False, False], dtype=bool)
