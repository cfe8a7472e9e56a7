"""Affine-gap scoring policy with soft clipping."""
from dataclasses import dataclass
from typing import Final

import numpy as np

from readalign.utils import Config


# Constants ------------------------------------------------------------------------------------------------------------
NEGATIVE_INF: Final[int] = int(np.iinfo(np.int32).min // 2)  # Half of int32 min, scores live in int64


# Classes --------------------------------------------------------------------------------------------------------------
@dataclass(slots=True, frozen=True, kw_only=True)
class Scoring(Config):
    """
    Scoring scheme for semi-global alignment.

    A gap run of length ``k`` scores ``gap_init + gap_unit * k``. Soft clipping a query
    prefix or suffix of any length scores ``soft_clip``; the default of ``NEGATIVE_INF``
    effectively disables clipping. Values are not validated.

    Attributes:
        gap_init: Charged once per contiguous gap run.
        gap_unit: Charged per gapped position.
        match: Reward for identical symbols.
        mismatch: Score for differing symbols.
        soft_clip: Fixed score for clipping a query prefix or suffix.

    Examples:
        >>> Scoring(match=2, mismatch=-2, soft_clip=-5).gap(3)
        -8
    """
    gap_init: int = -5
    gap_unit: int = -1
    match: int = 1
    mismatch: int = -1
    soft_clip: int = NEGATIVE_INF

    @property
    def clipping(self) -> bool:
        """Whether soft clipping can compete with real alignment scores."""
        return self.soft_clip > NEGATIVE_INF

    def gap(self, length: int) -> int: return self.gap_init + self.gap_unit * length
    def substitution(self, x: int, y: int) -> int: return self.match if x == y else self.mismatch
