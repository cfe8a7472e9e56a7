"""
Local (Smith-Waterman) alignment scoring with linear indels.

Scores never drop below zero, so an alignment may start and end anywhere in either
sequence. Only the best score and the cell where it is first reached are reported.
"""
from dataclasses import dataclass
from typing import Any

import numpy as np

from readalign.core.seq import Seq, SeqError
from readalign.utils import Config
from readalign.utils.resources import jit


# Classes --------------------------------------------------------------------------------------------------------------
@dataclass(slots=True, frozen=True, kw_only=True)
class LocalScoring(Config):
    """
    Scoring scheme for local alignment.

    Attributes:
        match: Reward for identical symbols.
        mismatch: Score for differing symbols.
        indel: Score for each symbol aligned against a gap.

    Examples:
        >>> LocalScoring(match=3).mismatch
        -1
    """
    match: int = 2
    mismatch: int = -1
    indel: int = -1


# Functions ------------------------------------------------------------------------------------------------------------
def local_score(s: Any, t: Any, scoring: LocalScoring = None) -> tuple[int, tuple[int, int]]:
    """
    Computes the best local alignment score of ``t`` against ``s``.

    Args:
        s: The reference sequence.
        t: The query sequence.
        scoring: The scoring scheme; ``LocalScoring()`` defaults when omitted.

    Returns:
        The best score and its end position as exclusive ``(s_end, t_end)`` coordinates.
        When no pair of symbols scores above zero the result is ``(0, (0, 0))``.

    Raises:
        SeqError: If either sequence is empty or cannot be coerced.

    Examples:
        >>> local_score(b'TTACGTT', b'GACGA')
        (6, (5, 4))
    """
    sc = LocalScoring() if scoring is None else scoring
    s, t = Seq.coerce(s), Seq.coerce(t)
    if not s: raise SeqError('The reference sequence is empty')
    if not t: raise SeqError('The query sequence is empty')
    score, end_i, end_j = _local_kernel(s.encoded, t.encoded, sc.match, sc.mismatch, sc.indel)
    return int(score), (int(end_i), int(end_j))


# Kernels --------------------------------------------------------------------------------------------------------------
@jit(nopython=True, cache=True, nogil=True)
def _local_kernel(s, t, match, mismatch, indel):
    cols = len(t) + 1
    H = np.zeros(cols, dtype=np.int64)
    global_max = 0
    max_r = 0
    max_c = 0
    for r in range(1, len(s) + 1):
        h_diag = H[0]
        x = s[r - 1]
        for c in range(1, cols):
            h_up = H[c]
            best = h_diag + (match if x == t[c - 1] else mismatch)
            if h_up + indel > best: best = h_up + indel
            if H[c - 1] + indel > best: best = H[c - 1] + indel
            if best < 0: best = 0
            h_diag = h_up
            H[c] = best
            if best > global_max:
                global_max = best
                max_r = r
                max_c = c
    return global_max, max_r, max_c
