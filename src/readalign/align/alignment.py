"""
Module for the alignment result and its derived views.
"""
from typing import Iterable, Iterator, Any

import numpy as np

from readalign.core.seq import Seq
from readalign.align.moves import Move
from readalign.align.scoring import Scoring
from readalign.utils.resources import jit


# Classes --------------------------------------------------------------------------------------------------------------
class Alignment:
    """
    Immutable result of a semi-global alignment.

    Attributes:
        score: The alignment score.
        s_range: Half-open ``(start, end)`` span of the reference covered by the aligned moves.
        t_range: Half-open span of the query, always ``(0, len(t))``.
        moves: The moves, oldest first.
        prefix_clip_length: Number of query symbols removed by a prefix clip.
        suffix_clip_length: Number of query symbols removed by a suffix clip.

    Examples:
        >>> aln = compute('ATAG', 'GGGGGGATG', Scoring(soft_clip=-5))
        >>> aln.cigar
        b'6S2=1X'
    """
    __slots__ = ('_score', '_s_range', '_t_range', '_moves', '_prefix_clip_length', '_suffix_clip_length')

    def __init__(self, score: int, s_range: tuple[int, int], t_range: tuple[int, int], moves: Iterable[Move],
                 prefix_clip_length: int = 0, suffix_clip_length: int = 0):
        self._score = score
        self._s_range = tuple(s_range)
        self._t_range = tuple(t_range)
        self._moves = tuple(moves)
        self._prefix_clip_length = prefix_clip_length
        self._suffix_clip_length = suffix_clip_length

    @property
    def score(self) -> int: return self._score
    @property
    def s_range(self) -> tuple[int, int]: return self._s_range
    @property
    def t_range(self) -> tuple[int, int]: return self._t_range
    @property
    def moves(self) -> tuple[Move, ...]: return self._moves
    @property
    def prefix_clip_length(self) -> int: return self._prefix_clip_length
    @property
    def suffix_clip_length(self) -> int: return self._suffix_clip_length

    @property
    def cigar(self) -> bytes:
        """
        Run-length encoded moves using the extended CIGAR codes.

        ``=`` match, ``X`` substitution, ``D`` reference symbol missing from the query,
        ``I`` query symbol missing from the reference, ``S`` soft clip.
        """
        if not self._moves: return b""
        ops = np.array([_CIGAR_CODES[mv] for mv in self._moves], dtype=np.uint8)
        weights = np.ones(len(ops), dtype=np.int32)
        for k, mv in enumerate(self._moves):
            if mv is Move.PREFIX_CLIP: weights[k] = self._prefix_clip_length
            elif mv is Move.SUFFIX_CLIP: weights[k] = self._suffix_clip_length
        counts, ops = _cigar_rle_kernel(ops, weights)
        return b"".join([b"%d" % c + _CIGAR_SYMBOLS[o] for c, o in zip(counts, ops)])

    @property
    def n_matches(self) -> int:
        """Number of identical symbol pairs in the path."""
        return self._moves.count(Move.MATCH)

    def count(self, move: Move) -> int:
        """Returns how many times ``move`` occurs in the path."""
        return self._moves.count(move)

    def __len__(self): return len(self._moves)
    def __iter__(self) -> Iterator[Move]: return iter(self._moves)

    def __repr__(self):
        return (f"Alignment(score={self._score}, s_range={list(self._s_range)}, "
                f"t_range={list(self._t_range)}, cigar={self.cigar.decode('ascii')})")

    def _key(self):
        return (self._score, self._s_range, self._t_range, self._moves,
                self._prefix_clip_length, self._suffix_clip_length)

    def __eq__(self, other):
        if isinstance(other, Alignment): return self._key() == other._key()
        return NotImplemented

    def __hash__(self): return hash(self._key())


# Functions ------------------------------------------------------------------------------------------------------------
def rescore(alignment: Alignment, s: Any, t: Any, scoring: Scoring) -> int:
    """
    Scores the moves of an alignment from scratch against the sequences.

    Walks the path from ``s_range[0]`` / ``t_range[0]`` charging ``gap_init`` once per
    contiguous insert or delete run and ``soft_clip`` once per clip.

    Args:
        alignment: The alignment to score.
        s: The reference sequence.
        t: The query sequence.
        scoring: The scoring scheme.

    Returns:
        The recomputed score.

    Examples:
        >>> aln = compute(s, t, scoring)
        >>> rescore(aln, s, t, scoring) == aln.score
        True
    """
    s, t = Seq.coerce(s), Seq.coerce(t)
    i, j = alignment.s_range[0], alignment.t_range[0]
    total = 0
    previous = Move.NONE
    for mv in alignment.moves:
        if mv is Move.NONE:
            raise ValueError(f'Move {mv.name} cannot appear in an alignment path')
        if mv.is_clip:
            total += scoring.soft_clip
            j += alignment.prefix_clip_length if mv is Move.PREFIX_CLIP else alignment.suffix_clip_length
        elif mv.consumes_reference and mv.consumes_query:
            total += scoring.substitution(s[i], t[j])
        else:
            total += scoring.gap_unit + (scoring.gap_init if previous is not mv else 0)
        i += mv.consumes_reference
        j += mv.consumes_query
        previous = mv
    return total


# Kernels --------------------------------------------------------------------------------------------------------------
_CIGAR_CODES = {Move.MATCH: 0, Move.SUBSTITUTE: 1, Move.INSERT: 2, Move.DELETE: 3,
                Move.PREFIX_CLIP: 4, Move.SUFFIX_CLIP: 4}
_CIGAR_SYMBOLS = [b'=', b'X', b'D', b'I', b'S']


@jit(nopython=True, cache=True, nogil=True)
def _cigar_rle_kernel(ops, weights):
    n = len(ops)
    counts = np.empty(n, dtype=np.int32); out = np.empty(n, dtype=np.uint8); idx = 0
    curr_op = ops[0]; curr_count = weights[0]
    for k in range(1, n):
        op = ops[k]
        if op == curr_op:
            curr_count += weights[k]
        else:
            counts[idx] = curr_count; out[idx] = curr_op; idx += 1
            curr_op = op; curr_count = weights[k]
    counts[idx] = curr_count; out[idx] = curr_op; idx += 1
    return counts[:idx], out[:idx]
