"""
Semi-global alignment engine: forward fill, best-cell scan and traceback.

The reference ``s`` may be spanned partially while the query ``t`` must be consumed in
full, either by aligned moves or by a soft-clipped prefix and/or suffix. Gaps follow an
affine model and ties are resolved by evaluation order:
open gap run > new gap > match/substitution > prefix clip > suffix clip.
"""
from typing import Any
from warnings import warn

import numpy as np

from readalign import DependencyWarning
from readalign.core.seq import Seq, SeqError
from readalign.align.alignment import Alignment
from readalign.align.matrices import MatrixSet, Matrix
from readalign.align.moves import Move, REFERENCE_CONSUMERS
from readalign.align.scoring import Scoring
from readalign.utils.resources import RESOURCES, jit


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class TracebackError(RuntimeError):
    """Raised when the traceback reaches a state the forward fill can never produce."""


# Constants ------------------------------------------------------------------------------------------------------------
_MATCH = int(Move.MATCH)
_SUBSTITUTE = int(Move.SUBSTITUTE)
_INSERT = int(Move.INSERT)
_DELETE = int(Move.DELETE)
_PREFIX_CLIP = int(Move.PREFIX_CLIP)
_SUFFIX_CLIP = int(Move.SUFFIX_CLIP)
_NONE = int(Move.NONE)

_TRACE_OK = 0
_TRACE_STRANDED = 1
_TRACE_LATE_SUFFIX = 2
_TRACE_UNKNOWN = 3
_TRACE_ERRORS = {
    _TRACE_STRANDED: 'reached a cell without predecessor before consuming the query',
    _TRACE_LATE_SUFFIX: 'met a suffix clip after the first move',
    _TRACE_UNKNOWN: 'met an unknown move code',
}


# Classes --------------------------------------------------------------------------------------------------------------
class SemiglobalAligner:
    """
    Reusable semi-global aligner bound to one scoring scheme.

    Args:
        scoring: The scoring scheme; ``Scoring()`` defaults when omitted.
        require_jit: Warn with ``DependencyWarning`` if numba is unavailable and the
            kernels will run as plain Python.

    Examples:
        >>> aligner = SemiglobalAligner(Scoring(match=2, mismatch=-2, soft_clip=-5))
        >>> aln = aligner.align(b'CGTTTT', b'GAAAA')
        >>> aln.cigar
        b'1=4S'
    """
    __slots__ = ('scoring',)

    def __init__(self, scoring: Scoring = None, require_jit: bool = False):
        self.scoring = Scoring() if scoring is None else scoring
        if require_jit and not RESOURCES.has_module('numba'):
            warn('numba is not installed, alignment kernels will run as plain Python', DependencyWarning)

    def __repr__(self): return f"SemiglobalAligner({self.scoring})"

    def matrices(self, s: Any, t: Any) -> MatrixSet:
        """
        Builds and fills the DP matrices without tracing back.

        Args:
            s: The reference sequence.
            t: The query sequence.

        Returns:
            The filled MatrixSet.

        Raises:
            SeqError: If either sequence is empty or cannot be coerced.
        """
        s, t = _prepare(s, t)
        return self._fill(s, t)

    def align(self, s: Any, t: Any) -> Alignment:
        """
        Computes the optimal semi-global alignment of query ``t`` against reference ``s``.

        Args:
            s: The reference sequence (anything ``Seq.coerce`` accepts).
            t: The query sequence.

        Returns:
            The immutable Alignment.

        Raises:
            SeqError: If either sequence is empty or cannot be coerced.
            TracebackError: If the traceback walks into an impossible state.
        """
        s, t = _prepare(s, t)
        return self.traceback(self._fill(s, t))

    def traceback(self, matrices: MatrixSet) -> Alignment:
        """
        Reconstructs the best alignment from filled matrices.

        The walk starts at the best cell of the final query column (first row wins ties)
        and replays the moves recorded during the fill.

        Args:
            matrices: A MatrixSet filled by this aligner.

        Returns:
            The immutable Alignment.

        Raises:
            TracebackError: If the recorded moves do not form a valid path.
        """
        n = matrices.shape[1] - 1
        final = matrices.final_column
        best_i = int(np.argmax(final))
        path, end_i, prefix, suffix, status = _traceback_kernel(matrices.moves, matrices.clip_length, best_i, n)
        if status != _TRACE_OK:
            raise TracebackError(f'Traceback from cell ({best_i}, {n}) {_TRACE_ERRORS[status]}')
        s_start = best_i - int(np.count_nonzero(REFERENCE_CONSUMERS[path]))
        if s_start != end_i:
            raise TracebackError(f'Traceback ended at row {end_i} but the moves imply row {s_start}')
        return Alignment(
            score=int(final[best_i]), s_range=(s_start, best_i), t_range=(0, n),
            moves=tuple(Move(int(op)) for op in path),
            prefix_clip_length=int(prefix), suffix_clip_length=int(suffix)
        )

    def _fill(self, s: Seq, t: Seq) -> MatrixSet:
        sc = self.scoring
        matrices = MatrixSet.build(len(s), len(t), sc)
        _fill_kernel(s.encoded, t.encoded, matrices.scores, matrices.moves, matrices.clip_length,
                     sc.gap_init, sc.gap_unit, sc.match, sc.mismatch, sc.soft_clip)
        return matrices


# Functions ------------------------------------------------------------------------------------------------------------
def compute(s: Any, t: Any, scoring: Scoring = None) -> Alignment:
    """
    Aligns query ``t`` semi-globally against reference ``s``.

    Args:
        s: The reference sequence.
        t: The query sequence.
        scoring: The scoring scheme; ``Scoring()`` defaults when omitted.

    Returns:
        The immutable Alignment.

    Examples:
        >>> compute('GGTAGGG', 'GGGGG', Scoring(mismatch=-3)).cigar
        b'2=2D3='
    """
    return SemiglobalAligner(scoring).align(s, t)


def _prepare(s: Any, t: Any) -> tuple[Seq, Seq]:
    s, t = Seq.coerce(s), Seq.coerce(t)
    if not s: raise SeqError('The reference sequence is empty')
    if not t: raise SeqError('The query sequence is empty')
    return s, t


# Kernels --------------------------------------------------------------------------------------------------------------
@jit(nopython=True, cache=True, nogil=True)
def _fill_kernel(s, t, scores, moves, clip_length, gap_init, gap_unit, match, mismatch, soft_clip):
    """
    Fills the interior of the matrices row by row.

    ``score[i, n]`` also competes against the best ``score[i, j'] + soft_clip`` over interior
    columns ``j'`` of the same row, carried across the ``j`` loop.
    """
    m = len(s)
    n = len(t)
    M = scores[0]; I = scores[1]; D = scores[2]; S = scores[3]
    M_mv = moves[0]; I_mv = moves[1]; D_mv = moves[2]; S_mv = moves[3]
    gap_open = gap_init + gap_unit

    for i in range(1, m + 1):
        x = s[i - 1]
        clip_best = 0
        clip_col = 0  # 0 means no candidate yet
        for j in range(1, n + 1):
            y = t[j - 1]

            # Reference symbol against a gap
            ext = I[i - 1, j] + gap_unit
            opn = S[i - 1, j] + gap_open
            if ext >= opn:
                I[i, j] = ext
                I_mv[i, j] = _INSERT
            else:
                I[i, j] = opn
                I_mv[i, j] = S_mv[i - 1, j]

            # Query symbol against a gap
            ext = D[i, j - 1] + gap_unit
            opn = S[i, j - 1] + gap_open
            if ext >= opn:
                D[i, j] = ext
                D_mv[i, j] = _DELETE
            else:
                D[i, j] = opn
                D_mv[i, j] = S_mv[i, j - 1]

            same = x == y
            M[i, j] = S[i - 1, j - 1] + (match if same else mismatch)
            M_mv[i, j] = S_mv[i - 1, j - 1]

            best = I[i, j]
            source = _INSERT
            if D[i, j] > best:
                best = D[i, j]
                source = _DELETE
            if M[i, j] > best:
                best = M[i, j]
                source = _MATCH if same else _SUBSTITUTE
            if soft_clip > best:
                best = soft_clip
                source = _PREFIX_CLIP

            if j < n:
                candidate = best + soft_clip
                if clip_col == 0 or candidate > clip_best:
                    clip_best = candidate
                    clip_col = j
            elif clip_col > 0 and clip_best > best:
                best = clip_best
                source = _SUFFIX_CLIP
                clip_length[i] = n - clip_col

            S[i, j] = best
            S_mv[i, j] = source


@jit(nopython=True, cache=True, nogil=True)
def _traceback_kernel(moves, clip_length, best_i, n):
    """
    Walks the recorded moves back from ``(best_i, n)``.

    Returns the path (start to end), the row where the walk stopped, the prefix and suffix
    clip lengths and a status code.
    """
    M_mv = moves[0]; I_mv = moves[1]; D_mv = moves[2]; S_mv = moves[3]
    i = best_i
    j = n
    path = np.empty(best_i + n + 2, dtype=np.uint8)  # One move per consumed cell plus two clips
    k = 0
    prefix = 0
    suffix = 0
    status = _TRACE_OK
    state = S_mv[i, j]

    while True:
        if state == _NONE:
            if j != 0: status = _TRACE_STRANDED
            break
        path[k] = state
        k += 1
        if state == _MATCH or state == _SUBSTITUTE:
            state = M_mv[i, j]
            i -= 1
            j -= 1
        elif state == _INSERT:
            state = I_mv[i, j]
            i -= 1
        elif state == _DELETE:
            state = D_mv[i, j]
            j -= 1
        elif state == _PREFIX_CLIP:
            prefix = j
            break
        elif state == _SUFFIX_CLIP:
            if k != 1:
                status = _TRACE_LATE_SUFFIX
                break
            suffix = clip_length[i]
            j -= suffix
            state = S_mv[i, j]
        else:
            status = _TRACE_UNKNOWN
            break

    return path[:k][::-1].copy(), i, prefix, suffix, status
