"""
Semi-global read-to-reference alignment with affine gaps and soft clipping.

Examples:
    >>> from readalign import compute, Scoring
    >>> aln = compute(b'ATAG', b'GGGGGGATG', Scoring(soft_clip=-5))
    >>> aln.moves
    (<Move.PREFIX_CLIP: 4>, <Move.MATCH: 0>, <Move.MATCH: 0>, <Move.SUBSTITUTE: 1>)
"""


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class ReadAlignWarning(Warning): pass
class DependencyWarning(ReadAlignWarning): pass


from readalign.core.seq import Seq, SeqError
from readalign.align.moves import Move
from readalign.align.scoring import Scoring, NEGATIVE_INF
from readalign.align.matrices import MatrixSet, Matrix
from readalign.align.alignment import Alignment, rescore
from readalign.align.semiglobal import SemiglobalAligner, TracebackError, compute
from readalign.align.local import LocalScoring, local_score

__all__ = [
    'ReadAlignWarning', 'DependencyWarning', 'Seq', 'SeqError', 'Move', 'Scoring', 'NEGATIVE_INF', 'MatrixSet',
    'Matrix', 'Alignment', 'rescore', 'SemiglobalAligner', 'TracebackError', 'compute',
    'LocalScoring', 'local_score'
]
