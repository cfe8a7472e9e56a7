"""
Dynamic-programming matrices for semi-global alignment.

Each of the four grids (match, insert, delete, score) is a grid of cells, where a cell is a
score paired with the move that justifies it. Scores and moves live in two parallel arrays of
shape ``(4, m + 1, n + 1)`` so the kernels can index them without any object overhead.
"""
from enum import IntEnum
from typing import Final

import numpy as np

from readalign.align.moves import Move
from readalign.align.scoring import Scoring, NEGATIVE_INF


# Constants ------------------------------------------------------------------------------------------------------------
class Matrix(IntEnum):
    """Position of each grid along the first axis of a MatrixSet."""
    MATCH = 0
    INSERT = 1
    DELETE = 2
    SCORE = 3


# Classes --------------------------------------------------------------------------------------------------------------
class MatrixSet:
    """
    The coupled DP grids for one alignment plus the per-row suffix clip lengths.

    Row 0 and column 0 stand for the empty prefixes of the reference and the query.

    Attributes:
        scores (np.ndarray): ``int64`` array of shape ``(4, m + 1, n + 1)``, indexed by ``Matrix``.
        moves (np.ndarray): ``uint8`` array of the same shape holding ``Move`` codes.
        clip_length (np.ndarray): ``int64`` array of shape ``(m + 1,)``; the number of trailing
            query symbols clipped by the suffix clip that won ``score[i, n]``.

    Examples:
        >>> mats = MatrixSet.build(4, 5, Scoring())
        >>> mats.shape
        (5, 6)
    """
    SCORE_DTYPE: Final = np.int64
    MOVE_DTYPE: Final = np.uint8
    __slots__ = ('scores', 'moves', 'clip_length')

    def __init__(self, scores: np.ndarray, moves: np.ndarray, clip_length: np.ndarray):
        self.scores = scores
        self.moves = moves
        self.clip_length = clip_length

    @classmethod
    def build(cls, m: int, n: int, scoring: Scoring) -> 'MatrixSet':
        """
        Allocates the grids for a reference of length ``m`` and a query of length ``n`` and
        initialises row 0 and column 0. Interior cells are left for the forward fill.

        Args:
            m: Reference length.
            n: Query length.
            scoring: The scoring scheme.

        Returns:
            A MatrixSet ready for filling.
        """
        shape = (len(Matrix), m + 1, n + 1)
        scores = np.zeros(shape, dtype=cls.SCORE_DTYPE)
        moves = np.full(shape, Move.NONE, dtype=cls.MOVE_DTYPE)
        clip_length = np.zeros(m + 1, dtype=cls.SCORE_DTYPE)
        match, insert, delete, score = scores

        # Origin: only the match grid holds a real score
        insert[0, 0] = delete[0, 0] = NEGATIVE_INF

        # Row 0: a query prefix with no reference is either deleted or clipped
        delete[0, 1:] = scoring.gap(np.arange(1, n + 1, dtype=cls.SCORE_DTYPE))
        moves[Matrix.DELETE, 0, 2:] = Move.DELETE
        match[0, 1:] = insert[0, 1:] = NEGATIVE_INF
        clipped = delete[0, 1:] < scoring.soft_clip
        score[0, 1:] = np.where(clipped, scoring.soft_clip, delete[0, 1:])
        moves[Matrix.SCORE, 0, 1:] = np.where(clipped, Move.PREFIX_CLIP, Move.DELETE)

        # Column 0: the alignment may start at any reference row for free
        insert[1:, 0] = scoring.gap(np.arange(1, m + 1, dtype=cls.SCORE_DTYPE))
        delete[1:, 0] = NEGATIVE_INF
        return cls(scores, moves, clip_length)

    @property
    def shape(self) -> tuple[int, int]:
        """Returns ``(m + 1, n + 1)``."""
        return self.scores.shape[1], self.scores.shape[2]

    @property
    def final_column(self) -> np.ndarray:
        """Returns a view of ``score[:, n]``, the candidates for the alignment end."""
        return self.scores[Matrix.SCORE, :, -1]

    def cell(self, matrix: Matrix, i: int, j: int) -> tuple[int, Move]:
        """Returns the ``(score, move)`` pair stored at ``(i, j)`` of one grid."""
        return int(self.scores[matrix, i, j]), Move(int(self.moves[matrix, i, j]))

    def __repr__(self): return f"MatrixSet{self.shape}"
