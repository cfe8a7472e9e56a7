import warnings

import numpy as np
import pytest

from readalign import DependencyWarning
from readalign.core.seq import SeqError
from readalign.align.alignment import rescore
from readalign.align.matrices import Matrix
from readalign.align.moves import Move
from readalign.align.scoring import Scoring
from readalign.align.semiglobal import SemiglobalAligner, TracebackError, compute
from readalign.utils.resources import RESOURCES

MATCH, SUBSTITUTE, INSERT, DELETE = Move.MATCH, Move.SUBSTITUTE, Move.INSERT, Move.DELETE
PREFIX_CLIP, SUFFIX_CLIP = Move.PREFIX_CLIP, Move.SUFFIX_CLIP


class TestScenarios:
    def test_delete_only(self):
        aln = compute(b'TTTT', b'AAAA', Scoring(gap_init=-5, gap_unit=-1, match=1, mismatch=-3))
        assert aln.moves == (DELETE, DELETE, DELETE, DELETE)
        assert aln.score == -9
        assert aln.s_range == (0, 0)
        assert aln.t_range == (0, 4)

    def test_insert_in_between(self):
        aln = compute(b'GGTAGGG', b'GGGGG', Scoring(gap_init=-5, gap_unit=-1, match=1, mismatch=-3))
        assert aln.moves == (MATCH, MATCH, INSERT, INSERT, MATCH, MATCH, MATCH)
        assert aln.score == -2
        assert aln.s_range == (0, 7)

    def test_prefix_clip(self):
        scoring = Scoring(gap_init=-5, gap_unit=-1, match=1, mismatch=-1, soft_clip=-5)
        aln = compute(b'ATAG', b'GGGGGGATG', scoring)
        assert aln.moves == (PREFIX_CLIP, MATCH, MATCH, SUBSTITUTE)
        assert aln.prefix_clip_length == 6
        assert aln.suffix_clip_length == 0
        assert aln.score == -4
        assert aln.s_range == (0, 3)
        assert aln.t_range == (0, 9)

    def test_suffix_clip(self):
        scoring = Scoring(gap_init=-5, gap_unit=-1, match=2, mismatch=-2, soft_clip=-5)
        aln = compute(b'CGTTTT', b'GAAAA', scoring)
        assert aln.moves == (MATCH, SUFFIX_CLIP)
        assert aln.suffix_clip_length == 4
        assert aln.prefix_clip_length == 0
        assert aln.score == -3
        assert aln.s_range == (1, 2)

    def test_leading_deletions(self):
        aln = compute(b'ACCGTGGATGGG', b'GAAAACCGTTGAT', Scoring(gap_init=-5, gap_unit=-1, match=1, mismatch=-1))
        assert aln.moves == (DELETE,) * 4 + (MATCH,) * 5 + (SUBSTITUTE,) + (MATCH,) * 3
        assert aln.score == -2
        assert aln.s_range == (0, 9)

    def test_whole_query_clipped(self):
        aln = compute(b'TTTT', b'AAAA', Scoring(soft_clip=-2))
        assert aln.moves == (PREFIX_CLIP,)
        assert aln.prefix_clip_length == 4
        assert aln.score == -2
        assert aln.s_range == (0, 0)

    def test_suffix_clip_at_reference_end(self):
        # The trailing G is clipped after aligning AC against the whole reference
        aln = compute(b'AC', b'ACG', Scoring(soft_clip=-3))
        assert aln.moves == (MATCH, MATCH, SUFFIX_CLIP)
        assert aln.suffix_clip_length == 1
        assert aln.score == -1

    def test_accepts_str_and_arrays(self):
        expected = compute(b'GGTAGGG', b'GGGGG', Scoring(mismatch=-3))
        assert compute('GGTAGGG', 'GGGGG', Scoring(mismatch=-3)) == expected
        s = np.frombuffer(b'GGTAGGG', dtype=np.uint8)
        t = np.frombuffer(b'GGGGG', dtype=np.uint8)
        assert compute(s, t, Scoring(mismatch=-3)) == expected

    def test_default_scoring(self):
        assert compute(b'ACGT', b'ACGT') == SemiglobalAligner(Scoring()).align(b'ACGT', b'ACGT')
        assert compute(b'ACGT', b'ACGT').score == 4


SCORINGS = [
    Scoring(),
    Scoring(mismatch=-3),
    Scoring(match=2, mismatch=-2, soft_clip=-5),
    Scoring(gap_init=-2, gap_unit=-2, soft_clip=-3),
    Scoring(gap_init=0, gap_unit=-1, match=3, mismatch=-1, soft_clip=-1),
]


def _random_pairs(seed: int, count: int = 12):
    rng = np.random.default_rng(seed)
    alphabet = np.frombuffer(b'ACGT', dtype=np.uint8)
    for _ in range(count):
        s = rng.choice(alphabet, size=int(rng.integers(1, 13))).tobytes()
        t = rng.choice(alphabet, size=int(rng.integers(1, 11))).tobytes()
        yield s, t


@pytest.mark.parametrize('scoring', SCORINGS)
@pytest.mark.parametrize('seed', [0, 1, 2])
class TestProperties:
    def test_query_coverage(self, scoring, seed):
        for s, t in _random_pairs(seed):
            aln = compute(s, t, scoring)
            assert aln.t_range == (0, len(t))
            consumed = aln.count(MATCH) + aln.count(SUBSTITUTE) + aln.count(DELETE)
            assert consumed + aln.prefix_clip_length + aln.suffix_clip_length == len(t)

    def test_range_arithmetic(self, scoring, seed):
        for s, t in _random_pairs(seed):
            aln = compute(s, t, scoring)
            start, end = aln.s_range
            assert 0 <= start <= end <= len(s)
            assert end - start == aln.count(MATCH) + aln.count(SUBSTITUTE) + aln.count(INSERT)

    def test_score_consistency(self, scoring, seed):
        aligner = SemiglobalAligner(scoring)
        for s, t in _random_pairs(seed):
            aln = aligner.align(s, t)
            final = aligner.matrices(s, t).final_column
            assert aln.score == final[aln.s_range[1]] == final.max()
            assert rescore(aln, s, t, scoring) == aln.score

    def test_idempotence(self, scoring, seed):
        for s, t in _random_pairs(seed):
            assert compute(s, t, scoring) == compute(s, t, scoring)

    def test_path_shape(self, scoring, seed):
        for s, t in _random_pairs(seed):
            aln = compute(s, t, scoring)
            assert Move.NONE not in aln.moves
            assert aln.count(PREFIX_CLIP) <= 1 and aln.count(SUFFIX_CLIP) <= 1
            if PREFIX_CLIP in aln.moves: assert aln.moves[0] is PREFIX_CLIP
            if SUFFIX_CLIP in aln.moves: assert aln.moves[-1] is SUFFIX_CLIP
            if scoring.clipping: assert aln.score >= scoring.soft_clip
            else: assert aln.prefix_clip_length == aln.suffix_clip_length == 0


class TestNoClipDegeneration:
    @pytest.mark.parametrize('seed', range(4))
    def test_no_clip_moves_without_clipping(self, seed):
        scoring = Scoring(match=2, mismatch=-3)
        assert not scoring.clipping
        for s, t in _random_pairs(seed):
            aln = compute(s, t, scoring)
            assert not any(mv.is_clip for mv in aln.moves)


class TestErrors:
    def test_empty_reference(self):
        with pytest.raises(SeqError, match="reference sequence is empty"):
            compute(b'', b'ACGT')

    def test_empty_query(self):
        with pytest.raises(SeqError, match="query sequence is empty"):
            compute('ACGT', '')

    def test_unsupported_type(self):
        with pytest.raises(SeqError, match="Cannot build"):
            compute(1234, b'ACGT')

    def _corrupted(self, move):
        aligner = SemiglobalAligner()
        mats = aligner.matrices(b'AAAA', b'AAAA')
        assert mats.cell(Matrix.SCORE, 4, 4) == (4, MATCH)
        mats.moves[Matrix.MATCH, 4, 4] = move
        return aligner, mats

    def test_stranded_traceback(self):
        aligner, mats = self._corrupted(Move.NONE)
        with pytest.raises(TracebackError, match="without predecessor"):
            aligner.traceback(mats)

    def test_suffix_clip_mid_path(self):
        aligner, mats = self._corrupted(Move.SUFFIX_CLIP)
        with pytest.raises(TracebackError, match="suffix clip after the first move"):
            aligner.traceback(mats)

    def test_unknown_move(self):
        aligner, mats = self._corrupted(42)
        with pytest.raises(TracebackError, match="unknown move code"):
            aligner.traceback(mats)

    def test_insertion_after_suffix_clip_under_positive_gaps(self):
        # A positive gap score lets an insertion open from a suffix-clipped final-column cell
        scoring = Scoring(gap_init=0, gap_unit=1, match=-1, mismatch=0, soft_clip=2)
        with pytest.raises(TracebackError, match="suffix clip after the first move"):
            compute('AA', 'ACAC', scoring)

    def test_traceback_of_untouched_matrices(self):
        aligner = SemiglobalAligner()
        mats = aligner.matrices(b'AAAA', b'AAAA')
        assert aligner.traceback(mats) == aligner.align(b'AAAA', b'AAAA')


class TestDependencies:
    def test_warns_without_numba(self, monkeypatch):
        monkeypatch.setattr(RESOURCES, 'has_module', lambda name: False)
        with pytest.warns(DependencyWarning, match="numba"):
            aligner = SemiglobalAligner(require_jit=True)
        assert aligner.align(b'ACGT', b'ACGT').score == 4

    def test_silent_by_default(self, monkeypatch):
        monkeypatch.setattr(RESOURCES, 'has_module', lambda name: False)
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            SemiglobalAligner()
