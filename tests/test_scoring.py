import argparse
from dataclasses import FrozenInstanceError

import pytest

from readalign.align.scoring import Scoring, NEGATIVE_INF


class TestScoring:
    def test_defaults(self):
        sc = Scoring()
        assert (sc.gap_init, sc.gap_unit, sc.match, sc.mismatch) == (-5, -1, 1, -1)
        assert sc.soft_clip == NEGATIVE_INF
        assert not sc.clipping

    def test_keyword_only(self):
        with pytest.raises(TypeError):
            Scoring(-5, -1)

    def test_frozen(self):
        sc = Scoring()
        with pytest.raises(FrozenInstanceError):
            sc.match = 3

    def test_gap(self):
        sc = Scoring(gap_init=-5, gap_unit=-1)
        assert sc.gap(1) == -6
        assert sc.gap(4) == -9

    def test_substitution(self):
        sc = Scoring(match=2, mismatch=-3)
        assert sc.substitution(65, 65) == 2
        assert sc.substitution(65, 67) == -3

    def test_clipping(self):
        assert Scoring(soft_clip=-5).clipping
        assert not Scoring(soft_clip=NEGATIVE_INF).clipping

    def test_sentinel_headroom(self):
        # Sums of a few sentinels and gap costs must stay inside int64
        assert NEGATIVE_INF < -10 ** 9
        assert 4 * NEGATIVE_INF > -(2 ** 63)

    def test_from_namespace(self):
        args = argparse.Namespace(match=2, mismatch=None, gap_init=-3, reference='ACGT')
        sc = Scoring.from_obj(args)
        assert sc == Scoring(match=2, gap_init=-3)
        assert sc.mismatch == -1
