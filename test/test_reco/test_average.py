"""Tests for the averaging of co-located CRT hits."""

import numpy as np
import pytest

from crtreco.reco.average import CRTHitAverager


class TestCRTHitAverager:
    """Test the seed-based hit averaging."""

    def test_bad_distance(self):
        """Test that a negative averaging distance is rejected."""
        with pytest.raises(ValueError):
            CRTHitAverager(-1.0)

    def test_empty(self):
        """Test that no hits produce no averaged hit."""
        assert CRTHitAverager(30.0).average_hits([]) == []

    def test_single_hit(self, make_hit):
        """Test that averaging a single hit returns the same hit."""
        hit = make_hit(
            [10.0, 20.0, 30.0],
            (5.0, 0.4, 7.0),
            ts0_ns=1234.0,
            ts0_s=5,
            ts0_ns_corr=2.0,
            plane=3,
            feb_id=np.array([1, 2], dtype=np.ubyte),
            pesmap={1: [(0, 4.0)]},
        )
        ((ave_hit, ids),) = CRTHitAverager(30.0).average_hits([hit])

        assert ids == [0]
        np.testing.assert_allclose(ave_hit.center, hit.center)
        np.testing.assert_allclose(ave_hit.width, hit.width)
        assert ave_hit.ts0_ns == pytest.approx(hit.ts0_ns)
        assert ave_hit.ts1_ns == pytest.approx(hit.ts1_ns)
        assert ave_hit.ts0_ns_corr == pytest.approx(hit.ts0_ns_corr)
        assert ave_hit.ts0_s == hit.ts0_s
        assert ave_hit.t0 == pytest.approx(1.234)
        assert ave_hit.tagger == hit.tagger
        assert ave_hit.plane == hit.plane
        assert ave_hit.total_pe == hit.total_pe
        assert ave_hit.pesmap == hit.pesmap
        np.testing.assert_array_equal(ave_hit.feb_id, hit.feb_id)

    def test_three_close_hits(self, make_hit):
        """Test that three hits close to the first one are merged."""
        hits = [
            make_hit([0.0, 0.0, 0.0], (1.0, 0.4, 1.0), ts0_ns=100.0, total_pe=5.0),
            make_hit([6.0, 0.0, 0.0], (1.0, 0.4, 1.0), ts0_ns=200.0, total_pe=7.0),
            make_hit([0.0, 0.0, 3.0], (2.0, 0.4, 1.0), ts0_ns=300.0, total_pe=9.0),
        ]
        ((ave_hit, ids),) = CRTHitAverager(10.0).average_hits(hits, [11, 12, 13])

        assert ids == [11, 12, 13]
        np.testing.assert_allclose(ave_hit.center, [2.0, 0.0, 1.0])
        assert ave_hit.ts0_ns == pytest.approx(200.0)

        # Envelope: x in [-2, 7], y in [-0.4, 0.4], z in [-1, 4]
        np.testing.assert_allclose(ave_hit.width, [4.5, 0.4, 2.5])

        # Charge is taken from the first hit
        assert ave_hit.total_pe == 5.0

    def test_seed_not_centroid(self, make_hit):
        """Test that hits are compared to the first hit, not to the mean."""
        hits = [
            make_hit([0.0, 0.0, 0.0]),
            make_hit([9.0, 0.0, 0.0]),
            make_hit([18.0, 0.0, 0.0]),
            make_hit([50.0, 0.0, 0.0]),
            make_hit([1.0, 0.0, 0.0]),
        ]
        averaged = CRTHitAverager(10.0).average_hits(hits)

        assert [ids for _, ids in averaged] == [[0, 1, 4], [2], [3]]
        np.testing.assert_allclose(averaged[0][0].center, [10.0 / 3, 0.0, 0.0])

    def test_partition(self, make_hit):
        """Test that the contributor lists partition the input."""
        rng = np.random.default_rng(seed=1)
        points = rng.uniform(-100.0, 100.0, size=(100, 3))
        hits = [make_hit(p) for p in points]
        ids = list(range(1000, 1100))

        averaged = CRTHitAverager(25.0).average_hits(hits, ids)
        flat = [i for _, group in averaged for i in group]
        assert sorted(flat) == ids

    def test_inputs_untouched(self, make_hit):
        """Test that averaging does not modify the input hits."""
        hits = [make_hit([0.0, 0.0, 0.0]), make_hit([2.0, 0.0, 0.0])]
        copies = [hit.copy() for hit in hits]
        CRTHitAverager(10.0).average_hits(hits)

        assert all(hit == copy for hit, copy in zip(hits, copies))
