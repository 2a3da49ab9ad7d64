"""Tests for the assembly of straight CRT tracks."""

import numpy as np
import pytest

from crtreco.reco.track import CRTTrackBuilder, TrackCandidate
from crtreco.utils.enums import TaggerRoleEnum

THIN = 0.4
BOTTOM = "volTaggerBot_0"
TOP_HIGH = "volTaggerTopHigh_0"
TOP_LOW = "volTaggerTopLow_0"


class TestTrackCandidate:
    """Test the track candidate container."""

    def test_properties(self):
        """Test the derived candidate properties."""
        cand = TrackCandidate((3, 1), [4, 7], depth_factor=0.6)
        assert cand.index == [3, 1, 4, 7]
        assert cand.size == 4
        assert cand.depth_fraction == pytest.approx(0.3)

    def test_default(self):
        """Test that a candidate without scan leaves its anchor in place."""
        cand = TrackCandidate((0, 1))
        assert cand.size == 2
        assert cand.depth_factor == 1.0
        assert cand.depth_fraction == 0.5


class TestCRTTrackBuilderConfig:
    """Test the construction of the track builder."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"distance_limit": -1.0},
            {"max_width": 0.0},
            {"num_steps": 0},
            {"step": 0.0},
            {"width_band": (0.5, 0.3)},
            {"tagger_roles": {"a": "bottom", "b": "bottom"}},
            {"tagger_roles": {"a": "sideways"}},
        ],
    )
    def test_bad_parameters(self, kwargs):
        """Test that malformed parameters are rejected at construction."""
        with pytest.raises(ValueError):
            CRTTrackBuilder(**kwargs)

    def test_scan_grid(self):
        """Test the default scan grid along 1D hits."""
        builder = CRTTrackBuilder()
        assert len(builder.factors) == 21
        assert builder.factors[0] == 0.0
        assert builder.factors[-1] == pytest.approx(2.0)

    def test_custom_roles(self, make_hit):
        """Test that tagger roles are looked up from the configuration."""
        builder = CRTTrackBuilder(tagger_roles={"floor": "bottom", "roof": 2})
        hits = [make_hit([0.0, 0.0, 0.0], tagger=t) for t in ("roof", "floor", "x")]
        roles = builder.get_roles(hits)
        np.testing.assert_array_equal(
            roles,
            [TaggerRoleEnum.TOP_HIGH, TaggerRoleEnum.BOTTOM, TaggerRoleEnum.OTHER],
        )


class TestCRTTrackBuilder:
    """Test the track building algorithm."""

    def test_empty(self, make_hit):
        """Test that fewer than two taggers produce no track."""
        builder = CRTTrackBuilder(15.0)
        assert builder.create_tracks([]) == []
        assert builder.create_tracks([make_hit([0.0, 0.0, 0.0])]) == []

        same = [make_hit([0.0, 0.0, 0.0]), make_hit([0.0, 50.0, 0.0])]
        assert builder.create_tracks(same) == []

    def test_pairs(self, make_hit):
        """Test that pairs are unique, cross-tagger and longest first."""
        hits = [
            make_hit([0.0, 0.0, 0.0], tagger="a"),
            make_hit([0.0, 10.0, 0.0], tagger="b"),
            make_hit([0.0, 30.0, 0.0], tagger="a"),
            make_hit([0.0, 60.0, 0.0], tagger="c"),
        ]
        pairs = CRTTrackBuilder.get_pairs(hits)

        assert [(i, j) for i, j, _ in pairs] == [(0, 3), (1, 3), (2, 3), (1, 2), (0, 1)]
        assert [d for _, _, d in pairs] == pytest.approx([60.0, 50.0, 30.0, 20.0, 10.0])

    def test_two_hits(self, make_hit):
        """Test that two hits 10 apart make a single complete track."""
        hits = [
            make_hit([0.0, 0.0, 0.0], tagger="volTaggerSideRight_0"),
            make_hit([6.0, 8.0, 0.0], tagger="volTaggerSideLeft_0"),
        ]
        tracks = CRTTrackBuilder(15.0).create_tracks(hits)

        assert len(tracks) == 1
        track, ids = tracks[0]
        assert track.complete is True
        assert track.length == pytest.approx(10.0)
        assert sorted(ids) == [0, 1]

    def test_bottom_first(self, make_hit):
        """Test that the bottom tagger hit is always the first anchor."""
        hits = [
            make_hit([0.0, 200.0, 0.0], tagger="volTaggerSideRight_0"),
            make_hit([0.0, 0.0, 0.0], tagger=BOTTOM),
        ]
        (cand,) = CRTTrackBuilder(15.0).get_candidates(hits)
        assert cand.anchors == (1, 0)

    def test_hit_ids(self, make_hit):
        """Test that the identifiers of all the contributing hits are kept."""
        hits = [
            (make_hit([0.0, 200.0, 0.0], tagger="volTaggerSideRight_0"), [4, 5]),
            (make_hit([0.0, 0.0, 0.0], tagger=BOTTOM), [7]),
        ]
        ((_, ids),) = CRTTrackBuilder(15.0).create_tracks(hits)
        assert ids == [7, 4, 5]

    def test_stopping_track(self, make_hit):
        """Test that a two-hit track on the two top taggers is incomplete."""
        hits = [
            make_hit([0.0, 100.0, 0.0], tagger=TOP_LOW),
            make_hit([0.0, 200.0, 0.0], tagger=TOP_HIGH),
        ]
        ((track, _),) = CRTTrackBuilder(15.0).create_tracks(hits)

        assert track.complete is False
        assert track.tagger1 == TOP_HIGH
        assert track.tagger2 == TOP_LOW
        np.testing.assert_array_equal(track.start_point, [0.0, 200.0, 0.0])

    def test_top_and_bottom_complete(self, make_hit):
        """Test that a two-hit track through the bottom tagger is complete."""
        hits = [
            make_hit([0.0, 0.0, 0.0], tagger=BOTTOM),
            make_hit([0.0, 200.0, 0.0], tagger=TOP_HIGH),
        ]
        ((track, _),) = CRTTrackBuilder(15.0).create_tracks(hits)

        assert track.complete is True
        assert track.tagger1 == TOP_HIGH

    def test_1d_hit_scan(self, vertical_event):
        """Test the scan along the unconstrained axis of a 1D bottom hit."""
        builder = CRTTrackBuilder(10.0)
        cand = builder.get_candidates(vertical_event)[0]

        assert cand.anchors == (0, 1)
        assert cand.supports == [2]
        assert cand.depth_factor == pytest.approx(0.5)
        assert 0.0 <= cand.depth_factor <= 1.0
        assert cand.depth_fraction == pytest.approx(0.25)

    def test_1d_hit_track(self, vertical_event):
        """Test that the 1D bottom anchor is moved to its best position."""
        tracks = CRTTrackBuilder(10.0).create_tracks(vertical_event)

        assert len(tracks) == 1
        track, ids = tracks[0]
        assert sorted(ids) == [0, 1, 2]
        assert track.complete is True
        assert track.tagger1 == TOP_HIGH
        assert track.tagger2 == BOTTOM
        np.testing.assert_allclose(track.start_point, [-75.0, 200.0, 0.0])
        np.testing.assert_allclose(track.end_point, [-75.0, 0.0, -0.5])
        assert track.length == pytest.approx(np.sqrt(200.0**2 + 0.25))

        # The input hit is left untouched
        np.testing.assert_array_equal(vertical_event[0].center, [0.0, 0.0, 0.0])

    def test_1d_hit_more_support_wins(self, make_hit, vertical_event):
        """Test that the number of supporting hits prevails over distance."""
        hits = [*vertical_event, make_hit([-60.0, 50.0, 0.0], tagger="volTaggerMid")]
        cand = CRTTrackBuilder(10.0).get_candidates(hits)[0]

        assert cand.anchors == (0, 1)
        assert cand.supports == [2, 3]
        assert cand.depth_factor == pytest.approx(0.6)

    def test_1d_hit_no_support(self, make_hit):
        """Test that an unsupported 1D hit is left in place."""
        hits = [
            make_hit([0.0, 0.0, 0.0], (150.0, THIN, 1.0), BOTTOM),
            make_hit([-75.0, 200.0, 0.0], tagger=TOP_HIGH),
        ]
        builder = CRTTrackBuilder(10.0)
        (cand,) = builder.get_candidates(hits)
        assert cand.depth_factor == 1.0
        assert cand.supports == []

        ((track, _),) = builder.create_tracks(hits)
        np.testing.assert_array_equal(track.end_point, [0.0, 0.0, 0.0])

    def test_two_hit_tracks_share_hits(self, make_hit):
        """Test that two-hit tracks do not claim their hits."""
        hits = [
            make_hit([0.0, 0.0, 0.0], tagger="a"),
            make_hit([100.0, 100.0, 0.0], tagger="b"),
            make_hit([200.0, 50.0, 0.0], tagger="c"),
        ]
        tracks = CRTTrackBuilder(15.0).create_tracks(hits)

        assert len(tracks) == 3
        assert all(len(ids) == 2 for _, ids in tracks)
        assert all(track.complete for track, _ in tracks)
        assert sorted(tuple(sorted(ids)) for _, ids in tracks) == [
            (0, 1),
            (0, 2),
            (1, 2),
        ]

    def test_disjoint_tracks(self, make_hit):
        """Test that tracks with more than two hits claim their hits."""
        hits = []
        for x in (0.0, 300.0):
            hits.append(make_hit([x, 0.0, 0.0], tagger=BOTTOM))
            hits.append(make_hit([x, 100.0, 0.0], tagger=TOP_LOW))
            hits.append(make_hit([x, 200.0, 0.0], tagger=TOP_HIGH))

        tracks = CRTTrackBuilder(15.0).create_tracks(hits)

        assert len(tracks) == 2
        id_sets = [set(ids) for _, ids in tracks]
        assert sorted(sorted(s) for s in id_sets) == [[0, 1, 2], [3, 4, 5]]
        assert all(track.complete for track, _ in tracks)
        for track, _ in tracks:
            assert track.tagger1 == TOP_HIGH
            assert track.start_point[0] == track.end_point[0]

    def test_random_disjoint(self, make_hit):
        """Test that tracks with more than two hits never share hits."""
        rng = np.random.default_rng(seed=2)
        taggers = [BOTTOM, TOP_LOW, TOP_HIGH, "volTaggerMid"]
        hits = []
        for _ in range(24):
            k = rng.integers(len(taggers))
            center = [rng.uniform(-50.0, 50.0), 100.0 * k, rng.uniform(-50.0, 50.0)]
            hits.append(make_hit(center, tagger=taggers[k]))

        tracks = CRTTrackBuilder(20.0).create_tracks(hits)
        long_ids = [set(ids) for _, ids in tracks if len(ids) > 2]
        for a in range(len(long_ids)):
            for b in range(a + 1, len(long_ids)):
                assert not long_ids[a] & long_ids[b]

    def test_determinism(self, make_hit):
        """Test that the same input always yields the same output."""
        rng = np.random.default_rng(seed=3)
        taggers = [BOTTOM, TOP_LOW, TOP_HIGH]
        hits = []
        for k in rng.integers(3, size=12):
            center = [rng.uniform(-50.0, 50.0), 100.0 * k, rng.uniform(-50.0, 50.0)]
            hits.append(make_hit(center, tagger=taggers[k]))

        builder = CRTTrackBuilder(20.0)
        first = builder.create_tracks(hits)
        second = builder.create_tracks(hits)

        assert len(first) == len(second)
        for (track_a, ids_a), (track_b, ids_b) in zip(first, second):
            assert track_a == track_b
            assert ids_a == ids_b
