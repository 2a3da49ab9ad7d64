"""Module which assembles straight CRT tracks from averaged CRT hits."""

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from crtreco.data import CRTHit, CRTTrack
from crtreco.math.distance import pdist
from crtreco.utils.enums import TaggerRoleEnum, role_map
from crtreco.utils.logger import logger

from .cross import CrossPointCalculator

__all__ = ["CRTTrackBuilder", "TrackCandidate"]


@dataclass
class TrackCandidate:
    """Set of CRT hits which could make up a straight track.

    Attributes
    ----------
    anchors : Tuple[int, int]
        Indexes of the two anchor hits. If one of them belongs to the
        bottom tagger, it comes first.
    supports : List[int]
        Indexes of the other hits which lie close to the line between anchors
    depth_factor : float
        Scan factor f along the unconstrained axis of a 1D first anchor. The
        first anchor is moved by -(1 - f) times its position uncertainty,
        such that f = 1 leaves it in place.
    mean_dist : float
        Mean distance between the supporting hits and the line crossings
    """

    anchors: Tuple[int, int]
    supports: List[int] = field(default_factory=list)
    depth_factor: float = 1.0
    mean_dist: float = 0.0

    @property
    def index(self):
        """List of all the hit indexes in the candidate, anchors first.

        Returns
        -------
        List[int]
            (H) Hit indexes
        """
        return [*self.anchors, *self.supports]

    @property
    def size(self):
        """Number of hits in the candidate.

        Returns
        -------
        int
            Number of hits, anchors included
        """
        return 2 + len(self.supports)

    @property
    def depth_fraction(self):
        """Fractional position of the first anchor along its envelope.

        Returns
        -------
        float
            Position along the [center - width, center + width] envelope of
            the first anchor, in [0, 1]
        """
        return self.depth_factor / 2.0


class CRTTrackBuilder:
    """Builds straight tracks from pairs of CRT hits on different taggers.

    The algorithm proceeds in three steps:
    1. Every pair of hits on different taggers is a candidate seed. Seeds
       are scanned from the longest baseline to the shortest.
    2. For each seed, the hits on other taggers which lie close to the line
       between the two anchors are attached to it. If the first anchor is a
       1D hit, its position along the unconstrained axis is scanned to find
       the best line.
    3. Candidates are ranked by number of hits and accepted greedily, as
       long as they do not reuse a hit claimed by a previous track. Only
       tracks with more than two hits claim their hits.
    """

    def __init__(
        self,
        distance_limit=50.0,
        width_band=(0.39, 0.41),
        max_width=100.0,
        num_steps=21,
        step=0.1,
        tagger_roles=None,
    ):
        """Initialize the track builder.

        Parameters
        ----------
        distance_limit : float, default 50.
            Maximum distance between a supporting hit and the track crossing
        width_band : List[float], default [0.39, 0.41]
            Open interval of position uncertainties which identifies the
            precisely measured axis of a CRT hit
        max_width : float, default 100.
            Position uncertainty along x or z above which a hit is a 1D hit
        num_steps : int, default 21
            Number of steps in the scan along the unconstrained axis
        step : float, default 0.1
            Increment of the depth factor between two scan steps
        tagger_roles : Dict[str, str], optional
            Mapping from tagger name to role (bottom, top_high, top_low)
        """
        # Check validity of key parameters
        if distance_limit < 0.0:
            raise ValueError(
                f"The track distance limit must be non-negative, got {distance_limit}."
            )
        if max_width <= 0.0:
            raise ValueError(
                f"The 1D hit width threshold must be positive, got {max_width}."
            )
        if num_steps < 1 or step <= 0.0:
            raise ValueError(
                "The 1D hit scan must have at least one step and a positive "
                f"increment, got {num_steps} steps of {step}."
            )

        # Store the track building parameters
        self.distance_limit = float(distance_limit)
        self.max_width = float(max_width)
        self.factors = np.arange(num_steps) * float(step)

        # Initialize the crossing point calculator and the tagger roles
        self.cross = CrossPointCalculator(width_band)
        self.roles = role_map(tagger_roles)

    def create_tracks(self, hits):
        """Builds tracks from a list of averaged CRT hits.

        Parameters
        ----------
        hits : Union[List[CRTHit], List[Tuple[CRTHit, List[int]]]]
            (N) List of CRT hits, optionally paired with the identifiers of
            the original hits which contributed to them. If no identifiers
            are provided, each hit is identified by its position in the list.

        Returns
        -------
        List[Tuple[CRTTrack, List[int]]]
            (T) List of (track, contributing hit identifiers) pairs
        """
        # Unpack the hits and their identifiers
        hits, hit_ids = self.parse_hits(hits)
        if len(hits) < 2:
            return []

        # Build track candidates, select the best ones
        roles = self.get_roles(hits)
        candidates = self.get_candidates(hits)
        tracks = self.select_tracks(hits, hit_ids, roles, candidates)

        logger.debug(
            "Built %d CRT track(s) out of %d candidate(s) from %d hit(s).",
            len(tracks),
            len(candidates),
            len(hits),
        )

        return tracks

    @staticmethod
    def parse_hits(hits):
        """Separates CRT hits from their contributing hit identifiers.

        Parameters
        ----------
        hits : Union[List[CRTHit], List[Tuple[CRTHit, List[int]]]]
            (N) List of CRT hits, optionally paired with identifiers

        Returns
        -------
        List[CRTHit]
            (N) List of CRT hits
        List[List[int]]
            (N) List of identifiers of each CRT hit
        """
        crthits, hit_ids = [], []
        for i, hit in enumerate(hits):
            if isinstance(hit, CRTHit):
                crthits.append(hit)
                hit_ids.append([i])
            else:
                hit, ids = hit
                crthits.append(hit)
                hit_ids.append([int(idx) for idx in ids])

        return crthits, hit_ids

    def get_roles(self, hits):
        """Fetches the role of the tagger of each CRT hit.

        Parameters
        ----------
        hits : List[CRTHit]
            (N) List of CRT hits

        Returns
        -------
        np.ndarray
            (N) Enumerated tagger role of each hit
        """
        roles = [self.roles.get(hit.tagger, TaggerRoleEnum.OTHER) for hit in hits]

        return np.array(roles, dtype=np.int64)

    @staticmethod
    def get_pairs(hits):
        """Lists all pairs of CRT hits which belong to different taggers.

        Parameters
        ----------
        hits : List[CRTHit]
            (N) List of CRT hits

        Returns
        -------
        List[Tuple[int, int, float]]
            List of (i, j, distance) triplets with i < j, sorted by
            decreasing distance
        """
        if len(hits) < 2:
            return []

        centers = np.vstack([hit.center for hit in hits]).astype(np.float64)
        dists = pdist(centers)

        pairs = []
        for i in range(len(hits)):
            for j in range(i + 1, len(hits)):
                if hits[i].tagger != hits[j].tagger:
                    pairs.append((i, j, float(dists[i, j])))

        # Longest baselines first (stable, ties keep the pair order)
        return sorted(pairs, key=lambda p: p[2], reverse=True)

    def get_candidates(self, hits):
        """Builds one track candidate per pair of hits on different taggers.

        Parameters
        ----------
        hits : List[CRTHit]
            (N) List of CRT hits

        Returns
        -------
        List[TrackCandidate]
            List of track candidates, in order of decreasing anchor distance
        """
        pairs = self.get_pairs(hits)
        if not len(pairs):
            return []

        # Stack hit attributes once for the support scans
        centers = np.vstack([hit.center for hit in hits]).astype(np.float64)
        widths = np.vstack([hit.width for hit in hits]).astype(np.float64)
        _, taggers = np.unique([hit.tagger for hit in hits], return_inverse=True)
        taggers = taggers.reshape(-1).astype(np.int64)
        roles = self.get_roles(hits)

        # Hits without a measured axis can never support a line
        num_blind = sum(self.cross.get_axis(hit) < 0 for hit in hits)
        if num_blind:
            logger.debug(
                "%d CRT hit(s) have no measured axis and cannot support a track.",
                num_blind,
            )

        candidates = []
        for i, j, _ in pairs:
            # Make sure the bottom tagger hit always comes first
            if roles[j] == TaggerRoleEnum.BOTTOM:
                i, j = j, i

            if self.is_1d(widths[i]):
                candidates.append(self.scan_candidate(centers, widths, taggers, i, j))
            else:
                diff = centers[i] - centers[j]
                index, dists = self.cross.get_support(
                    centers,
                    widths,
                    taggers,
                    (i, j),
                    centers[i],
                    diff,
                    self.distance_limit,
                )
                mean_dist = float(np.mean(dists)) if len(dists) else 0.0
                candidates.append(
                    TrackCandidate((i, j), index.tolist(), mean_dist=mean_dist)
                )

        return candidates

    def is_1d(self, width):
        """Checks whether a CRT hit is unconstrained along x or z.

        Parameters
        ----------
        width : np.ndarray
            (3) Position uncertainty of the CRT hit

        Returns
        -------
        bool
            `True` if the hit is a 1D hit
        """
        return width[0] > self.max_width or width[2] > self.max_width

    def scan_candidate(self, centers, widths, taggers, i, j):
        """Builds a track candidate with a 1D first anchor.

        The first anchor is moved along its uncertainty envelope. The position
        which gathers the most supporting hits is kept; ties are broken by
        the lowest mean support distance, then by the earliest scan step.

        Parameters
        ----------
        centers : np.ndarray
            (N, 3) Positions of the CRT hits
        widths : np.ndarray
            (N, 3) Uncertainties on the positions of the CRT hits
        taggers : np.ndarray
            (N) Tagger index of each CRT hit
        i : int
            Index of the 1D anchor hit
        j : int
            Index of the other anchor hit

        Returns
        -------
        TrackCandidate
            Best track candidate along the 1D hit
        """
        best = TrackCandidate((i, j), [], 1.0, 0.0)
        for factor in self.factors:
            start = self.shift(centers[i], widths[i], factor)
            diff = start - centers[j]
            index, dists = self.cross.get_support(
                centers, widths, taggers, (i, j), start, diff, self.distance_limit
            )
            if not len(index):
                continue

            # Most supporting hits first, then closest supporting hits
            mean_dist = float(np.mean(dists))
            if len(index) > len(best.supports) or (
                len(index) == len(best.supports) and mean_dist < best.mean_dist
            ):
                best = TrackCandidate((i, j), index.tolist(), float(factor), mean_dist)

        return best

    @staticmethod
    def shift(center, width, factor):
        """Moves a position along its x and z uncertainty envelope.

        Parameters
        ----------
        center : np.ndarray
            (3) Position
        width : np.ndarray
            (3) Position uncertainty
        factor : float
            Depth factor, 1 leaves the position unchanged

        Returns
        -------
        np.ndarray
            (3) Shifted position
        """
        shifted = np.array(center, dtype=np.float64)
        shifted[0] -= (1.0 - factor) * width[0]
        shifted[2] -= (1.0 - factor) * width[2]

        return shifted

    def select_tracks(self, hits, hit_ids, roles, candidates):
        """Greedily selects the track candidates with the most hits.

        A candidate is rejected if it contains a hit claimed by an accepted
        candidate. Only candidates with more than two hits claim their hits:
        competing two-hit tracks cannot be told apart, so they are all kept.

        Parameters
        ----------
        hits : List[CRTHit]
            (N) List of CRT hits
        hit_ids : List[List[int]]
            (N) List of identifiers of each CRT hit
        roles : np.ndarray
            (N) Enumerated tagger role of each hit
        candidates : List[TrackCandidate]
            List of track candidates

        Returns
        -------
        List[Tuple[CRTTrack, List[int]]]
            (T) List of (track, contributing hit identifiers) pairs
        """
        # Rank candidates by number of hits (stable w.r.t. the pair order)
        candidates = sorted(candidates, key=lambda c: c.size, reverse=True)

        tracks = []
        used = np.zeros(len(hits), dtype=bool)
        for cand in candidates:
            # If any of the hits have already been used, skip
            index = cand.index
            if np.any(used[index]):
                continue

            # Move the first anchor to its best position along the 1D hit
            i, j = cand.anchors
            ihit, jhit = hits[i], hits[j]
            if cand.depth_factor != 1.0:
                ihit = ihit.copy()
                ihit.center = self.shift(ihit.center, ihit.width, cand.depth_factor)

            # Make sure the top high tagger hit comes first
            if roles[j] == TaggerRoleEnum.TOP_HIGH:
                i, j = j, i
                ihit, jhit = jhit, ihit

            # If only the two top taggers are hit, it is a stopping track
            complete = not (
                cand.size == 2
                and roles[i] == TaggerRoleEnum.TOP_HIGH
                and roles[j] == TaggerRoleEnum.TOP_LOW
            )
            track = CRTTrack.from_hits(ihit, jhit, complete)

            ids = [idx for k in index for idx in hit_ids[k]]
            tracks.append((track, ids))

            # Claim the hits only if the track has more than two hits
            if cand.size > 2:
                used[index] = True

        return tracks
