"""Module which merges spatially co-located CRT hits into averaged hits."""

import numpy as np

from crtreco.data import CRTHit
from crtreco.math.cluster import seed_cluster
from crtreco.utils.logger import logger

__all__ = ["CRTHitAverager"]


class CRTHitAverager:
    """Merges near-duplicate CRT hits into composite hits.

    The first remaining hit (in input order) is used as a seed, *not* a
    centroid. Every remaining hit closer than `average_hit_distance` to the
    seed is merged with it; the leftover hits are processed the same way
    until none remain.
    """

    def __init__(self, average_hit_distance=30.0):
        """Initialize the hit averager.

        Parameters
        ----------
        average_hit_distance : float, default 30.
            Neighborhood radius around each seed hit
        """
        if average_hit_distance < 0.0:
            raise ValueError(
                "The hit averaging distance must be non-negative, got "
                f"{average_hit_distance}."
            )

        self.average_hit_distance = float(average_hit_distance)

    def get_index(self, hits):
        """Groups the indexes of CRT hits to be averaged together.

        Parameters
        ----------
        hits : List[CRTHit]
            (N) List of CRT hits

        Returns
        -------
        List[List[int]]
            (A) List of hit indexes in each averaging group, in input order
        """
        if not len(hits):
            return []

        centers = np.vstack([hit.center for hit in hits]).astype(np.float64)
        labels = seed_cluster(centers, self.average_hit_distance)

        index = [[] for _ in range(np.max(labels) + 1)]
        for i, label in enumerate(labels):
            index[label].append(i)

        return index

    def average_hits(self, hits, hit_ids=None):
        """Averages CRT hits within a certain distance of each other.

        Parameters
        ----------
        hits : List[CRTHit]
            (N) List of CRT hits
        hit_ids : List[int], optional
            (N) Identifier of each CRT hit. If not specified, the position of
            each hit in the input list is used.

        Returns
        -------
        List[Tuple[CRTHit, List[int]]]
            (A) List of (averaged hit, contributing hit identifiers) pairs
        """
        if hit_ids is None:
            hit_ids = list(range(len(hits)))
        assert len(hit_ids) == len(hits), (
            "Must provide one identifier per CRT hit. "
            f"Got {len(hit_ids)}, but expected {len(hits)}."
        )

        averaged = []
        for group in self.get_index(hits):
            ave_hit = self.do_average([hits[i] for i in group])
            averaged.append((ave_hit, [int(hit_ids[i]) for i in group]))

        logger.debug("Averaged %d CRT hits into %d hit(s).", len(hits), len(averaged))

        return averaged

    @staticmethod
    def do_average(hits):
        """Builds a composite CRT hit from a group of CRT hits.

        The position and times are averaged. The position uncertainty is
        half the span of the envelope of all [position - width,
        position + width] intervals. Charge, tagger, plane and board
        information are taken from the first hit.

        Parameters
        ----------
        hits : List[CRTHit]
            (N) List of CRT hits, assumed to belong to the same tagger

        Returns
        -------
        CRTHit
            Averaged CRT hit
        """
        assert len(hits), "Cannot average an empty list of CRT hits."

        # Get the mean position and the envelope of the uncertainties
        centers = np.vstack([hit.center for hit in hits]).astype(np.float64)
        widths = np.vstack([hit.width for hit in hits]).astype(np.float64)
        upper = np.max(centers + widths, axis=0)
        lower = np.min(centers - widths, axis=0)

        # Get the mean times and uncertainties
        ts0_s = np.mean([hit.ts0_s for hit in hits])
        ts0_s_corr = np.mean([hit.ts0_s_corr for hit in hits])
        ts0_ns = np.mean([hit.ts0_ns for hit in hits])
        ts0_ns_corr = np.mean([hit.ts0_ns_corr for hit in hits])
        ts1_ns = np.mean([hit.ts1_ns for hit in hits])

        first = hits[0]

        return CRTHit(
            plane=first.plane,
            tagger=first.tagger,
            feb_id=np.copy(first.feb_id),
            pesmap={k: list(v) for k, v in first.pesmap.items()},
            ts0_s=int(ts0_s),
            ts0_s_corr=float(ts0_s_corr),
            ts0_ns=float(ts0_ns),
            ts0_ns_corr=float(ts0_ns_corr),
            ts1_ns=float(ts1_ns),
            total_pe=first.total_pe,
            center=np.mean(centers, axis=0),
            width=(upper - lower) / 2.0,
            units=first.units,
        )
