"""Module which groups CRT hits into time-coincident Tzero clusters."""

import numpy as np

from crtreco.math.cluster import time_cluster
from crtreco.utils.logger import logger

__all__ = ["CRTTzeroClusterer"]


class CRTTzeroClusterer:
    """Partitions CRT hits into Tzero clusters.

    The clustering is greedy and seed-anchored: hits are sorted by absolute
    time, the earliest unused hit seeds a cluster and every later unused hit
    within `time_limit` of the *seed* joins it. Absorbed hits never seed
    their own neighborhood within the same cluster.
    """

    def __init__(self, time_limit=0.1):
        """Initialize the Tzero clusterer.

        Parameters
        ----------
        time_limit : float, default 0.1
            Coincidence window in microseconds
        """
        if time_limit < 0.0:
            raise ValueError(
                f"The Tzero time limit must be non-negative, got {time_limit}."
            )

        self.time_limit = float(time_limit)

    def get_labels(self, hits):
        """Assigns a Tzero cluster label to each CRT hit.

        Parameters
        ----------
        hits : List[CRTHit]
            (N) List of CRT hits

        Returns
        -------
        np.ndarray
            (N) Tzero cluster label of each hit, ordered by seed time
        """
        times = np.array([hit.ts0_ns for hit in hits], dtype=np.float64)

        return time_cluster(times, self.time_limit, 1e-3)

    def get_index(self, hits):
        """Groups the indexes of CRT hits into Tzero clusters.

        Parameters
        ----------
        hits : List[CRTHit]
            (N) List of CRT hits

        Returns
        -------
        List[List[int]]
            (T) List of hit indexes in each Tzero cluster. Within a cluster,
            the indexes are ordered by hit time.
        """
        if not len(hits):
            return []

        # Order the hits by time, such that clusters list their seed first
        labels = self.get_labels(hits)
        times = np.array([hit.ts0_ns for hit in hits], dtype=np.float64)
        perm = np.argsort(times, kind="stable")

        index = [[] for _ in range(np.max(labels) + 1)]
        for i in perm:
            index[labels[i]].append(int(i))

        return index

    def create_tzeros(self, hits):
        """Groups CRT hits into Tzero clusters.

        Parameters
        ----------
        hits : List[CRTHit]
            (N) List of CRT hits

        Returns
        -------
        List[List[CRTHit]]
            (T) List of CRT hits in each Tzero cluster
        """
        index = self.get_index(hits)
        logger.debug(
            "Grouped %d CRT hits into %d Tzero cluster(s).", len(hits), len(index)
        )

        return [[hits[i] for i in tzero] for tzero in index]
