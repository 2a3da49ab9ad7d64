"""Numba JIT compiled implementation of greedy clustering routines.

Both routines are seed-anchored: a cluster is seeded by the first unused
element and only absorbs elements close to that seed. They are therefore
*not* equivalent to a transitive closure (e.g. DBSCAN with one sample).
"""

import numba as nb
import numpy as np

from .distance import euclidean

__all__ = ["time_cluster", "seed_cluster"]


@nb.njit(cache=True)
def time_cluster(
    times: nb.float64[:], limit: nb.float64, scale: nb.float64 = 1.0
) -> nb.int64[:]:
    """Groups times that are coincident with a seed time.

    The times are first sorted in ascending order. The earliest unused time
    seeds a new cluster, which absorbs every later unused time whose scaled
    absolute difference with the seed is strictly below the limit. This
    repeats until every time is assigned.

    Parameters
    ----------
    times : np.ndarray
        (N) Array of times
    limit : float
        Coincidence window, in units of `times * scale`
    scale : float, default 1.
        Conversion factor applied to time differences before comparison

    Returns
    -------
    np.ndarray
        (N) Cluster label of each time, ordered by seed time
    """
    # Sort the times (stable, so that ties keep their input order)
    perm = np.argsort(times, kind="mergesort")

    # Bookkeeping is sized to the actual input length
    labels = np.full(len(times), -1, dtype=np.int64)
    used = np.zeros(len(times), dtype=np.bool_)

    # Loop over seeds
    label = 0
    for a in range(len(perm)):
        i = perm[a]
        if used[i]:
            continue

        used[i] = True
        labels[i] = label
        for b in range(a + 1, len(perm)):
            j = perm[b]
            if not used[j] and abs(times[j] - times[i]) * scale < limit:
                used[j] = True
                labels[j] = label

        label += 1

    return labels


@nb.njit(cache=True)
def seed_cluster(x: nb.float64[:, :], radius: nb.float64) -> nb.int64[:]:
    """Groups points that lie in the neighborhood of a seed point.

    The first remaining point (in input order) seeds a group, which absorbs
    every remaining point closer than `radius` to the seed. The points left
    over form a new worklist, processed the same way until it is empty.

    The seed is always part of its own group, such that every point is
    assigned exactly once.

    Parameters
    ----------
    x : np.ndarray
        (N, 3) array of point coordinates
    radius : float
        Neighborhood radius around each seed

    Returns
    -------
    np.ndarray
        (N) Group label of each point, ordered by seed
    """
    # Check on the input
    assert x.shape[1] == 3, "Only supports 3D points for now."

    labels = np.full(len(x), -1, dtype=np.int64)
    remaining = np.arange(len(x))
    label = 0
    while len(remaining):
        seed = remaining[0]
        spare = np.empty(len(remaining), dtype=np.int64)
        num_spare = 0
        for i in remaining:
            if i == seed or euclidean(x[i], x[seed]) < radius:
                labels[i] = label
            else:
                spare[num_spare] = i
                num_spare += 1

        remaining = spare[:num_spare].copy()
        label += 1

    return labels
