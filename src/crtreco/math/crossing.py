"""Numba JIT compiled routines to intersect straight lines with CRT taggers.

A CRT tagger precisely measures the coordinate along its thin axis. That axis
is identified by the uncertainty on the hit position: the only axis whose
uncertainty falls within a narrow band around a known detector constant.
"""

import numba as nb
import numpy as np

from .distance import euclidean

__all__ = ["cross_point", "cross_support"]


@nb.njit(cache=True)
def cross_point(
    center: nb.float64[:],
    width: nb.float64[:],
    start: nb.float64[:],
    diff: nb.float64[:],
    band_low: nb.float64,
    band_high: nb.float64,
) -> nb.float64[:]:
    """Finds the point where a line crosses the plane measured by a CRT hit.

    The axes are checked in order (x, y, z); the first one whose width lies
    strictly within the band defines the plane. The two other coordinates
    are linearly interpolated along the line.

    Parameters
    ----------
    center : np.ndarray
        (3) Position of the CRT hit
    width : np.ndarray
        (3) Uncertainty on the position of the CRT hit
    start : np.ndarray
        (3) Point on the line
    diff : np.ndarray
        (3) Direction vector of the line
    band_low : float
        Lower bound of the thin-axis uncertainty band (exclusive)
    band_high : float
        Upper bound of the thin-axis uncertainty band (exclusive)

    Returns
    -------
    np.ndarray
        (3) Crossing point. If no axis matches the band or if the line is
        parallel to the plane, the point is undefined and set to -inf.
    """
    cross = np.empty(3, dtype=start.dtype)
    cross[:] = -np.inf
    for axis in range(3):
        if width[axis] > band_low and width[axis] < band_high:
            # Line parallel to plane
            if diff[axis] == 0.0:
                return cross

            frac = (center[axis] - start[axis]) / diff[axis]
            for a in range(3):
                cross[a] = start[a] + frac * diff[a]
            cross[axis] = center[axis]

            return cross

    return cross


@nb.njit(cache=True)
def cross_support(
    centers: nb.float64[:, :],
    widths: nb.float64[:, :],
    taggers: nb.int64[:],
    i: nb.int64,
    j: nb.int64,
    start: nb.float64[:],
    diff: nb.float64[:],
    max_dist: nb.float64,
    band_low: nb.float64,
    band_high: nb.float64,
) -> (nb.int64[:], nb.float64[:]):
    """Finds the CRT hits which lie close to the line between two anchors.

    Only hits which do not belong to the tagger of either anchor are
    considered. A hit supports the line if the distance between its position
    and the crossing point of the line with its tagger is below `max_dist`.
    Hits with an undefined crossing point never support the line.

    Parameters
    ----------
    centers : np.ndarray
        (N, 3) Positions of the CRT hits
    widths : np.ndarray
        (N, 3) Uncertainties on the positions of the CRT hits
    taggers : np.ndarray
        (N) Tagger index of each CRT hit
    i : int
        Index of the first anchor hit
    j : int
        Index of the second anchor hit
    start : np.ndarray
        (3) Point on the line
    diff : np.ndarray
        (3) Direction vector of the line
    max_dist : float
        Maximum distance between a supporting hit and the line crossing
    band_low : float
        Lower bound of the thin-axis uncertainty band (exclusive)
    band_high : float
        Upper bound of the thin-axis uncertainty band (exclusive)

    Returns
    -------
    np.ndarray
        (S) Indexes of the supporting hits, in increasing order
    np.ndarray
        (S) Distances of the supporting hits to the line crossings
    """
    index = np.empty(len(centers), dtype=np.int64)
    dists = np.empty(len(centers), dtype=centers.dtype)
    count = 0
    for k in range(len(centers)):
        if k == i or k == j or taggers[k] == taggers[i] or taggers[k] == taggers[j]:
            continue

        cross = cross_point(centers[k], widths[k], start, diff, band_low, band_high)
        dist = euclidean(cross, centers[k])
        if dist < max_dist:
            index[count] = k
            dists[count] = dist
            count += 1

    return index[:count], dists[:count]
