"""Numba JIT compiled implementation of distance computation routines.

This module is entirely dedicated to 3D points, which is the core representation
of objects targetted by this software package.
"""

import numba as nb
import numpy as np

__all__ = ["euclidean", "pdist"]


@nb.njit(cache=True)
def euclidean(x: nb.float64[:], y: nb.float64[:]) -> nb.float64:
    """Compute the Euclidean distance (L2) between two 3D points.

    Parameters
    ----------
    x : np.ndarray
        (3) Coorinates of the first point
    y : np.ndarray
        (3) Coorinates of the second point

    Returns
    -------
    float
        Euclidean distance
    """
    return np.sqrt((y[0] - x[0]) ** 2 + (y[1] - x[1]) ** 2 + (y[2] - x[2]) ** 2)


@nb.njit(cache=True)
def pdist(x: nb.float64[:, :]) -> nb.float64[:, :]:
    """Numba implementation of Euclidean `scipy.spatial.distance.pdist(x)`
    in 3D, returned in square form.

    Parameters
    ----------
    x : np.ndarray
        (N, 3) array of point coordinates in the set

    Returns
    -------
    np.ndarray
        (N, N) array of pair-wise Euclidean distances
    """
    # Check on the input
    assert x.shape[1] == 3, "Only supports 3D points for now."

    res = np.empty((len(x), len(x)), dtype=x.dtype)
    for i in range(len(x)):
        res[i, i] = 0.0
        for j in range(i + 1, len(x)):
            res[i, j] = res[j, i] = euclidean(x[i], x[j])

    return res
