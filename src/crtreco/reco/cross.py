"""Module which computes where a straight line crosses a CRT tagger."""

import numpy as np

from crtreco.math.crossing import cross_point, cross_support
from crtreco.math.distance import euclidean

__all__ = ["CrossPointCalculator"]


class CrossPointCalculator:
    """Intersects candidate track lines with the plane measured by CRT hits.

    The plane measured by a CRT hit is identified by its thin axis, i.e. the
    axis along which the position uncertainty falls within a narrow band
    around a known detector constant (the half-thickness of a CRT strip).

    If no axis matches the band, or if the line runs parallel to the
    measured plane, the crossing point is undefined and the hit is excluded
    from support scoring.
    """

    def __init__(self, width_band=(0.39, 0.41)):
        """Initialize the crossing point calculator.

        Parameters
        ----------
        width_band : List[float], default [0.39, 0.41]
            Open interval of position uncertainties which identifies the
            precisely measured axis of a CRT hit
        """
        # Check the validity of the band
        if len(width_band) != 2:
            raise ValueError(
                "The thin-axis width band must be given as [low, high], "
                f"got {width_band}."
            )
        band_low, band_high = float(width_band[0]), float(width_band[1])
        if band_low < 0.0 or band_low >= band_high:
            raise ValueError(
                "The thin-axis width band must satisfy 0 <= low < high, "
                f"got [{band_low}, {band_high}]."
            )

        self.band_low = band_low
        self.band_high = band_high

    def get_axis(self, hit):
        """Returns the axis precisely measured by a CRT hit.

        Parameters
        ----------
        hit : CRTHit
            CRT hit

        Returns
        -------
        int
            Measured axis (0, 1 or 2), -1 if no axis matches the band
        """
        mask = (hit.width > self.band_low) & (hit.width < self.band_high)
        if not np.any(mask):
            return -1

        return int(np.argmax(mask))

    def get_cross_point(self, hit, start, diff):
        """Returns the point where a line crosses the plane of a CRT hit.

        Parameters
        ----------
        hit : CRTHit
            CRT hit which defines the plane
        start : np.ndarray
            (3) Point on the line
        diff : np.ndarray
            (3) Direction vector of the line

        Returns
        -------
        np.ndarray
            (3) Crossing point, `None` if it is undefined
        """
        cross = cross_point(
            np.asarray(hit.center, dtype=np.float64),
            np.asarray(hit.width, dtype=np.float64),
            np.asarray(start, dtype=np.float64),
            np.asarray(diff, dtype=np.float64),
            self.band_low,
            self.band_high,
        )
        if not np.all(np.isfinite(cross)):
            return None

        return cross

    def get_distance(self, hit, start, diff):
        """Returns the distance between a CRT hit and the crossing point of
        a line with the plane of that hit.

        Parameters
        ----------
        hit : CRTHit
            CRT hit which defines the plane
        start : np.ndarray
            (3) Point on the line
        diff : np.ndarray
            (3) Direction vector of the line

        Returns
        -------
        float
            Distance to the crossing point, `np.inf` if it is undefined
        """
        cross = self.get_cross_point(hit, start, diff)
        if cross is None:
            return np.inf

        return float(euclidean(cross, np.asarray(hit.center, dtype=np.float64)))

    def get_support(self, centers, widths, taggers, anchors, start, diff, max_dist):
        """Finds the CRT hits which lie close to a candidate track line.

        Parameters
        ----------
        centers : np.ndarray
            (N, 3) Positions of the CRT hits
        widths : np.ndarray
            (N, 3) Uncertainties on the positions of the CRT hits
        taggers : np.ndarray
            (N) Tagger index of each CRT hit
        anchors : Tuple[int, int]
            Indexes of the two anchor hits of the track
        start : np.ndarray
            (3) Point on the line
        diff : np.ndarray
            (3) Direction vector of the line
        max_dist : float
            Maximum distance between a supporting hit and the line crossing

        Returns
        -------
        np.ndarray
            (S) Indexes of the supporting hits, in increasing order
        np.ndarray
            (S) Distances of the supporting hits to the line crossings
        """
        i, j = anchors

        return cross_support(
            centers,
            widths,
            taggers,
            i,
            j,
            np.asarray(start, dtype=np.float64),
            np.asarray(diff, dtype=np.float64),
            max_dist,
            self.band_low,
            self.band_high,
        )
