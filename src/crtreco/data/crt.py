"""Module with data class objects which represent CRT information.

This copies the internal structure of :class:`sbn::crt::CRTHit` and
:class:`sbn::crt::CRTTrack`.
"""

from dataclasses import dataclass

import numpy as np

from .base import PosDataBase

__all__ = ["CRTHit", "CRTTrack"]


@dataclass(eq=False)
class CRTHit(PosDataBase):
    """CRT hit information.

    Attributes
    ----------
    id : int
        Index of the CRT hit in the list
    plane : int
        Index of the CRT tagger that registered the hit
    tagger : str
        Name of the CRT tagger that registered the hit
    feb_id : np.ndarray
        Address of the FEB board stored as a list of bytes (uint8)
    pesmap : Dict[int, List[Tuple[int, float]]]
        Number of PEs per FEB channel, organized by FEB address
    ts0_s : int
        Absolute time from White Rabbit (seconds component)
    ts0_s_corr : float
        Uncertainty on the seconds component of the absolute time
    ts0_ns : float
        Absolute time from White Rabbit (nanoseconds component)
    ts0_ns_corr : float
        Uncertainty on the nanoseconds component of the absolute time
    ts1_ns : float
        Time relative to the trigger (nanoseconds component)
    total_pe : float
        Total number of PE in the CRT hit
    center : np.ndarray
        Barycenter of the CRT hit in detector coordinates
    width : np.ndarray
        Uncertainty on the barycenter of the CRT hit in detector coordinates
    units : str
        Units in which the position attributes are expressed
    """

    id: int = -1
    plane: int = -1
    tagger: str = ""
    feb_id: np.ndarray = None
    pesmap: dict = None
    ts0_s: int = -1
    ts0_s_corr: float = -1.0
    ts0_ns: float = -1.0
    ts0_ns_corr: float = -1.0
    ts1_ns: float = -1.0
    total_pe: float = -1.0
    center: np.ndarray = None
    width: np.ndarray = None
    units: str = "cm"

    # Fixed-length attributes
    _fixed_length_attrs = (("center", 3), ("width", 3))

    # Variable-length attributes
    _var_length_attrs = (("feb_id", np.ubyte),)

    # Dictionary attributes
    _dict_attrs = ("pesmap",)

    # String attributes
    _str_attrs = ("tagger", "units")

    def __post_init__(self):
        """Immediately called after building the class attributes.

        Casts array-like positional attributes provided as sequences.
        """
        for attr in ("center", "width"):
            value = getattr(self, attr)
            if value is not None and not isinstance(value, np.ndarray):
                setattr(self, attr, np.asarray(value, dtype=np.float64))

        super().__post_init__()

    @property
    def t0(self):
        """Absolute time of the hit within the second, in microseconds.

        Returns
        -------
        float
            Absolute time in microseconds
        """
        return self.ts0_ns * 1e-3

    @property
    def time(self):
        """Time of the hit relative to the trigger, in microseconds.

        Returns
        -------
        float
            Time relative to the trigger in microseconds
        """
        return self.ts1_ns * 1e-3


@dataclass(eq=False)
class CRTTrack(PosDataBase):
    """CRT track information.

    A CRT track is a straight line between two anchor CRT hits. Each anchor
    hit is stored as an independent snapshot.

    Attributes
    ----------
    id : int
        Index of the CRT track in the list
    ts0_s : float
        Mean absolute time of the two anchors (seconds component)
    ts0_s_err : float
        Half of the absolute time difference between the anchors (seconds)
    ts0_ns : float
        Mean absolute time of the two anchors (nanoseconds component)
    ts0_ns_err : float
        Uncertainty on the mean absolute time (nanoseconds component)
    ts0_ns_h1 : float
        Absolute time of the first anchor (nanoseconds component)
    ts0_ns_err_h1 : float
        Uncertainty on the absolute time of the first anchor
    ts0_ns_h2 : float
        Absolute time of the second anchor (nanoseconds component)
    ts0_ns_err_h2 : float
        Uncertainty on the absolute time of the second anchor
    ts1_ns : float
        Mean time of the two anchors relative to the trigger
    ts1_ns_err : float
        Uncertainty on the mean time relative to the trigger
    total_pe : float
        Total number of PE in the two anchor hits
    start_point : np.ndarray
        (3) Position of the first anchor hit
    start_width : np.ndarray
        (3) Position uncertainty of the first anchor hit
    end_point : np.ndarray
        (3) Position of the second anchor hit
    end_width : np.ndarray
        (3) Position uncertainty of the second anchor hit
    plane1 : int
        Index of the CRT plane of the first anchor hit
    plane2 : int
        Index of the CRT plane of the second anchor hit
    tagger1 : str
        Name of the CRT tagger of the first anchor hit
    tagger2 : str
        Name of the CRT tagger of the second anchor hit
    length : float
        Distance between the two anchor hits
    thetaxy : float
        Angle of the track in the xy plane, w.r.t. the y axis
    phizy : float
        Angle of the track in the zy plane, w.r.t. the y axis
    complete : bool
        Whether the track crosses the detector (`False` for stopping tracks)
    hit_ids : np.ndarray
        (H) Identifiers of the original CRT hits which make up the track
    units : str
        Units in which the position attributes are expressed
    """

    id: int = -1
    ts0_s: float = -1.0
    ts0_s_err: float = -1.0
    ts0_ns: float = -1.0
    ts0_ns_err: float = -1.0
    ts0_ns_h1: float = -1.0
    ts0_ns_err_h1: float = -1.0
    ts0_ns_h2: float = -1.0
    ts0_ns_err_h2: float = -1.0
    ts1_ns: float = -1.0
    ts1_ns_err: float = -1.0
    total_pe: float = -1.0
    start_point: np.ndarray = None
    start_width: np.ndarray = None
    end_point: np.ndarray = None
    end_width: np.ndarray = None
    plane1: int = -1
    plane2: int = -1
    tagger1: str = ""
    tagger2: str = ""
    length: float = -1.0
    thetaxy: float = -np.inf
    phizy: float = -np.inf
    complete: bool = False
    hit_ids: np.ndarray = None
    units: str = "cm"

    # Fixed-length attributes
    _fixed_length_attrs = (
        ("start_point", 3),
        ("start_width", 3),
        ("end_point", 3),
        ("end_width", 3),
    )

    # Variable-length attributes
    _var_length_attrs = (("hit_ids", np.int64),)

    # String attributes
    _str_attrs = ("tagger1", "tagger2", "units")

    # Boolean attributes
    _bool_attrs = ("complete",)

    @classmethod
    def from_hits(cls, hit1, hit2, complete=True):
        """Builds and returns a CRTTrack object from two anchor CRT hits.

        The anchor attributes are copied, such that later modifications of
        the input hits do not propagate to the track.

        Parameters
        ----------
        hit1 : CRTHit
            First anchor hit
        hit2 : CRTHit
            Second anchor hit
        complete : bool, default True
            Whether the track crosses the detector

        Returns
        -------
        CRTTrack
            CRT track object
        """
        # Combine the timing information of the two anchors
        ts0_ns_err = np.sqrt(hit1.ts0_ns_corr**2 + hit2.ts0_ns_corr**2) / 2.0

        # Compute the track geometry
        delta = hit1.center - hit2.center
        length = float(np.linalg.norm(delta))
        thetaxy = float(np.arctan2(delta[0], delta[1]))
        phizy = float(np.arctan2(delta[2], delta[1]))

        return cls(
            ts0_s=(hit1.ts0_s + hit2.ts0_s) / 2.0,
            ts0_s_err=abs(hit1.ts0_s - hit2.ts0_s) / 2.0,
            ts0_ns=(hit1.ts0_ns + hit2.ts0_ns) / 2.0,
            ts0_ns_err=ts0_ns_err,
            ts0_ns_h1=hit1.ts0_ns,
            ts0_ns_err_h1=hit1.ts0_ns_corr,
            ts0_ns_h2=hit2.ts0_ns,
            ts0_ns_err_h2=hit2.ts0_ns_corr,
            ts1_ns=(hit1.ts1_ns + hit2.ts1_ns) / 2.0,
            ts1_ns_err=ts0_ns_err,
            total_pe=hit1.total_pe + hit2.total_pe,
            start_point=np.copy(hit1.center),
            start_width=np.copy(hit1.width),
            end_point=np.copy(hit2.center),
            end_width=np.copy(hit2.width),
            plane1=hit1.plane,
            plane2=hit2.plane,
            tagger1=hit1.tagger,
            tagger2=hit2.tagger,
            length=length,
            thetaxy=thetaxy,
            phizy=phizy,
            complete=complete,
        )

    @property
    def time(self):
        """Mean time of the track relative to the trigger, in microseconds.

        Returns
        -------
        float
            Time relative to the trigger in microseconds
        """
        return self.ts1_ns * 1e-3

    @property
    def direction(self):
        """Unit vector pointing from the second anchor to the first.

        Returns
        -------
        np.ndarray
            (3) Direction of the track, zero vector if both anchors coincide
        """
        delta = self.start_point - self.end_point
        if self.length <= 0.0:
            return np.zeros(3, dtype=delta.dtype)

        return delta / self.length
