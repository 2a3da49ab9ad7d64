"""Sets up fixtures general to the entire test suite of this package.

This file is read during the collection phase of pytest when running anything
inside this directory.
"""

import numpy as np
import pytest

from crtreco.data import CRTHit

# Half-thickness of a CRT strip, used as the width of the measured axis
THIN = 0.4

# Names of the taggers which play a special role in track building
BOTTOM = "volTaggerBot_0"
TOP_HIGH = "volTaggerTopHigh_0"
TOP_LOW = "volTaggerTopLow_0"


def build_hit(center, width=(5.0, THIN, 5.0), tagger=TOP_HIGH, ts0_ns=0.0, **kwargs):
    """Builds a CRT hit with sensible defaults.

    Parameters
    ----------
    center : List[float]
        (3) Position of the hit
    width : List[float], default (5, 0.4, 5)
        (3) Uncertainty on the position of the hit (horizontal tagger)
    tagger : str, default 'volTaggerTopHigh_0'
        Name of the tagger
    ts0_ns : float, default 0.
        Absolute time of the hit in ns
    **kwargs : dict, optional
        Other CRT hit attributes

    Returns
    -------
    CRTHit
        CRT hit
    """
    kwargs.setdefault("ts1_ns", ts0_ns)
    kwargs.setdefault("total_pe", 10.0)

    return CRTHit(
        center=np.array(center, dtype=np.float64),
        width=np.array(width, dtype=np.float64),
        tagger=tagger,
        ts0_ns=ts0_ns,
        **kwargs,
    )


@pytest.fixture(name="make_hit")
def fixture_make_hit():
    """Provides the CRT hit factory to the tests."""
    return build_hit


@pytest.fixture(name="vertical_event")
def fixture_vertical_event():
    """Three hits left by a vertical muon crossing the three horizontal
    taggers, with a 1D hit on the bottom tagger.

    The true track goes through x = -75. The bottom hit is centered at x = 0
    with a 150 cm uncertainty, such that the best scan factor is 0.5.
    """
    return [
        build_hit([0.0, 0.0, 0.0], (150.0, THIN, 1.0), BOTTOM, ts0_ns=100.0),
        build_hit([-75.0, 200.0, 0.0], (5.0, THIN, 5.0), TOP_HIGH, ts0_ns=101.0),
        build_hit([-75.0, 100.0, 0.0], (5.0, THIN, 5.0), TOP_LOW, ts0_ns=102.0),
    ]
