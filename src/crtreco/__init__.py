"""Top-level module of the CRT track reconstruction source code."""

from .version import __version__

# Import commonly used data structures and the main reconstruction entry point
from .data import CRTHit, CRTTrack
from .reco import CRTTrackReco
