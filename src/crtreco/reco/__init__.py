"""CRT track reconstruction.

This includes multiple submodules:
- `tzero.py` groups CRT hits into time-coincident Tzero clusters
- `average.py` merges co-located CRT hits into averaged hits
- `cross.py` intersects candidate track lines with CRT taggers
- `track.py` pairs averaged hits into straight tracks
- `reco.py` chains all of the above for one readout
"""

from .average import *
from .cross import *
from .reco import *
from .track import *
from .tzero import *
