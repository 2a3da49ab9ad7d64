"""Data structures used throughout the CRT reconstruction package.

- `crt`: CRT hits and the straight tracks built from them
- `base`: Parent classes shared by all data structures

**Example Usage:**
```python
from crtreco.data import CRTHit, CRTTrack

hit1 = CRTHit(tagger="volTaggerTopHigh_0", center=[0.0, 600.0, 0.0])
hit2 = CRTHit(tagger="volTaggerBot_0", center=[10.0, -400.0, 5.0])
track = CRTTrack.from_hits(hit1, hit2)
```
"""

from .crt import *
