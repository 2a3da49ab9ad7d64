"""Module with fast, Numba-accelerated, compiled math routines.

This includes multiple submodules:
- `distance.py` includes distance functions, as found in scipy.distance
- `cluster.py` includes the greedy, seed-anchored clustering routines
- `crossing.py` includes line/tagger plane crossing routines
"""

# Expose submodules
from . import cluster, crossing, distance
