# -*- coding: utf-8 -*-

"""
neighborhoods/config.py

This module centralizes the tunable constants of the neighborhood partition
engine. Keeping the simplification caps, numeric tolerances and coordinate
limits in one place keeps the simplifier, the MECE assembler and the spatial
helpers consistent with each other (and with the tests that pin them).

Contents:
---------
1. SIMPLIFICATION:
   - Point cap and tolerance schedule for adaptive Ramer-Douglas-Peucker.
   - Tolerances are in degrees (lat/lng), no projection is applied.

2. MIN_RING_POINTS:
   - Minimum number of points for a closed ring (3 distinct + closing point).
     Rings below this are dropped everywhere.

3. Numeric epsilons:
   - CENTROID_AREA_EPSILON: below this absolute area the centroid falls back
     to the mean of the ring points.
   - RAY_CAST_EPSILON: guards the division in the ray-casting edge test.

4. HULL_KEY_DECIMALS:
   - Rounding used to deduplicate points before building a convex hull.

5. COORDINATE_LIMITS (EPSG:4326 degrees):
   - Accepted latitude / longitude ranges when parsing raw geometry.

Usage:
------
    from mapgeo.neighborhoods.config import SIMPLIFICATION

    cap = SIMPLIFICATION['max_points']
"""

# ───────────────────────────────────────────────────────────────────────────────
# 1) ADAPTIVE SIMPLIFICATION (degrees)
# ───────────────────────────────────────────────────────────────────────────────
SIMPLIFICATION = {
    'max_points': 900,          # Point cap per ring before it is simplified
    'base_tolerance': 0.0001,   # First RDP tolerance tried (deg, ~11 m)
    'max_tolerance': 0.01,      # Tolerance is never grown past this (deg, ~1.1 km)
    'tolerance_growth': 1.5,    # Multiplier applied between attempts
}

# ───────────────────────────────────────────────────────────────────────────────
# 2) RING VALIDITY
# ───────────────────────────────────────────────────────────────────────────────
MIN_RING_POINTS = 4

# ───────────────────────────────────────────────────────────────────────────────
# 3) NUMERIC TOLERANCES
# ───────────────────────────────────────────────────────────────────────────────
CENTROID_AREA_EPSILON = 1e-7
RAY_CAST_EPSILON = 1e-12

# ───────────────────────────────────────────────────────────────────────────────
# 4) CONVEX HULL
# ───────────────────────────────────────────────────────────────────────────────
HULL_KEY_DECIMALS = 6

# ───────────────────────────────────────────────────────────────────────────────
# 5) COORDINATE LIMITS (EPSG:4326)
# ───────────────────────────────────────────────────────────────────────────────
COORDINATE_LIMITS = {
    'lat': (-90.0, 90.0),
    'lng': (-180.0, 180.0),
}
