"""Reference frame conversion from TEME (inertial) to Earth-fixed coordinates.

The rotation uses Greenwich mean sidereal time only; polar motion and the
equation of the equinoxes are ignored, which is well below what a globe
can show.
"""
from __future__ import annotations

import math
from datetime import datetime

import numpy as np
from numpy.typing import NDArray
from sgp4.propagation import gstime

from globetrack.core.propagation import StateVector, julian_date
from globetrack.utils.constants import EARTH_RADIUS_KM, KM_TO_M


def gmst(at: datetime) -> float:
    """Greenwich mean sidereal angle at ``at``, in radians within [0, 2π)."""
    jd, fr = julian_date(at)
    return gstime(jd + fr)


def teme_to_ecef(position: NDArray[np.float64], angle: float) -> NDArray[np.float64]:
    """Rotate an inertial position about the z axis by the sidereal angle.

    Units are preserved.
    """
    c, s = math.cos(angle), math.sin(angle)
    x, y, z = position
    return np.array([c * x + s * y, -s * x + c * y, z], dtype=np.float64)


def to_earth_fixed(state: StateVector, at: datetime) -> NDArray[np.float64]:
    """Earth-fixed position in meters for a TEME state in km."""
    return teme_to_ecef(state.position_km, gmst(at)) * KM_TO_M


def ecef_to_geodetic(position_m: NDArray[np.float64]) -> tuple[float, float, float]:
    """Spherical-Earth latitude, longitude (degrees) and altitude (km).

    Args:
        position_m: Earth-fixed position in meters.

    Returns:
        Tuple of (latitude_deg, longitude_deg, altitude_km).
    """
    x, y, z = (float(v) / KM_TO_M for v in position_m)
    r = math.sqrt(x * x + y * y + z * z)
    lat = math.degrees(math.atan2(z, math.hypot(x, y)))
    lon = math.degrees(math.atan2(y, x))
    return lat, lon, r - EARTH_RADIUS_KM
