from __future__ import annotations

"""Physical constants and default tunables for live tracking.

All values in SI units unless otherwise noted.
"""

# --- Earth parameters (WGS-84) ---
EARTH_RADIUS_KM: float = 6378.137
"""Equatorial radius of Earth in km."""

EARTH_MU_KM3_S2: float = 398600.4418
"""Earth gravitational parameter (GM) in km³/s²."""

# --- Unit conversion ---
KM_TO_M: float = 1000.0
"""Scale factor from propagator output (km) to rendering units (m)."""

MINUTES_PER_DAY: float = 1440.0
"""Minutes in one solar day."""

# --- TLE format ---
TLE_LINE_LENGTH: int = 69
"""Minimum length of a TLE element line, checksum column included."""

# --- Tracking defaults ---
DEFAULT_DECAY_LIMIT_MINUTES: float = 30.0 * MINUTES_PER_DAY
"""Minutes after epoch beyond which an element set is treated as decayed."""

DEFAULT_TICK_INTERVAL_SECONDS: float = 1.0
"""Cadence of live position updates in seconds."""

# --- Catalog source ---
CELESTRAK_GP_URL: str = "https://celestrak.org/NORAD/elements/gp.php"
"""CelesTrak general perturbations endpoint."""

CELESTRAK_DEFAULT_GROUP: str = "starlink"
"""Catalog group requested when none (or an unknown one) is given."""

CELESTRAK_TIMEOUT_SECONDS: float = 30.0
"""HTTP timeout for catalog requests."""

USER_AGENT: str = "globetrack/0.1"
"""User-Agent sent to catalog services."""
