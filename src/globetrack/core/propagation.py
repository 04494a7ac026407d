"""Orbital propagation via SGP4."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

import numpy as np

logger = logging.getLogger(__name__)
from numpy.typing import NDArray
from sgp4.api import SGP4_ERRORS, jday
from globetrack.core.errors import PropagationError
from globetrack.core.tle import ParsedElements


@dataclass
class StateVector:
    """Position and velocity in TEME frame.

    Attributes:
        position_km: [x, y, z] position in km.
        velocity_km_s: [vx, vy, vz] velocity in km/s.
        epoch: Time of this state vector.
    """

    position_km: NDArray[np.float64]  # shape (3,)
    velocity_km_s: NDArray[np.float64]  # shape (3,)
    epoch: datetime


class Propagator(Protocol):
    """Anything that can turn an element set and an instant into a TEME state.

    Implementations must be deterministic for a given ``(elements, at)``
    pair and must raise :class:`PropagationError` rather than return a
    degenerate vector when they fail.
    """

    def propagate(self, elements: ParsedElements, at: datetime) -> StateVector: ...


def julian_date(t: datetime) -> tuple[float, float]:
    """Split Julian date (whole, fraction) for a datetime, naive taken as UTC."""
    if t.tzinfo is not None:
        t = t.astimezone(timezone.utc)
    return jday(t.year, t.month, t.day, t.hour, t.minute, t.second + t.microsecond / 1e6)


class SGP4Propagator:
    """Propagator backed by the sgp4 library's Satrec."""

    def propagate(self, elements: ParsedElements, at: datetime) -> StateVector:
        """Propagate one element set to one instant.

        Raises:
            PropagationError: If SGP4 reports an error code.
        """
        jd, fr = julian_date(at)
        error_code, pos, vel = elements.satrec.sgp4(jd, fr)

        if error_code != 0:
            reason = SGP4_ERRORS.get(error_code, "unknown error")
            raise PropagationError(
                f"SGP4 propagation failed for {elements.name} at {at}: "
                f"error code {error_code} ({reason})",
                code=error_code,
            )

        return StateVector(
            position_km=np.array(pos, dtype=np.float64),
            velocity_km_s=np.array(vel, dtype=np.float64),
            epoch=at,
        )


def propagate(
    elements: ParsedElements,
    times: list[datetime],
    propagator: Propagator | None = None,
) -> list[StateVector]:
    """Propagate a single element set to multiple times.

    Args:
        elements: A parsed element set.
        times: List of UTC datetimes to propagate to.
        propagator: Propagator to use; SGP4 by default.

    Returns:
        List of StateVector objects, one per requested time.

    Raises:
        PropagationError: If any propagation fails.
    """
    propagator = propagator or SGP4Propagator()
    result = []

    for t in times:
        try:
            result.append(propagator.propagate(elements, t))
        except PropagationError as exc:
            logger.warning("%s", exc)
            raise

    logger.debug("Propagated %s to %d times", elements.name, len(times))
    return result
