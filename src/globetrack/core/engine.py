"""Position engine: element set + instant -> renderable Earth-fixed sample.

Every failure mode (stale elements, propagator errors, degenerate vectors)
degrades to an invalid sample carrying the zero vector. Nothing here raises
for a per-object condition, so a caller can render-or-skip uniformly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

import numpy as np
from numpy.typing import NDArray

from globetrack.core.errors import PropagationError
from globetrack.core.frames import to_earth_fixed
from globetrack.core.propagation import Propagator, SGP4Propagator
from globetrack.core.tle import ParsedElements

logger = logging.getLogger(__name__)


def _zero() -> NDArray[np.float64]:
    return np.zeros(3, dtype=np.float64)


@dataclass(frozen=True, eq=False)
class PositionSample:
    """One object's renderable position at one instant.

    Attributes:
        id: Tracking identity (the object name).
        name: Display name.
        position: Earth-fixed [x, y, z] in meters; zero when invalid.
        valid: False if the object must not be drawn at this instant.
    """

    id: str
    name: str
    position: NDArray[np.float64] = field(default_factory=_zero)
    valid: bool = False

    @classmethod
    def invalid(cls, id: str, name: str) -> PositionSample:
        return cls(id=id, name=name, position=_zero(), valid=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PositionSample):
            return NotImplemented
        return (
            self.id == other.id
            and self.name == other.name
            and self.valid == other.valid
            and np.array_equal(self.position, other.position)
        )


def sample(
    elements: ParsedElements,
    at: datetime,
    id: str,
    name: str,
    propagator: Propagator | None = None,
) -> PositionSample:
    """Compute the Earth-fixed position of one object at one instant.

    Args:
        elements: The object's retained element set.
        at: Query instant (naive datetimes are taken as UTC).
        id: Tracking identity to stamp on the sample.
        name: Display name to stamp on the sample.
        propagator: Propagator to use; SGP4 by default.

    Returns:
        A valid sample with a position in meters, or an invalid sample with
        the zero vector if the element set is stale or propagation fails.
    """
    elapsed = elements.minutes_since_epoch(at)
    if elapsed > elements.decay_limit_minutes:
        logger.debug(
            "%s presumed decayed: %.1f min since epoch exceeds limit %.1f",
            name, elapsed, elements.decay_limit_minutes,
        )
        return PositionSample.invalid(id, name)

    propagator = propagator or SGP4Propagator()
    try:
        state = propagator.propagate(elements, at)
    except PropagationError as exc:
        logger.warning("Failed to calculate position for %s: %s", name, exc)
        return PositionSample.invalid(id, name)
    except Exception:
        logger.exception("Error calculating position for %s", name)
        return PositionSample.invalid(id, name)

    pos = None if state is None else getattr(state, "position_km", None)
    if pos is None or np.shape(pos) != (3,) or not np.all(np.isfinite(pos)) or not np.any(pos):
        logger.warning("Propagator returned a degenerate position for %s", name)
        return PositionSample.invalid(id, name)

    return PositionSample(id=id, name=name, position=to_earth_fixed(state, at), valid=True)


class PositionEngine:
    """Binds a propagator so callers can sample without passing it around."""

    def __init__(self, propagator: Propagator | None = None) -> None:
        self.propagator = propagator or SGP4Propagator()

    def sample(self, elements: ParsedElements, at: datetime, id: str, name: str) -> PositionSample:
        return sample(elements, at, id, name, propagator=self.propagator)
