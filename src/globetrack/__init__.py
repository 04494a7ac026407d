"""
globetrack — live satellite positions for 3D globes.

Parses TLE catalogs, propagates every object with SGP4, converts the
result to Earth-fixed meters, and keeps a diffable roster of tracked
objects that a renderer can follow tick by tick.
"""

from __future__ import annotations

__version__ = "0.1.0-dev"

from globetrack.core.tle import ElementRecord, ParsedElements, parse_record, parse_batch, split_catalog_text
from globetrack.core.errors import (
    ParseError,
    MalformedRecordError,
    InvalidElementsError,
    PropagationError,
    InvalidBatchError,
)
from globetrack.core.propagation import Propagator, SGP4Propagator, StateVector, propagate
from globetrack.core.frames import gmst, to_earth_fixed, ecef_to_geodetic
from globetrack.core.engine import PositionEngine, PositionSample, sample
from globetrack.core.roster import EntryStatus, Roster, RosterDiff, RosterEntry
from globetrack.core.scheduler import LiveUpdateScheduler, SimulationClock
from globetrack.render import EventKind, RenderBoundary, RenderEvent, display_color
from globetrack.data.celestrak import CelesTrakClient
from globetrack.utils.config import TrackerConfig

__all__ = [
    "__version__",
    "ElementRecord",
    "ParsedElements",
    "parse_record",
    "parse_batch",
    "split_catalog_text",
    "ParseError",
    "MalformedRecordError",
    "InvalidElementsError",
    "PropagationError",
    "InvalidBatchError",
    "Propagator",
    "SGP4Propagator",
    "StateVector",
    "propagate",
    "gmst",
    "to_earth_fixed",
    "ecef_to_geodetic",
    "PositionEngine",
    "PositionSample",
    "sample",
    "EntryStatus",
    "Roster",
    "RosterDiff",
    "RosterEntry",
    "LiveUpdateScheduler",
    "SimulationClock",
    "EventKind",
    "RenderBoundary",
    "RenderEvent",
    "display_color",
    "CelesTrakClient",
    "TrackerConfig",
]
