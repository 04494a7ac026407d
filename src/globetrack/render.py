"""Render boundary: turn roster changes into drawable entity events.

The renderer owns the scene. This module only decides which entities it
should create, move or remove, and hands out a stable colour per name.
"""
from __future__ import annotations

import colorsys
import logging
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from globetrack.core.engine import PositionSample
from globetrack.core.roster import ObjectId, RosterDiff

logger = logging.getLogger(__name__)


class EventKind(Enum):
    CREATE = "create"
    UPDATE = "update"
    REMOVE = "remove"


@dataclass(frozen=True, eq=False)
class RenderEvent:
    """One instruction for the renderer.

    Attributes:
        kind: Create, update or remove.
        id: Entity identity.
        position: Earth-fixed position in meters; None for removals.
    """

    kind: EventKind
    id: ObjectId
    position: NDArray[np.float64] | None = None


class RenderBoundary:
    """Tracks which entities the renderer has drawn and emits events.

    An object whose first sample is invalid is not created until a tick
    positions it. Invalid samples for drawn entities produce no event, so
    the renderer keeps them frozen at their last good position.
    """

    def __init__(self) -> None:
        self.drawn: set[ObjectId] = set()

    def apply_diff(self, diff: RosterDiff) -> list[RenderEvent]:
        events = [RenderEvent(EventKind.REMOVE, obj_id) for obj_id in diff.removed if obj_id in self.drawn]
        self.drawn.difference_update(diff.removed)
        for obj_id in diff.created + diff.updated:
            events.extend(self._place(diff.samples[obj_id]))
        return events

    def apply_tick(self, samples: list[PositionSample]) -> list[RenderEvent]:
        events: list[RenderEvent] = []
        for s in samples:
            events.extend(self._place(s))
        return events

    def _place(self, s: PositionSample) -> list[RenderEvent]:
        if not s.valid:
            return []
        if s.id in self.drawn:
            return [RenderEvent(EventKind.UPDATE, s.id, s.position)]
        self.drawn.add(s.id)
        logger.debug("Creating entity for %s", s.id)
        return [RenderEvent(EventKind.CREATE, s.id, s.position)]


def display_color(name: str) -> tuple[float, float, float]:
    """Stable RGB colour (components in [0, 1]) derived from a name."""
    h = 0
    for ch in name:
        h = (ord(ch) + ((h << 5) - h)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    hue = abs(int(math.fmod(h, 360)))
    return colorsys.hls_to_rgb(hue / 360.0, 0.6, 1.0)
