"""Catalog reconciliation: keep a live roster of tracked objects.

The roster maps object identity (the object name) to its retained element
set and last computed sample. ``refresh`` replaces the roster from an
authoritative batch and reports what was created, updated and removed;
``tick`` recomputes every sample from the retained elements without
re-parsing anything.

Identity is name based. Two genuinely different objects that share a
display name collapse into one entry; within one batch the later record
wins.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from globetrack.core.engine import PositionEngine, PositionSample
from globetrack.core.errors import InvalidBatchError
from globetrack.core.tle import ElementRecord, ParsedElements, parse_batch

logger = logging.getLogger(__name__)

ObjectId = str


class EntryStatus(Enum):
    """How a tracked object should currently be presented."""

    NEVER_POSITIONED = "never_positioned"
    LIVE = "live"
    FROZEN = "frozen"


@dataclass
class RosterEntry:
    """Live state for one tracked object.

    Attributes:
        id: Tracking identity.
        elements: Most recent element set for this id, replaced wholesale.
        last_sample: Sample from the most recent refresh or tick.
        ever_valid: Whether any sample for this entry has been valid.
    """

    id: ObjectId
    elements: ParsedElements
    last_sample: PositionSample
    ever_valid: bool = False

    @property
    def status(self) -> EntryStatus:
        if self.last_sample.valid:
            return EntryStatus.LIVE
        return EntryStatus.FROZEN if self.ever_valid else EntryStatus.NEVER_POSITIONED

    def _record(self, new_sample: PositionSample) -> None:
        self.last_sample = new_sample
        self.ever_valid = self.ever_valid or new_sample.valid


@dataclass
class RosterDiff:
    """Outcome of one refresh.

    Attributes:
        created: Ids seen for the first time, in batch order.
        updated: Ids that were already live, in batch order.
        removed: Previously live ids absent from the batch.
        samples: Current sample for every live id.
        skipped: Records dropped by the parser, as ``(name, reason)``.
        at: Instant the samples were computed for.
    """

    created: list[ObjectId] = field(default_factory=list)
    updated: list[ObjectId] = field(default_factory=list)
    removed: list[ObjectId] = field(default_factory=list)
    samples: dict[ObjectId, PositionSample] = field(default_factory=dict)
    skipped: list[tuple[str, str]] = field(default_factory=list)
    at: datetime | None = None

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def changed(self) -> bool:
        return bool(self.created or self.removed)


class Roster:
    """Owner of all tracked-object state.

    ``refresh`` and ``tick`` are serialised on an internal re-entrant lock,
    so the roster may be driven from a scheduler thread and refreshed from
    another.

    Args:
        engine: Position engine used for every sample. SGP4 by default.
        decay_limit_minutes: Staleness guard applied when parsing records.
            Defaults to the configured tracker default.
    """

    def __init__(
        self,
        engine: PositionEngine | None = None,
        decay_limit_minutes: float | None = None,
    ) -> None:
        self.engine = engine or PositionEngine()
        self.decay_limit_minutes = decay_limit_minutes
        self._entries: dict[ObjectId, RosterEntry] = {}
        self._lock = threading.RLock()
        self._refreshed = False

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def has_refreshed(self) -> bool:
        """True once a refresh has completed."""
        return self._refreshed

    def refresh(self, records: Iterable[ElementRecord], at: datetime) -> RosterDiff:
        """Replace the roster from an authoritative batch.

        Malformed records are skipped and reported in ``RosterDiff.skipped``.
        When a name appears more than once, the last occurrence wins.

        Args:
            records: The full current catalog batch.
            at: Instant to compute the initial samples for.

        Returns:
            The diff against the previous roster.

        Raises:
            InvalidBatchError: If ``records`` is not a batch of ElementRecord.
                The roster is left untouched.
        """
        batch = self._validate_batch(records)
        parsed, skipped = parse_batch(batch, decay_limit_minutes=self.decay_limit_minutes)

        latest: dict[ObjectId, ParsedElements] = {}
        for elements in parsed:
            if elements.name in latest:
                logger.warning("Duplicate object name %r in batch, keeping the later record", elements.name)
            latest[elements.name] = elements

        diff = RosterDiff(skipped=skipped, at=at)

        with self._lock:
            previous = self._entries
            entries: dict[ObjectId, RosterEntry] = {}

            for obj_id, elements in latest.items():
                new_sample = self.engine.sample(elements, at, obj_id, elements.name)
                old = previous.get(obj_id)
                if old is None:
                    entry = RosterEntry(id=obj_id, elements=elements, last_sample=new_sample)
                    diff.created.append(obj_id)
                else:
                    entry = old
                    entry.elements = elements
                    diff.updated.append(obj_id)
                entry._record(new_sample)
                entries[obj_id] = entry
                diff.samples[obj_id] = new_sample

            diff.removed = [obj_id for obj_id in previous if obj_id not in entries]
            self._entries = entries
            self._refreshed = True

        logger.info(
            "Roster refresh: %d created, %d updated, %d removed, %d skipped",
            len(diff.created), len(diff.updated), len(diff.removed), diff.skipped_count,
        )
        return diff

    def tick(self, at: datetime) -> list[PositionSample]:
        """Recompute every live entry's sample at ``at``.

        Samples are computed from the retained element sets only. All
        samples are computed before any entry is updated.

        Returns:
            The updated sample for every live entry, in roster order.
        """
        with self._lock:
            entries = list(self._entries.values())
            samples = [self.engine.sample(e.elements, at, e.id, e.elements.name) for e in entries]
            for entry, new_sample in zip(entries, samples):
                entry._record(new_sample)

        logger.debug(
            "Roster tick at %s: %d samples, %d valid",
            at.isoformat(), len(samples), sum(s.valid for s in samples),
        )
        return samples

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, obj_id: object) -> bool:
        return obj_id in self._entries

    def ids(self) -> list[ObjectId]:
        with self._lock:
            return list(self._entries)

    def entry(self, obj_id: ObjectId) -> RosterEntry:
        """Return the live entry for ``obj_id``.

        Raises:
            KeyError: If the id is not tracked.
        """
        with self._lock:
            return self._entries[obj_id]

    def samples(self) -> list[PositionSample]:
        with self._lock:
            return [e.last_sample for e in self._entries.values()]

    def drawable(self) -> list[PositionSample]:
        """Last samples that may be handed to the renderer (valid only)."""
        return [s for s in self.samples() if s.valid]

    def status(self, obj_id: ObjectId) -> EntryStatus | None:
        """Presentation status of an id, or None if it is not tracked."""
        with self._lock:
            entry = self._entries.get(obj_id)
            return entry.status if entry is not None else None

    @staticmethod
    def _validate_batch(records: Iterable[ElementRecord] | None) -> list[ElementRecord]:
        if records is None:
            raise InvalidBatchError("refresh requires a batch of element records, got None")
        if isinstance(records, (str, bytes)):
            raise InvalidBatchError("refresh requires a batch of element records, got raw text")
        try:
            batch = list(records)
        except TypeError as exc:
            raise InvalidBatchError(f"refresh requires an iterable batch: {exc}") from exc
        for item in batch:
            if not isinstance(item, ElementRecord):
                raise InvalidBatchError(f"batch contains a non-record item: {type(item).__name__}")
        return batch
