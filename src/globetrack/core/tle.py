"""TLE (Two-Line Element) parsing.

This module turns raw name + two-line records into validated element sets
using the sgp4 library, and splits catalog text into records.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from sgp4.api import Satrec, WGS72

from globetrack.core.errors import InvalidElementsError, MalformedRecordError, ParseError
from globetrack.utils.config import DEFAULT_CONFIG
from globetrack.utils.constants import MINUTES_PER_DAY, TLE_LINE_LENGTH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementRecord:
    """A raw catalog entry: a display name and two fixed-width element lines."""

    name: str
    line1: str
    line2: str


@dataclass(frozen=True)
class ParsedElements:
    """A validated Two-Line Element set.

    Attributes:
        name: Object name (line 0), also its tracking identity.
        norad_id: NORAD catalog number.
        epoch: Epoch as a UTC datetime.
        inclination_deg: Orbital inclination in degrees.
        raan_deg: Right ascension of ascending node in degrees.
        eccentricity: Orbital eccentricity (dimensionless).
        arg_perigee_deg: Argument of perigee in degrees.
        mean_anomaly_deg: Mean anomaly in degrees.
        mean_motion_rev_per_day: Mean motion in revolutions per day.
        bstar: BSTAR drag term.
        decay_limit_minutes: Minutes after epoch past which the set is
            considered stale and is not propagated. A heuristic guard, not
            a physical decay prediction.
        line1: Raw TLE line 1.
        line2: Raw TLE line 2.
        satrec: Underlying sgp4 Satrec object for propagation.
    """

    name: str
    norad_id: int
    epoch: datetime
    inclination_deg: float
    raan_deg: float
    eccentricity: float
    arg_perigee_deg: float
    mean_anomaly_deg: float
    mean_motion_rev_per_day: float
    bstar: float
    decay_limit_minutes: float
    line1: str = field(repr=False)
    line2: str = field(repr=False)
    satrec: Satrec = field(repr=False, compare=False)

    @property
    def period_minutes(self) -> float:
        return MINUTES_PER_DAY / self.mean_motion_rev_per_day

    def minutes_since_epoch(self, at: datetime) -> float:
        """Elapsed minutes from epoch to ``at`` (naive datetimes are UTC)."""
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        return (at - self.epoch).total_seconds() / 60.0

    def __str__(self) -> str:
        return f"{self.name}\n{self.line1}\n{self.line2}"


def checksum(line: str) -> int:
    """Modulo-10 TLE checksum over the first 68 columns.

    Digits count as their value, minus signs count as one, everything
    else is ignored.
    """
    total = 0
    for ch in line[: TLE_LINE_LENGTH - 1]:
        if ch.isdigit():
            total += int(ch)
        elif ch == "-":
            total += 1
    return total % 10


def _check_structure(name: str, line1: str, line2: str) -> None:
    if not name:
        raise MalformedRecordError(name, "empty name")
    if not line1.startswith("1 "):
        raise MalformedRecordError(name, f"line 1 has no '1 ' marker: {line1[:10]!r}")
    if not line2.startswith("2 "):
        raise MalformedRecordError(name, f"line 2 has no '2 ' marker: {line2[:10]!r}")
    if len(line1) < TLE_LINE_LENGTH:
        raise MalformedRecordError(name, f"line 1 too short ({len(line1)} < {TLE_LINE_LENGTH})")
    if len(line2) < TLE_LINE_LENGTH:
        raise MalformedRecordError(name, f"line 2 too short ({len(line2)} < {TLE_LINE_LENGTH})")


def _check_numbers(name: str, line1: str, line2: str) -> None:
    for number, line in ((1, line1), (2, line2)):
        expected = line[TLE_LINE_LENGTH - 1]
        if not expected.isdigit() or int(expected) != checksum(line):
            raise InvalidElementsError(
                name, f"line {number} checksum mismatch (got {expected!r}, computed {checksum(line)})"
            )
    if line1[2:7] != line2[2:7]:
        raise InvalidElementsError(
            name, f"catalog numbers differ between lines ({line1[2:7]!r} vs {line2[2:7]!r})"
        )


def _epoch(line1: str) -> datetime:
    year = int(line1[18:20])
    year = year + 2000 if year < 57 else year + 1900
    day_of_year = float(line1[20:32])
    return datetime(year, 1, 1, tzinfo=timezone.utc) + timedelta(days=day_of_year - 1)


def parse_record(
    record: ElementRecord,
    *,
    decay_limit_minutes: float | None = None,
) -> ParsedElements:
    """Parse and validate one element record.

    Args:
        record: The raw record.
        decay_limit_minutes: Staleness guard for this element set. Defaults
            to the configured tracker default.

    Returns:
        The parsed element set.

    Raises:
        MalformedRecordError: If the name or line structure is wrong.
        InvalidElementsError: If the checksum, catalog number or decoded
            orbital elements are rejected.
    """
    for field in ("name", "line1", "line2"):
        value = getattr(record, field)
        if not isinstance(value, str):
            label = record.name.strip() if isinstance(record.name, str) else ""
            raise MalformedRecordError(label, f"{field} is not text: {type(value).__name__}")

    name = record.name.strip()
    line1 = record.line1.rstrip()
    line2 = record.line2.rstrip()

    _check_structure(name, line1, line2)
    _check_numbers(name, line1, line2)

    try:
        sat = Satrec.twoline2rv(line1, line2, WGS72)
        epoch = _epoch(line1)
        norad_id = int(line1[2:7])
    except (ValueError, IndexError) as exc:
        raise InvalidElementsError(name, f"cannot decode elements: {exc}") from exc

    if sat.error != 0:
        raise InvalidElementsError(name, f"sgp4 initialisation failed with error code {sat.error}")

    inclination_deg = math.degrees(sat.inclo)
    mean_motion = sat.no_kozai * MINUTES_PER_DAY / (2 * math.pi)
    if not 0.0 <= sat.ecco < 1.0:
        raise InvalidElementsError(name, f"eccentricity out of range: {sat.ecco}")
    if not 0.0 <= inclination_deg <= 180.0:
        raise InvalidElementsError(name, f"inclination out of range: {inclination_deg}")
    if not mean_motion > 0.0:
        raise InvalidElementsError(name, f"mean motion must be positive: {mean_motion}")

    if decay_limit_minutes is None:
        decay_limit_minutes = DEFAULT_CONFIG.decay_limit_minutes

    logger.debug("Parsed TLE for %s (NORAD %d, epoch %s)", name, norad_id, epoch.isoformat())

    return ParsedElements(
        name=name,
        norad_id=norad_id,
        epoch=epoch,
        inclination_deg=inclination_deg,
        raan_deg=math.degrees(sat.nodeo),
        eccentricity=sat.ecco,
        arg_perigee_deg=math.degrees(sat.argpo),
        mean_anomaly_deg=math.degrees(sat.mo),
        mean_motion_rev_per_day=mean_motion,
        bstar=sat.bstar,
        decay_limit_minutes=decay_limit_minutes,
        line1=line1,
        line2=line2,
        satrec=sat,
    )


def parse_batch(
    records: Iterable[ElementRecord],
    *,
    decay_limit_minutes: float | None = None,
) -> tuple[list[ParsedElements], list[tuple[str, str]]]:
    """Parse a batch of records, skipping the ones that fail.

    Returns:
        Tuple of (parsed element sets in input order, skipped records as
        ``(name, reason)`` pairs).
    """
    parsed: list[ParsedElements] = []
    skipped: list[tuple[str, str]] = []

    for record in records:
        try:
            parsed.append(parse_record(record, decay_limit_minutes=decay_limit_minutes))
        except ParseError as exc:
            logger.warning("Skipping TLE record %s: %s", exc.name or "<unnamed>", exc.reason)
            skipped.append((exc.name, exc.reason))

    logger.debug("Parsed %d TLEs, skipped %d", len(parsed), len(skipped))
    return parsed, skipped


def split_catalog_text(text: str) -> list[ElementRecord]:
    """Split three-line catalog text (name, line 1, line 2) into records.

    Groups are read in strides of three lines. A group whose lines do not
    look like a name followed by two element lines is skipped; full
    validation is left to :func:`parse_record`.
    """
    lines = text.strip().splitlines()
    if len(lines) < 3:
        if text.strip():
            logger.warning("Catalog text has fewer than 3 lines, no records extracted")
        return []

    records: list[ElementRecord] = []
    for i in range(0, len(lines) - 2, 3):
        name, line1, line2 = (l.strip() for l in lines[i : i + 3])
        if name and line1.startswith("1 ") and line2.startswith("2 "):
            records.append(ElementRecord(name=name, line1=line1, line2=line2))
        else:
            logger.warning(
                "Skipping malformed catalog entry near line %d: name=%r line1=%r line2=%r",
                i, name[:50], line1[:10], line2[:10],
            )

    logger.debug("Split %d records from %d catalog lines", len(records), len(lines))
    return records
