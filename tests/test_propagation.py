"""Tests for propagation edge cases."""
from __future__ import annotations

import dataclasses
from datetime import timedelta
from unittest.mock import MagicMock

import numpy as np
import pytest

from globetrack.core.errors import PropagationError
from globetrack.core.propagation import SGP4Propagator, julian_date, propagate
from globetrack.core.tle import ElementRecord, ParsedElements, parse_record


ISS_LINE1 = "1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9997"
ISS_LINE2 = "2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439592"


@pytest.fixture
def iss() -> ParsedElements:
    return parse_record(ElementRecord("ISS (ZARYA)", ISS_LINE1, ISS_LINE2))


def test_propagation_in_leo(iss: ParsedElements):
    state = SGP4Propagator().propagate(iss, iss.epoch + timedelta(hours=1))
    pos_mag = np.linalg.norm(state.position_km)
    vel_mag = np.linalg.norm(state.velocity_km_s)
    assert 6500 < pos_mag < 7000
    assert 7.0 < vel_mag < 8.0


def test_propagation_deterministic(iss: ParsedElements):
    t = iss.epoch + timedelta(minutes=42)
    a = SGP4Propagator().propagate(iss, t)
    b = SGP4Propagator().propagate(iss, t)
    assert np.array_equal(a.position_km, b.position_km)
    assert np.array_equal(a.velocity_km_s, b.velocity_km_s)


def test_propagation_stale_tle(iss: ParsedElements):
    """Far beyond epoch the propagator should succeed or raise PropagationError, not crash."""
    far_future = iss.epoch + timedelta(days=365 * 10)
    try:
        states = propagate(iss, [far_future])
        assert len(states) == 1
    except PropagationError as exc:
        assert exc.code is not None


def test_error_code_raises_propagation_error(iss: ParsedElements):
    satrec = MagicMock()
    satrec.sgp4.return_value = (6, (float("nan"),) * 3, (float("nan"),) * 3)
    broken = dataclasses.replace(iss, satrec=satrec)

    with pytest.raises(PropagationError, match="error code 6") as info:
        SGP4Propagator().propagate(broken, iss.epoch)
    assert info.value.code == 6


def test_propagate_multiple_times(iss: ParsedElements):
    times = [iss.epoch + timedelta(minutes=m) for m in (0, 30, 60)]
    states = propagate(iss, times)
    assert [s.epoch for s in states] == times


def test_julian_date_naive_is_utc(iss: ParsedElements):
    aware = iss.epoch
    naive = aware.replace(tzinfo=None)
    assert julian_date(aware) == julian_date(naive)
