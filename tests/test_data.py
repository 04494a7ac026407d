"""Tests for the CelesTrak catalog client and tracker configuration."""

import logging
from unittest.mock import patch, MagicMock

import pytest
import requests

from globetrack.core.tle import ElementRecord
from globetrack.data.celestrak import SUPPORTED_GROUPS, CelesTrakClient, resolve_group
from globetrack.utils.config import TrackerConfig
from globetrack.utils.constants import DEFAULT_DECAY_LIMIT_MINUTES

CATALOG_TEXT = (
    "ISS (ZARYA)\n"
    "1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9997\n"
    "2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439592\n"
    "HST\n"
    "1 20580U 90037B   24045.55478014  .00001456  00000-0  73052-4 0  9990\n"
    "2 20580  28.4701  41.0696 0002622 348.3544 140.2428 15.09435694872912\n"
)


def _make_response(status_code: int = 200, text: str = "") -> MagicMock:
    """Helper to create a mock response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.raise_for_status = MagicMock()
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(response=resp)
    return resp


# ---------------------------------------------------------------------------
# Group resolution
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "group,expected",
    [
        ("starlink", "starlink"),
        ("GPS", "gps-ops"),
        (" stations ", "stations"),
        ("galileo", "galileo"),
        ("nonsense", "starlink"),
        (None, "starlink"),
        ("", "starlink"),
    ],
)
def test_resolve_group(group, expected):
    assert resolve_group(group) == expected


def test_supported_groups_cover_gps_alias():
    assert SUPPORTED_GROUPS["gps"] == "gps-ops"


# ---------------------------------------------------------------------------
# CelesTrak client mocked HTTP tests
# ---------------------------------------------------------------------------


def test_fetch_group_success():
    """Test fetch_group returns element records in catalog order."""
    client = CelesTrakClient()
    with patch.object(client._session, "get", return_value=_make_response(200, CATALOG_TEXT)) as get:
        records = client.fetch_group("stations")

    assert [r.name for r in records] == ["ISS (ZARYA)", "HST"]
    assert all(isinstance(r, ElementRecord) for r in records)

    _, kwargs = get.call_args
    assert kwargs["params"] == {"GROUP": "stations", "FORMAT": "tle"}
    assert "User-Agent" in kwargs["headers"]
    assert kwargs["timeout"] == client.timeout


def test_fetch_group_unknown_falls_back():
    client = CelesTrakClient()
    with patch.object(client._session, "get", return_value=_make_response(200, CATALOG_TEXT)) as get:
        client.fetch_group("not-a-group")
    _, kwargs = get.call_args
    assert kwargs["params"]["GROUP"] == "starlink"


def test_fetch_group_warns_once_for_unknown_group(caplog):
    client = CelesTrakClient()
    with caplog.at_level(logging.INFO, logger="globetrack.data.celestrak"):
        with patch.object(client._session, "get", return_value=_make_response(200, CATALOG_TEXT)):
            client.fetch_group("not-a-group")
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "not-a-group" in warnings[0].getMessage()
    assert "group starlink" in caplog.records[-1].getMessage()


def test_fetch_group_alias_does_not_warn(caplog):
    client = CelesTrakClient()
    with caplog.at_level(logging.INFO, logger="globetrack.data.celestrak"):
        with patch.object(client._session, "get", return_value=_make_response(200, CATALOG_TEXT)) as get:
            client.fetch_group("gps")
    assert get.call_args.kwargs["params"]["GROUP"] == "gps-ops"
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert "group gps-ops" in caplog.records[-1].getMessage()


def test_fetch_group_empty():
    """Test fetch_group returns empty list on empty response."""
    client = CelesTrakClient()
    with patch.object(client._session, "get", return_value=_make_response(200, "")):
        assert client.fetch_group("noaa") == []


def test_fetch_group_http_error():
    """A failed request raises; there are no retries."""
    client = CelesTrakClient()
    with patch.object(client._session, "get", return_value=_make_response(503, "down")) as get:
        with pytest.raises(requests.HTTPError):
            client.fetch_group("starlink")
    assert get.call_count == 1


# ---------------------------------------------------------------------------
# TrackerConfig
# ---------------------------------------------------------------------------


def test_config_defaults():
    config = TrackerConfig()
    assert config.decay_limit_minutes == DEFAULT_DECAY_LIMIT_MINUTES
    assert config.tick_interval_seconds == 1.0
    assert config.celestrak_group == "starlink"


def test_config_from_env():
    config = TrackerConfig.from_env(
        {
            "GLOBETRACK_DECAY_LIMIT_MINUTES": "600",
            "GLOBETRACK_TICK_INTERVAL_SECONDS": "0.5",
            "GLOBETRACK_CELESTRAK_GROUP": " GPS ",
        }
    )
    assert config.decay_limit_minutes == 600.0
    assert config.tick_interval_seconds == 0.5
    assert config.celestrak_group == "gps"


def test_config_from_empty_env():
    assert TrackerConfig.from_env({}) == TrackerConfig()


def test_config_rejects_bad_values():
    with pytest.raises(ValueError):
        TrackerConfig.from_env({"GLOBETRACK_TICK_INTERVAL_SECONDS": "fast"})
    with pytest.raises(ValueError):
        TrackerConfig(decay_limit_minutes=0)
