"""CelesTrak catalog client.

Fetches three-line TLE text for a named satellite group from CelesTrak's
public GP endpoint and splits it into element records. No authentication
and no retries: a failed request raises and the caller decides.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests

logger = logging.getLogger(__name__)

from globetrack.core.tle import ElementRecord, split_catalog_text
from globetrack.utils.constants import (
    CELESTRAK_DEFAULT_GROUP,
    CELESTRAK_GP_URL,
    CELESTRAK_TIMEOUT_SECONDS,
    USER_AGENT,
)

SUPPORTED_GROUPS: dict[str, str] = {
    "starlink": "starlink",
    "stations": "stations",
    "iridium": "iridium",
    "noaa": "noaa",
    "gps": "gps-ops",
    "galileo": "galileo",
}


def resolve_group(group: str | None) -> str:
    """Map a user-facing group name to CelesTrak's, falling back to the default."""
    key = (group or "").strip().lower()
    if key not in SUPPORTED_GROUPS:
        if key:
            logger.warning("Unknown catalog group %r, using %r", group, CELESTRAK_DEFAULT_GROUP)
        key = CELESTRAK_DEFAULT_GROUP
    return SUPPORTED_GROUPS[key]


@dataclass
class CelesTrakClient:
    """Client for CelesTrak's GP element sets.

    Attributes:
        base_url: GP endpoint URL.
        timeout: Request timeout in seconds.
    """

    base_url: str = CELESTRAK_GP_URL
    timeout: float = CELESTRAK_TIMEOUT_SECONDS
    _session: requests.Session = field(default_factory=requests.Session, repr=False)

    def fetch_text(self, group: str | None = None) -> str:
        """Fetch raw TLE text for a group.

        Raises:
            requests.HTTPError: If CelesTrak answers with an error status.
        """
        return self._get_group_text(resolve_group(group))

    def fetch_group(self, group: str | None = None) -> list[ElementRecord]:
        """Fetch a group and split it into element records.

        Args:
            group: One of :data:`SUPPORTED_GROUPS`; unknown or missing
                groups fall back to the default group.

        Returns:
            Records in catalog order. Empty if CelesTrak returned nothing.

        Raises:
            requests.HTTPError: If the request fails.
        """
        celestrak_group = resolve_group(group)
        text = self._get_group_text(celestrak_group)
        if not text.strip():
            return []

        records = split_catalog_text(text)
        logger.info("Fetched %d TLE records for group %s", len(records), celestrak_group)
        return records

    def _get_group_text(self, celestrak_group: str) -> str:
        logger.debug("Fetching TLE data for group %s", celestrak_group)
        response = self._session.get(
            self.base_url,
            params={"GROUP": celestrak_group, "FORMAT": "tle"},
            headers={"User-Agent": USER_AGENT},
            timeout=self.timeout,
        )
        if response.status_code != 200:
            logger.error(
                "Failed to fetch TLE data for group %s: %d", celestrak_group, response.status_code
            )
        response.raise_for_status()
        return response.text
