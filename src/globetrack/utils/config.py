"""Runtime configuration for the tracker."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from globetrack.utils.constants import (
    CELESTRAK_DEFAULT_GROUP,
    DEFAULT_DECAY_LIMIT_MINUTES,
    DEFAULT_TICK_INTERVAL_SECONDS,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "GLOBETRACK_"


@dataclass(frozen=True)
class TrackerConfig:
    """Tunables shared by the parser, the roster and the scheduler.

    Attributes:
        decay_limit_minutes: Staleness guard attached to every parsed element set.
        tick_interval_seconds: Cadence of live position updates.
        celestrak_group: Catalog group fetched by default.
    """

    decay_limit_minutes: float = DEFAULT_DECAY_LIMIT_MINUTES
    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS
    celestrak_group: str = CELESTRAK_DEFAULT_GROUP

    def __post_init__(self) -> None:
        if self.decay_limit_minutes <= 0:
            raise ValueError(f"decay_limit_minutes must be positive, got {self.decay_limit_minutes}")
        if self.tick_interval_seconds <= 0:
            raise ValueError(f"tick_interval_seconds must be positive, got {self.tick_interval_seconds}")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> TrackerConfig:
        """Build a config from ``GLOBETRACK_*`` environment variables.

        Unset variables keep their defaults.

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        decay = env.get(f"{ENV_PREFIX}DECAY_LIMIT_MINUTES")
        if decay:
            kwargs["decay_limit_minutes"] = float(decay)
        interval = env.get(f"{ENV_PREFIX}TICK_INTERVAL_SECONDS")
        if interval:
            kwargs["tick_interval_seconds"] = float(interval)
        group = env.get(f"{ENV_PREFIX}CELESTRAK_GROUP")
        if group:
            kwargs["celestrak_group"] = group.strip().lower()

        config = cls(**kwargs)  # type: ignore[arg-type]
        logger.debug("Loaded tracker config %s", config)
        return config


DEFAULT_CONFIG = TrackerConfig()
