"""globetrack Live Tracking — fetch a CelesTrak group and tick it every second.

Requires network access to celestrak.org.
"""

import logging
import time

from globetrack import CelesTrakClient, LiveUpdateScheduler, RenderBoundary, Roster, TrackerConfig

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

config = TrackerConfig.from_env()
boundary = RenderBoundary()


def show(events):
    counts = {}
    for e in events:
        counts[e.kind.value] = counts.get(e.kind.value, 0) + 1
    print(counts)


records = CelesTrakClient().fetch_group(config.celestrak_group)

live = LiveUpdateScheduler(
    Roster(decay_limit_minutes=config.decay_limit_minutes),
    interval_seconds=config.tick_interval_seconds,
    on_tick=lambda samples: show(boundary.apply_tick(samples)),
    on_refresh=lambda diff: show(boundary.apply_diff(diff)),
)

with live:
    live.refresh(records)
    time.sleep(5)
