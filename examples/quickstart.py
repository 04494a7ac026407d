"""globetrack Quickstart — parse a catalog and watch positions update."""

from datetime import timedelta

from globetrack import Roster, ecef_to_geodetic, parse_record, split_catalog_text

# ISS (ZARYA) and HST in CelesTrak's three-line format
catalog_text = """
ISS (ZARYA)
1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9997
2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439592
HST
1 20580U 90037B   24045.55478014  .00001456  00000-0  73052-4 0  9990
2 20580  28.4701  41.0696 0002622 348.3544 140.2428 15.09435694872912
""".strip()

records = split_catalog_text(catalog_text)
iss = parse_record(records[0])

print(f"Satellite: {iss.name}")
print(f"NORAD ID:  {iss.norad_id}")
print(f"Epoch:     {iss.epoch}")
print(f"Incl:      {iss.inclination_deg:.4f}°")
print(f"Period:    {iss.period_minutes:.1f} min")

roster = Roster()
start = iss.epoch + timedelta(minutes=10)
diff = roster.refresh(records, start)
print(f"\nTracking {len(roster)} objects (created: {', '.join(diff.created)})")

for step in range(3):
    for s in roster.tick(start + timedelta(seconds=step)):
        lat, lon, alt = ecef_to_geodetic(s.position)
        print(f"t+{step}s {s.name:12s} lat={lat:7.2f} lon={lon:8.2f} alt={alt:6.1f} km")
