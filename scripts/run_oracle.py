#!/usr/bin/env python3
"""Run one oracle update cycle and print the registry read-back.

Configuration comes from the environment (see ``OracleConfig.from_env``):
- NREL_API_KEY (required)
- ORACLE_OWNER (required)
- ORACLE_NETWORK, NREL_TIMEOUT, ORACLE_UPDATE_DELAY, ORACLE_MAX_AGE_SECONDS,
  ORACLE_MIN_DNI, ORACLE_LOG_DEBUG (optional)

The registry lives in memory for the duration of the run, so the script
initializes it first. Locations default to the three US cities NREL covers
in the bundled defaults; pass ``--location LAT,LON`` (repeatable) to
override.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from solaroracle import (  # noqa: E402
    DEFAULT_LOCATIONS,
    Location,
    NrelClient,
    OracleAgent,
    OracleConfig,
    OracleConfigError,
    RegistryStore,
)


def _parse_location(value: str) -> Location:
    parts = [p.strip() for p in value.split(",")]
    if len(parts) not in (2, 3):
        raise argparse.ArgumentTypeError(f"expected LAT,LON[,NAME], got {value!r}")
    try:
        lat, lon = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid coordinates in {value!r}") from exc
    name = parts[2] if len(parts) == 3 else ""
    try:
        return Location(lat=lat, lon=lon, name=name)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"coordinates out of range in {value!r}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument(
        "--location",
        action="append",
        type=_parse_location,
        default=None,
        metavar="LAT,LON[,NAME]",
        help="Location to update (repeatable). Defaults to the built-in US locations.",
    )
    parser.add_argument("--delay", type=float, default=None, help="Seconds between locations.")
    parser.add_argument("--json", action="store_true", help="Print the read-back as JSON.")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging.")
    return parser


def _report_to_dict(report: Any) -> dict[str, Any]:
    measurement = report.measurement
    return {
        "location": str(report.location),
        "key": report.location.key.model_dump(),
        "measurement": measurement.model_dump() if measurement is not None else None,
        "fresh": report.fresh,
        "suitable": report.suitable,
    }


async def _run(config: OracleConfig, locations: list[Location], as_json: bool) -> int:
    store = RegistryStore()
    async with NrelClient(config) as nrel:
        agent = OracleAgent(config, store, nrel)
        agent.ensure_initialized()
        cycle = await agent.run_cycle(locations)

    reports = [agent.read_back(location) for location in locations]
    stats = store.stats(config.owner)

    if as_json:
        print(
            json.dumps(
                {
                    "owner": config.owner,
                    "network": config.network,
                    "total_locations": stats.total_locations,
                    "update_count": stats.update_count,
                    "failed": {str(loc): str(exc) for loc, exc in cycle.failed.items()},
                    "locations": [_report_to_dict(r) for r in reports],
                },
                indent=2,
            )
        )
    else:
        print(f"Registry for {config.owner} on {config.network}")
        print(f"  total_locations={stats.total_locations} update_count={stats.update_count}")
        for report in reports:
            m = report.measurement
            if m is None:
                print(f"  {report.location}: no data")
                continue
            print(
                f"  {report.location}: dni={m.dni_kwh:.2f} ghi={m.ghi_kwh:.2f} "
                f"lat_tilt={m.lat_tilt_kwh:.2f} kWh/m²/day fresh={report.fresh} suitable={report.suitable}"
            )
        for location, exc in cycle.failed.items():
            print(f"  FAILED {location}: {exc}")

    return 0 if cycle.ok else 1


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    overrides: dict[str, Any] = {}
    if args.delay is not None:
        overrides["update_delay"] = args.delay
    if args.debug:
        overrides["debug_logging"] = True

    try:
        config = OracleConfig.from_env(**overrides).validate()
    except OracleConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if config.debug_logging else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    locations = args.location or list(DEFAULT_LOCATIONS)
    return asyncio.run(_run(config, locations, args.json))


if __name__ == "__main__":
    raise SystemExit(main())
