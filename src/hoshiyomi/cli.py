# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Command-line interface for moon age, rise and set.

Usage:
    # Moon age at local noon (UTC+9 by default)
    hoshiyomi calc --date 2022-07-15

    # Age plus rise/set for a location
    hoshiyomi calc --date 2022-07-15 --latitude 34.54 --longitude 133.92

    # One row per day, printed or exported to CSV
    hoshiyomi table --start 2022-07-01 --end 2022-07-31 --latitude 34.54 --longitude 133.92
    hoshiyomi table --start 2022-07-01 --end 2022-07-31 --latitude 34.54 \\
        --longitude 133.92 --export-csv july.csv

    # JSON HTTP service
    hoshiyomi serve --port 50051

    # Other deployment zones
    hoshiyomi --zone-offset 0 calc --date 2000-01-07
"""
import argparse
import logging
import sys
from datetime import date

from hoshiyomi.domain.coordinate_frames import GeoPosition
from hoshiyomi.domain.errors import InvalidInputError, NonConvergenceError
from hoshiyomi.domain.moon_age import moon_age
from hoshiyomi.domain.moon_info import (
    MoonInfo,
    compute_moon_info,
    moon_info_table,
    parse_date,
)
from hoshiyomi.domain.settings import EphemerisSettings
from hoshiyomi.adapters.csv_exporter import CsvMoonInfoExporter
from hoshiyomi.adapters.moon_server import DEFAULT_PORT, create_moon_server

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name.upper()),
        format=_LOG_FORMAT,
        datefmt=_LOG_DATEFMT,
    )


def build_settings(args: argparse.Namespace) -> EphemerisSettings:
    """Deployment settings from the global command-line options."""
    try:
        return EphemerisSettings(
            zone_offset_hours=args.zone_offset,
            max_iterations=args.max_iterations,
            wrap_every_elongation=args.wrap_elongation,
        )
    except ValueError as e:
        raise InvalidInputError(str(e)) from None


def _position(args: argparse.Namespace) -> GeoPosition | None:
    if args.latitude is None and args.longitude is None:
        return None
    if args.latitude is None or args.longitude is None:
        raise InvalidInputError("--latitude and --longitude must be given together")
    return GeoPosition(latitude_deg=args.latitude, longitude_deg=args.longitude)


def _crossing_text(value, condition) -> str:
    if value is not None:
        return value.isoformat()
    if condition is not None:
        return f"none ({condition.value.replace('_', ' ')})"
    return "none"


def format_moon_info(info: MoonInfo) -> str:
    """Human-readable multi-line summary of a MoonInfo."""
    return "\n".join([
        f"Date:      {info.date.isoformat()}",
        f"Location:  {info.position.latitude_deg:.4f}, {info.position.longitude_deg:.4f}",
        f"Moon age:  {info.age_days:.4f} days",
        f"Moonrise:  {_crossing_text(info.moon_rise, info.moon_rise_condition)}",
        f"Moonset:   {_crossing_text(info.moon_set, info.moon_set_condition)}",
    ])


def run_calc(
    day: date,
    position: GeoPosition | None,
    settings: EphemerisSettings,
) -> float | MoonInfo:
    """
    One-shot calculation for a single date.

    Returns:
        The Moon age in days when no position is given, otherwise the
        full MoonInfo.
    """
    if position is None:
        return moon_age(day, settings)
    return compute_moon_info(day, position, settings)


def run_table(
    start: date,
    end: date,
    position: GeoPosition,
    settings: EphemerisSettings,
    export_csv: str | None = None,
) -> list[MoonInfo]:
    """Compute one MoonInfo per day and optionally export them to CSV."""
    infos = moon_info_table(start, end, position, settings)
    if export_csv:
        CsvMoonInfoExporter().export(infos, export_csv)
    return infos


def _run_serve(settings: EphemerisSettings, host: str, port: int) -> None:
    """Start the moon API server and block until interrupted."""
    try:
        server = create_moon_server(settings, host=host, port=port)
    except OSError as e:
        if "Address already in use" in str(e) or e.errno == 98:
            print(
                f"Error: Port {port} is already in use.\n"
                f"Try a different port: hoshiyomi serve --port {port + 1}",
                file=sys.stderr,
            )
            sys.exit(1)
        raise

    print(f"Serving moon API at http://{host}:{port}/api/moon-info")
    print("Press Ctrl+C to stop.\n")
    logger.info("Zone offset UTC%+g", settings.zone_offset_hours)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nServer stopped.")
    finally:
        server.server_close()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hoshiyomi",
        description="Moon age, moonrise and moonset from a reduced lunar ephemeris",
    )
    parser.add_argument(
        '--zone-offset', type=float, default=9.0,
        help="Civil time-zone offset from UTC in hours (default: 9.0)"
    )
    parser.add_argument(
        '--max-iterations', type=int, default=50,
        help="Iteration budget for the solvers (default: 50)"
    )
    parser.add_argument(
        '--wrap-elongation', action='store_true', default=False,
        help="Wrap the elongation on every new-Moon iteration, not only the first"
    )
    parser.add_argument(
        '--log-level', default='warning',
        choices=['debug', 'info', 'warning', 'error'],
        help="Logging verbosity (default: warning)"
    )

    sub = parser.add_subparsers(dest='command', required=True)

    calc = sub.add_parser('calc', help="Moon age (and rise/set) for one date")
    calc.add_argument('--date', '-d', required=True, help="Civil date YYYY-MM-DD")
    calc.add_argument('--latitude', type=float, help="Latitude in degrees (North positive)")
    calc.add_argument('--longitude', type=float, help="Longitude in degrees (East positive)")

    table = sub.add_parser('table', help="Moon age, rise and set for a date range")
    table.add_argument('--start', required=True, help="First civil date YYYY-MM-DD")
    table.add_argument('--end', required=True, help="Last civil date YYYY-MM-DD (inclusive)")
    table.add_argument('--latitude', type=float, required=True)
    table.add_argument('--longitude', type=float, required=True)
    table.add_argument('--export-csv', help="Write the table to a CSV file")

    serve = sub.add_parser('serve', help="Run the JSON HTTP service")
    serve.add_argument('--host', default='localhost', help="Interface to bind (default: localhost)")
    serve.add_argument(
        '--port', type=int, default=DEFAULT_PORT,
        help=f"Port to serve on (default: {DEFAULT_PORT})"
    )

    return parser


def main():
    parser = _build_parser()
    args = parser.parse_args()
    _configure_logging(args.log_level)

    try:
        settings = build_settings(args)

        if args.command == 'serve':
            _run_serve(settings, args.host, args.port)
            return

        if args.command == 'calc':
            result = run_calc(parse_date(args.date), _position(args), settings)
            if isinstance(result, MoonInfo):
                print(format_moon_info(result))
            else:
                print(f"{result:.4f}")
            return

        if args.command == 'table':
            position = GeoPosition(latitude_deg=args.latitude, longitude_deg=args.longitude)
            infos = run_table(
                parse_date(args.start), parse_date(args.end), position, settings,
                export_csv=args.export_csv,
            )
            if args.export_csv:
                print(f"Exported {len(infos)} days to {args.export_csv}")
            else:
                for info in infos:
                    print(
                        f"{info.date.isoformat()}  age {info.age_days:7.3f}  "
                        f"rise {_crossing_text(info.moon_rise, info.moon_rise_condition)}  "
                        f"set {_crossing_text(info.moon_set, info.moon_set_condition)}"
                    )

    except (InvalidInputError, NonConvergenceError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
