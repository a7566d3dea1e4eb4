"""
Command-line entry point: score a coordinate for quinoa suitability.

    python main.py -16.5 -68.15
    python main.py -16.5 -68.15 --json
"""

import argparse
import json
import logging
import sys

from core import AnalysisError, InvalidCoordinate, SuitabilityAnalyzer, get_settings, render_report
from loaders import get_land_validator

log = logging.getLogger("main")

# La Paz altiplano, Bolivia
EXAMPLE_LAT = -16.5
EXAMPLE_LON = -68.15


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Quinoa cultivation suitability analysis")
    parser.add_argument("latitude", type=float, nargs="?", default=EXAMPLE_LAT,
                        help=f"Latitude in decimal degrees (default {EXAMPLE_LAT})")
    parser.add_argument("longitude", type=float, nargs="?", default=EXAMPLE_LON,
                        help=f"Longitude in decimal degrees (default {EXAMPLE_LON})")
    parser.add_argument("--json", action="store_true", help="Print the analysis as JSON")
    parser.add_argument("--skip-land-check", action="store_true",
                        help="Do not verify that the point is on land")
    parser.add_argument("--log-level", default=None, help="Logging level (default from QUINOA_LOG_LEVEL)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ValueError as e:
        logging.basicConfig(level=(args.log_level or "INFO").upper())
        log.error(f"Invalid configuration: {e}")
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    validator = None if args.skip_land_check else get_land_validator()
    analyzer = SuitabilityAnalyzer(land_validator=validator, settings=settings)

    try:
        analysis = analyzer.analyze(args.latitude, args.longitude)
    except InvalidCoordinate as e:
        log.error(f"Invalid coordinate: {e}")
        print(f"Invalid coordinate: {e}", file=sys.stderr)
        return 2
    except AnalysisError as e:
        log.error(f"Analysis failed: {e}")
        print(f"Analysis failed: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(render_report(analysis))
    return 0


if __name__ == "__main__":
    sys.exit(main())
