"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from phenocam_gdd import __version__
from phenocam_gdd.config import get_settings
from phenocam_gdd.flows.fetch import fetch_all
from phenocam_gdd.flows.fit import fit_all
from phenocam_gdd.flows.spatial import predict_map_all
from phenocam_gdd.phenology.optimize import STRATEGIES
from phenocam_gdd.reference.sites import SITES_BY_NAME


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="phenocam-gdd",
        description="Fit a growing degree day spring phenology model to PhenoCam data",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    # 'fetch' command - download drivers, transitions and MODIS green-up
    fetch_parser = subparsers.add_parser("fetch", help="Fetch site data into the store")
    fetch_parser.add_argument(
        "--site",
        action="append",
        dest="sites",
        default=None,
        help="Site name to fetch (repeatable; default: all configured sites)",
    )
    fetch_parser.add_argument("--start-year", type=int, default=None)
    fetch_parser.add_argument("--end-year", type=int, default=None)

    # 'fit' command - optimize the model parameters
    fit_parser = subparsers.add_parser("fit", help="Fit the GDD model to cached data")
    fit_parser.add_argument(
        "--site",
        action="append",
        dest="sites",
        default=None,
        help="Site name to include (repeatable; default: all configured sites)",
    )
    fit_parser.add_argument(
        "--budget",
        type=int,
        default=None,
        help="Maximum objective evaluations (default: optimizer_budget from settings)",
    )
    fit_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    fit_parser.add_argument(
        "--strategy",
        choices=sorted(STRATEGIES),
        default=None,
        help="Search strategy (default: optimizer_strategy from settings)",
    )

    # 'predict-map' command - apply fitted parameters to a raster stack
    map_parser = subparsers.add_parser("predict-map", help="Predict a DOY map from a GeoTIFF")
    map_parser.add_argument("stack", type=Path, help="Multi-band daily mean temperature GeoTIFF")
    map_parser.add_argument("--output", type=str, default=None, help="Output file name")
    map_parser.add_argument("--reference", type=Path, default=None, help="Reference DOY raster")
    map_parser.add_argument(
        "--modis-year",
        type=int,
        default=None,
        help="Decode --reference as raw MCD12Q2 values for this year",
    )
    map_parser.add_argument("--nodata", type=float, default=None, help="Stack nodata override")

    return parser


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Sites: {', '.join(s.name for s in settings.sites)}")
    print(f"Years: {settings.start_year}-{settings.end_year}")
    return 0


def cmd_fetch(args: argparse.Namespace) -> int:
    """Handle the 'fetch' command."""
    settings = get_settings()
    if args.sites:
        configured = {s.name: s for s in settings.sites}
        unknown = [n for n in args.sites if n not in configured and n not in SITES_BY_NAME]
        if unknown:
            print(f"Error: unknown site(s): {', '.join(unknown)}", file=sys.stderr)
            return 1
        sites = [configured.get(n) or SITES_BY_NAME[n] for n in args.sites]
    else:
        sites = settings.sites

    print(f"Fetching data for {len(sites)} sites...")
    fetch_all(sites=sites, start_year=args.start_year, end_year=args.end_year)
    print("Done.")
    return 0


def cmd_fit(args: argparse.Namespace) -> int:
    """Handle the 'fit' command."""
    if args.debug:
        print(f"Debug mode enabled. Settings: {get_settings()}")

    result = fit_all(
        site_names=args.sites,
        budget=args.budget,
        seed=args.seed,
        strategy=args.strategy,
    )
    if "error" in result:
        print(f"Error: {result['error']}", file=sys.stderr)
        return 1
    print(
        f"threshold={result['threshold']:.2f} C  budget={result['budget']:.1f} GDD  "
        f"RMSE={result['rmse']:.2f} days ({result['site_years']} site-years)"
    )
    return 0


def cmd_predict_map(args: argparse.Namespace) -> int:
    """Handle the 'predict-map' command."""
    if not args.stack.exists():
        print(f"Error: no such file: {args.stack}", file=sys.stderr)
        return 1

    result = predict_map_all(
        args.stack,
        output_name=args.output,
        reference_path=args.reference,
        modis_year=args.modis_year,
        nodata=args.nodata,
    )
    if "error" in result:
        print(f"Error: {result['error']}", file=sys.stderr)
        return 1
    print(f"Wrote {result['output']} ({result['valid_pixels']}/{result['pixels']} pixels)")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "fetch": cmd_fetch,
        "fit": cmd_fit,
        "predict-map": cmd_predict_map,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
