"""
Command-line entry point.

    harvester https://www.igdb.com/games/coming_soon --cap 5 --sort-key name
"""

import argparse
import asyncio
import sys
import traceback
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from harvester.core.config import HarvestConfig
from harvester.core.exceptions import ConfigurationError, HarvestError
from harvester.core.logging import get_logger, init_harvest_logging
from harvester.utils.url_utils import validate_target_url


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="harvester",
        description="Headed listing harvest with challenge wait, lazy-load scrolling and detail enhancement.",
    )
    ap.add_argument("url", help="Target listing URL (http or https)")
    ap.add_argument("--site", default=None, help="Force a site profile (ibba-directory, ibba-api, igdb, generic)")
    ap.add_argument("--headless", action="store_true", default=None, help="Run headless (default: headed)")
    ap.add_argument("--no-evasion", dest="evasion_enabled", action="store_false", default=None,
                    help="Disable automation-fingerprint evasion")
    cap = ap.add_mutually_exclusive_group()
    cap.add_argument("--cap", type=int, default=None, help="Enhance at most N list items (default 20)")
    cap.add_argument("--no-cap", action="store_true", help="Enhance every list item")
    ap.add_argument("--sort-key", default=None, help="Canonical field to sort by (case-insensitive)")
    ap.add_argument("--dedupe", action="store_true", default=None, help="Drop exact duplicate records")
    ap.add_argument("--out-dir", type=Path, default=None, help="Output directory (default: results)")
    ap.add_argument("--search", dest="search_query", default=None, help="Search query for sites with a search form")
    ap.add_argument("--csv", dest="export_csv", action="store_true", default=None, help="Also write a CSV file")
    ap.add_argument("--persist-partial", action="store_true", default=None,
                    help="Persist processed items when the run fails")
    ap.add_argument("--deadline", dest="run_deadline_s", type=float, default=None,
                    help="Abort the run after this many seconds")
    ap.add_argument("--env", type=Path, default=None, help="Path to .env file (default: configs/.env)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def config_from_args(args: argparse.Namespace) -> HarvestConfig:
    """Environment configuration with command-line flags applied on top."""
    config = HarvestConfig.from_env(args.env).with_overrides(
        site=args.site,
        headless=args.headless,
        evasion_enabled=args.evasion_enabled,
        enhancement_cap=args.cap,
        sort_key=args.sort_key,
        dedupe=args.dedupe,
        out_dir=args.out_dir,
        search_query=args.search_query,
        export_csv=args.export_csv,
        persist_partial=args.persist_partial,
        run_deadline_s=args.run_deadline_s,
    )
    if args.no_cap:
        config = replace(config, enhancement_cap=None)
    return config


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    try:
        url = validate_target_url(args.url)
        config = config_from_args(args)
    except ConfigurationError as e:
        ap.error(str(e))

    init_harvest_logging(verbose=args.verbose, log_dir=config.log_dir, level=config.log_level)
    logger = get_logger("harvester")

    # Imported here so --help works without playwright installed
    from harvester.crawler.pipeline import run_harvest

    try:
        report = asyncio.run(run_harvest(url, config))
    except KeyboardInterrupt:
        print("\n[abort] KeyboardInterrupt - stopping harvest.", file=sys.stderr)
        return 1
    except HarvestError as e:
        logger.error(f"Harvest failed: {e}")
        return 1
    except Exception as e:
        logger.error(f"Uncaught error during harvest: {e}")
        traceback.print_exc()
        return 1

    print(report.location)
    return 0
