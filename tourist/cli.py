"""Command-line interface for page-weight analysis."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .cli_config import OUT_ENV, VIEWPORTS_ENV, env_path, load_config

# Configuration directory for global CLI usage
CONFIG_DIR = Path.home() / ".config" / "tourist"
CONFIG_ENV_FILE = CONFIG_DIR / ".env"


def _load_config() -> None:
    load_config(
        config_dir=CONFIG_DIR,
        config_env_file=CONFIG_ENV_FILE,
        cwd=Path.cwd(),
        load_env=load_dotenv,
        copy_file=shutil.copy,
    )


_load_config()

from .config import (
    DEFAULT_OUT_DIR,
    DEFAULT_VIEWPORTS_FILE,
    WAIT_UNTIL_CHOICES,
    TouristConfig,
    load_devices,
    load_urls,
)
from .pipeline import PageAnalysis, analyse_async
from .report import analysis_to_dict, format_score, format_summary


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tourist",
        description=(
            "Measure the transferred byte weight of web pages and their "
            "Web Bloat Score."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  # Crawl and analyse a single page
  tourist --url https://example.com

  # Crawl a list of URLs (JSON array) with a desktop viewport only
  tourist --urls-file urls.json --desktop

  # Re-analyse previous output without launching a browser
  tourist --urls-file urls.json --no-crawl

  # Resume an interrupted batch
  tourist --urls-file urls.json --continue
""",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--url",
        type=str,
        default=None,
        help="A single URL to crawl",
    )
    source.add_argument(
        "--urls-file",
        type=Path,
        default=None,
        help="JSON file of URLs to crawl (array)",
    )
    parser.add_argument(
        "--no-crawl",
        action="store_false",
        dest="crawl",
        help="Skip crawling, analyse previous results in --out directory",
    )
    parser.add_argument(
        "--viewports",
        type=Path,
        default=env_path(VIEWPORTS_ENV, DEFAULT_VIEWPORTS_FILE),
        help="JSON file with device viewports (default: ./viewports.json)",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=env_path(OUT_ENV, DEFAULT_OUT_DIR),
        help="Output directory (default: ./out)",
    )
    parser.add_argument(
        "--crawl-limit",
        type=int,
        default=1000,
        help="Max URLs to test (default: 1000)",
    )
    parser.add_argument(
        "--viewports-limit",
        type=int,
        default=1,
        help="Max viewports to test (default: 1)",
    )
    parser.add_argument(
        "--desktop",
        action="store_true",
        help="Test only a desktop viewport",
    )
    parser.add_argument(
        "--no-headless",
        action="store_false",
        dest="headless",
        help="Run in a visible browser window",
    )
    parser.add_argument(
        "--continue",
        action="store_true",
        dest="continue_crawl",
        help="Only crawl URLs whose output is missing from --out",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print what would be crawled without writing anything to disk",
    )
    parser.add_argument(
        "--wait-until",
        type=str,
        choices=list(WAIT_UNTIL_CHOICES),
        default="networkidle",
        help="Page load event to wait for (default: networkidle)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Navigation timeout in seconds (default: 10)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)
    if not args.url and not args.urls_file:
        parser.error(
            "Please provide either a single URL with --url or a list of URLs "
            "to crawl via --urls-file"
        )
    return args


def _config_from_args(args: argparse.Namespace) -> TouristConfig:
    return TouristConfig(
        out=args.out,
        crawl=args.crawl,
        headless=args.headless,
        continue_crawl=args.continue_crawl,
        dry_run=args.dry_run,
        crawl_limit=args.crawl_limit,
        viewports_file=args.viewports,
        viewports_limit=args.viewports_limit,
        desktop=args.desktop,
        navigation_timeout=args.timeout,
        wait_until=args.wait_until,
    )


def _write_results(results: List[PageAnalysis], json_output: bool) -> None:
    if json_output:
        payload = [analysis_to_dict(result) for result in results]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    for result in results:
        if result.status != "success" or result.stats is None:
            continue
        print(f"\n{result.url}")
        print(format_summary(result.stats))
        if result.score is not None:
            print(f"  > {format_score(result.score)}")


async def _run_async(args: argparse.Namespace) -> int:
    """Main async entry point."""
    config = _config_from_args(args)

    if args.urls_file:
        logging.info("Crawling locations in --urls-file: %s", args.urls_file)
    urls = load_urls(url=args.url, urls_file=args.urls_file, limit=config.crawl_limit)

    devices = (
        load_devices(
            config.viewports_file,
            desktop=config.desktop,
            limit=config.viewports_limit,
        )
        if config.crawl
        else []
    )

    results = await analyse_async(urls, config, devices)

    successful = [r for r in results if r.status == "success"]
    failed = [r for r in results if r.status == "failed"]
    if results:
        logging.info(
            "Analysis complete: %d URLs (%d successful, %d failed)",
            len(results),
            len(successful),
            len(failed),
        )

    _write_results(results if args.json_output else successful, args.json_output)

    if results and not successful:
        logging.error("All URLs failed")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for the tourist command."""
    args = _parse_args(argv)
    _setup_logging(args.verbose)

    try:
        return asyncio.run(_run_async(args))
    except KeyboardInterrupt:
        logging.info("Interrupted")
        return 130
    except Exception as exc:
        logging.error("Error: %s", exc)
        if args.verbose:
            logging.exception("Full traceback:")
        return 1


if __name__ == "__main__":
    sys.exit(main())
