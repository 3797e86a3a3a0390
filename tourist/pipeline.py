"""Sequential per-URL analysis pipeline.

For every URL: drive the page (when crawling), correlate its trace,
aggregate byte statistics and compute the bloat score. A failure on one
URL is recorded and the batch moves on to the next.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .config import Device, TouristConfig
from .continuation import get_retry_urls
from .driver import PageDriver
from .paths import OutputPaths, can_read_files
from .score import BloatScore, compute_bloat_score
from .stats import DocumentStats, collect_stats
from .trace import resource_map_from_trace

LOGGER = logging.getLogger(__name__)

DriverFactory = Callable[[TouristConfig], Any]


@dataclass
class PageAnalysis:
    """Outcome of analysing one URL."""

    url: str
    status: str  # success, failed
    stats: Optional[DocumentStats] = None
    score: Optional[BloatScore] = None
    error_message: Optional[str] = None


async def analyse_url_async(
    url: str,
    config: TouristConfig,
    devices: List[Device],
    driver: Any = None,
) -> PageAnalysis:
    """Run the full pipeline for one URL.

    Raises whatever the driver or trace parsing raises; callers handling
    a batch should catch and continue.
    """
    paths = OutputPaths.for_url(config.out, url)
    if config.crawl:
        if driver is None:
            raise RuntimeError("Crawling requires a page driver")
        await driver.capture(url, paths, devices)

    resource_map = resource_map_from_trace(paths.trace_file)

    if not can_read_files(paths.output_dir):
        return PageAnalysis(url=url, status="failed", error_message="No output data")

    stats = collect_stats(resource_map)
    score = compute_bloat_score(
        stats.total.encoded, paths.aft_screenshot, paths.full_screenshot
    )
    return PageAnalysis(url=url, status="success", stats=stats, score=score)


async def analyse_async(
    urls: List[str],
    config: TouristConfig,
    devices: List[Device],
    *,
    driver_factory: DriverFactory = PageDriver,
) -> List[PageAnalysis]:
    """Analyse a batch of URLs one after another."""
    if config.continue_crawl:
        retry_urls = get_retry_urls(urls, config.out)
        LOGGER.info("Retrying %d of %d", len(retry_urls), len(urls))
        urls = retry_urls

    if config.dry_run:
        LOGGER.info(
            "Dry run: would analyse %d URL(s) with devices: %s",
            len(urls),
            ", ".join(d.short_name for d in devices),
        )
        for url in urls:
            LOGGER.info("  %s -> %s", url, OutputPaths.for_url(config.out, url).output_dir)
        return []

    if not urls:
        return []

    driver = driver_factory(config) if config.crawl else None
    if driver is not None:
        await driver.start()

    results: List[PageAnalysis] = []
    try:
        for url in urls:
            LOGGER.info("Crawling: %s" if config.crawl else "Analysing: %s", url)
            try:
                result = await analyse_url_async(url, config, devices, driver)
            except Exception as exc:
                LOGGER.warning("Failed: %s - %s", url, exc)
                LOGGER.debug("Traceback for %s", url, exc_info=True)
                result = PageAnalysis(url=url, status="failed", error_message=str(exc))
            else:
                if result.status == "failed":
                    LOGGER.warning("Failed: %s - %s", url, result.error_message)
            results.append(result)
    finally:
        if driver is not None:
            await driver.close()

    return results
