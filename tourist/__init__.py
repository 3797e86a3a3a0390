"""Page-weight analysis from browser network traces.

This package measures how many bytes a page transfers, splits them by
resource type, and relates them to the size of the page's screenshots
(the Web Bloat Score). It supports:

- Correlating Chrome trace events into per-request resource records
- Per-category byte statistics with the largest resource of each
- Web Bloat Score against above-the-fold and full-page screenshots
- Resuming a batch by skipping URLs that already have output

Example usage:

    from tourist import TouristConfig, analyse, collect_stats, resource_map_from_trace

    # Analyse an existing trace
    resources = resource_map_from_trace("out/example.com/trace.json")
    stats = collect_stats(resources)
    print(stats.total.encoded, stats["JavaScript"].encoded)

    # Crawl and analyse a batch
    config = TouristConfig(out="./out", desktop=True)
    results = analyse(["https://example.com"], config)
    for result in results:
        print(result.url, result.status, result.score)
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

from .classify import CATEGORY_MIME_TYPES, classify
from .config import DESKTOP_DEVICE, Device, TouristConfig, load_devices, load_urls
from .continuation import get_retry_urls
from .paths import OutputPaths, can_read_files, url_host
from .pipeline import PageAnalysis, analyse_async, analyse_url_async
from .resources import ResourceRecord, ResourceRecordSet
from .score import UNAVAILABLE, UNAVAILABLE_SCORE, BloatScore, compute_bloat_score
from .stats import ByteTotals, CategoryTotals, DocumentStats, PercentShare, collect_stats
from .trace import MalformedTraceError, correlate_events, resource_map_from_trace

__all__ = [
    # Records
    "ResourceRecord",
    "ResourceRecordSet",
    # Trace correlation
    "MalformedTraceError",
    "correlate_events",
    "resource_map_from_trace",
    # Classification and statistics
    "CATEGORY_MIME_TYPES",
    "classify",
    "ByteTotals",
    "CategoryTotals",
    "DocumentStats",
    "PercentShare",
    "collect_stats",
    # Scoring
    "BloatScore",
    "UNAVAILABLE",
    "UNAVAILABLE_SCORE",
    "compute_bloat_score",
    # Paths and continuation
    "OutputPaths",
    "can_read_files",
    "get_retry_urls",
    "url_host",
    # Configuration
    "DESKTOP_DEVICE",
    "Device",
    "TouristConfig",
    "load_devices",
    "load_urls",
    # Pipeline
    "PageAnalysis",
    "analyse",
    "analyse_async",
    "analyse_url_async",
]


def analyse(
    urls: List[str],
    config: Optional[TouristConfig] = None,
    devices: Optional[List[Device]] = None,
) -> List[PageAnalysis]:
    """Synchronous wrapper for analyse_async.

    Devices default to the configured viewports file (or the desktop
    viewport) when crawling.
    """
    config = config or TouristConfig()
    if devices is None:
        devices = (
            load_devices(
                config.viewports_file,
                desktop=config.desktop,
                limit=config.viewports_limit,
            )
            if config.crawl
            else []
        )
    return asyncio.run(analyse_async(urls, config, devices))
