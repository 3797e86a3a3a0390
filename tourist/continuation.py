"""Decide which URLs of a batch still need to be crawled."""

from __future__ import annotations

import logging
from typing import Iterable, List

from .paths import OutputPaths, PathLike

LOGGER = logging.getLogger(__name__)


def get_retry_urls(urls: Iterable[str], out_root: PathLike) -> List[str]:
    """Return the URLs whose output artifacts are not all present.

    A URL is done when its output directory and both screenshots exist
    and are readable. File contents are not inspected. Input order is
    preserved.
    """
    retry: List[str] = []
    for url in urls:
        if OutputPaths.for_url(out_root, url).is_complete():
            LOGGER.debug("Already crawled: %s", url)
            continue
        retry.append(url)
    return retry
