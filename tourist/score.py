"""Web Bloat Score: transferred bytes per byte of rendered screenshot.

See https://www.webbloatscore.com/ for the idea. Two scores are produced,
one against the above-the-fold screenshot and one against the full-page
screenshot. Higher is worse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .paths import PathLike, can_read_files

LOGGER = logging.getLogger(__name__)

UNAVAILABLE = -1.0


@dataclass(frozen=True, slots=True)
class BloatScore:
    """Above-the-fold and full-page bloat ratios."""

    aft: float
    full: float

    @property
    def available(self) -> bool:
        return self.aft != UNAVAILABLE and self.full != UNAVAILABLE


UNAVAILABLE_SCORE = BloatScore(aft=UNAVAILABLE, full=UNAVAILABLE)


def compute_bloat_score(
    total_encoded_bytes: int,
    aft_image_path: PathLike,
    full_image_path: PathLike,
) -> BloatScore:
    """Compute both scores, or the unavailable sentinel.

    If either screenshot cannot be read (or is empty), both scores are
    reported as unavailable.
    """
    if not can_read_files(aft_image_path, full_image_path):
        LOGGER.debug(
            "Screenshots not readable (%s, %s); score unavailable",
            aft_image_path,
            full_image_path,
        )
        return UNAVAILABLE_SCORE

    try:
        aft_size = Path(aft_image_path).stat().st_size
        full_size = Path(full_image_path).stat().st_size
    except OSError as exc:
        LOGGER.debug("Could not stat screenshots: %s", exc)
        return UNAVAILABLE_SCORE

    if not aft_size or not full_size:
        LOGGER.debug("Empty screenshot; score unavailable")
        return UNAVAILABLE_SCORE

    return BloatScore(
        aft=total_encoded_bytes / aft_size,
        full=total_encoded_bytes / full_size,
    )
