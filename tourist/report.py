"""Text and JSON rendering of analysis results."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List

from .pipeline import PageAnalysis
from .score import BloatScore
from .stats import CategoryTotals, DocumentStats


def format_bytes(size: int) -> str:
    """Human readable size: plain bytes up to 1 KiB, then KiB."""
    if size > 1024:
        kib = (Decimal(size) / 1024).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        text = f"{kib:,.1f}"
        if text.endswith(".0"):
            text = text[:-2]
        return f"{text} KiB"
    return f"{size} bytes"


def _category_lines(category: CategoryTotals, total: CategoryTotals) -> List[str]:
    label = category.name
    share = category.percent_of(total).encoded
    lines = [f"{label:>14}: {format_bytes(category.encoded)} ({share:.2f}%)"]
    if category.largest is not None:
        largest_share = category.largest_percent_of(total).encoded
        lines.append(
            f"{'Largest ' + label:>14}: "
            f"{format_bytes(category.largest.encoded_bytes)} ({largest_share:.2f}%)"
        )
        lines.append(f"{'':>14}  {category.largest.url}")
    return lines


def format_summary(stats: DocumentStats) -> str:
    """Multi-line overview of total size and every category."""
    total = stats.total
    lines = [
        f"{'Total size':>14}: {format_bytes(total.encoded)} "
        f"({format_bytes(total.decoded)} uncompressed)"
    ]
    for category in stats:
        lines.extend(_category_lines(category, total))
    return "\n".join(f"  > {line}" for line in lines)


def format_score(score: BloatScore) -> str:
    return f"Web Bloat Score (AFT): {score.aft:.2f}, Full page: {score.full:.2f}"


def _category_to_dict(category: CategoryTotals, total: CategoryTotals) -> Dict[str, Any]:
    share = category.percent_of(total)
    largest = category.largest
    return {
        "name": category.name,
        "encoded": category.encoded,
        "decoded": category.decoded,
        "percent": {"encoded": share.encoded, "decoded": share.decoded},
        "largest": (
            {
                "url": largest.url,
                "mime_type": largest.mime_type,
                "encoded": largest.encoded_bytes,
                "decoded": largest.decoded_bytes,
            }
            if largest is not None
            else None
        ),
    }


def analysis_to_dict(analysis: PageAnalysis) -> Dict[str, Any]:
    """Convert an analysis to a JSON-serializable dict."""
    data: Dict[str, Any] = {
        "url": analysis.url,
        "status": analysis.status,
        "error_message": analysis.error_message,
        "stats": None,
        "score": None,
    }
    if analysis.stats is not None:
        total = analysis.stats.total
        data["stats"] = {
            "total": _category_to_dict(total, total),
            "categories": [_category_to_dict(c, total) for c in analysis.stats],
        }
    if analysis.score is not None:
        data["score"] = {"aft": analysis.score.aft, "full": analysis.score.full}
    return data
