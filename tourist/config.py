"""Run configuration, device viewports and URL list loading."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

LOGGER = logging.getLogger(__name__)

DEFAULT_OUT_DIR = Path("./out")
DEFAULT_VIEWPORTS_FILE = Path("./viewports.json")
WAIT_UNTIL_CHOICES = ("load", "domcontentloaded", "networkidle", "commit")


@dataclass
class TouristConfig:
    """Settings for one analysis run, passed explicitly to every stage."""

    out: Path = DEFAULT_OUT_DIR
    crawl: bool = True
    headless: bool = True
    continue_crawl: bool = False
    dry_run: bool = False
    crawl_limit: int = 1000
    viewports_file: Path = DEFAULT_VIEWPORTS_FILE
    viewports_limit: int = 1
    desktop: bool = False
    navigation_timeout: float = 10.0
    wait_until: str = "networkidle"

    def __post_init__(self) -> None:
        self.out = Path(self.out)
        self.viewports_file = Path(self.viewports_file)
        if self.wait_until not in WAIT_UNTIL_CHOICES:
            raise ValueError(
                f"wait_until must be one of {', '.join(WAIT_UNTIL_CHOICES)}; "
                f"got {self.wait_until!r}"
            )


@dataclass
class Device:
    """A viewport to render pages in.

    ``viewport`` uses the keys ``width``, ``height``, ``deviceScaleFactor``,
    ``isMobile`` and ``hasTouch``. When it is missing, ``alias`` names a
    Playwright device descriptor to borrow it from at launch time.
    """

    name: str
    short_name: str
    viewport: Optional[Dict[str, Any]] = None
    alias: Optional[str] = None
    url: str = ""
    popular_in: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Device":
        try:
            name = str(data["name"])
            short_name = str(data["short_name"])
        except KeyError as exc:
            raise ValueError(f"Device entry missing {exc.args[0]!r}: {data!r}") from exc
        return cls(
            name=name,
            short_name=short_name,
            viewport=data.get("viewport"),
            alias=data.get("alias"),
            url=str(data.get("url") or ""),
            popular_in=list(data.get("popular_in") or []),
        )


DESKTOP_DEVICE = Device(
    name="Chrome Desktop",
    short_name="desktop",
    url="http://gs.statcounter.com/screen-resolution-stats/desktop/worldwide",
    viewport={
        "width": 1336,
        "height": 768,
        "deviceScaleFactor": 1.0,
        "isMobile": False,
        "hasTouch": False,
    },
)


def load_devices(
    viewports_file: Path,
    *,
    desktop: bool = False,
    limit: Optional[int] = None,
) -> List[Device]:
    """Load the device list, most widely popular first.

    With ``desktop`` the file is not read and a single desktop viewport
    is returned.
    """
    if desktop:
        devices = [replace(DESKTOP_DEVICE, viewport=dict(DESKTOP_DEVICE.viewport or {}))]
    else:
        data = json.loads(Path(viewports_file).read_text(encoding="utf-8"))
        entries = data.get("devices") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise ValueError(f"No 'devices' array in {viewports_file}")
        devices = [Device.from_dict(entry) for entry in entries]
        devices.sort(key=lambda d: len(d.popular_in), reverse=True)

    if limit is not None and len(devices) > limit:
        devices = devices[: max(0, limit)]
    if not devices:
        raise ValueError("No devices configured")
    LOGGER.debug("Using devices: %s", ", ".join(d.short_name for d in devices))
    return devices


def load_urls(
    *,
    url: Optional[str] = None,
    urls_file: Optional[Path] = None,
    limit: Optional[int] = None,
) -> List[str]:
    """Load the URL batch from a JSON array file or a single URL."""
    if urls_file:
        data = json.loads(Path(urls_file).read_text(encoding="utf-8"))
        if not isinstance(data, list) or not all(isinstance(u, str) for u in data):
            raise ValueError(f"{urls_file} must contain a JSON array of URLs")
        urls = list(data)
    elif url:
        urls = [url]
    else:
        raise ValueError("Provide either a single URL or a URLs file")

    if limit is not None and len(urls) > limit:
        urls = urls[: max(0, limit)]
    return urls
