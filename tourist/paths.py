"""On-disk layout of per-URL crawl artifacts."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union
from urllib.parse import urlsplit

PathLike = Union[str, Path]

TRACE_FILENAME = "trace.json"
AFT_SCREENSHOT_FILENAME = "screenshot.aft.png"
FULL_SCREENSHOT_FILENAME = "screenshot.full.png"
DEVICE_SCREENSHOT_FILENAME = "screenshot.png"

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}


def url_host(url: str) -> str:
    """Return the host component of ``url`` the way browsers report it.

    Lowercased hostname in its ASCII (punycode) form, bracketed IPv6
    literals, and ``:port`` only when the port is not the scheme default.
    """
    parts = urlsplit(url)
    hostname = parts.hostname
    if not hostname:
        raise ValueError(f"URL has no host: {url!r}")
    if not hostname.isascii():
        try:
            hostname = hostname.encode("idna").decode("ascii")
        except UnicodeError as exc:
            raise ValueError(f"Invalid international host in {url!r}: {exc}") from exc
    if ":" in hostname:
        hostname = f"[{hostname}]"
    port = parts.port
    if port is not None and port != _DEFAULT_PORTS.get(parts.scheme.lower()):
        return f"{hostname}:{port}"
    return hostname


def can_read_files(*paths: PathLike) -> bool:
    """Return True when every path exists and is readable."""
    return all(os.access(path, os.R_OK) for path in paths)


@dataclass(frozen=True)
class OutputPaths:
    """Artifact locations for one URL beneath an output root."""

    output_dir: Path

    @classmethod
    def for_url(cls, root: PathLike, url: str) -> "OutputPaths":
        return cls(output_dir=Path(root) / url_host(url))

    @property
    def trace_file(self) -> Path:
        return self.output_dir / TRACE_FILENAME

    @property
    def aft_screenshot(self) -> Path:
        return self.output_dir / AFT_SCREENSHOT_FILENAME

    @property
    def full_screenshot(self) -> Path:
        return self.output_dir / FULL_SCREENSHOT_FILENAME

    def device_dir(self, short_name: str) -> Path:
        return self.output_dir / short_name

    def device_screenshot(self, short_name: str) -> Path:
        return self.device_dir(short_name) / DEVICE_SCREENSHOT_FILENAME

    def is_complete(self) -> bool:
        """True when the directory and both screenshots are readable."""
        return can_read_files(self.output_dir, self.aft_screenshot, self.full_screenshot)
