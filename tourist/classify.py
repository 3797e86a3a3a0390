"""MIME-type based resource categories."""

from __future__ import annotations

from types import MappingProxyType
from typing import FrozenSet, Mapping, Union

from .resources import ResourceRecord

CategoryTable = Mapping[str, FrozenSet[str]]

# Greatly truncated from:
#   https://www.iana.org/assignments/media-types/media-types.xhtml
#   https://developer.mozilla.org/en-US/docs/Web/HTTP/Basics_of_HTTP/MIME_types
HTML_TYPES: FrozenSet[str] = frozenset({"text/html", "application/xhtml+xml"})

JAVASCRIPT_TYPES: FrozenSet[str] = frozenset(
    {
        "text/javascript",
        "text/javascript+module",
        "application/javascript",
        "application/x-javascript",
        "application/ecmascript",
        "text/ecmascript",
        "text/jscript",
    }
)

CSS_TYPES: FrozenSet[str] = frozenset({"text/css"})

IMAGE_TYPES: FrozenSet[str] = frozenset(
    {
        "image/gif",
        "image/jpeg",
        "image/pjpeg",
        "image/png",
        "image/webp",
        "image/svg+xml",
        "image/bmp",
        "image/tiff",
        "image/xbm",
    }
)

FONT_TYPES: FrozenSet[str] = frozenset(
    {
        "application/font-woff",
        "font/collection",
        "font/otf",
        "font/sfnt",
        "font/ttf",
        "font/woff",
        "font/woff2",
    }
)

CATEGORY_MIME_TYPES: CategoryTable = MappingProxyType(
    {
        "HTML": HTML_TYPES,
        "JavaScript": JAVASCRIPT_TYPES,
        "CSS": CSS_TYPES,
        "Image": IMAGE_TYPES,
        "Font": FONT_TYPES,
    }
)


def classify(
    resource: Union[ResourceRecord, str],
    table: CategoryTable = CATEGORY_MIME_TYPES,
) -> FrozenSet[str]:
    """Return the names of every category whose allow-list holds the MIME type.

    Matching is exact and case-sensitive. An empty result means the
    resource is uncategorized.
    """
    mime_type = resource if isinstance(resource, str) else resource.mime_type
    if not mime_type:
        return frozenset()
    return frozenset(name for name, types in table.items() if mime_type in types)
