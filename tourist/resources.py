"""Data structures representing correlated network resources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping


@dataclass(frozen=True, slots=True)
class ResourceRecord:
    """One completed network fetch recovered from a trace."""

    url: str
    mime_type: str = ""
    encoded_bytes: int = 0  # transferred over the wire
    decoded_bytes: int = 0  # uncompressed body
    failed: bool = False
    request_id: str = ""

    @classmethod
    def from_trace_data(cls, data: Mapping[str, Any]) -> "ResourceRecord":
        """Build a record from merged ``args.data`` trace attributes."""
        return cls(
            url=str(data["url"]),
            mime_type=str(data.get("mimeType") or ""),
            encoded_bytes=int(data.get("encodedDataLength") or 0),
            decoded_bytes=int(data.get("decodedBodyLength") or 0),
            failed=bool(data.get("didFail", False)),
            request_id=str(data.get("requestId") or ""),
        )


# Keyed by URL: a second fetch of the same URL replaces the first.
ResourceRecordSet = Dict[str, ResourceRecord]
