"""Correlate Chrome trace events into per-request resource records.

A trace holds three phase-tagged event streams for every network request.
They are joined on ``requestId``:

    ResourceSendRequest      -> start phase (url, method, priority, ...)
    ResourceReceiveResponse  -> response phase (mimeType, statusCode, ...)
    ResourceFinish           -> finish phase (didFail, final byte counts)

Example usage:

    from tourist.trace import resource_map_from_trace

    resources = resource_map_from_trace("out/example.com/trace.json")
    for url, record in resources.items():
        print(url, record.encoded_bytes)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from .paths import can_read_files
from .resources import ResourceRecord, ResourceRecordSet

LOGGER = logging.getLogger(__name__)

REQUEST_START = "ResourceSendRequest"
RESPONSE_START = "ResourceReceiveResponse"
REQUEST_FINISH = "ResourceFinish"


class MalformedTraceError(ValueError):
    """Raised when a trace file cannot be parsed or lacks required fields."""


def _event_data(event: Any) -> Dict[str, Any]:
    if not isinstance(event, dict):
        raise MalformedTraceError(f"Trace event is not an object: {event!r}")
    args = event.get("args")
    data = args.get("data") if isinstance(args, dict) else None
    if not isinstance(data, dict) or "requestId" not in data:
        raise MalformedTraceError(
            f"{event.get('name')} event without args.data.requestId"
        )
    if not isinstance(data["requestId"], str):
        raise MalformedTraceError(
            f"{event.get('name')} event with non-string requestId: "
            f"{data['requestId']!r}"
        )
    return data


def correlate_events(events: Iterable[Any]) -> ResourceRecordSet:
    """Join the start, response and finish phases into resource records.

    Only requests seen in both the start and finish phases, and whose
    finish event is not marked ``didFail``, produce a record. Attributes
    are merged start -> response -> finish so the finish phase wins for
    the byte counts. Duplicate request ids keep the last event per phase.
    """
    started: Dict[str, Dict[str, Any]] = {}
    responses: Dict[str, Dict[str, Any]] = {}
    finished: Dict[str, Dict[str, Any]] = {}
    phases = {
        REQUEST_START: started,
        RESPONSE_START: responses,
        REQUEST_FINISH: finished,
    }

    for event in events:
        name = event.get("name") if isinstance(event, dict) else None
        bucket = phases.get(name)
        if bucket is None:
            continue
        data = _event_data(event)
        bucket[data["requestId"]] = data

    resource_map: ResourceRecordSet = {}
    for request_id, finish in finished.items():
        if finish.get("didFail") or request_id not in started:
            continue
        merged: Dict[str, Any] = dict(started[request_id])
        merged.update(responses.get(request_id, {}))
        merged.update(finish)
        if not merged.get("url"):
            raise MalformedTraceError(f"Request {request_id} has no url")
        record = ResourceRecord.from_trace_data(merged)
        resource_map[record.url] = record

    LOGGER.debug(
        "Correlated %d resources from %d finished requests",
        len(resource_map),
        len(finished),
    )
    return resource_map


def load_trace_events(tracefile: Union[str, Path]) -> List[Any]:
    """Read the event list from a trace file.

    Accepts both the ``{"traceEvents": [...]}`` object format and a bare
    JSON array of events.
    """
    path = Path(tracefile)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedTraceError(f"Invalid trace JSON in {path}: {exc}") from exc

    events = document.get("traceEvents") if isinstance(document, dict) else document
    if not isinstance(events, list):
        raise MalformedTraceError(f"No trace event array in {path}")
    return events


def resource_map_from_trace(tracefile: Union[str, Path]) -> ResourceRecordSet:
    """Return the resource records of a trace file.

    A missing or unreadable file is not an error: it means no data has
    been captured yet and yields an empty mapping.
    """
    if not can_read_files(tracefile):
        LOGGER.debug("No readable trace at %s", tracefile)
        return {}
    try:
        events = load_trace_events(tracefile)
    except OSError as exc:
        LOGGER.debug("Could not read trace at %s: %s", tracefile, exc)
        return {}
    return correlate_events(events)
