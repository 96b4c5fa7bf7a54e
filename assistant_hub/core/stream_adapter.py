"""
Streaming delivery adapter.

Translates the answering service's incremental events into gateway items
(text deltas followed by exactly one completion), and gateway output into
transport-agnostic StreamEvents and their Server-Sent Events framing.

Dependencies: pydantic, assistant_hub.boundary.answering, assistant_hub.models
System role: Streaming protocol translation
"""

import json
import logging
from typing import Any, AsyncIterator

from assistant_hub.boundary.answering.answering_schemas import (
    GatewayCompletion,
    GatewayDelta,
    as_mapping,
    parse_response,
)
from assistant_hub.core.exceptions import (
    AssistantHubError,
    IncompleteStream,
    UpstreamFailure,
)
from assistant_hub.models.chat import TurnResult
from assistant_hub.models.streaming import StreamEvent, StreamEventType

logger = logging.getLogger(__name__)

TEXT_DELTA = "response.output_text.delta"
TERMINAL_EVENTS = frozenset({"response.completed", "response.incomplete"})
FAILURE_EVENTS = frozenset({"response.failed", "error"})


class StreamAdapter:
    """
    Adapter from raw Responses API stream events to gateway items.

    Events are forwarded strictly in arrival order. Malformed intermediate
    events are logged and skipped; events of unknown type are ignored.
    """

    async def adapt(
        self,
        raw_events: AsyncIterator[Any],
    ) -> AsyncIterator[GatewayDelta | GatewayCompletion]:
        """
        Adapt a raw event sequence.

        Args:
            raw_events: SDK stream events or equivalent dicts

        Yields:
            GatewayDelta per text chunk, then one GatewayCompletion

        Raises:
            UpstreamFailure: On a failure event or an invalid terminal payload
            IncompleteStream: If the source ends before a terminal event
        """
        skipped = 0
        async for raw in raw_events:
            try:
                event = as_mapping(raw, operation="stream")
            except UpstreamFailure:
                skipped += 1
                logger.warning("Skipping malformed stream event", extra={"event_type": type(raw).__name__})
                continue

            event_type = event.get("type")

            if event_type == TEXT_DELTA:
                delta = event.get("delta")
                if not isinstance(delta, str):
                    skipped += 1
                    logger.warning("Skipping text delta without text", extra={"event_type": event_type})
                    continue
                if delta:
                    yield GatewayDelta(text=delta)

            elif event_type in TERMINAL_EVENTS:
                yield GatewayCompletion(result=parse_response(event.get("response")))
                if skipped:
                    logger.info("Stream completed with skipped events", extra={"skipped": skipped})
                return

            elif event_type in FAILURE_EVENTS:
                raise UpstreamFailure(
                    _failure_message(event),
                    operation="stream",
                    details={"event_type": event_type},
                )

        raise IncompleteStream()


def _failure_message(event: dict[str, Any]) -> str:
    if event.get("message"):
        return str(event["message"])
    response = event.get("response") or {}
    error = response.get("error") if isinstance(response, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return "Answering service reported a failure"


def delta_event(text: str) -> StreamEvent:
    """Partial-content event."""
    return StreamEvent(event=StreamEventType.DELTA, data={"content": text})


def citations_event(result: TurnResult) -> StreamEvent:
    """Citation list event, sent once before done."""
    return StreamEvent(
        event=StreamEventType.CITATIONS,
        data={"citations": [c.model_dump() for c in result.citations]},
    )


def single_event(result: TurnResult) -> StreamEvent:
    """
    Terminal event carrying a whole turn.

    Used as the only event of a non-streaming turn and as the sentinel
    that ends a streamed one.
    """
    return StreamEvent(
        event=StreamEventType.DONE,
        data={
            "content": result.content,
            "citations": [c.model_dump() for c in result.citations],
        },
    )


def error_event(exc: AssistantHubError) -> StreamEvent:
    """Error event; carries the error kind as its code."""
    return StreamEvent(
        event=StreamEventType.ERROR,
        data={"code": exc.kind, "message": exc.message},
    )


def format_sse(event: StreamEvent) -> str:
    """
    Frame an event as a Server-Sent Events message.

    Args:
        event: Stream event

    Returns:
        str: "event: <type>\\ndata: <json>\\n\\n"
    """
    payload = json.dumps(event.data, ensure_ascii=False, default=str)
    return f"event: {event.event.value}\ndata: {payload}\n\n"
