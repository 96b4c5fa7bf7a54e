"""
Answering and indexing service boundary.

Exports:
  - AnsweringGateway: Capability protocol consumed by the synchronizer and chat service
  - OpenAIGateway: Implementation over the OpenAI Responses and Vector Stores APIs
  - AnswerRequest, AnswerResult, RawCitation: Typed request/response contract
  - GatewayDelta, GatewayCompletion: Streaming items
  - parse_response, as_mapping: Raw payload validation helpers

Dependencies: openai, pydantic, assistant_hub.core.exceptions
System role: Adapter for the remote answering/indexing service
"""

from assistant_hub.boundary.answering.answering_schemas import (
    AnswerRequest,
    AnswerResult,
    GatewayCompletion,
    GatewayDelta,
    RawCitation,
    as_mapping,
    parse_response,
)
from assistant_hub.boundary.answering.gateway import AnsweringGateway
from assistant_hub.boundary.answering.openai_gateway import OpenAIGateway

__all__ = [
    "AnsweringGateway",
    "OpenAIGateway",
    "AnswerRequest",
    "AnswerResult",
    "RawCitation",
    "GatewayDelta",
    "GatewayCompletion",
    "as_mapping",
    "parse_response",
]
