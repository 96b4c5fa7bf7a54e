"""
Answering service schemas.

Typed contract for answering requests and results. Raw SDK responses are
validated here so that nothing untyped crosses the boundary; shapes that
do not validate become UpstreamFailure.

Dependencies: pydantic, assistant_hub.core.exceptions
System role: Answering boundary data contracts
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from assistant_hub.core.exceptions import UpstreamFailure

FAILED_RESPONSE_STATUSES = frozenset({"failed", "cancelled"})


class AnswerRequest(BaseModel):
    """
    One conversation turn sent to the answering service.

    Attributes:
        model: Model identifier
        input: User text for this turn
        instructions: System guidance, sent verbatim
        vector_store_id: Knowledge base to search; None disables file search
        previous_response_id: Continuation token of the previous turn
    """

    model: str
    input: str
    instructions: str | None = None
    vector_store_id: str | None = None
    previous_response_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Build the keyword arguments for responses.create."""
        payload: dict[str, Any] = {
            "model": self.model,
            "input": self.input,
            "store": True,
        }
        if self.instructions:
            payload["instructions"] = self.instructions
        if self.vector_store_id:
            payload["tools"] = [
                {"type": "file_search", "vector_store_ids": [self.vector_store_id]}
            ]
        if self.previous_response_id:
            payload["previous_response_id"] = self.previous_response_id
        return payload


class RawCitation(BaseModel):
    """
    File citation annotation as returned by the service.

    Attributes:
        file_id: Remote file handle
        filename: Filename if the service reported one
        quote: Quoted span if the service reported one
        index: Character offset of the annotation within source_text
        source_text: Text of the output part the annotation belongs to
    """

    file_id: str
    filename: str | None = None
    quote: str | None = None
    index: int | None = None
    source_text: str = ""


class AnswerResult(BaseModel):
    """Completed turn: full text, raw citations and the new continuation token."""

    text: str
    citations: list[RawCitation] = Field(default_factory=list)
    turn_token: str


class GatewayDelta(BaseModel):
    """Incremental text chunk of a streamed answer."""

    text: str


class GatewayCompletion(BaseModel):
    """Terminal item of a streamed answer."""

    result: AnswerResult


class _Annotation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    file_id: str | None = None
    filename: str | None = None
    index: int | None = None
    quote: str | None = None
    text: str | None = None
    file_citation: dict[str, Any] | None = None


class _TextValue(BaseModel):
    model_config = ConfigDict(extra="ignore")

    value: str = ""
    annotations: list[_Annotation] = Field(default_factory=list)


class _ContentPart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    text: str | _TextValue | None = None
    annotations: list[_Annotation] | None = None

    def plain_text(self) -> str:
        if isinstance(self.text, _TextValue):
            return self.text.value
        return self.text or ""

    def all_annotations(self) -> list[_Annotation]:
        if isinstance(self.text, _TextValue):
            return self.text.annotations
        return self.annotations or []


class _OutputItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    content: list[_ContentPart] | None = None


class _ResponsePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    status: str | None = None
    error: dict[str, Any] | None = None
    output: list[_OutputItem] = Field(default_factory=list)
    output_text: str | None = None


def as_mapping(obj: Any, operation: str = "answer") -> dict[str, Any]:
    """
    Convert an SDK object or plain dict into a dict.

    Args:
        obj: SDK pydantic model or mapping
        operation: Operation name reported on failure

    Returns:
        dict: Mapping view of the object

    Raises:
        UpstreamFailure: If the object is neither
    """
    if isinstance(obj, dict):
        return obj
    dump = getattr(obj, "model_dump", None)
    if callable(dump):
        return dump()
    raise UpstreamFailure(
        "Unrecognized payload from answering service",
        operation=operation,
        details={"type": type(obj).__name__},
    )


def _citation_from(annotation: _Annotation, part_text: str) -> RawCitation | None:
    if annotation.type != "file_citation":
        return None
    nested = annotation.file_citation or {}
    file_id = annotation.file_id or nested.get("file_id")
    if not file_id:
        return None
    return RawCitation(
        file_id=file_id,
        filename=annotation.filename or nested.get("filename"),
        quote=nested.get("quote") or annotation.quote or annotation.text,
        index=annotation.index,
        source_text=part_text,
    )


def parse_response(raw: Any) -> AnswerResult:
    """
    Validate a raw Responses API payload into an AnswerResult.

    Text is taken from output_text when present, otherwise assembled from
    the output_text parts of message items. Only file_citation annotations
    are kept.

    Args:
        raw: SDK Response object or equivalent dict

    Returns:
        AnswerResult: Typed result

    Raises:
        UpstreamFailure: On unrecognized shapes or a failed response
    """
    try:
        payload = _ResponsePayload.model_validate(as_mapping(raw))
    except ValidationError as exc:
        raise UpstreamFailure(
            "Unrecognized response shape from answering service",
            operation="answer",
            details={"errors": exc.errors(include_url=False, include_input=False)},
        ) from exc

    if payload.error or (payload.status in FAILED_RESPONSE_STATUSES):
        message = (payload.error or {}).get("message") or f"Response {payload.status}"
        raise UpstreamFailure(
            message,
            operation="answer",
            details={"response_id": payload.id, "status": payload.status},
        )

    pieces: list[str] = []
    citations: list[RawCitation] = []
    for item in payload.output:
        if item.type != "message" or not item.content:
            continue
        for part in item.content:
            if part.type not in ("output_text", "text"):
                continue
            part_text = part.plain_text()
            pieces.append(part_text)
            for annotation in part.all_annotations():
                citation = _citation_from(annotation, part_text)
                if citation is not None:
                    citations.append(citation)

    text = payload.output_text if payload.output_text is not None else "".join(pieces)
    return AnswerResult(text=text, citations=citations, turn_token=payload.id)
