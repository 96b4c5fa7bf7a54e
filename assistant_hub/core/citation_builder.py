"""
Citation extraction and formatting.

Turns raw file_citation annotations into Citation objects with a quoted
span. The Responses API reports only a character offset, so the span is
the sentence that ends at the annotation; annotations that carry a quote
use it directly.

Dependencies: assistant_hub.models, assistant_hub.boundary.answering
System role: Citation formatting business logic
"""

import re

from assistant_hub.boundary.answering.answering_schemas import RawCitation
from assistant_hub.models.citation import Citation

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+|\n+")
_CITATION_MARKER = re.compile(r"【[^】]*】|\[\d+\]")


class CitationBuilder:
    """Citation building business logic."""

    def __init__(self, max_quote_length: int = 500) -> None:
        """
        Initialize citation builder.

        Args:
            max_quote_length: Quotes longer than this are truncated
        """
        self.max_quote_length = max_quote_length

    def build_citations(
        self,
        raw_citations: list[RawCitation],
        filenames: dict[str, str] | None = None,
    ) -> list[Citation]:
        """
        Build citations from raw annotations.

        Citations without an extractable span are dropped. Duplicate
        (file, quote) pairs are collapsed, keeping the first.

        Args:
            raw_citations: Annotations from the answering service
            filenames: Remote file id to original filename

        Returns:
            list[Citation]: Normalized citations in answer order
        """
        filenames = filenames or {}
        citations: list[Citation] = []
        seen: set[tuple[str, str]] = set()
        for raw in raw_citations:
            quote = self.extract_quote(raw)
            if not quote:
                continue
            key = (raw.file_id, quote)
            if key in seen:
                continue
            seen.add(key)
            citations.append(self.format_citation(raw, quote, filenames))
        return citations

    def extract_quote(self, raw: RawCitation) -> str:
        """
        Extract the quoted span for one annotation.

        Args:
            raw: Raw annotation

        Returns:
            str: Span text, or "" when none can be extracted
        """
        if raw.quote and raw.quote.strip():
            return self._clip(raw.quote.strip())
        if raw.index is None or not raw.source_text:
            return ""

        preceding = raw.source_text[: max(raw.index, 0)]
        preceding = _CITATION_MARKER.sub("", preceding).rstrip()
        if not preceding:
            return ""
        sentences = [s.strip() for s in _SENTENCE_BREAK.split(preceding) if s.strip()]
        return self._clip(sentences[-1]) if sentences else ""

    def format_citation(
        self,
        raw: RawCitation,
        quote: str,
        filenames: dict[str, str],
    ) -> Citation:
        """Format a citation, resolving the filename when possible."""
        return Citation(
            file_id=raw.file_id,
            filename=raw.filename or filenames.get(raw.file_id),
            quote=quote,
        )

    def _clip(self, text: str) -> str:
        if len(text) <= self.max_quote_length:
            return text
        return text[: self.max_quote_length].rstrip() + "..."
