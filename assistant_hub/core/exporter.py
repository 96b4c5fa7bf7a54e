"""
Session export rendering.

Renders a session and its messages as JSON, Markdown or plain text.
Output depends only on its inputs, so exporting an unchanged session with
the same exported_at timestamp is byte-identical.

Dependencies: assistant_hub.core.exceptions
System role: Conversation export formatting
"""

import json
from datetime import datetime, timezone
from typing import Any, Sequence

from assistant_hub.core.exceptions import InvalidInput

EXPORT_FORMATS = {
    "json": "json",
    "markdown": "markdown",
    "md": "markdown",
    "text": "text",
    "txt": "text",
}

MEDIA_TYPES = {
    "json": "application/json",
    "markdown": "text/markdown; charset=utf-8",
    "text": "text/plain; charset=utf-8",
}

FILE_EXTENSIONS = {"json": "json", "markdown": "md", "text": "txt"}

RULE = "-" * 60


def normalize_format(fmt: str) -> str:
    """
    Resolve a format name or alias.

    Raises:
        InvalidInput: For unknown formats
    """
    resolved = EXPORT_FORMATS.get((fmt or "").lower())
    if resolved is None:
        raise InvalidInput(
            f"Unsupported export format '{fmt}'",
            field="format",
            details={"supported": sorted(EXPORT_FORMATS)},
        )
    return resolved


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _display(value: datetime | None) -> str:
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _role(message) -> str:
    return getattr(message.role, "value", message.role)


def _citation_label(citation: dict[str, Any]) -> str:
    name = citation.get("filename") or citation.get("file_id", "")
    quote = citation.get("quote")
    return f'{name}: "{quote}"' if quote else name


def render_json(session, messages: Sequence, exported_at: datetime) -> str:
    payload = {
        "session": {
            "id": str(session.id),
            "title": session.title,
            "created_at": _iso(session.created_at),
            "updated_at": _iso(session.updated_at),
        },
        "messages": [
            {
                "role": _role(m),
                "content": m.content,
                "citations": m.citations or [],
                "timestamp": _iso(m.created_at),
            }
            for m in messages
        ],
        "exported_at": _iso(exported_at),
    }
    return json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)


def render_markdown(session, messages: Sequence, exported_at: datetime) -> str:
    lines = [
        f"# {session.title}",
        "",
        f"- Created: {_display(session.created_at)}",
        f"- Updated: {_display(session.updated_at)}",
        f"- Exported: {_display(exported_at)}",
        "",
        "---",
        "",
    ]
    for message in messages:
        lines.append(f"### {_role(message).capitalize()} ({_display(message.created_at)})")
        lines.append("")
        lines.append(message.content)
        if message.citations:
            lines.append("")
            lines.append("**Citations:** " + "; ".join(_citation_label(c) for c in message.citations))
        lines.extend(["", "---", ""])
    return "\n".join(lines)


def render_text(session, messages: Sequence, exported_at: datetime) -> str:
    lines = [
        session.title,
        "=" * len(session.title),
        f"Created: {_display(session.created_at)}",
        f"Updated: {_display(session.updated_at)}",
        f"Exported: {_display(exported_at)}",
        RULE,
    ]
    for message in messages:
        lines.append(f"[{_role(message).upper()}] {_display(message.created_at)}")
        lines.append(message.content)
        if message.citations:
            lines.append("Citations: " + "; ".join(_citation_label(c) for c in message.citations))
        lines.append(RULE)
    return "\n".join(lines) + "\n"


_RENDERERS = {
    "json": render_json,
    "markdown": render_markdown,
    "text": render_text,
}


def render_export(session, messages: Sequence, fmt: str, exported_at: datetime) -> str:
    """
    Render a session export.

    Args:
        session: SessionModel (id, title, created_at, updated_at)
        messages: MessageModels in creation order
        fmt: json, markdown, md, text or txt
        exported_at: Timestamp written into the export

    Returns:
        str: Rendered document

    Raises:
        InvalidInput: For unknown formats
    """
    return _RENDERERS[normalize_format(fmt)](session, messages, exported_at)
