"""
Agent payload parser - classifies raw payload entries into typed content parts.

This is the single source of truth for:
- Normalizing bare string content into a text part
- Recognizing content part type tags
- Extracting tool call fields with safe defaults

Nothing here raises for malformed input. Unusable items become
UnknownPart (or are skipped when they are None) and the caller decides what
to drop.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Sequence

from .parts import (
    AgentUpdatePart,
    ContentPart,
    ContentTypes,
    ErrorPart,
    PayloadEntry,
    RawToolCall,
    TextPart,
    ThinkPart,
    ToolCallPart,
    UnknownPart,
)

logger = logging.getLogger(__name__)


def parse_payload(payload: Sequence[Mapping[str, Any]]) -> list[PayloadEntry]:
    """
    Parse a raw agent payload into classified entries.

    Args:
        payload: Raw entries. Each item has:
            - role: "user" | "assistant" | "system" | "tool"
            - content: str or list of content part dicts

    Returns:
        One PayloadEntry per input item, in order, with `index` set to the
        item's position in the payload.

    Example:
        >>> entries = parse_payload([{"role": "user", "content": "Hi"}])
        >>> [type(p).__name__ for p in entries[0].parts]
        ['TextPart']
    """
    return [parse_entry(i, item) for i, item in enumerate(payload)]


def parse_entry(index: int, item: Mapping[str, Any]) -> PayloadEntry:
    """Parse a single payload entry."""
    if not isinstance(item, Mapping):
        logger.warning(f"Payload entry {index} is not a mapping, treating as empty")
        return PayloadEntry(index=index, role="user", parts=[], raw_content=[])

    role = item.get("role") or "user"
    raw_content = item.get("content")
    if raw_content is None:
        raw_content = []

    return PayloadEntry(
        index=index,
        role=role,
        parts=parse_content(raw_content),
        raw_content=raw_content,
    )


def parse_content(content: str | Sequence[Any]) -> list[ContentPart]:
    """
    Classify entry content into typed parts.

    A bare string becomes a single TextPart. None slots in a list are skipped.
    """
    if isinstance(content, str):
        return [TextPart(text=content, raw={"type": ContentTypes.TEXT, "text": content})]
    if isinstance(content, Mapping):
        return [parse_part(content)]
    if not isinstance(content, (list, tuple)):
        logger.warning(f"Unsupported content type: {type(content).__name__}")
        return []

    parts: list[ContentPart] = []
    for item in content:
        if item is None:
            continue
        parts.append(parse_part(item))
    return parts


def parse_part(item: Any) -> ContentPart:
    """Classify a single content item."""
    if not isinstance(item, Mapping):
        if isinstance(item, str):
            return TextPart(text=item, raw={"type": ContentTypes.TEXT, "text": item})
        logger.warning(f"Dropping non-dict content part: {type(item).__name__}")
        return UnknownPart()

    raw = dict(item)
    part_type = raw.get("type")

    if part_type == ContentTypes.TEXT:
        return TextPart(
            text=_as_text(raw.get(ContentTypes.TEXT)),
            tool_call_ids=parse_tool_call_ids(raw.get("tool_call_ids")),
            raw=raw,
        )

    if part_type == ContentTypes.THINK:
        return ThinkPart(think=_as_text(raw.get(ContentTypes.THINK)), raw=raw)

    if part_type == ContentTypes.ERROR:
        return ErrorPart(error=_as_text(raw.get(ContentTypes.ERROR)), raw=raw)

    if part_type == ContentTypes.TOOL_CALL:
        return ToolCallPart(tool_call=parse_tool_call(raw.get("tool_call")), raw=raw)

    if part_type == ContentTypes.AGENT_UPDATE:
        return AgentUpdatePart(raw=raw)

    return UnknownPart(raw=raw)


def parse_tool_call_ids(value: Any) -> list[str] | None:
    """
    Normalize a text part's `tool_call_ids` field.

    A list or tuple keeps its non-None items as strings. A bare string is a
    single id. Any other value owns no ids.
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [str(i) for i in value if i is not None]
    if isinstance(value, str):
        logger.warning(f"tool_call_ids is a string, treating as one id: {value[:100]}")
        return [value]
    logger.warning(f"Ignoring tool_call_ids of type {type(value).__name__}")
    return []


def parse_tool_call(data: Any) -> RawToolCall | None:
    """
    Extract a RawToolCall from a part's `tool_call` field.

    Returns None when the field is missing or not a mapping.
    """
    if not isinstance(data, Mapping):
        return None

    args = data.get("args")
    if args is None:
        args = ""
    elif not isinstance(args, str):
        # Already decoded upstream; keep the string contract
        args = json.dumps(args, ensure_ascii=False)

    output = data.get("output")
    if output is not None and not isinstance(output, str):
        output = json.dumps(output, ensure_ascii=False)

    call_id = data.get("id")
    name = data.get("name")

    return RawToolCall(
        id=str(call_id) if call_id is not None else None,
        name=name if isinstance(name, str) else None,
        args=args,
        output=output,
    )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)
