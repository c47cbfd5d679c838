"""
Provider content normalization for streamed AI message chunks.

Streaming produces `*_delta` block types and, for Bedrock, many small
consecutive text or reasoning blocks. These helpers reduce a finished chunk
to the block types the target provider accepts.
"""

from __future__ import annotations

import copy
import enum
import json
import logging
from typing import Any

from langchain_core.messages import AIMessage, AIMessageChunk

logger = logging.getLogger(__name__)


class Providers(str, enum.Enum):
    OPENAI = "openAI"
    ANTHROPIC = "anthropic"
    BEDROCK = "bedrock"
    GOOGLE = "google"
    VERTEXAI = "vertexai"
    MISTRALAI = "mistralai"
    OLLAMA = "ollama"


_ALLOWED_TYPES = ["image_url", "text", "tool_use", "tool_result"]

ALLOWED_TYPES_BY_PROVIDER: dict[str, list[str]] = {
    "default": _ALLOWED_TYPES,
    Providers.ANTHROPIC.value: [*_ALLOWED_TYPES, "thinking", "redacted_thinking"],
    Providers.BEDROCK.value: [*_ALLOWED_TYPES, "reasoning_content"],
    Providers.OPENAI.value: _ALLOWED_TYPES,
}


def allowed_types(provider: Providers | str) -> list[str]:
    """Block types the provider accepts in message content."""
    key = provider.value if isinstance(provider, Providers) else provider
    return ALLOWED_TYPES_BY_PROVIDER.get(key, ALLOWED_TYPES_BY_PROVIDER["default"])


def reduce_blocks(blocks: list[Any]) -> list[Any]:
    """
    Merge consecutive text blocks and consecutive reasoning_content blocks.

    Reasoning text is concatenated and the latest non-empty signature kept.
    New blocks are deep-copied so the input is never mutated.
    """
    reduced: list[Any] = []

    for block in blocks:
        last = reduced[-1] if reduced else None
        block_type = block.get("type") if isinstance(block, dict) else None
        last_type = last.get("type") if isinstance(last, dict) else None

        if block_type == "reasoning_content" and last_type == "reasoning_content":
            incoming = block.get("reasoningText") or {}
            target = last.setdefault("reasoningText", {})
            if incoming.get("text"):
                target["text"] = (target.get("text") or "") + incoming["text"]
            if incoming.get("signature"):
                target["signature"] = incoming["signature"]
        elif block_type == "text" and last_type == "text":
            last["text"] = (last.get("text") or "") + (block.get("text") or "")
        else:
            reduced.append(copy.deepcopy(block))

    return reduced


def modify_content(
    provider: Providers | str,
    message_type: str,
    content: list[Any],
) -> list[Any]:
    """
    Map content block types onto the provider's allowed set.

    - `*_delta` suffixes are stripped
    - Unknown types become `text`
    - Empty-string `tool_use` input on AI messages becomes "{}"
    """
    allowed = allowed_types(provider)
    modified: list[Any] = []

    for item in content:
        if not isinstance(item, dict) or not isinstance(item.get("type"), str):
            modified.append(item)
            continue

        new_type = item["type"]
        new_type = new_type.removesuffix("_delta")
        if new_type not in allowed:
            new_type = "text"

        if message_type == "ai" and new_type == "tool_use" and item.get("input") == "":
            modified.append({**item, "type": new_type, "input": "{}"})
            continue

        modified.append({**item, "type": new_type})

    return modified


def modify_delta_properties(
    provider: Providers | str,
    message: AIMessageChunk | None,
) -> AIMessageChunk | None:
    """
    Normalize a streamed chunk's list content in place for `provider`.

    Returns the same chunk (or None when given None).
    """
    if message is None:
        return message

    if not isinstance(message.content, list):
        return message

    content = message.content
    if provider == Providers.BEDROCK:
        content = reduce_blocks(content)
    # Chunks report type "AIMessageChunk"
    message_type = "ai" if isinstance(message, AIMessage) else message.type
    message.content = modify_content(provider, message_type, content)
    logger.debug(f"Normalized {len(message.content)} content blocks for {provider}")
    return message


def format_anthropic_message(message: AIMessageChunk) -> AIMessage:
    """
    Rebuild a finished Anthropic chunk as an AIMessage.

    Without tool calls only the content is carried over. Otherwise list
    content is rebuilt from:
    - non-empty `text` blocks and bare strings
    - `tool_use` blocks whose id matches a tool call (input taken from the
      call's args)
    - blocks with only an `input`: matched to the tool call whose
      `args["input"]` equals the parsed input's `input`, or kept as text
      when the input is not JSON

    Tool calls and additional_kwargs are carried over.
    """
    if not message.tool_calls:
        return AIMessage(content=message.content)

    tool_call_map = {tc.get("id"): tc for tc in message.tool_calls}
    content: str | list[Any]

    if isinstance(message.content, str):
        content = message.content
    else:
        content = []
        for item in message.content:
            if isinstance(item, str):
                content.append({"type": "text", "text": item})
            elif isinstance(item, dict):
                block = _rebuild_block(item, message.tool_calls, tool_call_map)
                if block is not None:
                    content.append(block)

    return AIMessage(
        content=content,
        tool_calls=[
            {"id": tc.get("id") or "", "name": tc["name"], "args": tc["args"]}
            for tc in message.tool_calls
        ],
        additional_kwargs={**message.additional_kwargs},
    )


def _tool_use_block(tool_call: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "tool_use",
        "id": tool_call.get("id"),
        "name": tool_call["name"],
        "input": tool_call["args"],
    }


def _rebuild_block(
    item: dict[str, Any],
    tool_calls: list[Any],
    tool_call_map: dict[Any, Any],
) -> dict[str, Any] | None:
    block_type = item.get("type")

    if block_type == "text" and item.get("text"):
        return {"type": "text", "text": item["text"]}

    if block_type == "tool_use" and item.get("id"):
        tool_call = tool_call_map.get(item["id"])
        return _tool_use_block(tool_call) if tool_call is not None else None

    raw_input = item.get("input")
    if not raw_input:
        return None

    if isinstance(raw_input, str):
        try:
            parsed = json.loads(raw_input)
        except json.JSONDecodeError:
            return {"type": "text", "text": raw_input}
    else:
        parsed = raw_input

    if not isinstance(parsed, dict):
        logger.debug(f"Dropping input block with non-object input: {type(parsed).__name__}")
        return None

    for tool_call in tool_calls:
        if tool_call["args"].get("input") == parsed.get("input"):
            return _tool_use_block(tool_call)
    return None
