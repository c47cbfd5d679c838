"""
Message/content round-tripping and artifact re-attachment.

`convert_messages_to_content()` is the inverse direction of the expansion
converter: it folds AI + tool messages back into a flat content part list,
linking each tool result to the text part that announced it.

The artifact helpers move out-of-band tool artifacts (images, resources)
into tool message content so they reach the model.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence, TypeVar

from langchain_core.messages import AIMessage, BaseMessage, ToolMessage
from pydantic import BaseModel, ConfigDict, ValidationError

from agentformat.payload.parts import ContentTypes

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ToolArtifact(BaseModel):
    """Artifact attached to a tool message (observed shape)."""

    model_config = ConfigDict(extra="allow")

    content: list[Any]


def find_last_index(items: Sequence[T], predicate: Callable[[T], bool]) -> int:
    """Index of the last item matching `predicate`, or -1."""
    for i in range(len(items) - 1, -1, -1):
        if predicate(items[i]):
            return i
    return -1


def convert_messages_to_content(
    messages: Sequence[BaseMessage | None],
) -> list[dict[str, Any]]:
    """
    Flatten messages into a content part list.

    - AI messages contribute their content (tool_use blocks removed)
    - Each tool message becomes a tool_call part carrying its output
    - The tool call id is appended to `tool_call_ids` of the latest AI
      content part (an empty text part is created if there is none)
    - Human and system messages are skipped

    Returns:
        New part dicts; input messages are not modified.
    """
    processed: list[dict[str, Any]] = []
    current_ai_index = -1
    tool_call_map: dict[str, dict[str, Any]] = {}

    for message in messages:
        if message is None:
            continue

        if isinstance(message, AIMessage) and message.tool_calls:
            for tool_call in message.tool_calls:
                call_id = tool_call.get("id")
                if call_id:
                    tool_call_map[call_id] = dict(tool_call)

            added = _add_content_parts(processed, message.content)
            if not added:
                processed.append({"type": ContentTypes.TEXT, "text": ""})
            current_ai_index = len(processed) - 1

        elif isinstance(message, ToolMessage) and message.tool_call_id:
            call_id = message.tool_call_id
            tool_call = tool_call_map.get(call_id) or {
                "id": call_id,
                "name": message.name,
            }
            if current_ai_index == -1:
                processed.append({"type": ContentTypes.TEXT, "text": ""})
                current_ai_index = len(processed) - 1

            owner = processed[current_ai_index]
            processed.append(
                {
                    "type": ContentTypes.TOOL_CALL,
                    "tool_call": {**tool_call, "output": message.content},
                }
            )
            # Parts are shallow copies; never extend the caller's list
            owner["tool_call_ids"] = [*owner.get("tool_call_ids", []), call_id]

        elif isinstance(message, AIMessage):
            _add_content_parts(processed, message.content)

    return processed


def _add_content_parts(processed: list[dict[str, Any]], content: Any) -> int:
    """Append a message's content as parts. Returns the number added."""
    if content is None:
        return 0
    if isinstance(content, str):
        processed.append({"type": ContentTypes.TEXT, "text": content})
        return 1

    added = 0
    for item in content:
        if item is None:
            continue
        if isinstance(item, str):
            processed.append({"type": ContentTypes.TEXT, "text": item})
        elif isinstance(item, dict) and item.get("type") != "tool_use":
            processed.append(dict(item))
        else:
            continue
        added += 1
    return added


def _artifact_content(artifact: Any) -> list[Any] | None:
    if artifact is None:
        return None
    try:
        return ToolArtifact.model_validate(artifact).content
    except ValidationError:
        logger.debug(f"Ignoring artifact without list content: {type(artifact).__name__}")
        return None


def format_artifact_payload(messages: Sequence[BaseMessage]) -> None:
    """
    Append tool artifacts directly to their ToolMessage content.

    Artifacts stored in `additional_kwargs["artifact"]` are restored onto the
    message first, since message coercion keeps additional_kwargs but drops
    the artifact field. String content is wrapped as a text part before the
    artifact content is appended. Mutates the messages in place.
    """
    for message in messages:
        if message.type != "tool":
            continue
        stored = message.additional_kwargs.get("artifact")
        if stored is not None:
            message.artifact = stored

    for message in messages:
        if message.type != "tool":
            continue
        artifact_content = _artifact_content(getattr(message, "artifact", None))
        if artifact_content is None:
            continue

        current = (
            message.content
            if isinstance(message.content, list)
            else [{"type": ContentTypes.TEXT, "text": str(message.content)}]
        )
        message.content = [*current, *artifact_content]


def format_anthropic_artifact_content(messages: Sequence[BaseMessage]) -> None:
    """
    Attach artifacts to the tool results of the latest tool-calling turn.

    Only runs when the last message is a ToolMessage. Finds the latest AI
    message owning that tool call; if any tool message after it carries list
    artifact content, every list-content tool message belonging to that AI
    message gets its artifact content appended. Mutates in place.
    """
    if not messages:
        return
    last = messages[-1]
    if not isinstance(last, ToolMessage):
        return

    parent_index = find_last_index(
        messages,
        lambda m: isinstance(m, AIMessage)
        and bool(m.tool_calls)
        and any(tc.get("id") == last.tool_call_id for tc in m.tool_calls),
    )
    if parent_index == -1:
        return

    following = messages[parent_index + 1 :]
    has_artifacts = any(
        isinstance(m, ToolMessage) and _artifact_content(m.artifact) is not None
        for m in following
    )
    if not has_artifacts:
        return

    parent = messages[parent_index]
    tool_call_ids = {tc.get("id") for tc in parent.tool_calls}

    for message in following:
        if not isinstance(message, ToolMessage):
            continue
        if message.tool_call_id not in tool_call_ids:
            continue
        artifact_content = _artifact_content(message.artifact)
        if artifact_content is None or not isinstance(message.content, list):
            continue
        message.content = message.content + artifact_content
