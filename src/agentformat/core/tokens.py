"""
Token budget redistribution across expanded messages.

Token counts are supplied per original payload entry. When an entry expands
into several messages, its count is split across them in proportion to how
much content each message carries. All arithmetic is on integers, so the
split is exact for arbitrarily large counts:

    count = 7, weights = [3, 3, 3]
    floors     = [2, 2, 2]   (sum 6)
    remainders = [3, 3, 3]   (ties broken by position)
    result     = [3, 2, 2]   (sum 7)
"""

from __future__ import annotations

import json
from typing import Any, Sequence

from langchain_core.messages import AIMessage, BaseMessage, ToolMessage


def serialize_content(content: Any) -> str:
    """Serialize message content the way it is measured for weighting."""
    if isinstance(content, str):
        return content
    return json.dumps(content, ensure_ascii=False, separators=(",", ":"), default=str)


def message_weight(message: BaseMessage) -> int:
    """
    Character weight of a message.

    Assistant messages count their content plus every tool call's serialized
    args. Tool messages count their result content.
    """
    if isinstance(message, ToolMessage):
        return len(serialize_content(message.content))

    weight = len(serialize_content(message.content))
    if isinstance(message, AIMessage):
        for tool_call in message.tool_calls:
            weight += len(serialize_content(tool_call.get("args", {})))
    return weight


def split_proportionally(count: int, weights: Sequence[int]) -> list[int]:
    """
    Split `count` into non-negative integers proportional to `weights`.

    Uses the largest remainder method. Falls back to an even split when every
    weight is zero. The result always sums to `count`.
    """
    if not weights:
        return []
    if len(weights) == 1:
        return [count]

    total = sum(weights)
    if total <= 0:
        weights = [1] * len(weights)
        total = len(weights)

    allocations: list[int] = []
    remainders: list[tuple[int, int]] = []
    for position, weight in enumerate(weights):
        share, remainder = divmod(count * weight, total)
        allocations.append(share)
        remainders.append((remainder, position))

    leftover = count - sum(allocations)
    # Largest remainder first, earlier message first on ties
    remainders.sort(key=lambda item: (-item[0], item[1]))
    for _, position in remainders[:leftover]:
        allocations[position] += 1

    return allocations


def redistribute_tokens(
    count: int | None,
    messages: Sequence[BaseMessage],
) -> list[int]:
    """
    Allocate an entry's token count across the messages it produced.

    Args:
        count: Token count of the original entry (None is treated as 0)
        messages: Messages produced for the entry, in output order

    Returns:
        One allocation per message, summing to `count`
    """
    count = count or 0
    if len(messages) == 1:
        return [count]
    return split_proportionally(count, [message_weight(m) for m in messages])
