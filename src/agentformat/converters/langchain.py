"""LangChain message expansion converter."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from agentformat.core.protocols import HistoryConverter
from agentformat.core.segmenter import EntrySegmenter
from agentformat.core.tokens import redistribute_tokens
from agentformat.core.tool_registry import ToolValidityTracker
from agentformat.core.types import (
    FormattedMessages,
    FormatterConfig,
    IndexTokenCountMap,
)
from agentformat.payload.parser import parse_payload
from agentformat.payload.parts import PayloadEntry, TextPart, UnknownPart

logger = logging.getLogger(__name__)

# Type alias for LangChain messages
LangChainMessages = list[BaseMessage]


class AgentMessageConverter(HistoryConverter[LangChainMessages]):
    """
    Converts an agent payload to LangChain message types.

    Handles:
    - Expanding assistant turns into AIMessage + ToolMessage sequences
    - Healing tool calls that have no owning assistant text
    - Enforcing a tool allow-list, grown by tool_search discovery
    - Redistributing per-entry token counts across expanded messages

    The converter holds no per-call state and can be reused.
    """

    def __init__(
        self,
        tools: Iterable[str] | None = None,
        config: FormatterConfig | None = None,
    ):
        self._tools = frozenset(tools) if tools is not None else None
        self._config = config or FormatterConfig()

    def convert(self, raw: Sequence[Mapping[str, Any]]) -> LangChainMessages:
        """Convert an agent payload to LangChain messages."""
        return self.format(raw).messages

    def format(
        self,
        raw: Sequence[Mapping[str, Any]],
        index_token_count_map: IndexTokenCountMap | None = None,
    ) -> FormattedMessages:
        """
        Convert an agent payload and redistribute its token counts.

        Args:
            raw: Payload entries (role + content)
            index_token_count_map: Token count per payload index. Indices at or
                beyond len(raw) are ignored; None values count as 0.

        Returns:
            FormattedMessages. Its map is None only if no map was given.
        """
        tracker = ToolValidityTracker(
            self._tools, tool_search_name=self._config.tool_search_name
        )
        messages: LangChainMessages = []
        token_map: dict[int, int] | None = (
            {} if index_token_count_map is not None else None
        )

        for entry in parse_payload(raw):
            produced = self._format_entry(entry, tracker)
            start = len(messages)
            messages.extend(produced)

            if token_map is None or not produced:
                continue
            present, count = _lookup_count(index_token_count_map, entry.index)
            if not present:
                continue
            for offset, tokens in enumerate(redistribute_tokens(count, produced)):
                token_map[start + offset] = tokens

        if tracker.discovered_tools:
            logger.debug(
                f"Formatted {len(messages)} messages, discovered tools: "
                f"{sorted(tracker.discovered_tools)}"
            )
        return FormattedMessages(messages=messages, index_token_count_map=token_map)

    def _format_entry(
        self, entry: PayloadEntry, tracker: ToolValidityTracker
    ) -> list[BaseMessage]:
        if entry.role == "assistant":
            return EntrySegmenter(entry, tracker, self._config).run()

        content = _passthrough_content(entry)
        if content is None:
            return []
        if entry.role == "user":
            return [HumanMessage(content=content)]
        if entry.role != "system":
            logger.debug(f"Entry {entry.index}: role {entry.role!r} mapped to system")
        return [SystemMessage(content=content)]


def format_agent_messages(
    payload: Sequence[Mapping[str, Any]],
    index_token_count_map: IndexTokenCountMap | None = None,
    tools: Iterable[str] | None = None,
    config: FormatterConfig | None = None,
) -> FormattedMessages:
    """
    Format an agent payload into LangChain messages.

    Args:
        payload: Payload entries (role + content)
        index_token_count_map: Optional token count per payload index
        tools: Optional allow-list of tool names. None means unrestricted.
        config: Optional formatter configuration

    Returns:
        FormattedMessages with the expanded messages and, when a map was
        given, token counts keyed by output message position.

    Example:
        >>> result = format_agent_messages(
        ...     [{"role": "user", "content": "Hi"}], {0: 3}
        ... )
        >>> result.index_token_count_map
        {0: 3}
    """
    return AgentMessageConverter(tools=tools, config=config).format(
        payload, index_token_count_map
    )


def _passthrough_content(entry: PayloadEntry) -> str | list[Any] | None:
    """
    Content for non-assistant entries, with traces dropped.

    Unlike assistant entries, unrecognized parts (images, files) are kept.
    """
    if isinstance(entry.raw_content, str):
        return entry.raw_content

    kept: list[Any] = []
    for part in entry.parts:
        if isinstance(part, (TextPart, UnknownPart)) and part.raw:
            kept.append(dict(part.raw))
    return kept or None


def _lookup_count(
    index_token_count_map: IndexTokenCountMap, index: int
) -> tuple[bool, int | None]:
    if index in index_token_count_map:
        return True, index_token_count_map[index]
    # Maps decoded from JSON carry string keys
    key: Any = str(index)
    if key in index_token_count_map:
        return True, index_token_count_map[key]
    return False, None
