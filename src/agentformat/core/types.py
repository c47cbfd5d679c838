"""
Core types for agentformat.

This module defines the configuration and result structures shared by the
expansion engine and its callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Union

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

TOOL_SEARCH_NAME = "tool_search"

DEFAULT_REJECTED_TOOL_TEMPLATE = "[Tool call: {name}]\nArguments: {args}\nResult: {output}"

# Output message union
OutputMessage = Union[HumanMessage, SystemMessage, AIMessage, ToolMessage]

# Sparse index -> token count. Values may be None in input maps.
IndexTokenCountMap = Mapping[int, Union[int, None]]


@dataclass
class FormatterConfig:
    """Configuration for the message expansion engine."""

    tool_search_name: str = TOOL_SEARCH_NAME  # Tool whose output can grow the allow-list
    rejected_tool_template: str = DEFAULT_REJECTED_TOOL_TEMPLATE

    def render_rejected_call(self, name: str, args: str, output: str | None) -> str:
        """Render a rejected tool call as inline narrative text."""
        return self.rejected_tool_template.format(
            name=name, args=args, output=output or ""
        )


@dataclass
class FormattedMessages:
    """
    Result of formatting an agent payload.

    `index_token_count_map` is None only when the caller supplied no map.
    Its keys are positions in `messages`.
    """

    messages: list[OutputMessage]
    index_token_count_map: dict[int, int] | None = None
