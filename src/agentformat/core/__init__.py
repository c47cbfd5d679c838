"""Core protocols, types and expansion machinery."""

from agentformat.core.protocols import HistoryConverter
from agentformat.core.segmenter import EntrySegmenter, SegmentState, parse_tool_args
from agentformat.core.tokens import (
    message_weight,
    redistribute_tokens,
    split_proportionally,
)
from agentformat.core.tool_registry import ToolSearchOutput, ToolValidityTracker
from agentformat.core.types import (
    TOOL_SEARCH_NAME,
    FormattedMessages,
    FormatterConfig,
    IndexTokenCountMap,
    OutputMessage,
)

__all__ = [
    "EntrySegmenter",
    "FormattedMessages",
    "FormatterConfig",
    "HistoryConverter",
    "IndexTokenCountMap",
    "OutputMessage",
    "SegmentState",
    "TOOL_SEARCH_NAME",
    "ToolSearchOutput",
    "ToolValidityTracker",
    "message_weight",
    "parse_tool_args",
    "redistribute_tokens",
    "split_proportionally",
]
