"""
agentformat - Expand agent conversation payloads into LangChain messages.

Payload Layer:
    parse_payload: Classify raw entries into typed content parts
    ContentTypes: Content part type tags

Expansion Layer:
    format_agent_messages: Payload → messages + redistributed token counts
    AgentMessageConverter: Reusable converter (HistoryConverter protocol)
    ToolValidityTracker: Tool allow-list with tool_search discovery

Round-tripping:
    convert_messages_to_content: Messages → flat content parts
    format_artifact_payload: Attach tool artifacts to tool message content

Configuration:
    FormatterConfig: Expansion settings
    load_allowed_tools: Tool allow-list from agent_config.yaml

Example:
    from agentformat import format_agent_messages

    result = format_agent_messages(
        payload,
        index_token_count_map={0: 12, 1: 340},
        tools={"tool_search", "calculator"},
    )
    graph.invoke({"messages": result.messages})
"""

from .config import load_allowed_tools
from .converters import (
    AgentMessageConverter,
    convert_messages_to_content,
    format_agent_messages,
    format_anthropic_artifact_content,
    format_artifact_payload,
)
from .core import (
    FormattedMessages,
    FormatterConfig,
    HistoryConverter,
    ToolValidityTracker,
)
from .payload import ContentTypes, parse_payload

__all__ = [
    "AgentMessageConverter",
    "ContentTypes",
    "FormattedMessages",
    "FormatterConfig",
    "HistoryConverter",
    "ToolValidityTracker",
    "convert_messages_to_content",
    "format_agent_messages",
    "format_anthropic_artifact_content",
    "format_artifact_payload",
    "load_allowed_tools",
    "parse_payload",
]
