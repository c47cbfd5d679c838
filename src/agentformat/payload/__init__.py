"""
Payload parsing for agent conversations.

The main entry point is `parse_payload()` which classifies raw payload
entries into typed content parts. The LangChain converter then expands the
classified entries into chat messages.

Example:
    from agentformat.payload import parse_payload

    entries = parse_payload(raw_payload)
    for entry in entries:
        print(entry.role, [part.type for part in entry.parts])
"""

from .parser import (
    parse_content,
    parse_entry,
    parse_payload,
    parse_tool_call,
    parse_tool_call_ids,
)
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

__all__ = [
    "parse_payload",
    "parse_entry",
    "parse_content",
    "parse_tool_call",
    "parse_tool_call_ids",
    "ContentTypes",
    "ContentPart",
    "PayloadEntry",
    "RawToolCall",
    "TextPart",
    "ThinkPart",
    "ErrorPart",
    "ToolCallPart",
    "AgentUpdatePart",
    "UnknownPart",
]
