"""
Typed content parts for agent payload entries.

Payload entries arrive as loosely shaped dicts. The parser classifies every
content item into exactly one of the variants below, so the rest of the
pipeline can dispatch on type instead of sniffing keys:

    Payload Entry → Content Parts → LangChain Messages
    (dict)          (list[ContentPart])   (Human/AI/Tool/System)

Each variant keeps the raw dict it was parsed from. Surviving text parts are
emitted with their original shape when a narrative segment stays in list form.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal


class ContentTypes:
    """Content part type tags used in agent payloads."""

    TEXT = "text"
    THINK = "think"
    ERROR = "error"
    TOOL_CALL = "tool_call"
    AGENT_UPDATE = "agent_update"
    IMAGE_URL = "image_url"


@dataclass
class RawToolCall:
    """
    A tool invocation as recorded in the payload.

    `args` is the serialized argument string, which may or may not be JSON.
    `output` is the tool result, if the tool ran.
    """

    id: str | None
    name: str | None
    args: str
    output: str | None = None

    @property
    def is_degenerate(self) -> bool:
        """True when the call has neither a name nor an output."""
        return not self.name and not self.output


@dataclass
class TextPart:
    """Narrative text. `tool_call_ids` marks it as the owner of those calls."""

    type: Literal["text"] = field(default="text", init=False)
    text: str
    tool_call_ids: list[str] | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def owns_tool_calls(self) -> bool:
        return self.tool_call_ids is not None


@dataclass
class ThinkPart:
    """Reasoning trace. Never emitted."""

    type: Literal["think"] = field(default="think", init=False)
    think: str
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ErrorPart:
    """Error trace. Never emitted."""

    type: Literal["error"] = field(default="error", init=False)
    error: str
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ToolCallPart:
    """A tool invocation part. `tool_call` is None when the part is malformed."""

    type: Literal["tool_call"] = field(default="tool_call", init=False)
    tool_call: RawToolCall | None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class AgentUpdatePart:
    """Agent progress update. Dropped silently."""

    type: Literal["agent_update"] = field(default="agent_update", init=False)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class UnknownPart:
    """Any part with an unrecognized or missing type tag."""

    type: Literal["unknown"] = field(default="unknown", init=False)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


# Union type for all content parts
ContentPart = (
    TextPart | ThinkPart | ErrorPart | ToolCallPart | AgentUpdatePart | UnknownPart
)


@dataclass
class PayloadEntry:
    """One role-tagged turn of the payload, with its content classified."""

    index: int
    role: str
    parts: list[ContentPart]
    raw_content: str | list[Any]

    @property
    def has_reasoning(self) -> bool:
        """True when the entry carried at least one THINK part."""
        return any(isinstance(part, ThinkPart) for part in self.parts)
