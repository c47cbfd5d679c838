"""
Assistant entry segmentation and healing.

An assistant entry is scanned part by part. Each classified part is an event
for a small state machine:

    IDLE       no segment open
    NARRATIVE  collecting plain text parts into one assistant message
    TOOL       an assistant message is collecting tool calls

A text part tagged with `tool_call_ids` opens a TOOL segment that owns those
ids. A plain text part closes any TOOL segment and starts (or extends) a
NARRATIVE run. A tool call nobody owns is healed: the open segment is flushed
and a synthetic assistant message with empty content is opened to host it.

Segments are flushed in the order they were opened, so the emitted messages
follow the order of the content that triggered them.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass, field
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, ToolMessage

from agentformat.payload.parts import (
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

from .tool_registry import ToolValidityTracker
from .types import FormatterConfig

logger = logging.getLogger(__name__)


class SegmentState(enum.Enum):
    IDLE = "idle"
    NARRATIVE = "narrative"
    TOOL = "tool"


def parse_tool_args(args: str) -> dict[str, Any]:
    """
    Parse serialized tool call arguments.

    Empty args become {}. Anything that is not a JSON object is wrapped as
    {"input": <raw string>}.
    """
    if not args.strip():
        return {}
    try:
        parsed = json.loads(args)
    except json.JSONDecodeError:
        logger.debug(f"Tool call args are not JSON, wrapping: {args[:100]}")
        return {"input": args}
    if not isinstance(parsed, dict):
        return {"input": args}
    return parsed


@dataclass
class _AcceptedCall:
    id: str
    name: str
    args: dict[str, Any]
    output: str
    position: int


@dataclass
class _ToolSegment:
    text: str
    declared_ids: list[str] | None  # None when healed
    calls: list[_AcceptedCall] = field(default_factory=list)
    inline: list[str] = field(default_factory=list)
    # id -> first declared position
    _positions: dict[str, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._positions = {}
        for position, call_id in enumerate(self.declared_ids or ()):
            self._positions.setdefault(call_id, position)

    @property
    def healed(self) -> bool:
        return self.declared_ids is None

    def owns(self, call_id: str | None) -> bool:
        if self.healed:
            return True
        return call_id is not None and call_id in self._positions

    def _order_key(self, call: _AcceptedCall) -> tuple[int, int]:
        return self._positions.get(call.id, len(self._positions)), call.position

    def to_messages(self) -> list[BaseMessage]:
        content = "\n".join(text for text in [self.text, *self.inline] if text)
        calls = sorted(self.calls, key=self._order_key)

        messages: list[BaseMessage] = [
            AIMessage(
                content=content,
                tool_calls=[
                    {"id": call.id, "name": call.name, "args": call.args}
                    for call in calls
                ],
            )
        ]
        messages.extend(
            ToolMessage(content=call.output, tool_call_id=call.id, name=call.name)
            for call in calls
        )
        return messages


class EntrySegmenter:
    """
    Expands one assistant entry into AI and tool messages.

    Example:
        segmenter = EntrySegmenter(entry, tracker)
        messages = segmenter.run()
    """

    def __init__(
        self,
        entry: PayloadEntry,
        tracker: ToolValidityTracker,
        config: FormatterConfig | None = None,
    ):
        self._entry = entry
        self._tracker = tracker
        self._config = config or FormatterConfig()
        self._collapse = entry.has_reasoning
        self._messages: list[BaseMessage] = []
        self._narrative: list[TextPart] = []
        self._tool_segment: _ToolSegment | None = None
        self._call_count = 0

    @property
    def state(self) -> SegmentState:
        if self._tool_segment is not None:
            return SegmentState.TOOL
        if self._narrative:
            return SegmentState.NARRATIVE
        return SegmentState.IDLE

    @property
    def messages(self) -> list[BaseMessage]:
        """Messages flushed so far (copy)."""
        return self._messages.copy()

    def run(self) -> list[BaseMessage]:
        """Feed every part of the entry and flush the last segment."""
        for part in self._entry.parts:
            self.feed(part)
        self.finish()
        return self._messages.copy()

    def feed(self, part: ContentPart) -> None:
        """Apply one classified content part to the state machine."""
        if isinstance(part, TextPart):
            if part.owns_tool_calls:
                self._open_tool_segment(part)
            else:
                self._flush_tool_segment()
                self._narrative.append(part)
        elif isinstance(part, ToolCallPart):
            self._handle_tool_call(part)
        elif isinstance(part, (ThinkPart, ErrorPart, AgentUpdatePart, UnknownPart)):
            # Reasoning is tracked per entry; nothing here is ever emitted
            pass

    def finish(self) -> None:
        """Flush whatever segment is still open."""
        self._flush_narrative()
        self._flush_tool_segment()

    # --- transitions ---

    def _open_tool_segment(self, part: TextPart) -> None:
        self._flush_narrative()
        self._flush_tool_segment()
        self._tool_segment = _ToolSegment(
            text=part.text or "",
            declared_ids=list(part.tool_call_ids or []),
        )

    def _handle_tool_call(self, part: ToolCallPart) -> None:
        tool_call = part.tool_call
        if tool_call is None:
            logger.warning(
                f"Entry {self._entry.index}: tool_call part without tool_call, ignoring"
            )
            return
        if tool_call.is_degenerate:
            logger.debug(
                f"Entry {self._entry.index}: skipping tool call {tool_call.id} "
                "with no name and no output"
            )
            return

        if not self._tracker.is_allowed(tool_call.name):
            self._reject(tool_call)
            return

        segment = self._tool_segment
        if segment is None or not segment.owns(tool_call.id):
            segment = self._heal(tool_call)

        self._call_count += 1
        call_id = tool_call.id or f"call_{self._entry.index}_{self._call_count}"
        segment.calls.append(
            _AcceptedCall(
                id=call_id,
                name=tool_call.name or "",
                args=parse_tool_args(tool_call.args),
                output=tool_call.output or "",
                position=self._call_count,
            )
        )
        self._tracker.observe(tool_call.name, tool_call.output)

    def _heal(self, tool_call: RawToolCall) -> _ToolSegment:
        logger.debug(
            f"Entry {self._entry.index}: healing orphaned tool call "
            f"{tool_call.name} ({tool_call.id}) with a synthetic assistant message"
        )
        self._flush_narrative()
        self._flush_tool_segment()
        self._tool_segment = _ToolSegment(text="", declared_ids=None)
        return self._tool_segment

    def _reject(self, tool_call: RawToolCall) -> None:
        logger.debug(
            f"Entry {self._entry.index}: tool {tool_call.name} is not allowed, "
            "inlining call as text"
        )
        text = self._config.render_rejected_call(
            tool_call.name or "", tool_call.args, tool_call.output
        )
        if self._tool_segment is not None:
            self._tool_segment.inline.append(text)
        else:
            self._narrative.append(
                TextPart(text=text, raw={"type": ContentTypes.TEXT, "text": text})
            )

    # --- emission ---

    def _flush_narrative(self) -> None:
        if not self._narrative:
            return
        parts, self._narrative = self._narrative, []

        if self._collapse:
            content: str | list[Any] = "\n".join(p.text for p in parts if p.text)
        else:
            content = [dict(p.raw) for p in parts]
        self._messages.append(AIMessage(content=content))

    def _flush_tool_segment(self) -> None:
        if self._tool_segment is None:
            return
        segment, self._tool_segment = self._tool_segment, None
        self._messages.extend(segment.to_messages())
