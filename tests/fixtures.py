"""Payload factories for unit tests.

Builds raw payload entries and content parts in the shape upstream
producers emit them, so tests read like real conversations.
"""

from typing import Any, Dict, List, Optional

from agentformat.payload import ContentTypes


def text(value: str, tool_call_ids: Optional[List[str]] = None) -> Dict[str, Any]:
    """Create a text part, optionally owning tool call ids."""
    part: Dict[str, Any] = {"type": ContentTypes.TEXT, ContentTypes.TEXT: value}
    if tool_call_ids is not None:
        part["tool_call_ids"] = tool_call_ids
    return part


def think(value: str) -> Dict[str, Any]:
    """Create a reasoning part."""
    return {"type": ContentTypes.THINK, ContentTypes.THINK: value}


def error(value: str) -> Dict[str, Any]:
    """Create an error part."""
    return {"type": ContentTypes.ERROR, ContentTypes.ERROR: value}


def agent_update(value: str = "Working on it...") -> Dict[str, Any]:
    """Create an agent update part."""
    return {"type": ContentTypes.AGENT_UPDATE, "update": value}


def tool_call(
    id: Optional[str] = "call_1",
    name: Optional[str] = "search",
    args: Optional[str] = "{}",
    output: Optional[str] = "ok",
) -> Dict[str, Any]:
    """Create a tool call part. Pass None to omit a field."""
    call: Dict[str, Any] = {}
    if id is not None:
        call["id"] = id
    if name is not None:
        call["name"] = name
    if args is not None:
        call["args"] = args
    call["output"] = output
    return {"type": ContentTypes.TOOL_CALL, "tool_call": call}


def user(content: Any) -> Dict[str, Any]:
    """Create a user entry."""
    return {"role": "user", "content": content}


def assistant(*parts: Any) -> Dict[str, Any]:
    """Create an assistant entry from content parts."""
    return {"role": "assistant", "content": list(parts)}


def system(content: Any) -> Dict[str, Any]:
    """Create a system entry."""
    return {"role": "system", "content": content}
