"""Tool allow-list tracking with tool_search discovery. Sync, unit-testable."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, ValidationError

from .types import TOOL_SEARCH_NAME

logger = logging.getLogger(__name__)


class ToolSearchOutput(BaseModel):
    """Output of a tool_search call (observed shape, extra fields ignored)."""

    model_config = ConfigDict(extra="allow")

    tools: list[Any]

    def tool_names(self) -> list[str]:
        """Names of listed tools that carry a non-empty string `name`."""
        names: list[str] = []
        for tool in self.tools:
            if isinstance(tool, dict):
                name = tool.get("name")
                if isinstance(name, str) and name:
                    names.append(name)
        return names


class ToolValidityTracker:
    """
    Tracks which tool names may appear as structured tool calls.

    Used by the expansion engine to:
    - Accept every call when no allow-list was supplied (unrestricted)
    - Reject calls to tools outside the allow-list
    - Grow the allow-list from tool_search results, never shrinking it

    One tracker lives for exactly one formatting call.
    """

    def __init__(
        self,
        tools: Iterable[str] | None = None,
        tool_search_name: str = TOOL_SEARCH_NAME,
    ):
        self._restricted = tools is not None
        self._valid: set[str] = set(tools) if tools is not None else set()
        self._discovered: set[str] = set()
        self._tool_search_name = tool_search_name

    @property
    def is_restricted(self) -> bool:
        """False when no allow-list was supplied."""
        return self._restricted

    @property
    def valid_tools(self) -> frozenset[str]:
        """Current allow-list (copy)."""
        return frozenset(self._valid)

    @property
    def discovered_tools(self) -> frozenset[str]:
        """Tools added by tool_search discovery (copy)."""
        return frozenset(self._discovered)

    def is_allowed(self, name: str | None) -> bool:
        """
        Check whether a call to `name` is kept as a structured tool call.

        Nameless calls are never rejected; only a present name that is not in
        the allow-list is.
        """
        if not self._restricted or not name:
            return True
        return name in self._valid

    def observe(self, name: str | None, output: str | None) -> list[str]:
        """
        Record an accepted call and run discovery if it was a tool_search.

        Returns:
            Names newly added to the allow-list (empty when nothing changed)
        """
        if name != self._tool_search_name or not output:
            return []

        try:
            result = ToolSearchOutput.model_validate_json(output)
        except ValidationError:
            logger.debug(f"{self._tool_search_name} output is not a tool listing")
            return []

        added: list[str] = []
        for tool_name in result.tool_names():
            if tool_name not in self._valid:
                self._valid.add(tool_name)
                added.append(tool_name)
            self._discovered.add(tool_name)

        if added:
            logger.debug(f"Discovered tools via {self._tool_search_name}: {added}")
        return added
