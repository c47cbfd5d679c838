"""Core protocols for pluggable payload converters."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class HistoryConverter(Protocol[T]):
    """
    Converts a raw agent payload to framework-specific format.

    Users implement this for custom frameworks.
    agentformat ships a built-in converter for LangChain.
    """

    def convert(self, raw: Sequence[Mapping[str, Any]]) -> T:
        """
        Convert a raw agent payload to framework format.

        Args:
            raw: Payload entries. Each dict has: role, content
                 (a string or a list of typed content parts)

        Returns:
            Framework-specific history type
        """
        ...
