"""
Pytest fixtures for agentformat tests.

Provides small ready-made payloads shared across test modules.
"""

import pytest

from tests.fixtures import assistant, text, tool_call, user


@pytest.fixture
def weather_payload():
    """User question followed by an assistant turn with one tool call."""
    return [
        user("What's the weather?"),
        assistant(
            text("Let me check that for you.", tool_call_ids=["weather_1"]),
            tool_call(
                id="weather_1",
                name="check_weather",
                args='{"location":"New York"}',
                output="Sunny, 75°F",
            ),
        ),
    ]


@pytest.fixture
def tool_search_payload():
    """Assistant discovers list_commits via tool_search, then calls it later."""
    return [
        user("Find me a tool to list commits and use it"),
        assistant(
            text("Let me search for that tool.", tool_call_ids=["ts_1"]),
            tool_call(
                id="ts_1",
                name="tool_search",
                args='{"query":"commits"}',
                output='{"found": 1, "tools": [{"name": "list_commits"}]}',
            ),
        ),
        assistant(
            text("Now using the discovered tool.", tool_call_ids=["lc_1"]),
            tool_call(
                id="lc_1",
                name="list_commits",
                args='{"repo":"test"}',
                output='[{"sha":"abc123"}]',
            ),
        ),
    ]
