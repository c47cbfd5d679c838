"""Tests for AgentMessageConverter and format_agent_messages."""

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

from agentformat.converters.langchain import AgentMessageConverter, format_agent_messages
from tests.fixtures import (
    agent_update,
    assistant,
    error,
    system,
    text,
    think,
    tool_call,
    user,
)


class TestBasicMessages:
    """Tests for user, system and plain assistant entries."""

    def test_user_and_assistant_text(self):
        """User text becomes HumanMessage, assistant text becomes AIMessage."""
        result = format_agent_messages(
            [user("Hello"), assistant(text("Hi there"))]
        )

        assert len(result.messages) == 2
        assert isinstance(result.messages[0], HumanMessage)
        assert result.messages[0].content == "Hello"
        assert isinstance(result.messages[1], AIMessage)
        assert result.messages[1].content == [{"type": "text", "text": "Hi there"}]

    def test_system_message(self):
        result = format_agent_messages([system("You are helpful.")])

        assert isinstance(result.messages[0], SystemMessage)
        assert result.messages[0].content == "You are helpful."

    def test_unknown_role_maps_to_system(self):
        result = format_agent_messages([{"role": "tool", "content": "raw"}])

        assert isinstance(result.messages[0], SystemMessage)

    def test_user_list_content_drops_traces(self):
        result = format_agent_messages(
            [user([text("question"), think("hidden"), error("oops")])]
        )

        assert result.messages[0].content == [{"type": "text", "text": "question"}]

    def test_no_map_returns_none(self):
        result = format_agent_messages([user("Hello")])

        assert result.index_token_count_map is None

    def test_empty_payload(self):
        result = format_agent_messages([], {})

        assert result.messages == []
        assert result.index_token_count_map == {}

    def test_empty_content_array_produces_nothing(self):
        result = format_agent_messages([assistant()], {0: 10})

        assert result.messages == []
        assert result.index_token_count_map == {}

    def test_scalar_tool_call_ids_does_not_raise(self):
        """A malformed tool_call_ids value still formats and keeps the count."""
        result = format_agent_messages(
            [assistant({"type": "text", "text": "x", "tool_call_ids": 5})], {0: 10}
        )

        assert len(result.messages) == 1
        assert result.messages[0].content == "x"
        assert result.index_token_count_map == {0: 10}

    def test_does_not_mutate_payload(self):
        payload = [assistant(text("a", ["t1"]), tool_call(id="t1"))]
        before = repr(payload)

        format_agent_messages(payload, {0: 10})

        assert repr(payload) == before


class TestToolCalls:
    """Tests for tool call expansion and healing."""

    def test_tool_call_expands_to_ai_and_tool(self, weather_payload):
        result = format_agent_messages(weather_payload)
        messages = result.messages

        assert len(messages) == 3
        ai, tool = messages[1], messages[2]
        assert ai.content == "Let me check that for you."
        assert len(ai.tool_calls) == 1
        assert ai.tool_calls[0]["id"] == "weather_1"
        assert ai.tool_calls[0]["name"] == "check_weather"
        assert ai.tool_calls[0]["args"] == {"location": "New York"}
        assert isinstance(tool, ToolMessage)
        assert tool.tool_call_id == "weather_1"
        assert tool.name == "check_weather"
        assert tool.content == "Sunny, 75°F"

    def test_missing_tool_call_property_is_ignored(self):
        result = format_agent_messages(
            [assistant(text("Checking..."), {"type": "tool_call"})]
        )

        assert len(result.messages) == 1
        assert result.messages[0].content == [{"type": "text", "text": "Checking..."}]

    def test_missing_name_with_output_is_kept(self):
        result = format_agent_messages(
            [assistant(tool_call(id="x1", name=None, output="result"))]
        )

        assert len(result.messages) == 2
        assert result.messages[0].tool_calls[0]["name"] == ""
        assert result.messages[1].content == "result"

    def test_orphan_call_is_healed(self):
        """A call with no owning text gets a synthetic empty AIMessage."""
        result = format_agent_messages(
            [assistant(tool_call(id="orphan", name="search", output="found"))]
        )
        ai, tool = result.messages

        assert ai.content == ""
        assert [tc["id"] for tc in ai.tool_calls] == ["orphan"]
        assert tool.tool_call_id == "orphan"

    def test_non_json_args_are_wrapped(self):
        result = format_agent_messages(
            [assistant(text("run", ["a1"]), tool_call(id="a1", args="non-json-string"))]
        )

        assert result.messages[0].tool_calls[0]["args"] == {"input": "non-json-string"}

    def test_multi_step_turn(self):
        """Alternating text and tool calls keep their interleaving."""
        result = format_agent_messages(
            [
                assistant(
                    text("Let me search.", ["s1"]),
                    tool_call(id="s1", name="search", output="3 results"),
                    text("Now analyzing.", ["a1"]),
                    tool_call(id="a1", name="analyze", output="done"),
                    text("Here's your answer."),
                )
            ]
        )
        messages = result.messages

        assert [type(m) for m in messages] == [
            AIMessage,
            ToolMessage,
            AIMessage,
            ToolMessage,
            AIMessage,
        ]
        assert messages[4].content == [{"type": "text", "text": "Here's your answer."}]

    def test_degenerate_call_is_skipped(self):
        result = format_agent_messages(
            [
                user("Hi"),
                assistant(text("Hello"), tool_call(id="d1", name="", output="")),
            ]
        )

        assert len(result.messages) == 2

    def test_think_collapses_text(self):
        result = format_agent_messages(
            [assistant(think("planning"), text("a"), text("b"))]
        )

        assert result.messages[0].content == "a\nb"

    def test_heals_with_thinking_content(self):
        """Reasoning before an orphaned call still yields a healed structure."""
        result = format_agent_messages(
            [
                user("Find it"),
                assistant(
                    think("Let me look this up."),
                    tool_call(id="t1", name="search", output="found"),
                    text("Found it."),
                ),
            ],
            {0: 3, 1: 60},
        )
        messages = result.messages

        assert [type(m) for m in messages] == [
            HumanMessage,
            AIMessage,
            ToolMessage,
            AIMessage,
        ]
        assert messages[1].content == ""
        assert messages[3].content == "Found it."
        assert sum(result.index_token_count_map[i] for i in (1, 2, 3)) == 60

    def test_error_keeps_list(self):
        result = format_agent_messages([assistant(error("boom"), text("a"))])

        assert result.messages[0].content == [{"type": "text", "text": "a"}]

    def test_only_traces_produce_no_messages(self):
        result = format_agent_messages(
            [assistant(think("x"), error("y"), agent_update())], {0: 50}
        )

        assert result.messages == []
        assert result.index_token_count_map == {}

    def test_converter_is_reusable(self, weather_payload):
        converter = AgentMessageConverter()

        first = converter.convert(weather_payload)
        second = converter.convert(weather_payload)

        assert len(first) == len(second) == 3


class TestToolAllowList:
    """Tests for allow-list enforcement and tool_search discovery."""

    def test_rejected_call_is_inlined(self):
        result = format_agent_messages(
            [
                assistant(
                    text("Two tools.", ["c1", "u1"]),
                    tool_call(id="c1", name="calculator", args='{"a":2}', output="4"),
                    tool_call(id="u1", name="some_unknown_tool", output="secret"),
                )
            ],
            tools={"calculator"},
        )
        ai = result.messages[0]

        assert len(result.messages) == 2
        assert [tc["name"] for tc in ai.tool_calls] == ["calculator"]
        assert "some_unknown_tool" in ai.content
        assert "secret" in ai.content

    def test_discovery_across_entries(self, tool_search_payload):
        result = format_agent_messages(tool_search_payload, tools={"tool_search"})
        messages = result.messages

        assert len(messages) == 5
        assert messages[3].tool_calls[0]["name"] == "list_commits"
        assert isinstance(messages[4], ToolMessage)

    def test_discovery_within_entry(self):
        result = format_agent_messages(
            [
                assistant(
                    text("Searching.", ["ts"]),
                    tool_call(
                        id="ts",
                        name="tool_search",
                        output='{"tools": [{"name": "list_commits"}]}',
                    ),
                    text("Using it.", ["lc"]),
                    tool_call(id="lc", name="list_commits", output="[]"),
                )
            ],
            tools={"tool_search"},
        )

        assert len(result.messages) == 4
        assert result.messages[2].tool_calls[0]["name"] == "list_commits"

    def test_undiscovered_tool_is_rejected(self, tool_search_payload):
        tool_search_payload[1]["content"][1]["tool_call"]["output"] = '{"tools": []}'

        result = format_agent_messages(tool_search_payload, tools={"tool_search"})
        last = result.messages[-1]

        assert len(result.messages) == 4
        assert isinstance(last, AIMessage)
        assert last.tool_calls == []
        assert "list_commits" in last.content

    def test_discovery_does_not_leak_between_calls(self, tool_search_payload):
        converter = AgentMessageConverter(tools={"tool_search"})
        converter.format(tool_search_payload)

        result = converter.format([tool_search_payload[2]])

        assert len(result.messages) == 1
        assert result.messages[0].tool_calls == []


class TestTokenRedistribution:
    """Tests for index_token_count_map handling."""

    def test_single_message_keeps_count(self):
        result = format_agent_messages([user("Hello")], {0: 7})

        assert result.index_token_count_map == {0: 7}

    def test_counts_are_conserved(self, weather_payload):
        result = format_agent_messages(weather_payload, {0: 10, 1: 101})
        token_map = result.index_token_count_map

        assert token_map[0] == 10
        assert token_map[1] + token_map[2] == 101
        assert all(isinstance(v, int) for v in token_map.values())

    def test_large_tool_result_gets_most_tokens(self):
        result = format_agent_messages(
            [
                assistant(
                    text("Snapshot:", ["s1"]),
                    tool_call(id="s1", name="snapshot", output="x" * 10000),
                )
            ],
            {0: 5000},
        )
        token_map = result.index_token_count_map

        assert token_map[0] + token_map[1] == 5000
        assert token_map[1] > 4900

    def test_none_count_becomes_zero(self):
        result = format_agent_messages([user("a"), user("b")], {0: None, 1: 4})

        assert result.index_token_count_map == {0: 0, 1: 4}

    def test_sparse_map_skips_missing_entries(self):
        result = format_agent_messages(
            [user("a"), user("b"), user("c")], {0: 10, 2: 30}
        )

        assert result.index_token_count_map == {0: 10, 2: 30}

    def test_out_of_range_indices_ignored(self):
        result = format_agent_messages([user("a")], {0: 5, 3: 100})

        assert result.index_token_count_map == {0: 5}

    def test_keys_follow_output_positions(self):
        result = format_agent_messages(
            [
                assistant(text("a", ["t1"]), tool_call(id="t1", output="r")),
                user("next"),
            ],
            {0: 10, 1: 3},
        )

        assert set(result.index_token_count_map) == {0, 1, 2}
        assert result.index_token_count_map[2] == 3

    def test_mixed_null_and_unknown_parts(self):
        result = format_agent_messages(
            [assistant(None, {"type": "unknown_type"}, text("kept"))], {0: 25}
        )

        assert len(result.messages) == 1
        assert result.index_token_count_map == {0: 25}

    def test_string_keys_are_accepted(self):
        result = format_agent_messages([user("a")], {"0": 9})

        assert result.index_token_count_map == {0: 9}
