"""Built-in payload converters."""

from agentformat.converters.content import (
    convert_messages_to_content,
    find_last_index,
    format_anthropic_artifact_content,
    format_artifact_payload,
)
from agentformat.converters.langchain import (
    AgentMessageConverter,
    LangChainMessages,
    format_agent_messages,
)

__all__ = [
    "AgentMessageConverter",
    "LangChainMessages",
    "format_agent_messages",
    "convert_messages_to_content",
    "find_last_index",
    "format_anthropic_artifact_content",
    "format_artifact_payload",
]
