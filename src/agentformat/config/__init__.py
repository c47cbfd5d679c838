"""
Agent configuration utilities.

Usage:
    from agentformat.config import load_allowed_tools

    tools = load_allowed_tools("my_agent")
"""

from agentformat.config.loader import load_allowed_tools, get_config_path

__all__ = ["load_allowed_tools", "get_config_path"]
