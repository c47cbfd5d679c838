"""
Tool allow-list configuration utilities.

This module loads the tool names an agent may call from a YAML
configuration file at the project root. The loaded set is passed to
`format_agent_messages(..., tools=...)`.
"""

import logging
import os
import yaml
from pathlib import Path
from typing import Optional, Set

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    """
    Get the path to the agent configuration file.

    Looks for agent_config.yaml in the current working directory (project root).
    """
    return Path(os.getcwd()) / "agent_config.yaml"


def load_allowed_tools(agent_key: str) -> Optional[Set[str]]:
    """
    Load an agent's tool allow-list from YAML file at project root.

    The file maps agent keys to settings:

        research_agent:
          tools:
            - tool_search
            - calculator

    Args:
        agent_key: The key identifying the agent in the config file

    Returns:
        Set of allowed tool names, or None when the agent has no `tools`
        entry (every tool is allowed)

    Raises:
        FileNotFoundError: If agent_config.yaml doesn't exist
        ValueError: If the agent is missing or `tools` is not a list of names
    """
    config_path = get_config_path()
    logger.debug(f"Loading config from: {config_path}")

    if not config_path.exists():
        raise FileNotFoundError(
            f"agent_config.yaml not found at {config_path}. "
            "Copy agent_config.yaml.example to agent_config.yaml and configure your agents."
        )

    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}

        agent_config = config.get(agent_key)

        if agent_config is None:
            raise ValueError(
                f"Agent '{agent_key}' not found in {config_path}. "
                f"Please add the agent configuration."
            )

        if not isinstance(agent_config, dict) or "tools" not in agent_config:
            logger.debug(f"No tool allow-list for '{agent_key}', all tools allowed")
            return None

        tools = agent_config["tools"] or []
        if not isinstance(tools, list):
            raise ValueError(
                f"'tools' for agent '{agent_key}' must be a list of tool names"
            )

        invalid = [t for t in tools if not isinstance(t, str) or not t]
        if invalid:
            raise ValueError(
                f"Invalid tool names for agent '{agent_key}': {invalid}. "
                f"Each entry in 'tools' must be a non-empty string"
            )

        return set(tools)
    except ValueError:
        raise
    except Exception as e:
        raise RuntimeError(f"Error loading agent config: {e}")
