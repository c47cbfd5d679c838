"""Provider-specific content normalization."""

from agentformat.providers.normalizer import (
    ALLOWED_TYPES_BY_PROVIDER,
    Providers,
    allowed_types,
    format_anthropic_message,
    modify_content,
    modify_delta_properties,
    reduce_blocks,
)

__all__ = [
    "ALLOWED_TYPES_BY_PROVIDER",
    "Providers",
    "allowed_types",
    "format_anthropic_message",
    "modify_content",
    "modify_delta_properties",
    "reduce_blocks",
]
