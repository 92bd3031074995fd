"""Tool permission rules declared by documents."""
from .permissions import (
    KNOWN_TOOLS,
    ToolRule,
    is_command_allowed,
    parse_allowed_tools,
    split_shell_command,
)
from .dangerous import DANGEROUS_PATTERNS, find_matched_pattern, is_dangerous_command

__all__ = [
    "KNOWN_TOOLS",
    "ToolRule",
    "is_command_allowed",
    "parse_allowed_tools",
    "split_shell_command",
    "DANGEROUS_PATTERNS",
    "find_matched_pattern",
    "is_dangerous_command",
]
