"""Command documents."""
from .models import CommandDocument
from .discovery import parse_command_file, scan_commands, scan_directory
from .rendering import RenderedCommand, render_command, substitute_args
from .registry import CommandRegistry, menu_name

__all__ = [
    "CommandDocument",
    "parse_command_file",
    "scan_commands",
    "scan_directory",
    "RenderedCommand",
    "render_command",
    "substitute_args",
    "CommandRegistry",
    "menu_name",
]
