"""Document validation."""
from .report import ERROR, WARNING, Issue, ValidationReport
from .checks import validate_command, validate_path, validate_skill

__all__ = [
    "ERROR",
    "WARNING",
    "Issue",
    "ValidationReport",
    "validate_command",
    "validate_path",
    "validate_skill",
]
