"""Patterns for shell commands that should never run unattended."""

# Default patterns (must be lowercase)
DANGEROUS_PATTERNS: list[str] = [
    "rm -rf",
    "rm -r /",
    "sudo rm",
    "sudo",
    "git push --force",
    "git push -f",
    "git reset --hard",
    "chmod 777",
    "chmod -r 777",
    "> /dev/sd",
    "mkfs.",
    "dd if=",
    ":(){:|:&};:",  # Fork bomb
    "wget | sh",
    "curl | sh",
]


def is_dangerous_command(
    command: str, patterns: list[str] | None = None
) -> bool:
    """Check if command matches dangerous patterns.

    Args:
        command: The command to check.
        patterns: Custom patterns to check against. If None, uses DANGEROUS_PATTERNS.

    Returns:
        True if command matches any dangerous pattern.
    """
    check_patterns = patterns if patterns is not None else DANGEROUS_PATTERNS
    command_lower = command.lower()
    return any(pattern.lower() in command_lower for pattern in check_patterns)


def find_matched_pattern(
    command: str, patterns: list[str] | None = None
) -> str:
    """Find which pattern matched the command."""
    check_patterns = patterns if patterns is not None else DANGEROUS_PATTERNS
    command_lower = command.lower()
    return next(
        (p for p in check_patterns if p.lower() in command_lower),
        "dangerous pattern",
    )
