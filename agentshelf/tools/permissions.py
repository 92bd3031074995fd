"""Parsing and matching of ``allowed-tools`` declarations."""
import logging
import re
import shlex
from dataclasses import dataclass
from fnmatch import fnmatch
from typing import Any

logger = logging.getLogger(__name__)

# Built-in tools of the host runtime
KNOWN_TOOLS: frozenset[str] = frozenset({
    "Bash",
    "BashOutput",
    "Edit",
    "ExitPlanMode",
    "Glob",
    "Grep",
    "KillShell",
    "LS",
    "MultiEdit",
    "NotebookEdit",
    "NotebookRead",
    "Read",
    "SlashCommand",
    "Skill",
    "Task",
    "TodoWrite",
    "WebFetch",
    "WebSearch",
    "Write",
})

RULE_PATTERN = re.compile(r"^([\w.\-]+)(?:\((.*)\))?$", re.DOTALL)

# Characters shlex groups into operator tokens
PUNCTUATION_CHARS = frozenset("();<>|&")
# Operator tokens that redirect output rather than chain commands
REDIRECTIONS = frozenset({">&", "<&", "&>", "&>>"})

# Command substitution and process substitution run nested commands
SUBSTITUTION_PATTERN = re.compile(r"\$\(|`|[<>]\(")


@dataclass(frozen=True)
class ToolRule:
    """One entry of an allowed-tools list, e.g. ``Bash(git add:*)``."""

    tool: str
    specifier: str | None = None

    @classmethod
    def from_string(cls, entry: str) -> "ToolRule":
        """Parse a single rule.

        Raises:
            ValueError: Entry is not ``Tool`` or ``Tool(specifier)``.
        """
        entry = entry.strip()
        match = RULE_PATTERN.match(entry)
        if not match:
            raise ValueError(f"Invalid tool rule: {entry!r}")
        tool, specifier = match.groups()
        if specifier is not None:
            specifier = specifier.strip() or None
        return cls(tool=tool, specifier=specifier)

    @property
    def is_known(self) -> bool:
        """Whether the rule names a built-in or MCP tool."""
        return self.tool in KNOWN_TOOLS or self.tool.startswith("mcp__")

    @property
    def is_prefix(self) -> bool:
        """Whether the specifier grants a command prefix rather than one command."""
        return self.specifier is not None and self.specifier.endswith("*")

    @property
    def command_prefix(self) -> str | None:
        """Command text granted by a Bash rule, without the wildcard suffix."""
        if self.specifier is None:
            return None
        spec = self.specifier
        if spec.endswith(":*"):
            spec = spec[:-2]
        elif spec.endswith("*"):
            spec = spec[:-1]
        return _normalize(spec)

    def matches(self, tool: str, argument: str | None = None) -> bool:
        """Check whether this rule permits a tool use.

        Args:
            tool: Tool name.
            argument: Command line for Bash, path for file tools.

        Returns:
            True if the use is permitted.
        """
        if tool != self.tool:
            return False
        if self.specifier is None:
            return True
        if argument is None:
            return False

        if tool == "Bash":
            command = _normalize(argument)
            prefix = self.command_prefix or ""
            if not self.is_prefix:
                return command == prefix
            return command == prefix or command.startswith(prefix + " ")

        return fnmatch(argument, self.specifier)

    def __str__(self) -> str:
        if self.specifier is None:
            return self.tool
        return f"{self.tool}({self.specifier})"


def _normalize(command: str) -> str:
    """Collapse whitespace in a command line."""
    return " ".join(command.split())


def _split_entries(value: str) -> list[str]:
    """Split an allowed-tools string on commas and spaces outside parentheses."""
    entries = []
    current = ""
    depth = 0

    for char in value:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)

        if depth == 0 and (char == "," or char.isspace()):
            if current.strip():
                entries.append(current.strip())
            current = ""
            continue
        current += char

    if current.strip():
        entries.append(current.strip())

    return entries


def parse_allowed_tools(value: Any) -> list[ToolRule]:
    """Parse an allowed-tools frontmatter value.

    Args:
        value: Comma or space separated string, a YAML list, or None.

    Returns:
        Parsed rules in declaration order. Unparseable entries are logged
        and skipped.
    """
    if value is None:
        return []

    if isinstance(value, str):
        raw_entries = _split_entries(value)
    elif isinstance(value, (list, tuple)):
        raw_entries = []
        for item in value:
            raw_entries.extend(_split_entries(str(item)))
    else:
        raise ValueError(
            f"allowed-tools must be a string or list, got {type(value).__name__}"
        )

    rules = []
    for entry in raw_entries:
        try:
            rules.append(ToolRule.from_string(entry))
        except ValueError as e:
            logger.warning(f"Skipping tool rule: {e}")
    return rules


def _is_control_operator(token: str) -> bool:
    """Whether a token chains commands, e.g. ``;``, ``&&``, ``|`` or ``&``."""
    if not token or not set(token) <= PUNCTUATION_CHARS or token in REDIRECTIONS:
        return False
    return bool(set(token) & {";", "|", "&"})


def split_shell_command(command: str) -> list[str]:
    """Split a command line into the separate commands it chains.

    Quoted text stays inside its command. Redirections such as ``2>&1``
    are not separators.

    Raises:
        ValueError: Quotes are not closed.
    """
    lexer = shlex.shlex(command, posix=True, punctuation_chars=True)
    lexer.whitespace_split = True
    lexer.commenters = ""

    parts = []
    tokens: list[str] = []
    for token in lexer:
        if _is_control_operator(token):
            if tokens:
                parts.append(" ".join(tokens))
            tokens = []
            continue
        tokens.append(token)
    if tokens:
        parts.append(" ".join(tokens))
    return parts


def is_command_allowed(rules: list[ToolRule], command: str) -> bool:
    """Check whether Bash rules permit every command in a command line.

    Chained commands (``a && b``, ``a | b``, ``a & b``) must each be
    permitted. Command lines using command or process substitution are
    only permitted by an unrestricted ``Bash`` rule.
    """
    if any(rule.tool == "Bash" and rule.specifier is None for rule in rules):
        return bool(command.strip())
    if SUBSTITUTION_PATTERN.search(command):
        return False
    try:
        parts = split_shell_command(command)
    except ValueError:
        return False
    if not parts:
        return False
    return all(
        any(rule.matches("Bash", part) for rule in rules)
        for part in parts
    )
