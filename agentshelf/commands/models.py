"""Data models for command documents."""
from dataclasses import dataclass, field
from pathlib import Path

from agentshelf.tools import ToolRule

from .placeholders import find_file_references, find_shell_invocations


@dataclass
class CommandDocument:
    """A slash command from a ``commands/*.md`` file."""

    name: str
    description: str
    prompt: str
    allowed_tools: list[ToolRule] = field(default_factory=list)
    argument_hint: str | None = None
    model: str | None = None
    disable_model_invocation: bool = False
    needs_args: bool = False
    source: str = "personal"
    path: Path | None = None
    namespace: str | None = None
    has_description: bool = True  # False when derived from the body

    @property
    def qualified_name(self) -> str:
        """Name including namespace, e.g. ``frontend:component``."""
        if self.namespace:
            return f"{self.namespace}:{self.name}"
        return self.name

    @property
    def shell_invocations(self) -> list[str]:
        return find_shell_invocations(self.prompt)

    @property
    def file_references(self) -> list[str]:
        return find_file_references(self.prompt)
