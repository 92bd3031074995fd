"""Data models for skill documents."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from agentshelf.tools import ToolRule

SKILL_FILENAME = "SKILL.md"


@dataclass
class SkillReference:
    """A relative link from SKILL.md to a reference sub-document."""

    label: str
    target: str
    path: Path
    exists: bool


@dataclass
class SkillDocument:
    """A skill from a ``<skill>/SKILL.md`` file."""

    name: str
    description: str
    body: str
    path: Path
    allowed_tools: list[ToolRule] = field(default_factory=list)
    license: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source: str = "personal"
    references: list[SkillReference] = field(default_factory=list)
    namespace: str | None = None
    declared_name: str | None = None  # name as written in frontmatter

    @property
    def directory(self) -> Path:
        return self.path.parent

    @property
    def qualified_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}:{self.name}"
        return self.name

    @property
    def broken_references(self) -> list[SkillReference]:
        return [ref for ref in self.references if not ref.exists]
