"""Skill registry with trigger-text lookup."""
import logging
import re
from pathlib import Path

from agentshelf.config import Config

from .discovery import scan_skills
from .models import SkillDocument

logger = logging.getLogger(__name__)

WORD_PATTERN = re.compile(r"[a-z0-9]+")

STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "how",
    "i", "in", "is", "it", "me", "my", "of", "on", "or", "so", "that",
    "the", "this", "to", "use", "user", "when", "with", "you", "your",
})


def _words(text: str) -> set[str]:
    return {w for w in WORD_PATTERN.findall(text.lower()) if w not in STOP_WORDS}


class SkillRegistry:
    """Stores discovered skills and matches them against tasks."""

    def __init__(self, config: Config | None = None):
        self._config = config
        self._skills: dict[str, SkillDocument] = {}

    @property
    def skills(self) -> list[SkillDocument]:
        """Get all registered skills."""
        return list(self._skills.values())

    def add(self, skill: SkillDocument) -> None:
        self._skills[skill.qualified_name] = skill

    def get(self, name: str) -> SkillDocument | None:
        """Get skill by qualified name."""
        return self._skills.get(name)

    def refresh(self, project_path: str | Path | None = None) -> int:
        """Rescan skill directories. Returns number of skills loaded."""
        if project_path is None and self._config is not None:
            project_path = self._config.project_path

        self._skills.clear()
        for skill in scan_skills(project_path, config=self._config):
            self.add(skill)

        logger.info(f"Loaded {len(self._skills)} skills")
        return len(self._skills)

    def find(self, query: str, limit: int = 5) -> list[SkillDocument]:
        """Rank skills by how well their name and trigger text match a task.

        Name words weigh double. Skills sharing no words with the query are
        not returned.
        """
        query_words = _words(query)
        if not query_words:
            return []

        scored = []
        for skill in self._skills.values():
            name_words = _words(skill.name.replace("-", " "))
            score = 2 * len(query_words & name_words)
            score += len(query_words & _words(skill.description))
            if score:
                scored.append((score, skill))

        scored.sort(key=lambda item: (-item[0], item[1].qualified_name))
        return [skill for _, skill in scored[:limit]]
