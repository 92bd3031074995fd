"""Skill documents."""
from .models import SKILL_FILENAME, SkillDocument, SkillReference
from .discovery import parse_skill_file, scan_skill_directory, scan_skills
from .references import find_references, load_reference
from .registry import SkillRegistry

__all__ = [
    "SKILL_FILENAME",
    "SkillDocument",
    "SkillReference",
    "parse_skill_file",
    "scan_skill_directory",
    "scan_skills",
    "find_references",
    "load_reference",
    "SkillRegistry",
]
