"""Reference sub-documents linked from a skill."""
import logging
from pathlib import Path

from agentshelf.documents import extract_links, is_local_target
from agentshelf.exceptions import DocumentError, DocumentNotFoundError

from .models import SkillDocument, SkillReference

logger = logging.getLogger(__name__)


def _strip_fragment(target: str) -> str:
    return target.split("#", 1)[0].split("?", 1)[0]


def find_references(body: str, directory: Path) -> list[SkillReference]:
    """Resolve the local links of a skill body against its directory.

    Each distinct target is returned once, in order of first appearance.
    """
    references = []
    seen: set[str] = set()

    for label, target in extract_links(body):
        if not is_local_target(target):
            continue
        relative = _strip_fragment(target)
        if not relative or relative in seen:
            continue
        seen.add(relative)
        path = directory / relative
        references.append(
            SkillReference(label=label, target=relative, path=path, exists=path.exists())
        )

    return references


def load_reference(skill: SkillDocument, target: str) -> str:
    """Read a reference sub-document of a skill.

    Args:
        skill: Skill that owns the reference.
        target: Path relative to the skill directory.

    Returns:
        The file's text.

    Raises:
        DocumentError: Target escapes the skill directory or is unreadable.
        DocumentNotFoundError: Target does not exist.
    """
    directory = skill.directory.resolve()
    path = (directory / _strip_fragment(target)).resolve()

    if not path.is_relative_to(directory):
        raise DocumentError(
            f"Reference '{target}' is outside skill '{skill.name}'"
        )
    if not path.is_file():
        raise DocumentNotFoundError(
            f"Reference '{target}' not found in skill '{skill.name}'"
        )

    try:
        return path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(f"Cannot read {path}: {e}") from e
