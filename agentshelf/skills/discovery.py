"""Discover and parse skill documents."""
import logging
from pathlib import Path

from agentshelf.config import Config, DiscoveryConfig
from agentshelf.documents import split_frontmatter
from agentshelf.exceptions import DocumentError, FrontmatterError
from agentshelf.tools import parse_allowed_tools

from .models import SKILL_FILENAME, SkillDocument
from .references import find_references

logger = logging.getLogger(__name__)

# Frontmatter keys with dedicated fields
RESERVED_KEYS = {"name", "description", "allowed-tools", "license"}


def parse_skill_file(
    path: Path, source: str = "personal", namespace: str | None = None
) -> SkillDocument:
    """Parse a SKILL.md file into a SkillDocument.

    Args:
        path: Path to SKILL.md or to the skill directory.
        source: Where skill came from ("plugin", "personal" or "project").
        namespace: Optional prefix, e.g. the plugin name.

    Returns:
        Parsed SkillDocument. The name falls back to the directory name.

    Raises:
        DocumentError: File is unreadable or its frontmatter is invalid.
    """
    path = Path(path)
    if path.is_dir():
        path = path / SKILL_FILENAME

    try:
        content = path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(f"Cannot read {path}: {e}") from e

    try:
        frontmatter = split_frontmatter(content)
    except FrontmatterError as e:
        raise FrontmatterError(f"{path}: {e}") from e

    data = frontmatter.data
    declared_name = data.get("name")
    if declared_name is not None:
        declared_name = str(declared_name).strip()

    try:
        allowed_tools = parse_allowed_tools(data.get("allowed-tools"))
    except ValueError as e:
        raise DocumentError(f"{path}: {e}") from e

    license_ = data.get("license")

    return SkillDocument(
        name=declared_name or path.parent.name,
        description=str(data.get("description") or "").strip(),
        body=frontmatter.body,
        path=path,
        allowed_tools=allowed_tools,
        license=str(license_) if license_ is not None else None,
        metadata={k: v for k, v in data.items() if k not in RESERVED_KEYS},
        source=source,
        references=find_references(frontmatter.body, path.parent),
        namespace=namespace,
        declared_name=declared_name,
    )


def scan_skill_directory(
    directory: Path, source: str, prefix: str | None = None
) -> list[SkillDocument]:
    """Parse every ``*/SKILL.md`` directly under a skills directory."""
    skills = []
    if not directory.is_dir():
        return skills

    for skill_file in sorted(directory.glob(f"*/{SKILL_FILENAME}")):
        try:
            skills.append(parse_skill_file(skill_file, source=source, namespace=prefix))
        except DocumentError as e:
            logger.warning(f"Failed to parse {skill_file}: {e}")

    return skills


def scan_skills(
    project_path: str | Path | None = None, config: Config | None = None
) -> list[SkillDocument]:
    """Scan plugin, personal, and project directories for skills.

    Loading order (later overrides earlier):
    1. Plugin skills from ~/.claude/plugins/**/skills/
    2. Personal skills from ~/.claude/skills/ and configured extra dirs
    3. Project skills from {project}/.claude/skills/

    Args:
        project_path: Optional project directory path.
        config: Optional configuration; defaults apply when omitted.

    Returns:
        List of discovered skills, with project skills taking priority.
    """
    discovery = config.discovery if config else DiscoveryConfig()
    home = discovery.home_path
    skills: dict[str, SkillDocument] = {}

    plugins_dir = home / "plugins"
    if discovery.include_plugins and plugins_dir.is_dir():
        for plugin_skills_dir in sorted(plugins_dir.glob("**/skills")):
            if not plugin_skills_dir.is_dir():
                continue
            parent = plugin_skills_dir.parent
            plugin_name = parent.name if parent != plugins_dir else None
            for skill in scan_skill_directory(plugin_skills_dir, "plugin", prefix=plugin_name):
                skills[skill.qualified_name] = skill

    personal_dirs = [home / "skills"] + [Path(p) for p in discovery.skill_dirs]
    for personal_dir in personal_dirs:
        for skill in scan_skill_directory(personal_dir, "personal"):
            skills[skill.qualified_name] = skill

    if project_path:
        project_dir = Path(project_path) / ".claude" / "skills"
        for skill in scan_skill_directory(project_dir, "project"):
            skills[skill.qualified_name] = skill

    return list(skills.values())
