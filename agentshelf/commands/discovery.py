"""Discover and parse command documents."""
import logging
from pathlib import Path

from agentshelf.config import Config, DiscoveryConfig
from agentshelf.documents import split_frontmatter
from agentshelf.exceptions import DocumentError, FrontmatterError
from agentshelf.tools import parse_allowed_tools

from .models import CommandDocument
from .placeholders import uses_arguments

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH = 256


def _first_line(body: str) -> str:
    """First non-empty body line without heading markers."""
    for line in body.split("\n"):
        line = line.strip().lstrip("#").strip()
        if line:
            return line
    return ""


def parse_command_file(
    path: Path, source: str = "personal", namespace: str | None = None
) -> CommandDocument:
    """Parse a .md command file into a CommandDocument.

    Args:
        path: Path to the .md file.
        source: Where command came from ("plugin", "personal" or "project").
        namespace: Optional prefix, e.g. the plugin or subdirectory name.

    Returns:
        Parsed CommandDocument.

    Raises:
        DocumentError: File is unreadable or its frontmatter is invalid.
    """
    path = Path(path)
    try:
        content = path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(f"Cannot read {path}: {e}") from e

    try:
        frontmatter = split_frontmatter(content)
    except FrontmatterError as e:
        raise FrontmatterError(f"{path}: {e}") from e

    data = frontmatter.data
    prompt = frontmatter.body
    name = path.stem

    # Get description from frontmatter or first line of prompt
    description = str(data.get("description") or "").strip()
    has_description = bool(description)
    if not description:
        description = _first_line(prompt)[:MAX_DESCRIPTION_LENGTH] or name

    if len(description) > MAX_DESCRIPTION_LENGTH:
        description = description[:MAX_DESCRIPTION_LENGTH - 3] + "..."

    try:
        allowed_tools = parse_allowed_tools(data.get("allowed-tools"))
    except ValueError as e:
        raise DocumentError(f"{path}: {e}") from e

    argument_hint = data.get("argument-hint")
    if isinstance(argument_hint, list):
        # Unquoted `[message]` parses as a YAML list
        argument_hint = " ".join(f"[{item}]" for item in argument_hint)

    return CommandDocument(
        name=name,
        description=description,
        prompt=prompt,
        allowed_tools=allowed_tools,
        argument_hint=str(argument_hint) if argument_hint is not None else None,
        model=data.get("model"),
        disable_model_invocation=bool(data.get("disable-model-invocation", False)),
        needs_args=uses_arguments(prompt),
        source=source,
        path=path,
        namespace=namespace,
        has_description=has_description,
    )


def scan_directory(
    directory: Path,
    source: str,
    prefix: str | None = None,
) -> list[CommandDocument]:
    """Parse every .md file under a commands directory.

    Subdirectories become namespace segments: ``frontend/component.md``
    is ``frontend:component``. Unparseable files are logged and skipped.
    """
    commands = []
    if not directory.is_dir():
        return commands

    for md_file in sorted(directory.rglob("*.md")):
        if not md_file.is_file():
            continue
        segments = [prefix] if prefix else []
        segments.extend(md_file.relative_to(directory).parent.parts)
        namespace = ":".join(segments) or None
        try:
            commands.append(parse_command_file(md_file, source=source, namespace=namespace))
        except DocumentError as e:
            logger.warning(f"Failed to parse {md_file}: {e}")

    return commands


def scan_commands(
    project_path: str | Path | None = None, config: Config | None = None
) -> list[CommandDocument]:
    """Scan plugin, personal, and project directories for commands.

    Loading order (later overrides earlier):
    1. Plugin commands from ~/.claude/plugins/**/commands/
    2. Personal commands from ~/.claude/commands/ and configured extra dirs
    3. Project commands from {project}/.claude/commands/

    Args:
        project_path: Optional project directory path.
        config: Optional configuration; defaults apply when omitted.

    Returns:
        List of discovered commands, with project commands taking priority.
    """
    discovery = config.discovery if config else DiscoveryConfig()
    home = discovery.home_path
    commands: dict[str, CommandDocument] = {}

    # 1. Plugin commands (lowest priority), namespaced by plugin directory
    plugins_dir = home / "plugins"
    if discovery.include_plugins and plugins_dir.is_dir():
        for plugin_commands_dir in sorted(plugins_dir.glob("**/commands")):
            if not plugin_commands_dir.is_dir():
                continue
            parent = plugin_commands_dir.parent
            plugin_name = parent.name if parent != plugins_dir else None
            for cmd in scan_directory(plugin_commands_dir, "plugin", prefix=plugin_name):
                commands[cmd.qualified_name] = cmd

    # 2. Personal commands (override plugins)
    personal_dirs = [home / "commands"] + [Path(p) for p in discovery.command_dirs]
    for personal_dir in personal_dirs:
        for cmd in scan_directory(personal_dir, "personal"):
            commands[cmd.qualified_name] = cmd

    # 3. Project commands (highest priority)
    if project_path:
        project_dir = Path(project_path) / ".claude" / "commands"
        for cmd in scan_directory(project_dir, "project"):
            if cmd.qualified_name in commands:
                logger.debug(f"Project command overrides /{cmd.qualified_name}")
            commands[cmd.qualified_name] = cmd

    return list(commands.values())
