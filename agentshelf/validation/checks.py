"""Checks for command and skill documents.

Commands must only embed shell placeholders their ``allowed-tools``
permit, and every document must be well-formed markdown. Skills must carry
the name and trigger description the host uses to surface them, and their
reference links must resolve.
"""
import logging
import re
from pathlib import Path

from agentshelf.commands import CommandDocument, parse_command_file
from agentshelf.config import Config
from agentshelf.documents import check_structure
from agentshelf.exceptions import DocumentError
from agentshelf.skills import SKILL_FILENAME, SkillDocument, parse_skill_file
from agentshelf.tools import (
    DANGEROUS_PATTERNS,
    ToolRule,
    find_matched_pattern,
    is_command_allowed,
    is_dangerous_command,
)

from .report import ERROR, WARNING, ValidationReport

logger = logging.getLogger(__name__)

SKILL_NAME_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
SKILL_NAME_MAX_LENGTH = 64
SKILL_DESCRIPTION_MAX_LENGTH = 1024
TRIGGER_PATTERN = re.compile(r"\bwhen\b", re.IGNORECASE)


def _check_common(
    report: ValidationReport, text: str, rules: list[ToolRule], where: str | None
) -> None:
    for problem in check_structure(text):
        report.add(ERROR, "malformed-markdown", problem, where)

    for rule in rules:
        if not rule.is_known:
            report.add(WARNING, "unknown-tool", f"Unknown tool '{rule}' in allowed-tools", where)


def validate_command(
    cmd: CommandDocument,
    project_path: str | Path | None = None,
    dangerous_patterns: list[str] | None = None,
) -> ValidationReport:
    """Check a command document.

    Args:
        cmd: Parsed command.
        project_path: Project root for resolving @file references. They
            are not checked when omitted.
        dangerous_patterns: Patterns flagged in shell placeholders.
            Defaults to DANGEROUS_PATTERNS.

    Returns:
        ValidationReport for this command.
    """
    report = ValidationReport(checked=1)
    where = str(cmd.path) if cmd.path else f"/{cmd.qualified_name}"
    patterns = dangerous_patterns if dangerous_patterns is not None else DANGEROUS_PATTERNS

    if not cmd.has_description:
        report.add(WARNING, "command-no-description", "No description in frontmatter", where)

    _check_common(report, cmd.prompt, cmd.allowed_tools, where)

    for rule in cmd.allowed_tools:
        if rule.tool == "Bash" and rule.specifier is None:
            report.add(
                WARNING,
                "unrestricted-bash",
                "allowed-tools grants Bash without a command restriction",
                where,
            )

    shells = cmd.shell_invocations
    for command in shells:
        if not is_command_allowed(cmd.allowed_tools, command):
            report.add(
                ERROR,
                "shell-not-allowed",
                f"Shell placeholder '{command}' is not permitted by allowed-tools",
                where,
            )
        if is_dangerous_command(command, patterns):
            matched = find_matched_pattern(command, patterns)
            report.add(
                WARNING,
                "dangerous-shell",
                f"Shell placeholder '{command}' contains: {matched}",
                where,
            )

    if cmd.needs_args and not cmd.argument_hint:
        report.add(
            WARNING,
            "missing-argument-hint",
            "Uses arguments but declares no argument-hint",
            where,
        )

    if project_path is not None:
        root = Path(project_path)
        for ref in cmd.file_references:
            if not (root / Path(ref).expanduser()).exists():
                report.add(
                    WARNING,
                    "missing-file-reference",
                    f"Referenced file '@{ref}' does not exist",
                    where,
                )

    return report


def validate_skill(skill: SkillDocument) -> ValidationReport:
    """Check a skill document."""
    report = ValidationReport(checked=1)
    where = str(skill.path)

    if not skill.declared_name:
        report.add(ERROR, "skill-no-name", "No name in frontmatter", where)
    elif (
        len(skill.declared_name) > SKILL_NAME_MAX_LENGTH
        or not SKILL_NAME_PATTERN.match(skill.declared_name)
    ):
        report.add(
            ERROR,
            "skill-name-invalid",
            f"Name '{skill.declared_name}' must be lowercase words joined by "
            f"hyphens, at most {SKILL_NAME_MAX_LENGTH} characters",
            where,
        )
    elif skill.declared_name != skill.directory.name:
        report.add(
            WARNING,
            "skill-name-mismatch",
            f"Name '{skill.declared_name}' differs from directory '{skill.directory.name}'",
            where,
        )

    if not skill.description:
        report.add(ERROR, "skill-no-description", "No description in frontmatter", where)
    else:
        if len(skill.description) > SKILL_DESCRIPTION_MAX_LENGTH:
            report.add(
                ERROR,
                "skill-description-too-long",
                f"Description has {len(skill.description)} characters, "
                f"limit is {SKILL_DESCRIPTION_MAX_LENGTH}",
                where,
            )
        if not TRIGGER_PATTERN.search(skill.description):
            report.add(
                WARNING,
                "skill-no-trigger",
                "Description does not say when to use the skill",
                where,
            )

    if not skill.body.strip():
        report.add(ERROR, "skill-empty-body", "Skill has no instructions", where)

    _check_common(report, skill.body, skill.allowed_tools, where)

    for ref in skill.broken_references:
        report.add(
            ERROR,
            "broken-reference",
            f"Link '{ref.label}' points to missing file '{ref.target}'",
            where,
        )

    return report


def _is_command_file(path: Path, root: Path) -> bool:
    """Whether a .md file sits under a ``commands`` directory within root."""
    parts = (root.name,) + path.relative_to(root).parent.parts
    return "commands" in parts


def _validate_file(
    path: Path, project_path: str | Path | None, patterns: list[str]
) -> ValidationReport:
    try:
        if path.name == SKILL_FILENAME:
            return validate_skill(parse_skill_file(path))
        return validate_command(
            parse_command_file(path), project_path=project_path, dangerous_patterns=patterns
        )
    except DocumentError as e:
        report = ValidationReport(checked=1)
        report.add(ERROR, "parse-error", str(e), str(path))
        return report


def validate_path(
    path: str | Path,
    project_path: str | Path | None = None,
    config: Config | None = None,
) -> ValidationReport:
    """Validate a document file, a skill directory, or a whole tree.

    In a tree, every SKILL.md is a skill and every other .md file under a
    ``commands`` directory is a command.

    Args:
        path: File or directory to check.
        project_path: Project root for resolving command @file references.
        config: Optional configuration for extra dangerous patterns.

    Returns:
        Combined ValidationReport.
    """
    path = Path(path)
    patterns = list(DANGEROUS_PATTERNS)
    if config is not None:
        patterns.extend(config.validation.dangerous_commands)

    report = ValidationReport()

    if not path.exists():
        report.add(ERROR, "not-found", "Path does not exist", str(path))
        return report

    if path.is_file():
        if path.suffix != ".md":
            report.add(ERROR, "unsupported-file", "Not a markdown document", str(path))
            return report
        return report.merge(_validate_file(path, project_path, patterns))

    if (path / SKILL_FILENAME).is_file():
        return report.merge(_validate_file(path / SKILL_FILENAME, project_path, patterns))

    for md_file in sorted(path.rglob("*.md")):
        if not md_file.is_file():
            continue
        if md_file.name == SKILL_FILENAME or _is_command_file(md_file, path):
            report.merge(_validate_file(md_file, project_path, patterns))

    logger.info(
        f"Validated {report.checked} documents under {path}: "
        f"{len(report.errors)} errors, {len(report.warnings)} warnings"
    )
    return report
