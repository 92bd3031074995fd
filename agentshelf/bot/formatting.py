"""HTML views of documents and reports for the catalog bot."""
from agentshelf.commands import CommandDocument
from agentshelf.skills import SkillDocument
from agentshelf.utils import bold, code, escape, italic, pre, truncate
from agentshelf.validation import ValidationReport

PREVIEW_LENGTH = 2500


def format_command_line(cmd: CommandDocument) -> str:
    """One-line listing entry for a command."""
    hint = f" {escape(cmd.argument_hint)}" if cmd.argument_hint else ""
    return f"/{escape(cmd.qualified_name)}{hint} - {escape(cmd.description)}"


def format_command(cmd: CommandDocument) -> str:
    """Full view of a command document."""
    lines = [f"⚡ {bold('/' + cmd.qualified_name)}", escape(cmd.description), ""]
    lines.append(f"Source: {italic(cmd.source)}")
    if cmd.argument_hint:
        lines.append(f"Arguments: {code(cmd.argument_hint)}")
    if cmd.allowed_tools:
        tools = ", ".join(code(str(rule)) for rule in cmd.allowed_tools)
        lines.append(f"Allowed tools: {tools}")
    if cmd.model:
        lines.append(f"Model: {code(cmd.model)}")
    lines.append("")
    lines.append(pre(truncate(cmd.prompt, PREVIEW_LENGTH)))
    return "\n".join(lines)


def format_skill_line(skill: SkillDocument) -> str:
    """One-line listing entry for a skill."""
    return f"{bold(skill.qualified_name)} - {escape(truncate(skill.description, 200))}"


def format_skill(skill: SkillDocument) -> str:
    """Full view of a skill document."""
    lines = [f"📘 {bold(skill.qualified_name)}", escape(skill.description), ""]
    lines.append(f"Source: {italic(skill.source)}")
    if skill.allowed_tools:
        tools = ", ".join(code(str(rule)) for rule in skill.allowed_tools)
        lines.append(f"Allowed tools: {tools}")
    if skill.references:
        refs = ", ".join(
            code(ref.target) + ("" if ref.exists else " ❌") for ref in skill.references
        )
        lines.append(f"References: {refs}")
    lines.append("")
    lines.append(pre(truncate(skill.body, PREVIEW_LENGTH)))
    return "\n".join(lines)


def format_report(report: ValidationReport, limit: int = 20) -> str:
    """Summary of a validation report."""
    status = "✅" if report.ok else "❌"
    lines = [
        f"{status} {report.checked} document(s): "
        f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    ]
    for issue in report.issues[:limit]:
        icon = "🔴" if issue.severity == "error" else "🟡"
        lines.append(f"{icon} {escape(str(issue))}")
    if len(report.issues) > limit:
        lines.append(italic(f"... and {len(report.issues) - limit} more"))
    return "\n".join(lines)
