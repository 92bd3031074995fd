"""Telegram bot command handlers."""
import logging
from pathlib import Path

from telegram import Update
from telegram.ext import ContextTypes

from agentshelf.commands import render_command
from agentshelf.exceptions import AgentShelfError
from agentshelf.utils import chunk_html, escape, pre
from agentshelf.validation import ValidationReport, validate_path

from .formatting import (
    format_command,
    format_command_line,
    format_report,
    format_skill,
    format_skill_line,
)
from .keyboards import parse_callback_data, skills_keyboard

logger = logging.getLogger(__name__)

HELP_TEXT = """
<b>agentshelf</b>

<b>Browse</b>
/commands - List commands
/skills - List skills
/show &lt;name&gt; - Show a command or skill
/find &lt;task&gt; - Find skills for a task

<b>Maintain</b>
/validate - Validate all documents
/refresh - Rescan documents and update this menu

<b>Help</b>
/help - Show this message

Commands from <code>.claude/commands/</code> appear in the / menu.
Sending one replies with its rendered prompt.
"""


async def _reply_html(update: Update, text: str) -> None:
    """Reply with HTML text, split to fit Telegram's message limit."""
    for chunk in chunk_html(text):
        await update.message.reply_text(chunk, parse_mode="HTML")


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command."""
    user = update.effective_user
    await update.message.reply_text(
        f"👋 Welcome, {user.first_name}!\n\n"
        "I list the skills and commands available to your agent.\n\n"
        "Use /skills, /commands or /help for all commands."
    )


async def help_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command."""
    await update.message.reply_text(HELP_TEXT, parse_mode="HTML")


async def list_commands(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /commands command."""
    registry = context.bot_data["command_registry"]
    commands = sorted(registry.commands, key=lambda c: c.qualified_name)

    if not commands:
        await update.message.reply_text("No commands found.")
        return

    lines = [f"<b>Commands ({len(commands)})</b>"]
    lines.extend(format_command_line(cmd) for cmd in commands)
    await _reply_html(update, "\n".join(lines))


async def list_skills(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /skills command."""
    registry = context.bot_data["skill_registry"]
    skills = sorted(registry.skills, key=lambda s: s.qualified_name)

    if not skills:
        await update.message.reply_text("No skills found.")
        return

    lines = [f"<b>Skills ({len(skills)})</b>"]
    lines.extend(format_skill_line(skill) for skill in skills)
    await _reply_html(update, "\n".join(lines))
    await update.message.reply_text(
        "Tap a skill to view it:", reply_markup=skills_keyboard(skills)
    )


async def show(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /show command."""
    if not context.args:
        await update.message.reply_text("Usage: /show <name>")
        return

    name = context.args[0].lstrip("/")
    cmd = context.bot_data["command_registry"].get(name)
    if cmd is not None:
        await _reply_html(update, format_command(cmd))
        return

    skill = context.bot_data["skill_registry"].get(name)
    if skill is not None:
        await _reply_html(update, format_skill(skill))
        return

    await update.message.reply_text(f"❌ Not found: {name}")


async def find_skills(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /find command."""
    if not context.args:
        await update.message.reply_text("Usage: /find <task description>")
        return

    query = " ".join(context.args)
    matches = context.bot_data["skill_registry"].find(query)

    if not matches:
        await update.message.reply_text("No matching skills.")
        return

    lines = [f"<b>Skills for:</b> {escape(query)}"]
    lines.extend(format_skill_line(skill) for skill in matches)
    await update.message.reply_text(
        "\n".join(lines),
        parse_mode="HTML",
        reply_markup=skills_keyboard(matches),
    )


async def validate(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /validate command - check personal and project documents."""
    config = context.bot_data["config"]

    roots = [config.discovery.home_path]
    if config.project_path:
        roots.append(Path(config.project_path) / ".claude")

    report = ValidationReport()
    for root in roots:
        if root.is_dir():
            report.merge(validate_path(root, project_path=config.project_path, config=config))

    await _reply_html(update, format_report(report))


async def refresh(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /refresh command - rescan documents and republish the menu."""
    config = context.bot_data["config"]
    command_registry = context.bot_data["command_registry"]
    skill_registry = context.bot_data["skill_registry"]

    command_count = command_registry.refresh()
    skill_count = skill_registry.refresh()
    await command_registry.publish_menu(update.get_bot(), limit=config.bot.menu_limit)

    await update.message.reply_text(
        f"🔄 Refreshed. {command_count} command(s), {skill_count} skill(s) loaded."
    )


async def handle_document_command(
    update: Update, context: ContextTypes.DEFAULT_TYPE
) -> None:
    """Handle a discovered slash command by replying with its rendered prompt.

    Shell placeholders are shown, never executed.
    """
    registry = context.bot_data["command_registry"]
    config = context.bot_data["config"]

    text = update.message.text
    parts = text.split(maxsplit=1)
    # Strip leading / and any @botname suffix
    cmd_name = parts[0][1:].split("@", 1)[0]
    inline_args = parts[1] if len(parts) > 1 else ""

    cmd = registry.get(cmd_name)
    if not cmd:
        await update.message.reply_text(f"❌ Unknown command: /{cmd_name}")
        return

    if cmd.needs_args and not inline_args:
        hint = f" {cmd.argument_hint}" if cmd.argument_hint else " <arguments>"
        await update.message.reply_text(
            f"🔧 /{cmd.qualified_name} requires input.\n\n"
            f"📝 {cmd.description}\n\n"
            f"Usage: /{cmd_name}{hint}"
        )
        return

    try:
        rendered = await render_command(cmd, inline_args, cwd=config.project_path)
    except AgentShelfError as e:
        logger.error(f"Failed to render /{cmd.qualified_name}: {e}")
        await update.message.reply_text(f"❌ Error: {e}")
        return

    await _reply_html(update, pre(rendered.prompt))


async def handle_callback(
    update: Update, context: ContextTypes.DEFAULT_TYPE
) -> None:
    """Handle inline keyboard callbacks."""
    query = update.callback_query
    await query.answer()

    action, value = parse_callback_data(query.data)

    if action != "skill" or not value:
        await query.edit_message_text(f"❓ Unknown action: {action}")
        return

    registry = context.bot_data["skill_registry"]
    skill = registry.get(value) or next(
        (s for s in registry.skills if s.qualified_name.startswith(value)), None
    )
    if skill is None:
        await query.edit_message_text(f"❌ Skill not found: {value}")
        return

    first, *rest = chunk_html(format_skill(skill))
    await query.edit_message_text(first, parse_mode="HTML")
    for chunk in rest:
        await query.message.reply_text(chunk, parse_mode="HTML")
