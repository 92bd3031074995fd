"""Command registry for storing and managing commands."""
import logging
import re
from pathlib import Path

from telegram import Bot, BotCommand

from agentshelf.config import Config

from .discovery import scan_commands
from .models import CommandDocument
from .rendering import substitute_args

logger = logging.getLogger(__name__)

TELEGRAM_NAME_LIMIT = 32
TELEGRAM_DESCRIPTION_LIMIT = 256


def menu_name(name: str) -> str:
    """Normalise a command name to Telegram's ``[a-z0-9_]{1,32}``."""
    normalized = re.sub(r"[^a-z0-9_]", "_", name.lower())
    return normalized[:TELEGRAM_NAME_LIMIT]


class CommandRegistry:
    """Stores and manages discovered commands."""

    # Built-in catalog bot commands (cannot be overridden)
    BUILTIN_COMMANDS = [
        ("start", "Start the bot"),
        ("help", "Show help"),
        ("commands", "List commands"),
        ("skills", "List skills"),
        ("show", "Show a command or skill"),
        ("find", "Find skills for a task"),
        ("validate", "Validate documents"),
        ("refresh", "Rescan documents"),
    ]

    def __init__(self, config: Config | None = None):
        self._config = config
        self._commands: dict[str, CommandDocument] = {}

    @property
    def builtin_names(self) -> set[str]:
        """Get set of built-in command names."""
        return {name for name, _ in self.BUILTIN_COMMANDS}

    @property
    def commands(self) -> list[CommandDocument]:
        """Get all registered commands."""
        return list(self._commands.values())

    def get(self, name: str) -> CommandDocument | None:
        """Get command by qualified name or its Telegram menu name."""
        name = name.lstrip("/")
        cmd = self._commands.get(name)
        if cmd is not None:
            return cmd
        return next(
            (c for c in self._commands.values() if menu_name(c.qualified_name) == name),
            None,
        )

    def substitute_args(self, cmd: CommandDocument, args: str) -> str:
        """Substitute arguments into command prompt."""
        return substitute_args(cmd.prompt, args)

    def refresh(self, project_path: str | Path | None = None) -> int:
        """Rescan command directories.

        Args:
            project_path: Optional project directory.

        Returns:
            Number of commands loaded.
        """
        if project_path is None and self._config is not None:
            project_path = self._config.project_path

        discovered = scan_commands(project_path, config=self._config)

        # Filter out conflicts with built-in commands
        self._commands.clear()
        for cmd in discovered:
            if menu_name(cmd.qualified_name) in self.builtin_names:
                logger.warning(
                    f"Skipping command '{cmd.qualified_name}' - conflicts with built-in"
                )
                continue
            self._commands[cmd.qualified_name] = cmd

        logger.info(f"Loaded {len(self._commands)} commands")
        return len(self._commands)

    async def publish_menu(self, bot: Bot, limit: int = 100) -> int:
        """Update the Telegram command menu.

        Args:
            bot: Telegram bot instance.
            limit: Maximum menu entries, built-ins included.

        Returns:
            Number of document commands published.
        """
        telegram_commands = [
            BotCommand(name, desc) for name, desc in self.BUILTIN_COMMANDS
        ]
        seen = {name for name, _ in self.BUILTIN_COMMANDS}

        remaining_slots = limit - len(telegram_commands)
        published = 0
        for cmd in self._commands.values():
            if published >= remaining_slots:
                logger.warning(
                    f"Too many commands ({len(self._commands)}), "
                    f"truncated to {remaining_slots}"
                )
                break
            name = menu_name(cmd.qualified_name)
            if not name or name in seen:
                logger.warning(f"Menu name clash for '{cmd.qualified_name}', not published")
                continue
            seen.add(name)
            description = cmd.description[:TELEGRAM_DESCRIPTION_LIMIT] or name
            telegram_commands.append(BotCommand(name, description))
            published += 1

        await bot.set_my_commands(telegram_commands)
        return published
