"""Telegram bot application setup."""
import logging

from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    MessageHandler,
    filters,
)

from agentshelf.commands import CommandRegistry
from agentshelf.config import Config
from agentshelf.skills import SkillRegistry

from .handlers import (
    find_skills,
    handle_callback,
    handle_document_command,
    help_cmd,
    list_commands,
    list_skills,
    refresh,
    show,
    start,
    validate,
)
from .middleware import auth_middleware

logger = logging.getLogger(__name__)


async def post_init(application: Application) -> None:
    """Load documents and publish the command menu once the bot is ready."""
    config = application.bot_data["config"]
    command_registry = application.bot_data["command_registry"]
    skill_registry = application.bot_data["skill_registry"]

    command_count = command_registry.refresh()
    skill_count = skill_registry.refresh()
    await command_registry.publish_menu(application.bot, limit=config.bot.menu_limit)

    logger.info(f"Loaded {command_count} commands and {skill_count} skills at startup")


def create_application(config: Config) -> Application:
    """Create and configure Telegram Application."""
    app = (
        Application.builder()
        .token(config.telegram_token)
        .post_init(post_init)
        .build()
    )

    # Store config and registries in bot_data for handlers to access
    app.bot_data["config"] = config
    app.bot_data["command_registry"] = CommandRegistry(config)
    app.bot_data["skill_registry"] = SkillRegistry(config)

    commands = [
        ("start", start),
        ("help", help_cmd),
        ("commands", list_commands),
        ("skills", list_skills),
        ("show", show),
        ("find", find_skills),
        ("validate", validate),
        ("refresh", refresh),
    ]

    for command, handler in commands:
        app.add_handler(CommandHandler(command, auth_middleware(handler)))

    # Discovered commands (catch-all for unknown commands)
    app.add_handler(
        MessageHandler(
            filters.COMMAND,
            auth_middleware(handle_document_command),
        )
    )

    app.add_handler(CallbackQueryHandler(auth_middleware(handle_callback)))

    return app
