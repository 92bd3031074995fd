"""Access control for catalog bot handlers."""
import logging
from functools import wraps
from typing import Callable, TypeVar

from telegram import Update
from telegram.ext import ContextTypes

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


async def _refuse(update: Update, message: str) -> None:
    """Answer a refused update where the user will see it."""
    if update.callback_query:
        await update.callback_query.answer(message, show_alert=True)
    elif update.effective_message:
        await update.effective_message.reply_text(message)


def auth_middleware(handler: F) -> F:
    """Only let whitelisted users reach the catalog.

    Updates without a sender (channel posts) and users outside
    ``bot.allowed_users`` are refused and logged.
    """

    @wraps(handler)
    async def wrapper(
        update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        config = context.bot_data.get("config")
        if config is None:
            logger.error(f"{handler.__name__}: no config in bot_data")
            await _refuse(update, "⚠️ Catalog is not configured")
            return

        user = update.effective_user
        if user is None:
            logger.info(f"{handler.__name__}: ignoring update without a sender")
            return

        if not config.is_user_allowed(user.id):
            logger.warning(
                f"Refused {handler.__name__} for user {user.id} (@{user.username})"
            )
            await _refuse(update, "⛔ You are not allowed to browse this catalog")
            return

        return await handler(update, context)

    return wrapper
