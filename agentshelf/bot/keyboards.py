"""Telegram inline keyboard builders."""
from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from agentshelf.skills import SkillDocument

# Telegram limits callback_data to 64 bytes
CALLBACK_DATA_LIMIT = 64


def callback_value(action: str, value: str) -> str:
    """Build callback data, truncating the value to fit Telegram's limit."""
    data = f"{action}:{value}"
    while len(data.encode()) > CALLBACK_DATA_LIMIT:
        data = data[:-1]
    return data


def parse_callback_data(data: str) -> tuple[str, str | None]:
    """Parse callback data into action and value."""
    if ":" in data:
        action, _, value = data.partition(":")
        return action, value
    return data, None


def skills_keyboard(skills: list[SkillDocument]) -> InlineKeyboardMarkup:
    """Create skill selection keyboard."""
    buttons = [
        [
            InlineKeyboardButton(
                f"📘 {skill.qualified_name}",
                callback_data=callback_value("skill", skill.qualified_name),
            )
        ]
        for skill in skills
    ]
    return InlineKeyboardMarkup(buttons)
