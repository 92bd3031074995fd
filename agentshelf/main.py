"""Catalog bot entry point."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from agentshelf.bot import create_application
from agentshelf.config import load_config

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """Configure root logging, replacing any earlier setup."""
    logging.basicConfig(format=LOG_FORMAT, level=level, force=True)


def init_app(config_path: Path | None = None):
    """Load configuration and return the configured bot application."""
    load_dotenv()

    token = os.getenv("AGENTSHELF_BOT_TOKEN")
    if not token:
        logger.error("AGENTSHELF_BOT_TOKEN environment variable required")
        return None

    config = load_config(config_path)
    config.telegram_token = token

    return create_application(config)


def main(config_path: Path | None = None) -> None:
    """Main entry point."""
    setup_logging()
    app = init_app(config_path)

    if app is None:
        return

    logger.info("agentshelf bot starting...")
    # run_polling() manages its own event loop
    app.run_polling()


if __name__ == "__main__":
    main()
