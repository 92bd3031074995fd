"""Test bot entry point."""
import logging
from unittest.mock import MagicMock, patch

from agentshelf.main import init_app, main, setup_logging


def test_init_app_requires_token(monkeypatch, caplog):
    """init_app returns None if AGENTSHELF_BOT_TOKEN is not set."""
    monkeypatch.delenv("AGENTSHELF_BOT_TOKEN", raising=False)

    with patch("agentshelf.main.load_dotenv"):
        with caplog.at_level(logging.ERROR):
            assert init_app() is None

    assert "AGENTSHELF_BOT_TOKEN" in caplog.text


def test_init_app_loads_config(tmp_path, monkeypatch):
    """init_app loads configuration and sets the token."""
    monkeypatch.setenv("AGENTSHELF_BOT_TOKEN", "test_token")
    config_file = tmp_path / "config.yaml"
    config_file.write_text("bot:\n  allowed_users:\n    - 12345678\n")

    with patch("agentshelf.main.load_dotenv"):
        with patch("agentshelf.main.create_application") as mock_create:
            app = init_app(config_file)

    mock_create.assert_called_once()
    config = mock_create.call_args.args[0]
    assert config.telegram_token == "test_token"
    assert config.bot.allowed_users == [12345678]
    assert app is mock_create.return_value


def test_main_runs_polling(tmp_path, monkeypatch):
    """main starts polling the configured application."""
    monkeypatch.setenv("AGENTSHELF_BOT_TOKEN", "test_token")
    mock_app = MagicMock()

    with patch("agentshelf.main.load_dotenv"), patch("agentshelf.main.setup_logging"):
        with patch("agentshelf.main.create_application", return_value=mock_app):
            main(tmp_path / "missing.yaml")

    mock_app.run_polling.assert_called_once()


def test_main_without_token_does_not_poll(monkeypatch):
    monkeypatch.delenv("AGENTSHELF_BOT_TOKEN", raising=False)

    with patch("agentshelf.main.load_dotenv"), patch("agentshelf.main.setup_logging"):
        with patch("agentshelf.main.create_application") as mock_create:
            main()

    mock_create.assert_not_called()


def test_setup_logging_sets_level():
    with patch("agentshelf.main.logging.basicConfig") as mock_basic:
        setup_logging(logging.DEBUG)

    assert mock_basic.call_args.kwargs["level"] == logging.DEBUG
    assert mock_basic.call_args.kwargs["force"] is True


def test_setup_logging_replaces_earlier_setup():
    """The bot's INFO logs show even after the CLI configured WARNING."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        setup_logging(logging.WARNING)
        setup_logging(logging.INFO)

        assert root.level == logging.INFO
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)
