"""Configuration settings."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from agentshelf.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.agentshelf/config.yaml")


@dataclass
class DiscoveryConfig:
    """Where documents are looked up."""

    home: str | None = None  # defaults to ~/.claude
    include_plugins: bool = True
    command_dirs: list[str] = field(default_factory=list)  # extra personal dirs
    skill_dirs: list[str] = field(default_factory=list)

    @property
    def home_path(self) -> Path:
        """Resolved host configuration directory."""
        if self.home:
            return Path(self.home).expanduser()
        return Path.home() / ".claude"


@dataclass
class ValidationConfig:
    """Validation behavior settings."""

    dangerous_commands: list[str] = field(default_factory=list)  # added to defaults
    strict: bool = False  # warnings fail validation


@dataclass
class RenderConfig:
    """Command rendering settings."""

    run_shell: bool = False
    shell_timeout: float = 30.0


@dataclass
class BotConfig:
    """Telegram catalog bot settings."""

    allowed_users: list[int] = field(default_factory=list)
    menu_limit: int = 100  # Telegram's command menu cap


@dataclass
class Config:
    """Main configuration."""

    project_path: str | None = None
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    bot: BotConfig = field(default_factory=BotConfig)
    telegram_token: str = ""

    def is_user_allowed(self, user_id: int) -> bool:
        """Check if user is in whitelist."""
        return user_id in self.bot.allowed_users


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from YAML file.

    Missing files give the default configuration.

    Raises:
        ConfigError: File is not valid YAML or not a mapping.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH.expanduser()
    else:
        path = Path(path).expanduser()

    if not path.exists():
        logger.info(f"No config at {path}, using defaults")
        return Config()

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")

    return _parse_config(data)


def _expand(path: str | None) -> str | None:
    return str(Path(path).expanduser()) if path else None


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    """Get a config section, treating an empty one as no settings."""
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{key}' must be a mapping")
    return section


def _list(section: dict[str, Any], key: str) -> list:
    """Get a list setting; a single value becomes a one-item list."""
    value = section.get(key) or []
    return value if isinstance(value, list) else [value]


def _parse_config(data: dict[str, Any]) -> Config:
    """Parse config dictionary into Config object.

    Raises:
        ConfigError: A section is not a mapping or a value has the wrong type.
    """
    config = Config(project_path=_expand(data.get("project_path")))

    if "discovery" in data:
        discovery = _section(data, "discovery")
        config.discovery = DiscoveryConfig(
            home=_expand(discovery.get("home")),
            include_plugins=discovery.get("include_plugins", True),
            command_dirs=[_expand(str(p)) for p in _list(discovery, "command_dirs")],
            skill_dirs=[_expand(str(p)) for p in _list(discovery, "skill_dirs")],
        )

    if "validation" in data:
        validation = _section(data, "validation")
        config.validation = ValidationConfig(
            dangerous_commands=[str(p) for p in _list(validation, "dangerous_commands")],
            strict=validation.get("strict", False),
        )

    try:
        if "render" in data:
            render = _section(data, "render")
            config.render = RenderConfig(
                run_shell=render.get("run_shell", False),
                shell_timeout=float(render.get("shell_timeout", 30.0)),
            )

        if "bot" in data:
            bot = _section(data, "bot")
            config.bot = BotConfig(
                allowed_users=[int(u) for u in _list(bot, "allowed_users")],
                menu_limit=int(bot.get("menu_limit", 100)),
            )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid config value: {e}") from e

    return config
