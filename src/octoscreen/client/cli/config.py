"""Configuration handling for the CLI."""

import json
import pathlib
import typing
from enum import StrEnum

import platformdirs
import pydantic
import pydantic_settings
import structlog

from octoscreen.client import consts

logger = structlog.get_logger(consts.APP_NAME)

DEFAULT_HISTORY_LIMIT = 10


class OutputFormat(StrEnum):
    """How command results are printed."""

    RICH = "rich"
    PLAIN = "plain"
    JSON = "json"


def get_config_file() -> pathlib.Path:
    """Location of the user's config.json."""
    return pathlib.Path(platformdirs.user_config_dir(consts.APP_NAME, consts.APP_AUTHOR)) / "config.json"


def load_json_config() -> dict[str, typing.Any]:
    """Load configuration from config.json."""
    config_file = get_config_file()
    logger.info("Attempting to load config.json", config_file=config_file)
    if config_file.exists():
        try:
            with config_file.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError):
            # Fallback if JSON is malformed
            logger.exception("Failed to read config.json", config_file=config_file)
            return {}
    logger.info("No config.json found.")
    return {}


class Settings(pydantic_settings.BaseSettings):
    """Application-wide settings loaded from config.json, .env or environment variables."""

    octoprint_url: str = consts.DEFAULT_BASE_URL
    octoprint_api_key: pydantic.SecretStr | None = None
    timeout: float = consts.DEFAULT_TIMEOUT

    default_history_limit: int = DEFAULT_HISTORY_LIMIT
    output_format: OutputFormat | None = None

    model_config = pydantic_settings.SettingsConfigDict(env_file=".env", extra="ignore")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[pydantic_settings.BaseSettings],
        init_settings: pydantic_settings.PydanticBaseSettingsSource,
        env_settings: pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[pydantic_settings.PydanticBaseSettingsSource, ...]:
        """Customise settings sources to include config.json."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            pydantic_settings.InitSettingsSource(settings_cls, load_json_config()),
            file_secret_settings,
        )


def save_json_config(current_settings: Settings) -> None:
    """Save the current server settings to config.json. The API key is never written."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)

    save_data = load_json_config()
    save_data["octoprint_url"] = current_settings.octoprint_url
    save_data["timeout"] = current_settings.timeout
    save_data["default_history_limit"] = current_settings.default_history_limit
    if current_settings.output_format is not None:
        save_data["output_format"] = str(current_settings.output_format)

    with config_file.open("w", encoding="utf-8") as f:
        json.dump(save_data, f, indent=4)


if typing.TYPE_CHECKING:
    settings: Settings

_settings: Settings | None = None


def __getattr__(name: str) -> typing.Any:
    """Implement lazy loading for settings to allow logging initialization first."""
    if name == "settings":
        global _settings
        if _settings is None:
            _settings = Settings()
        return _settings
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def reset_settings() -> None:
    """Drop the cached settings so the next access reloads them."""
    global _settings
    _settings = None
