"""Configuration loading and platform-aware config file resolution."""

import json
import logging
import os
import re
import sys
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_NAME = "session-renamer"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class RenameConfig:
    """Settings for title generation. Immutable once loaded."""

    model: str = "opencode/grok-code"  # "providerID/modelID"; empty means host default
    title_max_length: int = 20  # excludes the date suffix
    date_format: str = "YY-MM-DD HH:mm"  # tokens: YYYY YY MM DD HH mm
    min_message_length: int = 5
    debug: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "RenameConfig":
        """Overlay a user config (camelCase keys) on the defaults."""
        if not isinstance(data, dict):
            raise ConfigError(f"Expected an object, got {type(data).__name__}")

        defaults = cls()
        model = data.get("model", defaults.model)
        if not isinstance(model, str):
            raise ConfigError("model must be a string")

        title_max_length = _as_int(data.get("titleMaxLength", defaults.title_max_length), "titleMaxLength")
        if title_max_length < 1:
            raise ConfigError("titleMaxLength must be >= 1")

        min_message_length = _as_int(
            data.get("minMessageLength", defaults.min_message_length), "minMessageLength"
        )
        if min_message_length < 0:
            raise ConfigError("minMessageLength must be >= 0")

        date_format = data.get("dateFormat", defaults.date_format)
        if not isinstance(date_format, str):
            raise ConfigError("dateFormat must be a string")

        debug = data.get("debug", defaults.debug)
        if not isinstance(debug, bool):
            raise ConfigError("debug must be a bool")

        return cls(
            model=model,
            title_max_length=title_max_length,
            date_format=date_format,
            min_message_length=min_message_length,
            debug=debug,
        )

    def to_dict(self) -> dict:
        return asdict(self)


def _as_int(value, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer")
    return value


def get_config_home() -> Path:
    """Return the user-level config directory that holds ``opencode/``."""
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", ""))
    env = os.environ.get("XDG_CONFIG_HOME")
    if env:
        return Path(env)
    return Path.home() / ".config"


def get_config_paths(directory: str | Path) -> list[Path]:
    """Return config candidates in lookup order: explicit, project, then user."""
    paths = []
    env = os.environ.get("SESSION_RENAMER_CONFIG")
    if env:
        paths.append(Path(env))

    project = Path(directory) / ".opencode"
    user = get_config_home() / "opencode"
    for base in (project, user):
        paths.append(base / f"{CONFIG_NAME}.jsonc")
        paths.append(base / f"{CONFIG_NAME}.json")
    return paths


# Strings are matched first so that "//" inside a value is not treated as a comment.
_JSONC_TOKEN = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def parse_jsonc(content: str):
    """Parse JSON that may contain comments and trailing commas."""
    stripped = _JSONC_TOKEN.sub(lambda m: m.group(1) or "", content)
    stripped = _TRAILING_COMMA.sub(r"\1", stripped)
    return json.loads(stripped)


def load_config(directory: str | Path) -> RenameConfig:
    """Load the first readable config file, falling back to defaults."""
    for config_path in get_config_paths(directory):
        if not config_path.is_file():
            continue
        try:
            data = parse_jsonc(config_path.read_text(encoding="utf-8"))
            config = RenameConfig.from_dict(data)
        except (ValueError, OSError) as e:
            logger.error("Failed to parse config at %s: %s", config_path, e)
            continue
        logger.debug("Loaded config from %s", config_path)
        return config

    return RenameConfig()
