"""
Configuration -- Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.turtlescope/config.yaml)
  3. User config (~/.turtlescope/config.yaml)
  4. Defaults
"""

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from .presentation.symbols import get_symbols

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"
    format: str = "text"   # "text" | "json"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"

        valid_formats = ("text", "json")
        if self.format not in valid_formats:
            return f"Unknown format '{self.format}'. Valid: {', '.join(valid_formats)}"
        return None


@dataclass
class EditorConfig:
    """Edit loop timing."""
    debounce_ms: int = 500
    poll_interval: float = 1.0  # seconds, used by `watch`

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    def validate(self) -> Optional[str]:
        if self.debounce_ms < 0:
            return f"debounce_ms must be >= 0, got {self.debounce_ms}"
        if self.poll_interval <= 0:
            return f"poll_interval must be > 0, got {self.poll_interval}"
        return None


@dataclass
class ParserConfig:
    """Turtle parsing options."""
    base_iri: Optional[str] = None  # None = resolve against DEFAULT_BASE_IRI

    def validate(self) -> Optional[str]:
        if self.base_iri is not None and ":" not in self.base_iri:
            return f"base_iri must be an absolute IRI, got '{self.base_iri}'"
        return None


@dataclass
class LoggingConfig:
    level: str = "WARNING"

    def validate(self) -> Optional[str]:
        if self.level.upper() not in LOG_LEVELS:
            return f"Unknown log level '{self.level}'. Valid: {', '.join(LOG_LEVELS)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    display: DisplayConfig = field(default_factory=DisplayConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> Optional[str]:
        """First validation error across sections, or None."""
        for section in (self.display, self.editor, self.parser, self.logging):
            error = section.validate()
            if error:
                return error
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "display": {
                "symbols": self.display.symbols,
                "format": self.display.format
            },
            "editor": {
                "debounce_ms": self.editor.debounce_ms,
                "poll_interval": self.editor.poll_interval
            },
            "parser": {
                "base_iri": self.parser.base_iri
            },
            "logging": {
                "level": self.logging.level
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        display_data = data.get("display") or {}
        editor_data = data.get("editor") or {}
        parser_data = data.get("parser") or {}
        logging_data = data.get("logging") or {}

        return cls(
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto"),
                format=display_data.get("format", "text")
            ),
            editor=EditorConfig(
                debounce_ms=int(editor_data.get("debounce_ms", 500)),
                poll_interval=float(editor_data.get("poll_interval", 1.0))
            ),
            parser=ParserConfig(
                base_iri=parser_data.get("base_iri")
            ),
            logging=LoggingConfig(
                level=str(logging_data.get("level", "WARNING")).upper()
            )
        )


# Environment variable -> (section, setting)
ENV_OVERRIDES = {
    "TURTLESCOPE_DISPLAY_SYMBOLS": ("display", "symbols"),
    "TURTLESCOPE_DISPLAY_FORMAT": ("display", "format"),
    "TURTLESCOPE_DEBOUNCE_MS": ("editor", "debounce_ms"),
    "TURTLESCOPE_BASE_IRI": ("parser", "base_iri"),
    "TURTLESCOPE_LOG_LEVEL": ("logging", "level"),
}


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment variables
      2. Project config (.turtlescope/config.yaml)
      3. User config (~/.turtlescope/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".turtlescope"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".turtlescope"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read_yaml(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read_yaml(self.project_config_path))

        # Layer 3: Environment overrides
        for env_key, (section, setting) in ENV_OVERRIDES.items():
            if os.environ.get(env_key):
                if not isinstance(config_data.get(section), dict):
                    config_data[section] = {}
                config_data[section][setting] = os.environ[env_key]

        try:
            config = Config.from_dict(config_data)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring invalid configuration values: %s", e)
            config = Config()

        error = config.validate()
        if error:
            logger.warning("Invalid configuration, using defaults: %s", error)
            config = Config()

        self._config = config
        return self._config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring malformed config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: top level is not a mapping", path)
            return {}
        return data

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "display.format")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'display.format')"

        section, setting = parts

        if section == "display":
            if setting == "symbols":
                config.display.symbols = value
            elif setting == "format":
                config.display.format = value
            else:
                return f"Unknown display setting: {setting}. Valid: symbols, format"
            error = config.display.validate()

        elif section == "editor":
            try:
                if setting == "debounce_ms":
                    config.editor.debounce_ms = int(value)
                elif setting == "poll_interval":
                    config.editor.poll_interval = float(value)
                else:
                    return f"Unknown editor setting: {setting}. Valid: debounce_ms, poll_interval"
            except ValueError:
                return f"Invalid number for editor.{setting}: {value}"
            error = config.editor.validate()

        elif section == "parser":
            if setting == "base_iri":
                config.parser.base_iri = value or None
            else:
                return f"Unknown parser setting: {setting}. Valid: base_iri"
            error = config.parser.validate()

        elif section == "logging":
            if setting == "level":
                config.logging.level = value.upper()
            else:
                return f"Unknown logging setting: {setting}. Valid: level"
            error = config.logging.validate()

        else:
            return f"Unknown section: {section}. Valid: display, editor, parser, logging"

        if error:
            # Drop the half-applied change; next load() rereads the files
            self._config = None
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts
        values = config.to_dict().get(section, {})
        if setting not in values:
            return None
        value = values[setting]
        return None if value is None else str(value)

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        symbols = get_symbols(config.display.symbols)

        lines = [
            "Configuration:",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            f"  Format: {config.display.format}",
            "",
            "Editor:",
            f"  Debounce: {config.editor.debounce_ms} ms",
            f"  Poll interval: {config.editor.poll_interval} s",
            "",
            "Parser:",
            f"  Base IRI: {config.parser.base_iri or '(none)'}",
            "",
            "Logging:",
            f"  Level: {config.logging.level}",
            "",
            "Config files:",
            f"  User: {self.user_config_path} {self._marker(self.user_config_path, symbols)}",
            f"  Project: {self.project_config_path} {self._marker(self.project_config_path, symbols)}",
        ]

        return "\n".join(lines)

    @staticmethod
    def _marker(path: Path, symbols) -> str:
        return symbols.check_pass if path.exists() else symbols.check_fail


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
