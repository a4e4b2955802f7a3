"""
Configuration management for the condition tree editor.

Loads settings from YAML files and environment variables, providing typed
dataclasses for easy access.
"""

import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv


DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    file_enabled: bool = False
    file_path: str = "logs/strategy_conditions.log"
    file_backup_count: int = 5
    console_enabled: bool = True
    console_level: str = "INFO"


@dataclass
class CodecConfig:
    """JSON output settings for condition documents."""
    pretty: bool = True
    indent: int = 2
    ensure_ascii: bool = False


@dataclass
class CatalogConfig:
    """Factor catalog override. Empty factors means the reference catalog."""
    factors: Dict[str, str] = field(default_factory=dict)
    default_operator: str = "LT"
    default_value_type: str = "NUMBER"


@dataclass
class Settings:
    """Main settings container with all configuration sections."""
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    codec: CodecConfig = field(default_factory=CodecConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)

    _raw_config: Dict[str, Any] = field(default_factory=dict, repr=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-separated key."""
        keys = key.split('.')
        current = self._raw_config
        for k in keys:
            if isinstance(current, dict) and k in current:
                current = current[k]
            else:
                return default
        return current


class ConfigLoader:
    """Loads and manages configuration from multiple sources."""

    def __init__(self, config_dir: Optional[Path] = None):
        env_config_dir = os.getenv("STRATEGY_CONDITIONS_CONFIG_DIR")
        self.project_root = Path(__file__).parent.parent.parent
        default_dir = self.project_root / "config"
        self.config_dir = Path(env_config_dir) if env_config_dir else (config_dir or default_dir)

        # Load environment variables
        load_dotenv(dotenv_path=self.project_root / ".env")
        load_dotenv()

    def load(self) -> Settings:
        """Load configuration and return a Settings object."""
        raw_config = self._load_raw_config()
        return self._create_settings(raw_config)

    def _load_raw_config(self) -> Dict[str, Any]:
        """Load raw configuration from YAML and environment."""
        config = self._load_yaml_file("default.yaml")

        # Environment-specific overrides
        env = os.getenv("STRATEGY_CONDITIONS_ENV", "development")
        env_config = self._load_yaml_file(f"environment/{env}.yaml")
        config = self._deep_merge(config, env_config)

        self._apply_env_overrides(config)

        return config

    def _load_yaml_file(self, filename: str) -> Dict[str, Any]:
        """Load a YAML file from the config directory."""
        file_path = self.config_dir / filename
        if file_path.exists():
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        return {}

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> None:
        """Apply environment variable overrides."""
        env_mappings = {
            "LOG_LEVEL": ("logging", "level"),
            "CODEC_PRETTY": ("codec", "pretty"),
            "CODEC_INDENT": ("codec", "indent"),
            "CODEC_ENSURE_ASCII": ("codec", "ensure_ascii"),
        }

        for env_key, config_path in env_mappings.items():
            value = os.getenv(env_key)
            if value is not None:
                self._set_nested(config, config_path, self._convert_value(value))

    def _set_nested(self, config: Dict[str, Any], path: tuple, value: Any) -> None:
        """Set a nested value in config dict."""
        current = config
        for key in path[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[path[-1]] = value

    def _convert_value(self, value: str) -> Any:
        """Convert string value to appropriate type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'
        try:
            if '.' not in value:
                return int(value)
            return float(value)
        except ValueError:
            return value

    def _create_settings(self, raw_config: Dict[str, Any]) -> Settings:
        """Create Settings object from raw config dict."""
        logging_cfg = raw_config.get("logging") or {}
        codec_cfg = raw_config.get("codec") or {}
        catalog_cfg = raw_config.get("catalog") or {}

        return Settings(
            logging=LoggingConfig(
                level=logging_cfg.get("level", "INFO"),
                format=logging_cfg.get("format", DEFAULT_LOG_FORMAT),
                file_enabled=logging_cfg.get("file", {}).get("enabled", False),
                file_path=logging_cfg.get("file", {}).get("path", "logs/strategy_conditions.log"),
                file_backup_count=logging_cfg.get("file", {}).get("backup_count", 5),
                console_enabled=logging_cfg.get("console", {}).get("enabled", True),
                console_level=logging_cfg.get("console", {}).get("level", "INFO"),
            ),
            codec=CodecConfig(
                pretty=codec_cfg.get("pretty", True),
                indent=codec_cfg.get("indent", 2),
                ensure_ascii=codec_cfg.get("ensure_ascii", False),
            ),
            catalog=CatalogConfig(
                factors={str(k): str(v) for k, v in (catalog_cfg.get("factors") or {}).items()},
                default_operator=catalog_cfg.get("default_operator", "LT"),
                default_value_type=catalog_cfg.get("default_value_type", "NUMBER"),
            ),
            _raw_config=raw_config,
        )


def load_config(config_dir: Optional[Path] = None) -> Settings:
    """Load configuration and return Settings object.

    Args:
        config_dir: Optional path to config directory. Defaults to project's config/ folder.

    Returns:
        Settings object with all configuration values.
    """
    return ConfigLoader(config_dir).load()


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings(force_reload: bool = False) -> Settings:
    """Get the global settings instance.

    Settings are loaded on first access and cached for subsequent calls.

    Args:
        force_reload: Force reloading settings from files.

    Returns:
        Settings object.
    """
    global _settings
    if _settings is None or force_reload:
        _settings = load_config()
    return _settings
