"""
Configuration management for schema synthesis.

Handles loading and merging configuration from JSON files,
providing defaults and validation for synthesis settings.
"""

import copy
import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


@dataclass
class SynthesisConfig:
    """Settings for one synthesis run."""

    # Extraction policy
    extraction_threshold: int = 3

    # Naming
    fallback_name_prefix: str = "Type"
    response_name_suffix: str = "Response"
    request_name_suffix: str = "Request"
    name_request_bodies: bool = True
    collision_separator: str = ""

    # Media type selection for bodies and responses, in preference order
    json_media_types: List[str] = field(default_factory=lambda: ["application/json"])

    # Custom settings (consumer-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        self._defaults: Dict[str, Any] = asdict(SynthesisConfig())

    def get_config(self, custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> SynthesisConfig:
        """
        Get the complete configuration.

        Args:
            custom_config: Configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        base_config = copy.deepcopy(self._defaults)

        if config_file:
            base_config.update(self._load_config_file(config_file))

        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> SynthesisConfig:
        """Convert dictionary to SynthesisConfig, unknown keys go to ``custom``."""
        known_fields = {f.name for f in fields(SynthesisConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get('custom', {}))
            existing_custom.update(custom_args)
            config_args['custom'] = existing_custom

        return SynthesisConfig(**config_args)

    def save_config(self, config: SynthesisConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)
        config_dict = asdict(config)
        custom = config_dict.pop("custom")
        config_dict.update(custom)

        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def validate_config(self, config: SynthesisConfig) -> List[str]:
        """
        Validate a configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        if not isinstance(config.extraction_threshold, int) or config.extraction_threshold < 1:
            warnings.append(f"Invalid extraction_threshold: {config.extraction_threshold}")

        if not config.fallback_name_prefix or not config.fallback_name_prefix.isidentifier():
            warnings.append(f"Invalid fallback_name_prefix: {config.fallback_name_prefix!r}")

        if not config.response_name_suffix:
            warnings.append("response_name_suffix must not be empty")

        if config.collision_separator and not config.collision_separator.replace("_", "") == "":
            warnings.append(f"Invalid collision_separator: {config.collision_separator!r}")

        if not config.json_media_types:
            warnings.append("json_media_types must list at least one media type")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> SynthesisConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    return get_config_manager().get_config(custom_config, config_file)


# Example configuration file for reference
EXAMPLE_CONFIG = {
    "extraction_threshold": 3,
    "fallback_name_prefix": "Model",
    "response_name_suffix": "Response",
    "json_media_types": ["application/json", "application/vnd.api+json"],
}
