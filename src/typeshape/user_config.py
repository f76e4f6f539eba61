"""
typeshape User Configuration

Hierarchical config system with global defaults + local overrides:
- Global: ~/.typeshape/config.json (cross-project settings)
- Local: .typeshape/config.json (project-specific overrides)

Config structure:
{
  "render": {
    "indent_size": 2,           // Spaces per outline level
    "cycle_marker": true,       // Show "<type> (cycle) <name>" for cyclic members
    "pretty_json": true,        // Indent the structured document
    "output_format": "both"     // both | text | json
  },
  "build": {
    "max_depth": 10,            // Stop expanding member types below this depth
    "include_private": false,   // Include _underscore members
    "include_properties": true  // Include annotated @property members
  }
}
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

from typeshape.logging_config import logger
from typeshape.paths import TypeShapePaths


# Default configuration
DEFAULT_CONFIG = {
    "render": {
        "indent_size": 2,
        "cycle_marker": True,
        "pretty_json": True,
        "output_format": "both",
    },
    "build": {
        "max_depth": 10,
        "include_private": False,
        "include_properties": True,
    },
}


class UserConfig:
    """
    Manages hierarchical user configuration.

    Load order (with override):
    1. Default config (hardcoded)
    2. Global config (~/.typeshape/config.json)
    3. Local config (.typeshape/config.json)
    """

    def __init__(self, project_root: Optional[Path] = None, home: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            project_root: Project root directory (defaults to CWD)
            home: Home directory for the global config (defaults to the user's home)
        """
        paths = TypeShapePaths(project_root, home=home)
        self.project_root = paths.project_root
        self.global_config_path = paths.global_config
        self.local_config_path = paths.local_config

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration with hierarchical override.

        Returns:
            Merged configuration dictionary
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        for label, path in (("global", self.global_config_path), ("local", self.local_config_path)):
            if not path.exists():
                continue
            try:
                with open(path, "r", encoding="utf-8") as f:
                    config = self._deep_merge(config, json.load(f))
                logger.debug(f"Loaded {label} config from {path}")
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load {label} config: {e}")

        return config

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dictionaries, with override taking precedence."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value by dot-separated key.

        Args:
            key: Dot-separated key (e.g., "render.indent_size")
            default: Default value if key not found

        Examples:
            config.get("render.cycle_marker")  # True
            config.get("build.max_depth")  # 10
        """
        value = self._config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set_global(self, key: str, value: Any) -> bool:
        """Set a global config value and save to disk."""
        return self._set_and_save(key, value, is_global=True)

    def set_local(self, key: str, value: Any) -> bool:
        """Set a local config value and save to disk."""
        return self._set_and_save(key, value, is_global=False)

    def _set_and_save(self, key: str, value: Any, is_global: bool) -> bool:
        """
        Set a config value and save to appropriate file.

        Returns:
            True if successful, False otherwise
        """
        config_path = self.global_config_path if is_global else self.local_config_path

        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    config = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to load config from {config_path}: {e}")
                return False
        else:
            config = {}

        keys = key.split(".")
        current = config
        for k in keys[:-1]:
            current = current.setdefault(k, {})
        current[keys[-1]] = value

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                json.dump(config, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save config to {config_path}: {e}")
            return False

        self._config = self._load_config()
        logger.info(f"Saved {'global' if is_global else 'local'} config: {key}={value}")
        return True

    def get_all(self) -> Dict[str, Any]:
        """Get the entire merged configuration."""
        return copy.deepcopy(self._config)
