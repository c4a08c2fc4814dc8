"""
gopack User Configuration

Hierarchical config system with global defaults + local overrides:
- Global: ~/.gopack/config.json (cross-project settings)
- Local: .gopack/config.json (project-specific overrides)

Config structure:
{
  "fetch": {
    "max_workers": null         // Workers per dependency level (null = one per dep)
  },
  "output": {
    "colors": true              // Colorized console output
  }
}
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional
from gopack.logging_config import logger
from gopack.paths import GopackPaths


# Default configuration
DEFAULT_CONFIG = {
    "fetch": {
        "max_workers": None,
    },
    "output": {
        "colors": True,
    },
}


class UserConfig:
    """
    Manages hierarchical user configuration.

    Load order (with override):
    1. Default config (hardcoded)
    2. Global config (~/.gopack/config.json)
    3. Local config (.gopack/config.json)
    """

    def __init__(self, project_root: Optional[Path] = None, global_config_path: Optional[Path] = None):
        paths = GopackPaths(project_root)
        self.project_root = paths.project_root
        self.global_config_path = global_config_path or GopackPaths.GLOBAL_DIR / GopackPaths.USER_CONFIG_NAME
        self.local_config_path = paths.user_config_file

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        config = copy.deepcopy(DEFAULT_CONFIG)

        for label, path in (("global", self.global_config_path), ("local", self.local_config_path)):
            if not path.exists():
                continue
            try:
                with open(path, "r") as f:
                    config = self._deep_merge(config, json.load(f))
                    logger.debug(f"Loaded {label} config from {path}")
            except (OSError, ValueError) as e:
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

        Examples:
            config.get("fetch.max_workers")  # None
            config.get("output.colors")      # True
        """
        value = self._config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @property
    def max_workers(self) -> Optional[int]:
        value = self.get("fetch.max_workers")
        if isinstance(value, int) and value > 0:
            return value
        return None

    @property
    def colors(self) -> bool:
        return bool(self.get("output.colors", True))
