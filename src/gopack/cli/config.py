"""
CLI Configuration

Centralized configuration for the gopack CLI subsystem.
"""

import os
from typing import Optional

from gopack.user_config import UserConfig


class CLIConfig:
    """Configuration for CLI commands"""

    # Colors follow GOPACK_SKIP_COLORS, then output.colors in config.json
    _show_colors: Optional[bool] = None

    @classmethod
    def set_show_colors(cls, enabled: Optional[bool]) -> None:
        """Force colors on or off (None goes back to env/config lookup)"""
        cls._show_colors = enabled

    @classmethod
    def show_colors(cls, user_config: Optional[UserConfig] = None) -> bool:
        """
        Check if colored output is enabled.

        GOPACK_SKIP_COLORS=1 always wins over the config file.
        """
        if cls._show_colors is not None:
            return cls._show_colors
        if os.getenv("GOPACK_SKIP_COLORS") == "1":
            return False
        if user_config is None:
            user_config = UserConfig()
        return user_config.colors
