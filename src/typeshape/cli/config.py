"""
CLI Configuration

Centralized configuration for the typeshape CLI.
"""

import os
from typing import Optional


class CLIConfig:
    """Configuration for CLI commands"""

    PANEL_TITLE = "Serialize This"

    # Machine mode (plain output, no panels or colors)
    _machine_mode: Optional[bool] = None

    @classmethod
    def set_machine_mode(cls, enabled: Optional[bool]) -> None:
        """Set machine mode; None falls back to the environment."""
        cls._machine_mode = enabled

    @classmethod
    def is_machine_mode(cls) -> bool:
        """
        Check if machine mode is active.

        Machine mode is the default. Returns False only if human mode is
        requested with --human or TYPESHAPE_HUMAN_MODE.
        """
        if cls._machine_mode is not None:
            return cls._machine_mode
        if os.getenv("TYPESHAPE_HUMAN_MODE", "").lower() in ("1", "true", "yes"):
            return False
        return True
