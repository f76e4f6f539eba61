"""
typeshape Path Configuration

Centralized path management for typeshape data files.
Project paths are relative to the project root (current working directory).

Directory Structure:
.typeshape/
├── config.json          # Local configuration overrides
└── logs/                # Log files (opt-in)

~/.typeshape/
└── config.json          # Global configuration
"""

from pathlib import Path
from typing import Optional


class TypeShapePaths:
    """
    Centralized path configuration for typeshape.

    All paths are lazily resolved relative to project_root.
    Default project_root is current working directory.
    """

    TYPESHAPE_DIR = ".typeshape"

    CONFIG_NAME = "config.json"
    LOG_NAME = "typeshape.log"
    LOGS_DIR = "logs"

    def __init__(self, project_root: Optional[Path] = None, home: Optional[Path] = None):
        """
        Initialize paths configuration.

        Args:
            project_root: Root directory for the project. Defaults to CWD.
            home: Home directory holding the global config. Defaults to the user's home.
        """
        self._project_root = project_root
        self._home = home

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        if self._project_root is None:
            return Path.cwd()
        return self._project_root

    @property
    def typeshape_dir(self) -> Path:
        """Get the .typeshape directory path."""
        return self.project_root / self.TYPESHAPE_DIR

    @property
    def global_dir(self) -> Path:
        """Get the ~/.typeshape directory path."""
        home = self._home if self._home is not None else Path.home()
        return home / self.TYPESHAPE_DIR

    @property
    def local_config(self) -> Path:
        return self.typeshape_dir / self.CONFIG_NAME

    @property
    def global_config(self) -> Path:
        return self.global_dir / self.CONFIG_NAME

    @property
    def logs_dir(self) -> Path:
        """Get the logs directory path."""
        return self.typeshape_dir / self.LOGS_DIR

    @property
    def log_file(self) -> Path:
        return self.logs_dir / self.LOG_NAME

    def ensure_dirs(self) -> None:
        """Create the project directories if they don't exist."""
        self.typeshape_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(exist_ok=True)


def get_paths(project_root: Optional[Path] = None) -> TypeShapePaths:
    """
    Get the paths configuration.

    Args:
        project_root: Optional project root. Defaults to CWD.

    Returns:
        TypeShapePaths instance
    """
    return TypeShapePaths(project_root)
