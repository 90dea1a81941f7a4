"""Path construction helpers and XDG-compliant application paths.

GenPath builds a base directory for a database from the process
location. The XDG helpers locate filedb's own configuration.

XDG defaults:
- Config: ~/.config/filedb/
- State: ~/.local/state/filedb/
"""

import os
import sys
from pathlib import Path

from filedb.core.errors import NoClosestDirError, PathStepOverflowError

# Application identifier for directory naming
APP_NAME = "filedb"


def _truncate(path: Path, steps: int) -> Path:
    """Remove ``steps`` trailing segments from a path.

    Raises:
        PathStepOverflowError: If ``steps`` is not smaller than the
            number of removable segments.
    """
    depth = len(path.parents)
    if steps < 0 or depth <= steps:
        raise PathStepOverflowError(steps, depth)
    if steps == 0:
        return path
    return path.parents[steps - 1]


def _program_path() -> Path:
    """Absolute path of the running program (script, else interpreter)."""
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).resolve()
    return Path(sys.executable).resolve()


class GenPath:
    """Builds base directories from the current process location.

    Example:
        >>> base = GenPath.from_working_dir(0)
        >>> manager = DatabaseManager(base, "database")
    """

    @staticmethod
    def from_working_dir(steps: int = 0) -> Path:
        """Return the working directory with ``steps`` segments removed.

        Raises:
            PathStepOverflowError: If ``steps`` exceeds the path depth.
        """
        return _truncate(Path.cwd(), steps)

    @staticmethod
    def from_exe(steps: int = 0) -> Path:
        """Return the program's directory with ``steps`` segments removed.

        Raises:
            PathStepOverflowError: If ``steps`` exceeds the path depth.
        """
        return _truncate(_program_path(), steps + 1)

    @staticmethod
    def from_closest_match(name: str) -> Path:
        """Find the nearest directory called ``name`` above the program.

        Walks upward from the program location. At each level the
        directory itself and its immediate child directories are checked.

        Raises:
            NoClosestDirError: If no matching directory is found.
        """
        for ancestor in _program_path().parents:
            if not ancestor.is_dir():
                continue
            if ancestor.name == name:
                return ancestor

            try:
                children = sorted(ancestor.iterdir())
            except OSError:
                continue
            for child in children:
                if child.name == name and child.is_dir():
                    return child

        raise NoClosestDirError(name)


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/filedb/ (or XDG_CONFIG_HOME/filedb/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/filedb/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/filedb/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_default_root_parent() -> Path:
    """Get the directory databases are created in when nothing is configured.

    Returns:
        Path to ~/.local/state/filedb/ (or XDG_STATE_HOME/filedb/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")
