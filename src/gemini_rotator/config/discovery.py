"""Lookup of the gemini-rotator TOML configuration file."""

import subprocess  # nosec B404 - only runs git
from collections.abc import Iterator
from pathlib import Path

from gemini_rotator.core.system import get_xdg_config_home


CONFIG_FILE_NAMES = (".gemini_rotator.toml", "gemini_rotator.toml")
USER_CONFIG_FILE_NAME = "config.toml"


def user_config_dir() -> Path:
    """Per-user directory holding ``config.toml``."""
    return get_xdg_config_home() / "gemini_rotator"


def repository_root(start: Path) -> Path | None:
    """Return the top of the git checkout containing ``start``, if any."""
    try:
        completed = subprocess.run(  # nosec B603 B607 - fixed argv
            ["git", "rev-parse", "--show-toplevel"],
            cwd=start,
            capture_output=True,
            text=True,
            check=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None

    top = completed.stdout.strip()
    return Path(top) if top else None


def candidate_config_files(cwd: Path | None = None) -> Iterator[Path]:
    """Yield config file locations from the most to the least specific.

    Project files in ``cwd`` come first, then the same names at the root
    of the enclosing git checkout, then the per-user ``config.toml``.
    """
    cwd = Path.cwd() if cwd is None else cwd
    search_dirs = [cwd]
    root = repository_root(cwd)
    if root is not None and root.resolve() != cwd.resolve():
        search_dirs.append(root)

    for directory in search_dirs:
        for name in CONFIG_FILE_NAMES:
            yield directory / name
    yield user_config_dir() / USER_CONFIG_FILE_NAME


def find_toml_config_file(cwd: Path | None = None) -> Path | None:
    """Return the first existing config file, or None."""
    return next((path for path in candidate_config_files(cwd) if path.is_file()), None)
