"""Expansion of dependency globs into concrete file paths.

Two kinds of pattern are supported:

- Plain shell globs (``config/*.yml``) are matched relative to the working
  directory, keeping regular files only.
- Recursive globs (``src/**/*.go``) are split at the ``**`` marker into a
  base directory and a remainder. Every regular file below the base
  directory whose path ends with the remainder is kept.

Results are always sorted so the same tree yields the same tag on every
machine, whatever order the filesystem lists directory entries in.
"""

import glob
import logging
import os
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

RECURSIVE_MARKER = "**"


def expand_glob(pattern: str, cwd: Path | str = ".") -> list[str]:
    """Resolve a dependency glob into an ordered list of existing files.

    Args:
        pattern: Glob pattern, optionally containing ``**``
        cwd: Directory that relative patterns are resolved against

    Returns:
        Sorted list of file paths, spelled relative to ``cwd`` unless the
        pattern is absolute. A pattern that matches nothing yields an
        empty list.
    """
    cwd = Path(cwd)
    if RECURSIVE_MARKER in pattern:
        return _expand_recursive(pattern, cwd)
    return _expand_plain(pattern, cwd)


def split_recursive_pattern(pattern: str) -> tuple[str, str, bool]:
    """Split a recursive pattern at its first ``**`` marker.

    Returns:
        Tuple of (base directory, remainder, anchored). ``anchored`` is True
        when the remainder started at a path separator, i.e. it names whole
        trailing path components.

    Examples:
        >>> split_recursive_pattern("src/**/*.go")
        ("src/", "*.go", True)
        >>> split_recursive_pattern("**.json")
        (".", ".json", False)
    """
    base_dir, _, remainder = pattern.partition(RECURSIVE_MARKER)
    if not base_dir:
        base_dir = "."

    anchored = remainder.startswith("/")
    if anchored:
        remainder = remainder[1:]
    # Nested markers match a single path component
    remainder = remainder.replace(RECURSIVE_MARKER, "*")

    return base_dir, remainder, anchored


def _expand_plain(pattern: str, cwd: Path) -> list[str]:
    matches = glob.glob(pattern, root_dir=cwd)
    return sorted(m for m in matches if (cwd / m).is_file())


def _expand_recursive(pattern: str, cwd: Path) -> list[str]:
    base_dir, remainder, anchored = split_recursive_pattern(pattern)
    suffix = remainder if anchored or not remainder else "*" + remainder

    root = cwd / base_dir
    if not root.is_dir():
        logger.debug(f"Base directory does not exist: {root}")
        return []

    def on_error(error: OSError) -> None:
        logger.debug(f"Skipping unreadable directory: {error}")

    results: list[str] = []
    for dirpath, _, filenames in os.walk(root, onerror=on_error):
        for filename in filenames:
            full_path = Path(dirpath) / filename
            # Symlinks are not regular files for the purpose of a recursive walk
            if full_path.is_symlink() or not full_path.is_file():
                continue
            relative = PurePosixPath(full_path.relative_to(root).as_posix())
            if suffix and not relative.match(suffix):
                continue
            results.append(os.path.join(base_dir, relative.as_posix()))

    return sorted(results)
