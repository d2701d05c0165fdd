"""Filesystem access used by path completion and validation.

Everything the selection engine knows about the disk goes through the two
small classes here, so tests can substitute an in-memory double.
"""

import enum
import os
import stat as stat_module
from dataclasses import dataclass
from pathlib import Path
from typing import List


class PathKind(enum.Enum):
    """Result of stat-ing a path."""

    MISSING = "missing"
    DIRECTORY = "directory"
    OTHER = "other"


@dataclass(frozen=True)
class DirEntry:
    """A single directory listing entry."""

    name: str
    is_dir: bool


class LocalFileSystem:
    """FileSystem backed by the real disk."""

    def stat(self, path: str) -> PathKind:
        """Classify a path.

        Raises:
            OSError: For failures other than the path not existing
        """
        try:
            st = os.stat(path)
        except FileNotFoundError:
            return PathKind.MISSING
        except NotADirectoryError:
            # A parent component is a regular file
            return PathKind.MISSING
        if stat_module.S_ISDIR(st.st_mode):
            return PathKind.DIRECTORY
        return PathKind.OTHER

    def list_entries(self, directory: str) -> List[DirEntry]:
        """List a directory, sorted by name.

        Raises:
            OSError: If the directory cannot be read
        """
        entries = []
        with os.scandir(directory) as it:
            for entry in it:
                try:
                    is_dir = entry.is_dir()
                except OSError:
                    is_dir = False
                entries.append(DirEntry(name=entry.name, is_dir=is_dir))
        entries.sort(key=lambda e: e.name)
        return entries


class HomeDirectoryResolver:
    """Resolves the user's home directory."""

    def home_directory(self) -> str:
        """Return the home directory.

        Raises:
            RuntimeError: If it cannot be determined
        """
        return str(Path.home())


def expand_home(path: str, resolver: HomeDirectoryResolver) -> str:
    """Expand a leading ``~`` or ``~/`` to the home directory.

    The path is returned unchanged when the home directory is unknown.
    """
    if path != "~" and not path.startswith("~" + os.sep):
        return path
    try:
        home = resolver.home_directory()
    except RuntimeError:
        return path
    if path == "~":
        return home
    return os.path.join(home, path[2:])
