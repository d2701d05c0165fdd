"""Path validation utilities for Phonebook.

Checks that a path typed into the add form points at an existing directory,
and turns it into the absolute form stored in the catalogue.
"""

import os
from typing import Optional

from phonebook.core.filesystem import (
    HomeDirectoryResolver,
    LocalFileSystem,
    PathKind,
    expand_home,
)


PATH_MISSING_MESSAGE = "Path does not exist"
PATH_NOT_DIRECTORY_MESSAGE = "Path is not a directory"


def validate_path(
    path: str,
    filesystem: Optional[LocalFileSystem] = None,
    home: Optional[HomeDirectoryResolver] = None,
) -> str:
    """Validate that a path names an existing directory.

    Valid paths:
    - Are empty (nothing has been typed yet), or
    - Expand (after ``~`` substitution) to an existing directory

    Args:
        path: The path as typed
        filesystem: FileSystem used to stat the path
        home: Resolver used for ``~`` expansion

    Returns:
        An empty string when valid, otherwise a message for the user
    """
    if not path:
        return ""

    filesystem = filesystem or LocalFileSystem()
    home = home or HomeDirectoryResolver()

    try:
        kind = filesystem.stat(expand_home(path, home))
    except OSError as e:
        return f"Error: {e}"

    if kind is PathKind.MISSING:
        return PATH_MISSING_MESSAGE
    if kind is not PathKind.DIRECTORY:
        return PATH_NOT_DIRECTORY_MESSAGE
    return ""


def expand_path(path: str, home: Optional[HomeDirectoryResolver] = None) -> str:
    """Expand ``~`` and make a path absolute.

    Args:
        path: The path as typed

    Returns:
        Absolute, normalized path
    """
    return os.path.abspath(expand_home(path, home or HomeDirectoryResolver()))

