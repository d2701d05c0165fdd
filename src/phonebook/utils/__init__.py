"""Utility modules for Phonebook."""

from phonebook.utils.path_validator import (
    validate_path,
    expand_path,
    PATH_MISSING_MESSAGE,
    PATH_NOT_DIRECTORY_MESSAGE,
)

__all__ = [
    "validate_path",
    "expand_path",
    "PATH_MISSING_MESSAGE",
    "PATH_NOT_DIRECTORY_MESSAGE",
]
