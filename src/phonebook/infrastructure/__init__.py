"""Storage backends for Phonebook."""

from phonebook.infrastructure.project_store import (
    ProjectStore,
    ProjectStoreError,
    ProjectNotFoundError,
)

__all__ = ["ProjectStore", "ProjectStoreError", "ProjectNotFoundError"]
