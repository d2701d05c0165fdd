"""JSON file storage for the project catalogue."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from phonebook.models import Project
from phonebook.models.base import utc_now

logger = logging.getLogger(__name__)

_catalogue_adapter = TypeAdapter(List[Project])


class ProjectStoreError(Exception):
    """Raised when the catalogue file cannot be read or parsed."""

    pass


class ProjectNotFoundError(IndexError):
    """Raised for an index outside the catalogue."""

    pass


class ProjectStore:
    """Catalogue of projects persisted as a JSON array.

    The in-memory list is ordered most-recently-updated first when loaded and
    keeps that order until the next load, even when a project is opened.
    """

    def __init__(self, path: Path):
        """Initialize the store.

        Args:
            path: Catalogue file, created on first save
        """
        self.path = Path(path)
        self._projects: List[Project] = []
        self._loaded = False

    def load(self) -> List[Project]:
        """Read the catalogue from disk.

        Returns:
            Projects, most recently updated first

        Raises:
            ProjectStoreError: If the file is not a valid catalogue
            OSError: If the file exists but cannot be read
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        if not self.path.exists():
            self._projects = []
        else:
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    raw = f.read()
            except UnicodeDecodeError as e:
                raise ProjectStoreError(f"Catalogue file {self.path} is not UTF-8: {e}") from e
            try:
                projects = _catalogue_adapter.validate_json(raw) if raw.strip() else []
            except ValidationError as e:
                raise ProjectStoreError(f"Invalid catalogue file {self.path}: {e}") from e
            projects.sort(key=lambda p: p.updated_at, reverse=True)
            self._projects = projects

        self._loaded = True
        logger.info(f"Loaded {len(self._projects)} projects from {self.path}")
        return self.list()

    def reload(self) -> List[Project]:
        """Discard in-memory state and read the file again."""
        return self.load()

    def list(self) -> List[Project]:
        """Snapshot of the catalogue in stored order."""
        if not self._loaded:
            self.load()
        return list(self._projects)

    def __len__(self) -> int:
        return len(self.list())

    def find(self, name: str) -> Optional[int]:
        """Index of the first project called ``name``, or None."""
        for index, project in enumerate(self.list()):
            if project.name == name:
                return index
        return None

    def append(self, project: Project) -> Project:
        """Stamp ``project`` as new, put it first, and save.

        Returns:
            The stored project
        """
        self.list()
        now = utc_now()
        project = project.model_copy(update={"created_at": now, "updated_at": now})
        self._projects.insert(0, project)
        self.save()
        logger.info(f"Added project '{project.name}' ({project.path})")
        return project

    def remove(self, index: int) -> Project:
        """Delete the project at ``index`` and save.

        Raises:
            ProjectNotFoundError: If ``index`` is out of range
        """
        self._check_index(index)
        project = self._projects.pop(index)
        self.save()
        logger.info(f"Removed project '{project.name}'")
        return project

    def touch_updated_at(self, index: int) -> Project:
        """Mark the project at ``index`` as just opened and save.

        Raises:
            ProjectNotFoundError: If ``index`` is out of range
        """
        self._check_index(index)
        project = self._projects[index].touch()
        self._projects[index] = project
        self.save()
        return project

    def save(self) -> None:
        """Write the catalogue, replacing the file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(
            [p.model_dump(mode="json") for p in self._projects], indent=2
        )

        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=".projects-", suffix=".json"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _check_index(self, index: int) -> None:
        self.list()
        if index < 0 or index >= len(self._projects):
            raise ProjectNotFoundError(f"No project at index {index}")
