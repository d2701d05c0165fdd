"""Interactive session: routes keystrokes to the filter or the add form.

The session is either listing the catalogue (optionally with the search box
focused) or adding a project. Each call to ``handle_key`` performs one
transition and returns the effects the host must carry out; everything shown
on screen is exposed as plain data.
"""

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from phonebook.models import Project
from phonebook.core.editor import LaunchResult
from phonebook.core.filter import FilterController
from phonebook.core.form import (
    PATH_FIELD,
    FormController,
    FormStateError,
    FormValidationError,
)
from phonebook.core.ranking import DEFAULT_PATH_DIVISOR
from phonebook.infrastructure.project_store import (
    ProjectNotFoundError,
    ProjectStore,
    ProjectStoreError,
)

logger = logging.getLogger(__name__)


class Mode(enum.Enum):
    LISTING = "listing"
    ADDING = "adding"


@dataclass(frozen=True)
class KeyPress:
    """A key event as reported by the terminal layer.

    Attributes:
        key: Key name, e.g. "enter", "shift+tab", "a"
        character: Printable character produced by the key, if any
    """

    key: str
    character: Optional[str] = None

    @property
    def printable(self) -> Optional[str]:
        if self.character and len(self.character) == 1 and self.character.isprintable():
            return self.character
        return None

    @property
    def name(self) -> str:
        return self.printable or self.key


@dataclass(frozen=True)
class Status:
    message: str = ""
    is_error: bool = False


@dataclass(frozen=True)
class QuitEffect:
    pass


@dataclass(frozen=True)
class OpenEffect:
    """The host should launch the editor and call ``Session.finish_open``."""

    index: int
    project: Project


Effect = Union[QuitEffect, OpenEffect]


class Session:
    """Mode-tagged owner of the filter and form controllers."""

    def __init__(
        self,
        store: ProjectStore,
        form: Optional[FormController] = None,
        path_divisor: int = DEFAULT_PATH_DIVISOR,
    ):
        self.store = store
        self.form = form or FormController()
        self.mode = Mode.LISTING
        self.filtering = False
        self.status = Status()
        self._pending_open: Optional[str] = None

        try:
            projects = store.list()
        except (OSError, ProjectStoreError) as e:
            logger.error(f"Error loading projects: {e}")
            projects = []
            self.status = Status(f"Error loading projects: {e}", is_error=True)
        self.filter = FilterController(projects, path_divisor=path_divisor)

    def handle_key(self, key: KeyPress) -> List[Effect]:
        """Apply one keystroke."""
        if self.mode is Mode.ADDING:
            return self._handle_adding(key)
        if self.filtering:
            return self._handle_filtering(key)
        return self._handle_listing(key)

    # Listing

    def _handle_listing(self, key: KeyPress) -> List[Effect]:
        name = key.name
        if name in ("q", "ctrl+c"):
            return [QuitEffect()]
        if name == "a":
            self.start_adding()
        elif name == "/":
            self.filtering = True
            self.status = Status()
        elif name in ("j", "down"):
            self._move(1)
        elif name in ("k", "up"):
            self._move(-1)
        elif name == "d":
            self.delete_selected()
        elif name in ("o", "enter"):
            return self.open_selected()
        elif name == "r":
            self.reload()
        return []

    def _move(self, delta: int) -> None:
        if self.filter.current_index() is None:
            return
        self.filter.move_cursor(delta)
        self.status = Status()

    # Filtering

    def _handle_filtering(self, key: KeyPress) -> List[Effect]:
        name = key.name
        if name == "escape":
            self.filtering = False
            self.filter.set_query("")
            self.status = Status()
        elif name == "enter":
            effects = self.open_selected()
            if effects:
                self.filtering = False
            return effects
        elif name in ("down", "ctrl+n"):
            self.filter.move_cursor(1)
        elif name in ("up", "ctrl+p"):
            self.filter.move_cursor(-1)
        elif name == "ctrl+c":
            return [QuitEffect()]
        elif name == "backspace":
            if self.filter.query:
                self.filter.set_query(self.filter.query[:-1])
        elif key.printable:
            self.filter.set_query(self.filter.query + key.printable)
        return []

    # Adding

    def start_adding(self) -> None:
        self.mode = Mode.ADDING
        self.form.reset()
        self.status = Status()

    def _handle_adding(self, key: KeyPress) -> List[Effect]:
        form = self.form
        focus = form.state.focus_index
        name = key.name

        if name == "tab":
            if focus == PATH_FIELD:
                form.complete()
            else:
                form.next()
        elif name == "escape":
            form.cancel()
            self.mode = Mode.LISTING
            self.status = Status("Cancelled")
        elif name in ("shift+tab", "up"):
            form.previous()
        elif name == "down":
            if not form.state.autocomplete_candidates:
                form.next()
        elif name == "enter":
            if form.state.on_submit:
                self.submit_form()
            else:
                form.advance()
        elif name == "backspace":
            form.backspace()
        elif name == "delete":
            form.delete()
        elif name == "left":
            form.move_cursor(-1)
        elif name == "right":
            form.move_cursor(1)
        elif name == "home":
            form.cursor_home()
        elif name == "end":
            form.cursor_end()
        elif key.printable:
            form.insert_text(key.printable)
        return []

    def submit_form(self) -> Optional[Project]:
        """Submit the form and store the new project.

        Returns:
            The stored project, or None if the form was rejected
        """
        try:
            project = self.form.submit(save=self.store.append)
        except (FormValidationError, FormStateError) as e:
            self.status = Status(str(e), is_error=True)
            return None
        except (OSError, ProjectStoreError) as e:
            logger.error(f"Failed to save project: {e}")
            self.status = Status(f"Error: {e}", is_error=True)
            return None

        self.filter.projects = self.store.list()
        self.filter.set_query("")
        self.filtering = False
        self.mode = Mode.LISTING
        self.status = Status(f"Added '{project.name}'")
        return project

    # Catalogue actions

    def open_selected(self) -> List[Effect]:
        """Mark the selected project as opened and ask the host to launch it."""
        index = self.filter.current_index()
        if index is None:
            self.status = Status("No project to open", is_error=True)
            return []

        try:
            project = self.store.touch_updated_at(index)
        except ProjectNotFoundError:
            self.status = Status("No project to open", is_error=True)
            return []
        except (OSError, ProjectStoreError) as e:
            # Launching still makes sense when only the timestamp was lost
            logger.error(f"Failed to record open time: {e}")
            project = self.filter.projects[index]

        self.filter.projects = self.store.list()
        self._pending_open = project.path
        self.status = Status(f"Opening '{project.name}'...")
        return [OpenEffect(index=index, project=project)]

    def finish_open(self, result: LaunchResult) -> bool:
        """Consume the result of the editor launched for the last OpenEffect.

        Returns:
            False if there was no launch waiting for this result
        """
        if self._pending_open is None or result.path != self._pending_open:
            logger.debug(f"Ignoring unexpected launch result for {result.path}")
            return False

        self._pending_open = None
        if result.ok:
            self.status = Status("Returned from editor")
        else:
            self.status = Status(f"Error: {result.error}", is_error=True)
        return True

    def delete_selected(self) -> Optional[Project]:
        index = self.filter.current_index()
        if index is None:
            self.status = Status("No project to delete", is_error=True)
            return None

        try:
            project = self.store.remove(index)
        except ProjectNotFoundError:
            self.status = Status("No project to delete", is_error=True)
            return None
        except (OSError, ProjectStoreError) as e:
            self.status = Status(f"Error: {e}", is_error=True)
            return None

        self.filter.refresh(self.store.list())
        self.status = Status(f"Deleted '{project.name}'")
        return project

    def reload(self) -> None:
        try:
            projects = self.store.reload()
        except (OSError, ProjectStoreError) as e:
            self.status = Status(f"Error: {e}", is_error=True)
            return
        self.filter.refresh(projects)
        self.status = Status("Reloaded")
