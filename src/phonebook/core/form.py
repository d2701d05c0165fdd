"""State machine behind the "add project" form.

Focus cycles over the four fields and a submit control (index 4). The path
field is validated on every change and can be completed against the
filesystem.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from phonebook.models import Project
from phonebook.models.base import utc_now
from phonebook.core.completion import Completion, PathCompleter
from phonebook.core.filesystem import HomeDirectoryResolver, LocalFileSystem
from phonebook.utils.path_validator import expand_path, validate_path

logger = logging.getLogger(__name__)

NAME_FIELD = 0
PATH_FIELD = 1
TAG_FIELD = 2
DESCRIPTION_FIELD = 3
FIELD_COUNT = 4
SUBMIT_INDEX = FIELD_COUNT

REQUIRED_MESSAGE = "Name and Path are required!"


class FormValidationError(ValueError):
    """Raised when a submitted form is missing data or has a bad path."""

    pass


class FormStateError(RuntimeError):
    """Raised when an operation is not allowed in the current focus state."""

    pass


@dataclass
class FieldBuffer:
    """Editable single-line text with an insertion point."""

    label: str
    placeholder: str = ""
    char_limit: int = 500
    value: str = ""
    cursor: int = 0
    focused: bool = False

    def set_value(self, value: str) -> None:
        """Replace the text and put the cursor at the end."""
        self.value = value[: self.char_limit]
        self.cursor = len(self.value)

    def clear(self) -> None:
        self.value = ""
        self.cursor = 0

    def insert(self, text: str) -> None:
        room = self.char_limit - len(self.value)
        if room <= 0:
            return
        text = text[:room]
        self.value = self.value[: self.cursor] + text + self.value[self.cursor :]
        self.cursor += len(text)

    def backspace(self) -> None:
        if self.cursor == 0:
            return
        self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
        self.cursor -= 1

    def delete(self) -> None:
        self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]

    def move(self, delta: int) -> None:
        self.cursor = min(max(self.cursor + delta, 0), len(self.value))

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.value)


def default_fields() -> List[FieldBuffer]:
    """The four form fields with their placeholders and limits."""
    return [
        FieldBuffer("Project Name", "My Awesome Project", char_limit=100),
        FieldBuffer("Project Path", "/home/user/projects/awesome-project", char_limit=500),
        FieldBuffer("Tags", "go, rust, python", char_limit=50),
        FieldBuffer("Description", "A brief description of your project", char_limit=500),
    ]


@dataclass
class FormState:
    """Buffers, focus and path feedback of the add form.

    Attributes:
        fields: Name, path, tag and description buffers
        focus_index: Focused field, or SUBMIT_INDEX for the submit control
        path_validation: Problem with the path buffer, empty when valid/untested
        autocomplete_candidates: Paths offered by the last ambiguous completion
    """

    fields: List[FieldBuffer] = field(default_factory=default_fields)
    focus_index: int = 0
    path_validation: str = ""
    autocomplete_candidates: List[str] = field(default_factory=list)

    @property
    def focused_field(self) -> Optional[FieldBuffer]:
        if self.focus_index >= len(self.fields):
            return None
        return self.fields[self.focus_index]

    @property
    def on_submit(self) -> bool:
        return self.focus_index == len(self.fields)


class FormController:
    """Drives a FormState in response to user input."""

    def __init__(
        self,
        completer: Optional[PathCompleter] = None,
        filesystem: Optional[LocalFileSystem] = None,
        home: Optional[HomeDirectoryResolver] = None,
    ):
        self.filesystem = filesystem or LocalFileSystem()
        self.home = home or HomeDirectoryResolver()
        self.completer = completer or PathCompleter(self.filesystem, self.home)
        self.state = FormState()
        self._apply_focus()

    # Focus

    def next(self) -> None:
        """Focus the following control, wrapping after submit."""
        self._set_focus((self.state.focus_index + 1) % (FIELD_COUNT + 1))

    def previous(self) -> None:
        """Focus the preceding control, wrapping before the first field."""
        self._set_focus((self.state.focus_index - 1) % (FIELD_COUNT + 1))

    def advance(self) -> None:
        """Move towards submit without wrapping (enter on a field)."""
        self._set_focus(min(self.state.focus_index + 1, SUBMIT_INDEX))

    def _set_focus(self, index: int) -> None:
        self.state.focus_index = index
        self.state.autocomplete_candidates = []
        self._apply_focus()

    def _apply_focus(self) -> None:
        for i, buffer in enumerate(self.state.fields):
            buffer.focused = i == self.state.focus_index

    # Editing

    def insert_text(self, text: str) -> None:
        self._edit(lambda buffer: buffer.insert(text))

    def backspace(self) -> None:
        self._edit(lambda buffer: buffer.backspace())

    def delete(self) -> None:
        self._edit(lambda buffer: buffer.delete())

    def move_cursor(self, delta: int) -> None:
        self._edit(lambda buffer: buffer.move(delta))

    def cursor_home(self) -> None:
        self._edit(lambda buffer: buffer.home())

    def cursor_end(self) -> None:
        self._edit(lambda buffer: buffer.end())

    def _edit(self, operation) -> None:
        buffer = self.state.focused_field
        if buffer is None:
            return

        before = buffer.value
        operation(buffer)

        if self.state.focus_index == PATH_FIELD and buffer.value != before:
            self.state.path_validation = self._validate(buffer.value)
            self.state.autocomplete_candidates = []

    # Completion

    @property
    def path_value(self) -> str:
        return self.state.fields[PATH_FIELD].value

    def begin_completion(self) -> str:
        """Snapshot the path buffer a completion will be computed for.

        Raises:
            FormStateError: If the path field is not focused
        """
        if self.state.focus_index != PATH_FIELD:
            raise FormStateError("Completion is only available on the path field")
        return self.path_value

    def finish_completion(self, source: str, completion: Completion) -> bool:
        """Apply a completion computed for ``source``.

        Results for a buffer that has since been edited are discarded.

        Returns:
            True if the result was applied
        """
        if source != self.path_value or self.state.focus_index != PATH_FIELD:
            logger.debug(f"Discarding stale completion for {source!r}")
            return False

        buffer = self.state.fields[PATH_FIELD]
        if completion.proposed != buffer.value:
            buffer.set_value(completion.proposed)

        self.state.autocomplete_candidates = list(completion.candidates)
        if completion.unambiguous:
            self.state.path_validation = self._validate(buffer.value)
        return True

    def complete(self) -> Completion:
        """Complete the path buffer in place."""
        source = self.begin_completion()
        completion = self.completer.complete(source)
        self.finish_completion(source, completion)
        return completion

    # Submission

    def submit(self, save: Optional[Callable[[Project], Project]] = None) -> Project:
        """Turn the buffers into a Project and reset the form.

        Args:
            save: Called with the new project before the form is reset. If it
                raises, the exception propagates and the buffers are kept.

        Returns:
            The new project with an absolute path, or whatever ``save`` returned

        Raises:
            FormStateError: If the submit control is not focused
            FormValidationError: If name/path are missing or the path is invalid
        """
        if not self.state.on_submit:
            raise FormStateError("Submit control is not focused")

        name, path, tag, description = (b.value.strip() for b in self.state.fields)
        if not name or not path:
            raise FormValidationError(REQUIRED_MESSAGE)

        problem = self._validate(path)
        if problem:
            self.state.path_validation = problem
            raise FormValidationError(f"Cannot add project: {problem}")

        now = utc_now()
        project = Project(
            name=name,
            path=expand_path(path, self.home),
            tag=tag,
            description=description,
            created_at=now,
            updated_at=now,
        )
        if save is not None:
            project = save(project)
        logger.info(f"Form submitted project '{project.name}' at {project.path}")
        self.reset()
        return project

    def cancel(self) -> None:
        """Abandon the form without producing a project."""
        self.reset()

    def reset(self) -> None:
        """Clear every buffer and focus the first field."""
        for buffer in self.state.fields:
            buffer.clear()
        self.state.path_validation = ""
        self.state.autocomplete_candidates = []
        self.state.focus_index = 0
        self._apply_focus()

    def _validate(self, path: str) -> str:
        return validate_path(path, self.filesystem, self.home)
