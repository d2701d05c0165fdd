"""Textual front end for the interactive session.

The screen is a thin shell: every key goes to ``Session.handle_key`` and the
panels are re-rendered from the session's plain data afterwards.
"""

import logging
from typing import List, Optional, Tuple

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Static

from phonebook.config import AppConfig
from phonebook.core.editor import EditorLauncher
from phonebook.core.form import PATH_FIELD, FormState
from phonebook.core.ranking import match_span
from phonebook.core.session import (
    KeyPress,
    Mode,
    OpenEffect,
    QuitEffect,
    Session,
    Status,
)
from phonebook.infrastructure.project_store import ProjectStore
from phonebook.models import Project

logger = logging.getLogger(__name__)

LINES_PER_ITEM = 3
MAX_CANDIDATES_SHOWN = 5
PATH_WIDTH = 38

LISTING_HELP = [
    ("j/k", "move"),
    ("o/↵", "open"),
    ("a", "add"),
    ("d", "delete"),
    ("/", "search"),
    ("esc", "clear search"),
    ("r", "reload"),
    ("q", "quit"),
]
FORM_HELP = [
    ("tab", "autocomplete/next"),
    ("shift+tab", "previous"),
    ("enter", "submit"),
    ("esc", "cancel"),
]


def truncate(s: str, width: int) -> str:
    if len(s) <= width:
        return s
    return s[: width - 3] + "..."


def highlighted(query: str, value: str, style: str = "") -> Text:
    """``value`` with the substring matching ``query`` emphasised."""
    text = Text(value, style=style)
    span = match_span(query, value)
    if span:
        text.stylize("bold underline magenta", *span)
    return text


def scroll_window(cursor: Optional[int], total: int, capacity: int) -> Tuple[int, int]:
    """Slice of the visible list to draw, keeping the cursor near the middle."""
    capacity = max(capacity, 1)
    if total <= capacity or cursor is None:
        return 0, total
    start = max(cursor - capacity // 2, 0)
    end = min(start + capacity, total)
    return max(end - capacity, 0), end


def help_line(keys: List[Tuple[str, str]]) -> Text:
    text = Text()
    for i, (key, desc) in enumerate(keys):
        if i:
            text.append("  •  ", style="dim")
        text.append(key, style="bold #A78BFA")
        text.append(f" {desc}", style="dim")
    return text


def render_status(status: Status) -> Text:
    if not status.message:
        return Text()
    if status.is_error:
        return Text(f"✗ {status.message}", style="bold #F472B6")
    return Text(f"✓ {status.message}", style="bold #34D399")


def render_list(session: Session, height: int) -> Text:
    """Header, search box and the windowed list of visible projects."""
    flt = session.filter
    total = len(flt.projects)
    visible = flt.visible_projects()
    query = flt.query

    text = Text()
    text.append(" Project Phonebook ", style="bold #A78BFA")
    counter = f"{len(visible)}/{total}" if query else str(total)
    text.append(f" {counter} ", style="bold white on #60A5FA")
    text.append("\n\n")

    if query or session.filtering:
        text.append("> ", style="bold #A78BFA")
        text.append(query)
        if session.filtering:
            text.append("█", style="#A78BFA")
    else:
        text.append("Press / to search projects...", style="italic dim")
    text.append("\n\n")

    if not visible:
        text.append("✨ No projects match\n\nPress 'a' to add one", style="italic dim")
        return text

    capacity = (height - 6) // LINES_PER_ITEM
    start, end = scroll_window(flt.cursor, len(visible), capacity)
    for position in range(start, end):
        project = visible[position]
        if position == flt.cursor:
            text.append("▶ ", style="bold #FBBF24")
            text.append_text(highlighted(query, project.name, "bold #FBBF24"))
        else:
            text.append("  ")
            text.append_text(highlighted(query, project.name))
        text.append("\n")
        if project.tag:
            text.append("  #", style="bold #60A5FA")
            text.append_text(highlighted(query, project.tag, "bold #60A5FA"))
        text.append("\n")
        text.append(f"   {truncate(project.path, PATH_WIDTH)}\n", style="italic dim")

    if len(visible) > end - start:
        text.append(f"   [{start + 1}-{end} of {len(visible)}]", style="italic dim")
    return text


def render_detail(project: Optional[Project]) -> Text:
    if project is None:
        return Text("No projects available\n\nPress 'a' to add your first project", style="italic dim")

    divider = "━" * 33 + "\n"
    text = Text()
    text.append("Project Name\n", style="bold underline #A78BFA")
    text.append(f" {project.name}\n")
    text.append(divider, style="dim")
    if project.tag:
        text.append("Tag\n", style="bold underline #A78BFA")
        text.append(f"# {project.tag}\n", style="bold #60A5FA")
        text.append(divider, style="dim")
    text.append("Path\n", style="bold underline #A78BFA")
    text.append(f"{project.path}\n", style="italic dim")
    text.append(divider, style="dim")
    if project.description:
        text.append("Description\n", style="bold underline #A78BFA")
        text.append(f" {project.description}\n")
        text.append(divider, style="dim")
    text.append("Timeline\n", style="bold underline #A78BFA")
    fmt = "%b %d, %Y %H:%M"
    text.append(
        f"Created:  {project.created_at.astimezone().strftime(fmt)}\n"
        f"Modified: {project.updated_at.astimezone().strftime(fmt)}",
        style="dim",
    )
    return text


def render_form(state: FormState) -> Text:
    text = Text()
    text.append("✨ Add New Project\n\n", style="bold #A78BFA")

    for i, buffer in enumerate(state.fields):
        text.append(f"{buffer.label}\n", style="bold #60A5FA")
        text.append("> ", style="bold #A78BFA")
        if buffer.focused:
            before, after = buffer.value[: buffer.cursor], buffer.value[buffer.cursor :]
            text.append(before)
            text.append(after[:1] or " ", style="reverse")
            text.append(after[1:])
        elif buffer.value:
            text.append(buffer.value)
        else:
            text.append(buffer.placeholder, style="dim")
        text.append("\n")

        if i == PATH_FIELD and state.path_validation:
            text.append(f"⚠ {state.path_validation}\n", style="italic #FB923C")
        if i == PATH_FIELD and buffer.focused and state.autocomplete_candidates:
            candidates = state.autocomplete_candidates
            text.append(
                f"   {len(candidates)} matches - keep typing and press tab again\n",
                style="italic dim",
            )
            for candidate in candidates[:MAX_CANDIDATES_SHOWN]:
                text.append(f"    • {candidate}\n", style="dim")
            if len(candidates) > MAX_CANDIDATES_SHOWN:
                text.append(
                    f"    ... and {len(candidates) - MAX_CANDIDATES_SHOWN} more\n",
                    style="dim",
                )
        text.append("\n")

    if state.on_submit:
        text.append("  Submit  ", style="bold white on #A78BFA")
    else:
        text.append("  Submit  ", style="dim")
    return text


class PhonebookScreen(Screen):
    """Single screen showing either the catalogue or the add form."""

    def __init__(self, session: Session, launcher: EditorLauncher):
        super().__init__()
        self.session = session
        self.launcher = launcher

    def compose(self) -> ComposeResult:
        with Horizontal(id="listing"):
            yield Static(id="list-panel")
            yield Static(id="detail-panel")
        yield Static(id="form-panel")
        with Vertical(id="footer"):
            yield Static(id="help")
            yield Static(id="status")

    def on_mount(self) -> None:
        self.redraw()

    def on_resize(self, event: events.Resize) -> None:
        self.redraw()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()

        effects = self.session.handle_key(KeyPress(event.key, event.character))
        for effect in effects:
            if isinstance(effect, QuitEffect):
                self.app.exit()
                return
            if isinstance(effect, OpenEffect):
                self.launch(effect)
        self.redraw()

    def launch(self, effect: OpenEffect) -> None:
        """Hand the terminal to the editor, then report back to the session."""
        with self.app.suspend():
            result = self.launcher.launch(effect.project.path)
        self.session.finish_open(result)
        self.app.refresh()

    def redraw(self) -> None:
        adding = self.session.mode is Mode.ADDING
        self.query_one("#listing").display = not adding
        self.query_one("#form-panel").display = adding

        if adding:
            self.query_one("#form-panel", Static).update(render_form(self.session.form.state))
            self.query_one("#help", Static).update(help_line(FORM_HELP))
        else:
            height = self.size.height - 4
            self.query_one("#list-panel", Static).update(render_list(self.session, height))
            self.query_one("#detail-panel", Static).update(
                render_detail(self.session.filter.selected_project())
            )
            self.query_one("#help", Static).update(help_line(LISTING_HELP))
        self.query_one("#status", Static).update(render_status(self.session.status))


class PhonebookApp(App):
    """Project Phonebook."""

    TITLE = "Project Phonebook"
    CSS = """
    #listing {
        height: 1fr;
    }

    #list-panel {
        width: 50;
        height: 1fr;
        padding: 1 2;
        border: round #A78BFA;
    }

    #detail-panel {
        width: 1fr;
        height: 1fr;
        padding: 1 2;
        border: round #F472B6;
    }

    #form-panel {
        height: 1fr;
        padding: 1 2;
        border: round #A78BFA;
    }

    #footer {
        height: 2;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(self, session: Session, launcher: EditorLauncher):
        super().__init__()
        self.session = session
        self.launcher = launcher

    def on_mount(self) -> None:
        self.push_screen(PhonebookScreen(self.session, self.launcher))


def run_app(store: ProjectStore, config: AppConfig) -> None:
    """Run the interactive screen until the user quits."""
    session = Session(store, path_divisor=config.path_weight_divisor)
    launcher = EditorLauncher(config.editor_command)
    logger.info(f"Starting interactive session with {len(store)} projects")
    PhonebookApp(session, launcher).run()
