"""Filtered view over the catalogue with a wrapping cursor."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from phonebook.models import Project
from phonebook.core.ranking import DEFAULT_PATH_DIVISOR, rank

logger = logging.getLogger(__name__)


@dataclass
class FilterState:
    """Query, ranked visible indices and cursor.

    Attributes:
        query: Query as typed (may be empty)
        visible_order: Catalogue indices in rank order
        cursor: Position in ``visible_order``, None when nothing is visible
    """

    query: str = ""
    visible_order: List[int] = field(default_factory=list)
    cursor: Optional[int] = None


class FilterController:
    """Owns the FilterState for a read-only view of the catalogue.

    Every recomputation (new query or changed catalogue) puts the cursor back
    on the first visible entry.
    """

    def __init__(
        self,
        projects: Sequence[Project] = (),
        path_divisor: int = DEFAULT_PATH_DIVISOR,
    ):
        self.projects: Sequence[Project] = list(projects)
        self.path_divisor = path_divisor
        self.state = FilterState()
        self.set_query("")

    @property
    def query(self) -> str:
        return self.state.query

    @property
    def visible_order(self) -> List[int]:
        return list(self.state.visible_order)

    @property
    def cursor(self) -> Optional[int]:
        return self.state.cursor

    def set_query(self, query: str) -> None:
        """Store ``query`` and recompute the visible order."""
        order = rank(query, self.projects, self.path_divisor)
        self.state = FilterState(
            query=query,
            visible_order=order,
            cursor=0 if order else None,
        )
        logger.debug(f"Query {query!r} matched {len(order)}/{len(self.projects)}")

    def refresh(self, projects: Optional[Sequence[Project]] = None) -> None:
        """Re-apply the current query after the catalogue changed.

        Args:
            projects: New catalogue contents. If None, the current view is re-ranked.
        """
        if projects is not None:
            self.projects = list(projects)
        self.set_query(self.state.query)

    def move_cursor(self, delta: int) -> None:
        """Move the cursor by ``delta``, wrapping at both ends."""
        if not self.state.visible_order:
            return
        self.state.cursor = (self.state.cursor + delta) % len(self.state.visible_order)

    def current_index(self) -> Optional[int]:
        """Catalogue index under the cursor, or None when nothing is selected."""
        if self.state.cursor is None:
            return None
        return self.state.visible_order[self.state.cursor]

    def selected_project(self) -> Optional[Project]:
        index = self.current_index()
        return None if index is None else self.projects[index]

    def visible_projects(self) -> List[Project]:
        """Projects in visible order."""
        return [self.projects[i] for i in self.state.visible_order]
