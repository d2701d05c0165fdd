"""Shell-style path completion for the add form."""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from phonebook.core.filesystem import (
    HomeDirectoryResolver,
    LocalFileSystem,
    expand_home,
)

logger = logging.getLogger(__name__)


@dataclass
class Completion:
    """Result of completing a partial path.

    Attributes:
        proposed: Text that should replace the input
        candidates: Every matching path when the completion is ambiguous,
            empty when it is unambiguous or nothing matched
    """

    proposed: str
    candidates: List[str] = field(default_factory=list)

    @property
    def unambiguous(self) -> bool:
        return not self.candidates


def longest_common_prefix(strings: Sequence[str]) -> str:
    """Longest string that every item in ``strings`` starts with."""
    if not strings:
        return ""

    prefix = strings[0]
    for s in strings[1:]:
        while not s.startswith(prefix):
            prefix = prefix[:-1]
            if not prefix:
                return ""
    return prefix


class PathCompleter:
    """Completes partial paths against directory listings."""

    def __init__(
        self,
        filesystem: Optional[LocalFileSystem] = None,
        home: Optional[HomeDirectoryResolver] = None,
    ):
        self.filesystem = filesystem or LocalFileSystem()
        self.home = home or HomeDirectoryResolver()

    def complete(self, partial: str) -> Completion:
        """Complete ``partial`` the way a shell completes on tab.

        Args:
            partial: Path as typed, possibly starting with ``~``

        Returns:
            Completion with the proposed text and any candidates
        """
        expanded = expand_home(partial, self.home)

        # Everything up to the last separator is kept verbatim in candidates
        head, sep, prefix = expanded.rpartition(os.sep)
        if sep:
            typed_dir = head + sep
            directory = typed_dir
        else:
            typed_dir = ""
            directory = os.curdir

        try:
            entries = self.filesystem.list_entries(directory)
        except OSError as e:
            logger.debug(f"Cannot list {directory} for completion: {e}")
            return Completion(partial)

        show_hidden = prefix.startswith(".")
        matches = []
        for entry in entries:
            if entry.name.startswith(".") and not show_hidden:
                continue
            if not entry.name.startswith(prefix):
                continue
            candidate = typed_dir + entry.name
            if entry.is_dir:
                candidate += os.sep
            matches.append(candidate)
        matches.sort()

        logger.debug(f"Completing {partial!r}: {len(matches)} candidates")

        if len(matches) == 1:
            return Completion(matches[0])
        if not matches:
            return Completion(partial)

        common = longest_common_prefix(matches)
        if len(common) > len(expanded):
            return Completion(common, matches)
        return Completion(partial, matches)
