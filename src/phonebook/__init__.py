"""Phonebook - browse, search and launch a catalogue of filesystem projects."""

from phonebook.models import Project
from phonebook.core.ranking import score, score_project, rank
from phonebook.core.filter import FilterController
from phonebook.core.form import FormController
from phonebook.core.completion import PathCompleter

try:
    from importlib.metadata import version, PackageNotFoundError

    __version__ = version("phonebook")
except PackageNotFoundError:
    # Running from a source checkout without installed metadata
    __version__ = "0.1.0"

__all__ = [
    "Project",
    "score",
    "score_project",
    "rank",
    "FilterController",
    "FormController",
    "PathCompleter",
]
