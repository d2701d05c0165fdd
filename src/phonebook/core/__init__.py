"""Interactive selection engine."""

from phonebook.core.ranking import score, score_project, rank
from phonebook.core.completion import PathCompleter, Completion, longest_common_prefix
from phonebook.core.filter import FilterController, FilterState
from phonebook.core.form import (
    FormController,
    FormState,
    FormValidationError,
    FormStateError,
)
from phonebook.core.session import Session, Mode, KeyPress, Status

__all__ = [
    "score",
    "score_project",
    "rank",
    "PathCompleter",
    "Completion",
    "longest_common_prefix",
    "FilterController",
    "FilterState",
    "FormController",
    "FormState",
    "FormValidationError",
    "FormStateError",
    "Session",
    "Mode",
    "KeyPress",
    "Status",
]
