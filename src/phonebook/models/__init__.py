"""Core data models for Phonebook."""

from .base import PhonebookBaseModel
from .project import Project

__all__ = [
    "PhonebookBaseModel",
    "Project",
]
