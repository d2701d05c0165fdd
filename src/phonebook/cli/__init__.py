"""Command-line interface for Phonebook."""
