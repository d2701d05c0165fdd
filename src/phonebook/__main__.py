"""Allow ``python -m phonebook``."""

from phonebook.cli.main import app

if __name__ == "__main__":
    app()
