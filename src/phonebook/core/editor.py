"""Launching an external editor on a project directory."""

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_EDITOR_COMMAND = ("nvim", ".")


@dataclass(frozen=True)
class LaunchResult:
    """Outcome of one editor session."""

    path: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class EditorLauncher:
    """Runs the editor in the foreground with the project as working directory."""

    def __init__(self, command: Optional[Sequence[str]] = None):
        self.command: List[str] = list(command or DEFAULT_EDITOR_COMMAND)

    def launch(self, path: str) -> LaunchResult:
        """Run the editor and wait for it to exit.

        Args:
            path: Project directory

        Returns:
            LaunchResult describing success or failure
        """
        if not os.path.exists(path):
            return LaunchResult(path, error=f"path does not exist: {path}")

        logger.info(f"Launching {' '.join(self.command)} in {path}")
        try:
            subprocess.run(self.command, cwd=path, check=True)
        except FileNotFoundError:
            return LaunchResult(path, error=f"editor not found: {self.command[0]}")
        except subprocess.CalledProcessError as e:
            logger.error(f"Editor exited with status {e.returncode}")
            return LaunchResult(path, error=f"editor exited with status {e.returncode}")
        return LaunchResult(path)
