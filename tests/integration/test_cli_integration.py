"""Fast integration tests for CLI commands using CliRunner."""

import json
import pytest
from unittest.mock import patch
from typer.testing import CliRunner

from phonebook.cli.main import app
from phonebook.core.editor import LaunchResult

runner = CliRunner()


class TestCLIIntegration:
    """Fast CLI integration tests using CliRunner."""

    @pytest.fixture
    def projects_file(self, isolated_config):
        return isolated_config / "projects.json"

    @pytest.fixture
    def project_dir(self, workspace):
        path = workspace / "api"
        path.mkdir()
        return path

    def add(self, name, path, *extra):
        return runner.invoke(app, ["add", name, str(path), *extra])

    def test_add_and_list(self, projects_file, project_dir):
        """Test adding a project and listing the catalogue."""
        result = self.add("api", project_dir, "--tag", "work", "-d", "The API")
        assert result.exit_code == 0
        assert "Added 'api'" in result.stdout

        stored = json.loads(projects_file.read_text())
        assert stored[0]["name"] == "api"
        assert stored[0]["tag"] == "work"
        assert stored[0]["path"] == str(project_dir)

        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "api" in result.stdout
        assert "work" in result.stdout

    def test_list_empty(self):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "No projects found" in result.stdout

    def test_list_with_query(self, workspace, project_dir):
        """Test that a query filters and scores the listing."""
        other = workspace / "site"
        other.mkdir()
        self.add("api", project_dir)
        self.add("website", other)

        result = runner.invoke(app, ["list", "-q", "web"])
        assert result.exit_code == 0
        assert "website" in result.stdout
        assert "Score" in result.stdout

        result = runner.invoke(app, ["list", "--query", "zzz"])
        assert result.exit_code == 0
        assert "No projects match 'zzz'" in result.stdout

    def test_add_missing_path(self, workspace):
        """Test that a path that does not exist is rejected."""
        result = self.add("ghost", workspace / "ghost")
        assert result.exit_code == 1
        assert "Cannot add project: Path does not exist" in result.stdout

    def test_add_file_path(self, workspace):
        notes = workspace / "notes.md"
        notes.touch()
        result = self.add("notes", notes)
        assert result.exit_code == 1
        assert "Path is not a directory" in result.stdout

    def test_add_blank_name(self, project_dir):
        result = self.add("  ", project_dir)
        assert result.exit_code == 1
        assert "Name and Path are required!" in result.stdout

    def test_remove(self, projects_file, project_dir):
        """Test removing a project with --force."""
        self.add("api", project_dir)

        result = runner.invoke(app, ["remove", "api", "--force"])
        assert result.exit_code == 0
        assert "Removed 'api'" in result.stdout
        assert json.loads(projects_file.read_text()) == []
        assert project_dir.exists()

    def test_remove_confirmation_declined(self, projects_file, project_dir):
        self.add("api", project_dir)

        result = runner.invoke(app, ["remove", "api"], input="n\n")
        assert result.exit_code == 0
        assert "Cancelled" in result.stdout
        assert len(json.loads(projects_file.read_text())) == 1

    def test_remove_unknown(self):
        result = runner.invoke(app, ["remove", "nope", "-f"])
        assert result.exit_code == 1
        assert "Project 'nope' does not exist" in result.stdout

    def test_open_best_match(self, projects_file, project_dir):
        """Test that open launches the editor on the best match."""
        self.add("api", project_dir)
        before = json.loads(projects_file.read_text())[0]["updated_at"]

        with patch(
            "phonebook.core.editor.EditorLauncher.launch",
            return_value=LaunchResult(str(project_dir)),
        ) as launch:
            result = runner.invoke(app, ["open", "ap"])

        assert result.exit_code == 0
        assert "Opening 'api'" in result.stdout
        launch.assert_called_once_with(str(project_dir))
        after = json.loads(projects_file.read_text())[0]["updated_at"]
        assert after >= before

    def test_open_editor_failure(self, project_dir):
        self.add("api", project_dir)

        with patch(
            "phonebook.core.editor.EditorLauncher.launch",
            return_value=LaunchResult(str(project_dir), error="nvim not found"),
        ):
            result = runner.invoke(app, ["open", "api"])

        assert result.exit_code == 1
        assert "Error: nvim not found" in result.stdout

    def test_open_no_match(self):
        result = runner.invoke(app, ["open", "anything"])
        assert result.exit_code == 1
        assert "No project matches 'anything'" in result.stdout

    def test_complete(self, workspace, project_dir):
        """Test path completion from the command line."""
        (workspace / "apps").mkdir()

        result = runner.invoke(app, ["complete", str(workspace / "a")])
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == str(workspace / "ap")
        assert lines[1:] == [f"  {workspace}/api/", f"  {workspace}/apps/"]

        result = runner.invoke(app, ["complete", str(workspace / "api")])
        assert result.stdout.splitlines()[0] == str(workspace / "api") + "/"

    def test_init(self, isolated_config):
        """Test writing the default config."""
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert (isolated_config / "config.toml").exists()

        result = runner.invoke(app, ["init"])
        assert result.exit_code == 1
        assert "Config already exists" in result.stdout

    def test_invalid_config(self, isolated_config):
        isolated_config.mkdir(parents=True)
        (isolated_config / "config.toml").write_text("path_weight_divisor = 0\n")

        result = runner.invoke(app, ["list"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.stdout

    def test_corrupt_catalogue(self, projects_file):
        projects_file.parent.mkdir(parents=True)
        projects_file.write_text("{not json")

        result = runner.invoke(app, ["list"])
        assert result.exit_code == 1
        assert "Error loading projects" in result.stdout

    def test_non_utf8_catalogue(self, projects_file):
        projects_file.parent.mkdir(parents=True)
        projects_file.write_bytes(b'[{"name": "\xff\xfe", "path": "/p/a"}]')

        result = runner.invoke(app, ["list"])
        assert result.exit_code == 1
        assert "Error loading projects" in result.stdout

    def test_failed_saves_are_reported(self, project_dir):
        """Write errors end the command with a message instead of a traceback."""
        self.add("api", project_dir)

        with patch(
            "phonebook.infrastructure.project_store.ProjectStore.save",
            side_effect=OSError("disk full"),
        ), patch("phonebook.core.editor.EditorLauncher.launch") as launch:
            for command in (
                ["add", "web", str(project_dir)],
                ["remove", "api", "--force"],
                ["open", "api"],
            ):
                result = runner.invoke(app, command)
                assert result.exit_code == 1, command
                assert result.exception is None or isinstance(result.exception, SystemExit)
                assert "Error saving projects: disk full" in result.stdout

        launch.assert_not_called()

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "Phonebook version" in result.stdout

    def test_status_command(self, project_dir, monkeypatch):
        """Test the status command."""
        self.add("api", project_dir)
        monkeypatch.setenv("PHONEBOOK_EDITOR", "code")

        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "Phonebook Status" in result.stdout
        assert "Projects: 1" in result.stdout
        assert "Editor: code ." in result.stdout
        assert "PHONEBOOK_EDITOR=code" in result.stdout

    def test_no_command_starts_screen(self, isolated_config):
        """Test that running without a command opens the interactive screen."""
        with patch("phonebook.tui.app.run_app") as run_app:
            result = runner.invoke(app, [])

        assert result.exit_code == 0
        run_app.assert_called_once()
        store, config_data = run_app.call_args.args
        assert store.path == isolated_config / "projects.json"
        assert config_data.editor == "nvim"
