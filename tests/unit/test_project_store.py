"""Tests for the JSON project store."""

import json
import pytest
from datetime import datetime, timedelta, timezone

from phonebook.infrastructure.project_store import (
    ProjectNotFoundError,
    ProjectStore,
    ProjectStoreError,
)
from phonebook.models import Project


class TestProjectStore:
    """Test catalogue persistence."""

    @pytest.fixture
    def catalogue_path(self, tmp_path):
        return tmp_path / "nested" / "projects.json"

    def write_catalogue(self, path, records):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(records))

    def test_missing_file_is_empty(self, catalogue_path):
        """A missing catalogue loads as empty and creates the directory."""
        store = ProjectStore(catalogue_path)

        assert store.load() == []
        assert catalogue_path.parent.is_dir()
        assert not catalogue_path.exists()

    def test_append_prepends_and_saves(self, catalogue_path):
        """New projects go first and are written immediately."""
        store = ProjectStore(catalogue_path)
        store.append(Project(name="Beta", path="/p/b"))
        stored = store.append(Project(name="Alpha", path="/p/a"))

        assert stored.created_at == stored.updated_at
        assert [p.name for p in store.list()] == ["Alpha", "Beta"]

        reloaded = ProjectStore(catalogue_path).load()
        assert [p.name for p in reloaded] == ["Alpha", "Beta"]

    def test_file_format(self, catalogue_path):
        """The catalogue is a JSON array of plain records."""
        store = ProjectStore(catalogue_path)
        store.append(Project(name="Alpha", path="/p/a", tag="go", description="d"))

        data = json.loads(catalogue_path.read_text())

        assert len(data) == 1
        assert set(data[0]) == {
            "name",
            "path",
            "tag",
            "description",
            "created_at",
            "updated_at",
        }
        assert data[0]["tag"] == "go"
        assert isinstance(data[0]["created_at"], str)

    def test_load_sorts_most_recent_first(self, catalogue_path):
        """Loading orders by updated_at, newest first."""
        now = datetime.now(timezone.utc)
        old = (now - timedelta(days=2)).isoformat()
        recent = (now - timedelta(hours=1)).isoformat()
        self.write_catalogue(
            catalogue_path,
            [
                {"name": "Old", "path": "/p/o", "created_at": old, "updated_at": old},
                {"name": "Recent", "path": "/p/r", "created_at": old, "updated_at": recent},
            ],
        )

        projects = ProjectStore(catalogue_path).load()

        assert [p.name for p in projects] == ["Recent", "Old"]

    def test_touch_keeps_order(self, catalogue_path):
        """Opening a project refreshes updated_at without reordering."""
        store = ProjectStore(catalogue_path)
        store.append(Project(name="Beta", path="/p/b"))
        store.append(Project(name="Alpha", path="/p/a"))
        before = store.list()[1].updated_at

        touched = store.touch_updated_at(1)

        assert touched.name == "Beta"
        assert touched.updated_at >= before
        assert [p.name for p in store.list()] == ["Alpha", "Beta"]

    def test_remove(self, catalogue_path):
        """Removing deletes the record from disk."""
        store = ProjectStore(catalogue_path)
        store.append(Project(name="Beta", path="/p/b"))
        store.append(Project(name="Alpha", path="/p/a"))

        removed = store.remove(0)

        assert removed.name == "Alpha"
        assert [p.name for p in ProjectStore(catalogue_path).load()] == ["Beta"]

    @pytest.mark.parametrize("index", [-1, 0, 5])
    def test_out_of_range(self, catalogue_path, index):
        """Bad indices raise ProjectNotFoundError."""
        store = ProjectStore(catalogue_path)
        if index == 0:
            store.load()
        else:
            store.append(Project(name="Alpha", path="/p/a"))

        with pytest.raises(ProjectNotFoundError):
            store.remove(index)
        with pytest.raises(ProjectNotFoundError):
            store.touch_updated_at(index)

    def test_invalid_json(self, catalogue_path):
        """Garbage in the catalogue file is reported."""
        catalogue_path.parent.mkdir(parents=True)
        catalogue_path.write_text("{not json")

        with pytest.raises(ProjectStoreError):
            ProjectStore(catalogue_path).load()

    def test_non_utf8_file(self, catalogue_path):
        """Bytes that are not UTF-8 are reported like any other bad file."""
        catalogue_path.parent.mkdir(parents=True)
        catalogue_path.write_bytes(b'[{"name": "\xff\xfe", "path": "/p/a"}]')

        with pytest.raises(ProjectStoreError):
            ProjectStore(catalogue_path).load()

    def test_invalid_record(self, catalogue_path):
        """Records violating the model are reported."""
        self.write_catalogue(catalogue_path, [{"name": "", "path": "relative"}])

        with pytest.raises(ProjectStoreError):
            ProjectStore(catalogue_path).load()

    def test_empty_file(self, catalogue_path):
        """An empty file is an empty catalogue."""
        catalogue_path.parent.mkdir(parents=True)
        catalogue_path.write_text("")

        assert ProjectStore(catalogue_path).load() == []

    def test_find(self, catalogue_path):
        store = ProjectStore(catalogue_path)
        store.append(Project(name="Beta", path="/p/b"))
        store.append(Project(name="Alpha", path="/p/a"))

        assert store.find("Beta") == 1
        assert store.find("Gamma") is None
        assert len(store) == 2
