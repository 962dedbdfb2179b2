"""Tests for blink.content.watcher — mapping file changes to resources."""

from __future__ import annotations

from pathlib import Path

import pytest
from watchfiles import Change

from blink.config import BlinkConfig
from blink.content.watcher import Resource, ResourceWatcher, resource_for_path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def config(tmp_path: Path) -> BlinkConfig:
    """A BlinkConfig rooted at a temp directory."""
    return BlinkConfig(root=tmp_path)


class _Collector:
    def __init__(self) -> None:
        self.submitted: list[Resource] = []

    def submit(self, resource: Resource) -> None:
        self.submitted.append(resource)


# ---------------------------------------------------------------------------
# Resource dataclass
# ---------------------------------------------------------------------------


class TestResource:
    """Verify Resource is frozen and well-behaved."""

    def test_frozen(self) -> None:
        resource = Resource(name="a.html", uid="a.html", kind="page")
        with pytest.raises(AttributeError):
            resource.kind = "script"  # type: ignore[misc]

    def test_hashable(self) -> None:
        resource = Resource(name="a.html", uid="a.html", kind="page")
        assert isinstance(hash(resource), int)


# ---------------------------------------------------------------------------
# resource_for_path
# ---------------------------------------------------------------------------


class TestResourceForPath:
    """Unit tests for resource_for_path()."""

    def test_html_page(self, config: BlinkConfig) -> None:
        path = config.root / "docs" / "index.html"
        assert resource_for_path(path, config) == Resource(
            name="index.html", uid="docs/index.html", kind="page"
        )

    def test_stylesheet(self, config: BlinkConfig) -> None:
        resource = resource_for_path(config.root / "style.CSS", config)
        assert resource is not None
        assert resource.kind == "stylesheet"

    def test_unknown_suffix_is_asset(self, config: BlinkConfig) -> None:
        resource = resource_for_path(config.root / "logo.png", config)
        assert resource is not None
        assert resource.kind == "asset"

    def test_outside_root(self, config: BlinkConfig) -> None:
        assert resource_for_path(Path("/elsewhere/index.html"), config) is None

    def test_root_itself(self, config: BlinkConfig) -> None:
        assert resource_for_path(config.root, config) is None

    def test_hidden_file(self, config: BlinkConfig) -> None:
        assert resource_for_path(config.root / ".DS_Store", config) is None

    def test_ignored_directory(self, config: BlinkConfig) -> None:
        path = config.root / "node_modules" / "pkg" / "index.js"
        assert resource_for_path(path, config) is None

    def test_editor_temp_files(self, config: BlinkConfig) -> None:
        assert resource_for_path(config.root / "index.html.swp", config) is None
        assert resource_for_path(config.root / "index.html~", config) is None

    def test_custom_ignore_dirs(self, tmp_path: Path) -> None:
        config = BlinkConfig(root=tmp_path, ignore_dirs=frozenset({"build"}))
        assert resource_for_path(tmp_path / "build" / "out.html", config) is None
        assert resource_for_path(tmp_path / "node_modules" / "x.js", config) is not None


# ---------------------------------------------------------------------------
# ResourceWatcher.handle_changes
# ---------------------------------------------------------------------------


class TestHandleChanges:
    """A watchfiles batch becomes coordinator submissions."""

    def test_submits_relevant_changes(self, config: BlinkConfig) -> None:
        collector = _Collector()
        watcher = ResourceWatcher(config, collector)  # type: ignore[arg-type]
        changes = {
            (Change.modified, str(config.root / "index.html")),
            (Change.added, str(config.root / "css" / "site.css")),
            (Change.deleted, str(config.root / ".git" / "HEAD")),
        }

        assert watcher.handle_changes(changes) == 2
        assert [r.uid for r in collector.submitted] == ["css/site.css", "index.html"]

    def test_empty_batch(self, config: BlinkConfig) -> None:
        collector = _Collector()
        watcher = ResourceWatcher(config, collector)  # type: ignore[arg-type]
        assert watcher.handle_changes(set()) == 0
        assert collector.submitted == []
