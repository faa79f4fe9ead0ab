import fnmatch
import os

import pytest

from folio.config import BookConfig


ROOT = "/book"


class FakeFilesystem:
    """In-memory filesystem; glob() returns files in insertion order."""

    def __init__(self, root=ROOT, files=None):
        self.root = root
        self.files = {}
        self.dirs = set()
        self.reads = []
        self.writes = []
        self.copies = []
        for path, text in (files or {}).items():
            self.files[self._abs(path)] = text

    def _abs(self, path):
        return path if os.path.isabs(path) else os.path.join(self.root, path)

    def read(self, path):
        path = self._abs(path)
        self.reads.append(path)
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def write(self, path, text):
        path = self._abs(path)
        self.writes.append(path)
        self.files[path] = text

    def exists(self, path):
        path = self._abs(path)
        if path in self.files or path in self.dirs:
            return True
        return any(p.startswith(path + "/") for p in self.files)

    def glob(self, pattern):
        pattern = self._abs(pattern)
        return [
            p for p in self.files
            if os.path.dirname(p) == os.path.dirname(pattern)
            and fnmatch.fnmatchcase(os.path.basename(p), os.path.basename(pattern))
        ]

    def makedirs(self, path):
        self.dirs.add(self._abs(path))

    def copytree(self, src, dst):
        src, dst = self._abs(src), self._abs(dst)
        self.copies.append((src, dst))
        for path in list(self.files):
            if path.startswith(src + "/"):
                self.files[dst + path[len(src):]] = self.files[path]

    def remove_tree(self, path):
        path = self._abs(path)
        for p in list(self.files):
            if p == path or p.startswith(path + "/"):
                del self.files[p]
        self.dirs.discard(path)


class RecordingBuilder:
    """Render backend stand-in that records what it was asked to render."""

    def __init__(self, fail_prerequisites=None, fail_render=None):
        self.fail_prerequisites = fail_prerequisites
        self.fail_render = fail_render
        self.checked = False
        self.rendered = None

    def check_prerequisites(self):
        self.checked = True
        if self.fail_prerequisites:
            raise self.fail_prerequisites

    def render(self, input_files):
        if self.fail_render:
            raise self.fail_render
        self.rendered = list(input_files)
        return os.path.join(ROOT, "build", "web", "book.html")


@pytest.fixture(autouse=True)
def _no_repo_env(monkeypatch):
    monkeypatch.delenv("REPO_BASE_URL", raising=False)


@pytest.fixture
def make_config():
    def _make(root=ROOT, **overrides):
        data = {
            "title": "The Test Book",
            "author": "A. Writer",
            "prefix": "book",
            "repository": {"base_url": "https://example.com/repo/blob/main"},
        }
        data.update(overrides)
        return BookConfig.from_dict(data, root)
    return _make


@pytest.fixture
def config(make_config):
    return make_config()
