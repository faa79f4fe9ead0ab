"""
Source discovery, filesystem access, and artifact lookup.

Every component that needs to find the book's markdown files or locate
tooling artifacts (templates, filters, styles) imports from here.
"""

import glob
import os
import re
import shutil
from dataclasses import dataclass

from folio.roles import classify, book_order


def natural_sort_key(s):
    """Sort strings with embedded numbers naturally (2.md before 10.md)."""
    return [
        int(text) if text.isdigit() else text.lower()
        for text in re.split(r"(\d+)", s)
    ]


class LocalFilesystem:
    """
    Filesystem access rooted at the project directory.

    Relative paths are resolved against the root; glob() returns
    absolute paths.
    """

    def __init__(self, root):
        self.root = os.path.abspath(root)

    def _abs(self, path):
        return path if os.path.isabs(path) else os.path.join(self.root, path)

    def read(self, path):
        with open(self._abs(path), "r", encoding="utf-8") as f:
            return f.read()

    def write(self, path, text):
        path = self._abs(path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

    def exists(self, path):
        return os.path.exists(self._abs(path))

    def glob(self, pattern):
        return sorted(glob.glob(self._abs(pattern)), key=natural_sort_key)

    def makedirs(self, path):
        os.makedirs(self._abs(path), exist_ok=True)

    def copytree(self, src, dst):
        shutil.copytree(self._abs(src), self._abs(dst), dirs_exist_ok=True)

    def remove_tree(self, path):
        path = self._abs(path)
        if os.path.isdir(path):
            shutil.rmtree(path)
        elif os.path.exists(path):
            os.remove(path)


@dataclass(frozen=True)
class SourceFile:
    path: str
    role: object
    text: str = ""

    @property
    def name(self):
        return os.path.basename(self.path)


def discover_sources(config, fs):
    """
    Find the book's source files and assign each a role.

    Returns SourceFile entries (text not yet loaded) in book order:
    foreword → chapters → references → appendices.
    """
    source = config.source
    references = source.get("references")

    candidates = []
    for key in ["foreword", "chapters", "appendices"]:
        pattern = source.get(key)
        if pattern:
            candidates.extend(fs.glob(pattern))
    if references and fs.exists(references):
        candidates.append(os.path.join(config.root, references))

    found = {}
    for path in candidates:
        role = classify(path, references and os.path.basename(references))
        if role is None:
            continue
        found.setdefault(path, SourceFile(path=path, role=role))

    return book_order(found.values())


def resolve_artifact(config, relative):
    """Absolute path of a project artifact if it exists, else None."""
    if not relative:
        return None
    path = config.path(relative)
    if os.path.exists(path):
        return os.path.abspath(path)
    return None


def resolve_filters(config, filter_names):
    """Resolve a list of Lua filter paths. Warns on missing."""
    filters = []
    for name in (filter_names or []):
        path = resolve_artifact(config, name)
        if path:
            filters.append(path)
        else:
            print(f"  Warning: filter '{name}' not found")
    return filters
