"""
Link validation for book sources.

Checks that {REPO_BASE} links point at files that exist in the companion
repository checkout, and that local links resolve. External URLs are
listed as warnings without being fetched.
"""

import os
import re
from dataclasses import dataclass

from folio.transforms.links import REPO_PLACEHOLDER


LINK_RE = re.compile(r"\[([^\]]*)\]\(([^)]+)\)")


@dataclass(frozen=True)
class LinkIssue:
    file: str
    text: str
    url: str
    issue: str
    path: str = ""


class LinkValidator:
    """
    Usage:
        validator = LinkValidator(config.root, files, fs)
        ok = validator.run()
    """

    def __init__(self, root, files, fs, verbose=False):
        self.root = root
        self.files = files
        self.fs = fs
        self.verbose = verbose
        self.errors = []
        self.warnings = []

    def run(self):
        """Validate every file. Returns True if no errors were found."""
        print(f"  Found {len(self.files)} files to validate")
        for filepath in self.files:
            if self.verbose:
                print(f"  Validating: {os.path.basename(filepath)}")
            self.validate_text(os.path.basename(filepath), self.fs.read(filepath))
        self._report()
        return not self.errors

    def validate_text(self, filename, content):
        for match in LINK_RE.finditer(content):
            self.validate_link(filename, match.group(1), match.group(2))

    def validate_link(self, filename, text, url):
        if url.startswith("#") or url.startswith("mailto:"):
            return

        if REPO_PLACEHOLDER in url:
            repo_path = url.replace(REPO_PLACEHOLDER, "").lstrip("/")
            full_path = os.path.join(self.root, repo_path)
            if not self.fs.exists(full_path):
                self.errors.append(LinkIssue(filename, text, url, "Repository file not found", full_path))
            return

        if not url.startswith("http"):
            full_path = os.path.join(self.root, url)
            if not self.fs.exists(full_path):
                self.errors.append(LinkIssue(filename, text, url, "Local file not found", full_path))
            return

        self.warnings.append(LinkIssue(filename, text, url, "External URL (not validated)"))

    def _report(self):
        print(f"\n{'─' * 50}")

        if not self.errors and not self.warnings:
            print("  ✓ All links validated successfully")
            return

        if self.errors:
            print(f"  ✗ Found {len(self.errors)} errors:")
            for e in self.errors:
                print(f"    {e.file}: \"{e.text}\" -> {e.url}")
                print(f"      {e.issue}: {e.path}")

        if self.warnings:
            print(f"  ! Found {len(self.warnings)} warnings:")
            for w in self.warnings:
                print(f"    {w.file}: \"{w.text}\" -> {w.url}")
                if self.verbose:
                    print(f"      {w.issue}")
