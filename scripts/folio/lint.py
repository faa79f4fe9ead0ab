"""
Emoji compliance linter.

Scans book content for emoji outside the approved list. Unapproved
characters often have no glyph in the book fonts and come out as empty
boxes in the PDF.

Can be invoked from the unified build.py CLI; the same scan runs as a
gate at the start of every build.
"""

import os

from folio.emoji import EmojiScanner, strip_emojis
from folio.resolve import discover_sources


# ── Severity display ───────────────────────────────────────────────────

SEVERITY_COLOR = {
    "error":   "\033[31m✗\033[0m",
    "ok":      "\033[32m✓\033[0m",
}

SEVERITY_PLAIN = {
    "error":   "[ERROR]",
    "ok":      "[OK]",
}


def content_files(config, fs):
    """Book sources plus any extra files configured for the emoji scan."""
    files = [src.path for src in discover_sources(config, fs)]
    for name in config.emoji_scan.get("extra_files", []):
        path = os.path.join(config.root, name)
        if fs.exists(path) and path not in files:
            files.append(path)
    return files


def format_violation(path, occ):
    return f"{path}:{occ.line}:{occ.column} - \"{occ.char}\" ({occ.unicode})"


def print_violations(failure, approved):
    """Report a ValidationFailure raised by the build gate."""
    print("\n  ✗ EMOJI VALIDATION FAILED")
    print("\n  Unapproved emojis detected in book content files:")
    for path, occ in failure.violations:
        print(f"    {format_violation(path, occ)}")
    _print_remediation(approved)


def _print_remediation(approved):
    print("\n  To fix these issues:")
    print("    1. Remove the unapproved emojis from the files listed above")
    print("    2. Replace with approved alternatives if needed")
    print("    3. Or add the emoji to approved_emojis in book.yaml")
    print("    (build.py lint --fix strips every emoji automatically)")
    print(f"\n  Approved emojis: {' '.join(sorted(approved))}")


# ── Linter class ───────────────────────────────────────────────────────


class EmojiLinter:
    """
    Emoji linter.

    Usage:
        linter = EmojiLinter(config, fs, fix=False, color=True)
        success = linter.run()
    """

    def __init__(self, config, fs, files=None, fix=False, verbose=False, color=True):
        self.config = config
        self.fs = fs
        self.files = files if files is not None else content_files(config, fs)
        self.fix = fix
        self.verbose = verbose
        self.symbols = SEVERITY_COLOR if color else SEVERITY_PLAIN
        self.scanner = EmojiScanner(config.allow_list)
        self.violations = []
        self.total_fixes = 0
        self.files_with_issues = 0

    def run(self):
        """Lint all files. Returns True if no unapproved emoji remain."""
        for filepath in self.files:
            rel_path = os.path.relpath(filepath, self.config.root)
            content = self.fs.read(filepath)

            before = len(self.violations)
            findings = self._lint_text(rel_path, content)
            # Verbose findings also list approved emoji
            has_issues = len(self.violations) > before

            if findings:
                print(f"  {rel_path}")
                for f in findings:
                    print(f)
                print()

            if has_issues:
                self.files_with_issues += 1
                if self.fix:
                    self._strip(filepath, content)
            elif self.verbose:
                print(f"  {rel_path}: clean")

        self._summary()
        return self.fix or not self.violations

    def _lint_text(self, rel_path, content):
        """Findings for one file; records violations."""
        findings = []
        for occ in self.scanner.scan(content):
            if self.scanner.is_approved(occ.char):
                if self.verbose:
                    findings.append(
                        f"  {self.symbols['ok']} :{occ.line}:{occ.column} \"{occ.char}\" approved"
                    )
                continue
            self.violations.append((rel_path, occ))
            label = "Removed" if self.fix else "Not approved"
            findings.append(
                f"  {self.symbols['error']} :{occ.line}:{occ.column} {label}: \"{occ.char}\" ({occ.unicode})"
            )
        return findings

    def _strip(self, filepath, content):
        new, removed = strip_emojis(content)
        if removed:
            self.fs.write(filepath, new)
            self.total_fixes += removed

    def _summary(self):
        """Print the summary line."""
        print(f"{'─' * 50}")
        print(f"  Files checked: {len(self.files)}")

        if not self.violations:
            print("  ✓ All emojis in book content files are approved.")
            return

        print(
            f"  {len(self.violations)} unapproved emoji across "
            f"{self.files_with_issues}/{len(self.files)} files"
        )

        if self.fix:
            print(f"  Removed {self.total_fixes} emoji characters")
        else:
            _print_remediation(self.scanner.allowed)
