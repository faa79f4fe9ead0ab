"""
Build failure taxonomy.

Every fatal condition aborts the whole build; the CLI catches BuildError
and prints a one-line summary. Filesystem errors are not wrapped and
propagate as OSError.
"""


class BuildError(Exception):
    """Base class for fatal build errors."""
    pass


class ValidationFailure(BuildError):
    """Raised when the emoji gate finds unapproved characters."""

    def __init__(self, violations):
        # violations: list of (path, EmojiOccurrence)
        self.violations = list(violations)
        files = {path for path, _ in self.violations}
        super().__init__(
            f"{len(self.violations)} unapproved emoji in {len(files)} file(s)"
        )


class MissingPrerequisite(BuildError):
    """Raised when a required tool or asset is absent."""

    def __init__(self, message, remediation=None):
        self.remediation = remediation or []
        super().__init__(message)


class BackendFailure(BuildError):
    """Raised when pandoc (or the PDF engine) exits non-zero."""

    def __init__(self, label, returncode=None, stderr=""):
        self.label = label
        self.returncode = returncode
        self.stderr = stderr or ""
        if returncode is None:
            message = f"{label} failed"
        else:
            message = f"{label} failed (exit {returncode})"
        if self.stderr.strip():
            message = f"{message}: {self.stderr.strip()}"
        super().__init__(message)
