"""
Base builder class for all render targets.

Subclasses implement `format_args()` and set `format_name`.
Shared logic (pandoc invocation, citations, logging, artifact
resolution) lives here.
"""

import os
import shutil
import subprocess
from abc import ABC, abstractmethod

from folio.errors import BackendFailure, MissingPrerequisite
from folio.resolve import resolve_artifact, resolve_filters


class BaseBuilder(ABC):
    """
    Abstract base for render backends.

    Subclasses must define:
        format_name:    str,    human-readable name ("PDF", "HTML", etc.)
        format_args():  method, pandoc arguments specific to the format
    """

    format_name = None  # Override in subclass

    def __init__(self, config, target, verbose=False, timeout=None):
        self.config = config
        self.target = target
        self.verbose = verbose
        self.timeout = timeout

    # ── Output path ────────────────────────────────────────

    @property
    def output_dir(self):
        return self.config.path(self.target.directory)

    @property
    def output_file(self):
        return os.path.join(self.output_dir, f"{self.config.prefix}{self.target.extension}")

    # ── Logging ────────────────────────────────────────────

    def log(self, msg):
        if self.verbose:
            print(msg)

    def header(self):
        print(f"\n{'─' * 60}")
        print(f"  Rendering {self.format_name}: {self.config.title} ({self.target.name})")
        print(f"{'─' * 60}")

    # ── Artifact resolution (delegates to shared module) ───

    def resolve(self, relative):
        """Resolve a project-relative artifact path."""
        return resolve_artifact(self.config, relative)

    def get_filters(self):
        """Resolve Lua filters listed in config."""
        return resolve_filters(self.config, self.config.pandoc.get("filters"))

    # ── Prerequisites ──────────────────────────────────────

    def check_tool(self, name, path=None):
        """Check that a required external tool is on PATH."""
        return shutil.which(name, path=path) is not None

    def check_prerequisites(self):
        """Raise MissingPrerequisite if pandoc is unavailable."""
        if not self.check_tool("pandoc"):
            raise MissingPrerequisite(
                "pandoc not found on PATH",
                remediation=["Install Pandoc 3.0+ from https://pandoc.org/installing.html"],
            )

    # ── Pandoc invocation ──────────────────────────────────

    def citation_args(self):
        """--citeproc plus bibliography and CSL style when present."""
        citations = self.config.citations
        args = ["--citeproc"]

        bibliography = self.resolve(citations.get("bibliography"))
        if bibliography:
            args.append(f"--bibliography={bibliography}")

        style = citations.get("target_styles", {}).get(self.target.name) or citations.get("default_style")
        csl = self.resolve(citations.get("styles", {}).get(style))
        if csl:
            args.append(f"--csl={csl}")
            self.log(f"  Citation style: {style}")

        return args

    def pandoc_cmd(self, input_files):
        """Full pandoc command for the ordered input files."""
        cmd = ["pandoc"]
        cmd.extend(input_files)
        cmd.extend([
            "--from", self.config.from_str,
            f"--to={self.target.format}",
            f"--output={self.output_file}",
        ])
        cmd.extend(self.citation_args())
        cmd.extend(self.format_args())
        return cmd

    def env(self):
        """Environment for the pandoc process."""
        return None

    def exec_cmd(self, cmd, label="Command"):
        """Execute a command; raise BackendFailure with its stderr on failure."""
        self.log(f"  Command: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=self.config.root,
                env=self.env(),
                capture_output=not self.verbose,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise BackendFailure(label, stderr=f"{cmd[0]} not found")
        except subprocess.TimeoutExpired:
            raise BackendFailure(label, stderr=f"timed out after {self.timeout}s")

        if result.returncode != 0:
            raise BackendFailure(label, result.returncode, result.stderr)

    def render(self, input_files):
        """
        Render the ordered intermediate files. Returns the artifact path.
        """
        self.header()
        os.makedirs(self.output_dir, exist_ok=True)
        self.log(f"  Input: {len(input_files)} files")

        self.exec_cmd(self.pandoc_cmd(input_files), f"{self.format_name} generation")

        print(f"  ✓ {self.output_file}")
        return self.output_file

    # ── Abstract interface ─────────────────────────────────

    @abstractmethod
    def format_args(self):
        """
        Pandoc arguments specific to this output format.
        """
        ...
