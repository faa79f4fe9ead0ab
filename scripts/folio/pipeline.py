"""
Book build orchestration.

    discover → emoji gate → per-file passes → build/intermediate/ →
    book order → render backend

Any fatal error aborts before the render backend is invoked; nothing is
rendered from a partial set of files.
"""

import os
import time
from dataclasses import replace

from folio.builders import builder_for
from folio.emoji import EmojiScanner
from folio.errors import BuildError, ValidationFailure
from folio.resolve import LocalFilesystem, discover_sources
from folio.roles import book_order
from folio.transforms import apply_passes


BUILD_DIR = "build"
INTERMEDIATE_DIR = os.path.join(BUILD_DIR, "intermediate")
ASSETS_DIR = os.path.join(BUILD_DIR, "assets")
IMAGES_DIR = "images"


class BookPipeline:
    """
    One build of the book for one render target.

    Usage:
        pipeline = BookPipeline(config, config.target("web"), verbose=True)
        output = pipeline.build()
    """

    def __init__(self, config, target, fs=None, builder=None, verbose=False, clean=None):
        self.config = config
        self.target = target
        self.verbose = verbose
        self.fs = fs or LocalFilesystem(config.root)
        self.builder = builder or builder_for(
            config, target, verbose=verbose, timeout=config.build.get("timeout")
        )
        self.scanner = EmojiScanner(config.allow_list)
        self.clean = config.build.get("clean", True) if clean is None else clean

    def log(self, msg):
        if self.verbose:
            print(msg)

    # ── Stages ─────────────────────────────────────────────

    def load_sources(self):
        """Discover source files and read their text."""
        sources = [
            replace(src, text=self.fs.read(src.path))
            for src in discover_sources(self.config, self.fs)
        ]
        self.log(f"  Found {len(sources)} source files")
        return sources

    def check_emojis(self, sources):
        """Raise ValidationFailure listing every unapproved emoji."""
        violations = [
            (os.path.relpath(src.path, self.config.root), occ)
            for src in sources
            for occ in self.scanner.violations(src.text)
        ]
        if violations:
            raise ValidationFailure(violations)
        print(f"  ✓ Emoji check: {len(sources)} files clean")

    def prepare_build_dirs(self):
        """Reset intermediate/ and assets/, copy images into assets/."""
        if self.clean:
            self.log("  Cleaning build directories...")
            self.fs.remove_tree(INTERMEDIATE_DIR)
            self.fs.remove_tree(ASSETS_DIR)

        self.fs.makedirs(INTERMEDIATE_DIR)
        self.fs.makedirs(ASSETS_DIR)
        self.fs.makedirs(self.target.directory)

        if self.fs.exists(IMAGES_DIR):
            self.fs.copytree(IMAGES_DIR, os.path.join(ASSETS_DIR, IMAGES_DIR))
            self.log("  Images copied to build/assets/")

    def transform(self, source):
        """Run the pass chain over one file and write the intermediate copy."""
        self.log(f"  Processing: {source.name}")
        text = apply_passes(
            source.role,
            source.text,
            self.target,
            self.fs.exists,
            log=self.log,
        )
        out_path = os.path.join(self.config.root, INTERMEDIATE_DIR, source.name)
        self.fs.write(out_path, text)
        return replace(source, path=out_path, text=text)

    # ── Entry point ────────────────────────────────────────

    def build(self):
        """Run every stage. Returns the rendered artifact path."""
        self.config.summary(self.target)

        self.builder.check_prerequisites()

        sources = self.load_sources()
        if not sources:
            print(f"  Warning: No source files found in {self.config.root}")

        self.check_emojis(sources)
        self.prepare_build_dirs()

        processed = [self.transform(src) for src in sources]
        ordered = [src.path for src in book_order(processed)]

        return self.builder.render(ordered)


def build_targets(config, names, verbose=False, clean=None):
    """
    Build several targets in turn, continuing past failures.

    Returns {target name: (ok, seconds, output path or error)}.
    """
    results = {}
    for name in names:
        start = time.monotonic()
        try:
            pipeline = BookPipeline(config, config.target(name), verbose=verbose, clean=clean)
            output = pipeline.build()
            results[name] = (True, time.monotonic() - start, output)
        except ValidationFailure:
            # The gate fails identically for every target
            raise
        except (BuildError, OSError, UnicodeDecodeError) as e:
            results[name] = (False, time.monotonic() - start, e)
            print(f"  ✗ {name} failed: {e}")
    return results
