#!/usr/bin/env python3
"""
Unified build script for folio.

Combines building (pdf, html, epub), the emoji gate, link validation,
and cleanup into a single entry point.

Usage:
    python build.py --target web                 Build the web version
    python build.py build . --target all         Build web, pdf, development, epub
    python build.py build --target print -v      Print-ready PDF, verbose
    python build.py lint                         Check emoji usage
    python build.py lint --fix                   Strip emojis from content
    python build.py links                        Validate links
    python build.py clean                        Remove build artifacts

Requires: pandoc, PyYAML
Optional: xelatex (PDF)
"""

import os
import sys
import argparse
import traceback

# Ensure folio is importable from the scripts/ directory
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from folio.config import ALL_TARGETS, BookConfig, ConfigError
from folio.errors import BuildError, MissingPrerequisite, ValidationFailure
from folio.lint import EmojiLinter, content_files, print_violations
from folio.linkcheck import LinkValidator
from folio.pipeline import BUILD_DIR, BookPipeline, build_targets
from folio.resolve import LocalFilesystem, discover_sources


# ── Resolve project ────────────────────────────────────────────────────


def resolve_project(root):
    """Load config for the project root. Exits on failure."""
    root = os.path.abspath(root or os.getcwd())
    try:
        config = BookConfig.load(root)
    except ConfigError as e:
        print(f"Error: {e}")
        print("  Tip: Run from the project root, or pass the root directory.")
        sys.exit(1)
    return config, LocalFilesystem(root)


# ── Build command ──────────────────────────────────────────────────────


def cmd_build(args):
    """Build one target, or every target with --target all."""
    config, _ = resolve_project(args.root)
    target_name = args.target or config.default_target
    clean = False if args.no_clean else None

    try:
        if target_name == "all":
            _build_all(config, args.verbose, clean)
            return

        pipeline = BookPipeline(
            config, config.target(target_name), verbose=args.verbose, clean=clean
        )
        output = pipeline.build()
    except ValidationFailure as e:
        print_violations(e, config.allow_list)
        print(f"\n  Build failed: emoji validation failed ({e})")
        sys.exit(1)
    except MissingPrerequisite as e:
        print(f"\n  ✗ {e}")
        for line in e.remediation:
            print(f"    {line}")
        sys.exit(1)
    except (BuildError, OSError, UnicodeDecodeError) as e:
        print(f"\n  ✗ Build failed: {e}")
        sys.exit(1)

    print(f"\n{'─' * 60}")
    print(f"  Done. Output: {output}")


def _build_all(config, verbose, clean):
    results = build_targets(config, ALL_TARGETS, verbose=verbose, clean=clean)

    print(f"\n{'─' * 60}")
    print("  Build summary:")
    for name, (ok, seconds, _) in results.items():
        mark = "✓" if ok else "✗"
        print(f"    {mark} {name:<12} {seconds:.1f}s")

    failed = [name for name, (ok, _, _) in results.items() if not ok]
    if failed:
        print(f"  Done with errors: {', '.join(failed)} failed")
        sys.exit(1)

    print("\n  Generated files:")
    for name, (_, _, output) in results.items():
        print(f"    {os.path.relpath(output, config.root)}")


# ── Lint command ───────────────────────────────────────────────────────


def cmd_lint(args):
    """Check book content for unapproved emoji."""
    config, fs = resolve_project(args.root)

    color = not args.no_color and sys.stdout.isatty()

    print(f"\n  Linting: {config.title}")
    print(f"  Source:  {config.root}")
    print(f"  Mode:    {'FIX' if args.fix else 'CHECK'}")
    print()

    files = content_files(config, fs)
    if not files:
        print(f"  No book content files found in {config.root}")
        sys.exit(1)

    linter = EmojiLinter(
        config,
        fs,
        files=files,
        fix=args.fix,
        verbose=args.verbose,
        color=color,
    )

    success = linter.run()
    sys.exit(0 if success else 1)


# ── Links command ──────────────────────────────────────────────────────


def cmd_links(args):
    """Validate repository and local links."""
    config, fs = resolve_project(args.root)

    print(f"\n  Validating links: {config.title}")
    files = [src.path for src in discover_sources(config, fs)]

    validator = LinkValidator(config.root, files, fs, verbose=args.verbose)
    sys.exit(0 if validator.run() else 1)


# ── Clean command ──────────────────────────────────────────────────────


def cmd_clean(args):
    """Remove build artifacts."""
    config, fs = resolve_project(args.root)

    if fs.exists(BUILD_DIR):
        fs.remove_tree(BUILD_DIR)
        print("  ✓ Removed build directory")
    else:
        print("  Build directory does not exist")

    if fs.exists("temp-input.md"):
        fs.remove_tree("temp-input.md")
        print("  ✓ Removed temp-input.md")


# ── Argument Parser ────────────────────────────────────────────────────


def build_parser():
    parser = argparse.ArgumentParser(
        description="Markdown book build pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s --target web               Build the web version
  %(prog)s build --target all         Build every target
  %(prog)s build --target print -v    Print PDF, show pandoc command
  %(prog)s lint                       Check emoji usage
  %(prog)s lint --fix                 Strip emojis from content
  %(prog)s links                      Validate links
  %(prog)s clean                      Remove build/
        """,
    )

    sub = parser.add_subparsers(dest="command")

    # ── build (default when no subcommand) ─────────────────
    build_p = sub.add_parser("build", help="Build a target (default)")
    _add_root_arg(build_p)
    build_p.add_argument(
        "--target", "-t",
        help="Target name from book.yaml, or 'all' (default: default_target)",
    )
    build_p.add_argument(
        "--no-clean", action="store_true", help="Keep existing intermediate files"
    )
    build_p.add_argument("--verbose", "-v", action="store_true")

    # ── lint ───────────────────────────────────────────────
    lint_p = sub.add_parser("lint", help="Check emoji usage in book content")
    _add_root_arg(lint_p)
    lint_p.add_argument("--fix", action="store_true", help="Strip emojis from files")
    lint_p.add_argument("--verbose", "-v", action="store_true")
    lint_p.add_argument("--no-color", action="store_true", help="Plain output")

    # ── links ──────────────────────────────────────────────
    links_p = sub.add_parser("links", help="Validate links in book content")
    _add_root_arg(links_p)
    links_p.add_argument("--verbose", "-v", action="store_true")

    # ── clean ──────────────────────────────────────────────
    clean_p = sub.add_parser("clean", help="Remove build artifacts")
    _add_root_arg(clean_p)

    return parser


def _add_root_arg(parser):
    parser.add_argument(
        "root", nargs="?", default=None, help="Project root (default: current directory)"
    )


# ── Main ───────────────────────────────────────────────────────────────


def main(argv=None):
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv

    # Allow bare "build.py --target web" without the "build" subcommand:
    # if the first arg isn't a known subcommand, prepend "build".
    known_commands = {"build", "lint", "links", "clean"}
    if argv and argv[0] not in known_commands and argv[0] not in ("-h", "--help"):
        argv = ["build"] + argv

    args = parser.parse_args(argv)

    dispatch = {
        "build": cmd_build,
        "lint": cmd_lint,
        "links": cmd_links,
        "clean": cmd_clean,
    }

    handler = dispatch.get(args.command)
    if handler:
        handler(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)
    except Exception as e:
        log_path = "build_error.log"
        with open(log_path, "w") as f:
            traceback.print_exc(file=f)
        print(f"\nUnexpected error: {e}")
        print(f"Full traceback written to {log_path}")
        sys.exit(1)
