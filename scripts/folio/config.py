"""
Book configuration: load, validate, and provide defaults for book.yaml.

Render targets are resolved once per build into immutable RenderTarget
values and passed explicitly to every component that needs them.
"""

import copy
import os
import sys
from dataclasses import dataclass

from folio.errors import BuildError

try:
    import yaml
except ImportError:
    print("Error: PyYAML is required. Install with: pip install pyyaml")
    sys.exit(1)


# Fields required in every book.yaml
REQUIRED_FIELDS = ["title", "author"]

DEFAULT_REPO_URL = "https://github.com/yourusername/book/blob/main"

# Characters that pass the emoji gate
APPROVED_EMOJIS = [
    "✓",      # check mark
    "✔",      # heavy check mark
    "✅",      # white heavy check mark
    "❌",      # cross mark
    "⚠",      # warning sign
    "⚡",      # high voltage
    "⭐",      # white medium star
    "\U0001F50D",  # magnifying glass
    "\U0001F4DD",  # memo
    "\U0001F680",  # rocket
    "\ufe0f",  # variation selector-16
]

# Defaults applied if missing
DEFAULTS = {
    "prefix": "book",
    "subtitle": "",
    "lang": "en-US",
    "date": "",
    "markdown_extensions": "fenced_divs+native_divs",
    "default_target": "development",
    "approved_emojis": APPROVED_EMOJIS,
    "source": {},
    "repository": {},
    "targets": {},
    "citations": {},
    "pandoc": {},
    "fonts": {},
    "build": {},
    "emoji_scan": {},
}

SOURCE_DEFAULTS = {
    "foreword": "foreword*.md",
    "chapters": "ch*.md",
    "appendices": "app[A-D].md",
    "references": "references.md",
}

CITATION_DEFAULTS = {
    "bibliography": "references.json",
    "default_style": "apa",
    "styles": {
        "apa": "tools/styles/citations/apa.csl",
        "chicago": "tools/styles/citations/chicago-author-date.csl",
        "ieee": "tools/styles/citations/ieee.csl",
    },
    "target_styles": {},
}

PANDOC_DEFAULTS = {
    "defaults_file": "tools/config/pandoc-defaults.yaml",
    "print_template": "tools/templates/book-print.latex",
    "digital_template": "tools/templates/book-digital.latex",
    "css": "tools/styles/book.css",
    "filters": [
        "tools/templates/filters/callout-filter.lua",
        "tools/templates/filters/link-filter.lua",
    ],
}

FONT_DEFAULTS = {
    "path": "tools/fonts",
    "files": [
        "AtkinsonHyperlegibleNext-Regular",
        "AtkinsonHyperlegibleNext-Bold",
        "AtkinsonHyperlegibleNext-RegularItalic",
        "AtkinsonHyperlegibleNext-BoldItalic",
    ],
    "formats": {"pdf": "ttf", "web": "woff2", "development": "woff2"},
    "fallback_format": "ttf",
}

BUILD_DEFAULTS = {
    "clean": True,
    "timeout": None,
}

EMOJI_SCAN_DEFAULTS = {
    "extra_files": ["README.md", "tone.md"],
}

# repo_base_url None → repository.base_url; "file" → file:// URL of the root
TARGET_DEFAULTS = {
    "digital": {
        "directory": "build/digital",
        "format": "pdf",
        "engine": "xelatex",
        "dpi": 300,
        "pdf_type": "interactive",
    },
    "print": {
        "directory": "build/print",
        "format": "pdf",
        "engine": "xelatex",
        "dpi": 300,
        "pdf_type": "x1a",
    },
    "pdf": {
        "directory": "build/digital",
        "format": "pdf",
        "engine": "xelatex",
        "dpi": 300,
        "pdf_type": "interactive",
    },
    "web": {
        "directory": "build/web",
        "format": "html5",
    },
    "development": {
        "directory": "build/development",
        "format": "html5",
        "repo_base_url": "file",
    },
    "epub": {
        "directory": "build/epub",
        "format": "epub3",
    },
}

# Targets built by --target all
ALL_TARGETS = ["web", "pdf", "development", "epub"]

IMAGE_STYLES = ("root", "relative")


class ConfigError(BuildError):
    """Raised when book.yaml is missing or invalid."""
    pass


@dataclass(frozen=True)
class RenderTarget:
    """One output configuration, selected once per build."""

    name: str
    format: str
    directory: str
    repo_base_url: str
    image_style: str
    engine: str = "xelatex"
    dpi: int = 300
    pdf_type: str = ""
    standalone: bool = True

    @property
    def extension(self):
        return {"pdf": ".pdf", "epub3": ".epub"}.get(self.format, ".html")


class BookConfig:
    """
    Loaded, validated book configuration.

    Usage:
        config = BookConfig.load(root)
        config.title                 # "The Constellize Method"
        config.source["chapters"]    # "ch*.md"
        config.target("web")         # RenderTarget(...)
    """

    def __init__(self, data, root):
        self._data = data
        self.root = root

    @classmethod
    def load(cls, root):
        """Load and validate book.yaml from the project root."""
        yaml_path = os.path.join(root, "book.yaml")
        if not os.path.exists(yaml_path):
            raise ConfigError(f"No book.yaml found in {root}")

        with open(yaml_path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"book.yaml is not valid YAML: {e}")

        return cls.from_dict(data, root)

    @classmethod
    def from_dict(cls, data, root):
        """Validate a raw mapping and apply defaults."""
        if not isinstance(data, dict):
            raise ConfigError(f"book.yaml must be a YAML mapping, got {type(data).__name__}")

        missing = [key for key in REQUIRED_FIELDS if not data.get(key)]
        if missing:
            raise ConfigError(
                f"book.yaml missing required fields: {', '.join(missing)}"
            )

        data = copy.deepcopy(data)

        # Apply top-level defaults
        for key, default in DEFAULTS.items():
            data.setdefault(key, copy.deepcopy(default))

        # Apply section defaults
        for key, defaults in [
            ("source", SOURCE_DEFAULTS),
            ("citations", CITATION_DEFAULTS),
            ("pandoc", PANDOC_DEFAULTS),
            ("fonts", FONT_DEFAULTS),
            ("build", BUILD_DEFAULTS),
            ("emoji_scan", EMOJI_SCAN_DEFAULTS),
        ]:
            if not isinstance(data[key], dict):
                raise ConfigError(f"book.yaml '{key}' must be a mapping")
            for name, default in defaults.items():
                data[key].setdefault(name, copy.deepcopy(default))

        # Targets: user entries are merged over the built-in ones
        targets = copy.deepcopy(TARGET_DEFAULTS)
        for name, overrides in (data["targets"] or {}).items():
            if not isinstance(overrides, dict):
                raise ConfigError(f"target '{name}' must be a mapping")
            targets.setdefault(name, {}).update(overrides)
        data["targets"] = targets

        repository = data["repository"]
        repository["base_url"] = (
            os.environ.get("REPO_BASE_URL")
            or repository.get("base_url")
            or DEFAULT_REPO_URL
        )

        return cls(data, os.path.abspath(root))

    # ── Attribute access ───────────────────────────────────

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"BookConfig has no field '{name}'")

    def get(self, key, default=None):
        return self._data.get(key, default)

    def __getitem__(self, key):
        return self._data[key]

    def __contains__(self, key):
        return key in self._data

    # ── Convenience ────────────────────────────────────────

    @property
    def from_str(self):
        """The pandoc --from string including extensions."""
        return f"markdown+smart+{self.markdown_extensions}"

    @property
    def allow_list(self):
        return frozenset(self.approved_emojis or [])

    def path(self, relative):
        """Absolute path of a project-relative path."""
        return os.path.join(self.root, relative)

    def target_names(self):
        return sorted(self.targets)

    def target(self, name):
        """Resolve a target name into a RenderTarget."""
        if name not in self.targets:
            raise ConfigError(
                f"Unknown target '{name}' (choose from: {', '.join(self.target_names())})"
            )
        entry = self.targets[name]

        fmt = entry.get("format")
        if not fmt:
            raise ConfigError(f"target '{name}' has no format")

        base_url = entry.get("repo_base_url")
        if base_url == "file":
            base_url = "file://" + self.root
        elif not base_url:
            base_url = self.repository["base_url"]

        image_style = entry.get("image_style") or ("root" if fmt == "pdf" else "relative")
        if image_style not in IMAGE_STYLES:
            raise ConfigError(
                f"target '{name}' image_style must be one of {', '.join(IMAGE_STYLES)}"
            )

        return RenderTarget(
            name=name,
            format=fmt,
            directory=entry.get("directory", f"build/{name}"),
            repo_base_url=base_url,
            image_style=image_style,
            engine=entry.get("engine", "xelatex"),
            dpi=int(entry.get("dpi", 300)),
            pdf_type=entry.get("pdf_type", ""),
            standalone=bool(entry.get("standalone", True)),
        )

    def metadata_args(self):
        """Build pandoc --metadata arguments list."""
        args = []
        for key in ["title", "subtitle", "author", "lang", "date"]:
            value = self.get(key)
            if value:
                args.extend(["--metadata", f"{key}={value}"])
        return args

    def summary(self, target=None):
        """Print a short config summary."""
        print(f"\n  Book:   {self.title}")
        print(f"  Author: {self.author}")
        print(f"  Source: {self.root}")
        if target:
            print(f"  Target: {target.name} ({target.format})")
