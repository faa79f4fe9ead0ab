"""
PDF builder.

Pipeline: pandoc → LaTeX (print or digital template) → xelatex, in one
pandoc call with --pdf-engine. TeX Live's macOS install directories are
appended to PATH since GUI-installed MacTeX is often missing from it.
"""

import os

from folio.builders.base import BaseBuilder
from folio.errors import MissingPrerequisite


TEXLIVE_DIRS = [
    f"/usr/local/texlive/{year}/bin/universal-darwin" for year in (2025, 2024, 2023)
]


class PdfBuilder(BaseBuilder):
    format_name = "PDF"

    def env(self):
        env = dict(os.environ)
        env["PATH"] = os.pathsep.join([env.get("PATH", "")] + TEXLIVE_DIRS)
        return env

    @property
    def template(self):
        pandoc = self.config.pandoc
        if self.target.pdf_type == "x1a" or self.target.name == "print":
            return pandoc.get("print_template")
        return pandoc.get("digital_template")

    def check_prerequisites(self):
        super().check_prerequisites()

        engine = self.target.engine
        if not self.check_tool(engine, path=self.env()["PATH"]):
            raise MissingPrerequisite(
                f"{engine} not found on PATH",
                remediation=[
                    "Install TeX Live or MacTeX:",
                    "  macOS:  brew install --cask mactex",
                    "  Ubuntu: sudo apt install texlive-xetex texlive-fonts-extra",
                ],
            )

        self.check_fonts()

    def check_fonts(self):
        """Warn about font files missing from the fonts directory."""
        fonts = self.config.fonts
        ext = fonts.get("formats", {}).get("pdf") or fonts.get("fallback_format", "ttf")
        font_dir = self.config.path(fonts.get("path", "tools/fonts"))

        missing = [
            name for name in fonts.get("files", [])
            if not os.path.exists(os.path.join(font_dir, f"{name}.{ext}"))
        ]
        for name in missing:
            print(f"  Warning: Font not found: {name}.{ext}")
        if missing:
            print(f"  Place font files in {font_dir}")
        return not missing

    def format_args(self):
        args = []

        defaults_file = self.resolve(self.config.pandoc.get("defaults_file"))
        if defaults_file:
            args.append(f"--defaults={defaults_file}")

        args.extend([
            f"--pdf-engine={self.target.engine}",
            f"--dpi={self.target.dpi}",
        ])

        template = self.resolve(self.template)
        if template:
            args.append(f"--template={template}")
            self.log(f"  Template: {template}")
        else:
            print(f"  Warning: template '{self.template}' not found, using pandoc default")

        args.extend(self.config.metadata_args())
        return args
