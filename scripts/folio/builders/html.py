"""
HTML builder.

Standalone HTML with a table of contents, the book stylesheet, and the
callout/link Lua filters.
"""

from folio.builders.base import BaseBuilder


class HtmlBuilder(BaseBuilder):
    format_name = "HTML"

    def format_args(self):
        args = ["--standalone", "--toc"] if self.target.standalone else ["--toc"]

        css = self.resolve(self.config.pandoc.get("css"))
        if css:
            args.append(f"--css={css}")
            self.log(f"  CSS:    {css}")
        else:
            print("  Warning: No book CSS found")

        args.extend(self.config.metadata_args())

        for f in self.get_filters():
            args.extend(["--lua-filter", f])
            self.log(f"  Filter: {f}")

        return args
