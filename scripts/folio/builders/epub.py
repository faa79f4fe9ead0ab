"""
EPUB builder.

Pipeline: pandoc → epub3 with a generated table of contents.
"""

from folio.builders.base import BaseBuilder


class EpubBuilder(BaseBuilder):
    format_name = "EPUB"

    def format_args(self):
        args = ["--standalone", "--toc"] if self.target.standalone else ["--toc"]
        args.extend(self.config.metadata_args())
        return args
