"""
folio: markdown-to-book build pipeline with an emoji compliance gate.

Public API:
    from folio.config import BookConfig
    from folio.pipeline import BookPipeline
    from folio.emoji import EmojiScanner
    from folio.transforms import apply_passes
    from folio.builders import BUILDERS
    from folio.lint import EmojiLinter
    from folio.linkcheck import LinkValidator
"""
