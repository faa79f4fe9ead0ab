from folio.builders.epub import EpubBuilder
from folio.builders.html import HtmlBuilder
from folio.builders.pdf import PdfBuilder
from folio.config import ConfigError

# Keyed by pandoc output format (RenderTarget.format)
BUILDERS = {
    "pdf": PdfBuilder,
    "html5": HtmlBuilder,
    "epub3": EpubBuilder,
}


def builder_for(config, target, **kwargs):
    """Instantiate the render backend for a target."""
    if target.format not in BUILDERS:
        raise ConfigError(
            f"target '{target.name}' has unsupported format '{target.format}' "
            f"(choose from: {', '.join(BUILDERS)})"
        )
    return BUILDERS[target.format](config, target, **kwargs)
