"""
Per-file rewrite passes, applied in a fixed order:

    1. sections   heading numbering (foreword, appendices)
    2. images     chapter/appendix illustration under the title
    3. links      {REPO_BASE} substitution
    4. callouts   blockquote callouts → fenced divs
"""

from folio.transforms.sections import rewrite_sections
from folio.transforms.images import inject_image
from folio.transforms.links import rewrite_links
from folio.transforms.callouts import restructure_callouts


def apply_passes(role, text, target, image_exists, log=None):
    """Run the full pass chain over one file's text for a RenderTarget."""
    text = rewrite_sections(role, text, log=log)
    text = inject_image(role, text, image_exists, target.image_style, log=log)
    text = rewrite_links(text, target.repo_base_url)
    return restructure_callouts(text)
