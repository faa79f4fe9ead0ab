"""
Repository link placeholders.

Content links to the companion codebase as ``{REPO_BASE}/path/to/file``;
each render target substitutes its own base (a GitHub blob URL for
published builds, a file:// URL for local development builds).
"""

REPO_PLACEHOLDER = "{REPO_BASE}"


def rewrite_links(text, base_url):
    return text.replace(REPO_PLACEHOLDER, base_url)
