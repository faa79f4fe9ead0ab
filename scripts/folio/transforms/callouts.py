"""
Callout blocks.

Authors write callouts as blockquotes headed by a bold label:

    > **📁 Code Reference: gateway routing**
    > See `{REPO_BASE}/src/gateway/routes.py`.

Each recognised block becomes a pandoc fenced div that the Lua callout
filter styles per category:

    ::: codeReference
    **Code Reference: gateway routing**

    See `{REPO_BASE}/src/gateway/routes.py`.
    :::

Blockquotes without a recognised label are left alone.
"""

import re
from dataclasses import dataclass


# (category tag, label, takes a title suffix)
CALLOUT_CATEGORIES = [
    ("codeReference", "Code Reference", True),
    ("architecture", "System Architecture", True),
    ("narrative", "Narrative Context", True),
    ("implementation", "Implementation Pattern", True),
    ("crossreference", "Related Components", False),
]

ICONS = {
    "codeReference": "\U0001F4C1",
    "architecture": "\U0001F3D7",
    "narrative": "\U0001F4D6",
    "implementation": "\u26A1",
    "crossreference": "\U0001F517",
}


# Header line: > **<icon> <Label>:<title>**
# VS16 after the icon is optional; editors differ on emitting it.
def _header_pattern():
    alternatives = []
    for tag, label, titled in CALLOUT_CATEGORIES:
        title = r"(?P<title_%s>.*?)" % tag if titled else ""
        alternatives.append(
            r"(?P<%s>%s\ufe0f? %s:%s)" % (tag, re.escape(ICONS[tag]), re.escape(label), title)
        )
    return re.compile(r"^> \*\*(?:%s)\*\*$" % "|".join(alternatives))


HEADER_RE = _header_pattern()


@dataclass(frozen=True)
class CalloutBlock:
    category: str
    title: str
    body: str

    def render(self):
        return f"\n::: {self.category}\n**{self.title}**\n\n{self.body}\n:::"


def parse_header(line):
    """Return (category, title) for a callout header line, else None."""
    match = HEADER_RE.match(line)
    if not match:
        return None
    for tag, label, titled in CALLOUT_CATEGORIES:
        if match.group(tag) is not None:
            suffix = match.group(f"title_{tag}") if titled else ""
            return tag, f"{label}:{suffix}"
    return None


def _dequote(line):
    return re.sub(r"^> ?", "", line)


def restructure_callouts(text):
    """Rewrite every recognised callout blockquote into a fenced div."""
    lines = text.split("\n")
    out = []
    block = None  # (category, title, body lines) while inside a callout

    for line in lines:
        if block is not None:
            if line.startswith(">"):
                block[2].append(_dequote(line))
                continue
            out.append(_finish(block))
            block = None

        header = parse_header(line)
        if header:
            block = (header[0], header[1], [])
        else:
            out.append(line)

    if block is not None:
        out.append(_finish(block))

    return "\n".join(out)


def _finish(block):
    category, title, body = block
    return CalloutBlock(category, title, "\n".join(body).strip()).render()
