"""
Heading rewrites for front matter and appendices.

Foreword headings become unnumbered; appendix titles gain an
"Appendix X: " prefix, and the first appendix is preceded by the LaTeX
\\appendix marker that switches numbering to letters.
"""

import re

from folio.roles import Appendix, Foreword


APPENDIX_MARKER = "\\appendix"

FOREWORD_TITLE = re.compile(r"^## \*\*Foreword\*\*$", re.MULTILINE)
FOREWORD_SECTION = re.compile(r"^## \*\*([^*]+)\*\*$", re.MULTILINE)
FOREWORD_SUBSECTION = re.compile(r"^### (.+)$", re.MULTILINE)


def rewrite_sections(role, text, log=None):
    """Apply the role's heading rules. Chapters and references pass through."""
    if isinstance(role, Foreword):
        return _rewrite_foreword(text)
    if isinstance(role, Appendix):
        return _rewrite_appendix(role.letter, text, log)
    return text


def _rewrite_foreword(text):
    text = FOREWORD_TITLE.sub("# Foreword {.unnumbered}", text, count=1)
    text = FOREWORD_SECTION.sub(r"## \1 {.unnumbered}", text)
    return FOREWORD_SUBSECTION.sub(r"## \1 {.unnumbered}", text)


def _rewrite_appendix(letter, text, log):
    lines = text.split("\n")

    title_index = next(
        (i for i, line in enumerate(lines) if line.startswith("# ")), None
    )
    if title_index is None:
        if log:
            log(f"  No title heading in appendix {letter}; headings left as-is")
        return text

    prefix = f"Appendix {letter}: "
    title = re.sub(r"^# +", "", lines[title_index])
    if not title.startswith(prefix):
        lines[title_index] = f"# {prefix}{title}"

    # Only the first appendix switches LaTeX into appendix numbering
    if letter == "A" and APPENDIX_MARKER not in (l.strip() for l in lines[:title_index]):
        lines[title_index:title_index] = [APPENDIX_MARKER, ""]

    return "\n".join(lines)
