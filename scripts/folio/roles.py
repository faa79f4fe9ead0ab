"""
Source file roles.

A role is derived once from the filename at discovery time and drives
which rewrite rules apply and where the file lands in the book.
"""

import fnmatch
import os
import re
from dataclasses import dataclass


CHAPTER_RE = re.compile(r"^ch(\d+)\.md$")
APPENDIX_RE = re.compile(r"^app([A-D])\.md$")
FOREWORD_GLOB = "foreword*.md"


@dataclass(frozen=True)
class Foreword:
    def sort_key(self):
        return (0, 0)

    def __str__(self):
        return "foreword"


@dataclass(frozen=True)
class Chapter:
    number: int

    def sort_key(self):
        return (1, self.number)

    def __str__(self):
        return f"chapter {self.number}"


@dataclass(frozen=True)
class References:
    def sort_key(self):
        return (2, 0)

    def __str__(self):
        return "references"


@dataclass(frozen=True)
class Appendix:
    letter: str

    def sort_key(self):
        return (3, ord(self.letter))

    def __str__(self):
        return f"appendix {self.letter}"


def classify(filename, references_name="references.md"):
    """
    Map a filename to its role, or None for files outside the book.

        foreword-faq.md → Foreword()
        ch12.md         → Chapter(12)
        references.md   → References()
        appB.md         → Appendix("B")
    """
    name = os.path.basename(filename)

    match = CHAPTER_RE.match(name)
    if match:
        return Chapter(int(match.group(1)))

    match = APPENDIX_RE.match(name)
    if match:
        return Appendix(match.group(1))

    if references_name and name == references_name:
        return References()

    if fnmatch.fnmatchcase(name, FOREWORD_GLOB):
        return Foreword()

    return None


def book_order(items, role=lambda item: item.role, name=lambda item: item.path):
    """
    Sort items into table-of-contents order: foreword, chapters by number,
    references, appendices by letter. Ties (several forewords) fall back
    to the filename.
    """
    return sorted(
        items,
        key=lambda item: (role(item).sort_key(), os.path.basename(name(item))),
    )
