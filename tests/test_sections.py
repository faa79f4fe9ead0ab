from folio.roles import Appendix, Chapter, Foreword, References
from folio.transforms.sections import APPENDIX_MARKER, rewrite_sections


def test_foreword_headings_become_unnumbered():
    text = (
        "## **Foreword**\n\nIntro.\n\n"
        "## **Why this book**\n\nMore.\n\n"
        "### Who should read\n"
    )
    assert rewrite_sections(Foreword(), text) == (
        "# Foreword {.unnumbered}\n\nIntro.\n\n"
        "## Why this book {.unnumbered}\n\nMore.\n\n"
        "## Who should read {.unnumbered}\n"
    )


def test_foreword_only_rewrites_line_start_headings():
    text = "See the ## **Foreword** note and ### inline.\n"
    assert rewrite_sections(Foreword(), text) == text


def test_first_appendix_gets_marker_and_prefix():
    text = "# Glossary\n\nTerms.\n"
    assert rewrite_sections(Appendix("A"), text) == (
        "\\appendix\n\n# Appendix A: Glossary\n\nTerms.\n"
    )


def test_later_appendix_gets_prefix_only():
    text = "Preamble\n#  Tooling\n"
    assert rewrite_sections(Appendix("C"), text) == "Preamble\n# Appendix C: Tooling\n"


def test_appendix_rewrite_is_idempotent():
    text = "# Glossary\n\nTerms.\n"
    once = rewrite_sections(Appendix("A"), text)
    assert rewrite_sections(Appendix("A"), once) == once
    assert once.count("Appendix A:") == 1


def test_marker_emitted_once_across_all_appendices():
    outputs = [
        rewrite_sections(Appendix(letter), f"# Title {letter}\n")
        for letter in "ABCD"
    ]
    book = "\n".join(outputs)

    assert book.count(APPENDIX_MARKER) == 1
    assert book.index(APPENDIX_MARKER) < book.index("# Appendix A: Title A")
    for text in outputs[1:]:
        assert APPENDIX_MARKER not in text


def test_appendix_without_heading_is_noop():
    messages = []
    text = "No heading here.\n## Only level two\n"
    assert rewrite_sections(Appendix("A"), text, log=messages.append) == text
    assert messages


def test_chapters_and_references_pass_through():
    text = "## **Foreword**\n# Title\n### Sub\n"
    assert rewrite_sections(Chapter(1), text) == text
    assert rewrite_sections(References(), text) == text
