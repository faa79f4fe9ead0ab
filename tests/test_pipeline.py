import os

import pytest

from conftest import ROOT, FakeFilesystem, RecordingBuilder
from folio.errors import BackendFailure, MissingPrerequisite, ValidationFailure
from folio.pipeline import INTERMEDIATE_DIR, BookPipeline


def intermediate(name):
    return os.path.join(ROOT, INTERMEDIATE_DIR, name)


def make_pipeline(config, files, target="web", builder=None, fs=None):
    fs = fs or FakeFilesystem(files=files)
    builder = builder or RecordingBuilder()
    return BookPipeline(config, config.target(target), fs=fs, builder=builder), fs, builder


def test_files_rendered_in_book_order(config):
    files = {
        "ch2.md": "# Two\n",
        "ch1.md": "# One\n",
        "appB.md": "# Tools\n",
        "appA.md": "# Glossary\n",
        "foreword.md": "## **Foreword**\n",
    }
    pipeline, fs, builder = make_pipeline(config, files)

    output = pipeline.build()

    assert output.endswith("book.html")
    assert builder.rendered == [
        intermediate("foreword.md"),
        intermediate("ch1.md"),
        intermediate("ch2.md"),
        intermediate("appA.md"),
        intermediate("appB.md"),
    ]


def test_references_between_chapters_and_appendices(config):
    files = {
        "appA.md": "# Glossary\n",
        "references.md": "# References\n",
        "ch1.md": "# One\n",
        "notes.md": "# Not part of the book\n",
    }
    pipeline, fs, builder = make_pipeline(config, files)
    pipeline.build()

    assert [os.path.basename(p) for p in builder.rendered] == [
        "ch1.md", "references.md", "appA.md",
    ]


def test_passes_applied_to_intermediate_files(make_config):
    config = make_config(approved_emojis=["\U0001F4C1"])
    files = {
        "ch1.md": (
            "# Getting Started\n\n"
            "Read [the router]({REPO_BASE}/src/router.py).\n\n"
            "> **\U0001F4C1 Code Reference: router**\n"
            "> Entry point.\n"
        ),
        "appA.md": "# Glossary\n",
        "images/chapters/ch1.png": "png",
    }
    pipeline, fs, builder = make_pipeline(config, files, target="web")
    pipeline.build()

    chapter = fs.files[intermediate("ch1.md")]
    assert chapter.startswith("# Getting Started\n\n![](../assets/images/chapters/ch1.png)\n")
    assert "(https://example.com/repo/blob/main/src/router.py)" in chapter
    assert "::: codeReference\n**Code Reference: router**\n\nEntry point.\n:::" in chapter
    assert "{REPO_BASE}" not in chapter

    appendix = fs.files[intermediate("appA.md")]
    assert appendix == "\\appendix\n\n# Appendix A: Glossary\n"

    # Images copied into build/assets for the renderer
    assert fs.files[os.path.join(ROOT, "build/assets/images/chapters/ch1.png")] == "png"


def test_pdf_target_uses_root_relative_images(config):
    files = {"ch1.md": "# One\n", "images/chapters/ch1.png": "png"}
    pipeline, fs, builder = make_pipeline(config, files, target="print")
    pipeline.build()

    assert "![](build/assets/images/chapters/ch1.png)" in fs.files[intermediate("ch1.md")]


def test_emoji_violation_aborts_before_any_output(config):
    files = {
        "ch1.md": "# One\n\nShip it \U0001F4E6\n",
        "ch2.md": "# Two ✓\n",
    }
    pipeline, fs, builder = make_pipeline(config, files)

    with pytest.raises(ValidationFailure) as excinfo:
        pipeline.build()

    assert fs.writes == []
    assert builder.rendered is None
    [(path, occ)] = excinfo.value.violations
    assert path == "ch1.md"
    assert (occ.line, occ.column, occ.unicode) == (3, 9, "U+1F4E6")


def test_missing_prerequisite_aborts_before_reading(config):
    builder = RecordingBuilder(fail_prerequisites=MissingPrerequisite("pandoc not found on PATH"))
    pipeline, fs, _ = make_pipeline(config, {"ch1.md": "# One\n"}, builder=builder)

    with pytest.raises(MissingPrerequisite):
        pipeline.build()
    assert fs.reads == []
    assert builder.rendered is None


def test_backend_failure_surfaces_stderr(config):
    failure = BackendFailure("HTML generation", 64, "pandoc: Unknown option --bogus")
    builder = RecordingBuilder(fail_render=failure)
    pipeline, _, _ = make_pipeline(config, {"ch1.md": "# One\n"}, builder=builder)

    with pytest.raises(BackendFailure, match="Unknown option --bogus"):
        pipeline.build()


def test_filesystem_errors_propagate(config):
    class UnreadableFilesystem(FakeFilesystem):
        def read(self, path):
            raise PermissionError(path)

    fs = UnreadableFilesystem(files={"ch1.md": "# One\n"})
    pipeline, _, builder = make_pipeline(config, None, fs=fs)

    with pytest.raises(PermissionError):
        pipeline.build()
    assert builder.rendered is None


def test_clean_removes_stale_intermediate_files(config):
    files = {
        "ch1.md": "# One\n",
        os.path.join(INTERMEDIATE_DIR, "ch9.md"): "# Stale\n",
    }
    pipeline, fs, builder = make_pipeline(config, files)
    pipeline.build()

    assert intermediate("ch9.md") not in fs.files
    assert builder.rendered == [intermediate("ch1.md")]


def test_references_configured_as_subpath(make_config):
    config = make_config(source={"references": "back/references.md"})
    files = {"ch1.md": "# One\n", "back/references.md": "# References\n"}
    pipeline, fs, builder = make_pipeline(config, files)
    pipeline.build()

    assert builder.rendered == [intermediate("ch1.md"), intermediate("references.md")]
