import importlib.util
import os

import pytest


BUILD_SCRIPT = os.path.join(os.path.dirname(__file__), "..", "scripts", "build.py")


@pytest.fixture(scope="module")
def build_cli():
    spec = importlib.util.spec_from_file_location("folio_build_cli", BUILD_SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def book(tmp_path):
    (tmp_path / "book.yaml").write_text(
        "title: The Test Book\n"
        "author: A. Writer\n"
        "repository:\n"
        "  base_url: https://example.com/repo/blob/main\n",
        encoding="utf-8",
    )
    (tmp_path / "ch1.md").write_text("# One\n\nSee [main]({REPO_BASE}/src/main.py).\n", encoding="utf-8")
    return tmp_path


def run(cli, argv):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    return excinfo.value.code


def test_lint_clean_book(build_cli, book, capsys):
    assert run(build_cli, ["lint", str(book), "--no-color"]) == 0
    assert "Files checked: 1" in capsys.readouterr().out


def test_lint_flags_unapproved_emoji(build_cli, book, capsys):
    (book / "ch2.md").write_text("# Two \U0001F4E6\n", encoding="utf-8")
    assert run(build_cli, ["lint", str(book), "--no-color"]) == 1
    assert "U+1F4E6" in capsys.readouterr().out


def test_build_stops_at_emoji_gate(build_cli, book, capsys, monkeypatch):
    monkeypatch.setattr("folio.builders.base.shutil.which", lambda name, path=None: "/usr/bin/" + name)
    (book / "ch2.md").write_text("# Two \U0001F4E6\n", encoding="utf-8")

    assert run(build_cli, ["build", str(book), "--target", "web"]) == 1

    out = capsys.readouterr().out
    assert "EMOJI VALIDATION FAILED" in out
    assert "ch2.md:1:7" in out
    assert not (book / "build" / "intermediate").exists()


def test_build_reports_missing_pandoc(build_cli, book, capsys, monkeypatch):
    monkeypatch.setattr("folio.builders.base.shutil.which", lambda name, path=None: None)

    assert run(build_cli, ["--target", "web", str(book)]) == 1
    assert "pandoc not found on PATH" in capsys.readouterr().out


def test_unknown_target(build_cli, book, capsys):
    assert run(build_cli, ["build", str(book), "--target", "slides"]) == 1
    assert "Unknown target 'slides'" in capsys.readouterr().out


def test_missing_book_yaml(build_cli, tmp_path, capsys):
    assert run(build_cli, ["lint", str(tmp_path)]) == 1
    assert "No book.yaml found" in capsys.readouterr().out


def test_links_reports_missing_repository_file(build_cli, book, capsys):
    assert run(build_cli, ["links", str(book)]) == 1
    assert "Repository file not found" in capsys.readouterr().out

    (book / "src").mkdir()
    (book / "src" / "main.py").write_text("", encoding="utf-8")
    assert run(build_cli, ["links", str(book)]) == 0


def test_clean_removes_build_dir(build_cli, book, capsys):
    (book / "build" / "web").mkdir(parents=True)
    build_cli.main(["clean", str(book)])
    assert not (book / "build").exists()
    assert "Removed build directory" in capsys.readouterr().out


def test_build_reports_undecodable_source(build_cli, book, capsys, monkeypatch):
    monkeypatch.setattr("folio.builders.base.shutil.which", lambda name, path=None: "/usr/bin/" + name)
    (book / "ch2.md").write_bytes(b"# Two\n\n\xff\xfe broken\n")

    assert run(build_cli, ["build", str(book), "--target", "web"]) == 1

    out = capsys.readouterr().out
    assert "Build failed:" in out
    assert "utf-8" in out
