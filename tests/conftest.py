"""Shared fixtures: a small book source tree on disk."""

from pathlib import Path

import pytest

from bookbuild.domain import BookManifest, BookProject, ExercisesRepo


MANIFEST_YAML = """---
# Used by Pandoc to print covers:
title: Essential Play
author: "Dave Gurnell and Noel Welsh"
date: "Version 1.0, April 2015"
coverColor: "A0C556"
filenameStem: "essential-play"
exercises:
  repo: "git@github.com:underscoreio/essential-play-code.git"
  name: "essential-play-code"
tocDepth: 2
pages:
  - src/pages/intro/index.md
  - src/pages/basics/index.md
  - src/pages/basics/routes.md
  - src/pages/links.md
  - src/pages/solutions.md
previewPages:
  - src/pages/preview/prologue.md
  - src/pages/intro/index.md
  - src/pages/basics/index.md
  - src/pages/solutions.md
...
"""

PAGES = {
    "src/pages/intro/index.md": "# Introduction {#intro}\n\nWelcome to the book.\n",
    "src/pages/basics/index.md": (
        "# The Basics\n\n"
        "## Actions\n\n"
        "An action handles a request.\n\n"
        "### Action Builders\n\n"
        "Deeper detail.\n"
    ),
    "src/pages/basics/routes.md": (
        "## Routes\n\n"
        "```scala\n"
        "# not a heading\n"
        "GET /hello controllers.Hello.index\n"
        "```\n\n"
        "![Routing diagram](src/images/routes.png)\n"
    ),
    "src/pages/links.md": "# Links\n\nSee the docs.\n",
    "src/pages/solutions.md": "# Solutions {.unnumbered}\n\nAnswers.\n",
    "src/pages/preview/prologue.md": "# Prologue\n\nThis is a preview.\n",
}


def write_book(root: Path, manifest: str = MANIFEST_YAML, pages: dict | None = None) -> Path:
    """Write a book source tree under root."""
    (root / "src" / "meta").mkdir(parents=True, exist_ok=True)
    (root / "src" / "meta" / "metadata.yaml").write_text(manifest, encoding="utf-8")

    for rel, content in (PAGES if pages is None else pages).items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    (root / "src" / "images").mkdir(parents=True, exist_ok=True)
    (root / "src" / "images" / "routes.png").write_bytes(b"\x89PNG")
    return root


@pytest.fixture
def make_book(tmp_path):
    """Factory writing a book tree with custom manifest or pages."""

    def _make(name: str = "custom", manifest: str = MANIFEST_YAML, pages: dict | None = None) -> Path:
        return write_book(tmp_path / name, manifest, pages)

    return _make


@pytest.fixture
def book_root(tmp_path) -> Path:
    """A complete, valid book source tree."""
    return write_book(tmp_path / "book")


@pytest.fixture
def manifest() -> BookManifest:
    """The manifest matching the book_root fixture."""
    return BookManifest(
        title="Essential Play",
        author="Dave Gurnell and Noel Welsh",
        date="Version 1.0, April 2015",
        cover_color="A0C556",
        filename_stem="essential-play",
        exercises=ExercisesRepo(
            repo="git@github.com:underscoreio/essential-play-code.git",
            name="essential-play-code",
        ),
        toc_depth=2,
        pages=[
            "src/pages/intro/index.md",
            "src/pages/basics/index.md",
            "src/pages/basics/routes.md",
            "src/pages/links.md",
            "src/pages/solutions.md",
        ],
        preview_pages=[
            "src/pages/preview/prologue.md",
            "src/pages/intro/index.md",
            "src/pages/basics/index.md",
            "src/pages/solutions.md",
        ],
    )


@pytest.fixture
def project(book_root, manifest) -> BookProject:
    """A BookProject over the book_root fixture."""
    manifest.source_path = book_root / "src" / "meta" / "metadata.yaml"
    return BookProject(root=book_root, manifest=manifest)
