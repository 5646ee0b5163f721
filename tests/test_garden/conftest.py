"""Shared fixtures for garden unit tests."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest


def _write_note(root: Path, rel: str, content: str) -> Path:
    """Write ``<root>/<rel>.md`` (creating folders) with dedented *content*."""
    path = root / f"{rel}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture()
def vault_dir(tmp_path: Path) -> Path:
    """Small vault: root note, two folders, one duplicated filename."""
    root = tmp_path / "vault"
    root.mkdir()
    _write_note(root, "index", """\
        ---
        title: Home
        tags: [meta]
        ---
        Start at [[networking]] or [[guides/setup|the setup guide]].
    """)
    _write_note(root, "systems/networking", """\
        ---
        title: Networking
        tags: [systems/networking]
        ---
        Back to [[index]].
    """)
    _write_note(root, "guides/setup", """\
        ---
        tags: [guides]
        ---
        Read [[readme]] first.
    """)
    _write_note(root, "guides/readme", "Guide readme.\n")
    _write_note(root, "systems/readme", "Systems readme.\n")
    return root


@pytest.fixture()
def write_note():
    """Return the note-writing helper for tests that build their own vault."""
    return _write_note
