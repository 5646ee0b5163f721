"""Exception types raised by the garden library."""

from __future__ import annotations

from pathlib import Path


class GardenError(Exception):
    """Base class for every error raised by :mod:`garden`."""


class FrontmatterError(GardenError):
    """A note's YAML front-matter block could not be parsed into a mapping."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        prefix = f"{path}: " if path is not None else ""
        super().__init__(f"{prefix}{message}")


class VaultNotFoundError(GardenError):
    """The vault root passed to the scanner is not a directory."""

    def __init__(self, root: Path) -> None:
        self.root = root
        super().__init__(f"Vault directory not found: {root}")
