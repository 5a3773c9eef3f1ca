"""Recursive directory walking for photo scans."""

from __future__ import annotations

from collections.abc import Iterator
import os
from pathlib import Path

from loguru import logger


class ScanError(Exception):
    """Raised when a scan root cannot be walked."""


class FileScanner:
    """`DirectoryWalker` yielding every regular file under a root, lazily.

    Entries are sorted per directory so repeated scans produce the same order.
    """

    def __init__(self, follow_symlinks: bool = False) -> None:
        self._follow_symlinks = follow_symlinks

    def walk(self, root: str) -> Iterator[str]:
        """Yield file paths under `root`.

        Raises:
            ScanError: If `root` is not an existing directory.
        """
        base = Path(root)
        if not base.is_dir():
            raise ScanError(f"Not a directory: {root}")
        return self._iter(base)

    def _iter(self, base: Path) -> Iterator[str]:
        def on_error(ex: OSError) -> None:
            logger.warning("Skipping unreadable path {}: {}", ex.filename, ex)

        for dirpath, dirnames, filenames in os.walk(
            base, onerror=on_error, followlinks=self._follow_symlinks
        ):
            dirnames.sort()
            for name in sorted(filenames):
                yield os.path.join(dirpath, name)
