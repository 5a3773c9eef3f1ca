"""Lightweight view model wrapper around `Photo`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from core.models import Photo

DATE_FMT = "%Y-%m-%d %H:%M:%S"


@dataclass
class PhotoVM:
    """Expose convenient properties for bindings/templates."""

    record: Photo

    @property
    def file_name(self) -> str:
        """Base name of the file path."""
        return Path(self.record.file_path).name

    @property
    def folder_path(self) -> str:
        """Folder portion of the file path."""
        return str(Path(self.record.file_path).parent)

    @property
    def capture_text(self) -> str:
        """Capture date as text (empty when unknown)."""
        dt = self.record.capture_date
        return dt.strftime(DATE_FMT) if dt else ""

    @property
    def location_text(self) -> str:
        """Coordinate as text (empty when unknown)."""
        coord = self.record.coordinate
        return coord.format() if coord is not None else ""
