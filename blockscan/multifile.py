"""A logical bit range split across several files."""

from __future__ import annotations

from dataclasses import dataclass, field

from .utils import file_delete

__all__ = ["SingleFileInfo", "Multifile"]


@dataclass(frozen=True)
class SingleFileInfo:
    """One file covering the index range [beg, end)."""

    beg: int
    end: int
    filename: str


@dataclass
class Multifile:
    """Collection of files, each covering a range of a common index space.

    The files are owned by the collection: :meth:`delete_files` (or leaving
    a ``with`` block) removes them from disk.
    """

    files_info: list[SingleFileInfo] = field(default_factory=list)

    def add_file(self, beg: int, end: int, filename: str) -> None:
        self.files_info.append(SingleFileInfo(beg, end, filename))

    def delete_files(self) -> None:
        """Delete every file from disk and forget them."""
        files, self.files_info = self.files_info, []
        for info in files:
            file_delete(info.filename)

    def __enter__(self) -> "Multifile":
        return self

    def __exit__(self, *args) -> None:
        self.delete_files()