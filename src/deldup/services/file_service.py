"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Cross-platform file attribute queries and permanent deletion.
Hidden and read-only detection follow platform conventions on Windows, macOS and Linux.
"""
import os
import stat
import sys
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]

# Windows attribute bits (st_file_attributes exists only on Windows)
_WIN_HIDDEN = getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0x2)
_WIN_READONLY = getattr(stat, "FILE_ATTRIBUTE_READONLY", 0x1)
# macOS chflags(1) "hidden" flag
_MAC_HIDDEN = getattr(stat, "UF_HIDDEN", 0x8000)


class FileService:
    """
    Cross-platform file operations used by the scanner and the deletion gate.
    """

    @staticmethod
    def is_hidden(file_path: PathLike) -> bool:
        """True for dot-files everywhere, plus platform hidden attributes."""
        path = Path(file_path)
        if path.name.startswith("."):
            return True

        try:
            st = path.lstat()
        except OSError:
            return False

        if sys.platform == "win32":
            return bool(getattr(st, "st_file_attributes", 0) & _WIN_HIDDEN)
        if sys.platform == "darwin":
            return bool(getattr(st, "st_flags", 0) & _MAC_HIDDEN)
        return False

    @staticmethod
    def exists(file_path: PathLike) -> bool:
        """True if the path is present, including dangling symlinks."""
        return os.path.lexists(file_path)

    @staticmethod
    def is_readonly(file_path: PathLike) -> bool:
        """True if the current user cannot write to an existing file."""
        path = Path(file_path)
        if not FileService.exists(path):
            return False
        if sys.platform == "win32":
            try:
                attributes = getattr(path.lstat(), "st_file_attributes", 0)
            except OSError:
                return False
            if attributes & _WIN_READONLY:
                return True
        return not os.access(path, os.W_OK)

    @staticmethod
    def modified_time(file_path: PathLike) -> float:
        """Last modification time as a Unix timestamp, 0.0 if unavailable."""
        try:
            return Path(file_path).stat().st_mtime
        except OSError:
            return 0.0

    @staticmethod
    def delete_file(file_path: PathLike) -> None:
        """
        Permanently removes a file. There is no trash and no undo.
        Raises OSError if the file cannot be removed.
        """
        path = Path(file_path)
        if path.is_dir() and not path.is_symlink():
            raise IsADirectoryError(f"Refusing to delete a folder: {path}")
        os.remove(path)
