"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements deterministic tree walking for the trusted and unknown sides.
Features:
- Uses os.scandir with one listing per directory, sorted by the scan-order key
- Files before subfolders, then case-insensitive name, then case-sensitive name
- Optional subfolder recursion, hidden-file and zero-byte-file filters
- Skips symbolic links and a "boundary" path (the other side's root)
- Cooperative cancellation between every file and every directory
"""

import os
import time
import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from deldup.core.interfaces import ReportSink, TreeScanner
from deldup.core.models import DeletionStats
from deldup.services.file_service import FileService

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 1000  # report progress every N accepted files

_FOLDER_MESSAGES = {
    "trusted": "Scanning trusted folder",
    "unknown": "Checking unknown folder",
}


def scan_order_key(name: str, is_dir: bool) -> Tuple[int, str, str]:
    """Sort key: files before folders, then case-insensitive, then case-sensitive name."""
    return (1 if is_dir else 0, name.lower(), name)


class TreeScannerImpl(TreeScanner):
    """
    Walks one tree and calls `on_file(path, size)` for every accepted file, in
    scan order.

    Attributes:
        recurse_subfolders: Descend into subfolders (otherwise only the root listing)
        include_hidden: Visit hidden files and folders
        include_empty_files: Visit zero-byte files
        stopped_flag: Function that returns True when the walk must stop
    """

    def __init__(
        self,
        recurse_subfolders: bool = True,
        include_hidden: bool = False,
        include_empty_files: bool = False,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None,
        report: Optional[ReportSink] = None,
    ):
        self.recurse_subfolders = recurse_subfolders
        self.include_hidden = include_hidden
        self.include_empty_files = include_empty_files
        self.stopped_flag = stopped_flag
        self.progress_callback = progress_callback
        self.report = report
        self._accepted = 0

    def scan(
        self,
        root: Path,
        on_file: Callable[[Path, int], Optional[bool]],
        boundary: Optional[Path] = None,
        stats: Optional[DeletionStats] = None,
        label: str = "unknown",
    ) -> None:
        """
        Visit root (a folder or a single file). Returns quietly when cancelled.

        Args:
            root: Canonical path of the tree to walk
            on_file: Callback invoked with (path, size) for every accepted file
            boundary: Path never entered (the other side's root)
            stats: Counters for folders/files/bytes seen (unknown side only)
            label: "trusted" or "unknown", used in report lines
        """
        logger.debug(f"Starting {label} scan: {root}")
        self._accepted = 0
        start_time = time.time()

        if self._stopped():
            logger.debug("Scan cancelled before start")
            return

        if self._is_boundary(root, boundary):
            logger.debug(f"{root} - ignoring the other side's file/folder")
            return

        if root.is_dir() and not root.is_symlink():
            self._walk(root, on_file, boundary, stats, label)
        elif root.is_file():
            self._visit_file(root, on_file, stats)
        else:
            logger.debug(f"Ignoring {root}: neither a file nor a folder")

        if self.progress_callback and self._accepted:
            self.progress_callback("scanning", self._accepted, None)
        logger.debug(
            f"Finished {label} scan of {root}: {self._accepted} files "
            f"in {time.time() - start_time:.2f} seconds"
        )

    def _walk(
        self,
        root: Path,
        on_file: Callable[[Path, int], Optional[bool]],
        boundary: Optional[Path],
        stats: Optional[DeletionStats],
        label: str,
    ) -> None:
        # Explicit stack instead of recursion; subfolders are pushed in reverse so
        # they are entered in scan order, after all files of their parent.
        stack: List[Path] = [root]
        while stack:
            if self._stopped():
                logger.debug("Scan interrupted by user")
                return

            folder = stack.pop()
            if stats is not None:
                stats.add_unknown_folder()
            if self.report:
                self.report(f"{_FOLDER_MESSAGES.get(label, 'Scanning folder')} {folder}")

            subfolders: List[Path] = []
            for entry in self._list_directory(folder):
                if self._stopped():
                    logger.debug("Scan interrupted by user")
                    return

                path = Path(entry.path)
                try:
                    if entry.is_symlink():
                        logger.debug(f"Skipping symbolic link: {path}")
                        continue
                    is_dir = entry.is_dir(follow_symlinks=False)
                    is_file = entry.is_file(follow_symlinks=False)
                except OSError as e:
                    logger.debug(f"Could not check type of {path}: {e}")
                    continue

                if not self.include_hidden and FileService.is_hidden(path):
                    logger.debug(f"{path} - ignoring hidden file/folder")
                elif is_dir:
                    if self._is_boundary(path, boundary):
                        logger.debug(f"{path} - ignoring the other side's folder")
                    elif self.recurse_subfolders:
                        subfolders.append(path)
                    else:
                        logger.debug(f"{path} - ignoring subfolder")
                elif is_file:
                    if self._is_boundary(path, boundary):
                        logger.debug(f"{path} - ignoring the other side's file")
                        continue
                    try:
                        size = entry.stat(follow_symlinks=False).st_size
                    except OSError as e:
                        logger.debug(f"Could not get size of {path}: {e}")
                        continue
                    self._accept(path, size, on_file, stats)
                # anything else (sockets, devices, fifos) is silently ignored

            stack.extend(reversed(subfolders))

    def _visit_file(
        self,
        path: Path,
        on_file: Callable[[Path, int], Optional[bool]],
        stats: Optional[DeletionStats],
    ) -> None:
        try:
            size = path.stat().st_size
        except OSError as e:
            logger.debug(f"Could not get size of {path}: {e}")
            return
        self._accept(path, size, on_file, stats)

    def _accept(
        self,
        path: Path,
        size: int,
        on_file: Callable[[Path, int], Optional[bool]],
        stats: Optional[DeletionStats],
    ) -> None:
        if size == 0 and not self.include_empty_files:
            logger.debug(f"{path} - ignoring zero-byte empty file")
            return

        # A callback returning False was interrupted; the file is not counted
        if on_file(path, size) is False:
            return
        if stats is not None:
            stats.add_unknown_file(size)

        self._accepted += 1
        if self.progress_callback and self._accepted % PROGRESS_INTERVAL == 0:
            self.progress_callback("scanning", self._accepted, None)

    @staticmethod
    def _list_directory(folder: Path) -> List[os.DirEntry]:
        """One sorted listing per folder; unreadable folders list as empty."""
        try:
            with os.scandir(folder) as it:
                entries = list(it)
        except OSError as e:
            logger.debug(f"Cannot list {folder}: {e}")
            return []

        def key(entry: os.DirEntry) -> Tuple[int, str, str]:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            return scan_order_key(entry.name, is_dir)

        return sorted(entries, key=key)

    @staticmethod
    def _is_boundary(path: Path, boundary: Optional[Path]) -> bool:
        return boundary is not None and path == boundary

    def _stopped(self) -> bool:
        return bool(self.stopped_flag and self.stopped_flag())
