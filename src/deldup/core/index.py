"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/index.py
Size-bucketed index of entries. Two files are only ever compared by checksum when
they share a bucket, i.e. have exactly the same size.
"""

from typing import Dict, List

from deldup.core.models import Entry


class SizeIndex:
    """
    Mapping from file size to entries of that size, in insertion order.

    Trusted entries come first (in scan order), followed by unknown entries that
    proved unique. The bucket list handed out by bucket() is the live list owned
    by the index.
    """

    def __init__(self):
        self._buckets: Dict[int, List[Entry]] = {}
        self._count = 0

    def add(self, entry: Entry) -> None:
        """Appends an entry to the end of its size bucket."""
        self._buckets.setdefault(entry.size, []).append(entry)
        self._count += 1

    def bucket(self, size: int) -> List[Entry]:
        """Returns the live bucket for a size, creating an empty one if needed."""
        return self._buckets.setdefault(size, [])

    def __len__(self) -> int:
        return self._count

    def __repr__(self):
        return f"<SizeIndex sizes={len(self._buckets)}, entries={self._count}>"
