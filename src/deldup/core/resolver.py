"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/resolver.py
First-match lookup of unknown entries in the size index.

Checksums are computed only when a bucket already holds something to compare
against, and each entry is hashed at most once. The earliest-inserted entry with
an equal checksum wins; entries that prove unique are appended to their bucket
and become match targets for later unknown files.
"""

import logging

from deldup.core.index import SizeIndex
from deldup.core.interfaces import ChecksumComputer, MatchResolver
from deldup.core.models import Entry, MatchResult

logger = logging.getLogger(__name__)


class MatchResolverImpl(MatchResolver):
    """
    Resolves unknown entries against a SizeIndex using an injected ChecksumComputer.
    """

    def __init__(self, index: SizeIndex, checksums: ChecksumComputer):
        self.index = index
        self.checksums = checksums

    def resolve(self, entry: Entry) -> MatchResult:
        bucket = self.index.bucket(entry.size)

        # Nothing of this size yet: no checksum needed
        if not bucket:
            self.index.add(entry)
            return MatchResult(candidate=entry)

        candidate_sum = self.checksums.ensure(entry)
        if candidate_sum.is_cancelled:
            return MatchResult(candidate=entry, cancelled=True)

        for prior in bucket:
            prior_sum = self.checksums.ensure(prior)
            if prior_sum.is_cancelled:
                return MatchResult(candidate=entry, cancelled=True)
            if candidate_sum.matches(prior_sum):
                logger.debug(f"{entry.path} matches {prior.path}")
                return MatchResult(candidate=entry, matched=prior)

        self.index.add(entry)
        return MatchResult(candidate=entry)
