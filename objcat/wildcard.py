#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

"""
Glob matching of object keys.

Keys live in a flat namespace where "/" is only a naming convention, so the matcher decides how wildcards treat it:

    *    any run of characters except "/"
    ?    exactly one character except "/"
    **   any run of characters, "/" included

Every other character matches itself.
"""

import re
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Pattern

from objcat.const import PATH_SEPARATOR, WILDCARD_ANY, WILDCARD_CHARS, WILDCARD_ONE

_RECURSIVE = WILDCARD_ANY * 2


def has_wildcard(value: str) -> bool:
    """
    Check whether a string contains any wildcard character
    """
    return any(char in value for char in WILDCARD_CHARS)


def literal_prefix(pattern: str) -> str:
    """
    Return the longest leading part of a pattern that holds no wildcard, i.e. the prefix every match starts with

    Args:
        pattern (str): Glob pattern, e.g. "dir/log-2024-*"

    Returns:
        Literal prefix, e.g. "dir/log-2024-"
    """
    for idx, char in enumerate(pattern):
        if char in WILDCARD_CHARS:
            return pattern[:idx]
    return pattern


class WildcardMatcher(ABC):
    """
    Predicate deciding whether a key matches a glob pattern. Implementations are pure and never raise.
    """

    @abstractmethod
    def matches(self, pattern: str, key: str) -> bool:
        """
        Args:
            pattern (str): Glob pattern relative to the bucket
            key (str): Candidate object key

        Returns:
            True if `key` matches `pattern` in full
        """


class GlobMatcher(WildcardMatcher):
    """
    Default matcher: `*` and `?` stay within one path segment, `**` crosses segments.
    """

    def matches(self, pattern: str, key: str) -> bool:
        return _compile(pattern).fullmatch(key) is not None


@lru_cache(maxsize=128)
def _compile(pattern: str) -> Pattern:
    segment_char = f"[^{re.escape(PATH_SEPARATOR)}]"
    parts = []
    idx = 0
    while idx < len(pattern):
        if pattern.startswith(_RECURSIVE, idx):
            parts.append(".*")
            # collapse "***" and longer runs
            while idx < len(pattern) and pattern[idx] == WILDCARD_ANY:
                idx += 1
            continue
        char = pattern[idx]
        if char == WILDCARD_ANY:
            parts.append(f"{segment_char}*")
        elif char == WILDCARD_ONE:
            parts.append(segment_char)
        else:
            parts.append(re.escape(char))
        idx += 1
    return re.compile("".join(parts), re.DOTALL)
