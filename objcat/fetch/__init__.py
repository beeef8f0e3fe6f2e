#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

"""
Ordered object readers.

This package fetches one object's content either as a single resumable stream or as concurrent range reads
reassembled in order through a bounded reorder buffer.
"""

from objcat.fetch.reorder_buffer import ReorderBuffer
from objcat.fetch.fetcher import ObjectStreamFetcher

__all__ = [
    "ReorderBuffer",
    "ObjectStreamFetcher",
]
