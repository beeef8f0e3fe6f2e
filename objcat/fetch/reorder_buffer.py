#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from typing import Dict, Iterator


class ReorderBuffer:
    """
    Fixed-capacity holding area for ranges that completed ahead of the range the output is waiting for.

    Entries are keyed by range index and released strictly in index order by `drain`, which advances the delivery
    cursor. Nothing is kept once it has been released.

    Args:
        capacity (int): Maximum number of completed-but-undelivered ranges held at once
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._entries: Dict[int, bytes] = {}
        self._next_index = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def next_index(self) -> int:
        """Index of the range the output is waiting for (the delivery cursor)."""
        return self._next_index

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, index: int) -> bool:
        return index in self._entries

    def put(self, index: int, data: bytes):
        """
        Store the bytes of a completed range.

        Args:
            index (int): Range index
            data (bytes): Range content

        Raises:
            ValueError: If the range was already delivered or stored, or the buffer is full
        """
        if index < self._next_index or index in self._entries:
            raise ValueError(f"Range {index} was already received")
        if len(self._entries) >= self._capacity:
            raise ValueError(
                f"Reorder buffer is full ({self._capacity} ranges) while waiting for range {self._next_index}"
            )
        self._entries[index] = data

    def drain(self) -> Iterator[bytes]:
        """
        Release every range that is next in order, advancing the delivery cursor past each one.

        Yields:
            bytes: Range contents, in index order
        """
        while self._next_index in self._entries:
            data = self._entries.pop(self._next_index)
            self._next_index += 1
            yield data
