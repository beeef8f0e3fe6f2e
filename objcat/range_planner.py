#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from objcat.types import ByteRange, RangePlan


def plan_ranges(object_size: int, part_size: int, concurrency: int) -> RangePlan:
    """
    Split an object into contiguous byte ranges of `part_size` bytes (the last one may be shorter).

    A zero-size object gets no ranges; an object no larger than `part_size`, or a `concurrency` of 1, is fetched
    in a single range. `concurrency` is carried as the fetch window and does not change how the object is split
    otherwise.

    Args:
        object_size (int): Total object size in bytes
        part_size (int): Maximum bytes per range
        concurrency (int): In-flight window size for the fetcher

    Returns:
        RangePlan: Ranges ordered by index, which is also ascending start offset

    Raises:
        ValueError: If `part_size` or `concurrency` is not positive, or `object_size` is negative
    """
    if part_size <= 0:
        raise ValueError(f"part_size must be positive, got {part_size}")
    if concurrency <= 0:
        raise ValueError(f"concurrency must be positive, got {concurrency}")
    if object_size < 0:
        raise ValueError(f"object_size must not be negative, got {object_size}")

    if object_size == 0:
        ranges = ()
    elif object_size <= part_size or concurrency == 1:
        ranges = (ByteRange(index=0, start=0, end=object_size),)
    else:
        ranges = tuple(
            ByteRange(index=index, start=start, end=min(start + part_size, object_size))
            for index, start in enumerate(range(0, object_size, part_size))
        )
    return RangePlan(
        object_size=object_size,
        part_size=part_size,
        concurrency=concurrency,
        ranges=ranges,
    )
