#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from typing import BinaryIO, Optional

from objcat.config import CatConfig
from objcat.fetch import ObjectStreamFetcher
from objcat.range_planner import plan_ranges
from objcat.resolver import TargetResolver
from objcat.store.base import ObjectStore
from objcat.types import ObjectDescriptor, Target
from objcat.utils import get_logger, natural_size

logger = get_logger(__name__)


class ConcatPipeline:
    """
    Writes the content of every object a target resolves to, in ascending key order, to a single sink.

    Objects are read one after another; concurrency applies only to the ranges of the object being read, so at most
    one object's reorder buffer is held at a time.

    Args:
        store (ObjectStore): Storage capability shared by the resolver and fetcher
        config (CatConfig, optional): Part size, concurrency and retry policy. Defaults to CatConfig().
        resolver (TargetResolver, optional): Resolver to use instead of one built from `store` and `config`
        fetcher (ObjectStreamFetcher, optional): Fetcher to use instead of one built from `store` and `config`
    """

    def __init__(
        self,
        store: ObjectStore,
        config: Optional[CatConfig] = None,
        resolver: Optional[TargetResolver] = None,
        fetcher: Optional[ObjectStreamFetcher] = None,
    ):
        self._config = config or CatConfig()
        self._resolver = resolver or TargetResolver(
            store, retry_config=self._config.retry_config
        )
        self._fetcher = fetcher or ObjectStreamFetcher(store, self._config)

    @property
    def config(self) -> CatConfig:
        return self._config

    def run(self, target: Target, sink: BinaryIO) -> int:
        """
        Resolve `target` once and copy each resolved object to `sink`.

        The first error stops the run. Bytes already written, including earlier ranges of the failing object, are
        left in the sink. An `OSError` raised by `sink.write` (e.g. a closed pipe) is re-raised as is, after
        in-flight range requests for the current object have been cancelled.

        Args:
            target (Target): Path expression and optional version
            sink (BinaryIO): Writable binary stream

        Returns:
            int: Total number of bytes written

        Raises:
            CatError: The classified error that stopped the run
            OSError: The sink stopped accepting data
        """
        descriptors = self._resolver.resolve(target)
        written = 0
        for descriptor in descriptors:
            written += self._copy_object(descriptor, sink)
        logger.debug(
            "Wrote %d object(s), %s total", len(descriptors), natural_size(written)
        )
        return written

    def _copy_object(self, descriptor: ObjectDescriptor, sink: BinaryIO) -> int:
        descriptor = self._fetcher.describe(descriptor)
        plan = plan_ranges(
            descriptor.size, self._config.part_size, self._config.concurrency
        )
        stream = self._fetcher.fetch(descriptor, plan)
        written = 0
        try:
            for chunk in stream:
                sink.write(chunk)
                written += len(chunk)
        finally:
            # Cancels outstanding range requests if we stopped early
            stream.close()
        return written
