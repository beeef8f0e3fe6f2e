#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

import dataclasses
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable, Dict, Generator, Iterator, Optional, TypeVar

from objcat.config import CatConfig
from objcat.const import DEFAULT_CHUNK_SIZE
from objcat.error_classifier import classify
from objcat.errors import CatError, FatalFetchFailure, TransientFetchFailure
from objcat.fetch.reorder_buffer import ReorderBuffer
from objcat.store.base import ObjectStore
from objcat.types import ByteRange, ObjectDescriptor, RangePlan
from objcat.utils import get_logger, natural_size

T = TypeVar("T")
logger = get_logger(__name__)


class ObjectStreamFetcher:
    """
    Reads one object at a time as an ordered byte stream.

    A sequential plan (one range, or a window of one) is streamed range by range, resuming from the last delivered
    byte after a transient failure. A parallel plan is fetched with up to `plan.concurrency` range requests
    outstanding; completed ranges wait in a `ReorderBuffer` until every earlier range has been yielded, so the
    output never depends on completion order.

    Args:
        store (ObjectStore): Storage capability, shared by all worker threads
        config (CatConfig): Part size, concurrency and retry policy
        chunk_size (int, optional): Chunk size for sequential streaming
    """

    def __init__(
        self,
        store: ObjectStore,
        config: CatConfig,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self._store = store
        self._config = config
        self._chunk_size = chunk_size

    @property
    def config(self) -> CatConfig:
        return self._config

    def describe(self, descriptor: ObjectDescriptor) -> ObjectDescriptor:
        """
        Fill in the size of a descriptor that was resolved without listing, checking that the object (and pinned
        version) exists. The version and entity tag reported by the lookup are kept on the descriptor so that every
        range reads the same revision of the object.

        Args:
            descriptor (ObjectDescriptor): Object to look up

        Returns:
            ObjectDescriptor: The same object with its size, version and entity tag set

        Raises:
            NotFound: The object does not exist
            VersionNotFound: The pinned version does not exist
            FatalFetchFailure: The lookup failed beyond the retry ceiling
        """
        if descriptor.size is not None:
            return descriptor
        attrs = self._with_retry(
            descriptor,
            lambda: self._store.head_object(
                descriptor.bucket, descriptor.key, descriptor.version_id
            ),
        )
        return dataclasses.replace(
            descriptor,
            size=attrs.size,
            version_id=descriptor.version_id or attrs.version_id or None,
            etag=attrs.etag or None,
        )

    def fetch(
        self, descriptor: ObjectDescriptor, plan: RangePlan
    ) -> Generator[bytes, None, None]:
        """
        Create an iterator over the object content, in order.

        Closing the iterator early cancels range requests that have not started and stops retries of the ones in
        flight; a request already on the wire is left to finish, as a blocked thread cannot be interrupted.

        Args:
            descriptor (ObjectDescriptor): Object to read
            plan (RangePlan): Ranges covering the whole object

        Yields:
            bytes: Consecutive pieces of the object's content

        Raises:
            NotFound: The object does not exist
            VersionNotFound: The pinned version does not exist
            FatalFetchFailure: A range could not be fetched within the retry ceiling
        """
        logger.debug(
            "Fetching %s (%s) in %d range(s) of up to %s, window %d",
            descriptor.url,
            natural_size(plan.object_size),
            len(plan.ranges),
            natural_size(plan.part_size),
            plan.concurrency,
        )
        if plan.is_sequential:
            for byte_range in plan.ranges:
                yield from self._stream_range(descriptor, byte_range)
            return
        yield from self._fetch_parallel(descriptor, plan)

    def _fetch_parallel(
        self, descriptor: ObjectDescriptor, plan: RangePlan
    ) -> Generator[bytes, None, None]:
        buffer = ReorderBuffer(plan.concurrency)
        pending: Dict[Future, ByteRange] = {}
        next_dispatch = 0
        cancelled = threading.Event()

        executor = ThreadPoolExecutor(
            max_workers=plan.concurrency, thread_name_prefix="objcat-range"
        )
        try:
            while True:
                # Keep in-flight plus buffered ranges within the window
                while (
                    next_dispatch < len(plan.ranges)
                    and len(pending) + len(buffer) < plan.concurrency
                ):
                    byte_range = plan.ranges[next_dispatch]
                    future = executor.submit(
                        self._fetch_range, descriptor, byte_range, cancelled
                    )
                    pending[future] = byte_range
                    next_dispatch += 1

                if not pending:
                    break

                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    byte_range = pending.pop(future)
                    buffer.put(byte_range.index, future.result())

                for data in buffer.drain():
                    yield data
        finally:
            # Running ranges make no further attempts; the ones not yet started are dropped
            cancelled.set()
            executor.shutdown(wait=False, cancel_futures=True)

        if buffer.next_index != len(plan.ranges):
            raise FatalFetchFailure(
                f"delivered {buffer.next_index} of {len(plan.ranges)} ranges of {descriptor.url}"
            )

    def _fetch_range(
        self,
        descriptor: ObjectDescriptor,
        byte_range: ByteRange,
        cancelled: threading.Event,
    ) -> bytes:
        def read_range():
            data = self._store.get_object_range(
                descriptor.bucket,
                descriptor.key,
                byte_range.start,
                byte_range.end,
                version_id=descriptor.version_id,
                etag=descriptor.etag,
            )
            if len(data) != byte_range.length:
                raise TransientFetchFailure(
                    f"short read of range {byte_range.index} of {descriptor.url}: "
                    f"expected {byte_range.length} bytes, got {len(data)}"
                )
            return data

        return self._with_retry(descriptor, read_range, cancelled)

    def _stream_range(
        self, descriptor: ObjectDescriptor, byte_range: ByteRange
    ) -> Generator[bytes, None, None]:
        stream = _ResumableRangeStream(
            self._store, descriptor, byte_range, self._chunk_size
        )
        try:
            while True:
                chunk = self._with_retry(descriptor, stream.read_next)
                if not chunk:
                    return
                yield chunk
        finally:
            stream.close()

    def _with_retry(
        self,
        descriptor: ObjectDescriptor,
        func: Callable[[], T],
        cancelled: Optional[threading.Event] = None,
    ) -> T:
        """
        Call `func`, classifying its failures and re-issuing it after transient ones until `cancelled` is set.
        """

        def attempt():
            if cancelled is not None and cancelled.is_set():
                raise FatalFetchFailure(f"fetch of {descriptor.url} was cancelled")
            try:
                return func()
            except CatError:
                raise
            except Exception as err:
                raise classify(
                    err,
                    bucket=descriptor.bucket,
                    key=descriptor.key,
                    version_id=descriptor.version_id,
                ) from err

        try:
            return self._config.retry_config.retrying()(attempt)
        except TransientFetchFailure as err:
            raise FatalFetchFailure(
                f"giving up on {descriptor.url} after {self._config.retry_config.max_attempts} attempts: "
                f"{err.message}"
            ) from err


class _ResumableRangeStream:
    """
    Sequential reader of one byte range that reopens the transport stream at the current offset after a failure.
    """

    def __init__(
        self,
        store: ObjectStore,
        descriptor: ObjectDescriptor,
        byte_range: ByteRange,
        chunk_size: int,
    ):
        self._store = store
        self._descriptor = descriptor
        self._offset = byte_range.start
        self._end = byte_range.end
        self._chunk_size = chunk_size
        self._iter: Optional[Iterator[bytes]] = None

    def read_next(self) -> bytes:
        """
        Read the next chunk, or b"" once the whole range was read.
        """
        if self._offset >= self._end:
            return b""
        if self._iter is None:
            self._iter = iter(
                self._store.open_object_range(
                    self._descriptor.bucket,
                    self._descriptor.key,
                    self._offset,
                    self._end,
                    version_id=self._descriptor.version_id,
                    etag=self._descriptor.etag,
                    chunk_size=self._chunk_size,
                )
            )
        try:
            chunk = next(self._iter)
        except StopIteration:
            self.close()
            raise TransientFetchFailure(
                f"stream of {self._descriptor.url} ended at byte {self._offset} of {self._end}"
            ) from None
        except BaseException:
            self.close()
            raise
        chunk = chunk[: self._end - self._offset]
        self._offset += len(chunk)
        return chunk

    def close(self):
        if self._iter is not None:
            close = getattr(self._iter, "close", None)
            self._iter = None
            if close:
                close()
