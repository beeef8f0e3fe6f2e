#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from abc import ABC, abstractmethod
from typing import Iterator, Optional

from objcat.const import DEFAULT_CHUNK_SIZE
from objcat.types import ListedObject, ObjectAttributes


class ObjectStore(ABC):
    """
    Storage capability used to resolve and read objects.

    Implementations share one connection pool across all calls and must be safe to call from several threads at
    once. Failures are raised as the transport's own exceptions (or as an already classified `CatError`) and are
    mapped to the error taxonomy by the caller.
    """

    @abstractmethod
    def head_object(
        self, bucket: str, key: str, version_id: Optional[str] = None
    ) -> ObjectAttributes:
        """
        Fetch object metadata without its content.

        Args:
            bucket (str): Bucket name
            key (str): Object key
            version_id (str, optional): Specific object version

        Returns:
            ObjectAttributes: Size, version and entity tag of the object
        """

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    @abstractmethod
    def get_object_range(
        self,
        bucket: str,
        key: str,
        start: int,
        end: int,
        version_id: Optional[str] = None,
        etag: Optional[str] = None,
    ) -> bytes:
        """
        Fetch a specific byte range of an object.

        Args:
            bucket (str): Bucket name
            key (str): Object key
            start (int): Start byte offset (inclusive)
            end (int): End byte offset (exclusive)
            version_id (str, optional): Specific object version
            etag (str, optional): Entity tag the object must still have; the read fails if it changed

        Returns:
            bytes: Exactly `end - start` bytes of content
        """

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def open_object_range(
        self,
        bucket: str,
        key: str,
        start: int,
        end: int,
        version_id: Optional[str] = None,
        etag: Optional[str] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> Iterator[bytes]:
        """
        Stream a byte range of an object in chunks of at most `chunk_size` bytes.

        The default issues one `get_object_range` call per chunk; transports with a native streaming read
        override it. Closing the returned iterator releases the underlying connection.

        Args:
            bucket (str): Bucket name
            key (str): Object key
            start (int): Start byte offset (inclusive)
            end (int): End byte offset (exclusive)
            version_id (str, optional): Specific object version
            etag (str, optional): Entity tag the object must still have
            chunk_size (int, optional): Maximum size of each yielded chunk

        Yields:
            bytes: Consecutive chunks of the range
        """
        for offset in range(start, end, chunk_size):
            yield self.get_object_range(
                bucket,
                key,
                offset,
                min(offset + chunk_size, end),
                version_id=version_id,
                etag=etag,
            )

    @abstractmethod
    def list_objects(self, bucket: str, prefix: str = "") -> Iterator[ListedObject]:
        """
        List every object whose key starts with `prefix`, in no particular order.

        Args:
            bucket (str): Bucket name
            prefix (str, optional): Key prefix

        Returns:
            Iterator[ListedObject]: Listed objects with their sizes, versions and entity tags where known
        """

    def close(self):
        """Release pooled connections."""
