#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

import msgspec
from pydantic import BaseModel

from objcat.provider import Provider


@dataclass(frozen=True)
class Target:
    """
    Raw user request before resolution.

    Args:
        path_spec (str): Path expression as typed by the user, e.g. "s3://bucket/dir/log-*"
        version_id (str, optional): Version to read; only valid when the path names exactly one object
    """

    path_spec: str
    version_id: Optional[str] = None


@dataclass(frozen=True)
class ObjectDescriptor:
    """
    Resolved identity of one retrievable object version.

    `size` is None when the object was named directly and has not been looked up yet. `version_id` is either the
    version the user asked for or the one observed when the object was listed or looked up; `etag` is the entity
    tag observed at the same time. Every range request is conditioned on both, so an object overwritten while it
    is being read fails instead of mixing two versions.
    """

    provider: Provider
    bucket: str
    key: str
    version_id: Optional[str] = None
    size: Optional[int] = None
    etag: Optional[str] = None

    @property
    def url(self) -> str:
        return f"{self.provider.scheme}://{self.bucket}/{self.key}"


@dataclass(frozen=True)
class ByteRange:
    """
    Half-open byte span `[start, end)` of an object, the unit of parallel fetch.
    """

    index: int
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class RangePlan:
    """
    Ordered ranges covering `[0, object_size)` plus the fetch window used to schedule them.
    """

    object_size: int
    part_size: int
    concurrency: int
    ranges: Tuple[ByteRange, ...] = field(default_factory=tuple)

    @property
    def is_sequential(self) -> bool:
        return len(self.ranges) <= 1 or self.concurrency == 1


@dataclass(frozen=True)
class ObjectAttributes:
    """
    Object metadata returned by a HEAD request.
    """

    size: int
    version_id: str = ""
    etag: str = ""


@dataclass(frozen=True)
class ListedObject:
    """
    One entry returned by a listing call.
    """

    key: str
    size: int
    version_id: str = ""
    etag: str = ""


class ActionMsg(BaseModel):
    """
    Represents the action message passed by the client via json
    """

    action: str
    name: str = ""
    value: Any = None


class ListObjectsMsg(BaseModel):
    """
    API message structure for listing objects in a bucket
    """

    prefix: str
    page_size: int
    uuid: str
    props: str
    continuation_token: str

    def as_dict(self):
        return {
            "prefix": self.prefix,
            "pagesize": self.page_size,
            "uuid": self.uuid,
            "props": self.props,
            "continuation_token": self.continuation_token,
        }


class BucketEntry(msgspec.Struct):
    """
    Represents a single entry in a bucket -- an object
    See cmn/objlist.go/LsoEntry
    """

    n: str
    v: str = ""
    s: int = 0
    f: int = 0

    @property
    def name(self):
        return self.n

    @property
    def version(self):
        return self.v

    @property
    def size(self):
        return self.s


class BucketList(msgspec.Struct):
    """
    Represents the response when getting a list of bucket items, containing a list of BucketEntry objects
    """

    UUID: str
    ContinuationToken: str
    Flags: int = 0
    Entries: Optional[List[BucketEntry]] = None

    @property
    def uuid(self):
        return self.UUID

    @property
    def continuation_token(self):
        return self.ContinuationToken

    @property
    def entries(self):
        return [] if self.Entries is None else self.Entries
